"""leakview test configuration and fixtures."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable

import pytest

# Add src to path for imports
SRC_DIR = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(SRC_DIR))

from leakview.trace.leak_trace import (  # noqa: E402
    LeakReference,
    LeakStatus,
    LeakTrace,
    LeakTraceElement,
    ReferenceType,
)


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the fixtures directory path."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def activity_leak_path(fixtures_dir: Path) -> Path:
    """Return the path to activity_leak.json."""
    return fixtures_dir / "activity_leak.json"


@pytest.fixture
def leak_group_path(fixtures_dir: Path) -> Path:
    """Return the path to leak_group.yaml."""
    return fixtures_dir / "leak_group.yaml"


def trace_of(*statuses: LeakStatus) -> LeakTrace:
    """Build a trace with one element per status, all but the last holding a reference."""
    elements = []
    for i, status in enumerate(statuses):
        reference = None
        if i < len(statuses) - 1:
            reference = LeakReference(f"field{i}", ReferenceType.INSTANCE_FIELD)
        elements.append(
            LeakTraceElement(
                class_name=f"com.example.Node{i}",
                leak_status=status,
                leak_status_reason="" if status is LeakStatus.UNKNOWN else f"reason {i}",
                reference=reference,
            )
        )
    return LeakTrace(tuple(elements))


@pytest.fixture
def make_trace() -> Callable[..., LeakTrace]:
    """Factory building a LeakTrace from a list of statuses."""
    return trace_of
