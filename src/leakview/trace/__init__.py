"""Leak trace model and loading."""
from __future__ import annotations

from leakview.trace.leak_trace import (
    LeakReference,
    LeakStatus,
    LeakTrace,
    LeakTraceElement,
    LeakingInstanceSummary,
    ReferenceType,
)

__all__ = [
    "LeakReference",
    "LeakStatus",
    "LeakTrace",
    "LeakTraceElement",
    "LeakingInstanceSummary",
    "ReferenceType",
]
