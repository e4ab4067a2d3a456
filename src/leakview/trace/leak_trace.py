"""Leak trace data model.

A leak trace is the chain of references from a garbage-collection root
(index 0) to the leaking object (last index). Everything here is built once
by whoever ran the heap analysis and is read-only afterwards.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional

from leakview.errors import EmptyTraceError


class LeakStatus(str, Enum):
    """Verdict for a single trace element."""

    UNKNOWN = "UNKNOWN"
    NOT_LEAKING = "NOT_LEAKING"
    LEAKING = "LEAKING"


class ReferenceType(str, Enum):
    """Kind of outgoing reference held by a trace element."""

    INSTANCE_FIELD = "INSTANCE_FIELD"
    STATIC_FIELD = "STATIC_FIELD"
    LOCAL = "LOCAL"
    ARRAY_ENTRY = "ARRAY_ENTRY"


@dataclass(frozen=True)
class LeakReference:
    """Reference from one trace element to the next."""

    display_name: str  # field name or array index, e.g. "mContext", "[3]"
    type: ReferenceType


@dataclass(frozen=True)
class LeakTraceElement:
    """One hop in the reference chain."""

    class_name: str  # fully qualified, e.g. "com.example.MainActivity"
    leak_status: LeakStatus
    leak_status_reason: str = ""  # empty when status is UNKNOWN
    labels: tuple[str, ...] = ()
    reference: Optional[LeakReference] = None  # absent on the leaking object

    @property
    def class_simple_name(self) -> str:
        """Class name without its package, array markers kept ("Object[]")."""
        return self.class_name[self.class_name.rfind(".") + 1:]

    @property
    def package_name(self) -> Optional[str]:
        """Package prefix of class_name, None for classes in the default package."""
        package_end = self.class_name.rfind(".")
        if package_end == -1:
            return None
        return self.class_name[:package_end]


@dataclass(frozen=True)
class LeakTrace:
    """An ordered, non-empty chain of elements ending at the leaking object.

    ``leak_cause_indices`` holds the analysis engine's verdict on which
    references are likely to cause the leak. It is data produced upstream;
    nothing in this package computes it.
    """

    elements: tuple[LeakTraceElement, ...]
    leak_cause_indices: frozenset[int] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        if not self.elements:
            raise EmptyTraceError()
        # Accept lists from callers but keep the stored value immutable
        object.__setattr__(self, "elements", tuple(self.elements))
        object.__setattr__(self, "leak_cause_indices", frozenset(self.leak_cause_indices))

    def __len__(self) -> int:
        return len(self.elements)

    @property
    def statuses(self) -> tuple[LeakStatus, ...]:
        """Leak status of each element, in trace order."""
        return tuple(e.leak_status for e in self.elements)

    @property
    def leaking_element(self) -> LeakTraceElement:
        return self.elements[-1]

    def element_may_be_leak_cause(self, index: int) -> bool:
        """Whether the reference held by element ``index`` likely causes the leak."""
        if not 0 <= index < len(self.elements):
            raise IndexError(f"element index {index} outside [0, {len(self.elements)})")
        return index in self.leak_cause_indices


@dataclass(frozen=True)
class LeakingInstanceSummary:
    """A previously recorded leak of the same retained class."""

    class_simple_name: str
    created_at_time_millis: int

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> LeakingInstanceSummary:
        """Create a summary from a leak document entry."""
        return cls(
            class_simple_name=data["class_simple_name"],
            created_at_time_millis=int(data["created_at_time_millis"]),
        )
