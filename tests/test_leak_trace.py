"""Tests for the leak trace data model."""
from __future__ import annotations

import pytest

from leakview.errors import EmptyTraceError
from leakview.trace.leak_trace import (
    LeakReference,
    LeakStatus,
    LeakTrace,
    LeakTraceElement,
    LeakingInstanceSummary,
    ReferenceType,
)


class TestLeakTraceElement:
    """Tests for LeakTraceElement name helpers."""

    def test_simple_name_and_package(self) -> None:
        element = LeakTraceElement("com.example.MainActivity", LeakStatus.LEAKING)
        assert element.class_simple_name == "MainActivity"
        assert element.package_name == "com.example"

    def test_default_package(self) -> None:
        element = LeakTraceElement("Cache", LeakStatus.LEAKING)
        assert element.class_simple_name == "Cache"
        assert element.package_name is None

    def test_array_markers_kept(self) -> None:
        element = LeakTraceElement("java.lang.Object[]", LeakStatus.UNKNOWN)
        assert element.class_simple_name == "Object[]"

    def test_defaults(self) -> None:
        element = LeakTraceElement("a.B", LeakStatus.UNKNOWN)
        assert element.leak_status_reason == ""
        assert element.labels == ()
        assert element.reference is None


class TestLeakTrace:
    """Tests for LeakTrace."""

    def test_empty_trace_rejected(self) -> None:
        with pytest.raises(EmptyTraceError):
            LeakTrace(())

    def test_list_elements_stored_as_tuple(self) -> None:
        element = LeakTraceElement("a.B", LeakStatus.LEAKING)
        trace = LeakTrace([element])  # type: ignore[arg-type]
        assert trace.elements == (element,)
        assert len(trace) == 1

    def test_statuses_in_order(self, make_trace) -> None:
        trace = make_trace(LeakStatus.NOT_LEAKING, LeakStatus.UNKNOWN, LeakStatus.LEAKING)
        assert trace.statuses == (
            LeakStatus.NOT_LEAKING,
            LeakStatus.UNKNOWN,
            LeakStatus.LEAKING,
        )
        assert trace.leaking_element is trace.elements[-1]

    def test_element_may_be_leak_cause(self) -> None:
        elements = (
            LeakTraceElement(
                "a.Root", LeakStatus.NOT_LEAKING,
                reference=LeakReference("child", ReferenceType.INSTANCE_FIELD),
            ),
            LeakTraceElement("a.Leak", LeakStatus.LEAKING),
        )
        trace = LeakTrace(elements, leak_cause_indices=frozenset({0}))
        assert trace.element_may_be_leak_cause(0) is True
        assert trace.element_may_be_leak_cause(1) is False

    def test_element_may_be_leak_cause_out_of_range(self, make_trace) -> None:
        trace = make_trace(LeakStatus.LEAKING)
        with pytest.raises(IndexError):
            trace.element_may_be_leak_cause(1)

    def test_trace_is_frozen(self, make_trace) -> None:
        trace = make_trace(LeakStatus.LEAKING)
        with pytest.raises(AttributeError):
            trace.elements = ()  # type: ignore[misc]


class TestLeakingInstanceSummary:
    """Tests for LeakingInstanceSummary."""

    def test_from_dict(self) -> None:
        summary = LeakingInstanceSummary.from_dict(
            {"class_simple_name": "Cache", "created_at_time_millis": "1700000000000"}
        )
        assert summary.class_simple_name == "Cache"
        assert summary.created_at_time_millis == 1700000000000
