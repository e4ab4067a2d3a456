"""Tests for the connector state machine."""
from __future__ import annotations

import pytest

from leakview.display.connector import (
    ConnectorType,
    connector_type,
    end_connector,
    node_connector,
    start_connector,
)
from leakview.display.row_index import RowIndex
from leakview.errors import InvalidPositionError, UnknownLeakStatusError
from leakview.trace.leak_trace import LeakStatus

NL = LeakStatus.NOT_LEAKING
L = LeakStatus.LEAKING
U = LeakStatus.UNKNOWN


def _element_connectors(statuses: list, summary_count: int = 0) -> list[ConnectorType]:
    index = RowIndex(len(statuses), summary_count)
    return [connector_type(index, 2 + i, statuses) for i in range(len(statuses))]


class TestHelpRow:
    """Tests for the help connector row."""

    def test_help(self) -> None:
        assert connector_type(RowIndex(2), 1, [NL, L]) is ConnectorType.HELP

    def test_help_leak_group(self) -> None:
        assert connector_type(RowIndex(2, 3), 1, [NL, L]) is ConnectorType.HELP_LEAK_GROUP


class TestTraceConnectors:
    """Tests for element connector sequences."""

    def test_single_element(self) -> None:
        assert _element_connectors([L]) == [ConnectorType.START_LAST_REACHABLE]

    def test_single_element_in_leak_group(self) -> None:
        assert _element_connectors([L], summary_count=2) == [
            ConnectorType.START_LAST_REACHABLE
        ]

    def test_boundary_in_the_middle(self) -> None:
        assert _element_connectors([NL, NL, L, L]) == [
            ConnectorType.START,
            ConnectorType.NODE_LAST_REACHABLE,
            ConnectorType.NODE_FIRST_UNREACHABLE,
            ConnectorType.END,
        ]

    def test_unknown_between_good_and_leaking(self) -> None:
        # Root's successor is UNKNOWN, which is not NOT_LEAKING
        assert _element_connectors([NL, U, L]) == [
            ConnectorType.START_LAST_REACHABLE,
            ConnectorType.NODE_UNKNOWN,
            ConnectorType.END_FIRST_UNREACHABLE,
        ]

    def test_long_reachable_chain(self) -> None:
        assert _element_connectors([NL, NL, NL, L]) == [
            ConnectorType.START,
            ConnectorType.NODE_REACHABLE,
            ConnectorType.NODE_LAST_REACHABLE,
            ConnectorType.END_FIRST_UNREACHABLE,
        ]

    def test_all_leaking(self) -> None:
        assert _element_connectors([L, L, L]) == [
            ConnectorType.START_LAST_REACHABLE,
            ConnectorType.NODE_UNREACHABLE,
            ConnectorType.END,
        ]

    def test_adjacent_unknowns(self) -> None:
        assert _element_connectors([U, U, U, L, L]) == [
            ConnectorType.START_LAST_REACHABLE,
            ConnectorType.NODE_UNKNOWN,
            ConnectorType.NODE_UNKNOWN,
            ConnectorType.NODE_FIRST_UNREACHABLE,
            ConnectorType.END,
        ]

    def test_leak_group_never_ends(self) -> None:
        assert _element_connectors([NL, L, L], summary_count=1) == [
            ConnectorType.START_LAST_REACHABLE,
            ConnectorType.NODE_FIRST_UNREACHABLE,
            ConnectorType.NODE_UNREACHABLE,
        ]

    def test_leak_group_first_unreachable_last(self) -> None:
        assert _element_connectors([NL, NL, L], summary_count=2)[-1] is (
            ConnectorType.NODE_FIRST_UNREACHABLE
        )

    def test_leak_group_not_leaking_last_element(self) -> None:
        assert _element_connectors([NL, NL, NL], summary_count=1)[-1] is (
            ConnectorType.NODE_LAST_REACHABLE
        )

    def test_idempotent(self) -> None:
        statuses = [NL, U, NL, L, L]
        assert _element_connectors(statuses) == _element_connectors(statuses)


class TestContractViolations:
    """Tests for fail-fast behaviour."""

    def test_unknown_status_value_own(self) -> None:
        statuses = [NL, NL, "BOGUS", L]
        with pytest.raises(UnknownLeakStatusError) as exc_info:
            connector_type(RowIndex(4), 4, statuses)  # type: ignore[arg-type]
        assert exc_info.value.status == "BOGUS"
        assert exc_info.value.element_index == 2

    def test_unknown_status_value_neighbour(self) -> None:
        statuses = [NL, None, L]
        with pytest.raises(UnknownLeakStatusError) as exc_info:
            connector_type(RowIndex(3), 2, statuses)  # type: ignore[arg-type]
        assert exc_info.value.element_index == 1

    def test_unknown_status_value_first_element(self) -> None:
        with pytest.raises(UnknownLeakStatusError) as exc_info:
            connector_type(RowIndex(1), 2, ["WHATEVER"])  # type: ignore[arg-type]
        assert exc_info.value.element_index == 0

    def test_unknown_status_is_value_error(self) -> None:
        with pytest.raises(ValueError):
            node_connector("LEAKING?")  # type: ignore[arg-type]

    @pytest.mark.parametrize("position", [0, 5, -1])
    def test_not_a_connector_row(self, position: int) -> None:
        index = RowIndex(2, 1)
        with pytest.raises(InvalidPositionError):
            connector_type(index, position, [NL, L])

    def test_status_count_mismatch(self) -> None:
        with pytest.raises(ValueError):
            connector_type(RowIndex(3), 2, [NL, L])


class TestTransitionHelpers:
    """Tests for the pure status comparison helpers."""

    def test_start_connector(self) -> None:
        assert start_connector(NL) is ConnectorType.START
        assert start_connector(U) is ConnectorType.START_LAST_REACHABLE
        assert start_connector(L) is ConnectorType.START_LAST_REACHABLE
        assert start_connector(None) is ConnectorType.START_LAST_REACHABLE

    def test_end_connector(self) -> None:
        assert end_connector(L) is ConnectorType.END
        assert end_connector(U) is ConnectorType.END_FIRST_UNREACHABLE
        assert end_connector(NL) is ConnectorType.END_FIRST_UNREACHABLE

    def test_node_connector(self) -> None:
        assert node_connector(U, L, NL) is ConnectorType.NODE_UNKNOWN
        assert node_connector(NL, next_status=NL) is ConnectorType.NODE_REACHABLE
        assert node_connector(NL, next_status=U) is ConnectorType.NODE_LAST_REACHABLE
        assert node_connector(L, previous_status=L) is ConnectorType.NODE_UNREACHABLE
        assert node_connector(L, previous_status=NL) is ConnectorType.NODE_FIRST_UNREACHABLE
