"""Connector state machine.

Decides which connector shape joins a row to its neighbours. The chain is
drawn top to bottom: root, references known not to leak, the boundary,
references known to leak, then the leaked object. Each decision compares an
element's status with at most one adjacent status.
"""
from __future__ import annotations

from enum import Enum
from typing import Optional, Sequence

from leakview.display.row_index import RowIndex, RowKind
from leakview.errors import InvalidPositionError, UnknownLeakStatusError
from leakview.trace.leak_trace import LeakStatus


class ConnectorType(Enum):
    """Visual connector styles."""

    HELP = "help"
    HELP_LEAK_GROUP = "help_leak_group"
    START = "start"
    START_LAST_REACHABLE = "start_last_reachable"
    NODE_UNKNOWN = "node_unknown"
    NODE_REACHABLE = "node_reachable"
    NODE_LAST_REACHABLE = "node_last_reachable"
    NODE_FIRST_UNREACHABLE = "node_first_unreachable"
    NODE_UNREACHABLE = "node_unreachable"
    END = "end"
    END_FIRST_UNREACHABLE = "end_first_unreachable"


def _status_at(statuses: Sequence[LeakStatus], element_index: int) -> LeakStatus:
    status = statuses[element_index]
    if not isinstance(status, LeakStatus):
        raise UnknownLeakStatusError(status, element_index)
    return status


def start_connector(next_status: Optional[LeakStatus]) -> ConnectorType:
    """Connector of the root element. ``next_status`` is None for single-element traces."""
    if next_status is not LeakStatus.NOT_LEAKING:
        return ConnectorType.START_LAST_REACHABLE
    return ConnectorType.START


def end_connector(previous_status: LeakStatus) -> ConnectorType:
    """Connector of the leaking object when it is the last row."""
    if previous_status is not LeakStatus.LEAKING:
        return ConnectorType.END_FIRST_UNREACHABLE
    return ConnectorType.END


def node_connector(
    status: LeakStatus,
    previous_status: Optional[LeakStatus] = None,
    next_status: Optional[LeakStatus] = None,
) -> ConnectorType:
    """Connector of an interior element.

    Only the neighbour that matters for ``status`` is looked at: the next one
    for NOT_LEAKING, the previous one for LEAKING. A missing successor counts
    as "not NOT_LEAKING", a missing predecessor as "not LEAKING".
    """
    if status is LeakStatus.UNKNOWN:
        return ConnectorType.NODE_UNKNOWN
    if status is LeakStatus.NOT_LEAKING:
        if next_status is not LeakStatus.NOT_LEAKING:
            return ConnectorType.NODE_LAST_REACHABLE
        return ConnectorType.NODE_REACHABLE
    if status is LeakStatus.LEAKING:
        if previous_status is not LeakStatus.LEAKING:
            return ConnectorType.NODE_FIRST_UNREACHABLE
        return ConnectorType.NODE_UNREACHABLE
    raise UnknownLeakStatusError(status)


def connector_type(
    row_index: RowIndex,
    position: int,
    statuses: Sequence[LeakStatus],
) -> ConnectorType:
    """Connector style for the connector row at ``position``.

    Args:
        row_index: Row layout of the display
        position: Flat list position, must be a connector row
        statuses: Leak status of every trace element, in trace order

    Returns:
        The connector category

    Raises:
        InvalidPositionError: If ``position`` is not a connector row
        UnknownLeakStatusError: If a status read is not a LeakStatus
        ValueError: If ``statuses`` does not match the row index
    """
    if len(statuses) != row_index.element_count:
        raise ValueError(
            f"{len(statuses)} statuses for a row index of {row_index.element_count} elements"
        )
    if row_index.row_kind(position) is not RowKind.CONNECTOR:
        raise InvalidPositionError(position, "not a connector row")

    if row_index.is_first_connector_row(position):
        if row_index.is_leak_group:
            return ConnectorType.HELP_LEAK_GROUP
        return ConnectorType.HELP

    element_index = row_index.element_index(position)
    last_index = row_index.element_count - 1
    status = _status_at(statuses, element_index)

    if element_index == 0:
        if row_index.element_count == 1:
            return ConnectorType.START_LAST_REACHABLE
        return start_connector(_status_at(statuses, 1))

    # Only reached when there are no instance summaries below the trace
    if row_index.is_last_row(position):
        return end_connector(_status_at(statuses, element_index - 1))

    if status is LeakStatus.NOT_LEAKING:
        next_status = (
            _status_at(statuses, element_index + 1) if element_index < last_index else None
        )
        return node_connector(status, next_status=next_status)
    if status is LeakStatus.LEAKING:
        return node_connector(status, previous_status=_status_at(statuses, element_index - 1))
    return node_connector(status)
