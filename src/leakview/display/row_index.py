"""Flat row index over a leak trace display.

Rows, top to bottom::

    0                      header (group description)
    1                      help row (connector kind, no element)
    2 .. 2+n-1             one connector row per trace element
    2+n .. 2+n+m-1         one row per leaking-instance summary

The mapping is a pure function of (position, element count, summary count).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterator, Optional, Union

from leakview.errors import EmptyTraceError, InvalidPositionError


HEADER_ROW_COUNT = 2

# Header, connector and instance-summary rows each use their own view type
VIEW_TYPE_COUNT = 3


class RowKind(Enum):
    """Kind of a row. Values double as view types."""

    HEADER = 0
    CONNECTOR = 1
    INSTANCE_SUMMARY = 2


@dataclass(frozen=True)
class HeaderRow:
    position: int

    @property
    def kind(self) -> RowKind:
        return RowKind.HEADER


@dataclass(frozen=True)
class ConnectorRow:
    """A connector row. ``element_index`` is None for the help row."""

    position: int
    element_index: Optional[int]

    @property
    def kind(self) -> RowKind:
        return RowKind.CONNECTOR

    @property
    def is_help(self) -> bool:
        return self.element_index is None


@dataclass(frozen=True)
class InstanceSummaryRow:
    position: int
    summary_index: int

    @property
    def kind(self) -> RowKind:
        return RowKind.INSTANCE_SUMMARY


Row = Union[HeaderRow, ConnectorRow, InstanceSummaryRow]


def total_row_count(element_count: int, summary_count: int) -> int:
    """Number of rows needed to show a trace plus its instance summaries."""
    return HEADER_ROW_COUNT + element_count + summary_count


@dataclass(frozen=True)
class RowIndex:
    """Maps flat list positions onto header, connector and summary rows."""

    element_count: int
    summary_count: int = 0

    def __post_init__(self) -> None:
        if self.element_count < 1:
            raise EmptyTraceError(
                f"element count must be at least 1, got {self.element_count}"
            )
        if self.summary_count < 0:
            raise ValueError(f"summary count must be >= 0, got {self.summary_count}")

    @property
    def row_count(self) -> int:
        return total_row_count(self.element_count, self.summary_count)

    @property
    def is_leak_group(self) -> bool:
        return self.summary_count > 0

    def check_position(self, position: int) -> None:
        """Raise InvalidPositionError unless 0 <= position < row_count."""
        if not 0 <= position < self.row_count:
            raise InvalidPositionError(
                position, f"outside [0, {self.row_count})"
            )

    def row_kind(self, position: int) -> RowKind:
        self.check_position(position)
        if position == 0:
            return RowKind.HEADER
        if position < HEADER_ROW_COUNT + self.element_count:
            return RowKind.CONNECTOR
        return RowKind.INSTANCE_SUMMARY

    def is_first_connector_row(self, position: int) -> bool:
        """Position 1: the help row, a connector row without element data."""
        return position == HEADER_ROW_COUNT - 1

    def is_learn_more_row(self, position: int) -> bool:
        """The help row outside leak groups links to general help."""
        return self.is_first_connector_row(position) and not self.is_leak_group

    def is_last_row(self, position: int) -> bool:
        return position == self.row_count - 1

    def element_index(self, position: int) -> int:
        """Trace element shown by the connector row at ``position``."""
        if self.row_kind(position) is not RowKind.CONNECTOR or position < HEADER_ROW_COUNT:
            raise InvalidPositionError(position, "not a trace element row")
        return position - HEADER_ROW_COUNT

    def summary_index(self, position: int) -> int:
        """Instance summary shown by the row at ``position``."""
        if self.row_kind(position) is not RowKind.INSTANCE_SUMMARY:
            raise InvalidPositionError(position, "not an instance summary row")
        return position - HEADER_ROW_COUNT - self.element_count

    def element_position(self, element_index: int) -> int:
        """Inverse of element_index."""
        if not 0 <= element_index < self.element_count:
            raise IndexError(
                f"element index {element_index} outside [0, {self.element_count})"
            )
        return HEADER_ROW_COUNT + element_index

    def row(self, position: int) -> Row:
        """Tagged row variant at ``position``."""
        kind = self.row_kind(position)
        if kind is RowKind.HEADER:
            return HeaderRow(position)
        if kind is RowKind.CONNECTOR:
            if self.is_first_connector_row(position):
                return ConnectorRow(position, None)
            return ConnectorRow(position, self.element_index(position))
        return InstanceSummaryRow(position, self.summary_index(position))

    def item_id(self, position: int) -> int:
        """Stable item identity: the position itself."""
        self.check_position(position)
        return position

    def __iter__(self) -> Iterator[Row]:
        for position in range(self.row_count):
            yield self.row(position)
