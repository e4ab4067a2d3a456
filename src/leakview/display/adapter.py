"""Row provider for a leak trace display.

Joins the row index, connector state machine and row text formatter behind
the questions a list widget asks: how many rows, what type is row N, what
goes into it. Widget inflation and recycling stay with the host.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Iterator, Optional, Sequence

from leakview.display.connector import ConnectorType, connector_type
from leakview.display.context import Colors, DisplayStrings, RenderContext
from leakview.display.row_index import (
    VIEW_TYPE_COUNT,
    ConnectorRow,
    HeaderRow,
    InstanceSummaryRow,
    Row,
    RowIndex,
)
from leakview.display.row_text import (
    DateTimeFormatter,
    LeakCauseQuery,
    RowTextFormatter,
    may_be_leak_cause,
)
from leakview.display.styled_text import StyledText
from leakview.trace.leak_trace import LeakTrace, LeakingInstanceSummary

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowContent:
    """Everything needed to bind one row."""

    row: Row
    title: StyledText
    connector: Optional[ConnectorType] = None  # connector rows only
    time: Optional[StyledText] = None  # instance summary rows only
    maybe_leak_cause: bool = False

    @property
    def position(self) -> int:
        return self.row.position

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "position": self.position,
            "kind": self.row.kind.name,
            "connector": self.connector.name if self.connector else None,
            "title": self.title.to_dict(),
            "time": self.time.to_dict() if self.time else None,
            "maybe_leak_cause": self.maybe_leak_cause,
        }


class DisplayLeakRows:
    """Presentation data for every row of a leak trace display."""

    def __init__(
        self,
        leak_trace: LeakTrace,
        instances: Sequence[LeakingInstanceSummary] = (),
        group_description: str = "",
        colors: Optional[Colors] = None,
        strings: Optional[DisplayStrings] = None,
        element_may_be_leak_cause: Optional[LeakCauseQuery] = None,
        format_datetime: Optional[DateTimeFormatter] = None,
    ) -> None:
        self.leak_trace = leak_trace
        self.instances = tuple(instances)
        self.context = RenderContext.for_instances(
            self.instances, group_description, colors, strings
        )
        self.index = RowIndex(len(leak_trace.elements), len(self.instances))
        self.formatter = RowTextFormatter(self.context)
        self._statuses = leak_trace.statuses
        self._leak_cause_query = (
            element_may_be_leak_cause or leak_trace.element_may_be_leak_cause
        )
        self._format_datetime = format_datetime
        logger.debug(
            "Display of %d elements, %d instances (leak group: %s)",
            self.index.element_count,
            self.index.summary_count,
            self.context.is_leak_group,
        )

    @property
    def is_leak_group(self) -> bool:
        return self.context.is_leak_group

    @property
    def count(self) -> int:
        return self.index.row_count

    def __len__(self) -> int:
        return self.count

    @property
    def view_type_count(self) -> int:
        return VIEW_TYPE_COUNT

    def item_view_type(self, position: int) -> int:
        return self.index.row_kind(position).value

    def item_id(self, position: int) -> int:
        return self.index.item_id(position)

    def is_first_connector_row(self, position: int) -> bool:
        return self.index.is_first_connector_row(position)

    def is_learn_more_row(self, position: int) -> bool:
        return self.index.is_learn_more_row(position)

    def connector_type(self, position: int) -> ConnectorType:
        return connector_type(self.index, position, self._statuses)

    def maybe_leak_cause(self, element_index: int) -> bool:
        return may_be_leak_cause(
            element_index, self.is_leak_group, self._leak_cause_query
        )

    def row_content(self, position: int) -> RowContent:
        """Title, connector and time of the row at ``position``."""
        row = self.index.row(position)
        if isinstance(row, HeaderRow):
            return RowContent(row=row, title=self.formatter.header_text())
        if isinstance(row, ConnectorRow):
            connector = self.connector_type(position)
            if row.element_index is None:
                return RowContent(
                    row=row, title=self.formatter.help_text(), connector=connector
                )
            element = self.leak_trace.elements[row.element_index]
            cause = self.maybe_leak_cause(row.element_index)
            return RowContent(
                row=row,
                title=self.formatter.element_text(element, cause),
                connector=connector,
                maybe_leak_cause=cause,
            )
        assert isinstance(row, InstanceSummaryRow)
        title, time = self.formatter.instance_summary_text(
            self.instances[row.summary_index], self._format_datetime
        )
        return RowContent(row=row, title=title, time=time)

    def iter_rows(self) -> Iterator[RowContent]:
        for position in range(self.count):
            yield self.row_content(position)
