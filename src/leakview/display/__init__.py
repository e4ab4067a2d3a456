"""Row model, connector logic and styled row text for leak trace displays."""
from __future__ import annotations

from leakview.display.adapter import DisplayLeakRows, RowContent
from leakview.display.connector import ConnectorType, connector_type
from leakview.display.context import Colors, DisplayStrings, RenderContext
from leakview.display.row_index import (
    HEADER_ROW_COUNT,
    ConnectorRow,
    HeaderRow,
    InstanceSummaryRow,
    RowIndex,
    RowKind,
    total_row_count,
)
from leakview.display.row_text import RowTextFormatter
from leakview.display.styled_text import Style, StyledText, Underline

__all__ = [
    "Colors",
    "ConnectorRow",
    "ConnectorType",
    "DisplayLeakRows",
    "DisplayStrings",
    "HEADER_ROW_COUNT",
    "HeaderRow",
    "InstanceSummaryRow",
    "RenderContext",
    "RowContent",
    "RowIndex",
    "RowKind",
    "RowTextFormatter",
    "Style",
    "StyledText",
    "Underline",
    "connector_type",
    "total_row_count",
]
