"""Terminal rendering of leak trace rows with rich."""
from __future__ import annotations

from typing import Iterable, Optional

from rich.console import Console
from rich.style import Style as RichStyle
from rich.text import Text

from leakview.display.adapter import RowContent
from leakview.display.connector import ConnectorType
from leakview.display.row_index import HeaderRow
from leakview.display.styled_text import Style, StyledText, Underline


# Connector type → gutter glyph and color
CONNECTOR_STYLES: dict[ConnectorType, dict[str, str]] = {
    ConnectorType.HELP: {"glyph": "?", "color": "#00a4ef", "side": "help"},
    ConnectorType.HELP_LEAK_GROUP: {"glyph": "?", "color": "#00a4ef", "side": "help"},
    ConnectorType.START: {"glyph": "┬", "color": "#10b981", "side": "reachable"},
    ConnectorType.START_LAST_REACHABLE: {"glyph": "┬", "color": "#f59e0b", "side": "boundary"},
    ConnectorType.NODE_UNKNOWN: {"glyph": "├", "color": "#6b7280", "side": "unknown"},
    ConnectorType.NODE_REACHABLE: {"glyph": "├", "color": "#10b981", "side": "reachable"},
    ConnectorType.NODE_LAST_REACHABLE: {"glyph": "├", "color": "#f59e0b", "side": "boundary"},
    ConnectorType.NODE_FIRST_UNREACHABLE: {"glyph": "╞", "color": "#f59e0b", "side": "boundary"},
    ConnectorType.NODE_UNREACHABLE: {"glyph": "╞", "color": "#ef4444", "side": "unreachable"},
    ConnectorType.END: {"glyph": "╘", "color": "#ef4444", "side": "unreachable"},
    ConnectorType.END_FIRST_UNREACHABLE: {"glyph": "╘", "color": "#f59e0b", "side": "boundary"},
}

_LAST_CONNECTORS = {ConnectorType.END, ConnectorType.END_FIRST_UNREACHABLE}


def _rich_style(style: Style) -> RichStyle:
    # None leaves the attribute unset so overlapping annotations combine
    return RichStyle(
        color=style.color,
        bold=style.bold or None,
        italic=style.italic or None,
        underline=(style.underline is Underline.PLAIN) or None,
        underline2=(style.underline is Underline.EMPHASIZED) or None,
    )


def to_rich_text(styled: StyledText) -> Text:
    """Compile a StyledText into a rich Text, one stylize per annotation."""
    text = Text(styled.text)
    for annotation in styled.annotations:
        text.stylize(_rich_style(annotation.style), annotation.start, annotation.end)
    return text


def _gutter(connector: Optional[ConnectorType], first_line: bool) -> Text:
    if connector is None:
        return Text("  ")
    info = CONNECTOR_STYLES[connector]
    if first_line:
        return Text(info["glyph"] + " ", style=info["color"])
    if connector in _LAST_CONNECTORS:
        return Text("  ")
    return Text("│ ", style=info["color"])


def render_row(row: RowContent) -> Text:
    """Render one row: connector gutter, title lines and optional time."""
    title = to_rich_text(row.title)
    if isinstance(row.row, HeaderRow):
        title.stylize("bold")

    out = Text()
    for i, line in enumerate(title.split("\n")):
        if i:
            out.append("\n")
        out.append(_gutter(row.connector, first_line=i == 0))
        out.append(line)

    if row.time is not None:
        out.append("  ")
        out.append(to_rich_text(row.time))
    return out


def render_rows(rows: Iterable[RowContent]) -> Text:
    """Render rows into a single rich Text, one block per row."""
    return Text("\n").join(render_row(row) for row in rows)


def print_rows(rows: Iterable[RowContent], console: Optional[Console] = None) -> None:
    """Print rows to ``console`` (stdout by default)."""
    console = console or Console()
    console.print(render_rows(rows))
