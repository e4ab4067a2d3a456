"""HTML rendering of leak trace rows.

All text from the trace is escaped, so reference names such as ``<init>``
never reach the markup as tags. Emphasized underlines become wavy
underlines.
"""
from __future__ import annotations

import html
from typing import Iterable

from leakview.display.adapter import RowContent
from leakview.display.styled_text import Style, StyledText, Underline, escape_markup
from leakview.render.terminal import CONNECTOR_STYLES


def _css(style: Style) -> str:
    rules: list[str] = []
    if style.color:
        rules.append(f"color: {style.color}")
    if style.bold:
        rules.append("font-weight: bold")
    if style.italic:
        rules.append("font-style: italic")
    if style.underline is Underline.PLAIN:
        rules.append("text-decoration: underline")
    elif style.underline is Underline.EMPHASIZED:
        rules.append("text-decoration: underline wavy")
    return "; ".join(rules)


def styled_text_to_html(styled: StyledText) -> str:
    """Compile a StyledText into flat, non-overlapping HTML spans."""
    parts: list[str] = []
    for text, style in styled.segments():
        escaped = escape_markup(text).replace("\n", "<br>")
        css = _css(style)
        if css:
            parts.append(f'<span style="{css}">{escaped}</span>')
        else:
            parts.append(escaped)
    return "".join(parts)


def _connector_cell(row: RowContent) -> str:
    if row.connector is None:
        return '<td class="connector"></td>'
    info = CONNECTOR_STYLES[row.connector]
    return (
        f'<td class="connector connector-{row.connector.value} side-{info["side"]}" '
        f'style="color: {info["color"]}" title="{row.connector.value}">{info["glyph"]}</td>'
    )


def render_row_html(row: RowContent) -> str:
    """Render one row as a table row."""
    kind = row.row.kind.name.lower().replace("_", "-")
    classes = f"row row-{kind}"
    if row.maybe_leak_cause:
        classes += " leak-cause"
    time_html = ""
    if row.time is not None:
        time_html = f' <span class="time">{styled_text_to_html(row.time)}</span>'
    return (
        f'<tr class="{classes}" data-position="{row.position}">'
        f"{_connector_cell(row)}"
        f'<td class="title">{styled_text_to_html(row.title)}{time_html}</td>'
        f"</tr>"
    )


def render_leak_html(rows: Iterable[RowContent], title: str = "Leak Trace") -> str:
    """Render rows as a standalone HTML page.

    Args:
        rows: Row contents, usually DisplayLeakRows.iter_rows()
        title: Page title

    Returns:
        Complete HTML document as a string
    """
    body = "\n".join(render_row_html(row) for row in rows)
    return f"""<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{html.escape(title)}</title>
<style>
  body {{ background: #1f2937; color: #e5e7eb; font-family: monospace; }}
  table.leak-rows {{ border-collapse: collapse; }}
  td {{ vertical-align: top; padding: 4px 8px; }}
  td.connector {{ font-size: 1.2em; text-align: center; }}
  tr.row-header td.title {{ font-weight: bold; font-size: 1.1em; }}
  span.time {{ margin-left: 1em; }}
</style>
</head>
<body>
<h1>{html.escape(title)}</h1>
<table class="leak-rows">
{body}
</table>
</body>
</html>
"""
