"""Tests for terminal and HTML rendering."""
from __future__ import annotations

import io

from rich.console import Console
from rich.text import Text

from leakview.display.adapter import DisplayLeakRows
from leakview.display.connector import ConnectorType
from leakview.display.styled_text import Annotation, Style, StyledText, Underline
from leakview.render.html_renderer import (
    render_leak_html,
    render_row_html,
    styled_text_to_html,
)
from leakview.render.terminal import (
    CONNECTOR_STYLES,
    print_rows,
    render_row,
    render_rows,
    to_rich_text,
)
from leakview.trace.leak_trace import (
    LeakReference,
    LeakStatus,
    LeakTrace,
    LeakTraceElement,
    LeakingInstanceSummary,
    ReferenceType,
)

NL = LeakStatus.NOT_LEAKING
L = LeakStatus.LEAKING


def _trace_with_reference(display_name: str) -> LeakTrace:
    return LeakTrace(
        (
            LeakTraceElement(
                "com.example.Thread",
                NL,
                "GC root",
                reference=LeakReference(display_name, ReferenceType.LOCAL),
            ),
            LeakTraceElement("com.example.Leaky", L, "destroyed"),
        ),
        leak_cause_indices=frozenset({0}),
    )


class TestTerminal:
    """Tests for the rich compiler."""

    def test_connector_styles_complete(self) -> None:
        assert set(CONNECTOR_STYLES) == set(ConnectorType)

    def test_to_rich_text(self) -> None:
        styled = StyledText(
            "a.b",
            (
                Annotation(0, 1, Style(color="#FF0000", bold=True)),
                Annotation(2, 3, Style(underline=Underline.EMPHASIZED, italic=True)),
            ),
        )
        text = to_rich_text(styled)
        assert isinstance(text, Text)
        assert text.plain == "a.b"
        assert len(text.spans) == 2
        first, second = text.spans
        assert (first.start, first.end) == (0, 1)
        assert first.style.bold is True
        assert first.style.color is not None
        assert first.style.color.triplet == (255, 0, 0)
        assert second.style.underline2 is True
        assert second.style.italic is True
        assert second.style.underline is None

    def test_render_row_gutter(self, make_trace) -> None:
        rows = DisplayLeakRows(make_trace(NL, L))
        rendered = render_row(rows.row_content(2))
        lines = rendered.plain.split("\n")
        assert lines[0].startswith(CONNECTOR_STYLES[ConnectorType.START_LAST_REACHABLE]["glyph"])
        assert all(line.startswith("│ ") for line in lines[1:])

    def test_end_row_has_no_continuation(self, make_trace) -> None:
        rows = DisplayLeakRows(make_trace(NL, L))
        lines = render_row(rows.row_content(3)).plain.split("\n")
        assert lines[0].startswith("╘ ")
        assert lines[1].startswith("  ")

    def test_summary_row_time(self, make_trace) -> None:
        rows = DisplayLeakRows(
            make_trace(L),
            instances=[LeakingInstanceSummary("Node0", 5)],
            format_datetime=lambda ms: "yesterday",
        )
        assert render_row(rows.row_content(3)).plain == "  Node0 has leaked  yesterday"

    def test_print_rows(self, make_trace) -> None:
        buffer = io.StringIO()
        console = Console(file=buffer, width=120)
        rows = DisplayLeakRows(make_trace(NL, L), group_description="Demo")
        print_rows(rows.iter_rows(), console)
        output = buffer.getvalue()
        assert "Demo" in output
        assert "com.example.Node1" in output

    def test_render_rows_joins(self, make_trace) -> None:
        rows = DisplayLeakRows(make_trace(L), group_description="Demo")
        assert render_rows(rows.iter_rows()).plain.startswith("  Demo\n")


class TestHtml:
    """Tests for the HTML compiler."""

    def test_plain(self) -> None:
        assert styled_text_to_html(StyledText("a\nb")) == "a<br>b"

    def test_styles(self) -> None:
        styled = StyledText(
            "xy",
            (
                Annotation(0, 1, Style(color="#FF0000", bold=True, italic=True)),
                Annotation(1, 2, Style(underline=Underline.EMPHASIZED)),
            ),
        )
        assert styled_text_to_html(styled) == (
            '<span style="color: #FF0000; font-weight: bold; font-style: italic">x</span>'
            '<span style="text-decoration: underline wavy">y</span>'
        )

    def test_plain_underline(self) -> None:
        styled = StyledText("u", (Annotation(0, 1, Style(underline=Underline.PLAIN)),))
        assert styled_text_to_html(styled) == (
            '<span style="text-decoration: underline">u</span>'
        )

    def test_reference_name_escaped(self) -> None:
        rows = DisplayLeakRows(_trace_with_reference("<Java Local>"))
        markup = styled_text_to_html(rows.row_content(2).title)
        assert "<Java Local>" not in markup
        assert "&lt;Java Local&gt;" in markup

    def test_leak_cause_row(self) -> None:
        rows = DisplayLeakRows(_trace_with_reference("<init>"))
        row_html = render_row_html(rows.row_content(2))
        assert 'class="row row-connector leak-cause"' in row_html
        assert "underline wavy" in row_html
        assert "<init>" not in row_html

    def test_page(self, make_trace) -> None:
        rows = DisplayLeakRows(
            make_trace(NL, L),
            instances=[LeakingInstanceSummary("Node1", 0)],
            format_datetime=lambda ms: "then",
        )
        page = render_leak_html(rows.iter_rows(), title="A <b> leak")
        assert page.startswith("<!DOCTYPE html>")
        assert "<title>A &lt;b&gt; leak</title>" in page
        assert page.count("<tr ") == rows.count
        assert "connector-help_leak_group" in page
        assert '<span class="time">' in page
