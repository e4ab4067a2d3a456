"""Styled text for each kind of row.

Element rows read like::

    com.example.<MainActivity>
        Leaking: YES (Activity#mDestroyed is true)
        <label>
        MainActivity.<mContext>

The package prefix, status line and labels use the extra color, class names
the class-name color, and the outgoing reference the reference color, or the
leak color with bold and an emphasized underline when it may cause the leak.
"""
from __future__ import annotations

from datetime import datetime
from typing import Callable, Optional

from leakview.display.context import RenderContext
from leakview.display.styled_text import Style, StyledText, StyledTextBuilder, Underline
from leakview.errors import UnknownLeakStatusError
from leakview.trace.leak_trace import (
    LeakStatus,
    LeakTraceElement,
    LeakingInstanceSummary,
    ReferenceType,
)

# Four non-breaking spaces so word-wrap keeps the indent
INDENT = "\u00a0" * 4

DEFAULT_DATETIME_FORMAT = "%Y-%m-%d %H:%M"

DateTimeFormatter = Callable[[int], str]
LeakCauseQuery = Callable[[int], bool]


def default_datetime_formatter(
    millis: int, fmt: str = DEFAULT_DATETIME_FORMAT
) -> str:
    """Format epoch milliseconds in local time.

    Timestamps the platform cannot represent come back as the raw millis.
    """
    try:
        return datetime.fromtimestamp(millis / 1000).strftime(fmt)
    except (ValueError, OverflowError, OSError):
        return str(millis)


def display_class_name(class_simple_name: str) -> str:
    """Rewrite "[]" to "[ ]" so word-wrap can break array types."""
    return class_simple_name.replace("[]", "[ ]")


def reachability_text(element: LeakTraceElement) -> str:
    status = element.leak_status
    if status is LeakStatus.UNKNOWN:
        return "UNKNOWN"
    if status is LeakStatus.NOT_LEAKING:
        return f"NO ({element.leak_status_reason})"
    if status is LeakStatus.LEAKING:
        return f"YES ({element.leak_status_reason})"
    raise UnknownLeakStatusError(status)


def may_be_leak_cause(
    element_index: int, is_leak_group: bool, query: LeakCauseQuery
) -> bool:
    """Leak groups only show causes common to every instance, so all qualify."""
    if is_leak_group:
        return True
    return query(element_index)


class RowTextFormatter:
    """Builds the styled title of every row for one render context."""

    def __init__(self, context: RenderContext) -> None:
        self.context = context
        self.colors = context.colors

    def header_text(self) -> StyledText:
        return StyledText(self.context.group_description)

    def help_text(self) -> StyledText:
        strings = self.context.strings
        title = strings.leak_group_help_title if self.context.is_leak_group else strings.help_title
        return StyledTextBuilder().append(
            title, Style(color=self.colors.help, bold=True)
        ).build()

    def element_text(self, element: LeakTraceElement, maybe_leak_cause: bool) -> StyledText:
        """Describe one trace element.

        Args:
            element: The trace element to describe
            maybe_leak_cause: Whether its reference likely causes the leak

        Returns:
            Styled multi-line description
        """
        extra = Style(color=self.colors.extra)
        class_name_style = Style(color=self.colors.class_name)
        simple_name = display_class_name(element.class_simple_name)

        builder = StyledTextBuilder()
        package_name = element.package_name
        if package_name is not None:
            builder.append(package_name, extra)
            builder.append(".")
        builder.append(simple_name, class_name_style)

        builder.newline()
        builder.append(INDENT)
        builder.append(f"Leaking: {reachability_text(element)}", extra)

        for label in element.labels:
            builder.newline()
            builder.append(INDENT)
            builder.append(label, extra)

        reference = element.reference
        if reference is not None:
            builder.newline()
            builder.append(INDENT)
            builder.append(simple_name, class_name_style)
            builder.append(".")
            if maybe_leak_cause:
                reference_style = Style(
                    color=self.colors.leak, underline=Underline.EMPHASIZED
                )
            else:
                reference_style = Style(color=self.colors.reference)
            outer = Style(
                bold=maybe_leak_cause,
                italic=reference.type is ReferenceType.STATIC_FIELD,
            )
            with builder.styled(outer):
                builder.append(reference.display_name, reference_style)

        return builder.build()

    def instance_summary_text(
        self,
        summary: LeakingInstanceSummary,
        format_datetime: Optional[DateTimeFormatter] = None,
    ) -> tuple[StyledText, StyledText]:
        """Title and creation time of a previously recorded leak."""
        format_datetime = format_datetime or default_datetime_formatter
        title = StyledText(
            self.context.strings.class_has_leaked.format(summary.class_simple_name)
        )
        time = StyledTextBuilder().append(
            format_datetime(summary.created_at_time_millis),
            Style(color=self.colors.extra),
        ).build()
        return title, time
