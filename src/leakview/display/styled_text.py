"""Styled text: a plain string plus (range, style) annotations.

Annotations may overlap and nest; each rendering layer (terminal, HTML)
compiles them into its own rich-text representation.
"""
from __future__ import annotations

import html
from contextlib import contextmanager
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterator, Optional


class Underline(Enum):
    """Underline decoration of a text range."""

    NONE = "none"
    PLAIN = "plain"
    EMPHASIZED = "emphasized"  # squiggly, marks a likely leak cause


@dataclass(frozen=True)
class Style:
    """Style attributes. ``color`` is an opaque token such as "#be383f"."""

    color: Optional[str] = None
    bold: bool = False
    italic: bool = False
    underline: Underline = Underline.NONE

    def merge(self, other: Style) -> Style:
        """Combine with ``other``; ``other`` wins for color and underline."""
        return Style(
            color=other.color or self.color,
            bold=self.bold or other.bold,
            italic=self.italic or other.italic,
            underline=(
                other.underline if other.underline is not Underline.NONE else self.underline
            ),
        )

    @property
    def is_plain(self) -> bool:
        return self == PLAIN


PLAIN = Style()


@dataclass(frozen=True)
class Annotation:
    """Style applied to text[start:end]."""

    start: int
    end: int
    style: Style


@dataclass(frozen=True)
class StyledText:
    text: str
    annotations: tuple[Annotation, ...] = ()

    def __str__(self) -> str:
        return self.text

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dict."""
        return {
            "text": self.text,
            "annotations": [
                {
                    "start": a.start,
                    "end": a.end,
                    "color": a.style.color,
                    "bold": a.style.bold,
                    "italic": a.style.italic,
                    "underline": a.style.underline.value,
                }
                for a in self.annotations
            ],
        }

    def style_at(self, offset: int) -> Style:
        """Effective style of the character at ``offset``, later annotations win."""
        style = PLAIN
        for annotation in self.annotations:
            if annotation.start <= offset < annotation.end:
                style = style.merge(annotation.style)
        return style

    def segments(self) -> list[tuple[str, Style]]:
        """Split into maximal runs of uniformly styled text."""
        boundaries = {0, len(self.text)}
        for annotation in self.annotations:
            boundaries.add(annotation.start)
            boundaries.add(annotation.end)
        cuts = sorted(b for b in boundaries if 0 <= b <= len(self.text))

        segments: list[tuple[str, Style]] = []
        for start, end in zip(cuts, cuts[1:]):
            if start == end:
                continue
            style = self.style_at(start)
            if segments and segments[-1][1] == style:
                segments[-1] = (segments[-1][0] + self.text[start:end], style)
            else:
                segments.append((self.text[start:end], style))
        return segments

    def spans_with(self, **attributes) -> list[str]:
        """Substrings covered by annotations whose style has ``attributes``."""
        return [
            self.text[a.start:a.end]
            for a in self.annotations
            if all(getattr(a.style, k) == v for k, v in attributes.items())
        ]


@dataclass
class StyledTextBuilder:
    """Accumulates text and annotations.

    Example:
        >>> builder = StyledTextBuilder()
        >>> with builder.styled(Style(bold=True)):
        ...     builder.append("Leaking", Style(color="#be383f"))
        >>> builder.build().text
        'Leaking'
    """

    _parts: list[str] = field(default_factory=list)
    _annotations: list[Annotation] = field(default_factory=list)
    _length: int = 0

    def __len__(self) -> int:
        return self._length

    def append(self, text: str, style: Optional[Style] = None) -> StyledTextBuilder:
        start = self._length
        self._parts.append(text)
        self._length += len(text)
        if style is not None and not style.is_plain and text:
            self._annotations.append(Annotation(start, self._length, style))
        return self

    def newline(self) -> StyledTextBuilder:
        return self.append("\n")

    @contextmanager
    def styled(self, style: Style) -> Iterator[StyledTextBuilder]:
        """Apply ``style`` to everything appended inside the block."""
        start = self._length
        # Inner annotations are appended first; insert ours before them so
        # the more specific inner styles win when merging.
        insert_at = len(self._annotations)
        yield self
        if self._length > start and not style.is_plain:
            self._annotations.insert(insert_at, Annotation(start, self._length, style))

    def build(self) -> StyledText:
        return StyledText("".join(self._parts), tuple(self._annotations))



def escape_markup(text: str) -> str:
    """Escape ``&``, ``<`` and ``>`` for markup targets."""
    return html.escape(text, quote=False)
