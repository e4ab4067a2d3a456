"""Per-render configuration: colors, presentation strings, group mode."""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Sequence

from leakview.trace.leak_trace import LeakingInstanceSummary

HEX_COLOR_RE = re.compile(r"[0-9A-Fa-f]{6}(?:[0-9A-Fa-f]{2})?")


def hex_string_color(color: int) -> str:
    """Format an ARGB color int as "#RRGGBB", dropping the alpha channel."""
    return "#%06X" % (0xFFFFFF & color)


def normalize_color(value: Any) -> str:
    """Accept "#RRGGBB" / "#AARRGGBB" strings or ARGB ints, return "#RRGGBB".

    The leading "#" is optional.
    """
    if isinstance(value, bool):
        raise ValueError(f"Invalid color: {value!r}")
    if isinstance(value, int):
        return hex_string_color(value)
    if isinstance(value, str):
        text = value.strip().removeprefix("#")
        if not HEX_COLOR_RE.fullmatch(text):
            raise ValueError(f"Invalid color: {value!r}")
        return hex_string_color(int(text, 16))
    raise ValueError(f"Invalid color: {value!r}")


@dataclass(frozen=True)
class Colors:
    """The five color tokens used to style rows."""

    class_name: str = "#FFFFFF"
    leak: str = "#BE383F"
    reference: str = "#9976A8"
    extra: str = "#998888"
    help: str = "#AAAAAA"

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Colors:
        """Create Colors from a mapping, missing keys keep their default."""
        defaults = cls()
        return cls(
            class_name=normalize_color(data.get("class_name", defaults.class_name)),
            leak=normalize_color(data.get("leak", defaults.leak)),
            reference=normalize_color(data.get("reference", defaults.reference)),
            extra=normalize_color(data.get("extra", defaults.extra)),
            help=normalize_color(data.get("help", defaults.help)),
        )

    def to_dict(self) -> dict[str, str]:
        return {
            "class_name": self.class_name,
            "leak": self.leak,
            "reference": self.reference,
            "extra": self.extra,
            "help": self.help,
        }


@dataclass(frozen=True)
class DisplayStrings:
    """Presentation strings owned by the host application."""

    help_title: str = "Click here to learn more about how to read a leak trace"
    leak_group_help_title: str = "Known likely causes of leak group"
    class_has_leaked: str = "{} has leaked"  # formatted with the class simple name

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> DisplayStrings:
        defaults = cls()
        return cls(
            help_title=str(data.get("help_title", defaults.help_title)),
            leak_group_help_title=str(
                data.get("leak_group_help_title", defaults.leak_group_help_title)
            ),
            class_has_leaked=str(data.get("class_has_leaked", defaults.class_has_leaked)),
        )


@dataclass(frozen=True)
class RenderContext:
    """Immutable configuration for one render pass."""

    group_description: str = ""
    is_leak_group: bool = False
    colors: Colors = field(default_factory=Colors)
    strings: DisplayStrings = field(default_factory=DisplayStrings)

    @classmethod
    def for_instances(
        cls,
        instances: Sequence[LeakingInstanceSummary],
        group_description: str = "",
        colors: Colors | None = None,
        strings: DisplayStrings | None = None,
    ) -> RenderContext:
        """Build a context; a non-empty ``instances`` makes it a leak group."""
        return cls(
            group_description=group_description,
            is_leak_group=len(instances) > 0,
            colors=colors or Colors(),
            strings=strings or DisplayStrings(),
        )
