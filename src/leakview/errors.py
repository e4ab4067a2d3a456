"""leakview error code registry and exception hierarchy.

Provides structured error codes with helpful messages and next steps.
Each error has:
- Code: LV-EXXX format
- Message: Human-readable description
- Next step: Actionable command or instruction
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional
import sys


class ErrorCode(Enum):
    """leakview error codes."""

    # Configuration errors (E001-E099)
    E001 = "E001"  # Config file not found
    E002 = "E002"  # Invalid config file

    # Contract violations (E100-E199)
    E100 = "E100"  # Position outside the row range
    E101 = "E101"  # Unrecognized leak status
    E102 = "E102"  # Empty leak trace

    # Input file errors (E200-E299)
    E200 = "E200"  # Leak file not found
    E201 = "E201"  # Leak file invalid

    # Output errors (E300-E399)
    E300 = "E300"  # Cannot write output


@dataclass
class ErrorReport:
    """Structured error with code, message, and next step."""

    code: ErrorCode
    message: str
    next_step: str
    details: Optional[str] = None

    def __str__(self) -> str:
        lines = [
            f"LV-{self.code.value}: {self.message}",
        ]
        if self.details:
            lines.append(f"  Details: {self.details}")
        lines.append(f"  Next step: {self.next_step}")
        return "\n".join(lines)

    def print(self, file=None) -> None:
        """Print the error to stderr (or specified file)."""
        print(str(self), file=file or sys.stderr)


# Pre-defined error templates
ERROR_TEMPLATES: dict[ErrorCode, tuple[str, str]] = {
    # (message_template, next_step)
    ErrorCode.E001: (
        "Config file not found: {details}",
        "Check the --config path or unset LEAKVIEW_CONFIG"
    ),
    ErrorCode.E002: (
        "Invalid config file: {details}",
        "Config must be a YAML mapping, see README for the keys"
    ),
    ErrorCode.E100: (
        "Invalid row position: {details}",
        "Query positions in [0, row count) only"
    ),
    ErrorCode.E101: (
        "Unrecognized leak status: {details}",
        "Statuses must be UNKNOWN, NOT_LEAKING or LEAKING"
    ),
    ErrorCode.E102: (
        "Leak trace is empty",
        "A leak trace always ends with the leaking object"
    ),
    ErrorCode.E200: (
        "Leak file not found: {details}",
        "Check the LEAK_FILE path"
    ),
    ErrorCode.E201: (
        "Leak file is invalid: {details}",
        "Run 'leakview validate LEAK_FILE' to see schema errors"
    ),
    ErrorCode.E300: (
        "Cannot write output: {details}",
        "Check directory permissions or use a different --out path"
    ),
}


class LeakViewError(Exception):
    """Base class for leakview failures. Carries the matching error code."""

    code: ErrorCode = ErrorCode.E201


class InvalidPositionError(LeakViewError, IndexError):
    """A row query was made outside [0, row count) or on the wrong row kind."""

    code = ErrorCode.E100

    def __init__(self, position: int, message: str) -> None:
        super().__init__(f"position {position}: {message}")
        self.position = position


class UnknownLeakStatusError(LeakViewError, ValueError):
    """A trace element carries a status outside the three known values."""

    code = ErrorCode.E101

    def __init__(self, status: Any, element_index: Optional[int] = None) -> None:
        where = f" at element {element_index}" if element_index is not None else ""
        super().__init__(f"{status!r}{where}")
        self.status = status
        self.element_index = element_index


class EmptyTraceError(LeakViewError, ValueError):
    """A leak trace with zero elements."""

    code = ErrorCode.E102

    def __init__(self, message: str = "leak trace has no elements") -> None:
        super().__init__(message)


class LeakFileError(LeakViewError, ValueError):
    """A leak document could not be parsed or failed schema validation."""

    code = ErrorCode.E201

    def __init__(self, message: str, errors: Optional[list[str]] = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class ConfigError(LeakViewError, ValueError):
    """A settings file or environment value is malformed."""

    code = ErrorCode.E002


def make_error(code: ErrorCode, details: Optional[str] = None) -> ErrorReport:
    """Create an ErrorReport from a code with optional details.

    Args:
        code: The error code
        details: Optional details to include in the message

    Returns:
        ErrorReport instance ready to print
    """
    template = ERROR_TEMPLATES.get(code, ("Unknown error", "Run with --verbose"))
    message_template, next_step = template

    # Format message with details if present
    if details and "{details}" in message_template:
        message = message_template.format(details=details)
    elif details:
        message = f"{message_template}: {details}"
    else:
        message = message_template.replace(": {details}", "")

    return ErrorReport(
        code=code,
        message=message,
        next_step=next_step,
        details=details if "{details}" not in message_template else None,
    )


# Verbose mode flag (set by CLI)
_verbose_mode: bool = False


def set_verbose(verbose: bool) -> None:
    """Set verbose mode for error output."""
    global _verbose_mode
    _verbose_mode = verbose


def is_verbose() -> bool:
    """Check if verbose mode is enabled."""
    return _verbose_mode


def handle_exception(exc: Exception, code: ErrorCode, details: Optional[str] = None) -> None:
    """Handle an exception with proper error formatting.

    In verbose mode, prints the full traceback.
    Otherwise, prints a formatted error message.

    Args:
        exc: The exception that occurred
        code: The error code to use
        details: Optional additional details
    """
    import traceback

    err = make_error(code, details or str(exc))
    err.print()

    if _verbose_mode:
        print("\n--- Full Traceback ---", file=sys.stderr)
        traceback.print_exc()
