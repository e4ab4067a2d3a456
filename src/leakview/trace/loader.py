"""Load and validate leak documents (JSON or YAML)."""
from __future__ import annotations

import errno
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from jsonschema import Draft202012Validator

from leakview.errors import LeakFileError
from leakview.trace.leak_trace import (
    LeakReference,
    LeakStatus,
    LeakTrace,
    LeakTraceElement,
    LeakingInstanceSummary,
    ReferenceType,
)

logger = logging.getLogger(__name__)

SCHEMA_PATH = Path(__file__).resolve().parent.parent / "schemas" / "leak.schema.json"


@dataclass(frozen=True)
class LeakDocument:
    """A parsed leak document."""

    trace: LeakTrace
    instances: tuple[LeakingInstanceSummary, ...] = ()
    group_description: str = ""

    @property
    def is_leak_group(self) -> bool:
        return len(self.instances) > 0


def _load_schema() -> dict[str, Any]:
    return json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))


def validate_leak_document(data: Any) -> list[str]:
    """Validate leak document data against the schema. Returns list of errors (empty if valid)."""
    validator = Draft202012Validator(_load_schema())
    errors: list[str] = []
    for error in sorted(validator.iter_errors(data), key=lambda e: e.json_path):
        errors.append(f"{error.json_path}: {error.message}")
    return errors


def element_from_dict(data: dict[str, Any]) -> LeakTraceElement:
    """Create a LeakTraceElement from a schema-valid element entry."""
    reference = None
    if data.get("reference"):
        reference = LeakReference(
            display_name=data["reference"]["display_name"],
            type=ReferenceType(data["reference"]["type"]),
        )
    return LeakTraceElement(
        class_name=data["class_name"],
        leak_status=LeakStatus(data["leak_status"]),
        leak_status_reason=data.get("leak_status_reason", ""),
        labels=tuple(data.get("labels", [])),
        reference=reference,
    )


def document_from_dict(data: dict[str, Any]) -> LeakDocument:
    """Build a LeakDocument from already-validated data."""
    raw_elements = data["trace"]["elements"]
    trace = LeakTrace(
        elements=tuple(element_from_dict(e) for e in raw_elements),
        leak_cause_indices=frozenset(
            i for i, e in enumerate(raw_elements) if e.get("may_be_leak_cause")
        ),
    )
    instances = tuple(
        LeakingInstanceSummary.from_dict(i) for i in data.get("leaking_instances", [])
    )
    return LeakDocument(
        trace=trace,
        instances=instances,
        group_description=data.get("group_description", ""),
    )


def parse_leak_document(data: Any, source: str = "<data>") -> LeakDocument:
    """Validate raw data and build a LeakDocument.

    Raises:
        LeakFileError: If the data fails schema validation
    """
    errors = validate_leak_document(data)
    if errors:
        raise LeakFileError(
            f"{source} failed schema validation:\n  " + "\n  ".join(errors),
            errors=errors,
        )
    return document_from_dict(data)


def read_leak_file(path: Path) -> Any:
    """Read raw JSON or YAML leak data from ``path``.

    Raises:
        FileNotFoundError: If the file doesn't exist
        LeakFileError: If the file can't be decoded or parsed
    """
    if not path.exists():
        raise FileNotFoundError(errno.ENOENT, "Leak file not found", str(path))

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise LeakFileError(
            f"Cannot read leak file {path}: encoding error.\n"
            f"Ensure the file is saved as UTF-8."
        ) from e

    # YAML is a superset of JSON, one parser covers both
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise LeakFileError(f"Invalid JSON/YAML in leak file {path}:\n{e}") from e

    if data is None:
        raise LeakFileError(f"Leak file is empty: {path}")
    return data


def load_leak_document(path: str | Path) -> LeakDocument:
    """Load a leak document file and return a validated LeakDocument.

    Args:
        path: Path to a .json, .yaml or .yml leak document

    Returns:
        LeakDocument: Parsed trace, instances and group description

    Raises:
        FileNotFoundError: If the file doesn't exist
        LeakFileError: If the file is malformed or fails schema validation
    """
    path = Path(path)
    document = parse_leak_document(read_leak_file(path), source=str(path))
    logger.debug(
        "Loaded %s: %d elements, %d leaking instances",
        path,
        len(document.trace.elements),
        len(document.instances),
    )
    return document
