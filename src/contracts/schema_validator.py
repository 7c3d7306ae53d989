"""JSON Schema validation for solver payloads."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import jsonschema

_SCHEMA_ROOT = Path(__file__).resolve().parent / "schemas"


class SchemaValidationError(RuntimeError):
    """Exception raised when a payload fails validation."""

    def __init__(self, code: str, detail: Optional[str] = None) -> None:
        self.code = code
        self.detail = detail
        message = code if detail is None else f"{code}:{detail}"
        super().__init__(message)


@dataclass(frozen=True)
class SchemaDescriptor:
    """Descriptor that binds a payload type to its schema file."""

    type: str
    version: str
    schema_id: str
    schema_path: str


_CATALOG: Dict[str, SchemaDescriptor] = {
    "SolveReport": SchemaDescriptor(
        type="SolveReport",
        version="1.0",
        schema_id="sudoku-solver/solve-report/1.0",
        schema_path="solve_report.schema.json",
    ),
    "TraceEvent": SchemaDescriptor(
        type="TraceEvent",
        version="1.0",
        schema_id="sudoku-solver/trace-event/1.0",
        schema_path="trace_event.schema.json",
    ),
}
_validator_cache: Dict[str, Any] = {}


def get_schema_descriptor(payload_type: str) -> SchemaDescriptor:
    """Return the schema descriptor for *payload_type*."""

    if payload_type not in _CATALOG:
        raise SchemaValidationError("schema-not-found", payload_type)
    return _CATALOG[payload_type]


def load_schema(descriptor: SchemaDescriptor) -> Dict[str, Any]:
    """Load the schema file of *descriptor* and check its ``$id``."""

    schema = json.loads((_SCHEMA_ROOT / descriptor.schema_path).read_text("utf-8"))
    if schema.get("$id") != descriptor.schema_id:
        raise SchemaValidationError(
            "schema-id-mismatch",
            f"catalog has {descriptor.schema_id!r}, schema has {schema.get('$id')!r}",
        )
    return schema


def _validator_for(payload_type: str) -> Any:
    cached = _validator_cache.get(payload_type)
    if cached is not None:
        return cached
    schema = load_schema(get_schema_descriptor(payload_type))
    jsonschema.Draft202012Validator.check_schema(schema)
    validator = jsonschema.Draft202012Validator(schema)
    _validator_cache[payload_type] = validator
    return validator


def validate_payload(payload: Dict[str, Any], payload_type: str) -> None:
    """Raise :class:`SchemaValidationError` when *payload* breaks its schema.

    The first error in path order is reported.
    """

    validator = _validator_for(payload_type)
    errors = sorted(validator.iter_errors(payload), key=lambda err: [str(part) for part in err.absolute_path])
    if errors:
        first = errors[0]
        location = "/".join(str(part) for part in first.absolute_path) or "<root>"
        raise SchemaValidationError("schema-violation", f"{location}: {first.message}")


__all__ = [
    "SchemaDescriptor",
    "SchemaValidationError",
    "get_schema_descriptor",
    "load_schema",
    "validate_payload",
]
