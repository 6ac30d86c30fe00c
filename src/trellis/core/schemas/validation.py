"""Shared schema validation utilities.

Trellis validates structured YAML payloads (site configuration) using JSON
Schema. Schemas are stored as YAML files under ``trellis.data/schemas/`` and
loaded in a single, consistent way across the codebase.
"""
from __future__ import annotations

from typing import Any, Dict, List

from jsonschema import Draft202012Validator

from trellis.core.utils.io import read_yaml
from trellis.data import get_data_path


class SchemaValidationError(ValueError):
    """Raised when schema validation fails."""

    def __init__(self, message: str, errors: List[str] | None = None) -> None:
        super().__init__(message)
        self.errors = list(errors or [])


def load_schema(schema_name: str) -> Dict[str, Any]:
    """Load a bundled schema dict, appending ``.yaml`` when no extension is given.

    Raises:
        FileNotFoundError: If schema file doesn't exist.
        ValueError: If schema is not a YAML mapping.
    """
    lowered = schema_name.lower()
    if not (lowered.endswith(".yaml") or lowered.endswith(".yml")):
        schema_name = f"{schema_name}.yaml"

    schema_path = get_data_path("schemas", schema_name)
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_name}")

    data = read_yaml(schema_path, default=None, raise_on_error=True)
    if not isinstance(data, dict):
        raise ValueError(f"Schema {schema_name} is not a mapping")
    return data


def validate_payload(payload: Any, schema_name: str) -> None:
    """Validate ``payload`` against a bundled schema.

    Raises:
        SchemaValidationError: Listing every violation, sorted by location.
    """
    schema = load_schema(schema_name)
    validator = Draft202012Validator(schema)
    errors: List[str] = []
    for err in sorted(validator.iter_errors(payload), key=lambda e: [str(p) for p in e.path]):
        location = ".".join(str(p) for p in err.path) or "<root>"
        errors.append(f"{location}: {err.message}")
    if errors:
        raise SchemaValidationError(
            f"{schema_name} validation failed: " + "; ".join(errors),
            errors=errors,
        )


__all__ = ["SchemaValidationError", "load_schema", "validate_payload"]
