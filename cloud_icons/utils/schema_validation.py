"""
Schema Validation Utilities
===========================
JSON Schema loading and validation helpers.
"""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict

from jsonschema import Draft202012Validator, FormatChecker
from jsonschema.exceptions import ValidationError


@lru_cache(maxsize=32)
def _load_schema(schema_filename: str) -> Dict[str, Any]:
    """Load a schema JSON file from cloud_icons/schemas.

    Args:
        schema_filename: File name under cloud_icons/schemas (for example 'icon_set.schema.json').

    Raises:
        FileNotFoundError: When schema file is missing.
        ValueError: When schema file is not valid JSON or not a JSON object.
    """
    schemas_dir = Path(__file__).resolve().parent.parent / "schemas"
    schema_path = (schemas_dir / schema_filename).resolve()
    if not schema_path.is_relative_to(schemas_dir.resolve()):
        raise ValueError(f"Schema path escapes schemas directory: {schema_filename}")
    if not schema_path.exists():
        raise FileNotFoundError(f"Schema not found: {schema_filename}")

    try:
        with open(schema_path, "r", encoding="utf-8") as f:
            schema = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ValueError(f"Failed to load schema {schema_filename}: {e}")

    if not isinstance(schema, dict):
        raise ValueError(f"Schema {schema_filename} must be a JSON object")
    return schema


def validate_against_schema(payload: Any, schema_filename: str) -> None:
    """Validate payload against a JSON Schema.

    Args:
        payload: Any JSON-serializable object.
        schema_filename: File name under cloud_icons/schemas.

    Raises:
        ValueError: When payload fails validation.
    """
    schema = _load_schema(schema_filename)
    validator = Draft202012Validator(schema, format_checker=FormatChecker())

    errors = sorted(validator.iter_errors(payload), key=lambda e: list(e.path))
    if not errors:
        return

    error: ValidationError = errors[0]
    path = "/".join(str(p) for p in error.path)
    prefix = f"Validation failed at '{path}': " if path else "Validation failed: "
    raise ValueError(prefix + error.message)


def validate_naming_conventions(document: Dict[str, Any]) -> None:
    """Validate a naming conventions document.

    Uses cloud_icons/schemas/naming_conventions.schema.json.
    """
    validate_against_schema(document, "naming_conventions.schema.json")


def validate_icon_set_export(payload: Dict[str, Any]) -> None:
    """Validate an exported icon set, including alias parent references.

    Uses cloud_icons/schemas/icon_set.schema.json.
    """
    validate_against_schema(payload, "icon_set.schema.json")
    _validate_alias_parents(payload)


def _validate_alias_parents(payload: Dict[str, Any]) -> None:
    """Validate constraints not expressible in JSON Schema.

    Every alias must point at an icon or another alias of the same set.
    """
    icons = payload.get("icons") or {}
    aliases = payload.get("aliases") or {}
    for alias, entry in aliases.items():
        parent = entry.get("parent")
        if parent not in icons and parent not in aliases:
            raise ValueError(f"Validation failed at 'aliases/{alias}': unknown parent '{parent}'")


def is_valid_icon_set_export(payload: Any) -> bool:
    """Return True when payload validates as an exported icon set."""
    if not isinstance(payload, dict):
        return False
    try:
        validate_icon_set_export(payload)
        return True
    except ValueError:
        return False
