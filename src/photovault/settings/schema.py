"""Schema helpers for the application settings file."""

from __future__ import annotations

from copy import deepcopy
from typing import Any

from jsonschema import Draft202012Validator

from ..config import DEFAULT_ARCHIVE_SIZE, MEMORY_LANE_MAX_WORKERS

SETTINGS_SCHEMA: dict[str, Any] = {
    "$id": "photovault/settings.schema.json",
    "type": "object",
    "required": ["schema", "download", "memory_lane"],
    "properties": {
        "schema": {"const": "photovault/settings@1"},
        "database_path": {"type": ["string", "null"]},
        "download": {
            "type": "object",
            "properties": {
                "archive_size": {"type": "integer"},
            },
            "additionalProperties": True,
        },
        "memory_lane": {
            "type": "object",
            "properties": {
                "max_workers": {"type": "integer", "minimum": 1, "maximum": 64},
            },
            "additionalProperties": True,
        },
    },
    "additionalProperties": True,
}

DEFAULT_SETTINGS: dict[str, Any] = {
    "schema": "photovault/settings@1",
    "database_path": None,
    "download": {
        "archive_size": DEFAULT_ARCHIVE_SIZE,
    },
    "memory_lane": {
        "max_workers": MEMORY_LANE_MAX_WORKERS,
    },
}

_validator = Draft202012Validator(SETTINGS_SCHEMA)


def merge_with_defaults(data: dict[str, Any] | None) -> dict[str, Any]:
    """Merge *data* with :data:`DEFAULT_SETTINGS` and validate the result."""

    merged = deepcopy(DEFAULT_SETTINGS)
    if data:
        for key, value in data.items():
            if key in ("download", "memory_lane") and isinstance(value, dict):
                target = merged.setdefault(key, {})
                for sub_key, sub_value in value.items():
                    target[sub_key] = sub_value
                continue
            merged[key] = value
    _validator.validate(merged)
    return merged


def validate_settings(data: dict[str, Any]) -> None:
    """Validate *data* against the settings schema."""

    _validator.validate(data)


__all__ = ["DEFAULT_SETTINGS", "SETTINGS_SCHEMA", "merge_with_defaults", "validate_settings"]
