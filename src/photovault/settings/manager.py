"""Settings file management with validation."""

from __future__ import annotations

import logging
import os
import sys
from copy import deepcopy
from pathlib import Path
from typing import Any

from jsonschema import ValidationError

from ..errors import SettingsLoadError, SettingsValidationError
from ..utils.jsonio import read_json, write_json
from .schema import DEFAULT_SETTINGS, merge_with_defaults

LOGGER = logging.getLogger(__name__)


def default_settings_path() -> Path:
    """Return the default settings.json location for the current platform."""

    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "photovault" / "settings.json"
        return Path.home() / "AppData" / "Roaming" / "photovault" / "settings.json"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "photovault" / "settings.json"
    base = os.environ.get("XDG_CONFIG_HOME")
    if base:
        return Path(base) / "photovault" / "settings.json"
    return Path.home() / ".config" / "photovault" / "settings.json"


class SettingsManager:
    """Load, validate and persist user settings."""

    def __init__(self, path: Path | None = None) -> None:
        self._path = path
        self._data: dict[str, Any] = deepcopy(DEFAULT_SETTINGS)

    @property
    def path(self) -> Path:
        return self._path or default_settings_path()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def load(self) -> None:
        """Load the settings JSON from disk, falling back to defaults if missing."""

        path = self.path
        self._path = path
        payload = None
        if path.exists():
            try:
                payload = read_json(path)
            except (OSError, ValueError) as exc:
                raise SettingsLoadError(f"{path}: {exc}") from exc
        try:
            self._data = merge_with_defaults(payload)
        except ValidationError as exc:
            raise SettingsValidationError(exc.message) from exc
        LOGGER.debug("Loaded settings from %s", path)

    def get(self, key: str, default: Any | None = None) -> Any:
        """Return the value for *key*, supporting dotted access for nested keys."""

        target = self._data
        parts = key.split(".")
        for index, part in enumerate(parts):
            if not isinstance(target, dict) or part not in target:
                return default
            value = target[part]
            if index == len(parts) - 1:
                return value
            target = value
        return default

    def set(self, key: str, value: Any) -> None:
        """Update *key* with *value* and persist the change."""

        if isinstance(value, Path):
            value = str(value)

        candidate = deepcopy(self._data)
        parts = key.split(".")
        target: dict[str, Any] = candidate
        for part in parts[:-1]:
            branch = target.get(part)
            if not isinstance(branch, dict):
                branch = {}
                target[part] = branch
            target = branch
        target[parts[-1]] = value
        try:
            self._data = merge_with_defaults(candidate)
        except ValidationError as exc:
            raise SettingsValidationError(exc.message) from exc
        self._write()

    # ------------------------------------------------------------------
    # Internal utilities
    # ------------------------------------------------------------------
    def _write(self) -> None:
        path = self.path
        self._path = path
        path.parent.mkdir(parents=True, exist_ok=True)
        write_json(path, self._data)


__all__ = ["SettingsManager", "default_settings_path"]
