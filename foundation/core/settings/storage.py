"""
Settings storage backends.

A backend only loads and saves a flat dict of JSON-compatible values;
typing and defaults are handled by SettingsService.
"""
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional, Union
import json
from loguru import logger


class SettingsStorage(ABC):
    """Pluggable persistence for SettingsService."""

    @abstractmethod
    def load(self) -> Dict[str, Any]:
        """Return all stored values. Missing storage yields an empty dict."""
        pass

    @abstractmethod
    def save(self, values: Dict[str, Any]) -> None:
        """Replace the stored values."""
        pass


class MemorySettingsStorage(SettingsStorage):
    """Keeps values in memory. Useful for tests and previews."""

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._values: Dict[str, Any] = dict(initial or {})
        self.save_count = 0

    def load(self) -> Dict[str, Any]:
        return dict(self._values)

    def save(self, values: Dict[str, Any]) -> None:
        self._values = dict(values)
        self.save_count += 1


class JsonFileSettingsStorage(SettingsStorage):
    """
    Stores settings in a JSON file.

    Args:
        path: File location; parent directories are created on save
    """

    def __init__(self, path: Union[str, Path] = "settings.json"):
        self.path = Path(path)

    def load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning(f"Failed to read settings from {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring settings file {self.path}: expected an object")
            return {}
        return data

    def save(self, values: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(values, f, indent=2)
        tmp_path.replace(self.path)
        logger.debug(f"Settings saved to {self.path}")
