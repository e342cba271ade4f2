from typing import Any, Optional
import json
import os
from pydantic import BaseModel, Field, ValidationError
from loguru import logger
from .signal import Signal


# --- Settings Models ---
class GeneralSettings(BaseModel):
    app_name: str = "Foundation App"
    debug_mode: bool = True
    log_dir: Optional[str] = "logs"


class StorageSettings(BaseModel):
    settings_path: str = "settings.json"
    autosave: bool = True


class AppConfig(BaseModel):
    general: GeneralSettings = Field(default_factory=GeneralSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)


# --- Manager ---
class ConfigManager:
    """
    Manages application configuration with persistence and reactivity.

    Args:
        filepath: JSON or TOML file. None keeps the config in memory only.
    """
    def __init__(self, filepath: Optional[str] = "config.json"):
        self.filepath = filepath
        self._data = AppConfig()
        self.on_changed = Signal("ConfigChanged")
        if self.filepath:
            self._load()

    @property
    def data(self) -> AppConfig:
        return self._data

    def update(self, section: str, key: str, value: Any):
        """Update a setting, validate via Pydantic, autosave, and emit change event."""
        if section not in AppConfig.model_fields:
            raise ValueError(f"Invalid section: {section}")

        section_obj = getattr(self._data, section)
        if key not in type(section_obj).model_fields:
            raise ValueError(f"Invalid key: {key} in section {section}")

        candidate = section_obj.model_dump()
        candidate[key] = value
        try:
            validated = type(section_obj).model_validate(candidate)
        except ValidationError as e:
            raise ValueError(f"Invalid value for {section}.{key}: {e}") from e

        setattr(self._data, section, validated)
        self._save()
        self.on_changed.emit(section, key, getattr(validated, key))

    def get(self, section: str, key: str) -> Any:
        section_obj = getattr(self._data, section)
        return getattr(section_obj, key)

    def _load(self):
        """Load settings from JSON or TOML file if present; otherwise keep defaults."""
        if os.path.isfile(self.filepath):
            try:
                if self.filepath.endswith('.toml'):
                    import tomllib
                    with open(self.filepath, "rb") as f:
                        raw = tomllib.load(f)
                else:
                    with open(self.filepath, "r", encoding="utf-8") as f:
                        raw = json.load(f)
                self._data = AppConfig.model_validate(raw)
                logger.debug(f"Config loaded from {self.filepath}")
            except (OSError, ValueError) as e:
                logger.error(f"Failed to load config from {self.filepath}: {e}")
                self._save()
        else:
            self._save()

    def _save(self):
        """Persist current config to JSON file."""
        if not self.filepath or self.filepath.endswith('.toml'):
            return
        try:
            dirname = os.path.dirname(self.filepath)
            if dirname:
                os.makedirs(dirname, exist_ok=True)
            with open(self.filepath, "w", encoding="utf-8") as f:
                json.dump(self._data.model_dump(), f, indent=4)
        except OSError as e:
            logger.error(f"Failed to save config to {self.filepath}: {e}")
