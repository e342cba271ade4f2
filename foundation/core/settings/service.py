"""
SettingsService - Typed key/value settings with persistence.

Usage:
    settings = locator.get_system(SettingsService)
    settings.set("volume", 7)
    volume = settings.get("volume", 5, int)
"""
from typing import Any, Dict, List, Optional, Type, TypeVar
from pydantic import TypeAdapter, ValidationError
from loguru import logger

from foundation.core.base_system import BaseSystem
from foundation.core.signal import Signal
from .storage import SettingsStorage, JsonFileSettingsStorage

T = TypeVar('T')


class SettingsService(BaseSystem):
    """
    Persistent key/value store.

    The backend is the SettingsStorage registered in the locator; without
    one, a JSON file at config.storage.settings_path is used.

    Signals:
        changed(key, value): after set(); value is None after remove()
    """

    def __init__(self, locator=None, config=None, storage: Optional[SettingsStorage] = None):
        super().__init__(locator, config)
        self._storage = storage
        self._values: Optional[Dict[str, Any]] = None
        self._adapters: Dict[Any, TypeAdapter] = {}
        self.changed = Signal("SettingsChanged")

    async def initialize(self):
        """Load stored values."""
        self._ensure_loaded()
        logger.info(f"SettingsService initialized ({len(self._values)} keys)")
        await super().initialize()

    async def shutdown(self):
        """Persist values on shutdown."""
        if self._values is not None:
            self.save()
        await super().shutdown()

    @property
    def storage(self) -> SettingsStorage:
        """Lazy access to the storage backend."""
        if self._storage is None:
            try:
                self._storage = self.locator.get_system(SettingsStorage)
            except (KeyError, AttributeError):
                path = "settings.json"
                if self.config is not None:
                    path = self.config.data.storage.settings_path
                self._storage = JsonFileSettingsStorage(path)
                logger.debug(f"SettingsService using JSON storage at {path}")
        return self._storage

    @property
    def autosave(self) -> bool:
        if self.config is None:
            return True
        return self.config.data.storage.autosave

    # --- Access ---

    def get(self, key: str, default: Any = None, value_type: Optional[Type[T]] = None) -> Any:
        """
        Read a setting.

        Args:
            key: Setting name
            default: Returned when the key is missing or invalid
            value_type: Validate/convert the stored value to this type

        Returns:
            Stored value, converted when value_type is given, else default
        """
        values = self._ensure_loaded()
        if key not in values:
            return default

        raw = values[key]
        if value_type is None:
            return raw
        try:
            return self._adapter(value_type).validate_python(raw)
        except ValidationError as e:
            logger.warning(f"Setting '{key}' is not a valid {value_type}: {e.errors()[0]['msg']}")
            return default

    def set(self, key: str, value: Any) -> None:
        """
        Store a setting.

        Values are dumped to JSON-compatible form (pydantic models become
        dicts, datetimes become ISO strings); read them back with get(key,
        value_type=...).
        """
        if not key:
            raise ValueError("Setting key must be a non-empty string")

        stored = self._adapter(type(value)).dump_python(value, mode="json")
        values = self._ensure_loaded()
        if key in values and values[key] == stored:
            return

        updated = dict(values)
        updated[key] = stored
        self._commit(updated)
        self.changed.emit(key, value)

    def contains(self, key: str) -> bool:
        return key in self._ensure_loaded()

    def __contains__(self, key: str) -> bool:
        return self.contains(key)

    def remove(self, key: str) -> bool:
        """Delete a setting. Returns False if it did not exist."""
        values = self._ensure_loaded()
        if key not in values:
            return False
        updated = dict(values)
        del updated[key]
        self._commit(updated)
        self.changed.emit(key, None)
        return True

    def keys(self) -> List[str]:
        return list(self._ensure_loaded())

    def clear(self) -> None:
        removed = list(self._ensure_loaded())
        self._commit({})
        for key in removed:
            self.changed.emit(key, None)

    # --- Persistence ---

    def save(self) -> None:
        """Write all values to the storage backend."""
        self.storage.save(dict(self._ensure_loaded()))

    def reload(self) -> None:
        """Discard in-memory values and read them again from storage."""
        self._values = None
        self._ensure_loaded()

    def _commit(self, values: Dict[str, Any]) -> None:
        # Storage first: a failing backend leaves the in-memory values untouched.
        if self.autosave:
            self.storage.save(dict(values))
        self._values = values

    def _ensure_loaded(self) -> Dict[str, Any]:
        if self._values is None:
            self._values = dict(self.storage.load())
        return self._values

    def _adapter(self, value_type: Any) -> TypeAdapter:
        adapter = self._adapters.get(value_type)
        if adapter is None:
            adapter = TypeAdapter(value_type)
            self._adapters[value_type] = adapter
        return adapter
