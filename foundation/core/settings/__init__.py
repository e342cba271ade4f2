"""
Settings - Persistent typed key/value storage.
"""
from .storage import SettingsStorage, MemorySettingsStorage, JsonFileSettingsStorage
from .service import SettingsService

__all__ = [
    "SettingsService",
    "SettingsStorage",
    "MemorySettingsStorage",
    "JsonFileSettingsStorage",
]
