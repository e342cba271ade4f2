"""
Foundation Core - Application Infrastructure.

Provides core systems for building MVVM applications:
- ServiceLocator: Dependency resolution and system management
- BaseSystem: Abstract base for all systems
- ConfigManager: Configuration with persistence
- Messenger: Type-keyed pub/sub with weakly held subscribers
- SettingsService: Persistent typed key/value settings

Usage:
    from foundation.core import ServiceLocator, Messenger, receives

    locator = ServiceLocator(ConfigManager("config.json"))
    locator.register_system(Messenger)
    await locator.start_all()
"""
from .errors import (
    FoundationError,
    ArgumentRequiredError,
    DependencyResolutionError,
    NavigationError,
    RouteNotFoundError,
)
from .signal import Signal
from .base_system import BaseSystem
from .config import ConfigManager, AppConfig, GeneralSettings, StorageSettings
from .locator import ServiceLocator
from .decorators import system, receives
from .messaging import Messenger, Subscription, log_and_raise
from .settings import (
    SettingsService,
    SettingsStorage,
    MemorySettingsStorage,
    JsonFileSettingsStorage,
)

__all__ = [
    # Core infrastructure
    "BaseSystem",
    "ServiceLocator",
    "Signal",

    # Errors
    "FoundationError",
    "ArgumentRequiredError",
    "DependencyResolutionError",
    "NavigationError",
    "RouteNotFoundError",

    # Configuration
    "ConfigManager",
    "AppConfig",
    "GeneralSettings",
    "StorageSettings",

    # Messaging
    "Messenger",
    "Subscription",
    "log_and_raise",

    # Settings
    "SettingsService",
    "SettingsStorage",
    "MemorySettingsStorage",
    "JsonFileSettingsStorage",

    # Decorators
    "system",
    "receives",
]
