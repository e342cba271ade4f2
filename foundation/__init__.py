"""
Foundation - MVVM Application Framework

Services shared by view-models across front ends: dependency resolution,
a view-model base class, settings, a messenger and route-based navigation.
"""

# Core systems
from foundation.core import (
    BaseSystem,
    ServiceLocator,
    ConfigManager,
    Messenger,
    SettingsService,
    receives,
    system,
)

# UI
from foundation.ui.mvvm import BaseViewModel, BindableProperty, ViewModelProvider
from foundation.ui.navigation import NavigationService, RoutingService, PageStackHost

# Bootstrap
from foundation.bootstrap import ApplicationBuilder, DEFAULT_SYSTEMS

__version__ = "0.1.0"

__all__ = [
    "BaseSystem",
    "ServiceLocator",
    "ConfigManager",
    "Messenger",
    "SettingsService",
    "receives",
    "system",
    "BaseViewModel",
    "BindableProperty",
    "ViewModelProvider",
    "NavigationService",
    "RoutingService",
    "PageStackHost",
    "ApplicationBuilder",
    "DEFAULT_SYSTEMS",
]
