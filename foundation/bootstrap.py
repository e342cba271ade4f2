"""
Bootstrap helpers for Foundation applications.

Simplifies application setup and initialization.
"""
from typing import Any, Callable, Dict, List, Optional, Tuple, Type, Union

from loguru import logger

from foundation.core.config import ConfigManager
from foundation.core.locator import ServiceLocator
from foundation.core.messaging import Messenger
from foundation.core.settings import SettingsService
from foundation.ui.navigation import NavigationHost, NavigationService, RoutingService

# Default capability -> implementation table used by with_default_systems().
DEFAULT_SYSTEMS: Dict[type, type] = {
    Messenger: Messenger,
    SettingsService: SettingsService,
    RoutingService: RoutingService,
    NavigationService: NavigationService,
}


class ApplicationBuilder:
    """
    Fluent composition root for Foundation applications.

    Example:
        locator = await (ApplicationBuilder("My App", "config.json")
                         .with_default_systems()
                         .add_system(SettingsStorage, MemorySettingsStorage)
                         .configure_routes(register_pages)
                         .build())
    """

    def __init__(self, name: str = "Foundation App",
                 config: Union[str, ConfigManager, None] = "config.json"):
        """
        Initialize application builder.

        Args:
            name: Application name
            config: Path to a config file, a ConfigManager, or None for an
                in-memory configuration
        """
        self.name = name
        self.config = config
        self._systems: List[Tuple[type, Optional[type]]] = []
        self._instances: List[Tuple[type, Any]] = []
        self._route_configurators: List[Callable[[RoutingService], None]] = []
        self._host: Optional[NavigationHost] = None
        self._use_default_systems = True
        self._logging_configured = False

    def with_default_systems(self, enable: bool = True):
        """
        Include the DEFAULT_SYSTEMS table (Messenger, SettingsService,
        RoutingService, NavigationService).

        Returns:
            Self for chaining
        """
        self._use_default_systems = enable
        return self

    def add_system(self, cls: type, implementation: Optional[type] = None):
        """
        Register a system, optionally bound to a concrete implementation.
        Overrides a default entry registered under the same key.

        Returns:
            Self for chaining
        """
        self._systems.append((cls, implementation))
        return self

    def add_instance(self, cls: type, instance: Any):
        """Register a pre-built object. Returns self for chaining."""
        self._instances.append((cls, instance))
        return self

    def configure_routes(self, configurator: Callable[[RoutingService], None]):
        """
        Add a callback that registers routes before any system starts.

        Returns:
            Self for chaining
        """
        self._route_configurators.append(configurator)
        return self

    def with_navigation_host(self, host: NavigationHost):
        """Attach a navigation host to NavigationService on build."""
        self._host = host
        return self

    def with_logging(self, enable: bool = True):
        """
        Configure logging setup.

        Returns:
            Self for chaining
        """
        self._logging_configured = enable
        return self

    def _make_config(self) -> ConfigManager:
        if isinstance(self.config, ConfigManager):
            return self.config
        return ConfigManager(self.config)

    async def build(self) -> ServiceLocator:
        """
        Register, configure and start all systems.

        Returns:
            ServiceLocator with all systems started
        """
        config = self._make_config()

        # 1. Setup logging
        if self._logging_configured:
            from foundation.core.logging import setup_logging
            setup_logging(config.data.general.debug_mode, config.data.general.log_dir)
        logger.info(f"Starting {self.name}")

        # 2. Create the locator
        locator = ServiceLocator(config)

        # 3. Instances first so systems can have them injected
        for cls, instance in self._instances:
            locator.register_instance(cls, instance)

        # 4. Defaults, then custom systems (custom entries override)
        table: Dict[type, Optional[type]] = {}
        if self._use_default_systems:
            table.update(DEFAULT_SYSTEMS)
        for cls, implementation in self._systems:
            table[cls] = implementation
        for cls, implementation in table.items():
            locator.register_system(cls, implementation)

        # 5. Routes are configured before navigation can happen
        if self._route_configurators:
            routing = locator.get_system(RoutingService)
            for configure in self._route_configurators:
                configure(routing)

        if self._host is not None:
            locator.get_system(NavigationService).attach_host(self._host)

        # 6. Start all systems
        await locator.start_all()
        return locator
