"""
Routing Service - Path to action table.

Routes are registered during application configuration and looked up by
NavigationService. Paths are opaque strings ("/Page2", "settings").
"""
import threading
from typing import Callable, Dict, List, Optional
from loguru import logger

from foundation.core.base_system import BaseSystem

RouteAction = Callable[[], object]


class RoutingService(BaseSystem):
    """
    Maps string paths to zero-argument actions.

    Registering an existing path replaces its action. Lookups of unknown
    paths return None instead of raising, so the caller decides how to react.

    Usage:
        routing.register_path("/Page2", lambda: host.show(Page2()))
        action = routing.resolve("/Page2")
    """

    def __init__(self, locator=None, config=None):
        super().__init__(locator, config)
        self._routes: Dict[str, RouteAction] = {}
        self._lock = threading.RLock()

    async def initialize(self):
        logger.info(f"RoutingService initialized ({len(self)} routes)")
        await super().initialize()

    async def shutdown(self):
        await super().shutdown()

    def register_path(self, path: str, action: RouteAction) -> None:
        """
        Register or replace the action for a path.

        Raises:
            ValueError: If path is empty or action is not callable
        """
        if not isinstance(path, str) or not path:
            raise ValueError("Route path must be a non-empty string")
        if not callable(action):
            raise ValueError(f"Route action for {path!r} must be callable")

        with self._lock:
            replaced = path in self._routes
            self._routes[path] = action

        if replaced:
            logger.debug(f"Replaced route: {path}")
        else:
            logger.debug(f"Registered route: {path}")

    def unregister_path(self, path: str) -> bool:
        """Remove a route. Returns False if the path was not registered."""
        with self._lock:
            removed = self._routes.pop(path, None) is not None
        if removed:
            logger.debug(f"Unregistered route: {path}")
        return removed

    def resolve(self, path: str) -> Optional[RouteAction]:
        """
        Look up the action for a path.

        Returns:
            The registered action, or None when the path is unknown
        """
        with self._lock:
            return self._routes.get(path)

    @property
    def paths(self) -> List[str]:
        """Registered paths in registration order."""
        with self._lock:
            return list(self._routes)

    def clear(self) -> None:
        with self._lock:
            self._routes.clear()

    def __contains__(self, path: str) -> bool:
        with self._lock:
            return path in self._routes

    def __len__(self) -> int:
        with self._lock:
            return len(self._routes)
