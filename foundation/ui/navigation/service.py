"""
Navigation Service - Resolves navigation requests through the route table.

The service keeps no page state of its own: the current page belongs to the
attached NavigationHost. Each navigate() call is independent.
"""
from typing import Optional
from loguru import logger

from foundation.core.base_system import BaseSystem
from foundation.core.decorators import system
from foundation.core.errors import NavigationError, RouteNotFoundError
from foundation.core.signal import Signal
from .host import NavigationHost
from .routing import RoutingService


@system(depends_on=[RoutingService])
class NavigationService(BaseSystem):
    """
    Centralized navigation entry point.

    Usage:
        nav = locator.get_system(NavigationService)
        nav.attach_host(page_host)
        nav.navigate("/Page2")
        nav.go_back()

    Signals:
        navigated(path): after a route action ran successfully
    """

    def __init__(self, locator=None, config=None, routing: Optional[RoutingService] = None):
        super().__init__(locator, config)
        self._routing = routing
        self._host: Optional[NavigationHost] = None
        self.navigated = Signal("Navigated")

    async def initialize(self):
        await super().initialize()
        logger.info("NavigationService initialized")

    async def shutdown(self):
        self._host = None
        await super().shutdown()
        logger.info("NavigationService shutdown")

    @property
    def routing(self) -> RoutingService:
        """Lazy access to RoutingService."""
        if self._routing is None:
            if self.locator is None:
                raise NavigationError("NavigationService has no RoutingService")
            try:
                self._routing = self.locator.get_system(RoutingService)
            except KeyError:
                raise NavigationError("RoutingService is not registered") from None
        return self._routing

    # --- Host ---

    @property
    def host(self) -> Optional[NavigationHost]:
        return self._host

    def attach_host(self, host: Optional[NavigationHost]) -> None:
        """Attach the platform host used for back navigation."""
        self._host = host
        logger.debug(f"Navigation host attached: {host!r}")

    # --- Navigation ---

    def navigate(self, path: str) -> None:
        """
        Run the action registered for path.

        Raises:
            RouteNotFoundError: If no route is registered for path
        """
        action = self.routing.resolve(path)
        if action is None:
            logger.warning(f"Navigation failed, unknown route: {path}")
            raise RouteNotFoundError(path)

        logger.info(f"Navigating: {path}")
        action()
        self.navigated.emit(path)

    def try_navigate(self, path: str) -> bool:
        """
        Like navigate(), but returns False for unknown routes.

        Returns:
            True if a route action ran
        """
        try:
            self.navigate(path)
        except RouteNotFoundError:
            return False
        return True

    @property
    def can_go_back(self) -> bool:
        return self._host is not None and self._host.can_go_back

    def go_back(self) -> bool:
        """
        Return to the previous page. Does not consult the route table.

        Returns:
            False if the host had nothing to go back to

        Raises:
            NavigationError: If no host is attached
        """
        if self._host is None:
            raise NavigationError("No navigation host attached")
        went_back = self._host.go_back()
        if went_back:
            logger.info("Navigated back")
        return went_back
