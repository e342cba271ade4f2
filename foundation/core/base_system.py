from abc import ABC, abstractmethod
from typing import TYPE_CHECKING
from loguru import logger

if TYPE_CHECKING:
    from .locator import ServiceLocator
    from .config import ConfigManager


class BaseSystem(ABC):
    """
    Abstract base class for all framework services (Messenger, Settings,
    Routing, Navigation, ...).
    Ensures consistent initialization and access to the locator and config.

    Systems that declare message handlers with @receives are subscribed to
    the Messenger automatically during initialize():

        from foundation.core.decorators import receives

        class AuditService(BaseSystem):
            @receives(UserLoggedIn)
            async def on_login(self, message):
                ...
    """
    def __init__(self, locator: 'ServiceLocator', config: 'ConfigManager'):
        self.locator = locator
        self.config = config
        self._is_ready = False
        self._subscription = None

    @abstractmethod
    async def initialize(self):
        """
        Async initialization logic.
        Called by the ServiceLocator during start_all().
        """
        self._auto_subscribe_messages()
        self._is_ready = True

    def _auto_subscribe_messages(self) -> None:
        """Subscribe to the Messenger if this system declares any handlers."""
        from .messaging import Messenger, declared_message_types

        if isinstance(self, Messenger) or not declared_message_types(type(self)):
            return

        try:
            messenger = self.locator.get_system(Messenger)
        except (KeyError, AttributeError):
            logger.warning(f"{self.__class__.__name__}: Messenger not available for auto-subscription")
            return

        self._subscription = messenger.subscribe(self)
        logger.debug(f"{self.__class__.__name__} auto-subscribed to messenger")

    @abstractmethod
    async def shutdown(self):
        """
        Cleanup logic.
        """
        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None
        self._is_ready = False

    @property
    def is_ready(self) -> bool:
        return self._is_ready

    async def __aenter__(self):
        """Async context manager entry: Initialize system."""
        if not self._is_ready:
            await self.initialize()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit: Shutdown system."""
        if self._is_ready:
            await self.shutdown()
