"""
MVVM ViewModel Infrastructure.

Provides the base class for ViewModels: property change notification
marshaled onto the UI context, plus automatic Messenger subscription.
"""
from typing import Any, Optional
from loguru import logger

from foundation.core.errors import ArgumentRequiredError
from foundation.core.messaging import Messenger, Subscription
from foundation.ui.dispatcher import UIDispatcher
from foundation.ui.mvvm.bindable import BindableProperty, BindableBase


class BaseViewModel(BindableBase):
    """
    Base class for ViewModels.

    - Use BindableProperty descriptors (or set_property) for change notification.
    - Property writes made off the UI thread are forwarded to the dispatcher.
    - The instance subscribes itself to the Messenger; declare handlers
      with @receives.

    Example:
        class MainViewModel(BaseViewModel):
            status = BindableProperty(default="")

            def __init__(self, messenger: Messenger, settings: SettingsService):
                super().__init__(messenger)
                self.settings = settings

            @receives(ExampleMessage)
            async def on_example(self, message):
                self.status = "received"
    """

    def __init__(self, messenger: Messenger, dispatcher: Optional[UIDispatcher] = None):
        if messenger is None:
            raise ArgumentRequiredError("messenger", type(self))
        super().__init__()
        self.messenger = messenger
        self.dispatcher = dispatcher
        self._subscription: Optional[Subscription] = messenger.subscribe(self)

    def set_property(self, name: str, value: Any) -> bool:
        """
        Assign a property on the UI context and notify if it changed.

        Returns:
            True if the value changed. Writes marshaled to the UI thread
            return False because they are applied later.
        """
        if self.dispatcher is not None and not self.dispatcher.check_access():
            self.dispatcher.invoke(super().set_property, name, value)
            return False
        return super().set_property(name, value)

    def on_property_changed(self, property_name: str, value: Any) -> None:
        """Emit a property changed notification for hand-written properties."""
        self.notify_property_changed(property_name, value)

    @property
    def is_disposed(self) -> bool:
        return self._subscription is None

    def dispose(self) -> None:
        """Unsubscribe from the Messenger. Safe to call more than once."""
        if self._subscription is not None:
            self._subscription.dispose()
            self._subscription = None
            logger.debug(f"{self.__class__.__name__} disposed")


__all__ = ["BaseViewModel", "BindableProperty", "BindableBase"]
