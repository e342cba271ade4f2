"""
Messaging - Type-keyed publish/subscribe.

Usage:
    from foundation.core.messaging import Messenger
    from foundation.core.decorators import receives

    class Listener:
        @receives(ExampleMessage)
        async def on_example(self, message):
            ...

    messenger.subscribe(listener)
    await messenger.publish(ExampleMessage())
"""
from .messenger import (
    Messenger,
    Subscription,
    ErrorHandler,
    declared_message_types,
    log_and_raise,
)

__all__ = [
    "Messenger",
    "Subscription",
    "ErrorHandler",
    "declared_message_types",
    "log_and_raise",
]
