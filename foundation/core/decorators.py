"""
Decorator Utilities for Foundation.

Provides syntactic sugar for declaring systems and message handlers.
"""
from typing import Type, TypeVar, Optional, List

T = TypeVar('T')


def system(depends_on: Optional[List[Type]] = None, name: Optional[str] = None):
    """
    Decorator to mark a class as a system.

    Args:
        depends_on: List of system types that must start before this one
        name: System name (defaults to class name)

    Usage:
        @system(depends_on=[RoutingService])
        class NavigationService(BaseSystem):
            pass
    """
    def decorator(cls: Type[T]) -> Type[T]:
        cls.depends_on = list(depends_on or [])
        cls._system_name = name or cls.__name__
        return cls
    return decorator


def receives(*message_types: type):
    """
    Decorator marking a method as the handler for one or more message types.

    Each type is a capability tag: an instance passed to
    Messenger.subscribe() will receive messages whose exact type is listed.

    Args:
        *message_types: Message classes handled by the decorated method

    Usage:
        class MainViewModel(BaseViewModel):
            @receives(ExampleMessage)
            async def on_example(self, message):
                self.status = message.text
    """
    if not message_types:
        raise TypeError("receives() needs at least one message type")
    for message_type in message_types:
        if not isinstance(message_type, type):
            raise TypeError(f"receives() expects classes, got {message_type!r}")

    def decorator(func):
        existing = list(getattr(func, "_received_messages", []))
        func._received_messages = existing + [t for t in message_types if t not in existing]
        return func
    return decorator
