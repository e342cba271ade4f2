"""
Messenger - Type-keyed pub/sub with weakly held subscribers.

Publishers and subscribers never reference each other. A subscriber opts in
to a message type by decorating a method with @receives(MessageType); the
Messenger keeps only a weak reference to the subscriber, so a dropped
view-model never stays alive because it was subscribed.
"""
import asyncio
import contextvars
import inspect
import weakref
from typing import Any, Callable, Dict, FrozenSet, List, Optional, Set, Tuple
from loguru import logger

from foundation.core.base_system import BaseSystem

ErrorHandler = Callable[[BaseException, Any, Any], None]

# Subscriber locks held by the current task. Nested publishes from a handler
# pass through locks their own delivery already holds.
_held_locks: contextvars.ContextVar[FrozenSet[int]] = contextvars.ContextVar(
    "messenger_held_locks", default=frozenset()
)


def declared_message_types(subscriber_cls: type) -> Dict[type, str]:
    """
    Collect the handlers a class declares via @receives.

    Returns:
        Mapping of message type -> handler method name, in declaration
        order. Handlers are looked up by name at delivery time, so a
        subclass that overrides the method (decorated or not) is called.
    """
    handlers: Dict[type, str] = {}
    for klass in reversed(subscriber_cls.__mro__):
        for name, attr in vars(klass).items():
            func = attr.__func__ if isinstance(attr, (staticmethod, classmethod)) else attr
            marks = getattr(attr, "_received_messages", None) or getattr(func, "_received_messages", ())
            for message_type in marks:
                handlers[message_type] = name
    return handlers


def log_and_raise(error: BaseException, message: Any, subscriber: Any) -> None:
    """Default error handler: log the failure and propagate it to the publisher."""
    logger.error(
        f"Error delivering {type(message).__name__} to "
        f"{type(subscriber).__name__}: {error!r}"
    )
    raise error


class _Entry:
    """One (subscriber, message type) registration."""

    __slots__ = ("ref", "handler", "lock")

    def __init__(self, ref: weakref.ref, handler: str, lock: asyncio.Lock):
        self.ref = ref
        self.handler = handler
        self.lock = lock


class Subscription:
    """
    Handle returned by Messenger.subscribe().

    Disposing the handle removes every registration made for the subscriber.
    Usable as a context manager:

        with messenger.subscribe(listener):
            await messenger.publish(Ping())
    """

    def __init__(self, messenger: 'Messenger', subscriber: Any, message_types: List[type]):
        self._messenger = messenger
        self._subscriber_ref = weakref.ref(subscriber)
        self.message_types = tuple(message_types)
        self._disposed = not message_types

    @property
    def is_active(self) -> bool:
        return not self._disposed and self._subscriber_ref() is not None

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        subscriber = self._subscriber_ref()
        if subscriber is not None:
            self._messenger.unsubscribe(subscriber)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.dispose()

    def __repr__(self):
        names = ", ".join(t.__name__ for t in self.message_types)
        return f"Subscription([{names}], active={self.is_active})"


class Messenger(BaseSystem):
    """
    Message bus keyed by the exact run-time type of the message.

    Delivery order is subscription order. Deliveries to one subscriber are
    serialized, so overlapping publishes never re-enter the same instance.
    A handler may itself await publish() of a message its own subscriber
    receives; that nested delivery runs inline instead of waiting.

    Usage:
        messenger.subscribe(view_model)
        await messenger.publish(ExampleMessage())
        await messenger.publish(ExampleMessage(), await_completion=False)
    """

    def __init__(self, locator=None, config=None):
        super().__init__(locator, config)
        self._entries: Dict[type, List[_Entry]] = {}
        self._subscriptions: Dict[int, Tuple[weakref.ref, Subscription]] = {}
        self._pending: Set[asyncio.Task] = set()
        self._error_handler: ErrorHandler = log_and_raise

    async def initialize(self):
        """Initialize messenger."""
        logger.info("Messenger initialized")
        await super().initialize()

    async def shutdown(self):
        """Wait for in-flight deliveries and drop all subscriptions."""
        await self.wait_idle()
        self._entries.clear()
        self._subscriptions.clear()
        await super().shutdown()

    # --- Error handling ---

    @property
    def error_handler(self) -> ErrorHandler:
        return self._error_handler

    def set_error_handler(self, handler: Optional[ErrorHandler]) -> None:
        """
        Replace the handler called for every failing subscriber.

        The handler receives (error, message, subscriber). Raising from it
        propagates the error to the publisher; returning swallows it.
        Passing None restores the default log-and-raise behavior.
        """
        self._error_handler = handler or log_and_raise

    # --- Subscription ---

    def subscribe(self, subscriber: Any) -> Subscription:
        """
        Register a subscriber for every message type it declares.

        Subscribing an instance twice returns the existing handle and does
        not duplicate delivery.

        Args:
            subscriber: Object with methods decorated by @receives

        Returns:
            Subscription handle
        """
        key = id(subscriber)
        existing = self._subscriptions.get(key)
        if existing is not None and existing[0]() is subscriber:
            return existing[1]

        handlers = declared_message_types(type(subscriber))
        if not handlers:
            logger.warning(f"{type(subscriber).__name__} declares no message handlers; nothing subscribed")
            return Subscription(self, subscriber, [])

        ref = weakref.ref(subscriber, self._make_reaper(key))
        lock = asyncio.Lock()
        for message_type, handler in handlers.items():
            self._entries.setdefault(message_type, []).append(_Entry(ref, handler, lock))

        subscription = Subscription(self, subscriber, list(handlers))
        self._subscriptions[key] = (ref, subscription)
        logger.debug(
            f"Subscribed {type(subscriber).__name__} to: "
            f"{', '.join(t.__name__ for t in handlers)}"
        )
        return subscription

    def unsubscribe(self, subscriber: Any) -> None:
        """
        Remove all registrations of a subscriber.
        Safe to call for instances that were never subscribed.
        """
        key = id(subscriber)
        record = self._subscriptions.get(key)
        if record is None or record[0]() is not subscriber:
            return

        del self._subscriptions[key]
        self._remove_ref(record[0])
        record[1]._disposed = True
        logger.debug(f"Unsubscribed {type(subscriber).__name__}")

    def is_subscribed(self, subscriber: Any) -> bool:
        record = self._subscriptions.get(id(subscriber))
        return record is not None and record[0]() is subscriber

    def subscriber_count(self, message_type: type) -> int:
        """Number of live subscribers for an exact message type."""
        return sum(1 for entry in self._entries.get(message_type, []) if entry.ref() is not None)

    def prune(self) -> int:
        """
        Drop entries whose subscriber has been reclaimed.

        Returns:
            Number of entries removed
        """
        removed = 0
        for message_type in list(self._entries):
            entries = self._entries[message_type]
            alive = [e for e in entries if e.ref() is not None]
            removed += len(entries) - len(alive)
            if alive:
                self._entries[message_type] = alive
            else:
                del self._entries[message_type]
        for key, (ref, _) in list(self._subscriptions.items()):
            if ref() is None:
                del self._subscriptions[key]
        if removed:
            logger.debug(f"Pruned {removed} stale subscription(s)")
        return removed

    def _make_reaper(self, key: int):
        # The callback must not keep the messenger alive.
        messenger_ref = weakref.ref(self)

        def reap(ref):
            messenger = messenger_ref()
            if messenger is None:
                return
            record = messenger._subscriptions.get(key)
            if record is not None and record[0] is ref:
                del messenger._subscriptions[key]
        return reap

    def _remove_ref(self, ref: weakref.ref) -> None:
        for message_type in list(self._entries):
            remaining = [e for e in self._entries[message_type] if e.ref is not ref]
            if remaining:
                self._entries[message_type] = remaining
            else:
                del self._entries[message_type]

    # --- Publishing ---

    async def publish(self, message: Any, await_completion: bool = True) -> int:
        """
        Deliver a message to every live subscriber of its exact type.

        Args:
            message: Any object; type(message) selects the subscribers
            await_completion: Wait for all handlers when True; otherwise
                schedule delivery and return immediately

        Returns:
            Number of subscribers the message was delivered to (0 when not
            awaiting)

        Raises:
            Exception: The handler error re-raised by the error handler, or an
                ExceptionGroup when several handlers failed
        """
        if not await_completion:
            self.post(message)
            return 0
        return await self._deliver(message)

    def post(self, message: Any) -> None:
        """
        Fire-and-forget publish from synchronous code running on the loop.

        Raises:
            RuntimeError: If called without a running event loop
        """
        # A detached delivery never inherits the locks of the task posting it.
        context = contextvars.copy_context()
        context.run(_held_locks.set, frozenset())
        task = asyncio.get_running_loop().create_task(self._deliver(message), context=context)
        self._pending.add(task)
        task.add_done_callback(self._on_task_done)

    async def wait_idle(self) -> None:
        """Wait until all fire-and-forget deliveries have finished."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)

    def _on_task_done(self, task: asyncio.Task) -> None:
        self._pending.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Unobserved message delivery failure: {error!r}")

    def _snapshot(self, message_type: type) -> List[_Entry]:
        entries = self._entries.get(message_type)
        if not entries:
            return []

        alive = [e for e in entries if e.ref() is not None]
        if len(alive) != len(entries):
            logger.debug(f"Pruned {len(entries) - len(alive)} stale {message_type.__name__} subscriber(s)")
            if alive:
                self._entries[message_type] = alive
            else:
                del self._entries[message_type]
        return list(alive)

    async def _deliver(self, message: Any) -> int:
        entries = self._snapshot(type(message))
        delivered = 0
        errors: List[Exception] = []

        for entry in entries:
            subscriber = entry.ref()
            if subscriber is None:
                continue
            try:
                await self._locked_invoke(entry, subscriber, message)
                delivered += 1
            except Exception as e:
                try:
                    self._error_handler(e, message, subscriber)
                except Exception as reraised:
                    errors.append(reraised)

        if len(errors) == 1:
            raise errors[0]
        if errors:
            raise ExceptionGroup(
                f"{len(errors)} handlers failed for {type(message).__name__}", errors
            )
        return delivered

    async def _locked_invoke(self, entry: _Entry, subscriber: Any, message: Any) -> None:
        held = _held_locks.get()
        lock_id = id(entry.lock)
        if lock_id in held:
            await self._invoke(entry.handler, subscriber, message)
            return

        async with entry.lock:
            token = _held_locks.set(held | {lock_id})
            try:
                await self._invoke(entry.handler, subscriber, message)
            finally:
                _held_locks.reset(token)

    @staticmethod
    async def _invoke(handler: str, subscriber: Any, message: Any) -> None:
        result = getattr(subscriber, handler)(message)
        if inspect.isawaitable(result):
            await result
