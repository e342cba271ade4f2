"""
UI Dispatchers - Marshal work onto the UI-owned execution context.

In a Qt application driven by qasync the asyncio loop *is* the Qt event
loop, so AsyncioDispatcher places callbacks on the GUI thread.
"""
import asyncio
import threading
from typing import Any, Callable, Optional
from loguru import logger


class UIDispatcher:
    """Interface for objects that run callbacks on the UI context."""

    def check_access(self) -> bool:
        """Return True if the caller already runs on the UI context."""
        return True

    def invoke(self, callback: Callable, *args: Any) -> None:
        """Run callback on the UI context (now, or as soon as possible)."""
        callback(*args)


class ImmediateDispatcher(UIDispatcher):
    """Runs everything inline. For headless use and tests."""
    pass


class AsyncioDispatcher(UIDispatcher):
    """
    Dispatcher bound to an asyncio event loop and the thread that runs it.

    Args:
        loop: Loop owning the UI. Defaults to the running loop.
        thread_id: Ident of the thread running the loop. When omitted for a
            loop that is not running on the calling thread, the owner thread
            is recorded by the loop itself on its next iteration; until then
            every call is queued on the loop.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None,
                 thread_id: Optional[int] = None):
        self._loop = loop or asyncio.get_running_loop()
        self._thread_id = thread_id
        if self._thread_id is None:
            if self._runs_on_current_thread(self._loop):
                self._thread_id = threading.get_ident()
            else:
                self._loop.call_soon_threadsafe(self._claim_owner_thread)

    @staticmethod
    def _runs_on_current_thread(loop: asyncio.AbstractEventLoop) -> bool:
        try:
            return asyncio.get_running_loop() is loop
        except RuntimeError:
            return False

    def _claim_owner_thread(self) -> None:
        if self._thread_id is None:
            self._thread_id = threading.get_ident()
            logger.debug(f"UI dispatcher bound to thread {self._thread_id}")

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        return self._loop

    @property
    def thread_id(self) -> Optional[int]:
        return self._thread_id

    def check_access(self) -> bool:
        return self._thread_id is not None and threading.get_ident() == self._thread_id

    def invoke(self, callback: Callable, *args: Any) -> None:
        if self.check_access():
            callback(*args)
            return
        if self._loop.is_closed():
            logger.warning(f"UI loop closed, dropping dispatched call: {callback}")
            return
        self._loop.call_soon_threadsafe(callback, *args)
