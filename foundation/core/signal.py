from loguru import logger
from typing import Callable, List


class Signal:
    """
    Synchronous observer used for framework notifications outside Qt
    (config changes, settings writes, navigation).

    Subscribers are called in connection order. A failing subscriber is
    logged and does not stop the others.
    """
    def __init__(self, name: str = "Signal"):
        self.name = name
        self._subscribers: List[Callable] = []

    def connect(self, callback: Callable):
        """Connect a callback to this signal. Connecting twice is a no-op."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)

    def disconnect(self, callback: Callable):
        """Disconnect a callback. Unknown callbacks are ignored."""
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    def emit(self, *args, **kwargs):
        """Call every subscriber with the given arguments."""
        for sub in list(self._subscribers):
            try:
                sub(*args, **kwargs)
            except Exception as e:
                logger.error(f"Signal '{self.name}' error in subscriber '{sub}': {e}")

    def __len__(self) -> int:
        return len(self._subscribers)
