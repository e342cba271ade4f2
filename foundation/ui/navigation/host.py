"""
Navigation hosts - the platform side of navigation.

A host owns the page history of one presentation surface (a Qt stacked
widget, a window, an in-memory stack). Route actions call host.show(...);
NavigationService.go_back() calls host.go_back().
"""
from typing import Any, List, Optional
from loguru import logger

from foundation.core.signal import Signal


class NavigationHost:
    """Base class/Interface for navigation hosts."""

    @property
    def can_go_back(self) -> bool:
        return False

    def go_back(self) -> bool:
        """Pop the current page. Returns False if there is nothing to pop."""
        return False


class PageStackHost(NavigationHost):
    """
    In-memory page stack.

    Stands in for a platform frame in headless apps and tests; Qt front
    ends can drive a QStackedWidget from page_changed.

    Signals:
        page_changed(page): new current page (None when the stack empties)
    """

    def __init__(self):
        self._stack: List[Any] = []
        self.page_changed = Signal("PageChanged")

    @property
    def current(self) -> Optional[Any]:
        return self._stack[-1] if self._stack else None

    @property
    def history(self) -> List[Any]:
        """Pages from oldest to current."""
        return list(self._stack)

    @property
    def can_go_back(self) -> bool:
        return len(self._stack) > 1

    def show(self, page: Any) -> None:
        """Push a page and make it current."""
        self._stack.append(page)
        logger.debug(f"Showing page: {page!r}")
        self.page_changed.emit(page)

    def go_back(self) -> bool:
        if not self.can_go_back:
            logger.debug("go_back ignored: no previous page")
            return False
        self._stack.pop()
        self.page_changed.emit(self.current)
        return True

    def clear(self) -> None:
        self._stack.clear()
        self.page_changed.emit(None)
