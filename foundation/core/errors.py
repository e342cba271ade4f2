"""
Foundation exception hierarchy.
"""
from typing import Optional


class FoundationError(Exception):
    """Base class for all framework errors."""
    pass


class ArgumentRequiredError(FoundationError, ValueError):
    """
    Raised when a required dependency is missing at construction time.

    Args:
        argument: Name of the missing constructor argument
        owner: Class (or name) that required it
    """

    def __init__(self, argument: str, owner: Optional[object] = None):
        self.argument = argument
        self.owner = owner
        owner_name = getattr(owner, "__name__", owner)
        if owner_name:
            message = f"Argument required: '{argument}' for {owner_name}"
        else:
            message = f"Argument required: '{argument}'"
        super().__init__(message)


class DependencyResolutionError(FoundationError):
    """Raised when the locator cannot build or order its systems."""
    pass


class NavigationError(FoundationError):
    """Raised when a navigation request cannot be carried out."""
    pass


class RouteNotFoundError(NavigationError, LookupError):
    """Raised when navigating to a path with no registered route."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"No route registered for path: {path!r}")
