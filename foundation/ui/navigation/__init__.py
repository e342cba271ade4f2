"""
Navigation - Route table, navigation service and hosts.
"""
from .routing import RoutingService, RouteAction
from .host import NavigationHost, PageStackHost
from .service import NavigationService

__all__ = [
    "RoutingService",
    "RouteAction",
    "NavigationService",
    "NavigationHost",
    "PageStackHost",
]
