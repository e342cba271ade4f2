"""
Context managers for Foundation services.

Provides async context managers for cleaner service lifecycle handling in tests and scripts.
"""
from contextlib import asynccontextmanager
from typing import AsyncIterator, Type, TypeVar
from loguru import logger

from .base_system import BaseSystem
from .locator import ServiceLocator

T = TypeVar('T', bound=BaseSystem)


@asynccontextmanager
async def managed_service(locator: ServiceLocator, service_cls: Type[T]) -> AsyncIterator[T]:
    """
    Async context manager for a single service lifecycle.

    Registers the service if needed, initializes it on enter and shuts it
    down on exit.

    Example:
        async with managed_service(locator, SettingsService) as settings:
            settings.set("theme", "dark")
    """
    try:
        service = locator.get_system(service_cls)
    except KeyError:
        service = locator.register_system(service_cls)

    if not service.is_ready:
        await service.initialize()
        logger.debug(f"managed_service: Initialized {service_cls.__name__}")

    try:
        yield service
    finally:
        if service.is_ready:
            await service.shutdown()
            logger.debug(f"managed_service: Shutdown {service_cls.__name__}")


@asynccontextmanager
async def managed_locator(builder) -> AsyncIterator[ServiceLocator]:
    """
    Async context manager for a full application lifecycle.

    Builds and starts everything configured on an ApplicationBuilder, then
    stops all systems on exit.

    Example:
        async with managed_locator(ApplicationBuilder("Demo", None)) as locator:
            locator.get_system(NavigationService).navigate("/Page2")
    """
    locator = await builder.build()
    logger.info("managed_locator: All systems started")

    try:
        yield locator
    finally:
        await locator.stop_all()
        logger.info("managed_locator: All systems stopped")
