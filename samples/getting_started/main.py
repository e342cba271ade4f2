#!/usr/bin/env python3
"""
Getting Started - Console walkthrough of the Foundation services.

Wires the messenger, settings, routing and navigation the way a front end
does, without a GUI:

    python main.py --greeting "Hi there" --path /Page2
"""
import asyncio
import argparse

from loguru import logger

from foundation.bootstrap import ApplicationBuilder
from foundation.core.context import managed_locator
from foundation.core.decorators import receives
from foundation.core.messaging import Messenger
from foundation.core.settings import MemorySettingsStorage, SettingsService, SettingsStorage
from foundation.ui.mvvm import BaseViewModel, BindableProperty, ViewModelProvider
from foundation.ui.navigation import NavigationService, PageStackHost, RoutingService
from foundation.core.errors import RouteNotFoundError


class ExampleMessage:
    """Published by the main page, handled by Page 2."""
    pass


class Page2ViewModel(BaseViewModel):
    greeting = BindableProperty(default="")

    def __init__(self, messenger: Messenger, settings: SettingsService):
        super().__init__(messenger)
        self.settings = settings

    @receives(ExampleMessage)
    async def on_example(self, message):
        self.greeting = self.settings.get("greeting", "Hello")


def register_pages(host: PageStackHost):
    def configure(routing: RoutingService):
        routing.register_path("/Main", lambda: host.show("MainPage"))
        routing.register_path("/Page2", lambda: host.show("Page2"))
    return configure


async def run(greeting: str, path: str) -> int:
    host = PageStackHost()
    host.page_changed.connect(lambda page: logger.info(f"Current page: {page}"))

    builder = (ApplicationBuilder("Getting Started", None)
               .add_system(SettingsStorage, MemorySettingsStorage)
               .configure_routes(register_pages(host))
               .with_navigation_host(host)
               .with_logging())

    async with managed_locator(builder) as locator:
        settings = locator.get_system(SettingsService)
        settings.set("greeting", greeting)

        vm = ViewModelProvider(locator).get(Page2ViewModel)
        vm.propertyChanged.connect(lambda name, value: logger.info(f"{name} -> {value}"))

        navigation = locator.get_system(NavigationService)
        navigation.navigate("/Main")
        try:
            navigation.navigate(path)
        except RouteNotFoundError as e:
            logger.error(str(e))
            return 1

        await locator.get_system(Messenger).publish(ExampleMessage())
        navigation.go_back()
    return 0


def main():
    parser = argparse.ArgumentParser(description="Foundation getting-started walkthrough")
    parser.add_argument("--greeting", default="Hello from settings")
    parser.add_argument("--path", default="/Page2", help="Route to open after /Main")
    args = parser.parse_args()
    raise SystemExit(asyncio.run(run(args.greeting, args.path)))


if __name__ == "__main__":
    main()
