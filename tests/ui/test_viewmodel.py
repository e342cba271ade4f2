"""
Unit Tests for BaseViewModel.

Covers:
- BindableProperty change notification
- Messenger auto-subscription
- UI dispatcher marshaling
- ViewModelProvider resolution
"""
import asyncio
import threading
import pytest
from typing import Optional

from foundation.core.decorators import receives
from foundation.core.errors import ArgumentRequiredError
from foundation.core.messaging import Messenger
from foundation.core.settings import SettingsService, SettingsStorage, MemorySettingsStorage
from foundation.ui.dispatcher import AsyncioDispatcher, ImmediateDispatcher, UIDispatcher
from foundation.ui.mvvm import BaseViewModel, BindableProperty, ViewModelProvider


class ExampleMessage:
    def __init__(self, text=""):
        self.text = text


class MainViewModel(BaseViewModel):
    status = BindableProperty(default="")
    count = BindableProperty(default=0, coerce=lambda x: max(0, int(x)))

    def __init__(self, messenger: Messenger, dispatcher: Optional[UIDispatcher] = None):
        super().__init__(messenger, dispatcher)
        self.messages = []

    @receives(ExampleMessage)
    async def on_example(self, message):
        self.messages.append(message)
        self.status = message.text


class SettingsViewModel(BaseViewModel):
    theme = BindableProperty(default="light")

    def __init__(self, messenger: Messenger, settings: SettingsService):
        super().__init__(messenger)
        self.settings = settings
        self.theme = settings.get("theme", "light")


class DeferredDispatcher(UIDispatcher):
    """Pretends every caller is off the UI thread and queues the work."""

    def __init__(self):
        self.queue = []

    def check_access(self):
        return False

    def invoke(self, callback, *args):
        self.queue.append((callback, args))

    def run_pending(self):
        while self.queue:
            callback, args = self.queue.pop(0)
            callback(*args)


def record_changes(vm):
    changes = []
    vm.propertyChanged.connect(lambda name, value: changes.append((name, value)))
    return changes


class TestConstruction:

    def test_messenger_required(self, qapp):
        with pytest.raises(ArgumentRequiredError) as info:
            MainViewModel(None)
        assert info.value.argument == "messenger"

    def test_subscribes_itself(self, qapp, messenger):
        vm = MainViewModel(messenger)

        assert messenger.is_subscribed(vm)
        assert not vm.is_disposed

    def test_dispose_unsubscribes(self, qapp, messenger):
        vm = MainViewModel(messenger)
        vm.dispose()
        vm.dispose()

        assert vm.is_disposed
        assert not messenger.is_subscribed(vm)


class TestPropertyChange:

    def test_default_value(self, qapp, messenger):
        vm = MainViewModel(messenger)
        assert vm.status == ""
        assert vm.count == 0

    def test_set_emits_property_changed(self, qapp, messenger):
        vm = MainViewModel(messenger)
        changes = record_changes(vm)

        vm.status = "ready"

        assert vm.status == "ready"
        assert changes == [("status", "ready")]

    def test_same_value_does_not_emit(self, qapp, messenger):
        vm = MainViewModel(messenger)
        vm.status = "ready"
        changes = record_changes(vm)

        vm.status = "ready"

        assert changes == []

    def test_coerce(self, qapp, messenger):
        vm = MainViewModel(messenger)
        vm.count = "-5"
        assert vm.count == 0
        vm.count = "3"
        assert vm.count == 3

    def test_set_property_for_plain_attribute(self, qapp, messenger):
        vm = MainViewModel(messenger)
        changes = record_changes(vm)

        assert vm.set_property("title", "Home") is True
        assert vm.set_property("title", "Home") is False

        assert vm._title == "Home"
        assert changes == [("title", "Home")]


class TestMessaging:

    @pytest.mark.asyncio
    async def test_receives_messages(self, qapp, messenger):
        vm = MainViewModel(messenger)
        changes = record_changes(vm)
        message = ExampleMessage("hello")

        await messenger.publish(message)

        assert vm.messages == [message]
        assert vm.status == "hello"
        assert changes == [("status", "hello")]

    @pytest.mark.asyncio
    async def test_disposed_view_model_gets_nothing(self, qapp, messenger):
        vm = MainViewModel(messenger)
        vm.dispose()

        await messenger.publish(ExampleMessage("ignored"))

        assert vm.messages == []


class TestDispatcher:

    def test_immediate_dispatcher(self, qapp, messenger):
        vm = MainViewModel(messenger, ImmediateDispatcher())
        vm.status = "now"
        assert vm.status == "now"

    def test_off_thread_writes_are_marshaled(self, qapp, messenger):
        dispatcher = DeferredDispatcher()
        vm = MainViewModel(messenger, dispatcher)
        changes = record_changes(vm)

        vm.status = "later"

        assert vm.status == ""
        assert changes == []

        dispatcher.run_pending()

        assert vm.status == "later"
        assert changes == [("status", "later")]

    @pytest.mark.asyncio
    async def test_asyncio_dispatcher_runs_on_loop_thread(self, qapp, messenger):
        ui_thread = threading.get_ident()
        vm = MainViewModel(messenger, AsyncioDispatcher())
        notified_on = []
        vm.propertyChanged.connect(lambda name, value: notified_on.append(threading.get_ident()))

        def worker():
            vm.status = "from worker"

        await asyncio.to_thread(worker)
        await asyncio.sleep(0)

        assert vm.status == "from worker"
        assert notified_on == [ui_thread]

    @pytest.mark.asyncio
    async def test_asyncio_dispatcher_check_access(self):
        dispatcher = AsyncioDispatcher()
        assert dispatcher.check_access()
        assert dispatcher.loop is asyncio.get_running_loop()

        off_thread = await asyncio.to_thread(dispatcher.check_access)
        assert off_thread is False

    @pytest.mark.asyncio
    async def test_asyncio_dispatcher_built_on_worker_thread(self, qapp, messenger):
        ui_thread = threading.get_ident()
        loop = asyncio.get_running_loop()
        worker_thread = []

        def build():
            worker_thread.append(threading.get_ident())
            dispatcher = AsyncioDispatcher(loop)
            return dispatcher, dispatcher.check_access()

        dispatcher, access_on_worker = await asyncio.to_thread(build)
        await asyncio.sleep(0)

        assert access_on_worker is False
        assert dispatcher.thread_id == ui_thread
        assert dispatcher.check_access()
        assert await asyncio.to_thread(dispatcher.check_access) is False

        vm = MainViewModel(messenger, dispatcher)
        notified_on = []
        vm.propertyChanged.connect(lambda name, value: notified_on.append(threading.get_ident()))

        def worker():
            vm.status = "from worker"

        await asyncio.to_thread(worker)
        await asyncio.sleep(0)

        assert vm.status == "from worker"
        assert notified_on == [ui_thread]
        assert worker_thread[0] != ui_thread

    def test_asyncio_dispatcher_explicit_thread_id(self):
        loop = asyncio.new_event_loop()
        try:
            dispatcher = AsyncioDispatcher(loop, thread_id=threading.get_ident())
            assert dispatcher.check_access()
        finally:
            loop.close()


class TestProvider:

    def test_resolves_dependencies(self, qapp, locator):
        messenger = locator.register_system(Messenger)
        locator.register_system(SettingsStorage, MemorySettingsStorage)
        settings = locator.register_system(SettingsService)
        settings.set("theme", "dark")

        provider = ViewModelProvider(locator)
        vm = provider.get(SettingsViewModel)

        assert vm.messenger is messenger
        assert vm.settings is settings
        assert vm.theme == "dark"

    def test_caches_instances(self, qapp, locator):
        locator.register_system(Messenger)
        provider = ViewModelProvider(locator)

        assert provider.get(MainViewModel) is provider.get(MainViewModel)
        assert provider.get(MainViewModel).dispatcher is None

    def test_injects_registered_dispatcher(self, qapp, locator):
        locator.register_system(Messenger)
        dispatcher = locator.register_instance(UIDispatcher, ImmediateDispatcher())

        vm = ViewModelProvider(locator).get(MainViewModel)

        assert vm.dispatcher is dispatcher

    def test_missing_messenger(self, qapp, locator):
        with pytest.raises(ArgumentRequiredError) as info:
            ViewModelProvider(locator).get(MainViewModel)
        assert info.value.argument == "messenger"

    def test_release_disposes(self, qapp, locator):
        messenger = locator.register_system(Messenger)
        provider = ViewModelProvider(locator)
        vm = provider.get(MainViewModel)

        provider.release(MainViewModel)

        assert vm.is_disposed
        assert not messenger.is_subscribed(vm)
        assert provider.get(MainViewModel) is not vm
