import pytest
from PySide6.QtCore import QCoreApplication

from foundation.core.config import ConfigManager
from foundation.core.locator import ServiceLocator
from foundation.core.messaging import Messenger


@pytest.fixture(scope="session")
def qapp():
    """Qt core application for QObject-based ViewModels (no display needed)."""
    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


@pytest.fixture
def messenger():
    return Messenger()


@pytest.fixture
def locator():
    """Locator with an in-memory config."""
    return ServiceLocator(ConfigManager(None))
