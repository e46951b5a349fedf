"""
Pytest Configuration and Fixtures
"""

from unittest.mock import MagicMock

import pytest

from couchook.app import CouchookApp
from couchook.runner import Module, Sandbox


class RecordingController:
    """Controller that keeps the attitude it was qualified with."""

    def __init__(self) -> None:
        self.attitude = None
        self.details = None
        self.calls: list[tuple] = []

    def qualify(self, attitude, details):
        self.attitude = attitude
        self.details = details

    def disqualify(self):
        self.attitude = None
        self.details = None

    def record(self, *args):
        self.calls.append(args)


@pytest.fixture
def app() -> CouchookApp:
    """Returns a fresh CouchookApp instance."""
    return CouchookApp()


@pytest.fixture
def controller() -> RecordingController:
    return RecordingController()


@pytest.fixture
def listener() -> MagicMock:
    """A spy usable as an event listener."""
    return MagicMock(name="listener")


@pytest.fixture
def module() -> Module:
    return Module("module")


@pytest.fixture
def sandbox() -> Sandbox:
    return Sandbox("sandbox")


@pytest.fixture
def controller_factory():
    """Returns the controller class, for tests that need several controllers."""
    return RecordingController
