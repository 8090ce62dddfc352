"""Shared pytest fixtures for hubot-signal tests."""
import sys
sys.dont_write_bytecode = True

import pytest  # noqa: E402

from helpers import DictStore, FakeRobot, FakeService  # noqa: E402


@pytest.fixture(autouse=True)
def _clear_signal_env(monkeypatch):
    """Keep a developer's HUBOT_SIGNAL_* variables out of the tests."""
    for name in (
        "HUBOT_SIGNAL_NUMBER",
        "HUBOT_SIGNAL_PASSWORD",
        "HUBOT_SIGNAL_CODE",
        "HUBOT_SIGNAL_DEVICE_ID",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def robot():
    return FakeRobot()


@pytest.fixture
def store():
    return DictStore()


@pytest.fixture
def service():
    return FakeService()
