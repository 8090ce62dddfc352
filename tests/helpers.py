"""Shared test doubles for hubot-signal tests.

This module contains in-memory fakes of the robot, its brain and the Signal
service. These are NOT fixtures - they are regular classes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
from unittest.mock import AsyncMock, MagicMock

from hubot_signal.host import Response
from hubot_signal.infra.settings import SignalSettings

TEST_NUMBER = "+15550001111"
TEST_PASSWORD = "test-password"


class LogRecorder:
    """Simple recorder to capture log calls deterministically."""

    def __init__(self):
        self.calls: list[tuple[str, tuple, dict]] = []

    def _record(self, level: str, *args, **kwargs):
        self.calls.append((level, args, kwargs))

    def info(self, *args, **kwargs):
        self._record("info", *args, **kwargs)

    def warning(self, *args, **kwargs):
        self._record("warning", *args, **kwargs)

    def error(self, *args, **kwargs):
        self._record("error", *args, **kwargs)

    def exception(self, *args, **kwargs):
        self._record("exception", *args, **kwargs)

    def debug(self, *args, **kwargs):
        self._record("debug", *args, **kwargs)

    def get_all_logged_content(self) -> str:
        """Concatenate all args and kwargs from all calls into one string."""
        parts = []
        for level, args, kwargs in self.calls:
            parts.append(str(args))
            parts.append(str(kwargs))
        return " ".join(parts)

    def has_extra_field(self, key: str) -> bool:
        """Check if any call has the given key in extra_fields."""
        for _, _, kwargs in self.calls:
            extra = kwargs.get("extra", {})
            extra_fields = extra.get("extra_fields", {})
            if key in extra_fields:
                return True
        return False


@dataclass
class User:
    id: str
    name: str


class FakeBrain:
    """Brain with dict storage and a manual "loaded" trigger."""

    def __init__(self):
        self.data: dict[str, Any] = {}
        self.listeners: dict[str, list] = {}
        self.users: dict[str, User] = {}

    def on(self, event, callback):
        self.listeners.setdefault(event, []).append(callback)

    def fire(self, event, *args):
        for callback in list(self.listeners.get(event, [])):
            callback(*args)

    def user_for_id(self, user_id):
        if user_id not in self.users:
            self.users[user_id] = User(id=user_id, name=user_id)
        return self.users[user_id]

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value):
        self.data[key] = value


class FakeRobot:
    """Robot that records every received message."""

    def __init__(self, name: str = "bot", alias: str | None = None):
        self.name = name
        self.alias = alias
        self.brain = FakeBrain()
        self.adapter = None
        self.response_class = Response
        self.received: list = []

    def receive(self, message):
        self.received.append(message)


class DictStore:
    """CredentialStore backed by plain dicts."""

    def __init__(self, secrets: dict | None = None, groups: dict | None = None):
        self.secrets = dict(secrets or {})
        self.groups = dict(groups or {})

    def get(self, key):
        return self.secrets.get(key)

    def set(self, key, value):
        self.secrets[key] = value

    def get_group(self, group_id):
        return self.groups.get(group_id)


class FakeReceiver:
    """Receiver that yields a fixed list of events, then optionally fails."""

    def __init__(self, events: list | None = None, error: Exception | None = None):
        self.events = list(events or [])
        self.error = error

    async def _iterate(self):
        for event in self.events:
            yield event
        if self.error is not None:
            raise self.error

    def __aiter__(self):
        return self._iterate()


def make_sender() -> MagicMock:
    sender = MagicMock()
    sender.send_message_to_number = AsyncMock(return_value={"timestamp": 1})
    sender.send_message_to_group = AsyncMock(return_value={"timestamp": 1})
    return sender


class FakeService:
    """SignalService whose clients are mocks; records constructor arguments."""

    def __init__(self, receiver: FakeReceiver | None = None):
        self.manager = MagicMock()
        self.manager.request_sms_verification = AsyncMock(return_value=None)
        self.manager.register_single_device = AsyncMock(return_value={"registered": True})
        self.sender = make_sender()
        self.receiver = receiver or FakeReceiver()
        self.sender_args: tuple | None = None
        self.receiver_args: tuple | None = None

    def account_manager(self, number, password, store):
        return self.manager

    def message_sender(self, number, password, store):
        self.sender_args = (number, password, store)
        return self.sender

    def message_receiver(self, address, password, signaling_key, store):
        self.receiver_args = (address, password, signaling_key, store)
        return self.receiver


def make_settings(code: str | None = None, device_id: int = 1) -> SignalSettings:
    return SignalSettings(
        number=TEST_NUMBER,
        password=TEST_PASSWORD,
        verification_code=code,
        device_id=device_id,
    )


def make_event(
    source: Any = "+15552223333",
    body: Any = "hello",
    attachments: Any = None,
    timestamp: Any = 1700000000000,
    group: Any = None,
) -> dict:
    """Build a raw receiver event."""
    message: dict[str, Any] = {"body": body, "attachments": attachments}
    if group is not None:
        message["group"] = {"id": group}
    return {"source": source, "message": message, "timestamp": timestamp}
