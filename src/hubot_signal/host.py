"""Robot-side types the adapter plugs into.

The robot (user registry, brain persistence, script dispatch) lives outside
this package. These protocols describe the parts of it the adapter calls,
and the small message/response types it extends.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Protocol


class Brain(Protocol):
    """Robot persistence and user registry."""

    def on(self, event: str, callback: Callable[..., Any]) -> None:
        """Subscribe to a brain event ("loaded" fires once storage is ready)."""
        ...

    def user_for_id(self, user_id: str) -> Any:
        """Return the user record for user_id, creating it if unknown."""
        ...

    def get(self, key: str) -> Any:
        ...

    def set(self, key: str, value: Any) -> Any:
        ...


class Robot(Protocol):
    """The command-bot runtime the adapter is loaded into."""

    name: str
    alias: str | None
    brain: Brain
    adapter: Any
    response_class: type["Response"]

    def receive(self, message: "TextMessage") -> Any:
        """Dispatch a message to the robot's listeners. May return an awaitable."""
        ...


@dataclass
class TextMessage:
    """Plain text message as the robot's listeners see it."""

    user: Any
    text: str
    id: str | None = None
    room: str | None = None


@dataclass
class Envelope:
    """Where an outbound message goes."""

    room: str | None
    user: Any = None
    message: TextMessage | None = None


class Response:
    """Handed to robot listeners; sends back to the room the message came from."""

    def __init__(self, robot: Robot, message: TextMessage, match: Any = None) -> None:
        self.robot = robot
        self.message = message
        self.match = match
        self.envelope = Envelope(room=message.room, user=message.user, message=message)

    def send(self, *strings: str) -> None:
        self.robot.adapter.send(self.envelope, *strings)

    def reply(self, *strings: str) -> None:
        self.robot.adapter.reply(self.envelope, *strings)
