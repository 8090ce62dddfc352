"""Signal message models: the inbound wire event and the robot-facing message."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator

from hubot_signal.host import TextMessage


def _as_text(value: Any) -> Any:
    """Service clients hand over numbers, longs and raw bytes; keep them as text."""
    if isinstance(value, bytes):
        return value.decode("latin-1")
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class InboundGroup(BaseModel):
    """Group context attached to a group message."""

    model_config = ConfigDict(extra="ignore")

    id: str

    @field_validator("id", mode="before")
    @classmethod
    def coerce_id(cls, v: Any) -> Any:
        return _as_text(v)


class InboundContent(BaseModel):
    """Decrypted message content."""

    model_config = ConfigDict(extra="ignore")

    body: str = ""
    attachments: list[Any] = []
    group: InboundGroup | None = None

    @field_validator("body", mode="before")
    @classmethod
    def default_body(cls, v: Any) -> Any:
        return "" if v is None else _as_text(v)

    @field_validator("attachments", mode="before")
    @classmethod
    def default_attachments(cls, v: Any) -> Any:
        return [] if v is None else v


class InboundEvent(BaseModel):
    """One decrypted inbound event as yielded by the message receiver."""

    model_config = ConfigDict(extra="ignore")

    source: str
    message: InboundContent
    timestamp: str

    @field_validator("source", "timestamp", mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> Any:
        return _as_text(v)

    @property
    def group_id(self) -> str | None:
        return self.message.group.id if self.message.group else None


@dataclass
class SignalMessage(TextMessage):
    """TextMessage that also exposes attachments and, for group chats, the group id.

    `group` is only set for group conversations so scripts can branch on it.
    """

    attachments: list[Any] = field(default_factory=list)
    group: str | None = None
