"""Robot response type with attachment support."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from hubot_signal.host import Response


class SignalResponse(Response):
    """Response that lets scripts send attachments back to the conversation.

    Installed as the robot's response class once the adapter connects.
    """

    def send_attachments(self, attachments: Sequence[Any], *strings: str) -> None:
        self.robot.adapter.send_attachments(self.envelope, attachments, *strings)

    def reply_attachments(self, attachments: Sequence[Any], *strings: str) -> None:
        self.robot.adapter.reply_attachments(self.envelope, attachments, *strings)
