"""Inbound routing: receiver events -> robot messages.

Security: NEVER log source numbers, group ids or bodies. Only log hashes and lengths.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping
from typing import Any, Callable

from pydantic import ValidationError

from hubot_signal.errors import InvalidInboundEventError
from hubot_signal.host import Robot
from hubot_signal.infra.transport import MessageReceiver
from hubot_signal.observability.correlation import correlation_scope
from hubot_signal.observability.logging import get_logger
from hubot_signal.observability.redaction import hash_identifier, safe_log_context

from .models import InboundEvent, SignalMessage

logger = get_logger(__name__)


def is_robot_named(body: str, name: str, alias: str | None = None) -> bool:
    """Check whether body addresses the robot by name or alias.

    The name must start the body, or follow a single leading "@".
    """
    start = 1 if body.startswith("@") else 0
    for candidate in (name, alias):
        if candidate and body.startswith(candidate, start):
            return True
    return False


def address_robot(body: str, name: str, alias: str | None = None) -> str:
    """Prefix a direct-message body with the robot name unless it already names the robot.

    Direct messages always address the robot, so scripts that listen for
    "<name> command" also match plain "command" sent one-to-one. Empty
    bodies are returned unchanged.
    """
    if not body or is_robot_named(body, name, alias):
        return body
    return f"{name} {body}"


def parse_event(raw: Mapping[str, Any]) -> InboundEvent:
    """Validate a raw receiver event.

    Raises:
        InvalidInboundEventError: If required fields are missing or invalid.
    """
    try:
        return InboundEvent.model_validate(raw)
    except ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) for err in exc.errors()})
        raise InvalidInboundEventError(f"invalid inbound event: {', '.join(fields)}") from exc


class MessageRouter:
    """Turns inbound events into SignalMessages and delivers them to the robot.

    Events are handled one at a time in the order the receiver yields them.
    """

    def __init__(self, robot: Robot, on_error: Callable[[BaseException], None]) -> None:
        self.robot = robot
        self._on_error = on_error

    def build_message(self, event: InboundEvent) -> SignalMessage:
        body = event.message.body
        group_id = event.group_id
        if group_id is None:
            body = address_robot(body, self.robot.name, self.robot.alias)

        user = self.robot.brain.user_for_id(event.source)

        return SignalMessage(
            user=user,
            text=body,
            id=event.timestamp,
            room=group_id if group_id is not None else event.source,
            attachments=list(event.message.attachments),
            group=group_id,
        )

    async def handle(self, raw: Mapping[str, Any]) -> SignalMessage | None:
        """Route one raw event. Returns the delivered message, or None if it was rejected."""
        with correlation_scope():
            try:
                event = parse_event(raw)
            except InvalidInboundEventError as exc:
                logger.warning("dropping malformed inbound event")
                self._on_error(exc)
                return None

            try:
                message = self.build_message(event)
            except Exception as exc:
                # e.g. the brain failing to resolve the user; skip this event only.
                logger.error(
                    "failed to build inbound message",
                    extra={"extra_fields": {"error_type": type(exc).__name__}},
                )
                self._on_error(exc)
                return None

            logger.debug(
                "inbound message received",
                extra={
                    "extra_fields": safe_log_context(
                        source_hash=hash_identifier(event.source),
                        is_group=message.group is not None,
                        text_len=len(message.text),
                        attachment_count=len(message.attachments),
                    )
                },
            )

            try:
                result = self.robot.receive(message)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:
                # Robot-side failure; keep consuming the next events.
                logger.error(
                    "robot failed to receive message",
                    extra={"extra_fields": {"error_type": type(exc).__name__}},
                )
                self._on_error(exc)
            return message

    async def consume(self, receiver: MessageReceiver) -> None:
        """Deliver every event from receiver until it is exhausted.

        A receiver failure ends consumption and is reported on the error channel.
        """
        logger.debug("inbound listener started")
        try:
            async for raw in receiver:
                await self.handle(raw)
        except Exception as exc:
            logger.error(
                "inbound receiver failed",
                extra={"extra_fields": {"error_type": type(exc).__name__}},
            )
            self._on_error(exc)
            return
        logger.info("inbound receiver closed")
