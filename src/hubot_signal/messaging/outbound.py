"""Outbound dispatch: robot send/reply requests -> Signal sender calls.

Security: NEVER log the room (phone number or group id) or text. Only log hashes and lengths.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any, Callable

from hubot_signal.errors import MissingRoomError, NotConnectedError
from hubot_signal.host import Envelope
from hubot_signal.infra.credential_store import PROFILE_KEY, CredentialStore
from hubot_signal.infra.time import epoch_millis
from hubot_signal.infra.transport import MessageSender
from hubot_signal.observability.correlation import correlation_scope
from hubot_signal.observability.logging import get_logger
from hubot_signal.observability.redaction import hash_identifier, safe_log_context

logger = get_logger(__name__)

# Joins the strings of one send call into a single Signal message.
MESSAGE_SEPARATOR = "\n"


def join_strings(strings: Sequence[str]) -> str:
    """Join send() strings into one body, one string per line."""
    return MESSAGE_SEPARATOR.join(str(s) for s in strings)


class OutboundDispatcher:
    """Routes a send to the direct or group sender call.

    A room is a group iff the credential store has a group record for it.
    Failures are reported through on_error and never raised to the caller.
    """

    def __init__(
        self,
        store: CredentialStore,
        on_error: Callable[[BaseException], None],
    ) -> None:
        self.store = store
        self._on_error = on_error
        self.sender: MessageSender | None = None

    def bind(self, sender: MessageSender) -> None:
        """Attach the message sender once the account is connected."""
        self.sender = sender

    def is_group(self, room: str) -> bool:
        return self.store.get_group(room) is not None

    async def dispatch(
        self,
        envelope: Envelope,
        attachments: Sequence[Any] | None,
        *strings: str,
    ) -> None:
        """Send strings (and attachments) to envelope.room.

        Returns once the sender call has completed or failed; the outcome is
        only visible through logs and the error channel.
        """
        if envelope.room is None:
            self._on_error(MissingRoomError())
            return

        if self.sender is None:
            self._on_error(NotConnectedError("Signal sender is not connected yet"))
            return

        room = envelope.room
        text = join_strings(strings)
        now = epoch_millis()
        attachment_list = list(attachments or [])

        with correlation_scope():
            try:
                is_group = self.is_group(room)
                profile_key = self.store.get(PROFILE_KEY)
            except Exception as exc:
                logger.error(
                    "credential store lookup failed",
                    extra={
                        "extra_fields": safe_log_context(
                            to_hash=hash_identifier(room),
                            error_type=type(exc).__name__,
                        )
                    },
                )
                self._on_error(exc)
                return

            log_ctx = safe_log_context(
                to_hash=hash_identifier(room),
                is_group=is_group,
                text_len=len(text),
                attachment_count=len(attachment_list),
            )
            logger.debug("sending outbound message", extra={"extra_fields": log_ctx})

            if is_group:
                send = self.sender.send_message_to_group
            else:
                send = self.sender.send_message_to_number

            try:
                result = await send(
                    room,
                    text,
                    attachment_list,
                    now,
                    None,
                    profile_key,
                )
            except Exception as exc:
                logger.error(
                    "outbound send failed",
                    extra={
                        "extra_fields": safe_log_context(
                            **log_ctx, error_type=type(exc).__name__
                        )
                    },
                )
                self._on_error(exc)
                return

            logger.debug(
                "outbound message sent",
                extra={"extra_fields": safe_log_context(**log_ctx, result=result)},
            )
