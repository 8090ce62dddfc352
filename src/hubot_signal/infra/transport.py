"""Signal service seams.

The service client does the cryptography, registration handshakes and the
actual network traffic. The adapter only drives it through these protocols.
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping, Sequence
from typing import Any, Protocol

from .credential_store import CredentialStore


class AccountManager(Protocol):
    """Registration handshakes for one account."""

    async def request_sms_verification(self, number: str) -> Any:
        ...

    async def register_single_device(self, number: str, code: str) -> Any:
        ...


class MessageSender(Protocol):
    """Encrypts and delivers outbound messages."""

    async def send_message_to_number(
        self,
        number: str,
        body: str,
        attachments: Sequence[Any],
        timestamp: int,
        expire_timer: int | None,
        profile_key: Any,
    ) -> Any:
        ...

    async def send_message_to_group(
        self,
        group_id: str,
        body: str,
        attachments: Sequence[Any],
        timestamp: int,
        expire_timer: int | None,
        profile_key: Any,
    ) -> Any:
        ...


class MessageReceiver(Protocol):
    """Yields decrypted inbound events in arrival order.

    Each event is a mapping shaped like
    {"source": ..., "message": {"body": ..., "attachments": [...], "group": {...}}, "timestamp": ...}.
    """

    def __aiter__(self) -> AsyncIterator[Mapping[str, Any]]:
        ...


class SignalService(Protocol):
    """Factory for the three service clients, all sharing the credential store."""

    def account_manager(
        self, number: str, password: str, store: CredentialStore
    ) -> AccountManager:
        ...

    def message_sender(
        self, number: str, password: str, store: CredentialStore
    ) -> MessageSender:
        ...

    def message_receiver(
        self, address: str, password: str, signaling_key: bytes, store: CredentialStore
    ) -> MessageReceiver:
        ...
