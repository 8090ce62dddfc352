"""Credential storage for Signal secrets and group metadata.

Secrets are written by the service client during registration and read per
operation; the adapter never caches them.
"""

from __future__ import annotations

from typing import Any, Protocol

from hubot_signal.host import Brain

SIGNALING_KEY = "signaling_key"
PROFILE_KEY = "profile_key"

DEFAULT_NAMESPACE = "signal"


class CredentialStore(Protocol):
    """Key-value access to Signal secrets plus group lookup."""

    def get(self, key: str) -> Any:
        ...

    def set(self, key: str, value: Any) -> None:
        ...

    def get_group(self, group_id: str) -> dict[str, Any] | None:
        """Return the stored group record, or None when group_id is not a known group."""
        ...


class BrainCredentialStore:
    """CredentialStore backed by the robot brain's key-value storage.

    Keys are namespaced so adapter state does not collide with scripts that
    use the same brain.
    """

    def __init__(self, brain: Brain, namespace: str = DEFAULT_NAMESPACE) -> None:
        self._brain = brain
        self._namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self._namespace}.{key}"

    def _group_key(self, group_id: str) -> str:
        return self._key(f"group.{group_id}")

    def get(self, key: str) -> Any:
        return self._brain.get(self._key(key))

    def set(self, key: str, value: Any) -> None:
        self._brain.set(self._key(key), value)

    def get_group(self, group_id: str) -> dict[str, Any] | None:
        return self._brain.get(self._group_key(group_id))

    def put_group(self, group_id: str, record: dict[str, Any]) -> None:
        """Store group metadata; the record must not be None."""
        if record is None:
            raise ValueError("group record must not be None")
        self._brain.set(self._group_key(group_id), record)
