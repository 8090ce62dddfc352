"""Correlation ids: one per inbound event and one per outbound send.

The id lives in a ContextVar, so it follows the asyncio task that handles the
event or send, and every log line written inside the scope carries it.
"""

import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar

_correlation_id: ContextVar[str] = ContextVar("signal_correlation_id", default="")


def get_correlation_id() -> str:
    """Correlation id of the current scope, or "" outside any scope."""
    return _correlation_id.get()


@contextmanager
def correlation_scope(cid: str | None = None) -> Iterator[str]:
    """Tag everything logged inside the block with one correlation id.

    A fresh id is generated unless cid is given. The previous id is restored
    on exit, so scopes nest.
    """
    token = _correlation_id.set(cid or uuid.uuid4().hex)
    try:
        yield _correlation_id.get()
    finally:
        _correlation_id.reset(token)
