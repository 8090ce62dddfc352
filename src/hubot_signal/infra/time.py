"""Time utilities for consistent timestamp handling."""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return current UTC timestamp (timezone-aware)."""
    return datetime.now(timezone.utc)


def epoch_millis() -> int:
    """Return current time as milliseconds since the Unix epoch.

    Signal uses the send timestamp in milliseconds as the message id.
    """
    return int(utc_now().timestamp() * 1000)
