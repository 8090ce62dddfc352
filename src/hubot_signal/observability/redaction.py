"""Redaction helpers for safe logging.

Phone numbers, group ids, message bodies and account secrets are never
logged: log hashes, lengths and counts instead.
"""

import hashlib
import re
from typing import Any

# Signal account numbers, with or without separators
_PHONE_PATTERN = re.compile(r"\+?\d[\d\s\-()]{8,}\d")

_REDACTED = "[REDACTED]"


def hash_identifier(value: str) -> str:
    """Stable, non-reversible tag for a number or group id (first 12 hex chars of sha256)."""
    return hashlib.sha256(value.encode()).hexdigest()[:12]


def redact_value(value: Any) -> str:
    """Render value for a log line without exposing its content."""
    if value is None:
        return "null"
    if isinstance(value, bool):
        return str(value).lower()
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, str):
        return _PHONE_PATTERN.sub(_REDACTED, value)
    if isinstance(value, dict):
        # Service results and group records: structure only
        return f"dict(keys={list(value.keys())})"
    if isinstance(value, (list, tuple)):
        return f"list(len={len(value)})"
    # bytes (signaling keys) and anything else: type name only
    return f"<{type(value).__name__}>"


def safe_log_context(**kwargs: Any) -> dict[str, str]:
    """Build a redacted extra_fields dict."""
    return {k: redact_value(v) for k, v in kwargs.items()}
