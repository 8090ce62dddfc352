"""Minimal named-event emitter used for the adapter's "connected" and "error" channels."""

from __future__ import annotations

from typing import Any, Callable

from hubot_signal.observability.logging import get_logger

logger = get_logger(__name__)

EventHandler = Callable[..., Any]


class EventEmitter:
    """Synchronous event emitter.

    Handlers run in subscription order. A handler that raises is logged and
    does not stop the remaining handlers.
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = {}

    def on(self, event: str, handler: EventHandler) -> None:
        """Subscribe handler to event."""
        self._handlers.setdefault(event, []).append(handler)

    def off(self, event: str, handler: EventHandler | None = None) -> None:
        """Unsubscribe handler, or every handler for event when handler is None."""
        if handler is None:
            self._handlers.pop(event, None)
            return
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, []))

    def emit(self, event: str, *args: Any) -> bool:
        """Call every handler for event with args.

        Returns:
            True if at least one handler was subscribed.
        """
        handlers = list(self._handlers.get(event, []))
        for handler in handlers:
            try:
                handler(*args)
            except Exception:
                logger.exception(
                    "event handler failed",
                    extra={"extra_fields": {"event": event}},
                )
        return bool(handlers)
