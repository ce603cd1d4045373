"""Settings and event handlers for a WebSocket route."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional

from microws.deflate import CompressOptions

__all__ = [
    "WebSocketBehavior",
    "MIN_IDLE_TIMEOUT",
    "MAX_IDLE_TIMEOUT",
    "MAX_LIFETIME",
]

MIN_IDLE_TIMEOUT = 8
"""Smallest non-zero idle timeout in seconds."""

MAX_IDLE_TIMEOUT = 240 * 4
"""Largest idle timeout in seconds (16 minutes)."""

MAX_LIFETIME = 240
"""Largest socket lifetime in minutes (4 hours)."""

_Callback = Optional[Callable[..., Any]]


@dataclass(kw_only=True)
class WebSocketBehavior:
    """Per-route WebSocket settings and the handlers invoked for its events.

    Every handler is optional. ``idle_timeout`` is in seconds, ``max_lifetime``
    in minutes (0 disables it).
    """

    compression: int = CompressOptions.DISABLED
    max_payload_length: int = 16 * 1024
    idle_timeout: int = 120
    max_backpressure: int = 64 * 1024
    close_on_backpressure_limit: bool = False
    reset_idle_timeout_on_send: bool = False
    send_pings_automatically: bool = True
    max_lifetime: int = 0

    upgrade: _Callback = None
    open: _Callback = None
    message: _Callback = None
    dropped: _Callback = None
    drain: _Callback = None
    ping: _Callback = None
    pong: _Callback = None
    subscription: _Callback = None
    close: _Callback = None

    def validate(self) -> WebSocketBehavior:
        """Check the timeout settings and return self; raise ValueError when they are misleading."""
        if self.idle_timeout and self.idle_timeout < MIN_IDLE_TIMEOUT:
            raise ValueError(
                f"idle_timeout must be either 0 or at least {MIN_IDLE_TIMEOUT} seconds"
            )
        if self.idle_timeout > MAX_IDLE_TIMEOUT:
            raise ValueError(
                f"idle_timeout must not be greater than {MAX_IDLE_TIMEOUT} seconds"
            )
        if self.max_lifetime > MAX_LIFETIME:
            raise ValueError(
                f"max_lifetime must not be greater than {MAX_LIFETIME} minutes"
            )
        return self