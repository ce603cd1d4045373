"""Detection of browsers whose permessage-deflate support is broken."""

from __future__ import annotations

__all__ = ["has_broken_compression"]

_VERSION_MARKER = " Version/15."
_SAFARI_MARKER = " Safari/"
_DIGITS = frozenset("0123456789")
_UINT_MAX = 0xFFFFFFFF


def _parse_minor(text: str) -> int | None:
    """Parse an unsigned decimal number that spans all of ``text``."""
    if not text or not set(text) <= _DIGITS:
        return None
    value = int(text)
    if value > _UINT_MAX:
        return None
    return value


def has_broken_compression(user_agent: str) -> bool:
    """Return True for Safari 15.0 - 15.3, whose compression must be disabled.

    Those releases do not honour ``client_no_context_takeover``, so
    compression is turned off entirely for them.
    """
    start = user_agent.find(_VERSION_MARKER)
    if start == -1:
        return False
    start += len(_VERSION_MARKER)

    end = user_agent.find(" ", start)
    if end == -1:
        return False

    minor = _parse_minor(user_agent[start:end])
    if minor is None or minor > 3:
        return False

    return user_agent.find(_SAFARI_MARKER, end) != -1