"""Lookup and percent-decoding of values in a raw URL query string."""

from __future__ import annotations

from typing import overload

__all__ = ["get_decoded_query_value"]


def _signed(byte: int) -> int:
    """Interpret a byte as a signed char."""
    return byte - 256 if byte > 127 else byte


def _hex_digit(byte: int) -> int:
    value = _signed(byte) - ord("0")
    if value > 9:
        value &= 223
        value -= 7
    return value


def _decode(value: bytes) -> bytes | None:
    """Percent- and plus-decode ``value``; None when a trailing escape is cut short."""
    out = bytearray()
    i = 0
    length = len(value)
    while i < length and value[i]:
        char = value[i]
        if char == ord("%"):
            if i + 2 >= length:
                return None
            out.append((_hex_digit(value[i + 1]) * 16 + _hex_digit(value[i + 2])) & 0xFF)
            i += 2
        elif char == ord("+"):
            out.append(ord(" "))
        else:
            out.append(char)
        i += 1
    return bytes(out)


def _find_value(key: bytes, raw_query: bytes) -> bytes | None:
    if not key:
        return None

    query = raw_query
    while query:
        amp = query.find(b"&", 1)
        statement = query[1:amp] if amp != -1 else query[1:]

        # Only bother if the first character of the key matches.
        if statement and statement[0] == key[0]:
            equality = statement.find(b"=")
            if equality == -1:
                # Such a query string is invalid and cannot be parsed.
                return None
            if statement[:equality] == key:
                return _decode(statement[equality + 1 :])

        query = query[len(statement) + 1 :]

    return None


@overload
def get_decoded_query_value(key: str | bytes, raw_query: bytes) -> bytes | None: ...


@overload
def get_decoded_query_value(key: str | bytes, raw_query: str) -> str | None: ...


def get_decoded_query_value(key, raw_query):
    """Return the decoded value of ``key`` in ``raw_query``, or None when absent.

    ``raw_query`` includes its leading ``?``. An empty string is returned for a
    key present with an empty value. The result is bytes for bytes input and
    text (UTF-8, undecodable bytes replaced) for text input.
    """
    key_bytes = key.encode("utf-8") if isinstance(key, str) else bytes(key)
    if isinstance(raw_query, str):
        found = _find_value(key_bytes, raw_query.encode("utf-8"))
        return None if found is None else found.decode("utf-8", errors="replace")
    return _find_value(key_bytes, bytes(raw_query))