"""Per-message deflate streams for WebSocket compression."""

from __future__ import annotations

import enum
import zlib

__all__ = [
    "COMPRESSOR_MASK",
    "DECOMPRESSOR_MASK",
    "CompressOptions",
    "DeflationStream",
    "InflationStream",
]

COMPRESSOR_MASK = 0x00FF
DECOMPRESSOR_MASK = 0x0F00

_SYNC_TAIL = b"\x00\x00\xff\xff"


def _decompressor(window_bits: int) -> int:
    return window_bits << 8


def _compressor(window_bits: int, mem_level: int) -> int:
    return (window_bits << 4) | mem_level


class CompressOptions(enum.IntEnum):
    """Packed compression settings for a WebSocket route.

    Bits 0-3 carry the compressor's memory level and bits 4-7 its window
    size; bits 8-11 carry the decompressor's window size. A part equal to 1
    selects the shared stream, and zero throughout turns compression off.
    """

    DISABLED = 0
    SHARED_COMPRESSOR = 1
    SHARED_DECOMPRESSOR = _decompressor(1)

    DEDICATED_DECOMPRESSOR_32KB = _decompressor(15)
    DEDICATED_DECOMPRESSOR_16KB = _decompressor(14)
    DEDICATED_DECOMPRESSOR_8KB = _decompressor(13)
    DEDICATED_DECOMPRESSOR_4KB = _decompressor(12)
    DEDICATED_DECOMPRESSOR_2KB = _decompressor(11)
    DEDICATED_DECOMPRESSOR_1KB = _decompressor(10)
    DEDICATED_DECOMPRESSOR_512B = _decompressor(9)
    DEDICATED_DECOMPRESSOR = DEDICATED_DECOMPRESSOR_32KB

    DEDICATED_COMPRESSOR_3KB = _compressor(9, 1)
    DEDICATED_COMPRESSOR_4KB = _compressor(9, 2)
    DEDICATED_COMPRESSOR_8KB = _compressor(10, 3)
    DEDICATED_COMPRESSOR_16KB = _compressor(11, 4)
    DEDICATED_COMPRESSOR_32KB = _compressor(12, 5)
    DEDICATED_COMPRESSOR_64KB = _compressor(13, 6)
    DEDICATED_COMPRESSOR_128KB = _compressor(14, 7)
    DEDICATED_COMPRESSOR_256KB = _compressor(15, 8)
    DEDICATED_COMPRESSOR = DEDICATED_COMPRESSOR_256KB


class DeflationStream:
    """A raw deflate stream producing sync-flushed message payloads."""

    def __init__(self, compress_options: int) -> None:
        options = int(compress_options)
        window_bits = (options & COMPRESSOR_MASK) >> 4
        mem_level = options & 0xF
        if not 8 <= window_bits <= 15 or not 1 <= mem_level <= 9:
            raise ValueError(f"no dedicated compressor in options {options:#06x}")
        self._window_bits = window_bits
        self._mem_level = mem_level
        self._stream = self._new_stream()

    def _new_stream(self):
        return zlib.compressobj(
            zlib.Z_DEFAULT_COMPRESSION,
            zlib.DEFLATED,
            -self._window_bits,
            self._mem_level,
            zlib.Z_DEFAULT_STRATEGY,
        )

    def deflate(self, raw: bytes, reset: bool) -> bytes:
        """Compress ``raw`` and drop the trailing sync marker; optionally reset the stream."""
        if not raw:
            raise ValueError("cannot deflate an empty message")
        output = self._stream.compress(bytes(raw)) + self._stream.flush(zlib.Z_SYNC_FLUSH)
        if reset:
            self._stream = self._new_stream()
        return output[: -len(_SYNC_TAIL)]


class InflationStream:
    """A raw inflate stream for sync-flushed message payloads."""

    def __init__(self, compress_options: int) -> None:
        window_bits = int(compress_options) >> 8
        if not 8 <= window_bits <= 15:
            raise ValueError(f"no dedicated decompressor in options {int(compress_options):#06x}")
        self._window_bits = window_bits
        self._stream = self._new_stream()

    def _new_stream(self):
        return zlib.decompressobj(-self._window_bits)

    def inflate(self, compressed: bytes, max_payload_length: int, reset: bool) -> bytes | None:
        """Decompress one message, or return None on corrupt data or when it exceeds the limit.

        Empty input is valid and inflates to an empty message.
        """
        data = bytes(compressed) + _SYNC_TAIL
        try:
            output = self._stream.decompress(data, max_payload_length + 1)
            failed = self._stream.eof
        except zlib.error:
            output, failed = b"", True

        if reset:
            self._stream = self._new_stream()

        if failed or len(output) > max_payload_length:
            return None
        return output