"""Append-only byte buffer for one streaming call.

Bytes are never removed or rewritten, so any prefix that decoded once still
decodes the same way after more data arrives.
"""

from __future__ import annotations


class StreamBuffer:
    """Accumulates raw response bytes as chunks arrive."""

    __slots__ = ("_data",)

    def __init__(self, initial: bytes = b"") -> None:
        self._data = bytearray(initial)

    def append(self, chunk: bytes) -> None:
        self._data.extend(chunk)

    def snapshot(self) -> bytes:
        """Return an immutable copy of the current contents."""
        return bytes(self._data)

    def __len__(self) -> int:
        return len(self._data)

    def __bytes__(self) -> bytes:
        return self.snapshot()


__all__ = ["StreamBuffer"]
