"""Streaming package for the provider layer."""

from .streaming import ChatStreamEvent, accumulate_events
from .stream_buffer import StreamBuffer

__all__ = [
    "ChatStreamEvent",
    "accumulate_events",
    "StreamBuffer",
]
