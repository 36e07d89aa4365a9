"""Streaming primitives for the provider layer.

A streamed chat produces zero or more partial events (``finish=False``)
followed by exactly one terminal event (``finish=True``). A terminal event
carries either the final text or an ``error``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Iterable

from ..errors import ErrorCode, ProviderError


@dataclass
class ChatStreamEvent:
    """Represents one observable step of a streaming chat.

    Fields:
      provider: canonical provider name
      model: model id/name
      delta: text added since the previous event (may be empty)
      text: all text decoded so far; on a successful terminal event, the
            authoritative final text
      finish: True on the terminal event
      error: formatted error message (terminal only)
      raw: the error object on failure, for callers that want to re-raise
    """

    provider: str
    model: str
    delta: str | None
    text: str | None = None
    finish: bool = False
    error: str | None = None
    raw: Any | None = None

    def is_error(self) -> bool:
        return self.error is not None


def accumulate_events(events: Iterable[ChatStreamEvent]) -> str:
    """Drain ``events`` and return the final text.

    Raises the terminal error (a :class:`ProviderError`) when the stream failed.
    """
    final: ChatStreamEvent | None = None
    pieces: list[str] = []
    for event in events:
        if event.delta:
            pieces.append(event.delta)
        if event.finish:
            final = event
            break
    if final is None:
        raise ProviderError(code=ErrorCode.INTERNAL, message="stream ended without a terminal event", provider="unknown")
    if final.is_error():
        if isinstance(final.raw, ProviderError):
            raise final.raw
        raise ProviderError(code=ErrorCode.UNKNOWN, message=final.error or "", provider=final.provider, model=final.model)
    return final.text if final.text is not None else "".join(pieces)


__all__ = [
    "ChatStreamEvent",
    "accumulate_events",
]
