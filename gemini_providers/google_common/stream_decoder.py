"""Incremental decoding of a streamed JSON array of chat responses.

``streamGenerateContent`` answers with one pretty-printed JSON array whose
elements arrive over time::

    [{
      "candidates": [...]
    }
    ,
    {
      "candidates": [...]
    }
    ]

While the array is still open, the text decoded so far is recovered by
cutting the buffer at the last ``"\\n,"`` separator and closing the array.

FRAGILE ASSUMPTION: the upstream pretty-printer emits ``"\\n,"`` only
between two complete top-level elements. Newlines inside string values are
escaped (``\\n``) so they never produce a raw newline byte, and nested arrays
put commas at line ends, not line starts. If the backend ever changes its
formatting the cut point is silently wrong; :func:`try_decode_partial` then
stops yielding text (it never yields wrong text) until the final decode.

A cut that does not parse is a *decode miss*: the raw buffer goes to the
diagnostics logger and the caller simply waits for more bytes.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Optional

from ..base.logging import get_diagnostics_logger, log_event

SAFE_CUT_MARKER = b"\n,"

DecodeMissSink = Callable[[bytes, str], None]


def find_safe_cut_point(buffer: bytes) -> int:
    """Return the offset of the last safe cut marker, or ``-1`` when absent."""
    return buffer.rfind(SAFE_CUT_MARKER)


def _first(value: Any) -> Any:
    return value[0] if isinstance(value, list) and value else None


def extract_text(value: Any) -> str:
    """Extract response text from a decoded response value.

    A list concatenates the text of its elements. An object yields the first
    part's text of its first candidate, or ``""`` when there is none or the
    value has an unexpected shape.
    """
    if isinstance(value, list):
        return "".join(extract_text(item) for item in value)
    if not isinstance(value, dict):
        return ""
    candidate = _first(value.get("candidates"))
    if not isinstance(candidate, dict):
        return ""
    content = candidate.get("content")
    if not isinstance(content, dict):
        return ""
    part = _first(content.get("parts"))
    if not isinstance(part, dict):
        return ""
    text = part.get("text")
    return text if isinstance(text, str) else ""


def record_decode_miss(buffer: bytes, reason: str) -> None:
    """Write an undecodable buffer to the diagnostics side channel."""
    log_event(
        get_diagnostics_logger(),
        "stream.decode_miss",
        level=logging.DEBUG,
        reason=reason,
        size=len(buffer),
        buffer=buffer.decode("utf-8", errors="replace"),
    )


def try_decode_partial(buffer: bytes, *, sink: Optional[DecodeMissSink] = None) -> Optional[str]:
    """Return the text of every complete element in ``buffer``.

    Returns ``None`` when no complete element is known yet or the cut does not
    parse. Never raises for malformed input.
    """
    cut = find_safe_cut_point(buffer)
    if cut < 0:
        return None
    candidate = buffer[:cut] + b"]"
    try:
        return extract_text(json.loads(candidate))
    except (ValueError, RecursionError) as exc:
        (sink or record_decode_miss)(bytes(buffer), str(exc) or type(exc).__name__)
        return None


def decode_final(value: Any) -> str:
    """Return the full response text from the complete, parsed response."""
    return extract_text(value)


__all__ = [
    "SAFE_CUT_MARKER",
    "find_safe_cut_point",
    "extract_text",
    "record_decode_miss",
    "try_decode_partial",
    "decode_final",
]
