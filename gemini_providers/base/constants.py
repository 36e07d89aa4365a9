"""Base shared constants for provider adapters.

Security
--------
Only generic sentinel strings live here; no credentials or tokens.

# pragma: allowlist secret
"""
from __future__ import annotations

# Missing credential sentinel
MISSING_API_KEY_ERROR = "missing_api_key"  # pragma: allowlist secret - generic placeholder string, not a real secret

# Stream cancelled before a terminal callback was delivered
STREAM_CANCELLED = "stream_cancelled"

__all__ = [
    "MISSING_API_KEY_ERROR",
    "STREAM_CANCELLED",
]
