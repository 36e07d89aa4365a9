"""Centralized timeout values for providers.

Every blocking edge in the package (HTTP calls, streamed reads, the token
issuing command) reads its limit from :func:`get_timeout_config`. The core
itself never cancels work; these values are handed to ``httpx`` and
``subprocess`` which enforce them.

Supported environment variables (all optional, positive floats):
    PT_TIMEOUT_HTTP_SECONDS      connect/write/pool limit and blocking read
    PT_TIMEOUT_STREAM_SECONDS    idle read limit between streamed chunks
    PT_TIMEOUT_COMMAND_SECONDS   token command wall clock limit

The parsed configuration is cached and recomputed only when one of the
variables above changes.
"""
from __future__ import annotations

import os
from dataclasses import dataclass

import httpx


@dataclass(frozen=True)
class TimeoutConfig:
    """Container for normalized timeout values (seconds).

    Attributes:
        http_timeout_seconds: Limit for non-streaming requests.
        stream_timeout_seconds: Idle limit while waiting for the next chunk.
        command_timeout_seconds: Limit for the external token command.
    """

    http_timeout_seconds: float = 30.0
    stream_timeout_seconds: float = 60.0
    command_timeout_seconds: float = 30.0

    def httpx_timeout(self, *, streaming: bool = False) -> httpx.Timeout:
        """Return an ``httpx.Timeout`` for blocking or streaming requests."""
        read = self.stream_timeout_seconds if streaming else self.http_timeout_seconds
        return httpx.Timeout(self.http_timeout_seconds, read=read)


_ENV_NAMES = (
    "PT_TIMEOUT_HTTP_SECONDS",
    "PT_TIMEOUT_STREAM_SECONDS",
    "PT_TIMEOUT_COMMAND_SECONDS",
)
_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read ``name`` as a positive float, returning ``default`` otherwise."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - documented module cache
    guard = "/".join(os.getenv(n, "") for n in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        http_timeout_seconds=_parse_env_float("PT_TIMEOUT_HTTP_SECONDS", defaults.http_timeout_seconds),
        stream_timeout_seconds=_parse_env_float("PT_TIMEOUT_STREAM_SECONDS", defaults.stream_timeout_seconds),
        command_timeout_seconds=_parse_env_float("PT_TIMEOUT_COMMAND_SECONDS", defaults.command_timeout_seconds),
    )
    _ENV_GUARD = guard
    return _CACHED


__all__ = ["TimeoutConfig", "get_timeout_config"]
