"""
Error classification helpers mapping failures to normalized ErrorCode values.

Two entry points:

* :func:`classify_exception` for transport-level exceptions (httpx errors,
  timeouts, anything exposing an HTTP status).
* :func:`classify_status` for the ``code`` field of a backend error object,
  which is an HTTP status integer on REST responses and a canonical status
  name (``"PERMISSION_DENIED"``) on some streamed error payloads.
"""
from __future__ import annotations

import asyncio
from typing import Dict, Optional, Union

import httpx

from .error_code import ErrorCode
from .provider_error import ProviderError


def _extract_status(exc: Exception) -> Optional[int]:
    """Attempt to extract an HTTP status code from an exception.

    Supported attribute shapes (checked in order):
    - ``exc.status_code``
    - ``exc.status``
    - ``exc.response.status_code``
    Returns ``None`` if no valid status can be found.
    """
    for attr in ("status_code", "status"):
        val = getattr(exc, attr, None)
        if isinstance(val, int) and 100 <= val < 600:
            return val
    resp = getattr(exc, "response", None)
    if resp is not None:
        sc = getattr(resp, "status_code", None)
        if isinstance(sc, int) and 100 <= sc < 600:
            return sc
    return None


_HTTP_STATUS_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION,
    401: ErrorCode.AUTH,
    403: ErrorCode.AUTH,
    404: ErrorCode.NOT_FOUND,
    408: ErrorCode.TIMEOUT,
    409: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION,
    429: ErrorCode.RATE_LIMIT,
    500: ErrorCode.SERVER_ERROR,
    502: ErrorCode.TRANSIENT,
    503: ErrorCode.UNAVAILABLE,
    504: ErrorCode.TIMEOUT,
}

# Canonical Google API status names (google.rpc.Code)
_RPC_STATUS_MAP: Dict[str, ErrorCode] = {
    "INVALID_ARGUMENT": ErrorCode.VALIDATION,
    "FAILED_PRECONDITION": ErrorCode.VALIDATION,
    "OUT_OF_RANGE": ErrorCode.VALIDATION,
    "UNAUTHENTICATED": ErrorCode.AUTH,
    "PERMISSION_DENIED": ErrorCode.AUTH,
    "NOT_FOUND": ErrorCode.NOT_FOUND,
    "ALREADY_EXISTS": ErrorCode.CONFLICT,
    "ABORTED": ErrorCode.CONFLICT,
    "RESOURCE_EXHAUSTED": ErrorCode.RATE_LIMIT,
    "CANCELLED": ErrorCode.CANCELLED,
    "DEADLINE_EXCEEDED": ErrorCode.TIMEOUT,
    "UNIMPLEMENTED": ErrorCode.UNSUPPORTED,
    "INTERNAL": ErrorCode.SERVER_ERROR,
    "DATA_LOSS": ErrorCode.SERVER_ERROR,
    "UNAVAILABLE": ErrorCode.UNAVAILABLE,
}


def _heuristic_from_message(msg: str) -> Optional[ErrorCode]:  # pragma: no cover - simple mapping
    """Substring heuristic mapping for exceptions without a status."""
    if "rate" in msg and "limit" in msg:
        return ErrorCode.RATE_LIMIT
    pattern_groups = (
        (ErrorCode.TIMEOUT, ("timeout", "timed out")),
        (ErrorCode.AUTH, ("auth", "api key", "unauthorized", "forbidden")),
        (ErrorCode.UNSUPPORTED, ("unsupported", "not supported")),
        (ErrorCode.NOT_FOUND, ("not found", "does not exist")),
        (ErrorCode.UNAVAILABLE, ("unavailable", "connection refused")),
        (ErrorCode.VALIDATION, ("validation", "invalid", "malformed")),
        (ErrorCode.SERVER_ERROR, ("server error", "internal error")),
    )
    for code, patterns in pattern_groups:
        if any(p in msg for p in patterns):
            return code
    return None


def classify_status(status: Union[int, str, None]) -> ErrorCode:
    """Map a backend error ``code`` field to a normalized :class:`ErrorCode`."""
    if isinstance(status, bool) or status is None:
        return ErrorCode.UNKNOWN
    if isinstance(status, int):
        return _HTTP_STATUS_MAP.get(status, ErrorCode.SERVER_ERROR if status >= 500 else ErrorCode.UNKNOWN)
    text = str(status).strip()
    if text.isdigit():
        return classify_status(int(text))
    if text.upper() in _RPC_STATUS_MAP:
        return _RPC_STATUS_MAP[text.upper()]
    try:
        return ErrorCode(text.lower())
    except ValueError:
        return ErrorCode.UNKNOWN


def classify_exception(exc: Exception) -> ErrorCode:
    """Classify an exception into a normalized :class:`ErrorCode`.

    Precedence:
        1. ProviderError passthrough.
        2. Timeout exceptions (sync/async and ``httpx.TimeoutException``).
        3. HTTP status mapping.
        4. Substring heuristics.
        5. ``UNKNOWN`` fallback.
    """
    if isinstance(exc, ProviderError):
        return exc.code
    if isinstance(exc, (TimeoutError, asyncio.TimeoutError)) or isinstance(exc, httpx.TimeoutException):
        return ErrorCode.TIMEOUT
    status = _extract_status(exc)
    if status is not None and status in _HTTP_STATUS_MAP:
        return _HTTP_STATUS_MAP[status]
    code = _heuristic_from_message(str(exc).lower())
    return code if code is not None else ErrorCode.UNKNOWN


__all__ = [
    "classify_exception",
    "classify_status",
    "_extract_status",
    "_HTTP_STATUS_MAP",
]
