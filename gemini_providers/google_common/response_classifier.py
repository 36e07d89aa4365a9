"""Success/error classification of backend responses.

Every operation passes the raw parsed response through :func:`classify`
before extracting its result. Two error shapes exist:

* direct: ``{"error": {"code": 404, "message": "...", "status": "NOT_FOUND"}}``
* batch: ``[{"error": {...}}]``, returned by ``streamGenerateContent`` when the
  call fails before streaming starts.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from ..base.errors import ApiError, ErrorCode, ProviderError, classify_status


def find_error(response: Any) -> Optional[Any]:
    """Return the ``error`` object of ``response`` in either shape, else ``None``."""
    if isinstance(response, Mapping) and "error" in response:
        return response["error"]
    if isinstance(response, list) and response and isinstance(response[0], Mapping) and "error" in response[0]:
        return response[0]["error"]
    return None


def build_api_error(
    error: Any,
    *,
    backend: str,
    provider: str,
    model: Optional[str] = None,
    status: Optional[Union[int, str]] = None,
) -> ApiError:
    """Build an :class:`ApiError` from a backend ``error`` object.

    ``status`` is the transport status, used when the object has no ``code``.
    """
    if isinstance(error, Mapping):
        backend_code = error.get("code", status)
        detail = error.get("message", "")
        normalized = classify_status(backend_code)
        if normalized is ErrorCode.UNKNOWN and error.get("status"):
            normalized = classify_status(error.get("status"))
    else:
        backend_code = status
        detail = "" if error is None else str(error)
        normalized = classify_status(status)
    return ApiError(
        code=normalized,
        provider=provider,
        model=model,
        raw=error,
        status=backend_code,
        detail=str(detail),
        backend=backend,
    )


def classify(response: Any, *, backend: str, provider: str, model: Optional[str] = None) -> Any:
    """Return ``response`` unchanged, or raise :class:`ApiError` if it is an error."""
    error = find_error(response)
    if error is None:
        return response
    raise build_api_error(error, backend=backend, provider=provider, model=model)


def error_from_failure(
    status: Optional[int],
    payload: Any,
    *,
    backend: str,
    provider: str,
    model: Optional[str] = None,
) -> ApiError:
    """Build the error for a failed transport call (non-2xx or no response)."""
    error = find_error(payload)
    if error is None:
        error = {"code": status, "message": "" if payload is None else str(payload)}
    return build_api_error(error, backend=backend, provider=provider, model=model, status=status)


def extract_total_tokens(response: Any, *, provider: str, model: Optional[str] = None) -> int:
    """Read ``totalTokens`` from a countTokens response.

    Zero-valued fields are omitted from the JSON, so an object without the key
    counts as ``0``.
    """
    try:
        return int(response.get("totalTokens", 0))
    except (AttributeError, TypeError, ValueError) as exc:
        raise ProviderError(
            code=ErrorCode.INTERNAL,
            message="malformed countTokens response",
            provider=provider,
            model=model,
            raw=response,
        ) from exc


__all__ = [
    "find_error",
    "build_api_error",
    "classify",
    "error_from_failure",
    "extract_total_tokens",
]
