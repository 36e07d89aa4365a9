"""
Structured backend error.

Constructed only from a response body carrying an ``error`` object. Keeps the
backend's own status (an HTTP-style integer or a canonical status string such
as ``"RESOURCE_EXHAUSTED"``) alongside the normalized :class:`ErrorCode`.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Union

from .error_code import ErrorCode
from .provider_error import ProviderError


def format_api_error(backend: str, status: object, detail: object) -> str:
    """Return the user-facing error text for a backend failure."""
    return f"Problem calling {backend}: status: {status} message: {detail}"


@dataclass
class ApiError(ProviderError):
    """Backend returned a structured error object.

    Attributes:
        status: Backend status code exactly as reported (``429``, ``"NOT_FOUND"``).
        detail: Backend message exactly as reported.
        backend: Human backend name used in the formatted message.
    """

    code: ErrorCode = field(default=ErrorCode.UNKNOWN)
    message: str = ""
    provider: str = "unknown"
    status: Optional[Union[int, str]] = None
    detail: str = ""
    backend: str = ""

    def __post_init__(self) -> None:
        if not self.message:
            self.message = format_api_error(self.backend or self.provider, self.status, self.detail)

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


__all__ = ["ApiError", "format_api_error"]
