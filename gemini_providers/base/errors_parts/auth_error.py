"""
Credential acquisition failure.

Raised before any network request when a bearer token cannot be issued or an
API key is missing. The message carries the raw output of the token command.
"""
from __future__ import annotations

from dataclasses import dataclass, field

from .error_code import ErrorCode
from .provider_error import ProviderError


@dataclass
class AuthError(ProviderError):
    """Token-issuing command failed or no credential is configured."""

    code: ErrorCode = field(default=ErrorCode.AUTH)
    message: str = ""
    provider: str = "unknown"

    def __str__(self) -> str:  # pragma: no cover - trivial
        return self.message


__all__ = ["AuthError"]
