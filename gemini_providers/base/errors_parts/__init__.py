"""Errors parts package public surface.

Re-exports individual error taxonomy components for optional direct imports.
Prefer importing from `gemini_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .auth_error import AuthError
from .api_error import ApiError, format_api_error
from .classification import classify_exception, classify_status

__all__ = [
    "ErrorCode",
    "ProviderError",
    "AuthError",
    "ApiError",
    "format_api_error",
    "classify_exception",
    "classify_status",
]
