"""Unified provider error taxonomy public surface.

Re-exports the one-class-per-file implementations under
``gemini_providers.base.errors_parts`` to keep a stable import path.
"""

from .errors_parts.error_code import ErrorCode
from .errors_parts.provider_error import ProviderError
from .errors_parts.auth_error import AuthError
from .errors_parts.api_error import ApiError, format_api_error
from .errors_parts.classification import classify_exception, classify_status

__all__ = [
    "ErrorCode",
    "ProviderError",
    "AuthError",
    "ApiError",
    "format_api_error",
    "classify_exception",
    "classify_status",
]
