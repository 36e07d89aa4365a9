"""Credential lifecycle: cached value, staleness, refresh command."""

from .credential import Credential
from .manager import CredentialManager, TOKEN_TTL_SECONDS, ERROR_MARKER
from .token_command import DEFAULT_TOKEN_COMMAND, run_token_command

__all__ = [
    "Credential",
    "CredentialManager",
    "TOKEN_TTL_SECONDS",
    "ERROR_MARKER",
    "DEFAULT_TOKEN_COMMAND",
    "run_token_command",
]
