"""
Providers Base Package

Provider-agnostic contracts, models, errors and plumbing shared by the Vertex
and Gemini adapters:

- Interfaces: the ``ChatEmbeddingProvider`` capability protocol
- Models: ``ChatPrompt`` and its interactions
- Credentials: cached tokens and the refresh command
- HTTP: pooled httpx clients and the callback-driven requester
- Factory: lazy creation of provider adapters by canonical name
"""

from .credentials import Credential, CredentialManager
from .errors import ApiError, AuthError, ErrorCode, ProviderError, classify_exception
from .factory import ProviderFactory, UnknownProviderError
from .interfaces import ChatEmbeddingProvider
from .models import ChatPrompt, Interaction, Role
from .streaming import ChatStreamEvent, StreamBuffer, accumulate_events
from .timeouts import TimeoutConfig, get_timeout_config

__all__ = [
    "Credential",
    "CredentialManager",
    "ApiError",
    "AuthError",
    "ErrorCode",
    "ProviderError",
    "classify_exception",
    "ProviderFactory",
    "UnknownProviderError",
    "ChatEmbeddingProvider",
    "ChatPrompt",
    "Interaction",
    "Role",
    "ChatStreamEvent",
    "StreamBuffer",
    "accumulate_events",
    "TimeoutConfig",
    "get_timeout_config",
]
