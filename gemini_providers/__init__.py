"""gemini_providers package

Adapters for Google's two generative-language backends behind one surface:

* ``vertex``: Vertex AI, bearer token from ``gcloud auth print-access-token``
* ``gemini``: Gemini API, static API key

Public API (re-exported):
    - Version: ``__version__``
    - Exceptions: :class:`ProviderError`, :class:`AuthError`, :class:`ApiError`,
      :class:`ErrorCode`
    - Prompt model: :class:`ChatPrompt`, :class:`Interaction`, :class:`Role`
    - Factory: :func:`create`, :class:`ProviderFactory`
"""

from .base.errors import ApiError, AuthError, ErrorCode, ProviderError
from .base.factory import ProviderFactory, UnknownProviderError
from .base.interfaces import ChatEmbeddingProvider
from .base.models import ChatPrompt, Interaction, Role
from .base.streaming import ChatStreamEvent

__version__ = "0.1.0"


def create(provider_name: str, **kwargs):
    """Instantiate a provider adapter by canonical name (``"vertex"`` or ``"gemini"``).

    Keyword arguments go to the adapter constructor; unset values come from
    the environment and config file.

    Raises:
        UnknownProviderError: unknown name or rejected constructor arguments.
    """
    return ProviderFactory.create(provider_name, **kwargs)


__all__ = [
    "__version__",
    "ProviderError",
    "AuthError",
    "ApiError",
    "ErrorCode",
    "ChatPrompt",
    "Interaction",
    "Role",
    "ChatStreamEvent",
    "ChatEmbeddingProvider",
    "ProviderFactory",
    "UnknownProviderError",
    "create",
]
