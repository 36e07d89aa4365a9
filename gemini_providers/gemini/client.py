"""GeminiProvider adapter.

Direct Gemini API access authenticated by an API key sent as the ``key``
query parameter. There is no refresh: the key is taken from the constructor,
``GEMINI_API_KEY``/``GOOGLE_API_KEY`` or the config file, and a request
without one fails with :class:`AuthError` before anything is sent.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from ..base.constants import MISSING_API_KEY_ERROR
from ..base.credentials import Credential
from ..base.dto import GeminiSettings
from ..base.errors import AuthError, ErrorCode, ProviderError
from ..base.http import HttpRequester
from ..config import get_provider_config
from ..config.defaults import GEMINI_DEFAULT_BASE_URL
from ..google_common.adapter import Endpoint, GoogleGenerativeProviderBase

_METHODS: Dict[Endpoint, str] = {
    Endpoint.CHAT: "generateContent",
    Endpoint.STREAM: "streamGenerateContent",
    Endpoint.EMBED: "embedContent",
    Endpoint.COUNT_TOKENS: "countTokens",
}


class GeminiProvider(GoogleGenerativeProviderBase):
    """Gemini API adapter for chat, streaming chat, embeddings and token counts."""

    backend_name = "Gemini"

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: Optional[str] = None,
        embedding_model: Optional[str] = None,
        requester: Optional[HttpRequester] = None,
        base_url: str = GEMINI_DEFAULT_BASE_URL,
    ) -> None:
        cfg = get_provider_config(
            "gemini",
            {"api_key": api_key, "model": model, "embedding_model": embedding_model},
        )
        settings = GeminiSettings.model_validate(cfg)
        self._base_url = base_url.rstrip("/")
        super().__init__(
            chat_model_name=settings.model,
            embedding_model_name=settings.embedding_model,
            credential=Credential.from_text(settings.api_key),
            requester=requester,
        )

    @property
    def provider_name(self) -> str:
        return "gemini"

    def endpoint_url(self, endpoint: Endpoint) -> str:
        model = self.embedding_model_name if endpoint is Endpoint.EMBED else self.chat_model_name
        return f"{self._base_url}/models/{model}:{_METHODS[endpoint]}?key={self.credential.as_text()}"

    def _request_target(self, endpoint: Endpoint) -> Tuple[str, Dict[str, Any]]:
        if not self.credential.value:
            raise AuthError(message=MISSING_API_KEY_ERROR, provider=self.provider_name)
        return self.endpoint_url(endpoint), {"Content-Type": "application/json"}

    def build_embedding_request(self, text: str) -> Dict[str, Any]:
        return {"model": self.embedding_model_name, "content": {"parts": [{"text": text}]}}

    def extract_embedding(self, response: Any) -> List[float]:
        """Read ``embedding.values``."""
        try:
            return [float(v) for v in response["embedding"]["values"]]
        except (KeyError, TypeError, ValueError) as exc:
            raise ProviderError(
                code=ErrorCode.INTERNAL,
                message="malformed embedding response",
                provider=self.provider_name,
                model=self.embedding_model_name,
                raw=response,
            ) from exc


__all__ = ["GeminiProvider"]
