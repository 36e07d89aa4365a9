"""VertexProvider adapter.

Talks to the Vertex AI publisher-model endpoints with an OAuth bearer token
obtained from ``gcloud auth print-access-token`` (or the configured
``token_command``). The token is refreshed before a request whenever it is
absent or older than one hour; a failed refresh raises :class:`AuthError` and
no request is sent.

Endpoints (``{host}`` is ``https://{region}-aiplatform.googleapis.com``)::

    chat / stream   {host}/v1/projects/{p}/locations/{r}/publishers/google/models/{m}:streamGenerateContent
    embed           {host}/v1/.../models/{embedding_model}:predict
    count tokens    {host}/v1beta1/.../models/{m}:countTokens
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple

from ..base.credentials import Credential, CredentialManager
from ..base.credentials.manager import Clock, TokenRunner
from ..base.dto import VertexSettings
from ..base.errors import ErrorCode, ProviderError
from ..base.http import HttpRequester
from ..config import get_provider_config
from ..config.defaults import VERTEX_HOST_TEMPLATE
from ..google_common.adapter import Endpoint, GoogleGenerativeProviderBase

_METHODS: Dict[Endpoint, Tuple[str, str]] = {
    Endpoint.CHAT: ("v1", "streamGenerateContent"),
    Endpoint.STREAM: ("v1", "streamGenerateContent"),
    Endpoint.EMBED: ("v1", "predict"),
    Endpoint.COUNT_TOKENS: ("v1beta1", "countTokens"),
}


class VertexProvider(GoogleGenerativeProviderBase):
    """Vertex AI adapter for chat, streaming chat, embeddings and token counts.

    Unset arguments fall back to :func:`get_provider_config` (environment,
    config file, defaults). A missing project id fails construction with a
    ``pydantic.ValidationError``.
    """

    backend_name = "Vertex AI"

    def __init__(
        self,
        project_id: Optional[str] = None,
        region: Optional[str] = None,
        model: Optional[str] = None,
        embedding_model: Optional[str] = None,
        token_command: Optional[Sequence[str]] = None,
        requester: Optional[HttpRequester] = None,
        credential_manager: Optional[CredentialManager] = None,
        runner: Optional[TokenRunner] = None,
        clock: Optional[Clock] = None,
    ) -> None:
        cfg = get_provider_config(
            "vertex",
            {
                "project_id": project_id,
                "region": region,
                "model": model,
                "embedding_model": embedding_model,
                "token_command": token_command,
            },
        )
        settings = VertexSettings.model_validate(cfg)
        self.project_id = settings.project_id
        self.region = settings.region
        self._credentials = credential_manager or CredentialManager(
            provider=self.provider_name,
            command=settings.token_command,
            runner=runner,
            clock=clock,
        )
        super().__init__(
            chat_model_name=settings.model,
            embedding_model_name=settings.embedding_model,
            credential=Credential(),
            requester=requester,
        )

    @property
    def provider_name(self) -> str:
        return "vertex"

    def endpoint_url(self, endpoint: Endpoint) -> str:
        version, method = _METHODS[endpoint]
        model = self.embedding_model_name if endpoint is Endpoint.EMBED else self.chat_model_name
        host = VERTEX_HOST_TEMPLATE.format(region=self.region)
        return (
            f"{host}/{version}/projects/{self.project_id}/locations/{self.region}"
            f"/publishers/google/models/{model}:{method}"
        )

    def _request_target(self, endpoint: Endpoint) -> Tuple[str, Dict[str, Any]]:
        credential = self._credentials.ensure_fresh(self.credential)
        headers = {
            "Authorization": b"Bearer " + (credential.value or b""),
            "Content-Type": "application/json",
        }
        return self.endpoint_url(endpoint), headers

    def build_embedding_request(self, text: str) -> Dict[str, Any]:
        return {"instances": [{"content": text}]}

    def extract_embedding(self, response: Any) -> List[float]:
        """Read ``predictions[0].embeddings.values``."""
        try:
            values = response["predictions"][0]["embeddings"]["values"]
            return [float(v) for v in values]
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise ProviderError(
                code=ErrorCode.INTERNAL,
                message="malformed embedding response",
                provider=self.provider_name,
                model=self.embedding_model_name,
                raw=response,
            ) from exc


__all__ = ["VertexProvider"]
