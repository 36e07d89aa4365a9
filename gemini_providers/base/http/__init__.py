"""HTTP utilities package for providers.

Exposes pooled httpx clients and the callback-driven requester.
"""

from .client import get_httpx_client, get_executor, close_all_clients
from .requester import HttpRequester, redact_url

__all__ = ["get_httpx_client", "get_executor", "close_all_clients", "HttpRequester", "redact_url"]
