"""HTTP requester used by the provider adapters.

Two forms over the same pooled ``httpx`` client:

* :meth:`HttpRequester.post_json` blocks and returns the parsed body.
* :meth:`HttpRequester.post_streaming` returns a ``Future`` immediately and
  reports progress through callbacks on a worker thread:
  ``on_partial(chunk)`` zero or more times, then exactly one of
  ``on_success(payload)`` or ``on_error(status, payload)``.

Error bodies are always handed on in the backend's error shape. A non-JSON
error body or a transport failure is wrapped as
``{"error": {"code": ..., "message": ...}}`` so the response classifier
handles every failure the same way.

URLs are logged without their query string (the Gemini API key travels there).
"""

from __future__ import annotations

import concurrent.futures as cf
import json
import time
from typing import Any, Callable, Dict, Mapping, Optional
from urllib.parse import urlsplit, urlunsplit

import httpx

from ..errors import ErrorCode, ProviderError, classify_exception
from ..logging import LogContext, get_logger, normalized_log_event
from ..timeouts import get_timeout_config
from .client import get_executor, get_httpx_client

PartialCallback = Callable[[bytes], None]
SuccessCallback = Callable[[Any], None]
ErrorCallback = Callable[[Optional[int], Any], None]


def redact_url(url: str) -> str:
    """Return ``url`` with its query string removed."""
    parts = urlsplit(url)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, "", ""))


def parse_body(content: bytes) -> Any:
    """Parse a response body as JSON; return ``None`` when it is not JSON."""
    if not content:
        return None
    try:
        return json.loads(content)
    except ValueError:
        return None


def error_payload(status: Optional[int], content: bytes) -> Any:
    """Return the JSON error body, or wrap a non-JSON body in the error shape."""
    parsed = parse_body(content)
    if isinstance(parsed, (dict, list)):
        return parsed
    text = content.decode("utf-8", errors="replace").strip()
    return {"error": {"code": status if status is not None else ErrorCode.UNKNOWN.value, "message": text}}


def transport_error_payload(exc: Exception) -> Dict[str, Any]:
    """Describe a transport exception in the backend error shape."""
    return {"error": {"code": classify_exception(exc).value, "message": str(exc) or type(exc).__name__}}


class HttpRequester:
    """Blocking and callback-driven JSON POST requests over pooled clients.

    Parameters:
        purpose: Client pool key (see :func:`get_httpx_client`).
        executor: Executor for non-blocking requests. Defaults to the shared
            package executor.
        client: Explicit client, bypassing the pool (tests, custom transports).
    """

    def __init__(
        self,
        *,
        purpose: str = "providers",
        executor: Optional[cf.Executor] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        self._purpose = purpose
        self._client = client
        self._executor = executor
        self._logger = get_logger("http")

    @property
    def client(self) -> httpx.Client:
        if self._client is not None:
            return self._client
        return get_httpx_client(None, purpose=self._purpose)

    def post_json(self, url: str, headers: Mapping[str, str], body: Any) -> Any:
        """POST ``body`` and return the parsed JSON response.

        Raises:
            ProviderError: transport failure (connection, timeout).
        """
        ctx = LogContext(operation="http.post", extra={"url": redact_url(url)})
        t0 = time.perf_counter()
        try:
            resp = self.client.post(
                url,
                headers=dict(headers),
                json=body,
                timeout=get_timeout_config().httpx_timeout(),
            )
        except httpx.HTTPError as exc:
            code = classify_exception(exc)
            normalized_log_event(self._logger, "http.error", ctx, phase="finalize", error_code=code.value, error=str(exc))
            raise ProviderError(code=code, message=str(exc), provider="http", raw=exc) from exc
        normalized_log_event(
            self._logger,
            "http.end",
            ctx,
            phase="finalize",
            status=resp.status_code,
            latency_ms=(time.perf_counter() - t0) * 1000.0,
        )
        if resp.is_error:
            return error_payload(resp.status_code, resp.content)
        return parse_body(resp.content)

    def post_streaming(
        self,
        url: str,
        headers: Mapping[str, str],
        body: Any,
        *,
        on_success: SuccessCallback,
        on_error: ErrorCallback,
        on_partial: Optional[PartialCallback] = None,
    ) -> "cf.Future[None]":
        """Start a streamed POST on a worker thread and return at once."""
        executor = self._executor or get_executor()
        return executor.submit(
            self._run_streaming,
            url,
            dict(headers),
            body,
            on_partial,
            on_success,
            on_error,
        )

    def _run_streaming(
        self,
        url: str,
        headers: Dict[str, str],
        body: Any,
        on_partial: Optional[PartialCallback],
        on_success: SuccessCallback,
        on_error: ErrorCallback,
    ) -> None:
        ctx = LogContext(operation="http.stream", extra={"url": redact_url(url)})
        t0 = time.perf_counter()
        received = bytearray()
        chunks = 0
        try:
            with self.client.stream(
                "POST",
                url,
                headers=headers,
                json=body,
                timeout=get_timeout_config().httpx_timeout(streaming=True),
            ) as resp:
                status = resp.status_code
                if resp.is_error:
                    content = resp.read()
                    normalized_log_event(self._logger, "http.end", ctx, phase="finalize", status=status)
                    on_error(status, error_payload(status, content))
                    return
                for chunk in resp.iter_bytes():
                    if not chunk:
                        continue
                    chunks += 1
                    received.extend(chunk)
                    if on_partial is not None:
                        on_partial(chunk)
        except httpx.HTTPError as exc:
            code = classify_exception(exc)
            normalized_log_event(self._logger, "http.error", ctx, phase="mid_stream", error_code=code.value, error=str(exc))
            on_error(None, transport_error_payload(exc))
            return
        normalized_log_event(
            self._logger,
            "http.end",
            ctx,
            phase="finalize",
            status=status,
            emitted=chunks,
            latency_ms=(time.perf_counter() - t0) * 1000.0,
        )
        payload = parse_body(bytes(received))
        if payload is None:
            on_error(status, error_payload(status, bytes(received)))
            return
        on_success(payload)


__all__ = [
    "HttpRequester",
    "PartialCallback",
    "SuccessCallback",
    "ErrorCallback",
    "redact_url",
    "parse_body",
    "error_payload",
    "transport_error_payload",
]
