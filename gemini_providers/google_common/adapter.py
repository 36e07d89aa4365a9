"""Shared adapter logic for Google generative-language backends.

:class:`GoogleGenerativeProviderBase` implements every public operation once;
the Vertex and Gemini adapters only supply endpoints, credentials and the
embedding request/response shape.

Operations:
    embed / count_tokens / chat        blocking, raise ``ProviderError``
    embed_async / chat_streaming       non-blocking, callbacks + ``Future``
    stream_chat                        iterator of ``ChatStreamEvent``

Failure semantics:
    ``AuthError`` is raised (or reported) before any request is sent.
    ``ApiError`` carries the backend's code and message. Nothing is retried.
"""

from __future__ import annotations

import concurrent.futures as cf
import logging
import queue
import time
from enum import Enum
from functools import partial
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple

from ..base.credentials import Credential
from ..base.errors import AuthError, ProviderError
from ..base.http import HttpRequester
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import ChatPrompt
from ..base.streaming import ChatStreamEvent
from .request_builder import build_chat_request, build_count_tokens_request, prelude_dropped
from .response_classifier import classify, error_from_failure, extract_total_tokens
from .stream_decoder import decode_final
from .streaming_call import Dispatch, StreamingChatCall, call_now


class Endpoint(str, Enum):
    CHAT = "chat"
    STREAM = "stream"
    EMBED = "embed"
    COUNT_TOKENS = "count_tokens"


def completed_future() -> "cf.Future[None]":
    """Return a future that is already done (requests never sent)."""
    future: "cf.Future[None]" = cf.Future()
    future.set_result(None)
    return future


class GoogleGenerativeProviderBase:
    """Chat, streaming, embeddings and token counting over one backend.

    Subclasses implement :meth:`endpoint_url`, :meth:`_request_target`,
    :meth:`build_embedding_request` and :meth:`extract_embedding`.
    """

    backend_name = "Google generative AI"

    def __init__(
        self,
        *,
        chat_model_name: str,
        embedding_model_name: str,
        credential: Optional[Credential] = None,
        requester: Optional[HttpRequester] = None,
    ) -> None:
        self.chat_model_name = chat_model_name
        self.embedding_model_name = embedding_model_name
        self.credential = credential or Credential()
        self._requester = requester or HttpRequester(purpose=f"{self.provider_name}.http")
        self._logger = get_logger(f"providers.{self.provider_name}")

    @property
    def provider_name(self) -> str:
        raise NotImplementedError

    @property
    def credential_generated_at(self) -> Optional[float]:
        return self.credential.issued_at

    # ---- backend hooks ----
    def endpoint_url(self, endpoint: Endpoint) -> str:
        raise NotImplementedError

    def _request_target(self, endpoint: Endpoint) -> Tuple[str, Dict[str, Any]]:
        """Return ``(url, headers)`` with a usable credential applied.

        Raises:
            AuthError: no credential can be obtained.
        """
        raise NotImplementedError

    def build_embedding_request(self, text: str) -> Dict[str, Any]:
        raise NotImplementedError

    def extract_embedding(self, response: Any) -> List[float]:
        raise NotImplementedError

    # ---- blocking operations ----
    def embed(self, text: str) -> List[float]:
        """Return the embedding vector of ``text``."""
        return self._call_blocking(
            "embed",
            self.embedding_model_name,
            Endpoint.EMBED,
            self.build_embedding_request(text),
            self.extract_embedding,
        )

    def chat(self, prompt: ChatPrompt) -> str:
        """Return the reply to ``prompt`` and append it as an assistant turn."""
        ctx = self._ctx("chat", self.chat_model_name)
        body = self._chat_body(prompt, ctx)
        text = self._call_blocking("chat", self.chat_model_name, Endpoint.CHAT, body, decode_final)
        prompt.add_assistant(text)
        return text

    def count_tokens(self, prompt: ChatPrompt) -> int:
        """Return the backend's token count for ``prompt``."""
        return self._call_blocking(
            "count_tokens",
            self.chat_model_name,
            Endpoint.COUNT_TOKENS,
            build_count_tokens_request(prompt),
            partial(extract_total_tokens, provider=self.provider_name, model=self.chat_model_name),
        )

    # ---- non-blocking operations ----
    def embed_async(
        self,
        text: str,
        on_success: Callable[[List[float]], Any],
        on_error: Callable[[Exception], Any],
        dispatch: Optional[Dispatch] = None,
    ) -> "cf.Future[None]":
        """Request an embedding without blocking; report through callbacks."""
        dispatch = dispatch or call_now
        model = self.embedding_model_name
        ctx = self._ctx("embed_async", model)
        normalized_log_event(self._logger, "embed_async.start", ctx, phase="start")
        try:
            url, headers = self._request_target(Endpoint.EMBED)
        except AuthError as exc:
            self._log_error("embed_async", ctx, exc)
            dispatch(partial(on_error, exc))
            return completed_future()

        def _success(payload: Any) -> None:
            try:
                values = self.extract_embedding(self._classify(payload, model))
            except ProviderError as exc:
                self._log_error("embed_async", ctx, exc)
                dispatch(partial(on_error, exc))
                return
            normalized_log_event(self._logger, "embed_async.end", ctx, phase="finalize", emitted=True)
            dispatch(partial(on_success, values))

        def _failure(status: Optional[int], payload: Any) -> None:
            exc = error_from_failure(status, payload, backend=self.backend_name, provider=self.provider_name, model=model)
            self._log_error("embed_async", ctx, exc)
            dispatch(partial(on_error, exc))

        return self._requester.post_streaming(
            url,
            headers,
            self.build_embedding_request(text),
            on_success=_success,
            on_error=_failure,
        )

    def chat_streaming(
        self,
        prompt: ChatPrompt,
        on_partial: Callable[[str], Any],
        on_complete: Callable[[str], Any],
        on_error: Callable[[Exception], Any],
        dispatch: Optional[Dispatch] = None,
    ) -> "cf.Future[None]":
        """Stream a chat reply without blocking.

        ``on_partial`` receives all text decoded so far each time it grows.
        ``on_complete`` receives the final text after it has been appended to
        ``prompt``. ``on_error`` receives an ``AuthError`` or ``ApiError``.
        """
        model = self.chat_model_name
        ctx = self._ctx("chat_streaming", model)
        call = StreamingChatCall(
            prompt=prompt,
            backend=self.backend_name,
            provider=self.provider_name,
            model=model,
            on_partial=on_partial,
            on_complete=on_complete,
            on_error=on_error,
            dispatch=dispatch,
            logger=self._logger,
            ctx=ctx,
        )
        body = self._chat_body(prompt, ctx)
        normalized_log_event(
            self._logger,
            "stream.start",
            ctx,
            phase="start",
            temperature=prompt.temperature,
            max_output_tokens=prompt.max_output_tokens,
        )
        try:
            url, headers = self._request_target(Endpoint.STREAM)
        except AuthError as exc:
            call.fail(exc)
            return completed_future()
        return call.start(self._requester, url, headers, body)

    def stream_chat(self, prompt: ChatPrompt) -> Iterator[ChatStreamEvent]:
        """Yield partial events, then exactly one terminal event.

        Callbacks and the prompt update run on the consuming thread.
        """
        channel: "queue.Queue[Callable[[], ChatStreamEvent]]" = queue.Queue()
        provider, model = self.provider_name, self.chat_model_name
        seen = {"text": ""}

        def _delta(text: str) -> str:
            previous = seen["text"]
            seen["text"] = text
            return text[len(previous):] if text.startswith(previous) else ""

        def _partial(text: str) -> ChatStreamEvent:
            return ChatStreamEvent(provider=provider, model=model, delta=_delta(text), text=text)

        def _complete(text: str) -> ChatStreamEvent:
            return ChatStreamEvent(provider=provider, model=model, delta=_delta(text), text=text, finish=True)

        def _error(exc: Exception) -> ChatStreamEvent:
            return ChatStreamEvent(provider=provider, model=model, delta=None, finish=True, error=str(exc), raw=exc)

        self.chat_streaming(prompt, _partial, _complete, _error, dispatch=channel.put)
        while True:
            event = channel.get()()
            yield event
            if event.finish:
                return

    # ---- helpers ----
    def _ctx(self, operation: str, model: str) -> LogContext:
        return LogContext(provider=self.provider_name, model=model, operation=operation)

    def _chat_body(self, prompt: ChatPrompt, ctx: LogContext) -> Dict[str, Any]:
        if prelude_dropped(prompt):
            normalized_log_event(
                self._logger,
                "prompt.prelude_dropped",
                ctx,
                phase="start",
                level=logging.DEBUG,
                interactions=len(prompt.interactions),
            )
        return build_chat_request(prompt)

    def _classify(self, response: Any, model: str) -> Any:
        return classify(response, backend=self.backend_name, provider=self.provider_name, model=model)

    def _log_error(self, operation: str, ctx: LogContext, exc: ProviderError) -> None:
        normalized_log_event(
            self._logger,
            f"{operation}.error",
            ctx,
            phase="finalize",
            error_code=exc.code.value,
            error=exc.message,
        )

    def _call_blocking(
        self,
        operation: str,
        model: str,
        endpoint: Endpoint,
        body: Mapping[str, Any],
        extract: Callable[[Any], Any],
    ) -> Any:
        ctx = self._ctx(operation, model)
        normalized_log_event(self._logger, f"{operation}.start", ctx, phase="start")
        t0 = time.perf_counter()
        try:
            url, headers = self._request_target(endpoint)
            response = self._requester.post_json(url, headers, body)
            result = extract(self._classify(response, model))
        except ProviderError as exc:
            self._log_error(operation, ctx, exc)
            raise
        normalized_log_event(
            self._logger,
            f"{operation}.end",
            ctx,
            phase="finalize",
            emitted=True,
            latency_ms=(time.perf_counter() - t0) * 1000.0,
        )
        return result


__all__ = ["GoogleGenerativeProviderBase", "Endpoint", "completed_future"]
