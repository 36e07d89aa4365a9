"""State machine for one streaming chat call.

States: ``IDLE -> AWAITING_BYTES -> COMPLETED | FAILED``. Each chunk received
while awaiting bytes is appended to the call's :class:`StreamBuffer` and
decoded; newly decoded text is reported through ``on_partial``. Transport
success runs the final decode, appends the assistant reply to the prompt and
reports ``on_complete``; transport failure reports ``on_error``. An exception
raised while handling bytes, or left on the transport future, also ends the
call in ``FAILED``. Terminal states are never left, so late or duplicate
transport callbacks are ignored.

All caller-facing work (callbacks and the prompt update) goes through
``dispatch``, which decides the thread it runs on.
"""

from __future__ import annotations

import concurrent.futures as cf
import time
from enum import Enum
from functools import partial
from typing import Any, Callable, Mapping, Optional

from ..base.constants import STREAM_CANCELLED
from ..base.errors import ErrorCode, ProviderError
from ..base.http import HttpRequester
from ..base.logging import LogContext, normalized_log_event
from ..base.models import ChatPrompt
from ..base.streaming import StreamBuffer
from .response_classifier import classify, error_from_failure
from .stream_decoder import decode_final, try_decode_partial

Dispatch = Callable[[Callable[[], Any]], Any]


def call_now(thunk: Callable[[], Any]) -> Any:
    """Default dispatch: run on the current (transport) thread."""
    return thunk()


class StreamState(str, Enum):
    IDLE = "idle"
    AWAITING_BYTES = "awaiting_bytes"
    COMPLETED = "completed"
    FAILED = "failed"


class StreamingChatCall:
    """One in-flight ``streamGenerateContent`` call."""

    def __init__(
        self,
        *,
        prompt: ChatPrompt,
        backend: str,
        provider: str,
        model: str,
        on_partial: Callable[[str], Any],
        on_complete: Callable[[str], Any],
        on_error: Callable[[Exception], Any],
        dispatch: Optional[Dispatch] = None,
        logger=None,
        ctx: Optional[LogContext] = None,
    ) -> None:
        self.state = StreamState.IDLE
        self.buffer = StreamBuffer()
        self._prompt = prompt
        self._backend = backend
        self._provider = provider
        self._model = model
        self._on_partial = on_partial
        self._on_complete = on_complete
        self._on_error = on_error
        self._dispatch = dispatch or call_now
        self._logger = logger
        self._ctx = ctx or LogContext(provider=provider, model=model, operation="chat_streaming")
        self._last_text = ""
        self._emitted = 0
        self._t0: Optional[float] = None

    def start(self, requester: HttpRequester, url: str, headers: Mapping[str, Any], body: Any) -> "cf.Future[None]":
        """Send the request and move to ``AWAITING_BYTES``."""
        self.state = StreamState.AWAITING_BYTES
        self._t0 = time.perf_counter()
        future = requester.post_streaming(
            url,
            headers,
            body,
            on_partial=self.handle_chunk,
            on_success=self.handle_success,
            on_error=self.handle_error,
        )
        future.add_done_callback(self.handle_done)
        return future

    def handle_chunk(self, chunk: bytes) -> None:
        if self.state is not StreamState.AWAITING_BYTES:
            return
        try:
            self.buffer.append(chunk)
            text = try_decode_partial(self.buffer.snapshot())
            if text is None or len(text) <= len(self._last_text):
                return
            self._last_text = text
            self._emitted += 1
            self._dispatch(partial(self._on_partial, text))
        except Exception as exc:
            self.fail(self._internal(exc))

    def handle_success(self, payload: Any) -> None:
        if self.state is not StreamState.AWAITING_BYTES:
            return
        try:
            classify(payload, backend=self._backend, provider=self._provider, model=self._model)
            text = decode_final(payload)
        except ProviderError as exc:
            self.fail(exc)
            return
        except Exception as exc:
            self.fail(self._internal(exc))
            return
        self.state = StreamState.COMPLETED
        self._log_end("stream.end", emitted=self._emitted)
        self._dispatch(partial(self._complete, text))

    def handle_error(self, status: Optional[int], payload: Any) -> None:
        if self.state is not StreamState.AWAITING_BYTES:
            return
        self.fail(error_from_failure(status, payload, backend=self._backend, provider=self._provider, model=self._model))

    def handle_done(self, future: "cf.Future[None]") -> None:
        """Fail a call whose transport future ended without a terminal callback."""
        if self.state in (StreamState.COMPLETED, StreamState.FAILED):
            return
        if future.cancelled():
            self.fail(
                ProviderError(
                    code=ErrorCode.CANCELLED,
                    message=STREAM_CANCELLED,
                    provider=self._provider,
                    model=self._model,
                )
            )
            return
        exc = future.exception()
        if exc is not None:
            self.fail(self._internal(exc))

    def fail(self, error: ProviderError) -> None:
        """Move to ``FAILED`` and report ``error`` (no-op once terminal)."""
        if self.state in (StreamState.COMPLETED, StreamState.FAILED):
            return
        self.state = StreamState.FAILED
        self._log_end("stream.error", error_code=error.code.value, error=error.message)
        self._dispatch(partial(self._on_error, error))

    def _complete(self, text: str) -> Any:
        self._prompt.add_assistant(text)
        return self._on_complete(text)

    def _internal(self, exc: BaseException) -> ProviderError:
        if isinstance(exc, ProviderError):
            return exc
        return ProviderError(
            code=ErrorCode.INTERNAL,
            message=str(exc) or type(exc).__name__,
            provider=self._provider,
            model=self._model,
            raw=exc,
        )

    def _log_end(self, event: str, **fields: Any) -> None:
        if self._logger is None:
            return
        latency_ms = (time.perf_counter() - self._t0) * 1000.0 if self._t0 is not None else None
        normalized_log_event(self._logger, event, self._ctx, phase="finalize", latency_ms=latency_ms, **fields)


__all__ = ["StreamState", "StreamingChatCall", "Dispatch", "call_now"]
