"""ChatEmbeddingProvider Protocol (single-class module).

Capability set shared by the Vertex and Gemini adapters.
"""

from __future__ import annotations

import concurrent.futures as cf
from typing import Any, Callable, Iterator, List, Optional, Protocol, runtime_checkable

from ..models import ChatPrompt
from ..streaming import ChatStreamEvent

Dispatch = Callable[[Callable[[], Any]], Any]


@runtime_checkable
class ChatEmbeddingProvider(Protocol):
    """Chat, streaming chat, embeddings and token counting.

    Blocking operations raise :class:`ProviderError` subclasses. Non-blocking
    operations return a ``Future`` at once and report through callbacks:
    ``on_partial`` zero or more times, then exactly one of the terminal
    callbacks. Callbacks, and the prompt update on success, are routed through
    ``dispatch`` so the caller decides which thread runs them.
    """

    @property
    def provider_name(self) -> str:
        ...

    def embed(self, text: str) -> List[float]:
        ...

    def embed_async(
        self,
        text: str,
        on_success: Callable[[List[float]], Any],
        on_error: Callable[[Exception], Any],
        dispatch: Optional[Dispatch] = None,
    ) -> "cf.Future[None]":
        ...

    def chat(self, prompt: ChatPrompt) -> str:
        ...

    def chat_streaming(
        self,
        prompt: ChatPrompt,
        on_partial: Callable[[str], Any],
        on_complete: Callable[[str], Any],
        on_error: Callable[[Exception], Any],
        dispatch: Optional[Dispatch] = None,
    ) -> "cf.Future[None]":
        ...

    def stream_chat(self, prompt: ChatPrompt) -> Iterator[ChatStreamEvent]:
        ...

    def count_tokens(self, prompt: ChatPrompt) -> int:
        ...
