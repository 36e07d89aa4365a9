"""Interface parts (one Protocol per module)."""

from .chat_embedding_provider import ChatEmbeddingProvider, Dispatch

__all__ = ["ChatEmbeddingProvider", "Dispatch"]
