"""
Provider-agnostic interfaces (Protocols) for the providers layer.

Re-exports the single-class modules under ``gemini_providers.base.interfaces_parts``.
"""

from __future__ import annotations

from .interfaces_parts import ChatEmbeddingProvider, Dispatch

__all__ = [
    "ChatEmbeddingProvider",
    "Dispatch",
]
