"""Typed DTOs validated with Pydantic."""

from .provider_settings import GeminiSettings, VertexSettings

__all__ = ["GeminiSettings", "VertexSettings"]
