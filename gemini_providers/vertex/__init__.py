"""Vertex AI adapter."""

from .client import VertexProvider

__all__ = ["VertexProvider"]
