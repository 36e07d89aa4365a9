"""Gemini API adapter."""

from .client import GeminiProvider

__all__ = ["GeminiProvider"]
