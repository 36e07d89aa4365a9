"""gemini_providers.config.defaults
================================

Small, stable default values for the Vertex and Gemini adapters. They can be
overridden through environment variables, the optional config file, or
constructor arguments.

This module performs no I/O and imports nothing from the rest of the package.
"""

from __future__ import annotations

# ---- Vertex AI (enterprise, bearer token) ----
VERTEX_DEFAULT_REGION = "us-central1"
VERTEX_DEFAULT_MODEL = "gemini-1.0-pro"
VERTEX_DEFAULT_EMBEDDING_MODEL = "textembedding-gecko@003"
VERTEX_HOST_TEMPLATE = "https://{region}-aiplatform.googleapis.com"

# ---- Gemini API (direct, API key) ----
GEMINI_DEFAULT_MODEL = "gemini-1.0-pro"
GEMINI_DEFAULT_EMBEDDING_MODEL = "embedding-001"
GEMINI_DEFAULT_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"


__all__ = [
    "VERTEX_DEFAULT_REGION",
    "VERTEX_DEFAULT_MODEL",
    "VERTEX_DEFAULT_EMBEDDING_MODEL",
    "VERTEX_HOST_TEMPLATE",
    "GEMINI_DEFAULT_MODEL",
    "GEMINI_DEFAULT_EMBEDDING_MODEL",
    "GEMINI_DEFAULT_BASE_URL",
]
