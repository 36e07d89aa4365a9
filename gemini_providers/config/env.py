"""gemini_providers.config.env
===========================

Environment variable names for provider credentials and settings.

Design Notes
------------
- The Gemini API key has historically been read from both ``GEMINI_API_KEY``
  and ``GOOGLE_API_KEY``; the canonical name is listed first and wins.
- Vertex has no static credential (tokens are issued on demand), but its
  project id is commonly exported as ``GOOGLE_CLOUD_PROJECT``.
- Helpers never raise on unknown providers or unset variables.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

# Provider → settings field → ordered env var names (canonical first)
ENV_ALIASES: Dict[str, Dict[str, Tuple[str, ...]]] = {
    "gemini": {
        "api_key": ("GEMINI_API_KEY", "GOOGLE_API_KEY"),
    },
    "vertex": {
        "project_id": ("VERTEX_PROJECT_ID", "GOOGLE_CLOUD_PROJECT"),
    },
}

# Settings field → env suffix; ``<PROVIDER>_<SUFFIX>`` is always consulted.
ENV_FIELD_MAP: Dict[str, str] = {
    "model": "MODEL",
    "embedding_model": "EMBEDDING_MODEL",
    "api_key": "API_KEY",  # pragma: allowlist secret - env suffix name, not a secret
    "project_id": "PROJECT_ID",
    "region": "REGION",
    "token_command": "TOKEN_COMMAND",
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if ``val`` looks like a placeholder rather than a real value.

    Heuristics (case-insensitive): contains 'placeholder', 'changeme' or
    'example', or starts with 'test_'.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or "example" in v or v.startswith("test_")


def get_env_var_candidates(provider: str, field: str) -> Iterable[str]:
    """Yield env var names for ``provider``/``field`` in priority order."""
    p = (provider or "").lower()
    seen = set()
    for name in ENV_ALIASES.get(p, {}).get(field, ()):
        seen.add(name)
        yield name
    suffix = ENV_FIELD_MAP.get(field)
    if suffix:
        name = f"{p.upper()}_{suffix}"
        if name not in seen:
            yield name


def resolve_env_value(provider: str, field: str) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(value, env_var_used)`` for the first non-empty candidate."""
    for name in get_env_var_candidates(provider, field):
        if val := os.environ.get(name):
            return val, name
    return None, None


__all__ = [
    "ENV_ALIASES",
    "ENV_FIELD_MAP",
    "is_placeholder",
    "get_env_var_candidates",
    "resolve_env_value",
]
