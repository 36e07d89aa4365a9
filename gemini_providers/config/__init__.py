"""Unified configuration layer for providers.

Merge order (later wins):
    1. Built-in defaults (``config.defaults``)
    2. Optional external config file (JSON or YAML) named by
       ``PROVIDERS_CONFIG_FILE``
    3. Environment variables (``VERTEX_PROJECT_ID``, ``GEMINI_API_KEY``, ...)
    4. In-code overrides passed to :func:`get_provider_config`

A ``.env`` file (path from ``DOTENV_FILE``, default ``.env``) is read once
before the environment is consulted. It only fills variables that are unset or
hold placeholder values.

External config file example::

    vertex:
      project_id: my-project
      region: europe-west4
      model: gemini-1.0-pro
    gemini:
      model: gemini-1.5-flash

Public API
----------
* get_provider_config(provider: str, overrides: dict | None = None) -> dict
* get_model(provider: str) -> str | None
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import (
    GEMINI_DEFAULT_EMBEDDING_MODEL,
    GEMINI_DEFAULT_MODEL,
    VERTEX_DEFAULT_EMBEDDING_MODEL,
    VERTEX_DEFAULT_MODEL,
    VERTEX_DEFAULT_REGION,
)
from .env import ENV_FIELD_MAP, is_placeholder, resolve_env_value


DEFAULTS: Dict[str, Dict[str, Any]] = {
    "vertex": {
        "model": VERTEX_DEFAULT_MODEL,
        "embedding_model": VERTEX_DEFAULT_EMBEDDING_MODEL,
        "region": VERTEX_DEFAULT_REGION,
    },
    "gemini": {
        "model": GEMINI_DEFAULT_MODEL,
        "embedding_model": GEMINI_DEFAULT_EMBEDDING_MODEL,
    },
}


_FILE_CACHE: Optional[Dict[str, Any]] = None
_DOTENV_LOADED = False


def _load_dotenv_once() -> None:
    """Read KEY=VALUE lines from the dotenv file once per process."""
    global _DOTENV_LOADED
    if _DOTENV_LOADED:
        return
    path = os.getenv("DOTENV_FILE", ".env")
    if not os.path.isfile(path):
        _DOTENV_LOADED = True
        return
    try:
        with open(path, "r", encoding="utf-8") as fh:
            for line in fh:
                line = line.strip()
                if not line or line.startswith("#") or "=" not in line:
                    continue
                k, v = line.split("=", 1)
                k = k.strip()
                v = v.strip().strip('"').strip("'")
                if k and (k not in os.environ or is_placeholder(os.environ.get(k))):
                    os.environ[k] = v
    finally:
        _DOTENV_LOADED = True


def _load_external_config() -> Dict[str, Any]:
    """Load and cache the optional config file (JSON first, then YAML)."""
    global _FILE_CACHE
    if _FILE_CACHE is not None:
        return _FILE_CACHE
    path = os.getenv("PROVIDERS_CONFIG_FILE")
    if not path or not Path(path).exists():
        _FILE_CACHE = {}
        return _FILE_CACHE
    text = Path(path).read_text(encoding="utf-8")
    try:
        data = json.loads(text)
    except ValueError:
        try:
            data = yaml.safe_load(text) or {}
        except yaml.YAMLError:
            data = {}
    _FILE_CACHE = data if isinstance(data, dict) else {}
    return _FILE_CACHE


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    for field in ENV_FIELD_MAP:
        value, _name = resolve_env_value(provider, field)
        if value is not None:
            out[field] = value
    return out


def reset_config_cache() -> None:
    """Forget the cached config file and dotenv state (tests, reloads)."""
    global _FILE_CACHE, _DOTENV_LOADED
    _FILE_CACHE = None
    _DOTENV_LOADED = False


def get_provider_config(provider: str, overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for a provider.

    Merge order (later wins): defaults -> external config -> env vars -> overrides.
    ``None`` values in ``overrides`` are ignored.
    """
    _load_dotenv_once()
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}

    cfg |= DEFAULTS.get(name, {})

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= _env_overrides(name)

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}

    return cfg


def get_model(provider: str) -> Optional[str]:
    return get_provider_config(provider).get("model")


__all__ = [
    "get_provider_config",
    "get_model",
    "reset_config_cache",
    "DEFAULTS",
]
