"""Validated provider settings.

Purpose
-------
Turn the merged configuration mapping returned by
:func:`gemini_providers.config.get_provider_config` into typed settings before
an adapter is constructed, so a missing project id or a blank model name fails
at construction rather than on the first request.

External dependencies
---------------------
- Pydantic v2 ``BaseModel`` for validation.

Failure modes
-------------
- ``pydantic.ValidationError`` on missing or malformed fields. Unknown keys
  from the config file are ignored.
"""
from __future__ import annotations

from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..credentials.token_command import DEFAULT_TOKEN_COMMAND


class _SettingsBase(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)

    model: str = Field(..., min_length=1)
    embedding_model: str = Field(..., min_length=1)

    @field_validator("model", "embedding_model", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value


class VertexSettings(_SettingsBase):
    """Enterprise backend settings.

    Attributes
    ----------
    project_id:
        Google Cloud project hosting the Vertex AI endpoint.
    region:
        Vertex AI location; used both as host prefix and path segment.
    token_command:
        Argument vector printing an access token.
    """

    project_id: str = Field(..., min_length=1)
    region: str = Field(..., min_length=1)
    token_command: Tuple[str, ...] = DEFAULT_TOKEN_COMMAND

    @field_validator("token_command", mode="before")
    @classmethod
    def _split_command(cls, value):
        if isinstance(value, str):
            return tuple(value.split())
        return value


class GeminiSettings(_SettingsBase):
    """Direct-key backend settings. ``api_key`` may be absent at construction;
    requests without it fail with ``AuthError``."""

    api_key: Optional[str] = None

    @field_validator("api_key", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value.strip() if isinstance(value, str) else value


__all__ = ["VertexSettings", "GeminiSettings"]
