"""
Provider-agnostic domain models public surface.

Re-exports the one-class-per-file implementations under
``gemini_providers.base.models_parts``.
"""

from .models_parts.interaction import Interaction, Role
from .models_parts.chat_prompt import ChatPrompt

__all__ = [
    "Interaction",
    "Role",
    "ChatPrompt",
]
