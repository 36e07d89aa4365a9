"""Data model parts (one class per module)."""

from .interaction import Interaction, Role
from .chat_prompt import ChatPrompt

__all__ = ["Interaction", "Role", "ChatPrompt"]
