"""
Interaction DTO: one turn of a chat conversation.

``Role`` is the generic role vocabulary shared by every backend; adapters
translate it to wire values (Gemini calls the assistant ``"model"``).
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Role(str, Enum):
    """Author of an interaction."""

    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Interaction:
    """A single chat turn.

    Attributes:
        role: Who produced the content.
        content: Plain text of the turn.
    """

    role: Role
    content: str

    @classmethod
    def user(cls, content: str) -> "Interaction":
        return cls(Role.USER, content)

    @classmethod
    def assistant(cls, content: str) -> "Interaction":
        return cls(Role.ASSISTANT, content)


__all__ = ["Role", "Interaction"]
