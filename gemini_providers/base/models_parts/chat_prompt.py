"""
ChatPrompt DTO: everything a chat call needs besides the provider.

The prompt is owned by the caller. Adapters read it to build requests and
append exactly one assistant :class:`Interaction` after each completed chat
call; nothing else in the prompt is modified.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Tuple

from .interaction import Interaction


@dataclass
class ChatPrompt:
    """Provider-agnostic chat prompt.

    Attributes:
        system_context: Optional instructions preceding the conversation.
        examples: Ordered few-shot ``(input, output)`` pairs.
        interactions: Ordered conversation turns; grows by one assistant turn
            per completed chat call.
        temperature: Sampling temperature, sent only when set.
        max_output_tokens: Output token cap, sent only when set.
    """

    system_context: Optional[str] = None
    examples: List[Tuple[str, str]] = field(default_factory=list)
    interactions: List[Interaction] = field(default_factory=list)
    temperature: Optional[float] = None
    max_output_tokens: Optional[int] = None

    def add_user(self, content: str) -> Interaction:
        """Append a user turn and return it."""
        interaction = Interaction.user(content)
        self.interactions.append(interaction)
        return interaction

    def add_assistant(self, content: str) -> Interaction:
        """Append an assistant turn and return it."""
        interaction = Interaction.assistant(content)
        self.interactions.append(interaction)
        return interaction

    def add_example(self, given: str, expected: str) -> None:
        self.examples.append((given, expected))

    @property
    def last_interaction(self) -> Optional[Interaction]:
        return self.interactions[-1] if self.interactions else None


__all__ = ["ChatPrompt"]
