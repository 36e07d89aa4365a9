"""Prompt-to-wire mapping shared by the Vertex and Gemini adapters.

Both backends accept the same ``contents`` structure::

    {
      "contents": [{"role": "user" | "model", "parts": [{"text": ...}]}, ...],
      "generation_config": {"temperature": ..., "maxOutputTokens": ...}
    }

The streaming endpoint has no system-message slot, so the system context and
few-shot examples are collapsed into a single text prelude. When the prompt
holds exactly one interaction the prelude is folded into that turn. With
several interactions the prelude is dropped; this is a known limitation kept
as-is until the intended multi-turn behavior is decided.

Embedding bodies differ per backend and live with each adapter.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..base.models import ChatPrompt, Interaction, Role

EXAMPLE_PRELUDE = "Here are some examples of the expected conversation:"

WIRE_ROLES: Dict[Role, str] = {
    Role.USER: "user",
    Role.ASSISTANT: "model",
}

# Keys the countTokens endpoint rejects.
GENERATION_PARAM_KEYS = ("generation_config", "parameters")


def render_examples(prompt: ChatPrompt) -> Optional[str]:
    """Render the few-shot examples as prelude text, or ``None`` without examples."""
    if not prompt.examples:
        return None
    rendered = "".join(f"\nUser:\n{given}\nAssistant:\n{expected}" for given, expected in prompt.examples)
    return f"{EXAMPLE_PRELUDE}\n{rendered}"


def build_prelude(prompt: ChatPrompt) -> Optional[str]:
    """Collapse system context and examples into one text block.

    Returns ``None`` when the prompt has neither.
    """
    pieces: List[str] = []
    if prompt.system_context:
        pieces.append(prompt.system_context)
    examples = render_examples(prompt)
    if examples is not None:
        pieces.append(examples)
    return "\n".join(pieces) if pieces else None


def prelude_dropped(prompt: ChatPrompt) -> bool:
    """True when a prelude exists but the prompt has several interactions."""
    return len(prompt.interactions) > 1 and build_prelude(prompt) is not None


def interaction_to_content(interaction: Interaction, text: Optional[str] = None) -> Dict[str, Any]:
    """Map one interaction to a wire ``content`` object."""
    return {
        "role": WIRE_ROLES[Role(interaction.role)],
        "parts": [{"text": interaction.content if text is None else text}],
    }


def build_generation_config(prompt: ChatPrompt) -> Dict[str, Any]:
    """Return the generation parameters that are set on ``prompt``."""
    config: Dict[str, Any] = {}
    if prompt.temperature is not None:
        config["temperature"] = prompt.temperature
    if prompt.max_output_tokens is not None:
        config["maxOutputTokens"] = prompt.max_output_tokens
    return config


def build_chat_request(prompt: ChatPrompt) -> Dict[str, Any]:
    """Build the chat request body for ``prompt``."""
    prelude = build_prelude(prompt)
    interactions = prompt.interactions
    if len(interactions) == 1 and prelude is not None:
        only = interactions[0]
        contents = [interaction_to_content(only, f"{prelude}\n{only.content}")]
    else:
        contents = [interaction_to_content(i) for i in interactions]

    request: Dict[str, Any] = {"contents": contents}
    generation_config = build_generation_config(prompt)
    if generation_config:
        request["generation_config"] = generation_config
    return request


def build_count_tokens_request(prompt: ChatPrompt) -> Dict[str, Any]:
    """Build the countTokens body: the chat body without generation parameters."""
    request = build_chat_request(prompt)
    for key in GENERATION_PARAM_KEYS:
        request.pop(key, None)
    return request


__all__ = [
    "EXAMPLE_PRELUDE",
    "WIRE_ROLES",
    "GENERATION_PARAM_KEYS",
    "render_examples",
    "build_prelude",
    "prelude_dropped",
    "interaction_to_content",
    "build_generation_config",
    "build_chat_request",
    "build_count_tokens_request",
]
