"""
Prompt builder for the two oracle operations.

Generation: system prompt + trailing user history + current prompt.
Interpolation: system prompt + one user turn holding both artifacts and a
position hint.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from tweenui.config import settings
from tweenui.models.artifact import Artifact

PROMPTS_DIR = Path(__file__).parent.parent / "prompts"

# Cache loaded prompts in memory (they don't change at runtime)
_cache: dict[str, str] = {}


def _load(name: str) -> str:
    """Load and cache a prompt file."""
    if name not in _cache:
        path = PROMPTS_DIR / f"{name}.md"
        _cache[name] = path.read_text()
    return _cache[name]


def generation_system_prompt() -> str:
    return _load("generate_system")


def interpolation_system_prompt() -> str:
    return _load("interpolate_system")


def _turn(turn: Mapping[str, Any] | Any) -> tuple[str, str]:
    """Accept dicts or HistoryTurn/ChatMessage-like objects."""
    if isinstance(turn, Mapping):
        return turn.get("role", "user"), turn.get("content", "")
    return getattr(turn, "role", "user"), getattr(turn, "content", "")


def build_messages(
    history: Iterable[Mapping[str, Any] | Any],
    prompt: str,
    tail_size: int | None = None,
) -> list[dict[str, Any]]:
    """
    Build messages array for a generation call.

    Only prior user turns are forwarded (assistant turns are status chatter,
    not code) and only the trailing window of them.

    Args:
        history: Prior chat turns, oldest first
        prompt: Current user prompt
        tail_size: Number of prior user turns to keep (default settings.HISTORY_TAIL)

    Returns:
        Messages array formatted for the chat APIs
    """
    if tail_size is None:
        tail_size = settings.HISTORY_TAIL

    user_turns = [content for role, content in map(_turn, history) if role == "user" and content]
    tail = user_turns[-tail_size:] if tail_size > 0 else []

    messages: list[dict[str, Any]] = [{"role": "user", "content": content} for content in tail]
    messages.append({"role": "user", "content": prompt})
    return messages


def position_label(a: Artifact, b: Artifact, round_index: int, max_rounds: int) -> str:
    """Human-readable hint of where a requested midpoint sits on the interpolation axis."""
    return f'Between "{a.label}" and "{b.label}" (iteration {round_index + 1}/{max_rounds})'


def build_interpolation_prompt(code_a: str, code_b: str, position: str) -> str:
    """User content for a single-shot interpolation call."""
    return (
        "Generate an intermediate UI component that sits between these two UIs.\n"
        "\n"
        "UI 1 (Starting point):\n"
        f"```tsx\n{code_a}\n```\n"
        "\n"
        "UI 2 (Ending point):\n"
        f"```tsx\n{code_b}\n```\n"
        "\n"
        f"Position in interpolation: {position}\n"
        "\n"
        "Blend elements from both, and embed direct manipulation controls in the UI itself "
        "so users can interact with the transition."
    )


def build_interpolation_messages(code_a: str, code_b: str, position: str) -> list[dict[str, Any]]:
    return [{"role": "user", "content": build_interpolation_prompt(code_a, code_b, position)}]
