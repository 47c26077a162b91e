"""
Tests for prompt builder.

Validates message windows and interpolation prompt assembly.
"""

from __future__ import annotations

from tweenui.models.artifact import Artifact, HistoryTurn
from tweenui.services.prompt_builder import (
    build_interpolation_messages,
    build_interpolation_prompt,
    build_messages,
    generation_system_prompt,
    interpolation_system_prompt,
    position_label,
)


def test_system_prompts_load():
    assert "GeneratedComponent" in generation_system_prompt()
    assert "direct manipulation" in interpolation_system_prompt().lower()


def test_messages_keep_last_three_user_turns():
    """Messages array includes the last 3 user turns plus current message."""
    history = [{"role": "user", "content": f"msg{i}"} for i in range(10)]
    messages = build_messages(history, "new message", tail_size=3)

    assert len(messages) == 4
    assert [m["content"] for m in messages] == ["msg7", "msg8", "msg9", "new message"]
    assert all(m["role"] == "user" for m in messages)


def test_messages_drop_assistant_turns():
    history = [
        {"role": "user", "content": "a"},
        {"role": "assistant", "content": "UI 1 generated successfully!"},
        {"role": "user", "content": "b"},
    ]
    messages = build_messages(history, "c", tail_size=3)
    assert [m["content"] for m in messages] == ["a", "b", "c"]


def test_messages_accept_models():
    history = [HistoryTurn(role="user", content="a"), HistoryTurn(role="assistant", content="ok")]
    messages = build_messages(history, "b", tail_size=3)
    assert [m["content"] for m in messages] == ["a", "b"]


def test_messages_zero_tail():
    messages = build_messages([{"role": "user", "content": "a"}], "b", tail_size=0)
    assert messages == [{"role": "user", "content": "b"}]


def test_position_label():
    a = Artifact(id="ui1", code="", label="UI 1")
    b = Artifact(id="x", code="", label="UI 1 → UI 2")
    assert position_label(a, b, 1, 3) == 'Between "UI 1" and "UI 1 → UI 2" (iteration 2/3)'


def test_interpolation_prompt_contains_both_artifacts():
    prompt = build_interpolation_prompt("const A = 1;", "const B = 2;", "halfway")
    assert "UI 1 (Starting point):\n```tsx\nconst A = 1;\n```" in prompt
    assert "UI 2 (Ending point):\n```tsx\nconst B = 2;\n```" in prompt
    assert "Position in interpolation: halfway" in prompt
    assert prompt.index("const A") < prompt.index("const B")


def test_interpolation_messages_single_user_turn():
    messages = build_interpolation_messages("A", "B", "p")
    assert len(messages) == 1
    assert messages[0]["role"] == "user"
