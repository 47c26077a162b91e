"""
Pytest configuration and fixtures for TweenUI tests.
"""

from __future__ import annotations

import os

# Set test environment variables before importing config
os.environ.setdefault("TESTING", "true")
os.environ.setdefault("USE_MOCK_LLM", "true")

from typing import Any  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from tweenui.errors import GenerationFailed  # noqa: E402
from tweenui.main import app  # noqa: E402
from tweenui.services.mock_llm import MockLLM  # noqa: E402
from tweenui.services.oracle import OracleClient  # noqa: E402


class FakeLLM:
    """
    Scriptable LLM double.

    stream() yields `chunks`, raising after `fail_stream_after` chunks if set.
    complete() returns a numbered fenced component and raises on the call
    numbers listed in `fail_on_calls` (1-based).
    """

    def __init__(
        self,
        chunks: list[str] | None = None,
        fail_stream_after: int | None = None,
        fail_on_calls: set[int] | None = None,
    ):
        self.chunks = chunks if chunks is not None else ["```tsx\n", "export default ", "function X() {}", "\n```"]
        self.fail_stream_after = fail_stream_after
        self.fail_on_calls = fail_on_calls or set()
        self.stream_calls: list[dict[str, Any]] = []
        self.complete_calls: list[dict[str, Any]] = []

    async def stream(self, messages, system, model="fake", max_tokens=4096, temperature=None):
        self.stream_calls.append({"messages": messages, "system": system, "model": model})
        for i, chunk in enumerate(self.chunks):
            if self.fail_stream_after is not None and i >= self.fail_stream_after:
                raise GenerationFailed("stream dropped")
            yield chunk
        if self.fail_stream_after is not None and self.fail_stream_after >= len(self.chunks):
            raise GenerationFailed("stream dropped")

    async def complete(self, messages, system, model="fake", max_tokens=4096, temperature=None):
        self.complete_calls.append({"messages": messages, "system": system, "model": model})
        n = len(self.complete_calls)
        if n in self.fail_on_calls:
            raise GenerationFailed(f"call {n} failed")
        return f"```tsx\n// mid {n}\n```"

    async def get_usage_stats(self):
        return None


def make_oracle(llm: Any) -> OracleClient:
    return OracleClient(llm, generation_model="gen-model", interpolation_model="interp-model", history_tail=3)


@pytest.fixture
def fake_llm():
    return FakeLLM()


@pytest.fixture
def oracle(fake_llm):
    return make_oracle(fake_llm)


@pytest.fixture
def mock_oracle():
    return make_oracle(MockLLM())


@pytest.fixture
def client(mock_oracle):
    """TestClient with a MockLLM-backed oracle installed on app.state."""
    app.state.oracle = mock_oracle
    with TestClient(app) as test_client:
        yield test_client
    app.state.oracle = None


@pytest.fixture
def fake_client(oracle):
    """TestClient with the scriptable FakeLLM-backed oracle installed."""
    app.state.oracle = oracle
    with TestClient(app) as test_client:
        yield test_client
    app.state.oracle = None
