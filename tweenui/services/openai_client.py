"""OpenAI oracle client with the same surface as AnthropicClient."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx
import openai

from tweenui.errors import GenerationFailed

logger = logging.getLogger(__name__)


class OpenAIClient:
    """Chat Completions client. System prompt is prepended as a system message."""

    def __init__(self, api_key: str, timeout: float | None = None):
        kwargs: dict[str, Any] = {"api_key": api_key, "max_retries": 0}
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = openai.AsyncOpenAI(**kwargs)
        self._last_usage: dict[str, int] | None = None

    @staticmethod
    def _build_kwargs(
        messages: list[dict[str, Any]],
        system: str,
        model: str,
        max_tokens: int,
        temperature: float | None,
    ) -> dict[str, Any]:
        kwargs: dict[str, Any] = {
            "model": model,
            "max_tokens": max_tokens,
            "messages": [{"role": "system", "content": system}] + messages,
        }
        if temperature is not None:
            kwargs["temperature"] = temperature
        return kwargs

    async def stream(
        self,
        messages: list[dict[str, Any]],
        system: str,
        model: str = "gpt-4o",
        max_tokens: int = 4096,
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        """
        Stream text deltas from Chat Completions.

        Raises:
            GenerationFailed: On any API or transport error
        """
        kwargs = self._build_kwargs(messages, system, model, max_tokens, temperature)
        try:
            response = await self.client.chat.completions.create(stream=True, **kwargs)
            async for chunk in response:
                if not chunk.choices:
                    continue
                text = chunk.choices[0].delta.content
                if text:
                    yield text
        except (openai.APIError, httpx.HTTPError) as e:
            logger.warning("openai_client: stream failed model=%s error=%s", model, e)
            raise GenerationFailed(f"OpenAI stream failed: {e}") from e

    async def complete(
        self,
        messages: list[dict[str, Any]],
        system: str,
        model: str = "gpt-4o",
        max_tokens: int = 4096,
        temperature: float | None = None,
    ) -> str:
        """
        Make a single non-streaming call.

        Raises:
            GenerationFailed: On any API or transport error
        """
        kwargs = self._build_kwargs(messages, system, model, max_tokens, temperature)
        try:
            response = await self.client.chat.completions.create(**kwargs)
        except (openai.APIError, httpx.HTTPError) as e:
            logger.warning("openai_client: create failed model=%s error=%s", model, e)
            raise GenerationFailed(f"OpenAI call failed: {e}") from e

        if response.usage is not None:
            self._last_usage = {
                "input_tokens": response.usage.prompt_tokens,
                "output_tokens": response.usage.completion_tokens,
            }
        if not response.choices:
            raise GenerationFailed(f"OpenAI call returned no choices model={model}")
        return response.choices[0].message.content or ""

    async def get_usage_stats(self) -> dict[str, int] | None:
        return self._last_usage
