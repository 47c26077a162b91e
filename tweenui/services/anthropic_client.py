"""
Anthropic oracle client.

Connects to Anthropic Messages API. Streams text deltas for generation and
makes single-shot calls for interpolation.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from typing import Any

import anthropic
import httpx

from tweenui.errors import GenerationFailed

logger = logging.getLogger(__name__)


class AnthropicClient:
    """Streams responses from Anthropic Messages API."""

    def __init__(self, api_key: str, timeout: float | None = None):
        """
        Initialize Anthropic client.

        Args:
            api_key: Anthropic API key
            timeout: Per-request timeout in seconds (None = SDK default)
        """
        kwargs: dict[str, Any] = {"api_key": api_key, "max_retries": 0}
        if timeout is not None:
            kwargs["timeout"] = timeout
        self.client = anthropic.AsyncAnthropic(**kwargs)
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
            "system": system,
            "messages": messages,
        }
        if temperature is not None:
            kwargs["temperature"] = temperature
        return kwargs

    def _record_usage(self, message: Any) -> None:
        if message is None or not hasattr(message, "usage"):
            return
        self._last_usage = {
            "input_tokens": message.usage.input_tokens,
            "output_tokens": message.usage.output_tokens,
        }

    async def stream(
        self,
        messages: list[dict[str, Any]],
        system: str,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 4096,
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        """
        Stream response from Anthropic API.

        Args:
            messages: Messages array for the conversation
            system: System prompt
            model: Model identifier
            max_tokens: Maximum tokens to generate
            temperature: Optional sampling temperature

        Yields:
            Text chunks (str) as they arrive

        Raises:
            GenerationFailed: On any API or transport error
        """
        kwargs = self._build_kwargs(messages, system, model, max_tokens, temperature)
        try:
            async with self.client.messages.stream(**kwargs) as stream:
                async for text in stream.text_stream:
                    yield text

                final_message = await stream.get_final_message()
                self._record_usage(final_message)
        except (anthropic.APIError, httpx.HTTPError) as e:
            logger.warning("anthropic_client: stream failed model=%s error=%s", model, e)
            raise GenerationFailed(f"Anthropic stream failed: {e}") from e

    async def complete(
        self,
        messages: list[dict[str, Any]],
        system: str,
        model: str = "claude-sonnet-4-20250514",
        max_tokens: int = 4096,
        temperature: float | None = None,
    ) -> str:
        """
        Make a single non-streaming call.

        Returns:
            Concatenated text of all text blocks ("" if the model returned none)

        Raises:
            GenerationFailed: On any API or transport error
        """
        kwargs = self._build_kwargs(messages, system, model, max_tokens, temperature)
        try:
            response = await self.client.messages.create(**kwargs)
        except (anthropic.APIError, httpx.HTTPError) as e:
            logger.warning("anthropic_client: create failed model=%s error=%s", model, e)
            raise GenerationFailed(f"Anthropic call failed: {e}") from e

        self._record_usage(response)
        return "".join(block.text for block in response.content if getattr(block, "type", None) == "text")

    async def get_usage_stats(self) -> dict[str, int] | None:
        """
        Get usage statistics from the most recent API call.

        Returns:
            Dictionary with token counts or None if not available
        """
        return self._last_usage
