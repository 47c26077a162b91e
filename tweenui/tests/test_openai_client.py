from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from tweenui.errors import GenerationFailed
from tweenui.services.openai_client import OpenAIClient


def _chunk(text):
    chunk = MagicMock()
    chunk.choices = [MagicMock()]
    chunk.choices[0].delta.content = text
    return chunk


async def _aiter(items):
    for item in items:
        yield item


@pytest.mark.asyncio
async def test_stream_prepends_system_and_skips_empty_deltas():
    client = OpenAIClient("fake-key")
    with patch.object(client.client.chat.completions, "create", new_callable=AsyncMock) as mock:
        mock.return_value = _aiter([_chunk("ab"), _chunk(None), _chunk("cd")])
        chunks = [c async for c in client.stream([{"role": "user", "content": "hi"}], "sys", "gpt")]

    assert chunks == ["ab", "cd"]
    call_kwargs = mock.call_args.kwargs
    assert call_kwargs["stream"] is True
    assert call_kwargs["messages"][0] == {"role": "system", "content": "sys"}
    assert call_kwargs["messages"][1] == {"role": "user", "content": "hi"}


@pytest.mark.asyncio
async def test_complete_returns_message_content():
    client = OpenAIClient("fake-key")
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = "```tsx\nX\n```"
    response.usage.prompt_tokens = 7
    response.usage.completion_tokens = 3
    with patch.object(client.client.chat.completions, "create", new_callable=AsyncMock) as mock:
        mock.return_value = response
        text = await client.complete([], "sys", "gpt")

    assert text == "```tsx\nX\n```"
    assert await client.get_usage_stats() == {"input_tokens": 7, "output_tokens": 3}


@pytest.mark.asyncio
async def test_api_error_becomes_generation_failed():
    client = OpenAIClient("fake-key")
    error = openai.APIConnectionError(request=httpx.Request("POST", "https://api.openai.com/v1/chat/completions"))
    with patch.object(client.client.chat.completions, "create", new_callable=AsyncMock) as mock:
        mock.side_effect = error
        with pytest.raises(GenerationFailed):
            await client.complete([], "sys", "gpt")
        with pytest.raises(GenerationFailed):
            _ = [c async for c in client.stream([], "sys", "gpt")]


@pytest.mark.asyncio
async def test_stream_transport_drop_becomes_generation_failed():
    async def dropping():
        yield _chunk("```tsx\n")
        raise httpx.ReadError("connection reset")

    client = OpenAIClient("fake-key")
    with patch.object(client.client.chat.completions, "create", new_callable=AsyncMock) as mock:
        mock.return_value = dropping()
        received = []
        with pytest.raises(GenerationFailed) as exc_info:
            async for chunk in client.stream([], "sys", "gpt"):
                received.append(chunk)

    assert received == ["```tsx\n"]
    assert isinstance(exc_info.value.__cause__, httpx.ReadError)


@pytest.mark.asyncio
async def test_complete_without_choices_is_generation_failed():
    client = OpenAIClient("fake-key")
    response = MagicMock()
    response.choices = []
    with patch.object(client.client.chat.completions, "create", new_callable=AsyncMock) as mock:
        mock.return_value = response
        with pytest.raises(GenerationFailed, match="no choices"):
            await client.complete([], "sys", "gpt")
