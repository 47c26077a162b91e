"""
LLM provider factory.

Returns MockLLM when USE_MOCK_LLM=true (tests / UX simulation)
or a real vendor client when its API key is available.
"""

from __future__ import annotations

import logging

from tweenui.config import settings
from tweenui.services.anthropic_client import AnthropicClient
from tweenui.services.mock_llm import MockLLM
from tweenui.services.openai_client import OpenAIClient

logger = logging.getLogger(__name__)

LLM = MockLLM | AnthropicClient | OpenAIClient


def get_llm() -> LLM:
    """
    Return the configured LLM implementation.

    - USE_MOCK_LLM=true                          → MockLLM (deterministic, no API calls)
    - ORACLE_PROVIDER=openai + OPENAI_API_KEY    → OpenAIClient
    - ANTHROPIC_API_KEY available                → AnthropicClient
    - default                                    → MockLLM (fallback)
    """
    if settings.USE_MOCK_LLM:
        return MockLLM(profile=settings.MOCK_LLM_PROFILE)

    if settings.ORACLE_PROVIDER == "openai" and settings.OPENAI_API_KEY:
        return OpenAIClient(api_key=settings.OPENAI_API_KEY, timeout=settings.ORACLE_TIMEOUT_SECONDS)

    if settings.ANTHROPIC_API_KEY:
        return AnthropicClient(api_key=settings.ANTHROPIC_API_KEY, timeout=settings.ORACLE_TIMEOUT_SECONDS)

    # Fallback to mock if no API key configured
    logger.warning("llm_provider: no oracle API key configured, using MockLLM")
    return MockLLM(profile=settings.MOCK_LLM_PROFILE)
