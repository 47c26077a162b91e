"""
Oracle client: the two calls the rest of TweenUI makes to the generative service.

- generate(): streaming single-artifact generation with a bounded user history
- interpolate_once(): single-shot midpoint between two artifacts

The client holds no per-request state. Construct one at startup and pass it
to whatever needs it.
"""

from __future__ import annotations

import logging
import time
from collections.abc import AsyncIterator, Iterable, Mapping
from typing import Any

from tweenui.config import settings
from tweenui.errors import GenerationFailed
from tweenui.models.artifact import Artifact
from tweenui.services.fences import strip_code_fences
from tweenui.services.llm_provider import LLM, get_llm
from tweenui.services.openai_client import OpenAIClient
from tweenui.services.prompt_builder import (
    build_interpolation_messages,
    build_messages,
    generation_system_prompt,
    interpolation_system_prompt,
)
from tweenui.services.stream_accumulator import accumulate

logger = logging.getLogger(__name__)


class OracleClient:
    """Stateless handle over an LLM implementation."""

    def __init__(
        self,
        llm: LLM,
        generation_model: str,
        interpolation_model: str,
        max_tokens: int = 4096,
        history_tail: int = 3,
    ):
        self.llm = llm
        self.generation_model = generation_model
        self.interpolation_model = interpolation_model
        self.max_tokens = max_tokens
        self.history_tail = history_tail

    async def generate(
        self,
        prompt: str,
        history: Iterable[Mapping[str, Any] | Any] = (),
    ) -> AsyncIterator[str]:
        """
        Stream raw text deltas for one artifact.

        A failure before the first chunk raises GenerationFailed. A failure
        after at least one chunk ends the stream early: the protocol offers no
        resumption, so the caller keeps what arrived as a best-effort partial.

        Args:
            prompt: Current user prompt
            history: Prior chat turns; only the trailing user turns are sent

        Yields:
            Raw text deltas in arrival order

        Raises:
            GenerationFailed: If the oracle failed before producing anything
        """
        messages = build_messages(history, prompt, tail_size=self.history_tail)
        t_start = time.time()
        received = 0

        logger.info(
            "oracle: generate start model=%s history_turns=%d",
            self.generation_model,
            len(messages) - 1,
        )

        try:
            async for chunk in self.llm.stream(
                messages=messages,
                system=generation_system_prompt(),
                model=self.generation_model,
                max_tokens=self.max_tokens,
            ):
                received += 1
                yield chunk
        except GenerationFailed:
            if received == 0:
                raise
            logger.warning("oracle: generate truncated after %d chunks, keeping partial artifact", received)

        logger.info(
            "oracle: generate done chunks=%d elapsed_ms=%d",
            received,
            int((time.time() - t_start) * 1000),
        )

    async def generate_streaming(
        self,
        prompt: str,
        history: Iterable[Mapping[str, Any] | Any] = (),
        min_flush_chars: int = 0,
    ) -> AsyncIterator[str]:
        """
        Stream cumulative cleaned snapshots of the artifact being generated.

        Yields:
            Fence-stripped artifact text, growing with every emission

        Raises:
            GenerationFailed: If the oracle failed before producing anything
        """
        async for snapshot in accumulate(self.generate(prompt, history), min_flush_chars=min_flush_chars):
            yield snapshot

    async def interpolate_once(self, artifact_a: Artifact, artifact_b: Artifact, position_hint: str) -> str:
        """
        Ask for one artifact between two others.

        Args:
            artifact_a: Artifact on the UI 1 side
            artifact_b: Artifact on the UI 2 side
            position_hint: Where on the axis this midpoint sits (steers the prompt only)

        Returns:
            Fence-stripped artifact text

        Raises:
            GenerationFailed: On any oracle error (no retry)
        """
        t_start = time.time()
        raw = await self.llm.complete(
            messages=build_interpolation_messages(artifact_a.code, artifact_b.code, position_hint),
            system=interpolation_system_prompt(),
            model=self.interpolation_model,
            max_tokens=self.max_tokens,
        )
        logger.debug(
            "oracle: interpolate_once a=%s b=%s chars=%d elapsed_ms=%d",
            artifact_a.id,
            artifact_b.id,
            len(raw),
            int((time.time() - t_start) * 1000),
        )
        return strip_code_fences(raw)


def create_oracle(llm: LLM | None = None) -> OracleClient:
    """Build an OracleClient from settings, picking model names to match the provider."""
    if llm is None:
        llm = get_llm()

    if isinstance(llm, OpenAIClient):
        generation_model = interpolation_model = settings.OPENAI_MODEL
    else:
        generation_model = settings.GENERATION_MODEL
        interpolation_model = settings.INTERPOLATION_MODEL

    return OracleClient(
        llm,
        generation_model=generation_model,
        interpolation_model=interpolation_model,
        max_tokens=settings.MAX_TOKENS,
        history_tail=settings.HISTORY_TAIL,
    )
