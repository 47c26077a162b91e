"""
Streaming accumulator for oracle output.

Buffers streaming text chunks in arrival order and exposes the cleaned
(fence-stripped) artifact after each chunk.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterable, AsyncIterator

from tweenui.services.fences import strip_code_fences

logger = logging.getLogger(__name__)


class StreamAccumulator:
    """
    Accumulates a streamed artifact.

    The buffer only grows: chunks are appended in the order they are fed.
    `min_flush_chars` debounces emissions for callers that re-render on
    every snapshot; 0 means every chunk is worth emitting.
    """

    def __init__(self, min_flush_chars: int = 0) -> None:
        self.buffer = ""
        self.min_flush_chars = max(0, min_flush_chars)
        self.flushed_length = 0
        self.chunk_count = 0

    def feed(self, chunk: str) -> str:
        """
        Append a chunk (may be partial) and return the current cleaned artifact.

        Args:
            chunk: Raw text delta from the oracle stream

        Returns:
            strip_code_fences() of everything received so far
        """
        self.buffer += chunk
        self.chunk_count += 1
        return self.code

    @property
    def code(self) -> str:
        """The current best artifact text."""
        return strip_code_fences(self.buffer)

    @property
    def pending(self) -> int:
        """Characters received since the last flush."""
        return len(self.buffer) - self.flushed_length

    def should_flush(self) -> bool:
        """Whether enough new text arrived to be worth emitting."""
        return self.pending > 0 and self.pending >= self.min_flush_chars

    def mark_flushed(self) -> None:
        self.flushed_length = len(self.buffer)


async def accumulate(
    chunks: AsyncIterable[str],
    min_flush_chars: int = 0,
) -> AsyncIterator[str]:
    """
    Turn a stream of raw deltas into a stream of cumulative cleaned snapshots.

    With the default threshold a snapshot is yielded after every non-empty
    chunk. With a threshold, snapshots are yielded once at least that many
    characters arrived since the previous one, and the final state is always
    yielded when the input ends.

    Args:
        chunks: Raw text deltas in arrival order
        min_flush_chars: Debounce threshold in characters

    Yields:
        Cleaned artifact text, each one reflecting a longer prefix of the stream
    """
    acc = StreamAccumulator(min_flush_chars=min_flush_chars)
    async for chunk in chunks:
        if not chunk:
            continue
        acc.feed(chunk)
        if acc.should_flush():
            acc.mark_flushed()
            yield acc.code

    if acc.pending > 0:
        acc.mark_flushed()
        yield acc.code

    logger.debug("stream_accumulator: stream ended chunks=%d chars=%d", acc.chunk_count, len(acc.buffer))
