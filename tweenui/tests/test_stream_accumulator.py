"""
Tests for tweenui/services/stream_accumulator.py
"""

from __future__ import annotations

import pytest

from tweenui.services.stream_accumulator import StreamAccumulator, accumulate


async def _aiter(items):
    for item in items:
        yield item


async def _collect(chunks, **kwargs):
    return [snapshot async for snapshot in accumulate(_aiter(chunks), **kwargs)]


class TestStreamAccumulator:
    def test_feed_returns_cumulative_code(self):
        acc = StreamAccumulator()
        assert acc.feed("ab") == "ab"
        assert acc.feed("cd") == "abcd"
        assert acc.buffer == "abcd"
        assert acc.chunk_count == 2

    def test_feed_strips_fences_from_whole_buffer(self):
        acc = StreamAccumulator()
        assert acc.feed("```tsx\n") == ""
        assert acc.feed("const a = 1;") == "const a = 1;"
        assert acc.feed("\n```") == "const a = 1;"
        assert acc.buffer == "```tsx\nconst a = 1;\n```"

    def test_opener_split_across_chunks(self):
        acc = StreamAccumulator()
        acc.feed("``")
        acc.feed("`ts")
        assert acc.feed("x\nX") == "X"

    def test_flush_threshold(self):
        acc = StreamAccumulator(min_flush_chars=5)
        acc.feed("abc")
        assert not acc.should_flush()
        acc.feed("de")
        assert acc.should_flush()
        acc.mark_flushed()
        assert acc.pending == 0
        assert not acc.should_flush()


class TestAccumulate:
    @pytest.mark.asyncio
    async def test_monotonic_snapshots(self):
        assert await _collect(["ab", "cd", "ef"]) == ["ab", "abcd", "abcdef"]

    @pytest.mark.asyncio
    async def test_fenced_stream(self):
        snapshots = await _collect(["```tsx\n", "export default X;", "\n```"])
        assert snapshots == ["", "export default X;", "export default X;"]

    @pytest.mark.asyncio
    async def test_empty_stream_yields_nothing(self):
        assert await _collect([]) == []

    @pytest.mark.asyncio
    async def test_empty_chunks_skipped(self):
        assert await _collect(["a", "", "b"]) == ["a", "ab"]

    @pytest.mark.asyncio
    async def test_debounce_always_emits_final_state(self):
        snapshots = await _collect(["ab", "cd", "ef", "g"], min_flush_chars=4)
        assert snapshots == ["abcd", "abcdefg"]

    @pytest.mark.asyncio
    async def test_debounce_no_duplicate_final(self):
        snapshots = await _collect(["abcd", "efgh"], min_flush_chars=4)
        assert snapshots == ["abcd", "abcdefgh"]
