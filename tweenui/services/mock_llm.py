"""
Mock oracle for deterministic testing and UX timing simulation.

Streams golden TSX components in fixed-size chunks with configurable delays,
wrapped in a markdown fence the way the real oracle often answers.
Single-shot calls return a deterministic fenced blend.
"""

from __future__ import annotations

import asyncio
import re
from collections.abc import AsyncIterator
from pathlib import Path
from typing import Any

from tweenui.errors import GenerationFailed

GOLDEN_DIR = Path(__file__).parent.parent / "fixtures" / "golden"

DELAY_PROFILES: dict[str, dict[str, int]] = {
    "instant": {"think_ms": 0, "per_chunk_ms": 0},
    "realistic": {"think_ms": 800, "per_chunk_ms": 40},
    "slow": {"think_ms": 3000, "per_chunk_ms": 200},
}

# Keyword → golden file; first match wins, checked in order
SCENARIO_KEYWORDS: list[tuple[str, str]] = [
    ("kanban", "kanban"),
    ("task board", "kanban"),
    ("dashboard", "dashboard"),
    ("analytics", "dashboard"),
    ("metrics", "dashboard"),
]
DEFAULT_SCENARIO = "counter"

_POSITION_RE = re.compile(r"^Position in interpolation: (.+)$", re.MULTILINE)


class MockLLM:
    """Streams golden files chunk-by-chunk with configurable delays."""

    def __init__(
        self,
        golden_dir: Path = GOLDEN_DIR,
        profile: str = "instant",
        chunk_size: int = 48,
        fail_after: int | None = None,
    ):
        """
        Args:
            golden_dir: Directory of <scenario>.tsx files
            profile: Delay profile name
            chunk_size: Characters per streamed chunk
            fail_after: Simulate a disconnect after this many chunks (None = never)
        """
        if profile not in DELAY_PROFILES:
            raise ValueError(f"Unknown delay profile: {profile!r}. Valid profiles: {list(DELAY_PROFILES)}")
        self.golden_dir = golden_dir
        self.profile = profile
        self.chunk_size = chunk_size
        self.fail_after = fail_after
        self.complete_calls = 0

    def list_scenarios(self) -> list[str]:
        """Return names of all available golden file scenarios."""
        return sorted(p.stem for p in self.golden_dir.glob("*.tsx"))

    def pick_scenario(self, prompt: str) -> str:
        prompt_lower = prompt.lower()
        for keyword, scenario in SCENARIO_KEYWORDS:
            if keyword in prompt_lower:
                return scenario
        return DEFAULT_SCENARIO

    def load(self, scenario: str) -> str:
        path = self.golden_dir / f"{scenario}.tsx"
        if not path.exists():
            raise FileNotFoundError(f"Golden file not found: {path}")
        return path.read_text()

    async def stream(
        self,
        messages: list[dict[str, Any]],
        system: str,
        model: str = "mock",
        max_tokens: int = 4096,
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        """
        Stream the golden component matching the last user message.

        Yields:
            Fixed-size slices of "```tsx\\n<component>\\n```"

        Raises:
            GenerationFailed: When fail_after chunks have been sent
        """
        delays = DELAY_PROFILES[self.profile]
        prompt = messages[-1]["content"] if messages else ""
        body = f"```tsx\n{self.load(self.pick_scenario(prompt)).rstrip()}\n```"
        chunks = [body[i : i + self.chunk_size] for i in range(0, len(body), self.chunk_size)]

        if delays["think_ms"] > 0:
            await asyncio.sleep(delays["think_ms"] / 1000)

        for i, chunk in enumerate(chunks):
            if self.fail_after is not None and i >= self.fail_after:
                raise GenerationFailed(f"Mock stream disconnected after {i} chunks")
            yield chunk

            if i < len(chunks) - 1 and delays["per_chunk_ms"] > 0:
                await asyncio.sleep(delays["per_chunk_ms"] / 1000)

    async def complete(
        self,
        messages: list[dict[str, Any]],
        system: str,
        model: str = "mock",
        max_tokens: int = 4096,
        temperature: float | None = None,
    ) -> str:
        """Return a fenced placeholder component naming the requested position."""
        self.complete_calls += 1
        delays = DELAY_PROFILES[self.profile]
        if delays["think_ms"] > 0:
            await asyncio.sleep(delays["think_ms"] / 1000)

        content = messages[-1]["content"] if messages else ""
        match = _POSITION_RE.search(content)
        position = match.group(1) if match else "midpoint"
        return (
            "```tsx\n"
            "export default function GeneratedComponent() {\n"
            "  const [mix, setMix] = useState(50);\n"
            "  return (\n"
            '    <div className="p-4">\n'
            f"      <p className=\"text-sm\">{{{position!r}}}</p>\n"
            '      <input type="range" value={mix} onChange={(e) => setMix(Number(e.target.value))} />\n'
            "    </div>\n"
            "  );\n"
            "}\n"
            "```"
        )

    async def get_usage_stats(self) -> dict[str, int] | None:
        return None
