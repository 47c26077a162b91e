"""
Session orchestrator.

Owns one user's chat log, the two endpoint slots, and the last interpolated
sequence. Decides which slot a prompt targets, guards against overlapping
work, and keeps committed state intact when the oracle fails.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from tweenui.config import settings
from tweenui.errors import GenerationFailed, InterpolationFailed, InvalidInput, SessionBusy
from tweenui.models.artifact import Artifact
from tweenui.models.chat import SLOT_LABELS, ChatMessage, Phase, Slot
from tweenui.services.interpolation import MAX_ROUNDS, interpolate
from tweenui.services.oracle import OracleClient

logger = logging.getLogger(__name__)


class Session:
    """Per-user generate → interpolate → view state machine."""

    def __init__(
        self,
        oracle: OracleClient,
        rounds: int = MAX_ROUNDS,
        parallel: bool = False,
        min_flush_chars: int = 0,
    ):
        self.oracle = oracle
        self.rounds = rounds
        self.parallel = parallel
        self.min_flush_chars = min_flush_chars

        self.messages: list[ChatMessage] = []
        self.endpoints: dict[str, str] = {"ui1": "", "ui2": ""}
        self.drafts: dict[str, str] = {}
        self.target: Slot | None = None
        self.sequence: list[Artifact] = []

        self.generating: Slot | None = None
        self.interpolating = False
        self.viewing = False

    # --- State ---

    @property
    def phase(self) -> Phase:
        if self.interpolating:
            return Phase.INTERPOLATING
        if self.viewing and self.sequence:
            return Phase.VIEWING
        if not self.endpoints["ui1"]:
            return Phase.AWAITING_ENDPOINT_A
        if not self.endpoints["ui2"]:
            return Phase.AWAITING_ENDPOINT_B
        return Phase.READY_TO_INTERPOLATE

    @property
    def busy(self) -> bool:
        return self.generating is not None or self.interpolating

    @property
    def can_interpolate(self) -> bool:
        return bool(self.endpoints["ui1"] and self.endpoints["ui2"]) and not self.busy

    def code(self, slot: Slot) -> str:
        """Live code for a slot: the in-flight draft if any, else the committed endpoint."""
        return self.drafts.get(slot, self.endpoints[slot])

    def endpoint(self, slot: Slot) -> Artifact | None:
        code = self.endpoints[slot]
        if not code:
            return None
        return Artifact(id=slot, code=code, label=SLOT_LABELS[slot])

    def select_target(self, slot: Slot | None) -> None:
        """Force the next prompt into a slot (None = first empty slot)."""
        if slot is not None and (not isinstance(slot, str) or slot not in SLOT_LABELS):
            raise InvalidInput(f"Unknown slot: {slot!r}")
        self.target = slot

    def resolve_target(self) -> Slot | None:
        if self.target:
            return self.target
        if not self.endpoints["ui1"]:
            return "ui1"
        if not self.endpoints["ui2"]:
            return "ui2"
        return None

    def _say(self, content: str) -> None:
        self.messages.append(ChatMessage(role="assistant", content=content))

    # --- Actions ---

    async def send(self, prompt: str) -> AsyncIterator[tuple[Slot, str]]:
        """
        Generate an endpoint from a prompt, streaming the live code.

        The slot keeps its previous code until the stream ends; a failed
        generation leaves it untouched.

        Yields:
            (slot, cleaned code so far)

        Raises:
            InvalidInput: Empty prompt, or both slots filled and no target selected
            SessionBusy: Another generation or interpolation is in flight
            GenerationFailed: The oracle failed before producing anything
        """
        if not isinstance(prompt, str):
            raise InvalidInput("Prompt must be a string")
        prompt = prompt.strip()
        if not prompt:
            raise InvalidInput("Prompt is empty")
        if self.busy:
            raise SessionBusy("Wait for the current request to finish")
        slot = self.resolve_target()
        if slot is None:
            raise InvalidInput("Both UIs exist; select which one to regenerate")

        # History is the turns before this prompt
        history = [m.to_history() for m in self.messages]
        self.messages.append(ChatMessage(role="user", content=prompt))

        self.generating = slot
        self.drafts[slot] = ""
        logger.info("session: generating slot=%s", slot)

        try:
            async for code in self.oracle.generate_streaming(prompt, history, min_flush_chars=self.min_flush_chars):
                self.drafts[slot] = code
                yield slot, code
        except GenerationFailed:
            logger.warning("session: generation failed slot=%s, keeping previous code", slot)
            self._say(f"Failed to generate {SLOT_LABELS[slot]}. Please try again.")
            raise
        else:
            code = self.drafts.get(slot, "")
            if code:
                self.endpoints[slot] = code
                self.viewing = False
                self._say(f"{SLOT_LABELS[slot]} generated successfully!")
            else:
                self._say(f"{SLOT_LABELS[slot]} came back empty. Please try again.")
        finally:
            self.drafts.pop(slot, None)
            self.generating = None
            self.target = None

    async def interpolate(self, rounds: int | None = None) -> list[Artifact]:
        """
        Interpolate between the two endpoints and switch to viewing.

        Raises:
            InvalidInput: An endpoint is missing, or rounds is not an integer
            SessionBusy: Another generation or interpolation is in flight
            InterpolationFailed: The expansion was aborted; the previous sequence is kept
        """
        if rounds is not None and (not isinstance(rounds, int) or isinstance(rounds, bool)):
            raise InvalidInput(f"rounds must be an integer, got {rounds!r}")
        if self.busy:
            raise SessionBusy("Wait for the current request to finish")
        endpoint_a, endpoint_b = self.endpoint("ui1"), self.endpoint("ui2")
        if endpoint_a is None or endpoint_b is None:
            raise InvalidInput("Generate both UIs before interpolating")

        self.interpolating = True
        try:
            sequence = await interpolate(
                self.oracle,
                endpoint_a,
                endpoint_b,
                rounds=self.rounds if rounds is None else rounds,
                parallel=self.parallel,
            )
        except InterpolationFailed:
            self._say("Failed to interpolate UIs. Please try again.")
            raise
        finally:
            self.interpolating = False

        self.sequence = sequence
        self.viewing = True
        return sequence

    def back_to_generation(self) -> None:
        """Leave the viewer. The last sequence is kept."""
        self.viewing = False


def create_session(oracle: OracleClient) -> Session:
    return Session(
        oracle,
        parallel=settings.INTERPOLATION_PARALLEL,
        min_flush_chars=settings.STREAM_FLUSH_CHARS,
    )
