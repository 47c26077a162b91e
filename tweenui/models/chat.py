"""Chat and session state models."""

from __future__ import annotations

from enum import Enum
from typing import Literal
from uuid import uuid4

from pydantic import BaseModel, Field

Slot = Literal["ui1", "ui2"]

SLOT_LABELS: dict[str, str] = {"ui1": "UI 1", "ui2": "UI 2"}


class Phase(str, Enum):
    """Where a session is in the generate → interpolate → view flow."""

    AWAITING_ENDPOINT_A = "awaiting_endpoint_a"
    AWAITING_ENDPOINT_B = "awaiting_endpoint_b"
    READY_TO_INTERPOLATE = "ready_to_interpolate"
    INTERPOLATING = "interpolating"
    VIEWING = "viewing"


class ChatMessage(BaseModel):
    """A single turn in the session chat log."""

    id: str = Field(default_factory=lambda: str(uuid4()))
    role: Literal["user", "assistant"]
    content: str

    def to_history(self) -> dict[str, str]:
        return {"role": self.role, "content": self.content}
