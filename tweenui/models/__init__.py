"""
Pydantic models for TweenUI.

Request/response bodies and session state shapes. No imports from services or routes.
"""

from tweenui.models.artifact import (
    Artifact,
    GenerateRequest,
    HistoryTurn,
    InterpolateRequest,
    InterpolateResponse,
)
from tweenui.models.chat import SLOT_LABELS, ChatMessage, Phase, Slot

__all__ = [
    # Artifact models
    "Artifact",
    "HistoryTurn",
    "GenerateRequest",
    "InterpolateRequest",
    "InterpolateResponse",
    # Session models
    "ChatMessage",
    "Phase",
    "Slot",
    "SLOT_LABELS",
]
