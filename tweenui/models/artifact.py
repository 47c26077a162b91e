"""Artifact and request/response models for generation and interpolation."""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class Artifact(BaseModel):
    """One generated UI component. Immutable once produced."""

    model_config = {"frozen": True}

    id: str
    code: str
    label: str


class HistoryTurn(BaseModel):
    """A prior chat turn forwarded to the oracle as context."""

    model_config = {"extra": "forbid"}

    role: Literal["user", "assistant"]
    content: str


class GenerateRequest(BaseModel):
    """What the client sends to POST /api/generate."""

    model_config = {"extra": "forbid"}

    prompt: str = Field(default="", max_length=10000)
    history: list[HistoryTurn] = Field(default_factory=list)


class InterpolateRequest(BaseModel):
    """What the client sends to POST /api/interpolate."""

    model_config = {"extra": "forbid"}

    ui1_code: str = ""
    ui2_code: str = ""
    rounds: int = 3


class InterpolateResponse(BaseModel):
    """What the interpolate endpoint returns: endpoints plus every intermediate, in order."""

    states: list[Artifact]
