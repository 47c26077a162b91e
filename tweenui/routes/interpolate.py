"""Interpolation route — endpoints in, full ordered sequence out."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from tweenui.config import settings
from tweenui.errors import InterpolationFailed, InvalidInput
from tweenui.models.artifact import Artifact, InterpolateRequest, InterpolateResponse
from tweenui.routes.deps import get_oracle
from tweenui.services.interpolation import interpolate
from tweenui.services.oracle import OracleClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["interpolate"])


@router.post("/interpolate", status_code=200)
async def interpolate_uis(
    req: InterpolateRequest,
    oracle: OracleClient = Depends(get_oracle),
) -> InterpolateResponse:
    """Interpolate between ui1_code and ui2_code. Rounds are capped at 3."""
    endpoint_a = Artifact(id="ui1", code=req.ui1_code, label="UI 1") if req.ui1_code else None
    endpoint_b = Artifact(id="ui2", code=req.ui2_code, label="UI 2") if req.ui2_code else None

    try:
        states = await interpolate(
            oracle,
            endpoint_a,
            endpoint_b,
            rounds=req.rounds,
            parallel=settings.INTERPOLATION_PARALLEL,
        )
    except InvalidInput as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Both ui1_code and ui2_code are required",
        ) from e
    except InterpolationFailed as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "error": "Failed to interpolate UIs",
                "round": e.round_index,
                "pair": e.pair_index,
            },
        ) from e

    return InterpolateResponse(states=states)
