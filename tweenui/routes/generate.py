"""Generation route — streams one artifact as chunked plain text."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.responses import StreamingResponse

from tweenui.errors import GenerationFailed
from tweenui.models.artifact import GenerateRequest
from tweenui.routes.deps import get_oracle
from tweenui.services.oracle import OracleClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generate"])


@router.post("/generate")
async def generate(
    req: GenerateRequest,
    oracle: OracleClient = Depends(get_oracle),
) -> StreamingResponse:
    """
    Stream raw oracle deltas for one component.

    The first chunk is awaited before the response starts so an oracle that
    fails outright gets a 502 instead of an empty 200. Later failures end
    the body early; what was sent is a best-effort partial artifact.
    """
    prompt = req.prompt.strip()
    if not prompt:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="prompt is required")

    chunks = oracle.generate(prompt, req.history)
    try:
        first = await anext(chunks, None)
    except GenerationFailed as e:
        logger.warning("generate: oracle failed before first chunk: %s", e)
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail="Failed to generate") from e

    async def body() -> AsyncIterator[str]:
        if first is None:
            return
        yield first
        async for chunk in chunks:
            yield chunk

    return StreamingResponse(body(), media_type="text/plain; charset=utf-8")
