"""
WebSocket endpoint for an interactive generate → interpolate session.

Accepts connections at /ws/session. Each connection owns one Session;
nothing outlives the connection.
"""

from __future__ import annotations

import json
import logging
import time
import uuid
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from tweenui.errors import GenerationFailed, InterpolationFailed, InvalidInput, SessionBusy
from tweenui.models import SLOT_LABELS
from tweenui.routes.deps import get_ws_oracle
from tweenui.services.session import Session, create_session

logger = logging.getLogger(__name__)

router = APIRouter(tags=["websocket"])


async def _send(websocket: WebSocket, payload: dict[str, Any]) -> None:
    await websocket.send_text(json.dumps(payload))


async def _send_state(websocket: WebSocket, session: Session) -> None:
    await _send(
        websocket,
        {
            "type": "session.state",
            "phase": session.phase.value,
            "target": session.target,
            "can_interpolate": session.can_interpolate,
            "codes": {slot: session.code(slot) for slot in SLOT_LABELS},
        },
    )


async def _handle_message(websocket: WebSocket, session: Session, msg: dict[str, Any]) -> None:
    """Stream one endpoint generation as code.delta frames."""
    content: str = msg.get("content", "")
    message_id: str = msg.get("message_id") or f"msg_{uuid.uuid4().hex[:8]}"
    start_time = time.monotonic()
    ttfc: float | None = None
    slot: str | None = None

    await _send(websocket, {"type": "stream.start", "message_id": message_id})
    try:
        async for slot, code in session.send(content):
            if ttfc is None:
                ttfc = (time.monotonic() - start_time) * 1000
            await _send(websocket, {"type": "code.delta", "message_id": message_id, "target": slot, "code": code})
    except (InvalidInput, SessionBusy, GenerationFailed) as e:
        logger.warning("ws: generation rejected message_id=%s error=%s", message_id, e)
        await _send(websocket, {"type": "stream.error", "message_id": message_id, "error": str(e)})
        return

    logger.info(
        "ws: generation complete message_id=%s slot=%s ttfc=%.0fms ttc=%.0fms",
        message_id,
        slot,
        ttfc or 0,
        (time.monotonic() - start_time) * 1000,
    )
    reply = session.messages[-1].content if session.messages else ""
    await _send(websocket, {"type": "stream.end", "message_id": message_id, "target": slot, "text": reply})


async def _handle_interpolate(websocket: WebSocket, session: Session, msg: dict[str, Any]) -> None:
    await _send(websocket, {"type": "interpolation.start"})
    try:
        sequence = await session.interpolate(rounds=msg.get("rounds"))
    except (InvalidInput, SessionBusy) as e:
        await _send(websocket, {"type": "interpolation.error", "error": str(e)})
        return
    except InterpolationFailed as e:
        await _send(
            websocket,
            {
                "type": "interpolation.error",
                "error": "Failed to interpolate UIs. Please try again.",
                "round": e.round_index,
                "pair": e.pair_index,
            },
        )
        return

    await _send(
        websocket,
        {"type": "interpolation.result", "states": [a.model_dump() for a in sequence]},
    )


@router.websocket("/ws/session")
async def session_websocket(websocket: WebSocket) -> None:
    """
    Drive one Session over a WebSocket.

    Protocol:
      Client → Server:  {"type": "message", "content": "...", "message_id": "<id>"}
                        {"type": "set_target", "target": "ui1" | "ui2" | null}
                        {"type": "interpolate", "rounds": 3}
                        {"type": "back"}
      Server → Client:  stream.start | code.delta | stream.end | stream.error
                        interpolation.start | interpolation.result | interpolation.error
                        session.state
    """
    await websocket.accept()
    session = create_session(get_ws_oracle(websocket))
    logger.info("WebSocket accepted: session")
    await _send_state(websocket, session)

    try:
        while True:
            raw = await websocket.receive_text()
            try:
                msg = json.loads(raw)
            except json.JSONDecodeError:
                logger.warning("ws: malformed message from client: %r", raw[:200])
                continue
            if not isinstance(msg, dict):
                logger.warning("ws: ignoring non-object frame: %r", raw[:200])
                continue

            msg_type = msg.get("type")

            if msg_type == "message":
                await _handle_message(websocket, session, msg)
            elif msg_type == "set_target":
                try:
                    session.select_target(msg.get("target"))
                except InvalidInput as e:
                    await _send(websocket, {"type": "error", "error": str(e)})
                    continue
            elif msg_type == "interpolate":
                await _handle_interpolate(websocket, session, msg)
            elif msg_type == "back":
                session.back_to_generation()
            else:
                logger.debug("ws: ignoring message type=%r", msg_type)
                continue

            await _send_state(websocket, session)

    except WebSocketDisconnect:
        logger.info("WebSocket disconnected: session")
