"""Request-scoped access to the oracle handle created at startup."""

from __future__ import annotations

from fastapi import Request, WebSocket

from tweenui.services.oracle import OracleClient


def get_oracle(request: Request) -> OracleClient:
    return request.app.state.oracle


def get_ws_oracle(websocket: WebSocket) -> OracleClient:
    return websocket.app.state.oracle
