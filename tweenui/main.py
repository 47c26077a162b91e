"""
TweenUI FastAPI application.

Entry point for the API server.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from tweenui.config import settings
from tweenui.routes import generate as generate_routes
from tweenui.routes import interpolate as interpolate_routes
from tweenui.routes import ws as ws_routes
from tweenui.services.oracle import create_oracle


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan context manager for FastAPI application.

    Builds the single oracle handle shared by all requests. Tests may
    install their own on app.state.oracle before the app starts.
    """
    logging.basicConfig(level=settings.LOG_LEVEL)

    if getattr(app.state, "oracle", None) is None:
        app.state.oracle = create_oracle()
    print(f"Oracle client initialized: {type(app.state.oracle.llm).__name__}")

    yield

    print("Oracle client released")


app = FastAPI(
    title="TweenUI",
    docs_url=None,
    redoc_url=None,
    lifespan=lifespan,
)

# Register routes
app.include_router(generate_routes.router)
app.include_router(interpolate_routes.router)
app.include_router(ws_routes.router)


@app.get("/health")
async def health():
    """Health check endpoint for uptime monitoring."""
    return {"status": "ok"}
