"""
TweenUI configuration — all environment variables in one place.

Read from environment at runtime. Never hardcode secrets.
"""

from __future__ import annotations

import os


def _flag(name: str, default: str = "false") -> bool:
    return os.environ.get(name, default).lower() in ("1", "true", "yes")


class Settings:
    """Application settings from environment variables."""

    # Oracle providers
    ANTHROPIC_API_KEY: str = os.environ.get("ANTHROPIC_API_KEY", "") or os.environ.get("CLAUDE_API_KEY", "")
    OPENAI_API_KEY: str = os.environ.get("OPENAI_API_KEY", "")
    ORACLE_PROVIDER: str = os.environ.get("ORACLE_PROVIDER", "anthropic")

    # Models
    GENERATION_MODEL: str = os.environ.get("GENERATION_MODEL", "claude-sonnet-4-20250514")
    INTERPOLATION_MODEL: str = os.environ.get("INTERPOLATION_MODEL", "claude-sonnet-4-20250514")
    OPENAI_MODEL: str = os.environ.get("OPENAI_MODEL", "gpt-4o")
    MAX_TOKENS: int = int(os.environ.get("MAX_TOKENS", "4096"))

    # Oracle call boundary (no retries, a failed call surfaces to the caller)
    ORACLE_TIMEOUT_SECONDS: float = float(os.environ.get("ORACLE_TIMEOUT_SECONDS", "120"))

    # Generation
    HISTORY_TAIL: int = int(os.environ.get("HISTORY_TAIL", "3"))  # prior user turns sent as context
    STREAM_FLUSH_CHARS: int = int(os.environ.get("STREAM_FLUSH_CHARS", "0"))  # 0 = emit every chunk

    # Interpolation
    INTERPOLATION_PARALLEL: bool = _flag("INTERPOLATION_PARALLEL")

    # Mock oracle (tests / offline UX)
    USE_MOCK_LLM: bool = _flag("USE_MOCK_LLM")
    MOCK_LLM_PROFILE: str = os.environ.get("MOCK_LLM_PROFILE", "instant")

    # Application
    ENVIRONMENT: str = os.environ.get("ENVIRONMENT", "development")
    LOG_LEVEL: str = os.environ.get("LOG_LEVEL", "INFO")


# Singleton instance
settings = Settings()

# Validate required settings (skip in test mode)
_testing = os.environ.get("TESTING", "").lower() == "true"

if not _testing and not settings.USE_MOCK_LLM:
    if settings.ORACLE_PROVIDER == "openai":
        if not settings.OPENAI_API_KEY:
            raise RuntimeError("OPENAI_API_KEY environment variable is required when ORACLE_PROVIDER=openai")
    elif not settings.ANTHROPIC_API_KEY:
        raise RuntimeError("ANTHROPIC_API_KEY environment variable is required")
