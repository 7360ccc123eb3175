"""Centralised application settings loaded from environment / .env file."""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent


class Settings(BaseSettings):
    """All runtime configuration for the primitive estimator services.

    Values are read from environment variables first, then from a *.env* file
    located at the project root.  Variables are flat (no prefix), matching the
    names below case-insensitively.

    Estimation constants (baselines, half-lives, thresholds) are fixed
    policy and are *not* configurable here.
    """

    model_config = SettingsConfigDict(
        env_file=str(_PROJECT_ROOT / ".env"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── LLM chat bridge ───────────────────────────────────────
    openai_api_key: str = ""
    openai_model: str = "gpt-4o"
    chat_temperature: float = 0.7
    chat_timeout_seconds: float = 20.0
    chat_context_days: int = 7

    # ── API server ────────────────────────────────────────────
    api_host: str = "127.0.0.1"
    api_port: int = int(os.getenv("PORT", "8080"))
    cors_origins: str = "*"  # comma-separated origins, or "*" for all

    # ── Timeline generation ───────────────────────────────────
    timeline_display_days: int = 4
    timeline_padding_days: int = 7  # covers the longest (168 h) context window
    default_profile: str = "healthy"

    # ── Logging ───────────────────────────────────────────────
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return a cached :class:`Settings` singleton."""
    return Settings()
