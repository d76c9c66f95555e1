"""
Journal Ripples — Centralized configuration.

Loads all settings from .env and validates them.
This module is the foundation for every other module in the project.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel, ValidationError, field_validator

# Load .env from project root (one level up from ripples/config.py)
_ENV_PATH = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_ENV_PATH)

_PRIORITIES = ("high", "medium", "low")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseModel):
    """Application settings loaded from environment variables."""

    # SQLite: ripples, suggested tasks and materialized entities share one file
    DATABASE_PATH: str = "data/ripples.db"

    # Zone used to compute "today" for entries that arrive without a date
    TIMEZONE: str = "America/Toronto"

    # Extraction
    MAX_SUGGESTIONS: int = 25
    DEFAULT_PRIORITY: str = "low"

    LOG_LEVEL: str = "INFO"

    @field_validator("TIMEZONE")
    @classmethod
    def check_timezone(cls, v: str) -> str:
        try:
            ZoneInfo(v)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone {v!r}") from exc
        return v

    @field_validator("MAX_SUGGESTIONS", mode="before")
    @classmethod
    def parse_max_suggestions(cls, v: str | int) -> int:
        value = int(v)
        if value < 1:
            raise ValueError("MAX_SUGGESTIONS must be at least 1")
        return value

    @field_validator("DEFAULT_PRIORITY")
    @classmethod
    def check_priority(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in _PRIORITIES:
            raise ValueError(f"DEFAULT_PRIORITY must be one of {_PRIORITIES}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def check_log_level(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in _LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {_LOG_LEVELS}")
        return v


def _load_settings() -> Settings:
    """Load settings from environment, exiting on invalid values."""
    try:
        return Settings(
            DATABASE_PATH=os.getenv("DATABASE_PATH", "data/ripples.db"),
            TIMEZONE=os.getenv("TIMEZONE", "America/Toronto"),
            MAX_SUGGESTIONS=os.getenv("MAX_SUGGESTIONS", "25"),
            DEFAULT_PRIORITY=os.getenv("DEFAULT_PRIORITY", "low"),
            LOG_LEVEL=os.getenv("LOG_LEVEL", "INFO"),
        )
    except ValidationError as exc:
        print(f"ERROR: invalid configuration in .env: {exc}", file=sys.stderr)
        sys.exit(1)


# Singleton, imported by all other modules as:
#   from ripples.config import settings
settings = _load_settings()
