"""
Configuration settings for the chemtask engine and CLI.

Uses Pydantic Settings for environment variable management with .env file support.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ========================================
    # Data
    # ========================================
    data_dir: Path | None = Field(
        default=None,
        description="Ontology/template data directory (bundled data when unset)",
    )

    # ========================================
    # Mastery State
    # ========================================
    state_db_path: Path = Field(
        default=Path.home() / ".chemtask" / "state.db",
        description="SQLite file holding BKT mastery estimates",
    )

    # ========================================
    # Generation
    # ========================================
    distractor_count: int = Field(
        default=3,
        ge=0,
        description="Wrong answers generated per exercise",
    )
    competency_max_attempts: int = Field(
        default=30,
        ge=1,
        description="Generation attempts per template group when targeting a competency",
    )

    # ========================================
    # Logging
    # ========================================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="WARNING",
        description="Minimum level written to stderr",
    )
    log_file: Path | None = Field(
        default=None,
        description="Optional log file (rotated at 10 MB)",
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
