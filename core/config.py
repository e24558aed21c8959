"""
Application configuration using Pydantic Settings.

Settings are read from ``TAX_ESTIMATOR_*`` environment variables and an
optional ``.env`` file. Command line options override them.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class Settings(BaseSettings):
    """
    Main application settings.

    ``brackets_dir`` left unset means the bracket files bundled with the
    package are used.
    """

    model_config = SettingsConfigDict(
        env_prefix="TAX_ESTIMATOR_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = Field(default="WARNING", description="Minimum log level")
    log_json: bool = Field(default=False, description="Render logs as JSON")

    brackets_dir: Path | None = Field(
        default=None,
        description="Directory of <jurisdiction>/<year>/<filing_status>.json bracket files",
    )
    default_jurisdiction: str = Field(default="us-federal", min_length=1)
    default_year: int = Field(default=2024, ge=1900, le=2200)
    default_filing_status: str = Field(default="single", min_length=1)

    @field_validator("log_level", mode="before")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Upper-case the level and reject unknown names."""
        level = str(v).strip().upper()
        if level not in LOG_LEVELS:
            msg = f"log_level must be one of {', '.join(LOG_LEVELS)}"
            raise ValueError(msg)
        return level

    @field_validator("default_jurisdiction", "default_filing_status", mode="before")
    @classmethod
    def normalize_key(cls, v: str) -> str:
        """Table keys are matched case-insensitively."""
        return str(v).strip().lower()


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Uses LRU cache to ensure settings are only loaded once.
    """
    return Settings()
