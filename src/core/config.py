"""Configuration management for the roster_dedupe tooling.

All configuration is loaded from environment variables and/or .env file.
"""
from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Project root detection
PROJECT_ROOT = Path(__file__).resolve().parents[2]
ENV_FILE = PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    """
    Runtime configuration powered by environment variables and .env overrides.

    All settings can be configured via:
    1. Environment variables (highest priority)
    2. .env file in project root (loaded automatically)
    3. Default values (lowest priority)
    """

    model_config = SettingsConfigDict(
        env_file=ENV_FILE if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,  # Allow case-insensitive env vars
    )

    # -------------------------------------------------------------------------
    # Name Matching
    # -------------------------------------------------------------------------
    duplicate_threshold: float = Field(
        default=0.7,
        alias="NAME_MATCH_THRESHOLD",
        ge=0.0,
        le=1.0,
        description="Score at or above which two names are treated as the same person.",
    )
    near_miss_threshold: float = Field(
        default=0.6,
        alias="NAME_MATCH_NEAR_MISS",
        ge=0.0,
        le=1.0,
        description="Scores between this and the duplicate threshold are logged for review.",
    )
    levenshtein_threshold: float = Field(
        default=0.86,
        alias="NAME_MATCH_LEVENSHTEIN_THRESHOLD",
        ge=0.0,
        le=1.0,
        description="Threshold for the edit-distance score used by transitive grouping.",
    )
    min_char_token_length: int = Field(
        default=3,
        alias="NAME_MATCH_MIN_TOKEN_LENGTH",
        ge=1,
        description="Shortest token considered for character similarity.",
    )

    # -------------------------------------------------------------------------
    # Application
    # -------------------------------------------------------------------------
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_format: str = Field(default="text", alias="LOG_FORMAT")  # "text" or "json"
    environment: str = Field(default="local", alias="ENVIRONMENT")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensure log level is valid."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return upper

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Ensure log format is valid."""
        lower = v.lower()
        if lower not in {"text", "json"}:
            raise ValueError("log_format must be 'text' or 'json'")
        return lower

    @model_validator(mode="after")
    def validate_near_miss(self) -> "Settings":
        """Near-miss reporting only makes sense below the duplicate threshold."""
        if self.near_miss_threshold > self.duplicate_threshold:
            raise ValueError(
                "NAME_MATCH_NEAR_MISS must not exceed NAME_MATCH_THRESHOLD"
            )
        return self

    def is_json_logging(self) -> bool:
        """Check if structured JSON logging is requested."""
        return self.log_format == "json"


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Settings are loaded once and cached. To reload settings,
    call `get_settings.cache_clear()` first.

    Returns:
        Settings object with all configuration.
    """
    return Settings()


def reload_settings() -> Settings:
    """
    Clear settings cache and reload from environment.

    Useful for testing or after modifying .env file.
    """
    get_settings.cache_clear()
    return get_settings()
