"""Pydantic Settings configuration.

Config hierarchy (lowest to highest priority):
1. Pydantic defaults (in code below)
2. .env file (loaded by Pydantic Settings)
3. Environment variables (e.g., TASTREAM_NUMERIC=decimal)
4. CLI options, applied by the command on top of the loaded settings
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from tastream.numeric import NUMERIC_TYPES

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})
VALID_LOG_FORMATS = frozenset({"console", "json"})


class Settings(BaseSettings):
    """Top-level configuration.

    Env var examples:
        TASTREAM_LOG_LEVEL=DEBUG
        TASTREAM_LOG_FORMAT=json
        TASTREAM_NUMERIC=decimal
        TASTREAM_DECIMAL_PRECISION=40
    """

    model_config = SettingsConfigDict(
        env_prefix="TASTREAM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"
    log_format: str = "console"
    numeric: str = "float"
    decimal_precision: int = Field(default=28, ge=8, le=100)
    output_places: int = Field(default=6, ge=0, le=12)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in VALID_LOG_LEVELS:
            raise ValueError(
                f"log_level must be one of {sorted(VALID_LOG_LEVELS)}, got {v}"
            )
        return v

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in VALID_LOG_FORMATS:
            raise ValueError(
                f"log_format must be one of {sorted(VALID_LOG_FORMATS)}, got {v}"
            )
        return v

    @field_validator("numeric")
    @classmethod
    def validate_numeric(cls, v: str) -> str:
        v = v.lower()
        if v not in NUMERIC_TYPES:
            raise ValueError(
                f"numeric must be one of {sorted(NUMERIC_TYPES)}, got {v}"
            )
        return v
