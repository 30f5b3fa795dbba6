"""Pydantic configuration schema for the lore archive reader.

This module defines the configuration schema that mirrors config.yaml structure.
Every field has a default, so an empty file (or no file at all) is a valid
configuration pointing at lore.kernel.org.

Usage:
    from lorereader.config_schema import AppConfig

    # Validate a config dict
    config = AppConfig(**yaml_data)
"""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

# Current schema version - increment when adding new required fields
CURRENT_SCHEMA_VERSION = 1

DEFAULT_BASE_URL = "https://lore.kernel.org"


class ArchiveConfig(BaseModel):
    """Archive location and HTTP fetch settings."""

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        description="Root URL of the public-inbox archive",
    )
    timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Per-request timeout for archive fetches (seconds)",
    )
    user_agent: str = Field(
        default="lorereader/0.1",
        description="User-Agent header sent with every request",
    )

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Require an http(s) URL and drop any trailing slash."""
        v = v.strip()
        if not v.startswith(("http://", "https://")):
            raise ValueError("Base URL must start with http:// or https://")
        return v.rstrip("/")


class ParserConfig(BaseModel):
    """Thread page parsing settings."""

    nesting_lookback: int = Field(
        default=20,
        ge=1,
        le=200,
        description="Characters before an href searched for the reply marker",
    )


class LoggingConfig(BaseModel):
    """Log output settings."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Minimum level to emit",
    )
    json_output: bool = Field(
        default=False,
        description="Emit JSON lines instead of console output",
    )

    @field_validator("level", mode="before")
    @classmethod
    def normalize_level(cls, v: object) -> object:
        """Accept lower-case level names."""
        if isinstance(v, str):
            return v.upper()
        return v


class AppConfig(BaseModel):
    """Root configuration model."""

    schema_version: int = Field(
        default=CURRENT_SCHEMA_VERSION,
        ge=1,
        description="Config schema version",
    )
    archive: ArchiveConfig = Field(default_factory=ArchiveConfig)
    parser: ParserConfig = Field(default_factory=ParserConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
