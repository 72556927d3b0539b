"""Pydantic schema for configuration validation.

All config values are validated at startup. Typos and invalid values
fail fast with clear error messages.

Usage:
    from loyalty_ledger.config_schema import load_validated_config, AppConfig
    config = load_validated_config("config/config.yaml")
    # config is now a validated AppConfig instance
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


# =============================================================================
# BASE MODEL WITH STRICT VALIDATION
# =============================================================================

class StrictModel(BaseModel):
    """Base model that rejects unknown fields (catches typos)."""

    model_config = ConfigDict(extra="forbid")


# =============================================================================
# TOKEN MODEL
# =============================================================================

class TokenConfig(StrictModel):
    """Token metadata."""

    name: str = Field(
        default="Loyalty Point",
        min_length=1,
        description="Human-readable token name"
    )
    symbol: str = Field(
        default="LOYAL",
        min_length=1,
        max_length=11,
        description="Short ticker symbol"
    )


# =============================================================================
# LOGGING MODEL
# =============================================================================

class LoggingConfig(StrictModel):
    """Notification log configuration."""

    output_file: str | None = Field(
        default=None,
        description="JSONL file for ledger events (null keeps them in memory)"
    )
    buffer_size: int = Field(
        default=1000,
        gt=0,
        description="Events retained in memory when no output file is set"
    )
    default_recent: int = Field(
        default=50,
        gt=0,
        description="Default number of recent events to return"
    )


# =============================================================================
# ROOT CONFIG
# =============================================================================

class AppConfig(StrictModel):
    """Root configuration model for the entire application.

    All fields have sensible defaults, so an empty config file is valid.
    """

    token: TokenConfig = Field(default_factory=TokenConfig)
    administrator: str = Field(
        default="admin",
        description="Single identity allowed to mint and toggle transfers"
    )
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @field_validator("administrator")
    @classmethod
    def administrator_not_blank(cls, v: str) -> str:
        """Administrator identity cannot be blank."""
        if not v.strip():
            raise ValueError("administrator must be a non-empty identity")
        return v


def load_validated_config(config_path: str | Path = "config/config.yaml") -> AppConfig:
    """Load and validate configuration from YAML file.

    Args:
        config_path: Path to config YAML file.

    Returns:
        Validated AppConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        pydantic.ValidationError: If config is invalid (with detailed error message).
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        raw_config = yaml.safe_load(f) or {}

    return AppConfig.model_validate(raw_config)


def validate_config_dict(config_dict: dict[str, Any]) -> AppConfig:
    """Validate a configuration dictionary.

    Raises:
        pydantic.ValidationError: If config is invalid.
    """
    return AppConfig.model_validate(config_dict)


__all__ = [
    "AppConfig",
    "TokenConfig",
    "LoggingConfig",
    "StrictModel",
    "load_validated_config",
    "validate_config_dict",
]
