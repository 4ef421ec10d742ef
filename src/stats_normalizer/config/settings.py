# src/stats_normalizer/config/settings.py
# Copyright (c)
# SPDX-License-Identifier: MIT
"""Stats Normalizer Configuration (Pydantic Settings, v2)

Summary:
    Typed, validated configuration for the statistics normalization layer.
    Decoders never read the process environment themselves; the decode
    boundary resolves `Settings` once and threads the relevant values
    (timezone, label separator) into the pure components as parameters.

Design:
    - Pydantic v2 BaseSettings reading only `STATS_NORMALIZER_*` keys from the
      environment and `.env`; unrelated keys of the host are ignored.
    - Explicit field declarations with constrained values.
    - Environment enumeration for coarse behavior toggles.
    - Singleton accessor `get_settings()` with LRU cache.
"""

from __future__ import annotations

import logging
from datetime import tzinfo
from enum import Enum
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Environment(str, Enum):
    """Logical deployment environment."""

    DEVELOPMENT = "development"
    TEST = "test"
    CI = "ci"
    STAGING = "staging"
    PRODUCTION = "production"


class Settings(BaseSettings):
    """Typed configuration for the normalization layer."""

    environment: Environment = Field(
        default=Environment.DEVELOPMENT,
        description="Logical deployment environment.",
        validation_alias="STATS_NORMALIZER_ENVIRONMENT",
    )

    log_level: str = Field(
        default="INFO",
        description="Root log level used by configure_root_logging().",
        validation_alias="STATS_NORMALIZER_LOG_LEVEL",
    )

    timezone: str = Field(
        default="UTC",
        description=(
            "IANA timezone name the backend reports period dates in. Dates "
            "decoded from tabular payloads are made aware in this zone."
        ),
        validation_alias="STATS_NORMALIZER_TIMEZONE",
    )

    label_separator: str = Field(
        default=" / ",
        min_length=1,
        description="Separator used to join composite-key dimension values into a label.",
        validation_alias="STATS_NORMALIZER_LABEL_SEPARATOR",
    )

    metrics_enabled: bool = Field(
        default=True,
        description="Record Prometheus decode metrics at the decode boundary.",
        validation_alias="STATS_NORMALIZER_METRICS_ENABLED",
    )

    # The host's .env may carry unrelated keys; only prefixed ones are read.
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="STATS_NORMALIZER_",
        extra="ignore",
        case_sensitive=False,
        populate_by_name=True,
    )

    @field_validator("timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        """Reject timezone names unknown to the zoneinfo database.

        Raises:
            ValueError: If the name cannot be resolved.
        """
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"unknown timezone: {value!r}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def _normalize_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"}:
            raise ValueError(f"unsupported log level: {value!r}")
        return level

    @property
    def tzinfo(self) -> tzinfo:
        """Resolved timezone object for :attr:`timezone`."""
        return ZoneInfo(self.timezone)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached singleton `Settings` instance.

    Returns:
        Settings: Validated settings.

    Raises:
        RuntimeError: If configuration is invalid.
    """
    try:
        settings = Settings()
    except ValidationError as exc:
        logger.error(
            "Invalid stats normalizer configuration",
            extra={"extra": {"errors": exc.errors()}},
        )
        raise RuntimeError("Invalid stats normalizer configuration") from exc

    logger.debug(
        "Settings initialized",
        extra={
            "extra": {
                "environment": settings.environment.value,
                "timezone": settings.timezone,
                "metrics_enabled": settings.metrics_enabled,
            }
        },
    )
    return settings
