"""Configuration system for the Heirloom engine.

This module provides Pydantic Settings-based configuration with environment
variable support. Defaults are the statutory figures in ``tax_standards``,
so a yearly change in deduction amounts can be applied through the
environment without a code change.

Usage:
    from heirloom_core.config import HeirloomConfig, configure_logging

    config = HeirloomConfig()
    configure_logging(config)

    calculator = EstateTaxCalculator(config.tax)
"""

import logging
from typing import Optional

import structlog
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import TaxBracket
from .tax_standards import (
    CHILD_DEDUCTION,
    EXEMPTION,
    FUNERAL_DEDUCTION,
    PARENT_DEDUCTION,
    SPOUSE_DEDUCTION,
    default_brackets,
)


class TaxConfig(BaseSettings):
    """Estate tax settings.

    Environment Variables:
        HEIRLOOM_TAX_EXEMPTION: Basic exemption
        HEIRLOOM_TAX_FUNERAL_DEDUCTION: Funeral expense deduction
        HEIRLOOM_TAX_SPOUSE_DEDUCTION: Deduction for a living spouse
        HEIRLOOM_TAX_PARENT_DEDUCTION: Deduction per living parent
        HEIRLOOM_TAX_CHILD_DEDUCTION: Deduction per living child
        HEIRLOOM_TAX_BRACKETS: JSON list of {upper_bound, rate, quick_deduction}
    """

    model_config = SettingsConfigDict(
        env_prefix="HEIRLOOM_TAX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    exemption: int = Field(default=EXEMPTION, ge=0, description="Basic exemption")
    funeral_deduction: int = Field(default=FUNERAL_DEDUCTION, ge=0)
    spouse_deduction: int = Field(default=SPOUSE_DEDUCTION, ge=0)
    parent_deduction: int = Field(default=PARENT_DEDUCTION, ge=0)
    child_deduction: int = Field(default=CHILD_DEDUCTION, ge=0)
    brackets: list[TaxBracket] = Field(
        default_factory=default_brackets,
        description="Progressive brackets, ascending, last one catch-all",
    )

    @field_validator("brackets")
    @classmethod
    def validate_brackets(cls, v: list[TaxBracket]) -> list[TaxBracket]:
        """Require at least one bracket."""
        if not v:
            raise ValueError("At least one tax bracket is required")
        return v


class DisplayConfig(BaseSettings):
    """Settings for rendering statutory shares as readable fractions.

    Environment Variables:
        HEIRLOOM_DISPLAY_FRACTION_MAX_DENOMINATOR: Largest denominator tried
        HEIRLOOM_DISPLAY_FRACTION_TOLERANCE: Allowed approximation error
        HEIRLOOM_DISPLAY_PERCENT_DECIMALS: Decimals in the percentage fallback
    """

    model_config = SettingsConfigDict(
        env_prefix="HEIRLOOM_DISPLAY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    fraction_max_denominator: int = Field(default=120, gt=0, le=10_000)
    fraction_tolerance: float = Field(default=1e-8, gt=0, lt=1)
    percent_decimals: int = Field(default=2, ge=0, le=6)


class HeirloomConfig(BaseSettings):
    """Root configuration for the Heirloom engine.

    Environment Variables:
        HEIRLOOM_ENV: Environment name (development, staging, production, test)
        HEIRLOOM_LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)

    Example:
        config = HeirloomConfig(
            tax=TaxConfig(exemption=13_330_000),
            display=DisplayConfig(percent_decimals=1),
        )
    """

    model_config = SettingsConfigDict(
        env_prefix="HEIRLOOM_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    env: str = Field(
        default="development",
        description="Environment name (development, staging, production, test)",
    )
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )

    tax: TaxConfig = Field(default_factory=TaxConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)

    @field_validator("env")
    @classmethod
    def validate_env(cls, v: str) -> str:
        """Validate environment name."""
        valid_envs = {"development", "staging", "production", "test"}
        v_lower = v.lower().strip()
        if v_lower not in valid_envs:
            raise ValueError(f"Invalid environment: {v}. Must be one of: {valid_envs}")
        return v_lower

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate and normalize log level."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        v_upper = v.upper().strip()
        if v_upper not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of: {valid_levels}")
        return v_upper

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.env == "production"

    @property
    def is_debug(self) -> bool:
        """Check if debug logging is enabled."""
        return self.log_level == "DEBUG"


def configure_logging(config: Optional[HeirloomConfig] = None) -> None:
    """Apply the configured log level to structlog."""
    config = config or HeirloomConfig()
    level = logging.getLevelName(config.log_level)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )
