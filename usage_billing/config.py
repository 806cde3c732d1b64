"""
Application Configuration
=========================
Centralized configuration management using Pydantic Settings.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # Pricing config path
    pricing_config_path: str = "config/pricing.yaml"

    # Scheduler
    scheduler_enabled: bool = True
    daily_aggregation_hour: int = Field(default=2, ge=0, le=23)
    monthly_aggregation_day: int = Field(default=1, ge=1, le=28)
    monthly_aggregation_hour: int = Field(default=3, ge=0, le=23)


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
