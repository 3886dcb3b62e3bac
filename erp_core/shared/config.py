"""
Configuration Management
========================
Centralized configuration using Pydantic Settings.
"""

from typing import Literal
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Core settings loaded from environment variables (prefix ``ERP_CORE_``)."""

    model_config = SettingsConfigDict(
        env_prefix="ERP_CORE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "ERP Document Core"
    environment: str = "development"

    # Tax
    tax_rate: float = Field(default=0.11, ge=0)
    tax_inclusive: bool = False
    tax_exempt: bool = False

    # Rounding
    rounding_mode: Literal["standard", "up", "unit"] = "standard"
    rounding_unit: int = Field(default=100, gt=0)
    rounding_precision: int = Field(default=0, ge=0)

    # Line items
    line_items_min: int = Field(default=0, ge=0)
    line_items_max: int = Field(default=100, ge=1)
    line_items_require_product: bool = False

    # Events
    event_history_size: int = Field(default=100, ge=0)

    # Observability
    log_level: str = "INFO"
    log_format: Literal["json", "console"] = "json"


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
