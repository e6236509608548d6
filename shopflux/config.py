"""
------------------------------------------------------------------------------
Project:        ShopFlux
File:           shopflux/config.py
Version:        1.0.0
Producer:       ShopFlux Team
Generator:      Antigravity
Description:    Application configuration based on pydantic-settings.
                Values come from SHOPFLUX_* environment variables or a .env
                file and cover formatting, forecasting, logging and paths.
------------------------------------------------------------------------------
"""

import json
from functools import lru_cache
from pathlib import Path
from typing import Dict, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Runtime settings of the reporting engine.
    Every field can be overridden with SHOPFLUX_<FIELD_NAME>.
    """
    model_config = SettingsConfigDict(
        env_prefix="SHOPFLUX_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Formatting
    currency_symbol: str = "Rs."
    locale: str = "en_IN"

    # Forecasting
    forecast_window_days: int = Field(default=30, ge=1)
    forecast_horizon_days: int = Field(default=7, ge=0)
    trend_threshold: float = Field(default=0.01, gt=0)

    # Logging
    log_level: str = "WARNING"
    log_file: Optional[str] = None
    log_components: str = "{}"  # JSON object, e.g. {"filters": "DEBUG"}

    # Paths
    templates_dir: Optional[str] = None
    export_dir: str = "exports"

    @field_validator("log_level")
    @classmethod
    def _normalize_level(cls, v: str) -> str:
        return v.strip().upper() or "WARNING"

    def get_log_components(self) -> Dict[str, str]:
        """Returns the component-specific log levels as a dictionary."""
        try:
            data = json.loads(self.log_components or "{}")
        except json.JSONDecodeError:
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): str(v) for k, v in data.items()}

    def get_export_dir(self) -> Path:
        """Returns the export directory, created on demand."""
        path = Path(self.export_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path


@lru_cache
def get_settings() -> Settings:
    return Settings()
