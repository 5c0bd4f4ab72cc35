"""Project configuration and paths.

Loads settings from config/settings.yaml and environment variables.
"""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field

# === Paths ===
PROJECT_ROOT = Path(__file__).parent.parent.parent
CONFIG_DIR = PROJECT_ROOT / "config"

# Load .env from project root
load_dotenv(PROJECT_ROOT / ".env")


def _env_flag(name: str, default: bool = False) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


class SourceSettings(BaseModel):
    """Settings for the upstream AGMARKNET price feed."""
    agmarknet_enabled: bool = Field(
        default_factory=lambda: _env_flag("AGMARKNET_ENABLED")
    )
    base_url: str = "https://api.data.gov.in/resource"
    resource: str = "agmarknet-prices"
    request_timeout: float = 4.0
    request_deadline: float = 8.0
    max_retries: int = 1
    backoff_base: float = 0.5
    rate_limit_rpm: int = 60
    record_limit: int = 50


class CacheSettings(BaseModel):
    """Settings for the in-process observation cache."""
    ttl_seconds: float = 3600.0
    max_entries: int = 256


class SyntheticSettings(BaseModel):
    """Settings for the synthetic price generator."""
    min_observations: int = 7
    fallback_observations: int = 30
    variation: float = 0.10
    seasonal_amplitude: float = 0.08
    drift: float = 0.001
    default_base_price: float = 500.0
    base_prices: dict[str, float] = Field(
        default_factory=lambda: {
            "textiles": 2000.0,
            "spices": 150.0,
            "handicrafts": 500.0,
            "food products": 100.0,
            "pottery": 300.0,
            "jewelry": 1500.0,
            "home decor": 800.0,
        }
    )


class ForecastSettings(BaseModel):
    """Settings for the forecasting engine and insight rules."""
    history_days: int = 90
    min_history: int = 7
    season_length: int = 7
    trend_threshold_pct: float = 5.0
    high_confidence_days: int = 7
    medium_confidence_days: int = 30
    seasonality_min_points: int = 30
    festival_months: list[int] = Field(default_factory=lambda: [10, 11])


class Settings(BaseModel):
    """Top-level application settings."""
    source: SourceSettings = Field(default_factory=SourceSettings)
    cache: CacheSettings = Field(default_factory=CacheSettings)
    synthetic: SyntheticSettings = Field(default_factory=SyntheticSettings)
    forecast: ForecastSettings = Field(default_factory=ForecastSettings)

    @classmethod
    def load(cls, path: Path | None = None) -> Settings:
        """Load settings from config/settings.yaml, falling back to defaults."""
        settings_path = path or CONFIG_DIR / "settings.yaml"
        if settings_path.exists():
            with open(settings_path, encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            return cls(**data)
        return cls()


def get_data_gov_api_key() -> str:
    """Get the data.gov.in API key from environment (empty if unset)."""
    return os.getenv("DATA_GOV_IN_API_KEY", "").strip()


# Singleton settings instance
settings = Settings.load()
