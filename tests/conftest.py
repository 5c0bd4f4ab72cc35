"""Shared test fixtures for the market forecast engine."""

import random
import sys
from datetime import date, timedelta
from pathlib import Path

import pytest

# Ensure src is importable
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from src.common.config import (
    ForecastSettings,
    Settings,
    SourceSettings,
    SyntheticSettings,
)
from src.forecast_engine.history.cache import ExpiringCache
from src.forecast_engine.price_source.base import PriceSource, StaticPriceSource
from src.forecast_engine.price_source.models import PriceObservation

# Fixed reference day (not in the festival window)
TODAY = date(2026, 3, 16)


class FakeClock:
    """Manually advanced monotonic clock."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingSource(PriceSource):
    """Source whose provider is always down; counts attempts."""

    name = "failing"

    def __init__(self, exc: Exception | None = None) -> None:
        self.exc = exc or ConnectionError("upstream down")
        self.calls = 0

    def fetch(self, category: str) -> list[PriceObservation]:
        self.calls += 1
        raise self.exc


class CountingSource(StaticPriceSource):
    """Static source that records how often it was queried."""

    def __init__(self, observations=None) -> None:
        super().__init__(observations)
        self.calls = 0

    def fetch(self, category: str) -> list[PriceObservation]:
        self.calls += 1
        return super().fetch(category)


def make_observations(
    category: str,
    prices: list[float],
    end: date = TODAY,
    source: str = "AGMARKNET",
) -> list[PriceObservation]:
    """Daily observations ending at ``end``, oldest first."""
    n = len(prices)
    return [
        PriceObservation(
            category=category,
            commodity="turmeric",
            min_price=price * 0.9,
            max_price=price * 1.1,
            modal_price=price,
            date=end - timedelta(days=n - 1 - i),
            market="Erode",
            source=source,
        )
        for i, price in enumerate(prices)
    ]


@pytest.fixture
def project_root() -> Path:
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock) -> ExpiringCache:
    """Fresh observation cache per test, driven by the fake clock."""
    return ExpiringCache(ttl_seconds=3600, max_entries=16, clock=clock)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def app_settings() -> Settings:
    """Settings with the upstream feed disabled and default tuning."""
    return Settings(
        source=SourceSettings(agmarknet_enabled=False, rate_limit_rpm=0),
        synthetic=SyntheticSettings(),
        forecast=ForecastSettings(),
    )


@pytest.fixture
def ramp_prices() -> list[float]:
    """90 points rising linearly from 100 to 150."""
    return [100 + 50 * i / 89 for i in range(90)]


@pytest.fixture
def make_obs():
    """Factory for daily observations ending at TODAY."""
    return make_observations


@pytest.fixture
def failing_source() -> FailingSource:
    return FailingSource()


@pytest.fixture
def counting_source():
    """Factory: CountingSource({category: observations})."""
    return CountingSource
