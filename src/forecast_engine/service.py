"""Market forecast service: the entry point for the marketplace backend.

Exposes exactly two operations:

    get_price_history(category, days)     → PriceHistory
    get_forecast(category, horizon_days)  → ForecastResult

Neither raises for missing or failing upstream data; both fall back to
synthetic data. Only malformed arguments raise InvalidRequestError.

Usage:
    with MarketForecastService.from_settings() as service:
        result = service.get_forecast("spices", 7)
        print(result.to_dict())
"""

from __future__ import annotations

import logging
from datetime import date

from src.common.config import Settings, settings as default_settings

from .errors import InvalidRequestError
from .forecaster.engine import ForecastEngine
from .forecaster.models import ForecastResult
from .history.builder import HistoryBuilder, ObservationCache, shared_cache
from .history.models import PriceHistory
from .history.synthetic import SyntheticGenerator
from .price_source.agmarknet import AgmarknetSource
from .price_source.base import PriceSource

logger = logging.getLogger(__name__)


def _check_category(category: str) -> str:
    if not isinstance(category, str) or not category.strip():
        raise InvalidRequestError("category must be a non-empty string")
    return category.strip()


def _check_days(value: int, name: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
        raise InvalidRequestError(f"{name} must be a positive integer, got {value!r}")
    return value


class MarketForecastService:
    """Facade wiring a price source into the history builder and engine."""

    def __init__(
        self,
        source: PriceSource,
        cache: ObservationCache | None = None,
        app_settings: Settings | None = None,
        seed: int | None = None,
    ) -> None:
        self.settings = app_settings or default_settings
        self.source = source
        self.history_builder = HistoryBuilder(
            source,
            cache=cache,
            generator=SyntheticGenerator(self.settings.synthetic, seed=seed),
            synthetic_settings=self.settings.synthetic,
            forecast_settings=self.settings.forecast,
        )
        self.engine = ForecastEngine(
            self.history_builder,
            forecast_settings=self.settings.forecast,
            seed=seed,
        )

    @classmethod
    def from_settings(
        cls, app_settings: Settings | None = None
    ) -> MarketForecastService:
        """Default wiring: AGMARKNET source and the process-wide cache."""
        app_settings = app_settings or default_settings
        source = AgmarknetSource(app_settings.source)
        return cls(source, cache=shared_cache(), app_settings=app_settings)

    def get_price_history(
        self, category: str, days: int, today: date | None = None
    ) -> PriceHistory:
        category = _check_category(category)
        days = _check_days(days, "days")
        history = self.history_builder.fetch_history(category, days, today=today)
        logger.info(
            "History for '%s': %d points, trend=%s (%+.2f%%), source=%s",
            category, len(history), history.trend,
            history.change_percent, history.source,
        )
        return history

    def get_forecast(
        self, category: str, horizon_days: int, today: date | None = None
    ) -> ForecastResult:
        category = _check_category(category)
        horizon_days = _check_days(horizon_days, "horizon_days")
        result = self.engine.forecast(category, horizon_days, today=today)
        logger.info(
            "Forecast for '%s': %d days, current=%s, trend=%s%s",
            category, result.horizon_days, result.current_price, result.trend,
            " (simulated)" if result.simulated else "",
        )
        return result

    def close(self) -> None:
        self.source.close()

    def __enter__(self) -> MarketForecastService:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
