"""Price history builder.

Combines the upstream price source, the observation cache and the
synthetic generator into one ordered PriceHistory per request:

1. Raw observations come from the source through the cache (keyed by
   category). An Unavailable outcome, or fewer than ``min_observations``
   observations, is replaced by a 30-day synthetic series, and that
   replacement is cached too.
2. Observations are sorted by date, the last ``days`` are kept, and the
   modal prices become the series.
3. If nothing at all is available, a ``days``-long synthetic history is
   generated instead.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from datetime import date
from statistics import fmean

from src.common.config import ForecastSettings, SyntheticSettings, settings

from ..errors import InvalidRequestError
from ..price_source.base import PriceSource
from ..price_source.models import Available, PriceObservation, Unavailable
from .cache import ExpiringCache
from .models import (
    HISTORY_SOURCE_MARKET,
    HISTORY_SOURCE_SYNTHETIC,
    PriceHistory,
    Trend,
)
from .synthetic import SyntheticGenerator

logger = logging.getLogger(__name__)

TREND_WINDOW = 7

ObservationCache = ExpiringCache[str, tuple[PriceObservation, ...]]

_shared_cache: ObservationCache | None = None
_shared_cache_lock = threading.Lock()


def shared_cache() -> ObservationCache:
    """Process-wide observation cache configured from settings."""
    global _shared_cache
    with _shared_cache_lock:
        if _shared_cache is None:
            _shared_cache = ExpiringCache(
                ttl_seconds=settings.cache.ttl_seconds,
                max_entries=settings.cache.max_entries,
            )
        return _shared_cache


def compute_trend(
    prices: Sequence[float],
    window: int = TREND_WINDOW,
    threshold_pct: float = 5.0,
) -> tuple[Trend, float]:
    """Compare the latest window's mean against the earliest window's mean.

    Windows shrink to the available values. Returns (trend, change_percent)
    with change_percent rounded to 2 decimals; an empty series or an old
    mean of 0 reads as stable with 0% change.
    """
    if not prices:
        return "stable", 0.0

    recent_avg = fmean(prices[-window:])
    old_avg = fmean(prices[:window])
    if old_avg == 0:
        return "stable", 0.0

    change_percent = round((recent_avg - old_avg) / old_avg * 100, 2)
    if change_percent > threshold_pct:
        return "up", change_percent
    if change_percent < -threshold_pct:
        return "down", change_percent
    return "stable", change_percent


def cache_key(category: str) -> str:
    return category.strip().lower()


class HistoryBuilder:
    """Build PriceHistory objects from a price source with graceful fallback.

    Usage:
        builder = HistoryBuilder(AgmarknetSource())
        history = builder.fetch_history("spices", 90)
        print(history.trend, history.change_percent)
    """

    def __init__(
        self,
        source: PriceSource,
        cache: ObservationCache | None = None,
        generator: SyntheticGenerator | None = None,
        synthetic_settings: SyntheticSettings | None = None,
        forecast_settings: ForecastSettings | None = None,
    ) -> None:
        self.source = source
        self.cache = cache if cache is not None else shared_cache()
        self.synthetic_settings = synthetic_settings or settings.synthetic
        self.forecast_settings = forecast_settings or settings.forecast
        self.generator = generator or SyntheticGenerator(self.synthetic_settings)

    def fetch_observations(self, category: str) -> tuple[PriceObservation, ...]:
        """Raw observations for a category, served from cache within the TTL."""
        return self.cache.get_or_compute(
            cache_key(category), lambda: self._load_observations(category)
        )

    def _load_observations(self, category: str) -> tuple[PriceObservation, ...]:
        outcome = self.source.get(category)
        floor = self.synthetic_settings.min_observations

        if isinstance(outcome, Available) and len(outcome.observations) >= floor:
            return outcome.observations

        if isinstance(outcome, Unavailable):
            logger.info(
                "No upstream data for '%s' (%s), using synthetic observations",
                category, outcome.reason,
            )
        else:
            logger.info(
                "Only %d upstream observations for '%s' (need %d), "
                "using synthetic observations",
                len(outcome.observations), category, floor,
            )
        return tuple(
            self.generator.observations(
                category, self.synthetic_settings.fallback_observations
            )
        )

    def fetch_history(
        self,
        category: str,
        days: int,
        today: date | None = None,
    ) -> PriceHistory:
        """Build the last ``days`` days of modal prices for a category.

        Args:
            category: Marketplace category (e.g., "spices").
            days: Maximum number of daily points to return.
            today: Anchor for synthetic dates (defaults to date.today()).

        Returns:
            PriceHistory with at most ``days`` points.

        Raises:
            InvalidRequestError: If days is not a positive integer.
        """
        if isinstance(days, bool) or not isinstance(days, int) or days <= 0:
            raise InvalidRequestError(f"days must be a positive integer, got {days!r}")

        observations = self.fetch_observations(category)
        if not observations:
            return self._synthetic_history(category, days, today)

        selected = sorted(observations, key=lambda o: o.date)[-days:]
        prices = [o.modal_price for o in selected]
        trend, change_percent = compute_trend(
            prices, threshold_pct=self.forecast_settings.trend_threshold_pct
        )
        source = (
            HISTORY_SOURCE_SYNTHETIC
            if all(o.is_simulated for o in selected)
            else HISTORY_SOURCE_MARKET
        )
        return PriceHistory(
            dates=[o.date for o in selected],
            prices=prices,
            trend=trend,
            change_percent=change_percent,
            source=source,
        )

    def _synthetic_history(
        self, category: str, days: int, today: date | None
    ) -> PriceHistory:
        logger.warning(
            "No observations at all for '%s', generating %d-day synthetic history",
            category, days,
        )
        generated = self.generator.observations(category, days, today=today)
        prices = [o.modal_price for o in generated]
        trend, change_percent = compute_trend(
            prices, threshold_pct=self.forecast_settings.trend_threshold_pct
        )
        return PriceHistory(
            dates=[o.date for o in generated],
            prices=prices,
            trend=trend,
            change_percent=change_percent,
            source=HISTORY_SOURCE_SYNTHETIC,
        )
