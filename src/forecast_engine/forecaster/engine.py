"""Price forecasting engine.

Decomposes a daily price series into a least-squares linear trend and a
multiplicative weekly seasonal index, then projects both forward. The
confidence band is the population standard deviation of the series
scaled by sqrt(days ahead).

Histories too short to fit fall back to a simulated walk around the
category's base price, flagged through ``simulated`` and the insights.
"""

from __future__ import annotations

import logging
import math
import random
from collections.abc import Sequence
from datetime import date, timedelta
from statistics import StatisticsError, fmean, linear_regression, pstdev

from src.common.config import ForecastSettings, settings

from ..common.numeric import round_half_up
from ..errors import InvalidRequestError
from ..history.builder import HistoryBuilder
from ..history.models import PriceHistory
from .insights import FALLBACK_INSIGHTS, InsightGenerator
from .models import Confidence, ForecastPoint, ForecastResult

logger = logging.getLogger(__name__)

FALLBACK_DRIFT = 0.001
FALLBACK_NOISE = 0.025
FALLBACK_BAND = 0.10
FALLBACK_SEASONALITY = "Moderate"


def linear_trend(prices: Sequence[float]) -> tuple[float, float]:
    """Ordinary least squares of price on index 0..n-1 → (slope, intercept)."""
    slope, intercept = linear_regression(range(len(prices)), prices)
    return slope, intercept


def seasonal_index(prices: Sequence[float], period: int = 7) -> list[float]:
    """Multiplicative factor per ``index % period`` bucket.

    Each bucket's mean is divided by the overall mean. Empty buckets, or a
    series whose mean is 0, get a factor of 1.0.
    """
    overall_mean = fmean(prices)
    buckets: list[list[float]] = [[] for _ in range(period)]
    for index, price in enumerate(prices):
        buckets[index % period].append(price)

    if overall_mean == 0:
        return [1.0] * period
    return [
        fmean(bucket) / overall_mean if bucket else 1.0
        for bucket in buckets
    ]


def volatility(prices: Sequence[float]) -> float:
    """Population standard deviation of the series."""
    return pstdev(prices)


def confidence_for(
    days_ahead: int, forecast_settings: ForecastSettings | None = None
) -> Confidence:
    cfg = forecast_settings or settings.forecast
    if days_ahead <= cfg.high_confidence_days:
        return "high"
    if days_ahead <= cfg.medium_confidence_days:
        return "medium"
    return "low"


def _check_horizon(horizon_days: int) -> None:
    if isinstance(horizon_days, bool) or not isinstance(horizon_days, int) or horizon_days <= 0:
        raise InvalidRequestError(
            f"horizon_days must be a positive integer, got {horizon_days!r}"
        )


class ForecastEngine:
    """Produce day-by-day forecasts with confidence bands and insights.

    Usage:
        engine = ForecastEngine(HistoryBuilder(AgmarknetSource()))
        result = engine.forecast("spices", 30)
        for point in result.predictions:
            print(point.date, point.predicted_price, point.confidence)
    """

    def __init__(
        self,
        history_builder: HistoryBuilder,
        insight_generator: InsightGenerator | None = None,
        forecast_settings: ForecastSettings | None = None,
        rng: random.Random | None = None,
        seed: int | None = None,
    ) -> None:
        self.history_builder = history_builder
        self.settings = forecast_settings or history_builder.forecast_settings
        self.insights = insight_generator or InsightGenerator(self.settings)
        self._rng = rng or random.Random(seed)

    def forecast(
        self,
        category: str,
        horizon_days: int,
        today: date | None = None,
    ) -> ForecastResult:
        """Forecast ``horizon_days`` days ahead for a category.

        Raises:
            InvalidRequestError: If horizon_days is not a positive integer.
        """
        _check_horizon(horizon_days)
        history = self.history_builder.fetch_history(
            category, self.settings.history_days, today=today
        )
        return self.forecast_history(history, category, horizon_days, today=today)

    def forecast_history(
        self,
        history: PriceHistory,
        category: str,
        horizon_days: int,
        today: date | None = None,
    ) -> ForecastResult:
        """Forecast from an already-built history."""
        _check_horizon(horizon_days)
        today = today or date.today()

        if len(history) < self.settings.min_history:
            logger.warning(
                "Only %d history points for '%s' (need %d), using fallback forecast",
                len(history), category, self.settings.min_history,
            )
            return self.fallback_forecast(category, horizon_days, today=today)

        try:
            predictions = self._project(history.prices, horizon_days, today)
        except StatisticsError as exc:
            logger.warning(
                "Could not fit history for '%s' (%s), using fallback forecast",
                category, exc,
            )
            return self.fallback_forecast(category, horizon_days, today=today)

        return ForecastResult(
            predictions=predictions,
            current_price=history.prices[-1],
            trend=history.trend,
            seasonality=self.insights.describe_seasonality(history.prices),
            insights=self.insights.generate(history, predictions, category, today=today),
            category=category,
        )

    def _project(
        self, prices: Sequence[float], horizon_days: int, today: date
    ) -> list[ForecastPoint]:
        n = len(prices)
        slope, intercept = linear_trend(prices)
        factors = seasonal_index(prices, self.settings.season_length)
        sigma = volatility(prices)
        logger.debug(
            "Fit n=%d slope=%.4f intercept=%.2f volatility=%.2f",
            n, slope, intercept, sigma,
        )

        predictions: list[ForecastPoint] = []
        for i in range(1, horizon_days + 1):
            trend_value = slope * (n + i) + intercept
            factor = factors[(n + i) % len(factors)]
            predicted = max(0, round_half_up(trend_value * factor))
            width = sigma * math.sqrt(i)

            predictions.append(
                ForecastPoint(
                    date=today + timedelta(days=i),
                    predicted_price=predicted,
                    confidence=confidence_for(i, self.settings),
                    lower_bound=max(0, round_half_up(predicted - width)),
                    upper_bound=round_half_up(predicted + width),
                )
            )
        return predictions

    def fallback_forecast(
        self,
        category: str,
        horizon_days: int,
        today: date | None = None,
    ) -> ForecastResult:
        """Simulated forecast: gentle upward walk around the base price."""
        _check_horizon(horizon_days)
        today = today or date.today()
        base = self.history_builder.generator.base_price(category)

        predictions: list[ForecastPoint] = []
        for i in range(1, horizon_days + 1):
            trend_factor = 1 + i * FALLBACK_DRIFT
            noise = self._rng.uniform(-FALLBACK_NOISE, FALLBACK_NOISE)
            predicted = max(0, round_half_up(base * trend_factor * (1 + noise)))
            predictions.append(
                ForecastPoint(
                    date=today + timedelta(days=i),
                    predicted_price=predicted,
                    confidence="medium" if i <= self.settings.high_confidence_days else "low",
                    lower_bound=round_half_up(predicted * (1 - FALLBACK_BAND)),
                    upper_bound=round_half_up(predicted * (1 + FALLBACK_BAND)),
                )
            )

        return ForecastResult(
            predictions=predictions,
            current_price=base,
            trend="stable",
            seasonality=FALLBACK_SEASONALITY,
            insights=list(FALLBACK_INSIGHTS),
            category=category,
            simulated=True,
        )
