"""Human-readable observations derived from a history and its forecast."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from statistics import fmean, pstdev

from src.common.config import ForecastSettings, settings

from ..history.models import PriceHistory
from .models import ForecastPoint

logger = logging.getLogger(__name__)

INSUFFICIENT_SEASONALITY = "Insufficient data for seasonality detection"
LOW_SEASONALITY = "Low seasonality - stable prices"
MODERATE_SEASONALITY = "Moderate seasonality - some variation"
HIGH_SEASONALITY = "High seasonality - significant variation"

# Coefficient-of-variation cut-offs for the seasonality label
LOW_CV = 0.10
MODERATE_CV = 0.20

NEAR_TERM_DAYS = 7
NEAR_TERM_THRESHOLD_PCT = 5.0

FALLBACK_INSIGHTS = (
    "Using simulated data for forecasting.",
    "Connect real data sources for more accurate predictions.",
    "Consider current market conditions in your area.",
)


class InsightGenerator:
    """Turn numbers into pricing advice for sellers."""

    def __init__(self, forecast_settings: ForecastSettings | None = None) -> None:
        self.settings = forecast_settings or settings.forecast

    def describe_seasonality(self, prices: Sequence[float]) -> str:
        """Label variability of the series by its coefficient of variation."""
        if len(prices) < self.settings.seasonality_min_points:
            return INSUFFICIENT_SEASONALITY

        mean = fmean(prices)
        if mean == 0:
            return LOW_SEASONALITY
        cv = pstdev(prices) / mean

        if cv < LOW_CV:
            return LOW_SEASONALITY
        if cv < MODERATE_CV:
            return MODERATE_SEASONALITY
        return HIGH_SEASONALITY

    def generate(
        self,
        history: PriceHistory,
        predictions: Sequence[ForecastPoint],
        category: str,
        today: date | None = None,
    ) -> list[str]:
        """Build the ordered insight list: trend, next week, festival, data note."""
        today = today or date.today()
        insights = [self._trend_insight(history)]

        near_term = self._near_term_insight(history, predictions)
        if near_term:
            insights.append(near_term)

        if today.month in self.settings.festival_months:
            insights.append(
                f"Festival season ahead! Demand for {category} typically "
                "increases 20-30% during this period."
            )

        data_kind = "simulated market data" if history.is_synthetic else (
            "market data from multiple sources"
        )
        insights.append(f"Based on {len(history)} days of {data_kind}.")
        return insights

    @staticmethod
    def _trend_insight(history: PriceHistory) -> str:
        if history.trend == "up":
            return (
                f"Prices are trending upward (+{history.change_percent:.1f}%). "
                "Consider increasing your prices gradually."
            )
        if history.trend == "down":
            return (
                f"Prices are trending downward ({history.change_percent:.1f}%). "
                "Focus on value-added features or promotions."
            )
        return "Prices are stable. Good time to maintain consistent pricing."

    @staticmethod
    def _near_term_insight(
        history: PriceHistory, predictions: Sequence[ForecastPoint]
    ) -> str | None:
        current = history.current_price
        window = predictions[:NEAR_TERM_DAYS]
        if not window or not current:
            return None

        avg_forecast = fmean(p.predicted_price for p in window)
        change = (avg_forecast - current) / current * 100
        logger.debug("Near-term forecast change: %.2f%%", change)

        if change > NEAR_TERM_THRESHOLD_PCT:
            return (
                f"Next week's forecast shows a potential {change:.1f}% price "
                "increase. Good time to stock up on materials."
            )
        if change < -NEAR_TERM_THRESHOLD_PCT:
            return (
                f"Next week's forecast shows a potential {abs(change):.1f}% price "
                "decrease. Consider promotional campaigns."
            )
        return None
