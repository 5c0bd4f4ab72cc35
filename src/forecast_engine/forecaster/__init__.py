"""Forecaster Module - trend/seasonality forecasting and pricing insights."""

from .engine import (
    ForecastEngine,
    confidence_for,
    linear_trend,
    seasonal_index,
    volatility,
)
from .insights import InsightGenerator
from .models import ForecastPoint, ForecastResult

__all__ = [
    "ForecastEngine",
    "ForecastPoint",
    "ForecastResult",
    "InsightGenerator",
    "confidence_for",
    "linear_trend",
    "seasonal_index",
    "volatility",
]
