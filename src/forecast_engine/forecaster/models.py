"""Data models for price forecasts."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from statistics import fmean
from typing import Literal

from ..history.models import Trend

Confidence = Literal["high", "medium", "low"]


@dataclass(frozen=True)
class ForecastPoint:
    """Predicted price for one future day with its confidence band.

    Maps to the API contract: { date, predictedPrice, confidence, lowerBound, upperBound }
    """

    date: date
    predicted_price: int
    confidence: Confidence
    lower_bound: int
    upper_bound: int

    def __post_init__(self) -> None:
        if self.lower_bound < 0:
            raise ValueError("lower_bound must be non-negative")
        if not self.lower_bound <= self.predicted_price <= self.upper_bound:
            raise ValueError(
                f"band [{self.lower_bound}, {self.upper_bound}] does not "
                f"contain predicted price {self.predicted_price}"
            )

    @property
    def width(self) -> int:
        return self.upper_bound - self.lower_bound

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "predictedPrice": self.predicted_price,
            "confidence": self.confidence,
            "lowerBound": self.lower_bound,
            "upperBound": self.upper_bound,
        }


@dataclass
class ForecastResult:
    """Day-by-day forecast for a category plus derived commentary."""

    predictions: list[ForecastPoint]
    current_price: float
    trend: Trend
    seasonality: str
    insights: list[str] = field(default_factory=list)
    category: str = ""
    simulated: bool = False  # True when produced by the fallback forecast

    @property
    def horizon_days(self) -> int:
        return len(self.predictions)

    def average_prediction(self, days: int = 7) -> float | None:
        """Mean predicted price over the first ``days`` predictions."""
        window = self.predictions[:days]
        if not window:
            return None
        return fmean(p.predicted_price for p in window)

    def to_dict(self) -> dict:
        return {
            "category": self.category,
            "predictions": [p.to_dict() for p in self.predictions],
            "currentPrice": self.current_price,
            "trend": self.trend,
            "seasonality": self.seasonality,
            "insights": list(self.insights),
            "simulated": self.simulated,
        }
