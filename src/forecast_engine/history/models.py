"""Data models for reconstructed price histories."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Literal

Trend = Literal["up", "down", "stable"]

HISTORY_SOURCE_MARKET = "market"
HISTORY_SOURCE_SYNTHETIC = "synthetic"


@dataclass
class PriceHistory:
    """Ordered daily modal prices for one category.

    dates and prices are parallel; dates ascend. trend/change_percent
    compare the latest week's mean against the earliest week's mean.
    """

    dates: list[date] = field(default_factory=list)
    prices: list[float] = field(default_factory=list)
    trend: Trend = "stable"
    change_percent: float = 0.0
    source: str = HISTORY_SOURCE_MARKET  # market | synthetic

    def __post_init__(self) -> None:
        if len(self.dates) != len(self.prices):
            raise ValueError(
                f"dates ({len(self.dates)}) and prices ({len(self.prices)}) "
                "must have the same length"
            )
        if any(later < earlier for earlier, later in zip(self.dates, self.dates[1:])):
            raise ValueError("dates must be in ascending order")

    def __len__(self) -> int:
        return len(self.prices)

    @property
    def current_price(self) -> float | None:
        return self.prices[-1] if self.prices else None

    @property
    def is_synthetic(self) -> bool:
        return self.source == HISTORY_SOURCE_SYNTHETIC

    def to_dict(self) -> dict:
        return {
            "dates": [d.isoformat() for d in self.dates],
            "prices": list(self.prices),
            "trend": self.trend,
            "changePercent": self.change_percent,
            "source": self.source,
        }
