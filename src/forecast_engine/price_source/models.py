"""Data models for upstream price observations."""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import date
from typing import Union

SIMULATED_SOURCE = "Simulated Data"


@dataclass(frozen=True)
class PriceObservation:
    """A single reported price for a category on a date.

    Maps to the feed contract: { minPrice, maxPrice, modalPrice, date, market, source }
    """

    category: str
    min_price: float
    max_price: float
    modal_price: float  # most frequently reported price that day
    date: date
    market: str = "Various Markets"
    source: str = "AGMARKNET"
    commodity: str = ""

    def __post_init__(self) -> None:
        for name in ("min_price", "max_price", "modal_price"):
            value = getattr(self, name)
            if not math.isfinite(value) or value < 0:
                raise ValueError(f"{name} must be a finite non-negative number")

    @property
    def is_simulated(self) -> bool:
        return self.source == SIMULATED_SOURCE

    def to_dict(self) -> dict:
        return {
            "commodity": self.commodity,
            "category": self.category,
            "minPrice": self.min_price,
            "maxPrice": self.max_price,
            "modalPrice": self.modal_price,
            "date": self.date.isoformat(),
            "market": self.market,
            "source": self.source,
        }


@dataclass(frozen=True)
class Available:
    """Provider answered with observations (possibly too few to use)."""

    observations: tuple[PriceObservation, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Unavailable:
    """Provider could not be queried; reason is for logs only."""

    reason: str = ""


FetchOutcome = Union[Available, Unavailable]
