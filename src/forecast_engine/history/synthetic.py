"""Synthetic price history generator.

Used when the upstream feed is unavailable or too sparse. Values are
anchored to a per-category base price and shaped as

    base * (1 + variation + seasonality + drift)

where variation is uniform noise, seasonality is one sine hump across a
30-day window and drift grows linearly with distance from today.

Output is random unless a seeded ``random.Random`` (or a seed) is passed
in. Unseeded nondeterminism is accepted behaviour.
"""

from __future__ import annotations

import logging
import math
import random
from datetime import date, timedelta

from src.common.config import SyntheticSettings

from ..common.numeric import round_half_up
from ..price_source.models import SIMULATED_SOURCE, PriceObservation

logger = logging.getLogger(__name__)

SEASONAL_WINDOW_DAYS = 30
SIMULATED_MARKET = "Multiple Markets"


class SyntheticGenerator:
    """Generate plausible daily observations for a category.

    Usage:
        gen = SyntheticGenerator(seed=42)
        obs = gen.observations("spices", 30)
    """

    def __init__(
        self,
        synthetic_settings: SyntheticSettings | None = None,
        rng: random.Random | None = None,
        seed: int | None = None,
    ) -> None:
        self.settings = synthetic_settings or SyntheticSettings()
        self._rng = rng or random.Random(seed)
        self._base_prices = {
            key.strip().lower(): value
            for key, value in self.settings.base_prices.items()
        }

    def base_price(self, category: str) -> float:
        """Reference price for a category (default for unknown ones)."""
        return self._base_prices.get(
            category.strip().lower(), self.settings.default_base_price
        )

    def price_at(self, base: float, days_before_today: int) -> int:
        """One synthetic modal price, ``days_before_today`` days in the past."""
        i = days_before_today
        variation = self._rng.uniform(-self.settings.variation, self.settings.variation)
        seasonality = (
            math.sin(i / SEASONAL_WINDOW_DAYS * math.pi)
            * self.settings.seasonal_amplitude
        )
        drift = i * self.settings.drift
        return max(0, round_half_up(base * (1 + variation + seasonality + drift)))

    def observations(
        self,
        category: str,
        count: int,
        today: date | None = None,
    ) -> list[PriceObservation]:
        """Generate ``count`` daily observations ending today, oldest first."""
        if count <= 0:
            return []
        today = today or date.today()
        base = self.base_price(category)

        observations: list[PriceObservation] = []
        for i in range(count - 1, -1, -1):
            modal = self.price_at(base, i)
            observations.append(
                PriceObservation(
                    category=category,
                    commodity=category,
                    min_price=round_half_up(modal * 0.9),
                    max_price=round_half_up(modal * 1.1),
                    modal_price=modal,
                    date=today - timedelta(days=i),
                    market=SIMULATED_MARKET,
                    source=SIMULATED_SOURCE,
                )
            )

        logger.info(
            "Generated %d synthetic observations for '%s' (base=%s)",
            count, category, base,
        )
        return observations
