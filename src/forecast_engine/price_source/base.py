"""Base class for upstream price sources.

Concrete sources implement fetch(), which is free to raise. Callers use
get(), which turns any failure into an Unavailable outcome so the
forecasting pipeline always has something to degrade to.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping

from .models import Available, FetchOutcome, PriceObservation, Unavailable

logger = logging.getLogger(__name__)


class PriceSource(ABC):
    """Abstract upstream provider of price observations."""

    name = "source"

    @abstractmethod
    def fetch(self, category: str) -> list[PriceObservation]:
        """Fetch raw observations for a category. May raise."""
        ...

    def get(self, category: str) -> FetchOutcome:
        """Fetch observations, reporting failure as a value instead of raising."""
        try:
            observations = self.fetch(category)
        except Exception as exc:
            logger.warning(
                "%s unavailable for '%s': %s", self.name, category, exc
            )
            return Unavailable(reason=f"{type(exc).__name__}: {exc}")

        logger.debug(
            "%s returned %d observations for '%s'",
            self.name, len(observations), category,
        )
        return Available(observations=tuple(observations))

    def close(self) -> None:
        """Release transport resources, if any."""

    def __enter__(self) -> PriceSource:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()


class StaticPriceSource(PriceSource):
    """In-memory source for callers that already hold observations.

    Categories are matched case-insensitively. Unknown categories yield
    an empty (but available) result.
    """

    name = "static"

    def __init__(
        self,
        observations: Mapping[str, Iterable[PriceObservation]] | None = None,
    ) -> None:
        self._observations: dict[str, list[PriceObservation]] = {
            key.strip().lower(): list(values)
            for key, values in (observations or {}).items()
        }

    def add(self, observation: PriceObservation) -> None:
        key = observation.category.strip().lower()
        self._observations.setdefault(key, []).append(observation)

    def fetch(self, category: str) -> list[PriceObservation]:
        return list(self._observations.get(category.strip().lower(), []))
