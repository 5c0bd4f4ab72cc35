"""Price Source Module - upstream price feeds behind an explicit fetch outcome."""

from .agmarknet import AgmarknetSource, commodity_for
from .base import PriceSource, StaticPriceSource
from .models import (
    SIMULATED_SOURCE,
    Available,
    FetchOutcome,
    PriceObservation,
    Unavailable,
)

__all__ = [
    "AgmarknetSource",
    "Available",
    "FetchOutcome",
    "PriceObservation",
    "PriceSource",
    "SIMULATED_SOURCE",
    "StaticPriceSource",
    "Unavailable",
    "commodity_for",
]
