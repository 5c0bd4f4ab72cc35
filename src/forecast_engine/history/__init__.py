"""History Module - cached observations, synthetic fallback, PriceHistory."""

from .builder import HistoryBuilder, compute_trend, shared_cache
from .cache import ExpiringCache
from .models import PriceHistory
from .synthetic import SyntheticGenerator

__all__ = [
    "ExpiringCache",
    "HistoryBuilder",
    "PriceHistory",
    "SyntheticGenerator",
    "compute_trend",
    "shared_cache",
]
