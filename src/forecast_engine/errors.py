"""Exception types for the forecast engine.

Only InvalidRequestError is meant to reach callers. Source failures are
converted into an Unavailable outcome before they leave the price source.
"""

from __future__ import annotations


class ForecastEngineError(Exception):
    """Base class for forecast engine errors."""


class InvalidRequestError(ForecastEngineError, ValueError):
    """Raised for malformed call arguments (blank category, day count <= 0)."""


class SourceUnavailableError(ForecastEngineError):
    """Raised inside a price source when the provider cannot be queried."""
