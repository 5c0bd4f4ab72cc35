"""
Market Price Forecasting Engine

Modules:
- price_source: Upstream price feeds (AGMARKNET, in-memory) behind FetchOutcome
- history: Observation cache, synthetic fallback data, price history builder
- forecaster: Trend/seasonality forecasting, insights, CLI
- service: The two operations exposed to the marketplace backend
- common: HTTP client and rate limiter
"""

__version__ = "0.1.0"
