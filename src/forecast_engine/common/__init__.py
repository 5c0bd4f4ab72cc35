"""Transport utilities shared by forecast engine price sources."""

from .http_client import HTTPClient
from .rate_limiter import RateLimiter

__all__ = ["HTTPClient", "RateLimiter"]
