"""Token-bucket rate limiter for upstream price feed requests."""

from __future__ import annotations

import threading
import time


class RateLimiter:
    """Thread-safe minimum-interval limiter.

    Args:
        requests_per_minute: Maximum requests allowed per minute.
            Zero or negative disables limiting.
    """

    def __init__(self, requests_per_minute: int = 60) -> None:
        self._interval = (
            60.0 / requests_per_minute if requests_per_minute > 0 else 0.0
        )
        self._next_allowed: float = 0.0
        self._lock = threading.Lock()

    @property
    def interval(self) -> float:
        return self._interval

    def wait(self) -> float:
        """Block until the next request is allowed.

        Returns:
            Seconds spent sleeping.
        """
        if not self._interval:
            return 0.0
        with self._lock:
            now = time.monotonic()
            delay = max(0.0, self._next_allowed - now)
            if delay:
                time.sleep(delay)
            self._next_allowed = max(now, self._next_allowed) + self._interval
        return delay
