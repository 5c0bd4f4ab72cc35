"""HTTP client with rate limiting, bounded timeouts and retry."""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from src.common.config import SourceSettings

from .rate_limiter import RateLimiter

logger = logging.getLogger(__name__)

USER_AGENT = "market-forecast-engine/0.1 (+https://api.data.gov.in)"
MIN_TIMEOUT = 0.5


class HTTPClient:
    """HTTP client wrapping a requests session for upstream price feeds.

    Features:
    - Rate limiting (minimum interval between calls)
    - Bounded per-request timeout
    - Retries with exponential backoff on transient failures
    - Overall deadline across all attempts
    """

    def __init__(self, source_settings: SourceSettings | None = None) -> None:
        self.settings = source_settings or SourceSettings()
        self._rate_limiter = RateLimiter(self.settings.rate_limit_rpm)
        self._session = requests.Session()
        self._session.headers.update({
            "User-Agent": USER_AGENT,
            "Accept": "application/json",
        })

    def get(
        self,
        url: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
    ) -> requests.Response:
        """Send a GET request with rate limiting and retries.

        Args:
            url: Target URL.
            params: Query parameters.
            headers: Extra headers (merged with session defaults).

        Returns:
            requests.Response object.

        Raises:
            requests.RequestException: After all retries exhausted or
                the deadline passed.
        """
        attempts = max(self.settings.max_retries, 0) + 1
        deadline = time.monotonic() + self.settings.request_deadline
        last_exc: Exception | None = None
        for attempt in range(attempts):
            self._rate_limiter.wait()
            try:
                resp = self._session.get(
                    url,
                    params=params,
                    headers=headers,
                    timeout=min(
                        self.settings.request_timeout,
                        max(deadline - time.monotonic(), MIN_TIMEOUT),
                    ),
                )
                resp.raise_for_status()
                return resp

            except requests.RequestException as exc:
                last_exc = exc

                # 4xx other than 429 is permanent
                if (
                    isinstance(exc, requests.HTTPError)
                    and exc.response is not None
                    and 400 <= exc.response.status_code < 500
                    and exc.response.status_code != 429
                ):
                    logger.warning("Request failed (4xx, no retry): %s", exc)
                    raise

                if attempt + 1 >= attempts:
                    break

                wait_time = self.settings.backoff_base * (2 ** attempt)
                if time.monotonic() + wait_time >= deadline:
                    logger.warning(
                        "Request failed (attempt %d/%d): %s, deadline reached",
                        attempt + 1, attempts, exc,
                    )
                    break

                logger.warning(
                    "Request failed (attempt %d/%d): %s, retrying in %.1fs",
                    attempt + 1,
                    attempts,
                    exc,
                    wait_time,
                )
                time.sleep(wait_time)

        raise last_exc  # type: ignore[misc]

    def close(self) -> None:
        """Close the underlying session."""
        self._session.close()

    def __enter__(self) -> HTTPClient:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()
