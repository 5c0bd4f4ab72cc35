"""AGMARKNET mandi price feed (data.gov.in).

AGMARKNET publishes daily min/max/modal commodity prices reported by
regulated agricultural markets across India. The open-data API needs an
api key and returns a JSON document with a ``records`` list.

Every failure mode (feed disabled, no key, HTTP error, timeout, malformed
payload) raises from fetch(); PriceSource.get() turns it into Unavailable.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Any

from src.common.config import SourceSettings, get_data_gov_api_key

from ..common.http_client import HTTPClient
from ..errors import SourceUnavailableError
from .base import PriceSource
from .models import PriceObservation

logger = logging.getLogger(__name__)

# Marketplace category → AGMARKNET commodity used as its price proxy
COMMODITY_MAP = {
    "textiles": "cotton",
    "spices": "turmeric",
    "handicrafts": "bamboo",
    "food products": "rice",
    "pottery": "clay",
}
DEFAULT_COMMODITY = "general"

SOURCE_NAME = "AGMARKNET"


def commodity_for(category: str) -> str:
    """Map a marketplace category to the commodity queried upstream."""
    return COMMODITY_MAP.get(category.strip().lower(), DEFAULT_COMMODITY)


class AgmarknetSource(PriceSource):
    """Price source backed by the AGMARKNET open-data API.

    Usage:
        with AgmarknetSource() as source:
            outcome = source.get("spices")
    """

    name = SOURCE_NAME

    def __init__(
        self,
        source_settings: SourceSettings | None = None,
        api_key: str | None = None,
        client: HTTPClient | None = None,
    ) -> None:
        self.settings = source_settings or SourceSettings()
        self._api_key = api_key if api_key is not None else get_data_gov_api_key()
        self._client = client

    @property
    def endpoint(self) -> str:
        return f"{self.settings.base_url.rstrip('/')}/{self.settings.resource}"

    @property
    def client(self) -> HTTPClient:
        if self._client is None:
            self._client = HTTPClient(self.settings)
        return self._client

    def fetch(self, category: str) -> list[PriceObservation]:
        if not self.settings.agmarknet_enabled:
            raise SourceUnavailableError("AGMARKNET feed is not enabled")
        if not self._api_key:
            raise SourceUnavailableError("no data.gov.in API key configured")

        commodity = commodity_for(category)
        params = {
            "api-key": self._api_key,
            "format": "json",
            "filters[Commodity]": commodity,
            "limit": self.settings.record_limit,
        }
        resp = self.client.get(self.endpoint, params=params)
        observations = self.parse_response(resp.json(), category)

        logger.info(
            "AGMARKNET returned %d observations for '%s' (commodity=%s)",
            len(observations), category, commodity,
        )
        return observations

    @classmethod
    def parse_response(cls, data: Any, category: str) -> list[PriceObservation]:
        """Map an AGMARKNET JSON payload into observations.

        Records with no parseable date are skipped; unparseable prices
        are read as 0.
        """
        if not isinstance(data, dict):
            raise ValueError("AGMARKNET payload is not a JSON object")
        records = data.get("records") or []
        if not isinstance(records, list):
            raise ValueError("AGMARKNET 'records' is not a list")

        observations: list[PriceObservation] = []
        for record in records:
            if not isinstance(record, dict):
                continue
            price_date = cls._parse_date(record.get("Price_Date") or "")
            if price_date is None:
                logger.debug("Skipping record without usable date: %r", record)
                continue
            observations.append(
                PriceObservation(
                    category=category,
                    commodity=record.get("Commodity") or "Unknown",
                    min_price=cls._parse_price(record.get("Min_Price")),
                    max_price=cls._parse_price(record.get("Max_Price")),
                    modal_price=cls._parse_price(record.get("Modal_Price")),
                    date=price_date,
                    market=record.get("Market_Name") or "Various Markets",
                    source=SOURCE_NAME,
                )
            )
        return observations

    @staticmethod
    def _parse_price(value: Any) -> float:
        """Parse a price field; negative, non-finite or garbage values read as 0."""
        try:
            price = float(str(value).replace(",", "").strip())
        except (TypeError, ValueError):
            return 0.0
        if not math.isfinite(price) or price < 0:
            return 0.0
        return price

    @staticmethod
    def _parse_date(text: str) -> date | None:
        """Try the date formats the feed is known to use."""
        text = str(text).strip()
        # ISO timestamps: keep the date part
        if "T" in text:
            text = text.split("T", 1)[0]
        for fmt in ("%Y-%m-%d", "%d/%m/%Y", "%d-%m-%Y"):
            try:
                return datetime.strptime(text, fmt).date()
            except ValueError:
                continue
        return None

    def close(self) -> None:
        if self._client is not None:
            self._client.close()
