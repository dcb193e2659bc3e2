# feeds/coingecko.py
"""
Token/USD price feed, CoinGecko "simple price" convention.

    GET <url>?ids=<token>&vs_currencies=usd  ->  {"<token>": {"usd": <number>}}

Any server answering with that shape can stand in via DATA_SOURCE_URL.
"""

import logging
import math

import requests

from arkham_oracle.errors import PriceNotFoundError, PriceSourceError

DEFAULT_DATA_SOURCE_URL = "https://api.coingecko.com/api/v3/simple/price"

log = logging.getLogger(__name__)


class CoinGeckoPriceSource:
    """Resolve a token id to a USD float. One upstream call per lookup, no caching."""

    def __init__(self, url=None, session=None, timeout=None):
        self.url = url or DEFAULT_DATA_SOURCE_URL
        self.session = session or requests.Session()
        self.timeout = timeout

    def get_usd_price(self, token: str) -> float:
        params = {"ids": token, "vs_currencies": "usd"}
        try:
            r = self.session.get(self.url, params=params, timeout=self.timeout)
        except requests.RequestException as e:
            raise PriceSourceError(f"failed to fetch price data from {self.url}: {e}") from e

        if r.status_code != 200:
            raise PriceSourceError(f"price source returned non-200 status: {r.status_code}")

        try:
            data = r.json()
        except ValueError as e:
            raise PriceSourceError(f"failed to decode price data: {e}") from e

        if not isinstance(data, dict):
            raise PriceSourceError("price data is not a JSON object")

        entry = data.get(token)
        if entry is None:
            raise PriceNotFoundError(f"Price for token '{token}' not found")
        if not isinstance(entry, dict) or "usd" not in entry:
            raise PriceSourceError(f"price data for '{token}' has no usd quote")

        price = entry["usd"]
        if isinstance(price, bool) or not isinstance(price, (int, float)):
            raise PriceSourceError(f"usd quote for '{token}' is not a number: {price!r}")
        price = float(price)
        if not math.isfinite(price) or price < 0:
            raise PriceSourceError(f"usd quote for '{token}' is out of range: {price!r}")

        # Upstream reports unknown ids as 0 as well; a real zero price is not attestable.
        if price == 0:
            raise PriceNotFoundError(f"Price for token '{token}' not found (quoted at zero)")

        log.debug("price source %s: %s = %s USD", self.url, token, price)
        return price
