"""Client for the Uber price estimates API."""

import logging
from typing import List, Optional

import requests

from app.cache import QuoteCache
from app.models import Location

logger = logging.getLogger(__name__)


class UberAPIError(Exception):
    """Raised when the Uber API cannot provide a usable price quote."""


class UberPriceClient:
    """
    Fetches raw price quotes from ``/v1.2/estimates/price``.

    Every failure (transport error, timeout, non-2xx status, malformed or
    empty payload) is raised as UberAPIError so callers only need to
    handle one exception type.
    """

    ESTIMATES_PATH = "/v1.2/estimates/price"

    def __init__(
        self,
        server_token: str,
        base_url: str = "https://api.uber.com",
        timeout: float = 5.0,
        cache: Optional[QuoteCache] = None,
        session: Optional[requests.Session] = None,
    ):
        self.server_token = server_token
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.cache = cache
        self.session = session or requests.Session()

    def get_prices(self, pickup: Location, dropoff: Location) -> List[dict]:
        """
        Get the list of price entries for a trip.

        Returns:
            The ``prices`` array of the API response, one dict per product
        """
        cache_key = None
        if self.cache is not None:
            cache_key = self.cache.make_key(
                pickup.latitude, pickup.longitude, dropoff.latitude, dropoff.longitude
            )
            cached = self.cache.get(cache_key)
            if cached is not None:
                return cached

        params = {
            "start_latitude": pickup.latitude,
            "start_longitude": pickup.longitude,
            "end_latitude": dropoff.latitude,
            "end_longitude": dropoff.longitude,
        }
        headers = {
            "Authorization": f"Token {self.server_token}",
            "Accept-Language": "en_US",
            "Content-Type": "application/json",
        }

        try:
            response = self.session.get(
                self.base_url + self.ESTIMATES_PATH,
                params=params,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.Timeout as e:
            raise UberAPIError(f"Uber API timed out after {self.timeout}s") from e
        except requests.RequestException as e:
            raise UberAPIError(f"Uber API request failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise UberAPIError(f"Uber API error: {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise UberAPIError("Uber API returned invalid JSON") from e

        prices = payload.get("prices") if isinstance(payload, dict) else None
        if not isinstance(prices, list) or not prices:
            raise UberAPIError("Uber API response has no prices")
        if not all(isinstance(item, dict) for item in prices):
            raise UberAPIError("Uber API response has malformed price entries")

        if cache_key is not None:
            self.cache.set(cache_key, prices)

        return prices
