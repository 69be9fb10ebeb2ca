"""LocationIQ geocoding provider.

Forward-geocodes free-text addresses with the LocationIQ search API.
The API key is read from ``LOCATIONIQ_API_KEY`` via settings.
"""

from __future__ import annotations

import logging
import math

import httpx

from .base import Coordinate, Geocoder

logger = logging.getLogger(__name__)

SEARCH_URL = "https://us1.locationiq.com/v1/search"


class LocationIQGeocoder(Geocoder):
    """Geocoder backed by the LocationIQ search endpoint."""

    def __init__(
        self,
        api_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("LocationIQ API key must be provided.")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    async def resolve(self, address: str) -> Coordinate | None:
        """Return the first search hit for ``address``."""
        params = {
            "key": self._api_key,
            "q": address,
            "format": "json",
            "limit": 1,
        }
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            resp = await client.get(
                SEARCH_URL, params=params, headers={"Accept": "application/json"}
            )

        if resp.status_code >= 400:
            logger.warning("LocationIQ returned status %d", resp.status_code)
            return None

        data = resp.json()
        if not data:
            return None

        try:
            lat = float(data[0]["lat"])
            lon = float(data[0]["lon"])
        except (KeyError, IndexError, TypeError, ValueError):
            logger.warning("Could not parse LocationIQ response")
            return None

        if not (math.isfinite(lat) and math.isfinite(lon)):
            logger.warning("LocationIQ returned non-finite coordinates")
            return None

        return Coordinate(lon=lon, lat=lat)
