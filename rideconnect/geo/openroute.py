"""OpenRouteService routing provider."""

from __future__ import annotations

import logging
import math

import httpx

from .base import Coordinate, RouteEstimate, Router

logger = logging.getLogger(__name__)

DIRECTIONS_URL = "https://api.openrouteservice.org/v2/directions/driving-car"


class OpenRouteServiceRouter(Router):
    """Router backed by the OpenRouteService driving-car directions API."""

    def __init__(
        self,
        api_key: str,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not api_key:
            raise ValueError("OpenRouteService API key must be provided.")
        self._api_key = api_key
        self._timeout = timeout
        self._transport = transport

    async def route(
        self, origin: Coordinate, destination: Coordinate
    ) -> RouteEstimate | None:
        """POST both coordinates and read the first route's summary."""
        body = {
            "coordinates": [
                [origin.lon, origin.lat],
                [destination.lon, destination.lat],
            ],
            "format": "json",
        }
        async with httpx.AsyncClient(
            timeout=self._timeout, transport=self._transport
        ) as client:
            resp = await client.post(
                DIRECTIONS_URL,
                json=body,
                headers={"Authorization": self._api_key},
            )

        if resp.status_code >= 400:
            logger.warning("OpenRouteService returned status %d", resp.status_code)
            return None

        routes = resp.json().get("routes") or []
        if not routes:
            logger.warning("OpenRouteService found no route")
            return None

        summary = routes[0].get("summary", {})
        try:
            duration = float(summary.get("duration", 0.0))
            distance = float(summary.get("distance", 0.0))
        except (TypeError, ValueError):
            logger.warning("Could not parse OpenRouteService summary")
            return None

        finite = math.isfinite(duration) and math.isfinite(distance)
        if not finite or duration < 0 or distance < 0:
            logger.warning("OpenRouteService returned an invalid route summary")
            return None

        return RouteEstimate(duration_seconds=duration, distance_meters=distance)
