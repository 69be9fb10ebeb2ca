"""Geocoding and routing provider abstractions and implementations."""

from __future__ import annotations

import logging

from .base import Coordinate, Geocoder, RouteEstimate, Router
from .fallback import estimate_route, fallback_coordinate, haversine_km

log = logging.getLogger("rideconnect.geo")

__all__ = [
    "Coordinate",
    "Geocoder",
    "RouteEstimate",
    "Router",
    "build_geocoder",
    "build_router",
    "estimate_route",
    "fallback_coordinate",
    "haversine_km",
]


def build_geocoder(api_key: str, timeout: float = 10.0) -> Geocoder | None:
    """Return a LocationIQ geocoder, or None when no key is configured."""
    if not api_key:
        log.info("LocationIQ API key not configured, using landmark table")
        return None
    from .locationiq import LocationIQGeocoder

    return LocationIQGeocoder(api_key, timeout=timeout)


def build_router(api_key: str, timeout: float = 10.0) -> Router | None:
    """Return an OpenRouteService router, or None when no key is configured."""
    if not api_key:
        log.info("OpenRouteService API key not configured, using distance estimation")
        return None
    from .openroute import OpenRouteServiceRouter

    return OpenRouteServiceRouter(api_key, timeout=timeout)
