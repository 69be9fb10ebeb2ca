"""Fare estimation from two free-text addresses.

Resolves both addresses to coordinates, obtains a driving route, and
applies the fare formula. Every provider has a local fallback:

  geocoder missing / no result / error  -> landmark table
  router missing / no route / error     -> haversine estimate

so a quote is always produced. The result says which path was taken:
``Ok`` when both providers answered, ``Degraded`` when any fallback was
used, ``Failed`` only when something unexpected broke the pipeline, in
which case a flat fallback price is still returned.
"""

from __future__ import annotations

import asyncio
import logging

from rideconnect.geo import (
    Coordinate,
    Geocoder,
    RouteEstimate,
    Router,
    estimate_route,
    fallback_coordinate,
)

from .models import Degraded, Failed, FareQuote, Ok, PricingError, QuoteResult
from .rates import DEFAULT_POLICY, PricingPolicy, price

log = logging.getLogger("rideconnect.pricing")

METERS_TO_MILES = 0.000621371


class FareEstimator:
    """Produces fare quotes using optional geocoding and routing providers."""

    def __init__(
        self,
        geocoder: Geocoder | None = None,
        router: Router | None = None,
        policy: PricingPolicy = DEFAULT_POLICY,
    ) -> None:
        self._geocoder = geocoder
        self._router = router
        self._policy = policy

    @property
    def policy(self) -> PricingPolicy:
        return self._policy

    async def quote(
        self,
        pickup_address: str,
        dropoff_address: str,
        is_airport_route: bool,
        passenger_count: int = 1,
    ) -> QuoteResult:
        """Price a ride. Never raises."""
        if not pickup_address.strip() or not dropoff_address.strip():
            return self._failed(
                "Pickup and drop-off addresses are required", is_airport_route
            )

        try:
            reasons: list[str] = []

            (pickup, pickup_reason), (dropoff, dropoff_reason) = await asyncio.gather(
                self._resolve(pickup_address),
                self._resolve(dropoff_address),
            )
            for reason in (pickup_reason, dropoff_reason):
                if reason:
                    reasons.append(reason)

            route, route_reason = await self._route(pickup, dropoff)
            if route_reason:
                reasons.append(route_reason)

            duration_hours = route.duration_seconds / 3600
            total, breakdown = price(
                duration_hours, is_airport_route, passenger_count, self._policy
            )
            quote = FareQuote(
                total_price=total,
                duration_hours=duration_hours,
                distance_miles=route.distance_meters * METERS_TO_MILES,
                is_airport_route=is_airport_route,
                rate_type="airport" if is_airport_route else "standard",
                passenger_count=passenger_count,
                breakdown=breakdown,
            )
        except Exception:
            log.exception("Pricing pipeline failed")
            return self._failed(
                "Pricing service temporarily unavailable", is_airport_route
            )

        if reasons:
            log.info("Quote %.2f computed with fallbacks: %s", quote.total_price, reasons)
            return Degraded(quote=quote, reasons=reasons)
        return Ok(quote=quote)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    async def _resolve(self, address: str) -> tuple[Coordinate, str | None]:
        """Geocode one address, falling back to the landmark table."""
        if self._geocoder is None:
            return fallback_coordinate(address), "geocoder not configured"

        try:
            coordinate = await self._geocoder.resolve(address)
        except Exception as e:
            log.warning("Geocoding failed, using landmark table: %s", e)
            return fallback_coordinate(address), f"geocoding error: {e}"

        if coordinate is None:
            return fallback_coordinate(address), "address not found by geocoder"
        return coordinate, None

    async def _route(
        self, origin: Coordinate, destination: Coordinate
    ) -> tuple[RouteEstimate, str | None]:
        """Fetch a driving route, falling back to the local estimate."""
        if self._router is None:
            return estimate_route(origin, destination), "router not configured"

        try:
            route = await self._router.route(origin, destination)
        except Exception as e:
            log.warning("Routing failed, using distance estimation: %s", e)
            return estimate_route(origin, destination), f"routing error: {e}"

        if route is None:
            return estimate_route(origin, destination), "no route from router"
        return route, None

    def _failed(self, message: str, is_airport_route: bool) -> Failed:
        return Failed(
            error=PricingError(
                message=message,
                fallback_price=self._policy.fallback_price(is_airport_route),
            )
        )
