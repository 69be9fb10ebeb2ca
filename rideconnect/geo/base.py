"""Abstract base classes for geocoding and routing providers.

The fare estimator only depends on these interfaces. Any provider
(LocationIQ, OpenRouteService, a test fake) implements one of them.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Coordinate:
    """A point in decimal degrees, longitude first."""

    lon: float
    lat: float


@dataclass
class RouteEstimate:
    """Driving duration and distance between two coordinates."""

    duration_seconds: float
    distance_meters: float


class Geocoder(ABC):
    """Resolves free-text addresses to coordinates."""

    @abstractmethod
    async def resolve(self, address: str) -> Coordinate | None:
        """Return the best coordinate for ``address``.

        Args:
            address: Free text as typed by the customer.

        Returns:
            A Coordinate, or None when the provider has no result.
        """


class Router(ABC):
    """Computes a driving route between two coordinates."""

    @abstractmethod
    async def route(
        self, origin: Coordinate, destination: Coordinate
    ) -> RouteEstimate | None:
        """Return duration and distance for a driving route.

        Args:
            origin: Pickup coordinate.
            destination: Drop-off coordinate.

        Returns:
            A RouteEstimate, or None when no route could be computed.
        """
