"""Local fallbacks used when no geocoding or routing provider answers.

Both functions are deterministic and never fail: an unknown address maps
to the Las Vegas city centre, and a route is always estimated from the
straight-line distance.
"""

from __future__ import annotations

import math

from .base import Coordinate, RouteEstimate

EARTH_RADIUS_KM = 6371.0
ROAD_DISTANCE_FACTOR = 1.3

# Average speeds by road distance (km/h)
HIGHWAY_SPEED_KMH = 70.0
URBAN_SPEED_KMH = 35.0
MIXED_SPEED_KMH = 50.0
HIGHWAY_THRESHOLD_KM = 100.0
URBAN_THRESHOLD_KM = 20.0

CITY_CENTER = Coordinate(lon=-115.1398, lat=36.1699)

_AIRPORT = Coordinate(lon=-115.1522, lat=36.0840)
_STRIP = Coordinate(lon=-115.1725, lat=36.1147)
_DOWNTOWN = Coordinate(lon=-115.1446, lat=36.1699)

# Checked in order, first substring match wins. More specific names must
# come before the names they contain ("north las vegas" before "las vegas").
KNOWN_LOCATIONS: list[tuple[str, Coordinate]] = [
    # Airports
    ("harry reid", _AIRPORT),
    ("mccarran", _AIRPORT),
    ("las vegas airport", _AIRPORT),
    ("henderson executive", Coordinate(lon=-115.1341, lat=35.9728)),
    ("north las vegas", Coordinate(lon=-115.1958, lat=36.2136)),
    # Strip
    ("las vegas strip", _STRIP),
    ("strip", _STRIP),
    ("bellagio", Coordinate(lon=-115.1745, lat=36.1126)),
    ("caesars", Coordinate(lon=-115.1745, lat=36.1162)),
    ("mgm", Coordinate(lon=-115.1677, lat=36.1021)),
    ("venetian", Coordinate(lon=-115.1710, lat=36.1212)),
    ("luxor", Coordinate(lon=-115.1761, lat=36.0955)),
    # Downtown
    ("downtown las vegas", _DOWNTOWN),
    ("fremont street", _DOWNTOWN),
    ("las vegas", CITY_CENTER),
]


def fallback_coordinate(address: str) -> Coordinate:
    """Approximate a coordinate from known landmark names in ``address``."""
    lowered = address.lower()
    for name, coordinate in KNOWN_LOCATIONS:
        if name in lowered:
            return coordinate
    return CITY_CENTER


def haversine_km(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance between two coordinates in kilometres."""
    d_lat = math.radians(b.lat - a.lat)
    d_lon = math.radians(b.lon - a.lon)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(a.lat))
        * math.cos(math.radians(b.lat))
        * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def estimate_route(origin: Coordinate, destination: Coordinate) -> RouteEstimate:
    """Estimate driving duration and distance from straight-line distance."""
    driving_km = haversine_km(origin, destination) * ROAD_DISTANCE_FACTOR

    if driving_km > HIGHWAY_THRESHOLD_KM:
        speed = HIGHWAY_SPEED_KMH
    elif driving_km < URBAN_THRESHOLD_KM:
        speed = URBAN_SPEED_KMH
    else:
        speed = MIXED_SPEED_KMH

    return RouteEstimate(
        duration_seconds=driving_km / speed * 3600,
        distance_meters=driving_km * 1000,
    )
