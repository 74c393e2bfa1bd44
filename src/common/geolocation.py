"""
Geolocation service for the provider search.

Acquiring a position is optional: callers bound it with a timeout and fall
back to an unlocated search on any failure. The default geolocator resolves
a configured home city through the local lookup table in config.py and
caches results to avoid repeated string parsing.
"""

import asyncio
from typing import Protocol

from common.config import CITY_COORDINATES, GEOLOCATION_TIMEOUT_SECONDS, HOME_CITY
from common.types import GeoCoordinate

# Error codes follow the browser Geolocation API
PERMISSION_DENIED = 1
POSITION_UNAVAILABLE = 2
TIMEOUT = 3


class GeolocationError(Exception):
    """Raised when a position cannot be obtained."""

    def __init__(self, code: int, message: str):
        super().__init__(message)
        self.code = code
        self.message = message


class Geolocator(Protocol):
    async def get_current_position(self) -> GeoCoordinate: ...


# Module-level cache for runtime lookups
_geocode_cache: dict[str, GeoCoordinate | None] = {}


def geocode(location: str) -> GeoCoordinate | None:
    """
    Resolve location string to coordinates.

    Uses local CITY_COORDINATES lookup table from config.
    Caches results to avoid repeated string parsing.
    Falls back to None if city not in lookup table.

    Args:
        location: City name, optionally followed by ", country"

    Returns:
        Coordinate dict with lat/lon, or None if not found
    """
    if not location:
        return None

    # Only the city part is looked up ("Dubai, UAE" -> "dubai")
    normalized = location.split(",")[0].strip().lower()

    if normalized in _geocode_cache:
        return _geocode_cache[normalized]

    coords = CITY_COORDINATES.get(normalized)

    if coords is not None:
        result: GeoCoordinate = {"lat": coords[0], "lon": coords[1]}
        _geocode_cache[normalized] = result
        return result

    # Cache the miss as well to avoid repeated lookups
    _geocode_cache[normalized] = None
    return None


def clear_cache() -> None:
    """Clear the geocode cache."""
    _geocode_cache.clear()


class CityGeolocator:
    """Reports the position of a configured city."""

    def __init__(self, city: str | None = HOME_CITY, permitted: bool = True):
        self.city = city
        self.permitted = permitted

    async def get_current_position(self) -> GeoCoordinate:
        if not self.permitted:
            raise GeolocationError(PERMISSION_DENIED, "User denied Geolocation")
        coordinate = geocode(self.city) if self.city else None
        if coordinate is None:
            raise GeolocationError(POSITION_UNAVAILABLE, "Position unavailable")
        return dict(coordinate)


async def acquire_position(
    geolocator: Geolocator,
    timeout: float = GEOLOCATION_TIMEOUT_SECONDS,
) -> GeoCoordinate:
    """
    Ask the geolocator for a position, bounded by `timeout` seconds.

    Raises:
        GeolocationError: code TIMEOUT when the bound is exceeded, otherwise
            whatever the geolocator reported.
    """
    try:
        return await asyncio.wait_for(geolocator.get_current_position(), timeout)
    except asyncio.TimeoutError as e:
        raise GeolocationError(TIMEOUT, "Timeout expired") from e
