"""
Provider Search Orchestrator

Finds clinics, doctors, gyms or coaches:
1. Optionally acquire the device position (bounded wait, never fatal)
2. Ask the provider lookup capability, with or without a coordinate
3. Surface lookup failures through the error normalizer

Searches are never cancelled. By default whichever search completes last
owns the displayed results; with discard_stale only the newest search may
write them.
"""

from typing import Protocol

from common.config import DISCARD_STALE_RESULTS, GEOLOCATION_TIMEOUT_SECONDS
from common.geolocation import GeolocationError, Geolocator, acquire_position
from common.logging_config import get_logger
from common.metrics import geolocation_fallbacks, searches
from common.session import SessionContext
from common.types import GeoCoordinate, ProviderCategory, ProviderSearchResult, SearchMethod

logger = get_logger("provider_search")


class ProviderLookup(Protocol):
    async def provider_lookup(
        self,
        query: str,
        category: str,
        coordinate: GeoCoordinate | None,
        locale: str,
    ) -> list[ProviderSearchResult]: ...


class ProviderSearchOrchestrator:
    def __init__(
        self,
        ai: ProviderLookup,
        geolocator: Geolocator,
        session: SessionContext,
        geolocation_timeout: float = GEOLOCATION_TIMEOUT_SECONDS,
        discard_stale: bool = DISCARD_STALE_RESULTS,
    ):
        self.ai = ai
        self.geolocator = geolocator
        self.session = session
        self.geolocation_timeout = geolocation_timeout
        self.discard_stale = discard_stale

        self.results: list[ProviderSearchResult] | None = None
        self.is_loading = False
        self._generation = 0

    def _is_current(self, generation: int) -> bool:
        return not self.discard_stale or generation == self._generation

    async def _locate(self) -> GeoCoordinate | None:
        """Get the device position, or None when it is unavailable for any reason."""
        try:
            return await acquire_position(self.geolocator, self.geolocation_timeout)
        except GeolocationError as e:
            logger.warning(f"Geolocation error (Code: {e.code}): {e.message}")
            self.session.notifications.info(
                f"Geolocation failed: {e.message}. Searching without location."
            )
        except Exception as e:
            logger.error(f"Geolocation failed unexpectedly: {e}")
            self.session.notifications.error("Could not get your location.")
        geolocation_fallbacks.add(1)
        return None

    async def search(
        self,
        method: SearchMethod,
        query: str,
        category: ProviderCategory,
    ) -> list[ProviderSearchResult] | None:
        """
        Run one provider search and publish its results.

        Args:
            method: "geo" to include the device position, "text" to search by query only
            query: Free-text request, e.g. "laser clinic in Dubai Marina"
            category: One of clinics, doctors, gyms, coaches

        Returns:
            The providers found, or None if the lookup failed
        """
        self._generation += 1
        generation = self._generation

        self.is_loading = True
        self.results = None
        searches.add(1, attributes={"workflow": "provider", "method": method})
        logger.info(f"Provider search #{generation}: method={method}, category={category}")

        try:
            coordinate = None
            if method == "geo":
                coordinate = await self._locate()

            results = await self.ai.provider_lookup(query, category, coordinate, self.session.locale)
            if self._is_current(generation):
                self.results = results
                logger.info(f"Provider search #{generation}: {len(results)} providers")
            else:
                logger.info(f"Provider search #{generation} superseded, result dropped")
            return results
        except Exception as e:
            # Surfaced even when superseded so a quota error still trips the breaker
            self.session.errors.handle(e)
            return None
        finally:
            if self._is_current(generation):
                self.is_loading = False
