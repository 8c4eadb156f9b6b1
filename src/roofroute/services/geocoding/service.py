"""Rate-limited address resolution for the bulk geocoding pass.

Outbound queries go out strictly one at a time through a single ``RateLimiter``;
the external service allows roughly one request per second. Buildings the
service cannot place get one postal-code centroid lookup at the end of the pass.
"""

from __future__ import annotations

import logging
import threading
import time
from functools import lru_cache
from typing import Callable, Mapping, Optional, Sequence

import httpx

from ...config import settings
from ...data.zip_centroids import load_zip_centroids, lookup_coordinates
from ...models.domain import Building, Coordinate, GeocodingOutcome
from .address import simplify
from .nominatim_client import GeocodingServiceError, NominatimClient

logger = logging.getLogger(__name__)

SOURCE_NOMINATIM = "nominatim"
SOURCE_ZIP_CENTROID = "zip_centroid"

ProgressCallback = Callable[[int, int], None]


class RateLimiter:
    """Enforces a minimum interval between outbound requests."""

    def __init__(
        self,
        min_interval_seconds: float | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.min_interval = (
            min_interval_seconds if min_interval_seconds is not None else settings.geocode_delay_seconds
        )
        self._clock = clock
        self._sleep = sleep
        self._last: Optional[float] = None

    def wait(self) -> None:
        if self._last is not None:
            lag = self.min_interval - (self._clock() - self._last)
            if lag > 0:
                self._sleep(lag)
        self._last = self._clock()


class GeocodingService:
    def __init__(
        self,
        client: NominatimClient | None = None,
        limiter: RateLimiter | None = None,
        centroid_loader: Callable[[], Mapping[str, Coordinate]] = load_zip_centroids,
    ) -> None:
        self.client = client or NominatimClient()
        self.limiter = limiter or RateLimiter()
        self._centroid_loader = centroid_loader
        self._request_lock = threading.Lock()

    def _query(self, query: str) -> Optional[Coordinate]:
        try:
            with self._request_lock:
                self.limiter.wait()
                return self.client.search(query)
        except (GeocodingServiceError, httpx.HTTPError) as exc:
            logger.warning("Geocoding query failed, treating as no match: %s", exc)
            return None

    def resolve_one(self, address: str, city: str, state: str, zip_code: str) -> Optional[Coordinate]:
        """Geocode one address, retrying once with a simplified street address."""

        locality = f"{city}, {state} {zip_code}".strip()
        coordinate = self._query(f"{address}, {locality}")
        if coordinate is not None:
            return coordinate

        simplified = simplify(address)
        if not simplified or simplified == address:
            return None
        logger.debug("Retrying geocode with simplified address '%s' (was '%s')", simplified, address)
        return self._query(f"{simplified}, {locality}")

    def check_health(self) -> bool:
        """Probe the external service under the same lock and rate limit as geocoding queries."""
        with self._request_lock:
            self.limiter.wait()
            return self.client.check_health()

    def resolve_batch(
        self,
        buildings: Sequence[Building],
        on_progress: Optional[ProgressCallback] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> list[GeocodingOutcome]:
        """Resolve buildings one at a time, in input order.

        Returns one outcome per building, in input order. A set ``cancel_event``
        stops the network phase before the next building; the remaining buildings
        still get the centroid fallback.
        """

        total = len(buildings)
        resolved: list[Optional[Coordinate]] = [None] * total
        sources: list[Optional[str]] = [None] * total

        for index, building in enumerate(buildings):
            if cancel_event is not None and cancel_event.is_set():
                logger.info("Geocoding batch cancelled after %d of %d buildings", index, total)
                break
            coordinate = self.resolve_one(building.address, building.city, building.state, building.zip_code)
            if coordinate is not None:
                resolved[index] = coordinate
                sources[index] = SOURCE_NOMINATIM
            if on_progress is not None:
                try:
                    on_progress(index + 1, total)
                except Exception:
                    logger.warning("Progress callback raised; ignoring", exc_info=True)

        pending = [index for index, coordinate in enumerate(resolved) if coordinate is None]
        centroids: Mapping[str, Coordinate] = {}
        if pending:
            try:
                centroids = self._centroid_loader()
            except Exception:
                logger.exception("Zip centroid table unavailable; %d buildings stay unresolved", len(pending))
            for index in pending:
                coordinate = lookup_coordinates(centroids, buildings[index].zip_code)
                if coordinate is not None:
                    resolved[index] = coordinate
                    sources[index] = SOURCE_ZIP_CENTROID

        outcomes = [
            GeocodingOutcome(
                building_id=building.building_id,
                latitude=coordinate.latitude if coordinate else None,
                longitude=coordinate.longitude if coordinate else None,
                success=coordinate is not None,
                source=source,
            )
            for building, coordinate, source in zip(buildings, resolved, sources)
        ]
        logger.info(
            "Geocoded %d buildings: %d via service, %d via zip centroid, %d unresolved",
            total,
            sources.count(SOURCE_NOMINATIM),
            sources.count(SOURCE_ZIP_CENTROID),
            sources.count(None),
        )
        return outcomes


@lru_cache()
def get_geocoding_service() -> GeocodingService:
    """Process-wide service so every caller shares one rate limiter."""
    return GeocodingService()


def resolve_one(address: str, city: str, state: str, zip_code: str) -> Optional[Coordinate]:
    return get_geocoding_service().resolve_one(address, city, state, zip_code)


def resolve_batch(
    buildings: Sequence[Building],
    on_progress: Optional[ProgressCallback] = None,
    cancel_event: Optional[threading.Event] = None,
) -> list[GeocodingOutcome]:
    return get_geocoding_service().resolve_batch(buildings, on_progress=on_progress, cancel_event=cancel_event)
