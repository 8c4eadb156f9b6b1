"""HTTP client for the external address search service (Nominatim API)."""

from __future__ import annotations

import logging
from typing import Optional

import httpx

from ...config import settings
from ...models.domain import Coordinate

logger = logging.getLogger(__name__)


class GeocodingServiceError(RuntimeError):
    """Raised when the geocoding service cannot be reached or returns an unusable payload."""


class NominatimClient:
    def __init__(
        self,
        base_url: str | None = None,
        user_agent: str | None = None,
        country_codes: str | None = None,
        timeout: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.nominatim_url
        if not self.base_url:
            raise ValueError("Geocoding service URL is not configured.")
        self.user_agent = user_agent or settings.geocoder_user_agent
        self.country_codes = country_codes if country_codes is not None else settings.geocoder_country_codes
        self.timeout = timeout if timeout is not None else settings.geocode_timeout_seconds
        self._client = httpx.Client(
            timeout=httpx.Timeout(self.timeout, connect=5.0),
            headers={"User-Agent": self.user_agent},
            transport=transport,
        )

    def __enter__(self) -> "NominatimClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def close(self) -> None:
        self._client.close()

    def search(self, query: str) -> Optional[Coordinate]:
        """Return the best match for a free-form address, or None when nothing matched."""

        params = {"q": query, "format": "json", "limit": 1}
        if self.country_codes:
            params["countrycodes"] = self.country_codes

        try:
            response = self._client.get(self.base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as exc:
            raise GeocodingServiceError(
                f"Geocoding service returned HTTP {exc.response.status_code} for '{query}'"
            ) from exc
        except httpx.HTTPError as exc:
            raise GeocodingServiceError(f"Geocoding request failed for '{query}': {exc}") from exc
        except ValueError as exc:
            raise GeocodingServiceError(f"Geocoding service returned invalid JSON for '{query}'") from exc

        if not isinstance(data, list):
            raise GeocodingServiceError(f"Unexpected geocoding payload for '{query}': {type(data).__name__}")
        if not data:
            return None

        best = data[0]
        try:
            return Coordinate(latitude=float(best["lat"]), longitude=float(best["lon"]))
        except (KeyError, TypeError, ValueError) as exc:
            raise GeocodingServiceError(f"Geocoding match for '{query}' has no usable coordinate") from exc

    def check_health(self) -> bool:
        """Check the service answers a trivial search. Never raises."""
        try:
            response = self._client.get(
                self.base_url,
                params={"q": "Boston, MA", "format": "json", "limit": 1},
                timeout=5.0,
            )
            response.raise_for_status()
            return isinstance(response.json(), list)
        except httpx.HTTPError:
            return False
        except ValueError:
            return False
