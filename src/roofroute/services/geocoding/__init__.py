"""Address resolution services."""

from .address import simplify
from .nominatim_client import GeocodingServiceError, NominatimClient
from .service import GeocodingService, RateLimiter, resolve_batch, resolve_one

__all__ = [
    "simplify",
    "NominatimClient",
    "GeocodingServiceError",
    "GeocodingService",
    "RateLimiter",
    "resolve_one",
    "resolve_batch",
]
