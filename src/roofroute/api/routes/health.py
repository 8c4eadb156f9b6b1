"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


def _get_geocoding_service():
    """Lazy import to avoid startup failures."""
    from ...services.geocoding.service import get_geocoding_service
    return get_geocoding_service()


@router.get("/health/geocoder", status_code=status.HTTP_200_OK)
def health_geocoder() -> dict:
    """Check the external geocoding service answers."""
    try:
        service = _get_geocoding_service()
        return {"service": "geocoder", "healthy": service.check_health()}
    except Exception as e:
        return {"service": "geocoder", "healthy": False, "error": str(e)}


@router.get("/health/centroids", status_code=status.HTTP_200_OK)
def health_centroids() -> dict:
    """Report whether the postal code centroid table loads."""
    from ...data.zip_centroids import load_zip_centroids

    try:
        return {"loaded": True, "zip_codes": len(load_zip_centroids())}
    except (FileNotFoundError, ValueError) as e:
        return {"loaded": False, "error": str(e)}
