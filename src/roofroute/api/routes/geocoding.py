"""Bulk geocoding endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Query, status

from ...schemas.geocoding import (
    GeocodeBatchRequest,
    GeocodeBatchResponse,
    GeocodingOutcomeModel,
    SimplifiedAddress,
)
from ...services.geocoding.address import simplify
from ...services.geocoding.service import get_geocoding_service

router = APIRouter(prefix="/geocoding", tags=["geocoding"])
logger = logging.getLogger(__name__)


@router.post("/batch", response_model=GeocodeBatchResponse, status_code=status.HTTP_200_OK)
def geocode_batch(payload: GeocodeBatchRequest) -> GeocodeBatchResponse:
    """Resolve coordinates for buildings, one request at a time.

    Takes roughly ``delay x requests`` seconds; clients should send modest batches.
    """
    buildings = [target.to_domain() for target in payload.buildings]
    try:
        outcomes = get_geocoding_service().resolve_batch(
            buildings,
            on_progress=lambda done, total: logger.debug("Geocoded %d/%d", done, total),
        )
    except Exception as exc:
        logger.exception(f"Error geocoding buildings: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to geocode buildings: {str(exc)}"
        ) from exc

    resolved = sum(1 for outcome in outcomes if outcome.success)
    return GeocodeBatchResponse(
        outcomes=[GeocodingOutcomeModel.from_domain(outcome) for outcome in outcomes],
        resolved=resolved,
        unresolved=len(outcomes) - resolved,
    )


@router.get("/simplify", response_model=SimplifiedAddress, status_code=status.HTTP_200_OK)
def simplify_address(address: str = Query(..., min_length=1, description="Street address to clean up")) -> SimplifiedAddress:
    return SimplifiedAddress(original=address, simplified=simplify(address))
