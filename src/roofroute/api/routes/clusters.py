"""Route clustering endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Response, status

from ...models.domain import ClusteringResult
from ...schemas.clustering import ClusteringRequest, ClusteringResponse
from ...services.clustering.service import generate_clusters
from ...services.outputs.formatter import clustering_result_to_csv

router = APIRouter(prefix="/clusters", tags=["clusters"])
logger = logging.getLogger(__name__)


def _run(payload: ClusteringRequest) -> ClusteringResult:
    try:
        return generate_clusters(
            [building.to_domain() for building in payload.buildings],
            payload.buildings_per_day,
            start_location=payload.start_location,
        )
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception(f"Error generating clusters: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to generate clusters: {str(exc)}"
        ) from exc


@router.post("/generate", response_model=ClusteringResponse, status_code=status.HTTP_200_OK)
def generate(payload: ClusteringRequest) -> ClusteringResponse:
    return ClusteringResponse.from_result(_run(payload))


@router.post("/export", status_code=status.HTTP_200_OK)
def export_route_sheet(payload: ClusteringRequest) -> Response:
    """Return the day-by-day route sheet as CSV."""
    content = clustering_result_to_csv(_run(payload))
    return Response(
        content=content,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="route_sheet.csv"'},
    )
