"""Daily route clustering for inspection campaigns."""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence

from ...data.zip_centroids import extract_zip, load_zip_centroids, lookup_coordinates
from ...models.domain import Building, ClusteringResult, Coordinate, DayCluster
from ..geospatial import distance, path_length_miles, round_miles
from .nearest_neighbor import nearest_neighbor_chain

logger = logging.getLogger(__name__)


def _backfill_coordinates(
    buildings: Sequence[Building], centroids: Mapping[str, Coordinate]
) -> tuple[list[Building], list[str]]:
    resolved: list[Building] = []
    unresolved: list[str] = []
    for building in buildings:
        if building.coordinate is not None:
            resolved.append(building)
            continue
        coordinate = lookup_coordinates(centroids, building.zip_code)
        if coordinate is None:
            if building.zip_code not in unresolved:
                unresolved.append(building.zip_code)
            resolved.append(building)
        else:
            resolved.append(building.with_coordinate(coordinate))
    return resolved, unresolved


def resolve_start_location(
    start_location: Optional[str], centroids: Mapping[str, Coordinate]
) -> Optional[Coordinate]:
    """Resolve a free-text start hint through the 5-digit postal code it contains."""

    zip_code = extract_zip(start_location)
    if zip_code is None:
        if start_location:
            logger.info("Start location '%s' has no postal code; clustering without a start", start_location)
        return None
    return lookup_coordinates(centroids, zip_code)


def _chunk(ordered: Sequence[Building], size: int) -> list[list[Building]]:
    return [list(ordered[index:index + size]) for index in range(0, len(ordered), size)]


def _priority_count(chunk: Sequence[Building]) -> int:
    return sum(1 for building in chunk if building.is_priority)


def estimate_day_distance(stops: Sequence[Building], start: Optional[Coordinate] = None) -> float:
    """Path length over the stops plus the leg from ``start`` to the first placed stop, in miles."""

    total = path_length_miles(building.coordinate for building in stops)
    if start is not None:
        first = next((building.coordinate for building in stops if building.coordinate is not None), None)
        if first is not None:
            total += distance(start, first)
    return round_miles(total)


def generate_clusters(
    buildings: Sequence[Building],
    buildings_per_day: int,
    start_location: Optional[str] = None,
    centroids: Optional[Mapping[str, Coordinate]] = None,
) -> ClusteringResult:
    """Partition buildings into ordered inspection days.

    Every building lands in exactly one day. Buildings without coordinates get
    the centroid of their postal code; codes that cannot be placed are reported
    in ``unresolved`` and their buildings still appear, at the end of the chain.
    """

    if buildings_per_day < 1:
        raise ValueError("buildings_per_day must be >= 1")

    table = centroids if centroids is not None else load_zip_centroids()
    prepared, unresolved = _backfill_coordinates(buildings, table)
    start = resolve_start_location(start_location, table)

    ordered = nearest_neighbor_chain(prepared, start)
    chunks = _chunk(ordered, buildings_per_day)
    # sorted() is stable: days with equal priority counts keep chain order.
    chunks = sorted(chunks, key=_priority_count, reverse=True)

    clusters: list[DayCluster] = []
    for day_number, chunk in enumerate(chunks, start=1):
        stops = tuple(nearest_neighbor_chain(chunk, start))
        clusters.append(
            DayCluster(
                day_number=day_number,
                buildings=stops,
                estimated_distance_miles=estimate_day_distance(stops, start),
            )
        )

    total_miles = round_miles(sum(cluster.estimated_distance_miles for cluster in clusters))
    logger.info(
        "Clustered %d buildings into %d days (%.1f mi, %d unresolved zip codes)",
        len(prepared),
        len(clusters),
        total_miles,
        len(unresolved),
    )
    return ClusteringResult(
        clusters=tuple(clusters),
        unresolved=tuple(unresolved),
        start=start,
        metadata={
            "building_count": len(prepared),
            "day_count": len(clusters),
            "buildings_per_day": buildings_per_day,
            "total_distance_miles": total_miles,
            "start_resolved": start is not None,
        },
    )
