"""Greedy nearest-neighbor ordering shared by the global and per-day passes."""

from __future__ import annotations

import math
from typing import Optional, Sequence

from ...models.domain import Building, Coordinate
from ..geospatial import distance


def _seed_order(buildings: Sequence[Building], start: Optional[Coordinate]) -> list[Building]:
    """Pre-sort candidates; buildings without a coordinate sort last in input order."""

    if start is not None:
        def key(building: Building) -> tuple[bool, float]:
            coordinate = building.coordinate
            if coordinate is None:
                return (True, 0.0)
            return (False, distance(start, coordinate))
    else:
        def key(building: Building) -> tuple[bool, float]:
            coordinate = building.coordinate
            if coordinate is None:
                return (True, 0.0)
            return (False, -coordinate.latitude)

    return sorted(buildings, key=key)


def nearest_neighbor_chain(buildings: Sequence[Building], start: Optional[Coordinate] = None) -> list[Building]:
    """Order buildings by repeatedly visiting the closest unvisited one.

    The first stop is the building closest to ``start`` or, without a start, the
    northernmost building. Ties go to the candidate that comes first in the
    pre-sorted order. A building without a coordinate never wins a distance
    comparison; it is appended in pre-sort position once the chain reaches it
    (directly after a coordinate-less stop, or when nothing placeable remains).
    """

    if len(buildings) <= 1:
        return list(buildings)

    remaining = _seed_order(buildings, start)
    chain = [remaining.pop(0)]

    while remaining:
        current = chain[-1].coordinate
        if current is None:
            chain.append(remaining.pop(0))
            continue

        best_index: Optional[int] = None
        best_distance = math.inf
        for index, candidate in enumerate(remaining):
            coordinate = candidate.coordinate
            if coordinate is None:
                continue
            candidate_distance = distance(current, coordinate)
            if candidate_distance < best_distance:
                best_distance = candidate_distance
                best_index = index

        chain.append(remaining.pop(best_index if best_index is not None else 0))

    return chain
