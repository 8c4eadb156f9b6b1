"""Geospatial helper functions."""

from __future__ import annotations

import math
from typing import Iterable, Optional

from ..models.domain import Coordinate

EARTH_RADIUS_MILES = 3958.8


def haversine_miles(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Compute distance between two coordinates using the Haversine formula."""

    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    c = 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))
    return EARTH_RADIUS_MILES * c


def distance(a: Coordinate, b: Coordinate) -> float:
    """Great-circle distance in miles between two coordinates."""

    return haversine_miles(a.latitude, a.longitude, b.latitude, b.longitude)


def path_length_miles(points: Iterable[Optional[Coordinate]]) -> float:
    """Sum the distance over consecutive points in the given order.

    A ``None`` point is a gap: the legs on either side of it are skipped.
    """

    total = 0.0
    previous: Optional[Coordinate] = None
    for point in points:
        if previous is not None and point is not None:
            total += distance(previous, point)
        previous = point
    return total


def round_miles(value: float) -> float:
    return round(value, 1)
