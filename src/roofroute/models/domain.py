"""Domain models for buildings, coordinates and day clusters."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Optional


@dataclass(frozen=True, slots=True)
class Coordinate:
    """A (latitude, longitude) pair in decimal degrees."""

    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class Building:
    """A building record as supplied by the record store.

    Coordinates are both present or both absent. Only the coordinate takes part
    in clustering; the remaining fields are carried through for display.
    """

    building_id: str
    property_name: str
    address: str
    city: str
    state: str
    zip_code: str
    square_footage: Optional[float] = None
    roof_access_type: Optional[str] = None
    is_priority: bool = False
    requires_advance_notice: bool = False
    requires_escort: bool = False
    special_equipment: tuple[str, ...] = ()
    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @property
    def coordinate(self) -> Optional[Coordinate]:
        if self.latitude is None or self.longitude is None:
            return None
        return Coordinate(self.latitude, self.longitude)

    def with_coordinate(self, coordinate: Coordinate) -> "Building":
        return replace(self, latitude=coordinate.latitude, longitude=coordinate.longitude)


@dataclass(frozen=True, slots=True)
class DayCluster:
    day_number: int
    buildings: tuple[Building, ...]
    estimated_distance_miles: float

    @property
    def building_count(self) -> int:
        return len(self.buildings)

    @property
    def priority_count(self) -> int:
        return sum(1 for building in self.buildings if building.is_priority)


@dataclass(frozen=True, slots=True)
class GeocodingOutcome:
    """Result of resolving one building in the bulk geocoding pass.

    ``source`` is ``"nominatim"`` or ``"zip_centroid"`` when resolved, ``None`` otherwise.
    """

    building_id: str
    latitude: Optional[float]
    longitude: Optional[float]
    success: bool
    source: Optional[str] = None


@dataclass(frozen=True, slots=True)
class ClusteringResult:
    clusters: tuple[DayCluster, ...]
    unresolved: tuple[str, ...]
    start: Optional[Coordinate] = None
    metadata: dict = field(default_factory=dict)
