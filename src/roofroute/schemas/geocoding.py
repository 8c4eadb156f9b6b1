"""Pydantic request/response models for geocoding endpoints."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import Building, GeocodingOutcome


class GeocodeTarget(BaseModel):
    building_id: str
    address: str
    city: str = ""
    state: str = ""
    zip_code: str = ""

    def to_domain(self) -> Building:
        return Building(
            building_id=self.building_id,
            property_name="",
            address=self.address,
            city=self.city,
            state=self.state,
            zip_code=self.zip_code,
        )


class GeocodeBatchRequest(BaseModel):
    buildings: List[GeocodeTarget] = Field(..., description="Buildings to resolve, in processing order.")


class GeocodingOutcomeModel(BaseModel):
    building_id: str
    latitude: Optional[float]
    longitude: Optional[float]
    success: bool
    source: Optional[str]

    @classmethod
    def from_domain(cls, outcome: GeocodingOutcome) -> "GeocodingOutcomeModel":
        return cls(
            building_id=outcome.building_id,
            latitude=outcome.latitude,
            longitude=outcome.longitude,
            success=outcome.success,
            source=outcome.source,
        )


class GeocodeBatchResponse(BaseModel):
    outcomes: List[GeocodingOutcomeModel]
    resolved: int
    unresolved: int


class SimplifiedAddress(BaseModel):
    original: str
    simplified: str
