"""Clustering request/response schemas."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from ..config import settings
from ..models.domain import Building, ClusteringResult


class BuildingModel(BaseModel):
    building_id: str = Field(..., description="Record store identifier of the building.")
    property_name: str = ""
    address: str = ""
    city: str = ""
    state: str = ""
    zip_code: str = ""
    square_footage: Optional[float] = None
    roof_access_type: Optional[str] = None
    is_priority: bool = False
    requires_advance_notice: bool = False
    requires_escort: bool = False
    special_equipment: List[str] = Field(default_factory=list)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)

    @model_validator(mode="after")
    def _coordinates_paired(self) -> "BuildingModel":
        if (self.latitude is None) != (self.longitude is None):
            raise ValueError("latitude and longitude must both be set or both be empty")
        return self

    def to_domain(self) -> Building:
        return Building(
            building_id=self.building_id,
            property_name=self.property_name,
            address=self.address,
            city=self.city,
            state=self.state,
            zip_code=self.zip_code,
            square_footage=self.square_footage,
            roof_access_type=self.roof_access_type,
            is_priority=self.is_priority,
            requires_advance_notice=self.requires_advance_notice,
            requires_escort=self.requires_escort,
            special_equipment=tuple(self.special_equipment),
            latitude=self.latitude,
            longitude=self.longitude,
        )

    @classmethod
    def from_domain(cls, building: Building) -> "BuildingModel":
        return cls(
            building_id=building.building_id,
            property_name=building.property_name,
            address=building.address,
            city=building.city,
            state=building.state,
            zip_code=building.zip_code,
            square_footage=building.square_footage,
            roof_access_type=building.roof_access_type,
            is_priority=building.is_priority,
            requires_advance_notice=building.requires_advance_notice,
            requires_escort=building.requires_escort,
            special_equipment=list(building.special_equipment),
            latitude=building.latitude,
            longitude=building.longitude,
        )


class ClusteringRequest(BaseModel):
    buildings: List[BuildingModel]
    buildings_per_day: int = Field(
        default_factory=lambda: settings.default_buildings_per_day,
        ge=1,
        description="Number of stops scheduled per inspection day.",
    )
    start_location: Optional[str] = Field(
        default=None,
        description="Free-text start location; a 5-digit postal code in it seeds every day's route.",
    )


class DayClusterModel(BaseModel):
    day_number: int
    estimated_distance_miles: float
    building_count: int
    priority_count: int
    buildings: List[BuildingModel]


class ClusteringResponse(BaseModel):
    clusters: List[DayClusterModel]
    unresolved: List[str]
    metadata: dict

    @classmethod
    def from_result(cls, result: ClusteringResult) -> "ClusteringResponse":
        return cls(
            clusters=[
                DayClusterModel(
                    day_number=cluster.day_number,
                    estimated_distance_miles=cluster.estimated_distance_miles,
                    building_count=cluster.building_count,
                    priority_count=cluster.priority_count,
                    buildings=[BuildingModel.from_domain(building) for building in cluster.buildings],
                )
                for cluster in result.clusters
            ],
            unresolved=list(result.unresolved),
            metadata=result.metadata,
        )
