"""Serializers for clustering outputs (route sheets)."""

from __future__ import annotations

import csv
import io
from dataclasses import asdict

from ...models.domain import ClusteringResult

ROUTE_SHEET_FIELDS = [
    "day_number",
    "sequence",
    "building_id",
    "property_name",
    "address",
    "city",
    "state",
    "zip_code",
    "is_priority",
    "requires_advance_notice",
    "requires_escort",
    "roof_access_type",
    "special_equipment",
    "square_footage",
    "latitude",
    "longitude",
    "day_distance_miles",
]


def clustering_result_to_json(result: ClusteringResult) -> dict:
    return {
        "metadata": result.metadata,
        "unresolved": list(result.unresolved),
        "start": asdict(result.start) if result.start else None,
        "clusters": [
            {
                "day_number": cluster.day_number,
                "estimated_distance_miles": cluster.estimated_distance_miles,
                "building_count": cluster.building_count,
                "priority_count": cluster.priority_count,
                "buildings": [
                    {**asdict(building), "special_equipment": list(building.special_equipment)}
                    for building in cluster.buildings
                ],
            }
            for cluster in result.clusters
        ],
    }


def clustering_result_to_csv(result: ClusteringResult) -> str:
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=ROUTE_SHEET_FIELDS)
    writer.writeheader()
    for cluster in result.clusters:
        for sequence, building in enumerate(cluster.buildings, start=1):
            writer.writerow(
                {
                    "day_number": cluster.day_number,
                    "sequence": sequence,
                    "building_id": building.building_id,
                    "property_name": building.property_name,
                    "address": building.address,
                    "city": building.city,
                    "state": building.state,
                    "zip_code": building.zip_code,
                    "is_priority": building.is_priority,
                    "requires_advance_notice": building.requires_advance_notice,
                    "requires_escort": building.requires_escort,
                    "roof_access_type": building.roof_access_type or "",
                    "special_equipment": "; ".join(building.special_equipment),
                    "square_footage": "" if building.square_footage is None else building.square_footage,
                    "latitude": "" if building.latitude is None else building.latitude,
                    "longitude": "" if building.longitude is None else building.longitude,
                    "day_distance_miles": cluster.estimated_distance_miles,
                }
            )
    return buffer.getvalue()
