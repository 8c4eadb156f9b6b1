import csv
import io

from roofroute.models.domain import Building
from roofroute.services.clustering.service import generate_clusters
from roofroute.services.outputs.formatter import (
    ROUTE_SHEET_FIELDS,
    clustering_result_to_csv,
    clustering_result_to_json,
)


def _building(bid: str, lat: float | None, lon: float | None, zip_code: str = "02135", **extra) -> Building:
    return Building(
        building_id=bid,
        property_name=f"Property {bid}",
        address=f"{bid} Main Street",
        city="Boston",
        state="MA",
        zip_code=zip_code,
        latitude=lat,
        longitude=lon,
        **extra,
    )


def _result():
    buildings = [
        _building("A", 42.40, -71.10, is_priority=True, special_equipment=("extension ladder", "harness")),
        _building("B", 42.35, -71.05, roof_access_type="exterior ladder"),
        _building("C", None, None, zip_code="99999", square_footage=12000.0),
    ]
    return generate_clusters(buildings, 2)


def test_route_sheet_has_one_row_per_stop():
    rows = list(csv.DictReader(io.StringIO(clustering_result_to_csv(_result()))))

    assert len(rows) == 3
    assert list(rows[0].keys()) == ROUTE_SHEET_FIELDS
    assert [(row["day_number"], row["sequence"], row["building_id"]) for row in rows] == [
        ("1", "1", "A"),
        ("1", "2", "B"),
        ("2", "1", "C"),
    ]
    assert rows[0]["special_equipment"] == "extension ladder; harness"
    assert rows[2]["latitude"] == "" and rows[2]["square_footage"] == "12000.0"


def test_json_export_matches_clusters():
    payload = clustering_result_to_json(_result())

    assert payload["unresolved"] == ["99999"]
    assert payload["start"] is None
    assert [cluster["day_number"] for cluster in payload["clusters"]] == [1, 2]
    first = payload["clusters"][0]
    assert first["priority_count"] == 1
    assert first["buildings"][0]["special_equipment"] == ["extension ladder", "harness"]
    assert payload["metadata"]["building_count"] == 3
