import pytest
from fastapi.testclient import TestClient

from roofroute.main import create_app
from roofroute.models.domain import Coordinate
from roofroute.schemas.clustering import BuildingModel, ClusteringRequest
from roofroute.services.geocoding.service import GeocodingService, RateLimiter


class DummyGeocoder:
    def __init__(self, answers: dict) -> None:
        self.answers = answers
        self.queries: list[str] = []

    def search(self, query):
        self.queries.append(query)
        return self.answers.get(query)

    def check_health(self) -> bool:
        return True


def _building(bid: str, lat: float | None = None, lon: float | None = None, **extra) -> BuildingModel:
    return BuildingModel(
        building_id=bid,
        property_name=f"Property {bid}",
        address=f"{bid} Main St",
        city="Boston",
        state="MA",
        zip_code=extra.pop("zip_code", "02135"),
        latitude=lat,
        longitude=lon,
        **extra,
    )


@pytest.fixture
def api_client() -> TestClient:
    return TestClient(create_app())


@pytest.fixture
def dummy_geocoder(monkeypatch: pytest.MonkeyPatch) -> DummyGeocoder:
    from roofroute.api.routes import geocoding as geocoding_routes
    from roofroute.api.routes import health as health_routes

    geocoder = DummyGeocoder({"B1 Main St, Boston, MA 02135": Coordinate(42.36, -71.06)})
    service = GeocodingService(client=geocoder, limiter=RateLimiter(0.0))
    monkeypatch.setattr(geocoding_routes, "get_geocoding_service", lambda: service)
    monkeypatch.setattr(health_routes, "_get_geocoding_service", lambda: service)
    return geocoder


def test_health(api_client: TestClient):
    assert api_client.get("/api/health").json() == {"status": "ok"}

    centroids = api_client.get("/api/health/centroids").json()
    assert centroids["loaded"] is True
    assert centroids["zip_codes"] > 0


def test_geocoder_health_uses_service(api_client: TestClient, dummy_geocoder: DummyGeocoder):
    assert api_client.get("/api/health/geocoder").json() == {"service": "geocoder", "healthy": True}


def test_geocoder_health_is_rate_limited_after_batch(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from roofroute.api.routes import geocoding as geocoding_routes
    from roofroute.api.routes import health as health_routes

    sleeps: list[float] = []
    now = [0.0]

    def sleep(seconds: float) -> None:
        sleeps.append(seconds)
        now[0] += seconds

    geocoder = DummyGeocoder({"B1 Main St, Boston, MA 02135": Coordinate(42.36, -71.06)})
    service = GeocodingService(client=geocoder, limiter=RateLimiter(1.1, clock=lambda: now[0], sleep=sleep))
    monkeypatch.setattr(geocoding_routes, "get_geocoding_service", lambda: service)
    monkeypatch.setattr(health_routes, "_get_geocoding_service", lambda: service)

    api_client.post(
        "/api/geocoding/batch",
        json={"buildings": [{"building_id": "B1", "address": "B1 Main St", "city": "Boston", "state": "MA", "zip_code": "02135"}]},
    )
    for _ in range(3):
        assert api_client.get("/api/health/geocoder").json()["healthy"] is True

    # one batch query, then a full interval before each health check
    assert len(geocoder.queries) == 1
    assert sleeps == pytest.approx([1.1, 1.1, 1.1])


def test_generate_clusters_endpoint(api_client: TestClient):
    request = ClusteringRequest(
        buildings=[
            _building("B1", 42.40, -71.10, is_priority=True),
            _building("B2", 42.35, -71.05),
            _building("B3"),
            _building("B4", zip_code="99999"),
        ],
        buildings_per_day=2,
        start_location="Yard, 02135",
    )

    response = api_client.post("/api/clusters/generate", json=request.model_dump())

    assert response.status_code == 200
    payload = response.json()
    assert [cluster["day_number"] for cluster in payload["clusters"]] == [1, 2]
    assert payload["clusters"][0]["priority_count"] == 1
    assert payload["unresolved"] == ["99999"]
    assert payload["metadata"]["start_resolved"] is True
    scheduled = sorted(b["building_id"] for cluster in payload["clusters"] for b in cluster["buildings"])
    assert scheduled == ["B1", "B2", "B3", "B4"]


def test_generate_clusters_defaults_buildings_per_day(api_client: TestClient, monkeypatch: pytest.MonkeyPatch):
    from roofroute.config import settings

    monkeypatch.setattr(settings, "default_buildings_per_day", 2)
    buildings = [_building(f"B{n}", 42.30 + n / 100, -71.10).model_dump() for n in range(5)]

    response = api_client.post("/api/clusters/generate", json={"buildings": buildings})

    assert response.status_code == 200
    payload = response.json()
    assert [len(cluster["buildings"]) for cluster in payload["clusters"]] == [2, 2, 1]
    assert payload["metadata"]["buildings_per_day"] == 2


def test_generate_clusters_rejects_zero_per_day(api_client: TestClient):
    response = api_client.post(
        "/api/clusters/generate",
        json={"buildings": [], "buildings_per_day": 0},
    )

    assert response.status_code == 422


def test_generate_clusters_rejects_half_coordinates(api_client: TestClient):
    response = api_client.post(
        "/api/clusters/generate",
        json={"buildings": [{"building_id": "B1", "latitude": 42.0}], "buildings_per_day": 3},
    )

    assert response.status_code == 422


def test_export_route_sheet(api_client: TestClient):
    request = ClusteringRequest(buildings=[_building("B1", 42.4, -71.1), _building("B2")], buildings_per_day=5)

    response = api_client.post("/api/clusters/export", json=request.model_dump())

    assert response.status_code == 200
    assert response.headers["content-type"].startswith("text/csv")
    lines = response.text.strip().splitlines()
    assert lines[0].startswith("day_number,sequence,building_id")
    assert len(lines) == 3


def test_geocode_batch_endpoint(api_client: TestClient, dummy_geocoder: DummyGeocoder):
    response = api_client.post(
        "/api/geocoding/batch",
        json={
            "buildings": [
                {"building_id": "B1", "address": "B1 Main St", "city": "Boston", "state": "MA", "zip_code": "02135"},
                {"building_id": "B2", "address": "B2 Main St", "city": "Boston", "state": "MA", "zip_code": "02135"},
                {"building_id": "B3", "address": "B3 Main St", "city": "Nowhere", "state": "ZZ", "zip_code": "99999"},
            ]
        },
    )

    assert response.status_code == 200
    payload = response.json()
    assert [outcome["source"] for outcome in payload["outcomes"]] == ["nominatim", "zip_centroid", None]
    assert payload["resolved"] == 2
    assert payload["unresolved"] == 1
    # B2 and B3 each retried with "Main Street"
    assert len(dummy_geocoder.queries) == 5


def test_simplify_endpoint(api_client: TestClient):
    response = api_client.get("/api/geocoding/simplify", params={"address": "123 Main St, Bldg 4, Suite 201"})

    assert response.status_code == 200
    assert response.json() == {"original": "123 Main St, Bldg 4, Suite 201", "simplified": "123 Main Street"}
