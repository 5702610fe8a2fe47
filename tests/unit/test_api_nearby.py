from __future__ import annotations

import httpx
import pytest

from transit_se.adapters.api.dependencies import get_nearby_vehicles_service
from transit_se.app.services.nearby_vehicles_service import NearbyVehiclesService
from transit_se.domain.exceptions import ApiKeyMissingError, ApiResponseError
from transit_se.main import app


@pytest.fixture
def service(vehicle_source, site_directory):
    svc = NearbyVehiclesService(
        vehicle_source=vehicle_source, site_directory=site_directory, operator="sl"
    )
    app.dependency_overrides[get_nearby_vehicles_service] = lambda: svc
    yield svc
    app.dependency_overrides.clear()


async def _get(path: str, **params) -> httpx.Response:
    transport = httpx.ASGITransport(app=app, raise_app_exceptions=False)
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
        return await client.get(path, params=params)


@pytest.mark.unit
@pytest.mark.anyio
async def test_get_nearby_vehicles_by_site_id(service) -> None:
    resp = await _get("/nearby-vehicles", site_id=9001)

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["location"] == {
        "name": "T-Centralen",
        "site_id": 9001,
        "latitude": 59.3314,
        "longitude": 18.0604,
    }
    assert payload["radius_km"] == 1.0
    assert payload["active_modes"] == ["metro", "bus"]
    assert [v["id"] for v in payload["vehicles"]] == ["vp-metro-1", "vp-bus-1"]

    metro = payload["vehicles"][0]
    assert metro["transport_mode"] == "metro"
    assert metro["distance_meters"] == 38
    assert metro["trip"]["trip_id"] == "trip-m1"
    assert metro["nearest_stop_point"]["station_type_code"] == "METROSTN"

    bus = payload["vehicles"][1]
    assert bus["position"]["speed"] is None
    assert bus["occupancy_status"] is None


@pytest.mark.unit
@pytest.mark.anyio
async def test_get_nearby_vehicles_by_coordinates(service) -> None:
    resp = await _get("/nearby-vehicles", latitude=59.3323, longitude=18.0604, radius_km=50)

    assert resp.status_code == 200
    payload = resp.json()
    assert payload["location"]["name"] == "T-Centralen"
    assert payload["location"]["latitude"] == 59.3323
    assert payload["radius_km"] == 20.0


@pytest.mark.unit
@pytest.mark.anyio
async def test_missing_location_is_bad_request(service) -> None:
    resp = await _get("/nearby-vehicles", latitude=59.33)

    assert resp.status_code == 400
    assert resp.json()["error"] == "InvalidLocationError"


@pytest.mark.unit
@pytest.mark.anyio
async def test_unknown_site_is_not_found(service) -> None:
    resp = await _get("/nearby-vehicles", site_name="Atlantis")

    assert resp.status_code == 404
    assert "Atlantis" in resp.json()["detail"]


@pytest.mark.unit
@pytest.mark.anyio
async def test_upstream_failure_is_bad_gateway(service, vehicle_source) -> None:
    vehicle_source.error = ApiResponseError(500, "/sl/VehiclePositionsSweden.pb")

    resp = await _get("/nearby-vehicles", site_id=9001)

    assert resp.status_code == 502
    assert resp.json()["error"] == "ApiResponseError"


@pytest.mark.unit
@pytest.mark.anyio
async def test_missing_api_key_is_service_unavailable() -> None:
    def _override():
        raise ApiKeyMissingError("TRAFIKLAB_GTFS_KEY")

    app.dependency_overrides[get_nearby_vehicles_service] = _override
    try:
        resp = await _get("/nearby-vehicles", site_id=9001)
    finally:
        app.dependency_overrides.clear()

    assert resp.status_code == 503
    assert "TRAFIKLAB_GTFS_KEY" in resp.json()["detail"]


@pytest.mark.unit
@pytest.mark.anyio
async def test_unexpected_error_is_json_500(service, vehicle_source, monkeypatch) -> None:
    monkeypatch.delenv("TRANSIT_SE_REVEAL_ERRORS", raising=False)
    vehicle_source.error = KeyError("boom")

    resp = await _get("/nearby-vehicles", site_id=9001)

    assert resp.status_code == 500
    assert resp.json() == {"detail": "Internal Server Error"}


@pytest.mark.unit
@pytest.mark.anyio
async def test_usage_reports_merged_counts(service) -> None:
    await _get("/nearby-vehicles", site_id=9001)

    resp = await _get("/usage")

    assert resp.status_code == 200
    assert resp.json() == {
        "total_requests": 2,
        "by_endpoint": {"/sl/VehiclePositionsSweden.pb": 1, "/stop-points": 1},
    }


@pytest.mark.unit
@pytest.mark.anyio
async def test_health() -> None:
    resp = await _get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}
