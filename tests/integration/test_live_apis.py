from __future__ import annotations

import asyncio

import pytest

from transit_se import (
    HttpGtfsRealtimeVehicleProvider,
    HttpSlDeviationsClient,
    HttpSlTransportClient,
    HttpTrafiklabRealtimeClient,
    NearbyVehiclesQuery,
    NearbyVehiclesService,
)


@pytest.mark.integration
def test_sl_site_directory_resolves_t_centralen(require_sl: str) -> None:
    client = HttpSlTransportClient(base_url=require_sl)

    async def run():
        return await asyncio.gather(
            client.get_site_by_name("T-Centralen"), client.get_cached_sites()
        )

    site, sites = asyncio.run(run())

    assert site is not None
    assert 59.0 < site.lat < 60.0
    assert len(sites) > 100
    assert client.get_usage().by_endpoint == {"/sites": 1}


@pytest.mark.integration
def test_nearby_vehicles_live(require_gtfs_key: str, require_sl: str) -> None:
    svc = NearbyVehiclesService(
        vehicle_source=HttpGtfsRealtimeVehicleProvider(api_key=require_gtfs_key),
        site_directory=HttpSlTransportClient(base_url=require_sl),
    )

    result = asyncio.run(
        svc.get_nearby_vehicles(NearbyVehiclesQuery(site_name="T-Centralen", radius_km=2.0))
    )

    assert result.location.name
    distances = [v.distance_meters for v in result.vehicles]
    assert distances == sorted(distances)
    assert all(d <= 2000 for d in distances)


@pytest.mark.integration
def test_sl_departures_and_lines_live(require_sl: str) -> None:
    client = HttpSlTransportClient(base_url=require_sl)

    async def run():
        return await asyncio.gather(client.get_departures(9001), client.get_lines())

    board, lines = asyncio.run(run())

    assert board.site_id == 9001
    assert all(d.line_designation for d in board.departures)
    assert any(ln.transport_mode == "METRO" for ln in lines)


@pytest.mark.integration
def test_sl_deviations_live(require_sl: str) -> None:
    client = HttpSlDeviationsClient()

    deviations = asyncio.run(client.get_deviations(transport_modes=["metro"]))

    assert all(d.header for d in deviations)
    assert client.get_usage().by_endpoint == {"/messages": 1}


@pytest.mark.integration
def test_gtfs_trip_updates_and_alerts_live(require_gtfs_key: str) -> None:
    provider = HttpGtfsRealtimeVehicleProvider(api_key=require_gtfs_key)

    async def run():
        return await asyncio.gather(
            provider.get_trip_updates("sl"), provider.get_service_alerts("sl")
        )

    updates, alerts = asyncio.run(run())

    assert all(tu.trip.trip_id or tu.trip.route_id for tu in updates)
    assert all(a.id for a in alerts)
    assert provider.get_usage().total_requests == 2


@pytest.mark.integration
def test_trafiklab_stop_search_and_departures_live(require_realtime_key: str) -> None:
    client = HttpTrafiklabRealtimeClient(api_key=require_realtime_key)

    groups = asyncio.run(client.search_stops("Uppsala C"))
    assert groups

    timetable = asyncio.run(client.get_departures(groups[0].id))

    assert timetable.kind == "departures"
    assert all(c.line_designation for c in timetable.calls)
