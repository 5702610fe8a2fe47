from __future__ import annotations

from functools import lru_cache

from transit_se.adapters.realtime.http_gtfs_realtime_vehicle_provider import (
    HttpGtfsRealtimeVehicleProvider,
)
from transit_se.adapters.sl.http_sl_transport_client import HttpSlTransportClient
from transit_se.app.services.nearby_vehicles_service import NearbyVehiclesService


# Cached so the site directory and stop-point caches live as long as the process.
@lru_cache(maxsize=1)
def get_nearby_vehicles_service() -> NearbyVehiclesService:
    return NearbyVehiclesService(
        vehicle_source=HttpGtfsRealtimeVehicleProvider(),
        site_directory=HttpSlTransportClient(),
    )
