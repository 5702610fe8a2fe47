from __future__ import annotations

from pydantic import BaseModel

from transit_se.domain.models import NearbyVehicle, NearbyVehiclesResult, UsageStats


class LocationSchema(BaseModel):
    name: str
    site_id: int
    latitude: float
    longitude: float


class VehiclePositionSchema(BaseModel):
    latitude: float
    longitude: float
    bearing: float | None = None
    speed: float | None = None


class TripSchema(BaseModel):
    trip_id: str | None = None
    route_id: str | None = None
    direction_id: int | None = None
    start_time: str | None = None
    start_date: str | None = None


class NearestStopPointSchema(BaseModel):
    name: str
    designation: str | None = None
    station_type_code: str
    distance_meters: int


class NearbyVehicleSchema(BaseModel):
    id: str
    vehicle_id: str | None = None
    vehicle_label: str | None = None
    transport_mode: str
    position: VehiclePositionSchema
    distance_meters: int
    current_status: str | None = None
    timestamp: int | None = None
    trip: TripSchema | None = None
    nearest_stop_point: NearestStopPointSchema | None = None
    congestion_level: str | None = None
    occupancy_status: str | None = None
    occupancy_percentage: int | None = None


class NearbyVehiclesResponseSchema(BaseModel):
    location: LocationSchema
    radius_km: float
    vehicles: list[NearbyVehicleSchema]
    active_modes: list[str]
    timestamp: int


class UsageSchema(BaseModel):
    total_requests: int
    by_endpoint: dict[str, int]


def vehicle_to_schema(v: NearbyVehicle) -> NearbyVehicleSchema:
    return NearbyVehicleSchema(
        id=v.id,
        vehicle_id=v.vehicle_id,
        vehicle_label=v.vehicle_label,
        transport_mode=v.transport_mode.value,
        position=VehiclePositionSchema(
            latitude=v.position.latitude,
            longitude=v.position.longitude,
            bearing=v.position.bearing,
            speed=v.position.speed,
        ),
        distance_meters=v.distance_meters,
        current_status=v.current_status,
        timestamp=v.timestamp,
        trip=(
            TripSchema(
                trip_id=v.trip.trip_id,
                route_id=v.trip.route_id,
                direction_id=v.trip.direction_id,
                start_time=v.trip.start_time,
                start_date=v.trip.start_date,
            )
            if v.trip
            else None
        ),
        nearest_stop_point=(
            NearestStopPointSchema(
                name=v.nearest_stop_point.name,
                designation=v.nearest_stop_point.designation,
                station_type_code=v.nearest_stop_point.station_type_code,
                distance_meters=v.nearest_stop_point.distance_meters,
            )
            if v.nearest_stop_point
            else None
        ),
        congestion_level=v.congestion_level,
        occupancy_status=v.occupancy_status,
        occupancy_percentage=v.occupancy_percentage,
    )


def result_to_schema(result: NearbyVehiclesResult) -> NearbyVehiclesResponseSchema:
    loc = result.location
    return NearbyVehiclesResponseSchema(
        location=LocationSchema(
            name=loc.name,
            site_id=loc.site_id,
            latitude=loc.latitude,
            longitude=loc.longitude,
        ),
        radius_km=result.radius_km,
        vehicles=[vehicle_to_schema(v) for v in result.vehicles],
        active_modes=[m.value for m in result.active_modes],
        timestamp=result.timestamp,
    )


def usage_to_schema(usage: UsageStats) -> UsageSchema:
    return UsageSchema(
        total_requests=usage.total_requests, by_endpoint=dict(usage.by_endpoint)
    )
