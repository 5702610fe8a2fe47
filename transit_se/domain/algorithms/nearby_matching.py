from __future__ import annotations

import math
from typing import Iterable, Sequence

from transit_se.domain.algorithms.geo_utils import haversine_meters, round_meters
from transit_se.domain.models import (
    ClassifiedStopPoint,
    NearbyVehicle,
    NearbyVehiclePosition,
    NearestStopPoint,
    Position,
    TransportMode,
    VehiclePosition,
)

DEFAULT_RADIUS_KM = 1.0
MIN_RADIUS_KM = 0.0
MAX_RADIUS_KM = 20.0

_NO_CONGESTION_DATA = "UNKNOWN_CONGESTION_LEVEL"
_NO_OCCUPANCY_DATA = "NO_DATA_AVAILABLE"


def clamp_radius_km(radius_km: float | None) -> float:
    """Clamp a search radius into [0, 20] km; missing or NaN means the default."""

    if radius_km is None or math.isnan(radius_km):
        return DEFAULT_RADIUS_KM
    return float(min(MAX_RADIUS_KM, max(MIN_RADIUS_KM, radius_km)))


def stop_points_within(
    stop_points: Iterable[ClassifiedStopPoint],
    *,
    lat: float,
    lon: float,
    radius_m: float,
) -> tuple[ClassifiedStopPoint, ...]:
    return tuple(
        sp
        for sp in stop_points
        if haversine_meters(lat, lon, sp.latitude, sp.longitude) <= radius_m
    )


def find_nearest_stop_point(
    lat: float, lon: float, stop_points: Sequence[ClassifiedStopPoint]
) -> tuple[ClassifiedStopPoint, float] | None:
    """Linear scan for the closest stop point; the first one wins ties."""

    best: ClassifiedStopPoint | None = None
    best_d = math.inf
    for sp in stop_points:
        d = haversine_meters(lat, lon, sp.latitude, sp.longitude)
        if d < best_d:
            best_d = d
            best = sp

    if best is None:
        return None
    return best, best_d


def _sanitize_speed(speed: float | None) -> float | None:
    # Negative and NaN speeds count as missing.
    if speed is None or not speed >= 0:
        return None
    return speed


def classify_vehicle(
    vehicle: VehiclePosition,
    pos: Position,
    *,
    distance_m: float,
    candidates: Sequence[ClassifiedStopPoint],
) -> NearbyVehicle:
    nearest = find_nearest_stop_point(pos.latitude, pos.longitude, candidates)
    mode = TransportMode.UNKNOWN
    nearest_stop: NearestStopPoint | None = None
    if nearest is not None:
        sp, sp_d = nearest
        mode = sp.transport_mode
        nearest_stop = NearestStopPoint(
            name=sp.name,
            designation=sp.designation,
            station_type_code=sp.station_type_code,
            distance_meters=round_meters(sp_d),
        )

    descriptor = vehicle.vehicle
    congestion = vehicle.congestion_level
    occupancy = vehicle.occupancy_status
    percentage = vehicle.occupancy_percentage

    return NearbyVehicle(
        id=vehicle.id,
        transport_mode=mode,
        position=NearbyVehiclePosition(
            latitude=pos.latitude,
            longitude=pos.longitude,
            bearing=pos.bearing,
            speed=_sanitize_speed(pos.speed),
        ),
        distance_meters=round_meters(distance_m),
        vehicle_id=(descriptor.id or None) if descriptor else None,
        vehicle_label=(descriptor.label or None) if descriptor else None,
        current_status=vehicle.current_status or None,
        timestamp=vehicle.timestamp or None,
        trip=vehicle.trip,
        nearest_stop_point=nearest_stop,
        congestion_level=(
            congestion if congestion and congestion != _NO_CONGESTION_DATA else None
        ),
        occupancy_status=(
            occupancy if occupancy and occupancy != _NO_OCCUPANCY_DATA else None
        ),
        occupancy_percentage=(
            percentage if percentage is not None and percentage > 0 else None
        ),
    )


def match_nearby_vehicles(
    vehicles: Iterable[VehiclePosition],
    stop_points: Sequence[ClassifiedStopPoint],
    *,
    center_lat: float,
    center_lon: float,
    radius_m: float,
) -> tuple[NearbyVehicle, ...]:
    """Filter vehicles to the radius, classify each by nearest stop, sort by distance.

    Only stop points within `radius_m` of the center are classification
    candidates. Vehicles without a position are never included. The sort is
    stable, so vehicles at equal rounded distance keep their feed order.
    """

    candidates = stop_points_within(
        stop_points, lat=center_lat, lon=center_lon, radius_m=radius_m
    )

    out: list[NearbyVehicle] = []
    for v in vehicles:
        pos = v.position
        if pos is None:
            continue
        d = haversine_meters(center_lat, center_lon, pos.latitude, pos.longitude)
        if d > radius_m:
            continue
        out.append(classify_vehicle(v, pos, distance_m=d, candidates=candidates))

    out.sort(key=lambda nv: nv.distance_meters)
    return tuple(out)


def active_modes(vehicles: Iterable[NearbyVehicle]) -> tuple[TransportMode, ...]:
    """Distinct known modes among vehicles, in first-seen order."""

    seen: dict[TransportMode, None] = {}
    for v in vehicles:
        if v.transport_mode is TransportMode.UNKNOWN:
            continue
        seen.setdefault(v.transport_mode, None)
    return tuple(seen)
