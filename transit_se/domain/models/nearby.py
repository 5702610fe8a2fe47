from __future__ import annotations

from dataclasses import dataclass

from .realtime import TripDescriptor
from .transport import TransportMode


@dataclass(frozen=True, slots=True)
class NearbyVehiclesQuery:
    """Caller input for a nearby-vehicles search.

    Precedence when several location inputs are given:
    site_id > site_name > latitude + longitude.
    """

    site_id: int | None = None
    site_name: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    radius_km: float | None = None


@dataclass(frozen=True, slots=True)
class ResolvedLocation:
    name: str
    site_id: int
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class NearbyVehiclePosition:
    latitude: float
    longitude: float
    bearing: float | None = None
    speed: float | None = None


@dataclass(frozen=True, slots=True)
class NearestStopPoint:
    name: str
    station_type_code: str
    distance_meters: int
    designation: str | None = None


@dataclass(frozen=True, slots=True)
class NearbyVehicle:
    id: str
    transport_mode: TransportMode
    position: NearbyVehiclePosition
    distance_meters: int
    vehicle_id: str | None = None
    vehicle_label: str | None = None
    current_status: str | None = None
    timestamp: int | None = None
    trip: TripDescriptor | None = None
    nearest_stop_point: NearestStopPoint | None = None
    congestion_level: str | None = None
    occupancy_status: str | None = None
    occupancy_percentage: int | None = None


@dataclass(frozen=True, slots=True)
class NearbyVehiclesResult:
    location: ResolvedLocation
    radius_km: float
    vehicles: tuple[NearbyVehicle, ...]
    active_modes: tuple[TransportMode, ...]
    timestamp: int
