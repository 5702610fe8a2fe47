from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Position:
    latitude: float
    longitude: float
    bearing: float | None = None  # degrees, 0 = north
    speed: float | None = None  # meters per second
    odometer: float | None = None


@dataclass(frozen=True, slots=True)
class VehicleDescriptor:
    id: str | None = None
    label: str | None = None
    license_plate: str | None = None


@dataclass(frozen=True, slots=True)
class TripDescriptor:
    trip_id: str | None = None
    route_id: str | None = None
    direction_id: int | None = None
    start_time: str | None = None
    start_date: str | None = None
    schedule_relationship: str = "SCHEDULED"


@dataclass(frozen=True, slots=True)
class VehiclePosition:
    """Decoded GTFS-Realtime VehiclePosition entity.

    Enum-valued fields hold the GTFS-RT enum names (e.g. "IN_TRANSIT_TO").
    `timestamp` is a UNIX timestamp in seconds.
    """

    id: str
    position: Position | None = None
    vehicle: VehicleDescriptor | None = None
    trip: TripDescriptor | None = None
    stop_id: str | None = None
    current_stop_sequence: int | None = None
    current_status: str | None = None
    timestamp: int | None = None
    congestion_level: str | None = None
    occupancy_status: str | None = None
    occupancy_percentage: int | None = None


@dataclass(frozen=True, slots=True)
class StopTimeEvent:
    delay: int | None = None  # seconds, positive = late
    time: int | None = None  # UNIX seconds
    uncertainty: int | None = None


@dataclass(frozen=True, slots=True)
class StopTimeUpdate:
    schedule_relationship: str = "SCHEDULED"
    stop_sequence: int | None = None
    stop_id: str | None = None
    arrival: StopTimeEvent | None = None
    departure: StopTimeEvent | None = None


@dataclass(frozen=True, slots=True)
class TripUpdate:
    """Decoded GTFS-Realtime TripUpdate entity."""

    id: str
    trip: TripDescriptor
    stop_time_updates: tuple[StopTimeUpdate, ...] = ()
    vehicle: VehicleDescriptor | None = None
    timestamp: int | None = None
    delay: int | None = None


@dataclass(frozen=True, slots=True)
class ActivePeriod:
    start: int | None = None
    end: int | None = None


@dataclass(frozen=True, slots=True)
class InformedEntity:
    agency_id: str | None = None
    route_id: str | None = None
    route_type: int | None = None
    stop_id: str | None = None
    trip: TripDescriptor | None = None


@dataclass(frozen=True, slots=True)
class ServiceAlert:
    """Decoded GTFS-Realtime Alert entity.

    Texts prefer the Swedish translation and fall back to the first one.
    """

    id: str
    cause: str = "UNKNOWN_CAUSE"
    effect: str = "UNKNOWN_EFFECT"
    header: str | None = None
    description: str | None = None
    url: str | None = None
    active_periods: tuple[ActivePeriod, ...] = ()
    informed_entities: tuple[InformedEntity, ...] = ()
