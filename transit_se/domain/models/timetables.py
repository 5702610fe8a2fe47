from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class StopGroupMember:
    id: str
    name: str
    lat: float
    lon: float


@dataclass(frozen=True, slots=True)
class StopGroup:
    """A Trafiklab rikshållplats or meta-stop with its child stops.

    `id` is the area id the timetable endpoints take.
    """

    id: str
    name: str
    area_type: str
    average_daily_stop_times: float
    transport_modes: tuple[str, ...] = ()
    stops: tuple[StopGroupMember, ...] = ()


@dataclass(frozen=True, slots=True)
class TimetableAlert:
    header: str
    details: str = ""
    type: str | None = None


@dataclass(frozen=True, slots=True)
class TimetableCall:
    """One departure from, or arrival at, a stop area.

    `scheduled` and `realtime` are the upstream local ISO-8601 times;
    `delay` is in seconds.
    """

    scheduled: str
    realtime: str
    delay: int
    canceled: bool
    is_realtime: bool
    line_designation: str
    transport_mode: str
    direction: str
    stop_name: str
    line_name: str | None = None
    origin: str | None = None
    destination: str | None = None
    trip_id: str | None = None
    platform: str | None = None
    alerts: tuple[TimetableAlert, ...] = ()


@dataclass(frozen=True, slots=True)
class Timetable:
    area_id: str
    kind: str  # "departures" or "arrivals"
    calls: tuple[TimetableCall, ...]
    stop_name: str | None = None
    stop_alerts: tuple[TimetableAlert, ...] = ()
