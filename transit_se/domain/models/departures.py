from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Departure:
    """One upcoming departure from an SL site.

    `scheduled` and `expected` are the upstream ISO-8601 local times.
    `display` is SL's own countdown text ("Nu", "3 min", "14:05").
    """

    display: str
    destination: str
    direction_code: int
    state: str
    scheduled: str
    expected: str
    line_id: int
    line_designation: str
    transport_mode: str
    stop_area_name: str
    group_of_lines: str | None = None
    via: str | None = None
    platform: str | None = None
    passenger_level: str | None = None
    deviations: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class DepartureBoard:
    site_id: int
    departures: tuple[Departure, ...]
    stop_deviations: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class Line:
    id: int
    name: str
    designation: str
    transport_mode: str
    group_of_lines: str | None = None


@dataclass(frozen=True, slots=True)
class TransportAuthority:
    id: int
    name: str
    formal_name: str | None = None
    code: str | None = None


@dataclass(frozen=True, slots=True)
class Deviation:
    """A service disruption message from SL Deviations.

    Only the first message variant is kept; SL lists Swedish first.
    """

    case_id: int
    header: str
    details: str
    importance_level: int
    publish_from: str
    publish_upto: str | None = None
    scope_alias: str | None = None
    weblink: str | None = None
    stop_areas: tuple[str, ...] = ()
    lines: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
