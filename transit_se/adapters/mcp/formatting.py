"""Plain-text rendering of SDK results for MCP tool output."""

from __future__ import annotations

from datetime import datetime, timezone
from zoneinfo import ZoneInfo

from transit_se.domain.models import (
    DepartureBoard,
    Deviation,
    NearbyVehiclesResult,
    ServiceAlert,
    Site,
    StopGroup,
    StopTimeEvent,
    Timetable,
    TimetableAlert,
    TripUpdate,
    UsageStats,
    VehiclePosition,
)

STOCKHOLM = ZoneInfo("Europe/Stockholm")
_DASH = "-"


def _clock(ts: int) -> str:
    return (
        datetime.fromtimestamp(ts, tz=timezone.utc).astimezone(STOCKHOLM).strftime("%H:%M")
    )


def _distance(meters: int) -> str:
    if meters < 1000:
        return f"{meters} m"
    return f"{meters / 1000:.2f} km"


def _date(ts: int) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).astimezone(STOCKHOLM).strftime(
        "%Y-%m-%d"
    )


def _lower(enum_name: str) -> str:
    return enum_name.replace("_", " ").lower()


def _minutes(seconds: int) -> str:
    sign = "+" if seconds > 0 else ""
    return f"{sign}{round(seconds / 60)} min"


def _shown(count: int, total: int) -> str:
    return f"{total}, showing {count}" if count < total else f"{total}"


def format_nearby_vehicles(result: NearbyVehiclesResult) -> str:
    loc = result.location
    vehicles = result.vehicles

    if not vehicles:
        return f"No vehicles found within {result.radius_km:g} km of {loc.name}."

    lines = [
        f"Vehicles near {loc.name} (ID: {loc.site_id}): "
        f"{len(vehicles)} within {result.radius_km:g} km",
        f"Active modes: {', '.join(m.value for m in result.active_modes) or _DASH}",
        "",
    ]

    for v in vehicles:
        mode = v.transport_mode.value.upper().ljust(7)
        label = v.vehicle_label or v.vehicle_id or _DASH
        speed = (
            f"{round(v.position.speed * 3.6)} km/h"
            if v.position.speed is not None
            else _DASH
        )
        bearing = f"{v.position.bearing:g}°" if v.position.bearing is not None else _DASH
        status = v.current_status.replace("_", " ") if v.current_status else _DASH
        updated = _clock(v.timestamp) if v.timestamp else _DASH

        lines.append(
            f"  {mode} {_distance(v.distance_meters).ljust(8)} {label}"
            f"  {status}  speed {speed}  bearing {bearing}  updated {updated}"
        )

        details: list[str] = []
        sp = v.nearest_stop_point
        if sp is not None:
            designation = f" ({sp.designation})" if sp.designation else ""
            details.append(f"near {sp.name}{designation}")
        if v.trip and v.trip.trip_id:
            details.append(f"trip {v.trip.trip_id}")
        if details:
            lines.append(f"           {' | '.join(details)}")

    return "\n".join(lines)


def format_sites(sites: tuple[Site, ...], query: str) -> str:
    if not sites:
        return f'No SL sites found matching "{query}".'
    lines = [f"Found {len(sites)} site(s):"]
    for s in sites:
        lines.append(f"  {s.name} (ID: {s.id})  {s.lat:.5f}, {s.lon:.5f}")
    return "\n".join(lines)


def format_usage(usage: UsageStats) -> str:
    lines = [f"Total requests: {usage.total_requests}"]
    for endpoint, count in sorted(usage.by_endpoint.items()):
        lines.append(f"  {endpoint}: {count}")
    return "\n".join(lines)


def format_departures(board: DepartureBoard) -> str:
    if not board.departures:
        return f"No departures found for SL site {board.site_id}."

    stop_name = board.departures[0].stop_area_name
    lines = [f"SL departures from {stop_name} ({len(board.departures)}):"]
    for message in board.stop_deviations:
        lines.append(f"  ! {message}")

    for d in board.departures:
        line = (
            f"  {d.display.ljust(8)} {d.transport_mode.ljust(5)}"
            f" {d.line_designation} -> {d.destination}"
        )
        if d.platform:
            line += f" (platform {d.platform})"
        if d.passenger_level and d.passenger_level != "UNKNOWN":
            line += f"  crowding {_lower(d.passenger_level)}"
        lines.append(line)
        if d.deviations:
            lines.append(f"           disruptions: {'; '.join(d.deviations)}")

    return "\n".join(lines)


def format_deviations(deviations: tuple[Deviation, ...], context: str = "") -> str:
    if not deviations:
        if context:
            return f"No service deviations found for {context}."
        return "No active service deviations."

    scope = f" for {context}" if context else ""
    lines = [f"Service deviations{scope} ({len(deviations)}):"]
    for d in deviations:
        categories = f" [{', '.join(d.categories)}]" if d.categories else ""
        lines.append("")
        lines.append(f"  {d.header}{categories}")
        lines.append(f"    {' '.join(d.details.split())}")
        if d.stop_areas:
            lines.append(f"    affects: {', '.join(d.stop_areas)}")
        if d.lines:
            lines.append(f"    lines: {', '.join(d.lines)}")
        if d.publish_upto:
            lines.append(f"    until: {d.publish_upto[:16].replace('T', ' ')}")
        if d.weblink:
            lines.append(f"    {d.weblink}")

    return "\n".join(lines)


def format_vehicle_positions(
    vehicles: tuple[VehiclePosition, ...], operator_name: str, total: int
) -> str:
    """Render raw feed vehicles; `total` is the feed size before any limit."""

    if not vehicles:
        return f"No active vehicles for {operator_name}."

    lines = [f"Vehicle positions for {operator_name} ({_shown(len(vehicles), total)}):"]
    for v in vehicles:
        desc = v.vehicle
        label = (desc.label or desc.id) if desc else None
        route = v.trip.route_id if v.trip and v.trip.route_id else _DASH
        head = f"  route {route}  {label or v.id}"
        if desc and desc.license_plate:
            head += f" ({desc.license_plate})"
        if v.current_status:
            head += f" [{v.current_status}]"
        if v.trip and v.trip.schedule_relationship != "SCHEDULED":
            head += f" {v.trip.schedule_relationship}"
        lines.append(head)

        pos = v.position
        if pos is not None:
            where = f"    at {pos.latitude:.4f}, {pos.longitude:.4f}"
            if pos.bearing is not None:
                where += f"  bearing {pos.bearing:g}°"
            if pos.speed is not None and pos.speed >= 0:
                where += f"  {round(pos.speed * 3.6)} km/h"
            if pos.odometer is not None:
                where += f"  odometer {pos.odometer / 1000:.1f} km"
            lines.append(where)

        if v.stop_id:
            seq = (
                f" (seq {v.current_stop_sequence})"
                if v.current_stop_sequence is not None
                else ""
            )
            lines.append(f"    stop {v.stop_id}{seq}")
        if v.occupancy_status:
            pct = (
                f" ({v.occupancy_percentage}%)"
                if v.occupancy_percentage is not None
                else ""
            )
            lines.append(f"    occupancy {_lower(v.occupancy_status)}{pct}")
        if v.congestion_level:
            lines.append(f"    congestion {_lower(v.congestion_level)}")
        if v.timestamp:
            lines.append(f"    updated {_clock(v.timestamp)}")

    return "\n".join(lines)


def _delay(event: StopTimeEvent | None) -> int | None:
    return event.delay if event is not None else None


def format_trip_updates(
    updates: tuple[TripUpdate, ...], operator_name: str, total: int
) -> str:
    if not updates:
        return f"No active trip updates for {operator_name}."

    lines = [f"Trip updates for {operator_name} ({_shown(len(updates), total)}):"]
    for tu in updates:
        trip = tu.trip
        head = f"  route {trip.route_id or _DASH}  trip {trip.trip_id or _DASH}"
        if trip.schedule_relationship != "SCHEDULED":
            head += f" [{trip.schedule_relationship}]"
        if tu.delay is not None:
            head += f"  {_minutes(tu.delay)}"
        lines.append(head)

        if tu.vehicle is not None:
            lines.append(f"    vehicle {tu.vehicle.label or tu.vehicle.id or _DASH}")
        if trip.start_time:
            d = trip.start_date or ""
            date = f"{d[:4]}-{d[4:6]}-{d[6:8]} " if len(d) == 8 else ""
            lines.append(f"    departs {date}{trip.start_time}")

        skipped = [
            s for s in tu.stop_time_updates if s.schedule_relationship == "SKIPPED"
        ]
        if skipped:
            ids = ", ".join(s.stop_id or f"#{s.stop_sequence}" for s in skipped)
            lines.append(f"    skipped stops: {ids}")

        scheduled = [
            s for s in tu.stop_time_updates if s.schedule_relationship == "SCHEDULED"
        ]
        late = [
            d
            for s in scheduled
            if (d := max(_delay(s.arrival) or 0, _delay(s.departure) or 0)) > 0
        ]
        if late:
            lines.append(f"    {len(late)} stop(s) delayed, max {_minutes(max(late))}")

        if scheduled:
            nxt = scheduled[0]
            label = nxt.stop_id or f"stop #{nxt.stop_sequence}"
            d = _delay(nxt.arrival)
            if d is None:
                d = _delay(nxt.departure)
            delay = f" ({_minutes(d)})" if d is not None else ""
            lines.append(f"    next {label}{delay}")

    return "\n".join(lines)


def format_service_alerts(alerts: tuple[ServiceAlert, ...], operator_name: str) -> str:
    if not alerts:
        return f"No active service alerts for {operator_name}."

    lines = [f"Service alerts for {operator_name} ({len(alerts)}):"]
    for a in alerts:
        effect = f" [{a.effect}]" if a.effect != "UNKNOWN_EFFECT" else ""
        lines.append("")
        lines.append(f"  {a.header or '(no title)'}{effect}")
        if a.description:
            lines.append(f"    {' '.join(a.description.split())}")
        if a.cause != "UNKNOWN_CAUSE":
            lines.append(f"    cause: {_lower(a.cause)}")

        entities = a.informed_entities
        routes = list(dict.fromkeys(e.route_id for e in entities if e.route_id))
        stops = list(dict.fromkeys(e.stop_id for e in entities if e.stop_id))
        if routes:
            lines.append(f"    routes: {', '.join(routes)}")
        if stops:
            lines.append(f"    stops: {', '.join(stops)}")

        if a.active_periods:
            period = a.active_periods[0]
            start = _date(period.start) if period.start else "?"
            end = _date(period.end) if period.end else "ongoing"
            lines.append(f"    period: {start} -> {end}")
        if a.url:
            lines.append(f"    {a.url}")

    return "\n".join(lines)


def format_stop_groups(groups: tuple[StopGroup, ...], query: str) -> str:
    if not groups:
        return f'No stops found matching "{query}".'

    lines = [f"Found {len(groups)} stop group(s):"]
    for g in groups:
        modes = ", ".join(g.transport_modes) or _DASH
        lines.append(
            f"  {g.name} (ID: {g.id})  {g.area_type}  {modes}"
            f"  {g.average_daily_stop_times:.0f} departures/day"
        )
        for s in g.stops:
            lines.append(f"    {s.name} ({s.id})  {s.lat:.5f}, {s.lon:.5f}")
    return "\n".join(lines)


def _alert_text(a: TimetableAlert) -> str:
    return f"{a.header}: {a.details}" if a.details else a.header


def format_timetable(timetable: Timetable) -> str:
    kind = timetable.kind
    if not timetable.calls:
        return f"No {kind} found for stop area {timetable.area_id}."

    stop = timetable.stop_name or timetable.area_id
    preposition = "from" if kind == "departures" else "at"
    lines = [f"{kind.capitalize()} {preposition} {stop} ({len(timetable.calls)}):"]
    for alert in timetable.stop_alerts:
        lines.append(f"  ! {_alert_text(alert)}")

    for c in timetable.calls:
        # Upstream times are local: YYYY-MM-DDTHH:MM:SS.
        head = f"  {c.realtime[11:16]}"
        if c.delay > 0:
            head += f" ({_minutes(c.delay)} late)"
        if c.canceled:
            head += " [CANCELED]"
        head += f"  {c.transport_mode} {c.line_designation} -> {c.direction}"
        if c.platform:
            head += f"  platform {c.platform}"
        if not c.is_realtime:
            head += " (scheduled only)"
        lines.append(head)

        line_name = f"{c.line_name} | " if c.line_name else ""
        lines.append(f"      {line_name}scheduled {c.scheduled[11:16]} at {c.stop_name}")
        if c.alerts:
            lines.append(f"      alerts: {'; '.join(a.header for a in c.alerts)}")

    return "\n".join(lines)
