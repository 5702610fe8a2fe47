from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field

import httpx
from google.protobuf.message import DecodeError
from google.transit import gtfs_realtime_pb2

from transit_se.adapters.usage_counter import UsageCounter
from transit_se.app.ports.output import IVehiclePositionSource
from transit_se.domain.exceptions import ApiKeyMissingError, ApiResponseError, RemoteError
from transit_se.domain.models import (
    ActivePeriod,
    InformedEntity,
    Position,
    ServiceAlert,
    StopTimeEvent,
    StopTimeUpdate,
    TripDescriptor,
    TripUpdate,
    UsageStats,
    VehicleDescriptor,
    VehiclePosition,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://opendata.samtrafiken.se/gtfs-rt-sweden"

_TRIP_SCHEDULE_RELATIONSHIP = {
    0: "SCHEDULED",
    1: "ADDED",
    2: "UNSCHEDULED",
    3: "CANCELED",
    5: "REPLACEMENT",
    6: "DUPLICATED",
}

_STOP_SCHEDULE_RELATIONSHIP = {
    0: "SCHEDULED",
    1: "SKIPPED",
    2: "NO_DATA",
    3: "UNSCHEDULED",
}

_VEHICLE_STOP_STATUS = {
    0: "INCOMING_AT",
    1: "STOPPED_AT",
    2: "IN_TRANSIT_TO",
}

_CONGESTION_LEVEL = {
    0: "UNKNOWN_CONGESTION_LEVEL",
    1: "RUNNING_SMOOTHLY",
    2: "STOP_AND_GO",
    3: "CONGESTION",
    4: "SEVERE_CONGESTION",
}

_OCCUPANCY_STATUS = {
    0: "EMPTY",
    1: "MANY_SEATS_AVAILABLE",
    2: "FEW_SEATS_AVAILABLE",
    3: "STANDING_ROOM_ONLY",
    4: "CRUSHED_STANDING_ROOM_ONLY",
    5: "FULL",
    6: "NOT_ACCEPTING_PASSENGERS",
    7: "NO_DATA_AVAILABLE",
    8: "NOT_BOARDABLE",
}

_ALERT_CAUSE = {
    1: "UNKNOWN_CAUSE",
    2: "OTHER_CAUSE",
    3: "TECHNICAL_PROBLEM",
    4: "STRIKE",
    5: "DEMONSTRATION",
    6: "ACCIDENT",
    7: "HOLIDAY",
    8: "WEATHER",
    9: "MAINTENANCE",
    10: "CONSTRUCTION",
    11: "POLICE_ACTIVITY",
    12: "MEDICAL_EMERGENCY",
}

_ALERT_EFFECT = {
    1: "NO_SERVICE",
    2: "REDUCED_SERVICE",
    3: "SIGNIFICANT_DELAYS",
    4: "DETOUR",
    5: "ADDITIONAL_SERVICE",
    6: "MODIFIED_SERVICE",
    7: "OTHER_EFFECT",
    8: "UNKNOWN_EFFECT",
    9: "STOP_MOVED",
    10: "NO_EFFECT",
    11: "ACCESSIBILITY_ISSUE",
}

_ALERT_LANGUAGE = "sv"


@dataclass(slots=True)
class HttpGtfsRealtimeVehicleProvider(IVehiclePositionSource):
    """Fetches GTFS Sweden 3 realtime feeds over HTTP.

    Covers the VehiclePositions, TripUpdates and ServiceAlerts feeds of every
    operator in `GTFS_OPERATOR_NAMES`.

    Env vars:
      - TRAFIKLAB_GTFS_KEY: GTFS Sweden 3 API key (required)
      - GTFS_RT_BASE_URL: feed base URL (default: Samtrafiken open data)
      - GTFS_RT_TIMEOUT_S: request timeout (default 10)

    Notes:
      - Every call hits the network; feeds are never cached.
      - `transport` exists so tests can plug in `httpx.MockTransport`.
    """

    api_key: str | None = None
    base_url: str | None = None
    timeout_s: float | None = None
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)

    _usage: UsageCounter = field(default_factory=UsageCounter, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.api_key is None:
            self.api_key = os.getenv("TRAFIKLAB_GTFS_KEY")
        if not self.api_key:
            raise ApiKeyMissingError("TRAFIKLAB_GTFS_KEY")
        if self.base_url is None:
            self.base_url = os.getenv("GTFS_RT_BASE_URL") or DEFAULT_BASE_URL
        self.base_url = self.base_url.rstrip("/")
        if self.timeout_s is None:
            self.timeout_s = float(os.getenv("GTFS_RT_TIMEOUT_S") or 10.0)

    async def get_vehicle_positions(
        self, operator: str
    ) -> tuple[VehiclePosition, ...]:
        content = await self._fetch_feed(f"/{operator}/VehiclePositionsSweden.pb")
        return parse_vehicle_positions(content, endpoint=f"/{operator}")

    async def get_trip_updates(self, operator: str) -> tuple[TripUpdate, ...]:
        content = await self._fetch_feed(f"/{operator}/TripUpdatesSweden.pb")
        return parse_trip_updates(content, endpoint=f"/{operator}")

    async def get_service_alerts(self, operator: str) -> tuple[ServiceAlert, ...]:
        content = await self._fetch_feed(f"/{operator}/ServiceAlertsSweden.pb")
        return parse_service_alerts(content, endpoint=f"/{operator}")

    def get_usage(self) -> UsageStats:
        return self._usage.snapshot()

    async def _fetch_feed(self, path: str) -> bytes:
        self._usage.record(path)
        logger.debug("GET %s%s", self.base_url, path)

        try:
            async with httpx.AsyncClient(
                timeout=self.timeout_s, transport=self.transport
            ) as client:
                resp = await client.get(
                    f"{self.base_url}{path}", params={"key": self.api_key}
                )
        except httpx.HTTPError as e:
            # The key is in the query string; report only the path.
            raise RemoteError(
                f"Request to {path} failed: {e.__class__.__name__}", endpoint=path
            ) from e

        if resp.is_error:
            raise ApiResponseError(resp.status_code, path, resp.text or None)
        return resp.content


def _decode_feed(content: bytes, endpoint: str) -> gtfs_realtime_pb2.FeedMessage:
    feed = gtfs_realtime_pb2.FeedMessage()
    try:
        feed.ParseFromString(content)
    except DecodeError as e:
        raise RemoteError(
            f"Could not decode GTFS-RT feed from {endpoint}", endpoint=endpoint
        ) from e
    return feed


def parse_vehicle_positions(
    content: bytes, *, endpoint: str = ""
) -> tuple[VehiclePosition, ...]:
    feed = _decode_feed(content, endpoint)
    return tuple(
        _vehicle_position(ent.id, ent.vehicle)
        for ent in feed.entity
        if ent.HasField("vehicle")
    )


def parse_trip_updates(content: bytes, *, endpoint: str = "") -> tuple[TripUpdate, ...]:
    feed = _decode_feed(content, endpoint)
    return tuple(
        _trip_update(ent.id, ent.trip_update)
        for ent in feed.entity
        if ent.HasField("trip_update")
    )


def parse_service_alerts(
    content: bytes, *, endpoint: str = ""
) -> tuple[ServiceAlert, ...]:
    feed = _decode_feed(content, endpoint)
    return tuple(
        _service_alert(ent.id, ent.alert) for ent in feed.entity if ent.HasField("alert")
    )


def _timestamp(msg, name: str) -> int | None:
    # 0 means "not set" for GTFS-RT timestamps.
    if msg.HasField(name) and int(getattr(msg, name)) > 0:
        return int(getattr(msg, name))
    return None


def _trip_descriptor(t) -> TripDescriptor:
    return TripDescriptor(
        trip_id=t.trip_id or None,
        route_id=t.route_id or None,
        direction_id=int(t.direction_id) if t.HasField("direction_id") else None,
        start_time=t.start_time or None,
        start_date=t.start_date or None,
        schedule_relationship=_TRIP_SCHEDULE_RELATIONSHIP.get(
            int(t.schedule_relationship), "SCHEDULED"
        ),
    )


def _vehicle_descriptor(d) -> VehicleDescriptor | None:
    if not (d.id or d.label or d.license_plate):
        return None
    return VehicleDescriptor(
        id=d.id or None,
        label=d.label or None,
        license_plate=d.license_plate or None,
    )


def _vehicle_position(entity_id: str, v) -> VehiclePosition:
    position = None
    if v.HasField("position"):
        pos = v.position
        position = Position(
            latitude=float(pos.latitude),
            longitude=float(pos.longitude),
            bearing=float(pos.bearing) if pos.HasField("bearing") else None,
            speed=float(pos.speed) if pos.HasField("speed") else None,
            odometer=float(pos.odometer) if pos.HasField("odometer") else None,
        )

    trip = _trip_descriptor(v.trip) if v.HasField("trip") else None
    vehicle = _vehicle_descriptor(v.vehicle) if v.HasField("vehicle") else None

    current_status = None
    if v.HasField("current_status"):
        current_status = _VEHICLE_STOP_STATUS.get(int(v.current_status), "IN_TRANSIT_TO")

    congestion_level = None
    if v.HasField("congestion_level") and int(v.congestion_level) != 0:
        congestion_level = _CONGESTION_LEVEL.get(
            int(v.congestion_level), "UNKNOWN_CONGESTION_LEVEL"
        )

    occupancy_status = None
    if v.HasField("occupancy_status") and int(v.occupancy_status) not in (0, 7):
        occupancy_status = _OCCUPANCY_STATUS.get(
            int(v.occupancy_status), "NO_DATA_AVAILABLE"
        )

    occupancy_percentage = None
    if v.HasField("occupancy_percentage") and int(v.occupancy_percentage) != 0:
        occupancy_percentage = int(v.occupancy_percentage)

    return VehiclePosition(
        id=entity_id,
        position=position,
        vehicle=vehicle,
        trip=trip,
        stop_id=v.stop_id or None,
        current_stop_sequence=(
            int(v.current_stop_sequence) if v.current_stop_sequence else None
        ),
        current_status=current_status,
        timestamp=_timestamp(v, "timestamp"),
        congestion_level=congestion_level,
        occupancy_status=occupancy_status,
        occupancy_percentage=occupancy_percentage,
    )


def _stop_time_event(e) -> StopTimeEvent:
    return StopTimeEvent(
        delay=int(e.delay) if e.HasField("delay") else None,
        time=_timestamp(e, "time"),
        uncertainty=int(e.uncertainty) if e.uncertainty else None,
    )


def _stop_time_update(s) -> StopTimeUpdate:
    return StopTimeUpdate(
        schedule_relationship=_STOP_SCHEDULE_RELATIONSHIP.get(
            int(s.schedule_relationship), "SCHEDULED"
        ),
        stop_sequence=int(s.stop_sequence) if s.stop_sequence else None,
        stop_id=s.stop_id or None,
        arrival=_stop_time_event(s.arrival) if s.HasField("arrival") else None,
        departure=_stop_time_event(s.departure) if s.HasField("departure") else None,
    )


def _trip_update(entity_id: str, tu) -> TripUpdate:
    return TripUpdate(
        id=entity_id,
        trip=_trip_descriptor(tu.trip),
        stop_time_updates=tuple(_stop_time_update(s) for s in tu.stop_time_update),
        vehicle=_vehicle_descriptor(tu.vehicle) if tu.HasField("vehicle") else None,
        timestamp=_timestamp(tu, "timestamp"),
        delay=int(tu.delay) if tu.HasField("delay") and tu.delay else None,
    )


def _translated(ts) -> str | None:
    if not ts.translation:
        return None
    for t in ts.translation:
        if t.language == _ALERT_LANGUAGE:
            return t.text or None
    return ts.translation[0].text or None


def _informed_entity(e) -> InformedEntity:
    return InformedEntity(
        agency_id=e.agency_id or None,
        route_id=e.route_id or None,
        route_type=int(e.route_type) if e.HasField("route_type") else None,
        stop_id=e.stop_id or None,
        trip=_trip_descriptor(e.trip) if e.HasField("trip") else None,
    )


def _service_alert(entity_id: str, a) -> ServiceAlert:
    return ServiceAlert(
        id=entity_id,
        cause=_ALERT_CAUSE.get(int(a.cause), "UNKNOWN_CAUSE"),
        effect=_ALERT_EFFECT.get(int(a.effect), "UNKNOWN_EFFECT"),
        header=_translated(a.header_text),
        description=_translated(a.description_text),
        url=_translated(a.url),
        active_periods=tuple(
            ActivePeriod(start=_timestamp(p, "start"), end=_timestamp(p, "end"))
            for p in a.active_period
        ),
        informed_entities=tuple(_informed_entity(e) for e in a.informed_entity),
    )
