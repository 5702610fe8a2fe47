from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import quote

import httpx
from pydantic import TypeAdapter

from transit_se.adapters.http_json import get_json
from transit_se.adapters.trafiklab.schemas import (
    ARRIVALS_ADAPTER,
    DEPARTURES_ADAPTER,
    STOP_LOOKUP_ADAPTER,
    TlAlertPayload,
    TlCallPayload,
    TlStopLookupPayload,
    TlTimetableStopPayload,
)
from transit_se.adapters.usage_counter import UsageCounter
from transit_se.domain.exceptions import ApiKeyMissingError, InvalidArgumentError
from transit_se.domain.models import (
    StopGroup,
    StopGroupMember,
    Timetable,
    TimetableAlert,
    TimetableCall,
    UsageStats,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://realtime-api.trafiklab.se/v1"

# Timetable lookups take local time at minute precision.
_TIME_RE = re.compile(r"^\d{4}-\d{2}-\d{2}T\d{2}:\d{2}$")


def _alert(a: TlAlertPayload) -> TimetableAlert:
    return TimetableAlert(header=a.header, details=a.details, type=a.type)


def _call(c: TlCallPayload) -> TimetableCall:
    platform = c.realtime_platform or c.scheduled_platform
    return TimetableCall(
        scheduled=c.scheduled,
        realtime=c.realtime,
        delay=c.delay,
        canceled=c.canceled,
        is_realtime=c.is_realtime,
        line_designation=c.route.designation,
        transport_mode=c.route.transport_mode,
        direction=c.route.direction,
        stop_name=c.stop.name,
        line_name=c.route.name or None,
        origin=c.route.origin.name if c.route.origin else None,
        destination=c.route.destination.name if c.route.destination else None,
        trip_id=c.trip.trip_id if c.trip else None,
        platform=platform.designation if platform else None,
        alerts=tuple(_alert(a) for a in c.alerts),
    )


def _stop_groups(payload: TlStopLookupPayload) -> tuple[StopGroup, ...]:
    return tuple(
        StopGroup(
            id=g.id,
            name=g.name,
            area_type=g.area_type,
            average_daily_stop_times=g.average_daily_stop_times,
            transport_modes=tuple(g.transport_modes),
            stops=tuple(
                StopGroupMember(id=s.id, name=s.name, lat=s.lat, lon=s.lon)
                for s in g.stops
            ),
        )
        for g in payload.stop_groups
    )


def _timetable(
    area_id: str,
    kind: str,
    stops: list[TlTimetableStopPayload],
    calls: list[TlCallPayload],
) -> Timetable:
    return Timetable(
        area_id=area_id,
        kind=kind,
        calls=tuple(_call(c) for c in calls),
        stop_name=stops[0].name if stops else None,
        stop_alerts=tuple(_alert(a) for s in stops for a in s.alerts),
    )


@dataclass(slots=True)
class HttpTrafiklabRealtimeClient:
    """Client for the Trafiklab Realtime APIs (Stop Lookup and Timetables).

    Covers every Swedish operator. Timetables return 60 minutes of data from
    the requested time.

    Env vars:
      - TRAFIKLAB_API_KEY: Trafiklab Realtime API key (required)
      - TRAFIKLAB_REALTIME_BASE_URL: API base URL (default: Trafiklab endpoint)
      - TRAFIKLAB_REALTIME_TIMEOUT_S: request timeout (default 10)
    """

    api_key: str | None = None
    base_url: str | None = None
    timeout_s: float | None = None
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)

    _usage: UsageCounter = field(default_factory=UsageCounter, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.api_key is None:
            self.api_key = os.getenv("TRAFIKLAB_API_KEY")
        if not self.api_key:
            raise ApiKeyMissingError("TRAFIKLAB_API_KEY")
        if self.base_url is None:
            self.base_url = os.getenv("TRAFIKLAB_REALTIME_BASE_URL") or DEFAULT_BASE_URL
        self.base_url = self.base_url.rstrip("/")
        if self.timeout_s is None:
            self.timeout_s = float(os.getenv("TRAFIKLAB_REALTIME_TIMEOUT_S") or 10.0)

    async def search_stops(self, query: str) -> tuple[StopGroup, ...]:
        """Stop groups matching `query`, busiest first."""

        if not query.strip():
            raise InvalidArgumentError("Stop search needs at least one character")
        payload = await self._get_json(
            f"/stops/name/{quote(query.strip(), safe='')}", STOP_LOOKUP_ADAPTER
        )
        return _stop_groups(payload)

    async def list_stops(self) -> tuple[StopGroup, ...]:
        payload = await self._get_json("/stops/list", STOP_LOOKUP_ADAPTER)
        return _stop_groups(payload)

    async def get_departures(self, area_id: str, time: str | None = None) -> Timetable:
        payload = await self._get_json(
            self._timetable_path("departures", area_id, time), DEPARTURES_ADAPTER
        )
        return _timetable(area_id, "departures", payload.stops, payload.departures)

    async def get_arrivals(self, area_id: str, time: str | None = None) -> Timetable:
        payload = await self._get_json(
            self._timetable_path("arrivals", area_id, time), ARRIVALS_ADAPTER
        )
        return _timetable(area_id, "arrivals", payload.stops, payload.arrivals)

    def get_usage(self) -> UsageStats:
        return self._usage.snapshot()

    @staticmethod
    def _timetable_path(kind: str, area_id: str, time: str | None) -> str:
        if not area_id.isdigit():
            raise InvalidArgumentError(f"Area id must be numeric, got {area_id!r}")
        if time is None:
            return f"/{kind}/{area_id}"
        if not _TIME_RE.match(time):
            raise InvalidArgumentError(f"Time must be YYYY-MM-DDTHH:MM, got {time!r}")
        return f"/{kind}/{area_id}/{time}"

    async def _get_json(self, path: str, adapter: TypeAdapter[Any]) -> Any:
        return await get_json(
            base_url=self.base_url,
            path=path,
            adapter=adapter,
            timeout_s=self.timeout_s,
            transport=self.transport,
            usage=self._usage,
            params=[("key", self.api_key)],
        )
