from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Any

import httpx
from pydantic import TypeAdapter

from transit_se.adapters.http_json import QueryParams, get_json
from transit_se.adapters.sl.schemas import (
    DEPARTURES_ADAPTER,
    LINES_ADAPTER,
    SITES_ADAPTER,
    STOP_POINTS_ADAPTER,
    TRANSPORT_AUTHORITIES_ADAPTER,
    SlDeparturePayload,
)
from transit_se.adapters.usage_counter import UsageCounter
from transit_se.app.ports.output import ISiteDirectory
from transit_se.app.services.single_flight import SingleFlight
from transit_se.domain.models import (
    Departure,
    DepartureBoard,
    Line,
    Site,
    StopPoint,
    TransportAuthority,
    UsageStats,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://transport.integration.sl.se/v1"

# SL's own authority id in the /lines filter.
SL_TRANSPORT_AUTHORITY_ID = 1

_LINE_GROUPS = ("metro", "tram", "train", "bus", "ship", "ferry", "taxi")


@dataclass(frozen=True, slots=True)
class _SiteIndex:
    sites: tuple[Site, ...]
    by_id: dict[int, Site]
    by_name: dict[str, Site]


def build_site_index(sites: list[Site] | tuple[Site, ...]) -> _SiteIndex:
    ordered = tuple(sorted(sites, key=lambda s: s.id))
    by_id: dict[int, Site] = {}
    by_name: dict[str, Site] = {}
    for s in ordered:
        by_id[s.id] = s
        # Later (higher id) entries win when two sites share a name.
        by_name[s.name.lower()] = s
    return _SiteIndex(sites=ordered, by_id=by_id, by_name=by_name)


def _departure(d: SlDeparturePayload) -> Departure:
    return Departure(
        display=d.display,
        destination=d.destination,
        direction_code=d.direction_code,
        state=d.state,
        scheduled=d.scheduled,
        expected=d.expected,
        line_id=d.line.id,
        line_designation=d.line.designation,
        transport_mode=d.line.transport_mode,
        stop_area_name=d.stop_area.name,
        group_of_lines=d.line.group_of_lines,
        via=d.via,
        platform=d.stop_point.designation or None,
        passenger_level=d.journey.passenger_level,
        deviations=tuple(n.message for n in d.deviations),
    )


@dataclass(slots=True)
class HttpSlTransportClient(ISiteDirectory):
    """Client for the SL Transport API. No API key needed.

    Env vars:
      - SL_TRANSPORT_BASE_URL: API base URL (default: SL integration endpoint)
      - SL_TRANSPORT_TIMEOUT_S: request timeout (default 10)

    The site directory is fetched once per instance and reused for all
    site lookups. A failed fetch is not remembered.
    """

    base_url: str | None = None
    timeout_s: float | None = None
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)

    _usage: UsageCounter = field(default_factory=UsageCounter, init=False, repr=False)
    _sites: SingleFlight[_SiteIndex] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.base_url is None:
            self.base_url = os.getenv("SL_TRANSPORT_BASE_URL") or DEFAULT_BASE_URL
        self.base_url = self.base_url.rstrip("/")
        if self.timeout_s is None:
            self.timeout_s = float(os.getenv("SL_TRANSPORT_TIMEOUT_S") or 10.0)
        self._sites = SingleFlight(self._load_site_index)

    # Raw endpoints

    async def get_sites(self) -> tuple[Site, ...]:
        """All sites that carry coordinates, in API order."""

        payload = await self._get_json("/sites", SITES_ADAPTER)
        return tuple(
            Site(id=s.id, name=s.name, lat=s.lat, lon=s.lon)
            for s in payload
            if s.lat is not None and s.lon is not None
        )

    async def get_stop_points(self) -> tuple[StopPoint, ...]:
        payload = await self._get_json("/stop-points", STOP_POINTS_ADAPTER)
        return tuple(
            StopPoint(
                id=sp.id,
                name=sp.name,
                lat=sp.lat,
                lon=sp.lon,
                designation=sp.designation or None,
                stop_area_type=sp.stop_area.type,
            )
            for sp in payload
        )

    async def get_departures(self, site_id: int) -> DepartureBoard:
        """Upcoming departures from a site, in the order SL returns them."""

        payload = await self._get_json(f"/sites/{site_id}/departures", DEPARTURES_ADAPTER)
        return DepartureBoard(
            site_id=site_id,
            departures=tuple(_departure(d) for d in payload.departures),
            stop_deviations=tuple(n.message for n in payload.stop_deviations),
        )

    async def get_lines(
        self, transport_authority_id: int = SL_TRANSPORT_AUTHORITY_ID
    ) -> tuple[Line, ...]:
        """All lines of one transport authority, grouped metro first, taxi last."""

        payload = await self._get_json(
            "/lines",
            LINES_ADAPTER,
            params=[("transport_authority_id", transport_authority_id)],
        )
        return tuple(
            Line(
                id=ln.id,
                name=ln.name,
                designation=ln.designation,
                transport_mode=ln.transport_mode,
                group_of_lines=ln.group_of_lines or None,
            )
            for group in _LINE_GROUPS
            for ln in getattr(payload, group)
        )

    async def get_transport_authorities(self) -> tuple[TransportAuthority, ...]:
        payload = await self._get_json(
            "/transport-authorities", TRANSPORT_AUTHORITIES_ADAPTER
        )
        return tuple(
            TransportAuthority(
                id=a.id, name=a.name, formal_name=a.formal_name, code=a.code
            )
            for a in payload
        )

    # Cached site lookups

    async def get_cached_sites(self) -> tuple[Site, ...]:
        index = await self._sites.get()
        return index.sites

    async def get_site_by_id(self, site_id: int) -> Site | None:
        index = await self._sites.get()
        return index.by_id.get(site_id)

    async def get_site_by_name(self, name: str) -> Site | None:
        index = await self._sites.get()
        return index.by_name.get(name.lower())

    async def search_sites_by_name(self, query: str) -> tuple[Site, ...]:
        index = await self._sites.get()
        needle = query.lower()
        return tuple(s for s in index.sites if needle in s.name.lower())

    def get_usage(self) -> UsageStats:
        return self._usage.snapshot()

    async def _load_site_index(self) -> _SiteIndex:
        index = build_site_index(await self.get_sites())
        logger.info("Cached %d SL sites", len(index.sites))
        return index

    async def _get_json(
        self, path: str, adapter: TypeAdapter[Any], params: QueryParams = ()
    ) -> Any:
        return await get_json(
            base_url=self.base_url,
            path=path,
            adapter=adapter,
            timeout_s=self.timeout_s,
            transport=self.transport,
            usage=self._usage,
            params=params,
        )
