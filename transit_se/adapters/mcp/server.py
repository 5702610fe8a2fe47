"""MCP server for Swedish public transit.

Tools:
  - sl_search_sites, sl_departures, sl_deviations: always available
    (SL Transport and SL Deviations need no key)
  - gtfs_vehicle_positions, combined_nearby_vehicles: only with a vehicle
    source, i.e. when TRAFIKLAB_GTFS_KEY is set
  - gtfs_trip_updates, gtfs_service_alerts: only with a GTFS client
  - trafiklab_search_stops, trafiklab_get_departures, trafiklab_get_arrivals:
    only when TRAFIKLAB_API_KEY is set
  - api_usage: request counts for the clients in this process
"""

from __future__ import annotations

import logging
import os
from typing import Iterable, Protocol

from mcp.server.fastmcp import FastMCP

from transit_se.adapters.mcp.formatting import (
    format_departures,
    format_deviations,
    format_nearby_vehicles,
    format_service_alerts,
    format_sites,
    format_stop_groups,
    format_timetable,
    format_trip_updates,
    format_usage,
    format_vehicle_positions,
)
from transit_se.adapters.realtime.http_gtfs_realtime_vehicle_provider import (
    HttpGtfsRealtimeVehicleProvider,
)
from transit_se.adapters.sl.http_sl_deviations_client import HttpSlDeviationsClient
from transit_se.adapters.sl.http_sl_transport_client import HttpSlTransportClient
from transit_se.adapters.trafiklab.http_trafiklab_realtime_client import (
    HttpTrafiklabRealtimeClient,
)
from transit_se.app.ports.output import IVehiclePositionSource
from transit_se.app.services.nearby_vehicles_service import NearbyVehiclesService
from transit_se.domain.exceptions import InvalidArgumentError, TransitError
from transit_se.domain.models import (
    GTFS_OPERATOR_NAMES,
    NearbyVehiclesQuery,
    UsageStats,
    operator_name,
)

logger = logging.getLogger(__name__)

SERVER_NAME = "transit-se"


class _UsageReporter(Protocol):
    def get_usage(self) -> UsageStats: ...


def _error_text(tool: str, exc: TransitError) -> str:
    logger.error("Error in tool %s: %s", tool, exc)
    return f"Error: {exc}"


def combined_usage(clients: Iterable[_UsageReporter]) -> UsageStats:
    """Sum usage over distinct client instances; a shared client counts once."""

    seen: set[int] = set()
    total = 0
    by_endpoint: dict[str, int] = {}
    for client in clients:
        if id(client) in seen:
            continue
        seen.add(id(client))
        usage = client.get_usage()
        total += usage.total_requests
        for endpoint, count in usage.by_endpoint.items():
            by_endpoint[endpoint] = by_endpoint.get(endpoint, 0) + count
    return UsageStats(total_requests=total, by_endpoint=by_endpoint)


def _deviation_context(
    transport_modes: list[str], line_ids: list[int], site_ids: list[int]
) -> str:
    parts: list[str] = []
    if transport_modes:
        parts.append("/".join(m.upper() for m in transport_modes))
    if line_ids:
        parts.append("lines " + ", ".join(map(str, line_ids)))
    if site_ids:
        parts.append("sites " + ", ".join(map(str, site_ids)))
    return " ".join(parts)


def _gtfs_operator(operator: str) -> str:
    operator = operator.strip().lower()
    if operator not in GTFS_OPERATOR_NAMES:
        raise InvalidArgumentError(
            f"Unknown operator {operator!r}; expected one of "
            + ", ".join(GTFS_OPERATOR_NAMES)
        )
    return operator


def create_server(
    sl_client: HttpSlTransportClient | None = None,
    deviations_client: HttpSlDeviationsClient | None = None,
    vehicle_source: IVehiclePositionSource | None = None,
    nearby_service: NearbyVehiclesService | None = None,
    gtfs_client: HttpGtfsRealtimeVehicleProvider | None = None,
    trafiklab_client: HttpTrafiklabRealtimeClient | None = None,
) -> FastMCP:
    """Build the MCP server and register tools for the configured clients.

    Without an explicit `vehicle_source`, the nearby service's source is
    used, or one is built when a GTFS key is present in the environment.
    Without a vehicle source the position tools are not registered; without
    a GTFS client (given, or the vehicle source itself) neither are the trip
    update and alert tools. Trafiklab tools need a client or
    TRAFIKLAB_API_KEY.
    """

    sl = sl_client or HttpSlTransportClient()
    deviations = deviations_client or HttpSlDeviationsClient()
    if vehicle_source is None:
        if nearby_service is not None:
            vehicle_source = nearby_service.vehicle_source
        elif gtfs_client is not None:
            vehicle_source = gtfs_client
        elif os.getenv("TRAFIKLAB_GTFS_KEY"):
            vehicle_source = HttpGtfsRealtimeVehicleProvider()
    if gtfs_client is None and isinstance(
        vehicle_source, HttpGtfsRealtimeVehicleProvider
    ):
        gtfs_client = vehicle_source
    if trafiklab_client is None and os.getenv("TRAFIKLAB_API_KEY"):
        trafiklab_client = HttpTrafiklabRealtimeClient()
    if nearby_service is None and vehicle_source is not None:
        nearby_service = NearbyVehiclesService(
            vehicle_source=vehicle_source, site_directory=sl
        )

    server = FastMCP(
        SERVER_NAME,
        instructions=(
            "Stockholm (SL) sites, departures and service deviations, live vehicle "
            "positions, trip updates and alerts from GTFS Sweden 3, and nationwide "
            "stop search and timetables from Trafiklab Realtime."
        ),
    )

    @server.tool(name="sl_search_sites")
    async def sl_search_sites(query: str, limit: int = 10) -> str:
        """Search SL sites (stations/stop areas) by name, case-insensitive.

        Args:
            query: Full or partial site name, e.g. "Slussen" or "central".
            limit: Maximum number of sites to list (1-100).
        """
        limit = max(1, min(100, limit))
        try:
            sites = await sl.search_sites_by_name(query)
        except TransitError as e:
            return _error_text("sl_search_sites", e)
        return format_sites(sites[:limit], query)

    @server.tool(name="sl_departures")
    async def sl_departures(site_id: int) -> str:
        """Upcoming departures from an SL site, with platform and disruptions.

        Args:
            site_id: SL site ID, e.g. 9001 for T-Centralen. Use sl_search_sites
                to find it.
        """
        try:
            board = await sl.get_departures(site_id)
        except TransitError as e:
            return _error_text("sl_departures", e)
        return format_departures(board)

    @server.tool(name="sl_deviations")
    async def sl_deviations(
        transport_modes: list[str] | None = None,
        line_ids: list[int] | None = None,
        site_ids: list[int] | None = None,
        future: bool = False,
    ) -> str:
        """Current SL service disruptions, optionally filtered.

        Args:
            transport_modes: Any of BUS, METRO, TRAM, TRAIN, SHIP, FERRY, TAXI.
            line_ids: SL line IDs, e.g. [17, 18, 19] for the green metro line.
            site_ids: SL site IDs.
            future: Also include planned disruptions that have not started.
        """
        modes = transport_modes or []
        lines = line_ids or []
        sites = site_ids or []
        try:
            found = await deviations.get_deviations(
                future=future,
                site_ids=sites,
                line_ids=lines,
                transport_modes=modes,
            )
        except TransitError as e:
            return _error_text("sl_deviations", e)
        return format_deviations(found, _deviation_context(modes, lines, sites))

    if vehicle_source is not None and nearby_service is not None:
        source = vehicle_source
        service = nearby_service

        @server.tool(name="gtfs_vehicle_positions")
        async def gtfs_vehicle_positions(operator: str = "sl", limit: int = 50) -> str:
            """Live vehicle positions for a Swedish operator from GTFS Sweden 3.

            Args:
                operator: Operator abbreviation, e.g. "sl", "ul", "skane", "otraf".
                limit: Maximum number of vehicles to list (1-500).
            """
            limit = max(1, min(500, limit))
            try:
                operator = _gtfs_operator(operator)
                vehicles = await source.get_vehicle_positions(operator)
            except TransitError as e:
                return _error_text("gtfs_vehicle_positions", e)
            return format_vehicle_positions(
                vehicles[:limit], operator_name(operator), total=len(vehicles)
            )

        @server.tool(name="combined_nearby_vehicles")
        async def combined_nearby_vehicles(
            site_name: str | None = None,
            site_id: int | None = None,
            latitude: float | None = None,
            longitude: float | None = None,
            radius_km: float | None = None,
        ) -> str:
            """Find live vehicles near a Stockholm location, classified by mode.

            Give one location: site_id, site_name, or latitude + longitude.
            Precedence when several are given: site_id > site_name > coordinates.

            Args:
                site_name: SL site name, e.g. "T-Centralen".
                site_id: SL site ID, e.g. 9001.
                latitude: WGS84 latitude; the nearest SL site labels the result.
                longitude: WGS84 longitude, paired with latitude.
                radius_km: Search radius in km, clamped to 0-20 (default 1.0).
            """
            try:
                result = await service.get_nearby_vehicles(
                    NearbyVehiclesQuery(
                        site_id=site_id,
                        site_name=site_name,
                        latitude=latitude,
                        longitude=longitude,
                        radius_km=radius_km,
                    )
                )
            except TransitError as e:
                return _error_text("combined_nearby_vehicles", e)
            return format_nearby_vehicles(result)
    else:
        logger.warning(
            "TRAFIKLAB_GTFS_KEY not set; gtfs_vehicle_positions and "
            "combined_nearby_vehicles are disabled"
        )

    if gtfs_client is not None:
        gtfs = gtfs_client

        @server.tool(name="gtfs_trip_updates")
        async def gtfs_trip_updates(operator: str = "sl", limit: int = 50) -> str:
            """Real-time delays, cancellations and skipped stops per trip.

            Args:
                operator: Operator abbreviation, e.g. "sl", "ul", "skane", "otraf".
                limit: Maximum number of trips to list (1-500).
            """
            limit = max(1, min(500, limit))
            try:
                operator = _gtfs_operator(operator)
                updates = await gtfs.get_trip_updates(operator)
            except TransitError as e:
                return _error_text("gtfs_trip_updates", e)
            return format_trip_updates(
                updates[:limit], operator_name(operator), total=len(updates)
            )

        @server.tool(name="gtfs_service_alerts")
        async def gtfs_service_alerts(operator: str = "sl") -> str:
            """Active service alerts for a Swedish operator from GTFS Sweden 3.

            Args:
                operator: Operator abbreviation, e.g. "sl", "ul", "skane", "otraf".
            """
            try:
                operator = _gtfs_operator(operator)
                alerts = await gtfs.get_service_alerts(operator)
            except TransitError as e:
                return _error_text("gtfs_service_alerts", e)
            return format_service_alerts(alerts, operator_name(operator))

    if trafiklab_client is not None:
        trafiklab = trafiklab_client

        @server.tool(name="trafiklab_search_stops")
        async def trafiklab_search_stops(query: str, limit: int = 10) -> str:
            """Search stops across all Swedish operators by name.

            Args:
                query: Full or partial stop name, e.g. "Uppsala C".
                limit: Maximum number of stop groups to list (1-100).
            """
            limit = max(1, min(100, limit))
            try:
                groups = await trafiklab.search_stops(query)
            except TransitError as e:
                return _error_text("trafiklab_search_stops", e)
            return format_stop_groups(groups[:limit], query)

        @server.tool(name="trafiklab_get_departures")
        async def trafiklab_get_departures(area_id: str, time: str | None = None) -> str:
            """Departures for the next hour from any Swedish stop area.

            Args:
                area_id: Stop group ID from trafiklab_search_stops, e.g. "740000001".
                time: Local start time as YYYY-MM-DDTHH:MM (default: now).
            """
            try:
                timetable = await trafiklab.get_departures(area_id, time)
            except TransitError as e:
                return _error_text("trafiklab_get_departures", e)
            return format_timetable(timetable)

        @server.tool(name="trafiklab_get_arrivals")
        async def trafiklab_get_arrivals(area_id: str, time: str | None = None) -> str:
            """Arrivals for the next hour at any Swedish stop area.

            Args:
                area_id: Stop group ID from trafiklab_search_stops, e.g. "740000001".
                time: Local start time as YYYY-MM-DDTHH:MM (default: now).
            """
            try:
                timetable = await trafiklab.get_arrivals(area_id, time)
            except TransitError as e:
                return _error_text("trafiklab_get_arrivals", e)
            return format_timetable(timetable)
    else:
        logger.warning("TRAFIKLAB_API_KEY not set; trafiklab_* tools are disabled")

    clients: list[_UsageReporter] = []
    if vehicle_source is not None:
        clients.append(vehicle_source)
    if nearby_service is not None:
        clients += [nearby_service.vehicle_source, nearby_service.site_directory]
    if gtfs_client is not None:
        clients.append(gtfs_client)
    if trafiklab_client is not None:
        clients.append(trafiklab_client)
    clients += [sl, deviations]

    @server.tool(name="api_usage")
    def api_usage() -> str:
        """Request counts per upstream endpoint since the server started."""
        return format_usage(combined_usage(clients))

    return server


def main() -> None:
    """Run the MCP server over stdio."""
    # stdout carries the protocol; logs go to stderr.
    logging.basicConfig(
        level=os.getenv("TRANSIT_SE_LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Starting %s MCP server", SERVER_NAME)
    create_server().run(transport="stdio")


if __name__ == "__main__":
    main()
