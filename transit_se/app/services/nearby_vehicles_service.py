from __future__ import annotations

import asyncio
import logging
import os
import time
from dataclasses import dataclass, field

from transit_se.app.ports.output import ISiteDirectory, IVehiclePositionSource
from transit_se.domain.algorithms.nearby_matching import (
    active_modes,
    clamp_radius_km,
    match_nearby_vehicles,
)
from transit_se.domain.models import (
    NearbyVehiclesQuery,
    NearbyVehiclesResult,
    UsageStats,
    merge_usage,
)

from .site_resolver import SiteResolver
from .stop_point_cache import StopPointCache

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NearbyVehiclesService:
    """Finds live vehicles near a Stockholm location, classified by transport mode.

    Vehicle positions come from GTFS-RT for `operator`; each vehicle is
    classified by the nearest SL stop point within the search radius.

    Env vars:
      - NEARBY_VEHICLES_OPERATOR: GTFS-RT operator scope (default "sl")
    """

    vehicle_source: IVehiclePositionSource
    site_directory: ISiteDirectory
    operator: str | None = None

    resolver: SiteResolver = field(init=False, repr=False)
    stop_points: StopPointCache = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.operator is None:
            self.operator = os.getenv("NEARBY_VEHICLES_OPERATOR") or "sl"
        self.resolver = SiteResolver(self.site_directory)
        self.stop_points = StopPointCache(self.site_directory)

    async def get_nearby_vehicles(
        self, query: NearbyVehiclesQuery
    ) -> NearbyVehiclesResult:
        location = await self.resolver.resolve(query)
        radius_km = clamp_radius_km(query.radius_km)

        vehicles, stop_points = await asyncio.gather(
            self.vehicle_source.get_vehicle_positions(self.operator or "sl"),
            self.stop_points.load(),
        )

        matched = match_nearby_vehicles(
            vehicles,
            stop_points,
            center_lat=location.latitude,
            center_lon=location.longitude,
            radius_m=radius_km * 1000.0,
        )
        logger.debug(
            "%d of %d vehicles within %.2f km of %s",
            len(matched),
            len(vehicles),
            radius_km,
            location.name,
        )

        return NearbyVehiclesResult(
            location=location,
            radius_km=radius_km,
            vehicles=matched,
            active_modes=active_modes(matched),
            timestamp=int(time.time()),
        )

    def get_usage(self) -> UsageStats:
        return merge_usage(
            self.vehicle_source.get_usage(), self.site_directory.get_usage()
        )
