from __future__ import annotations

import asyncio
from dataclasses import dataclass, field

import pytest

from transit_se.domain.exceptions import RemoteError
from transit_se.domain.models import (
    Position,
    Site,
    StopPoint,
    TripDescriptor,
    UsageStats,
    VehicleDescriptor,
    VehiclePosition,
)

# T-Centralen, rounded so distances along the meridian are easy to reason about.
T_CENTRALEN = Site(id=9001, name="T-Centralen", lat=59.3314, lon=18.0604)
SLUSSEN = Site(id=9192, name="Slussen", lat=59.3203, lon=18.0725)
SOLNA = Site(id=9305, name="Solna centrum", lat=59.3587, lon=17.9976)

SITES = (T_CENTRALEN, SLUSSEN, SOLNA)

# Meridian offsets from T-Centralen: 0.00034 deg ~ 37.8 m, 0.00072 deg ~ 80.1 m.
STOP_POINTS = (
    StopPoint(
        id=1051,
        name="T-Centralen",
        lat=59.3318,
        lon=18.0604,
        designation="3",
        stop_area_type="METROSTN",
    ),
    StopPoint(
        id=10291,
        name="Vasagatan",
        lat=59.33215,
        lon=18.0604,
        designation="",
        stop_area_type="BUSTERM",
    ),
    StopPoint(
        id=4301,
        name="Gamla stan",
        lat=59.3206,
        lon=18.0604,
        designation="1",
        stop_area_type="METROSTN",
    ),
    StopPoint(
        id=9999,
        name="Far away stop",
        lat=58.0,
        lon=16.0,
        designation="A",
        stop_area_type="BUSTERM",
    ),
)

VEHICLES = (
    VehiclePosition(
        id="vp-metro-cluster",
        position=Position(latitude=59.3206, longitude=18.0604),
        vehicle=VehicleDescriptor(id="9031001001004700"),
        current_status="STOPPED_AT",
        timestamp=1709100600,
    ),
    VehiclePosition(
        id="vp-bus-1",
        position=Position(latitude=59.33212, longitude=18.0604, bearing=180.0, speed=-3.0),
        vehicle=VehicleDescriptor(id="9031001007048590", label="Bus 69"),
        trip=TripDescriptor(trip_id="trip-b1", direction_id=1),
        current_status="IN_TRANSIT_TO",
        timestamp=1709100850,
        congestion_level="UNKNOWN_CONGESTION_LEVEL",
        occupancy_status="NO_DATA_AVAILABLE",
        occupancy_percentage=0,
    ),
    VehiclePosition(id="vp-no-position", vehicle=VehicleDescriptor(id="ghost")),
    VehiclePosition(
        id="vp-metro-1",
        position=Position(latitude=59.33174, longitude=18.0604, bearing=96.0, speed=8.5),
        vehicle=VehicleDescriptor(id="9031001001004617"),
        trip=TripDescriptor(trip_id="trip-m1", route_id="9011001001700000", direction_id=0),
        current_status="IN_TRANSIT_TO",
        timestamp=1709100900,
        congestion_level="RUNNING_SMOOTHLY",
        occupancy_status="FEW_SEATS_AVAILABLE",
        occupancy_percentage=62,
    ),
    VehiclePosition(
        id="vp-far-away",
        position=Position(latitude=58.16, longitude=18.0604),
        vehicle=VehicleDescriptor(id="far-vehicle"),
        timestamp=1709100700,
    ),
)


@dataclass(slots=True)
class FakeVehicleSource:
    vehicles: tuple[VehiclePosition, ...] = VEHICLES
    error: Exception | None = None
    calls: list[str] = field(default_factory=list)

    async def get_vehicle_positions(self, operator: str) -> tuple[VehiclePosition, ...]:
        self.calls.append(operator)
        if self.error is not None:
            raise self.error
        return self.vehicles

    def get_usage(self) -> UsageStats:
        return UsageStats(
            total_requests=len(self.calls),
            by_endpoint={"/sl/VehiclePositionsSweden.pb": len(self.calls)},
        )


@dataclass(slots=True)
class FakeSiteDirectory:
    sites: tuple[Site, ...] = SITES
    stop_points: tuple[StopPoint, ...] = STOP_POINTS
    stop_point_failures: int = 0
    stop_point_calls: int = 0

    async def get_stop_points(self) -> tuple[StopPoint, ...]:
        self.stop_point_calls += 1
        # Yield so concurrent callers can pile up on the in-flight fetch.
        await asyncio.sleep(0)
        if self.stop_point_failures > 0:
            self.stop_point_failures -= 1
            raise RemoteError("stop points unavailable", endpoint="/stop-points")
        return self.stop_points

    async def get_cached_sites(self) -> tuple[Site, ...]:
        return self.sites

    async def get_site_by_id(self, site_id: int) -> Site | None:
        return next((s for s in self.sites if s.id == site_id), None)

    async def get_site_by_name(self, name: str) -> Site | None:
        return next((s for s in self.sites if s.name.lower() == name.lower()), None)

    async def search_sites_by_name(self, query: str) -> tuple[Site, ...]:
        return tuple(s for s in self.sites if query.lower() in s.name.lower())

    def get_usage(self) -> UsageStats:
        return UsageStats(
            total_requests=self.stop_point_calls,
            by_endpoint={"/stop-points": self.stop_point_calls},
        )


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def vehicle_source() -> FakeVehicleSource:
    return FakeVehicleSource()


@pytest.fixture
def site_directory() -> FakeSiteDirectory:
    return FakeSiteDirectory()
