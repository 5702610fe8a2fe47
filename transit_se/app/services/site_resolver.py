from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

from transit_se.app.ports.output import ISiteDirectory
from transit_se.domain.algorithms.geo_utils import haversine_meters
from transit_se.domain.exceptions import InvalidLocationError, SiteNotFoundError
from transit_se.domain.models import NearbyVehiclesQuery, ResolvedLocation, Site


@dataclass(frozen=True, slots=True)
class ById:
    site_id: int


@dataclass(frozen=True, slots=True)
class ByName:
    name: str


@dataclass(frozen=True, slots=True)
class ByCoordinates:
    latitude: float
    longitude: float


@dataclass(frozen=True, slots=True)
class Invalid:
    pass


LocationStrategy = Union[ById, ByName, ByCoordinates, Invalid]


def select_strategy(query: NearbyVehiclesQuery) -> LocationStrategy:
    """Pick exactly one resolution strategy: id, then name, then coordinates."""

    if query.site_id is not None:
        return ById(site_id=query.site_id)
    if query.site_name:
        return ByName(name=query.site_name)
    if query.latitude is not None and query.longitude is not None:
        return ByCoordinates(latitude=query.latitude, longitude=query.longitude)
    return Invalid()


def nearest_site(lat: float, lon: float, sites: tuple[Site, ...]) -> Site | None:
    best: Site | None = None
    best_d = math.inf
    for site in sites:
        d = haversine_meters(lat, lon, site.lat, site.lon)
        if d < best_d:
            best_d = d
            best = site
    return best


@dataclass(slots=True)
class SiteResolver:
    """Turns caller location input into a single canonical location."""

    directory: ISiteDirectory

    async def resolve(self, query: NearbyVehiclesQuery) -> ResolvedLocation:
        strategy = select_strategy(query)

        if isinstance(strategy, ById):
            site = await self.directory.get_site_by_id(strategy.site_id)
            if site is None:
                raise SiteNotFoundError(f"No SL site found with ID {strategy.site_id}")
            return _location_at_site(site)

        if isinstance(strategy, ByName):
            site = await self.directory.get_site_by_name(strategy.name)
            if site is None:
                matches = await self.directory.search_sites_by_name(strategy.name)
                site = matches[0] if matches else None
            if site is None:
                raise SiteNotFoundError(f'No SL site found matching "{strategy.name}"')
            return _location_at_site(site)

        if isinstance(strategy, ByCoordinates):
            sites = await self.directory.get_cached_sites()
            # No distance cap: the globally nearest site labels the search.
            site = nearest_site(strategy.latitude, strategy.longitude, sites)
            if site is None:
                raise SiteNotFoundError("No SL sites available")
            # The label comes from the site, the search center stays the caller's point.
            return ResolvedLocation(
                name=site.name,
                site_id=site.id,
                latitude=strategy.latitude,
                longitude=strategy.longitude,
            )

        raise InvalidLocationError(
            "Provide at least one of: site_id, site_name, or latitude + longitude"
        )


def _location_at_site(site: Site) -> ResolvedLocation:
    return ResolvedLocation(
        name=site.name, site_id=site.id, latitude=site.lat, longitude=site.lon
    )
