from __future__ import annotations

from abc import ABC, abstractmethod

from transit_se.domain.models import Site, StopPoint, UsageStats


class ISiteDirectory(ABC):
    """Port for SL sites and stop points.

    Site lookups are served from a directory the implementation fetches once
    and keeps for its own lifetime.
    """

    @abstractmethod
    async def get_stop_points(self) -> tuple[StopPoint, ...]:
        raise NotImplementedError

    @abstractmethod
    async def get_cached_sites(self) -> tuple[Site, ...]:
        raise NotImplementedError

    @abstractmethod
    async def get_site_by_id(self, site_id: int) -> Site | None:
        raise NotImplementedError

    @abstractmethod
    async def get_site_by_name(self, name: str) -> Site | None:
        """Exact, case-insensitive name lookup."""

    @abstractmethod
    async def search_sites_by_name(self, query: str) -> tuple[Site, ...]:
        """Case-insensitive substring search."""

    @abstractmethod
    def get_usage(self) -> UsageStats:
        raise NotImplementedError
