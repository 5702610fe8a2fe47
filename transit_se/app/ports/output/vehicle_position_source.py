from __future__ import annotations

from abc import ABC, abstractmethod

from transit_se.domain.models import UsageStats, VehiclePosition


class IVehiclePositionSource(ABC):
    """Port for live vehicle positions (e.g., via GTFS-Realtime)."""

    @abstractmethod
    async def get_vehicle_positions(
        self, operator: str
    ) -> tuple[VehiclePosition, ...]:
        """Return all vehicles currently reported for an operator.

        Vehicles may lack a position. Upstream failures raise `RemoteError`.
        """

    @abstractmethod
    def get_usage(self) -> UsageStats:
        raise NotImplementedError
