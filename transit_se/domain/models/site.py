from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Site:
    """Lightweight SL site (station/stop area) directory entry."""

    id: int
    name: str
    lat: float
    lon: float


@dataclass(frozen=True, slots=True)
class StopPoint:
    """A physical platform/quay/berth as returned by SL /stop-points."""

    id: int
    name: str
    lat: float
    lon: float
    stop_area_type: str
    designation: str | None = None
