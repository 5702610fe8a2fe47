from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping


class TransportMode(str, Enum):
    METRO = "metro"
    TRAM = "tram"
    TRAIN = "train"
    BUS = "bus"
    SHIP = "ship"
    FERRY = "ferry"
    UNKNOWN = "unknown"


class StationType(str, Enum):
    """SL stop-area type codes that carry a known transport mode."""

    METRO_STATION = "METROSTN"
    BUS_TERMINAL = "BUSTERM"
    TRAM_STATION = "TRAMSTN"
    RAILWAY_STATION = "RAILWSTN"
    SHIP_BERTH = "SHIPBER"
    FERRY_BERTH = "FERRYBER"


STATION_TYPE_MODES: Mapping[StationType, TransportMode] = MappingProxyType(
    {
        StationType.METRO_STATION: TransportMode.METRO,
        StationType.BUS_TERMINAL: TransportMode.BUS,
        StationType.TRAM_STATION: TransportMode.TRAM,
        StationType.RAILWAY_STATION: TransportMode.TRAIN,
        StationType.SHIP_BERTH: TransportMode.SHIP,
        StationType.FERRY_BERTH: TransportMode.FERRY,
    }
)


def classify_station_type(code: str | None) -> TransportMode:
    """Map a raw stop-area type code to a transport mode.

    Codes outside the closed `StationType` set map to `TransportMode.UNKNOWN`.
    Matching is exact; upstream codes are upper-case.
    """

    if not code:
        return TransportMode.UNKNOWN
    try:
        station_type = StationType(code)
    except ValueError:
        return TransportMode.UNKNOWN
    return STATION_TYPE_MODES[station_type]


@dataclass(frozen=True, slots=True)
class ClassifiedStopPoint:
    """Stop point projected for nearest-neighbour classification."""

    latitude: float
    longitude: float
    name: str
    station_type_code: str
    transport_mode: TransportMode = TransportMode.UNKNOWN
    designation: str | None = None
