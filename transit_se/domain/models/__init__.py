from .departures import (
    Departure,
    DepartureBoard,
    Deviation,
    Line,
    TransportAuthority,
)
from .nearby import (
    NearbyVehicle,
    NearbyVehiclePosition,
    NearbyVehiclesQuery,
    NearbyVehiclesResult,
    NearestStopPoint,
    ResolvedLocation,
)
from .operators import GTFS_OPERATOR_NAMES, operator_name
from .realtime import (
    ActivePeriod,
    InformedEntity,
    Position,
    ServiceAlert,
    StopTimeEvent,
    StopTimeUpdate,
    TripDescriptor,
    TripUpdate,
    VehicleDescriptor,
    VehiclePosition,
)
from .site import Site, StopPoint
from .timetables import (
    StopGroup,
    StopGroupMember,
    Timetable,
    TimetableAlert,
    TimetableCall,
)
from .transport import (
    ClassifiedStopPoint,
    StationType,
    TransportMode,
    classify_station_type,
)
from .usage import UsageStats, merge_usage

__all__ = [
    "GTFS_OPERATOR_NAMES",
    "ActivePeriod",
    "ClassifiedStopPoint",
    "Departure",
    "DepartureBoard",
    "Deviation",
    "InformedEntity",
    "Line",
    "NearbyVehicle",
    "NearbyVehiclePosition",
    "NearbyVehiclesQuery",
    "NearbyVehiclesResult",
    "NearestStopPoint",
    "Position",
    "ResolvedLocation",
    "ServiceAlert",
    "Site",
    "StationType",
    "StopGroup",
    "StopGroupMember",
    "StopPoint",
    "StopTimeEvent",
    "StopTimeUpdate",
    "Timetable",
    "TimetableAlert",
    "TimetableCall",
    "TransportAuthority",
    "TransportMode",
    "TripDescriptor",
    "TripUpdate",
    "UsageStats",
    "VehicleDescriptor",
    "VehiclePosition",
    "classify_station_type",
    "merge_usage",
    "operator_name",
]
