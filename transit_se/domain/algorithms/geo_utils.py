from __future__ import annotations

import math

EARTH_RADIUS_M = 6371000.0


def haversine_meters(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance in meters."""

    phi1 = math.radians(lat1)
    phi2 = math.radians(lat2)
    dlat = phi2 - phi1
    dlon = math.radians(lon2 - lon1)

    s = (
        math.sin(dlat / 2.0) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(dlon / 2.0) ** 2
    )
    # Float error can push s a hair above 1.0 for antipodal points.
    s = min(1.0, s)
    return 2.0 * EARTH_RADIUS_M * math.asin(math.sqrt(s))


def round_meters(distance_m: float) -> int:
    """Round a distance to the nearest whole meter, halves rounding up."""

    return int(math.floor(distance_m + 0.5))
