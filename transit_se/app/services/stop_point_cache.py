from __future__ import annotations

import logging
from dataclasses import dataclass, field

from transit_se.app.ports.output import ISiteDirectory
from transit_se.domain.models import ClassifiedStopPoint, StopPoint, classify_station_type

from .single_flight import SingleFlight

logger = logging.getLogger(__name__)


def classify_stop_point(sp: StopPoint) -> ClassifiedStopPoint:
    return ClassifiedStopPoint(
        latitude=sp.lat,
        longitude=sp.lon,
        name=sp.name,
        designation=sp.designation or None,
        station_type_code=sp.stop_area_type,
        transport_mode=classify_station_type(sp.stop_area_type),
    )


@dataclass(slots=True)
class StopPointCache:
    """All SL stop points, classified by transport mode, fetched once per instance.

    There is no TTL; a new instance (or a restart) is the only refresh path.
    A failed fetch leaves the cache empty so the next `load()` retries.
    """

    directory: ISiteDirectory
    _flight: SingleFlight[tuple[ClassifiedStopPoint, ...]] = field(
        init=False, repr=False
    )

    def __post_init__(self) -> None:
        self._flight = SingleFlight(self._fetch)

    async def load(self) -> tuple[ClassifiedStopPoint, ...]:
        return await self._flight.get()

    async def _fetch(self) -> tuple[ClassifiedStopPoint, ...]:
        try:
            raw = await self.directory.get_stop_points()
        except Exception:
            logger.warning("Stop point fetch failed; cache left empty")
            raise
        classified = tuple(classify_stop_point(sp) for sp in raw)
        logger.info("Cached %d classified stop points", len(classified))
        return classified
