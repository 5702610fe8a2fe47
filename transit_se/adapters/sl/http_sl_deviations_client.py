from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import Iterable

import httpx

from transit_se.adapters.http_json import get_json
from transit_se.adapters.sl.schemas import DEVIATIONS_ADAPTER, SlDeviationMessagePayload
from transit_se.adapters.usage_counter import UsageCounter
from transit_se.domain.exceptions import InvalidArgumentError
from transit_se.domain.models import Deviation, UsageStats

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://deviations.integration.sl.se/v1"

TRANSPORT_MODES = ("BUS", "METRO", "TRAM", "TRAIN", "SHIP", "FERRY", "TAXI")


def _deviation(m: SlDeviationMessagePayload) -> Deviation | None:
    if not m.message_variants:
        return None
    variant = m.message_variants[0]
    return Deviation(
        case_id=m.deviation_case_id,
        header=variant.header,
        details=variant.details,
        importance_level=m.priority.importance_level,
        publish_from=m.publish.from_,
        publish_upto=m.publish.upto,
        scope_alias=variant.scope_alias,
        weblink=variant.weblink,
        stop_areas=tuple(sa.name for sa in m.scope.stop_areas),
        lines=tuple(f"{ln.name} {ln.designation}".strip() for ln in m.scope.lines),
        categories=tuple(c.type for c in m.categories),
    )


@dataclass(slots=True)
class HttpSlDeviationsClient:
    """Client for SL Deviations (service disruption messages). No API key needed.

    Env vars:
      - SL_DEVIATIONS_BASE_URL: API base URL (default: SL integration endpoint)
      - SL_DEVIATIONS_TIMEOUT_S: request timeout (default 10)
    """

    base_url: str | None = None
    timeout_s: float | None = None
    transport: httpx.AsyncBaseTransport | None = field(default=None, repr=False)

    _usage: UsageCounter = field(default_factory=UsageCounter, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.base_url is None:
            self.base_url = os.getenv("SL_DEVIATIONS_BASE_URL") or DEFAULT_BASE_URL
        self.base_url = self.base_url.rstrip("/")
        if self.timeout_s is None:
            self.timeout_s = float(os.getenv("SL_DEVIATIONS_TIMEOUT_S") or 10.0)

    async def get_deviations(
        self,
        *,
        future: bool | None = None,
        site_ids: Iterable[int] = (),
        line_ids: Iterable[int] = (),
        transport_modes: Iterable[str] = (),
        transport_authority: int | None = None,
    ) -> tuple[Deviation, ...]:
        """Current deviation messages, optionally filtered.

        Filters of the same kind are OR-ed by SL. `future=True` includes
        messages whose publication window has not started yet. Messages
        without any text variant are skipped.
        """

        params: list[tuple[str, str | int]] = []
        if future is not None:
            params.append(("future", "true" if future else "false"))
        params.extend(("site", s) for s in site_ids)
        params.extend(("line", ln) for ln in line_ids)
        for mode in transport_modes:
            mode = mode.upper()
            if mode not in TRANSPORT_MODES:
                raise InvalidArgumentError(
                    f"Unknown transport mode {mode!r}; expected one of "
                    + ", ".join(TRANSPORT_MODES)
                )
            params.append(("transport_mode", mode))
        if transport_authority is not None:
            params.append(("transport_authority", transport_authority))

        payload = await get_json(
            base_url=self.base_url,
            path="/messages",
            adapter=DEVIATIONS_ADAPTER,
            timeout_s=self.timeout_s,
            transport=self.transport,
            usage=self._usage,
            params=params,
        )
        deviations = tuple(d for d in map(_deviation, payload) if d is not None)
        logger.debug("Fetched %d SL deviation messages", len(deviations))
        return deviations

    def get_usage(self) -> UsageStats:
        return self._usage.snapshot()
