from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# SL Transport /sites and /stop-points


class SlSitePayload(_Payload):
    id: int
    name: str
    lat: float | None = None
    lon: float | None = None


class SlStopAreaPayload(_Payload):
    id: int
    name: str
    type: str


class SlStopPointPayload(_Payload):
    id: int
    name: str
    lat: float
    lon: float
    designation: str | None = None
    stop_area: SlStopAreaPayload


# SL Transport /sites/{id}/departures


class SlDepartureStopPointPayload(_Payload):
    id: int
    name: str
    designation: str | None = None


class SlDepartureLinePayload(_Payload):
    id: int
    designation: str
    transport_mode: str
    group_of_lines: str | None = None


class SlJourneyPayload(_Payload):
    id: int
    state: str
    passenger_level: str | None = None


class SlDepartureNotePayload(_Payload):
    message: str


class SlDeparturePayload(_Payload):
    direction_code: int
    via: str | None = None
    destination: str
    state: str
    scheduled: str
    expected: str
    display: str
    journey: SlJourneyPayload
    stop_area: SlStopAreaPayload
    stop_point: SlDepartureStopPointPayload
    line: SlDepartureLinePayload
    deviations: list[SlDepartureNotePayload] = Field(default_factory=list)


class SlDeparturesPayload(_Payload):
    departures: list[SlDeparturePayload]
    stop_deviations: list[SlDepartureNotePayload] = Field(default_factory=list)


# SL Transport /lines and /transport-authorities


class SlLinePayload(_Payload):
    id: int
    name: str
    designation: str
    transport_mode: str
    group_of_lines: str | None = None


class SlLinesPayload(_Payload):
    metro: list[SlLinePayload] = Field(default_factory=list)
    tram: list[SlLinePayload] = Field(default_factory=list)
    train: list[SlLinePayload] = Field(default_factory=list)
    bus: list[SlLinePayload] = Field(default_factory=list)
    ship: list[SlLinePayload] = Field(default_factory=list)
    ferry: list[SlLinePayload] = Field(default_factory=list)
    taxi: list[SlLinePayload] = Field(default_factory=list)


class SlTransportAuthorityPayload(_Payload):
    id: int
    name: str
    formal_name: str | None = None
    code: str | None = None


# SL Deviations /messages


class SlDeviationVariantPayload(_Payload):
    header: str
    details: str
    scope_alias: str | None = None
    weblink: str | None = None


class SlDeviationPublishPayload(_Payload):
    from_: str = Field(alias="from")
    upto: str | None = None


class SlDeviationPriorityPayload(_Payload):
    importance_level: int


class SlDeviationStopAreaPayload(_Payload):
    id: int
    name: str


class SlDeviationLinePayload(_Payload):
    id: int
    name: str
    designation: str


class SlDeviationScopePayload(_Payload):
    stop_areas: list[SlDeviationStopAreaPayload] = Field(default_factory=list)
    lines: list[SlDeviationLinePayload] = Field(default_factory=list)


class SlDeviationCategoryPayload(_Payload):
    group: str
    type: str


class SlDeviationMessagePayload(_Payload):
    deviation_case_id: int
    publish: SlDeviationPublishPayload
    priority: SlDeviationPriorityPayload
    message_variants: list[SlDeviationVariantPayload]
    scope: SlDeviationScopePayload = Field(default_factory=SlDeviationScopePayload)
    categories: list[SlDeviationCategoryPayload] = Field(default_factory=list)


SITES_ADAPTER = TypeAdapter(list[SlSitePayload])
STOP_POINTS_ADAPTER = TypeAdapter(list[SlStopPointPayload])
DEPARTURES_ADAPTER = TypeAdapter(SlDeparturesPayload)
LINES_ADAPTER = TypeAdapter(SlLinesPayload)
TRANSPORT_AUTHORITIES_ADAPTER = TypeAdapter(list[SlTransportAuthorityPayload])
DEVIATIONS_ADAPTER = TypeAdapter(list[SlDeviationMessagePayload])
