from __future__ import annotations

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, TypeAdapter


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


# Stop Lookup /stops/name/{query} and /stops/list


class TlStopPayload(_Payload):
    id: str
    name: str
    lat: float
    lon: float


class TlStopGroupPayload(_Payload):
    id: str
    name: str
    area_type: str
    average_daily_stop_times: float
    transport_modes: list[str] = Field(default_factory=list)
    stops: list[TlStopPayload] = Field(default_factory=list)


class TlStopLookupPayload(_Payload):
    stop_groups: list[TlStopGroupPayload]


# Timetables /departures/{area_id} and /arrivals/{area_id}


class TlAlertPayload(_Payload):
    # Live responses have used both header/details and title/text.
    header: str = Field(validation_alias=AliasChoices("header", "title"))
    details: str = Field("", validation_alias=AliasChoices("details", "text"))
    type: str | None = None


class TlRouteEndpointPayload(_Payload):
    id: str
    name: str


class TlRoutePayload(_Payload):
    name: str | None = None
    designation: str
    transport_mode: str
    direction: str
    origin: TlRouteEndpointPayload | None = None
    destination: TlRouteEndpointPayload | None = None


class TlTripPayload(_Payload):
    trip_id: str


class TlPlatformPayload(_Payload):
    id: str
    designation: str


class TlCallStopPayload(_Payload):
    id: str
    name: str


class TlCallPayload(_Payload):
    scheduled: str
    realtime: str
    delay: int
    canceled: bool
    is_realtime: bool
    route: TlRoutePayload
    trip: TlTripPayload | None = None
    stop: TlCallStopPayload
    scheduled_platform: TlPlatformPayload | None = None
    realtime_platform: TlPlatformPayload | None = None
    alerts: list[TlAlertPayload] = Field(default_factory=list)


class TlTimetableStopPayload(_Payload):
    id: str
    name: str
    alerts: list[TlAlertPayload] = Field(default_factory=list)


class TlDeparturesPayload(_Payload):
    stops: list[TlTimetableStopPayload] = Field(default_factory=list)
    departures: list[TlCallPayload]


class TlArrivalsPayload(_Payload):
    stops: list[TlTimetableStopPayload] = Field(default_factory=list)
    arrivals: list[TlCallPayload]


STOP_LOOKUP_ADAPTER = TypeAdapter(TlStopLookupPayload)
DEPARTURES_ADAPTER = TypeAdapter(TlDeparturesPayload)
ARRIVALS_ADAPTER = TypeAdapter(TlArrivalsPayload)
