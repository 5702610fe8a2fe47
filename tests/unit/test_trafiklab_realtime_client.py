from __future__ import annotations

import httpx
import pytest

from transit_se.adapters.trafiklab.http_trafiklab_realtime_client import (
    HttpTrafiklabRealtimeClient,
)
from transit_se.domain.exceptions import (
    ApiKeyMissingError,
    ApiResponseError,
    InvalidArgumentError,
    RemoteError,
)

STOP_LOOKUP_PAYLOAD = {
    "timestamp": "2024-02-28T07:10:00",
    "query": {"queryTime": "2024-02-28T07:10:00", "query": "Uppsala C"},
    "stop_groups": [
        {
            "id": "740000005",
            "name": "Uppsala Centralstation",
            "area_type": "META_STOP",
            "average_daily_stop_times": 3840.5,
            "transport_modes": ["BUS", "TRAIN"],
            "stops": [
                {"id": "9022005000005001", "name": "Uppsala C", "lat": 59.85803, "lon": 17.64674},
            ],
        },
        {
            "id": "740025621",
            "name": "Uppsala Centralstation (Kungsgatan)",
            "area_type": "RIKSHALLPLATS",
            "average_daily_stop_times": 120.0,
        },
    ],
}

DEPARTURES_PAYLOAD = {
    "timestamp": "2024-02-28T07:10:00",
    "stops": [
        {
            "id": "740000005",
            "name": "Uppsala C",
            "lat": 59.85803,
            "lon": 17.64674,
            "alerts": [{"title": "Hiss ur funktion", "text": "Hissen till spår 4 är trasig."}],
        }
    ],
    "departures": [
        {
            "scheduled": "2024-02-28T07:15:00",
            "realtime": "2024-02-28T07:18:00",
            "delay": 180,
            "canceled": False,
            "is_realtime": True,
            "route": {
                "name": "Upptåget",
                "designation": "42",
                "transport_mode": "TRAIN",
                "transport_mode_code": 100,
                "direction": "Gävle C",
                "origin": {"id": "740000005", "name": "Uppsala C"},
                "destination": {"id": "740000004", "name": "Gävle C"},
            },
            "trip": {"trip_id": "14010000624867651", "start_date": "2024-02-28"},
            "agency": {"id": "505000000000000008", "name": "UL"},
            "stop": {"id": "740000005", "name": "Uppsala C"},
            "scheduled_platform": {"id": "9022005000005004", "designation": "4"},
            "realtime_platform": {"id": "9022005000005005", "designation": "5"},
            "alerts": [{"header": "Ändrat spår", "details": "Tåget går från spår 5."}],
        },
        {
            "scheduled": "2024-02-28T07:20:00",
            "realtime": "2024-02-28T07:20:00",
            "delay": 0,
            "canceled": True,
            "is_realtime": False,
            "route": {"designation": "801", "transport_mode": "BUS", "direction": "Flogsta"},
            "stop": {"id": "740000005", "name": "Uppsala C"},
            "scheduled_platform": {"id": "9022005000005011", "designation": "B1"},
        },
    ],
}

ARRIVALS_PAYLOAD = {
    "stops": [{"id": "740000005", "name": "Uppsala C"}],
    "arrivals": [
        {
            "scheduled": "2024-02-28T09:02:00",
            "realtime": "2024-02-28T09:02:00",
            "delay": 0,
            "canceled": False,
            "is_realtime": True,
            "route": {"designation": "42", "transport_mode": "TRAIN", "direction": "Uppsala C"},
            "stop": {"id": "740000005", "name": "Uppsala C"},
        }
    ],
}


class _Upstream:
    def __init__(self, response: httpx.Response) -> None:
        self.response = response
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.response


def _client(upstream: _Upstream) -> HttpTrafiklabRealtimeClient:
    return HttpTrafiklabRealtimeClient(
        api_key="secret",
        base_url="https://tl.test/v1/",
        transport=httpx.MockTransport(upstream),
    )


def test_missing_api_key_raises(monkeypatch) -> None:
    monkeypatch.delenv("TRAFIKLAB_API_KEY", raising=False)

    with pytest.raises(ApiKeyMissingError, match="TRAFIKLAB_API_KEY"):
        HttpTrafiklabRealtimeClient()


def test_settings_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("TRAFIKLAB_API_KEY", "env-key")
    monkeypatch.setenv("TRAFIKLAB_REALTIME_BASE_URL", "https://mirror.test/v1/")
    monkeypatch.setenv("TRAFIKLAB_REALTIME_TIMEOUT_S", "4")

    client = HttpTrafiklabRealtimeClient()

    assert client.api_key == "env-key"
    assert client.base_url == "https://mirror.test/v1"
    assert client.timeout_s == 4.0


@pytest.mark.unit
@pytest.mark.anyio
async def test_search_stops_quotes_the_query_and_sends_the_key() -> None:
    upstream = _Upstream(httpx.Response(200, json=STOP_LOOKUP_PAYLOAD))

    central, kungsgatan = await _client(upstream).search_stops("  Uppsala C/Nord ")

    request = upstream.requests[0]
    assert request.url.raw_path.split(b"?")[0] == b"/v1/stops/name/Uppsala%20C%2FNord"
    assert request.url.params["key"] == "secret"

    assert central.id == "740000005"
    assert central.area_type == "META_STOP"
    assert central.transport_modes == ("BUS", "TRAIN")
    assert central.stops[0].name == "Uppsala C"
    assert central.stops[0].lat == pytest.approx(59.85803)
    assert kungsgatan.transport_modes == ()
    assert kungsgatan.stops == ()


@pytest.mark.unit
@pytest.mark.anyio
async def test_blank_stop_search_is_rejected_before_any_request() -> None:
    upstream = _Upstream(httpx.Response(200, json=STOP_LOOKUP_PAYLOAD))
    client = _client(upstream)

    with pytest.raises(InvalidArgumentError):
        await client.search_stops("   ")

    assert upstream.requests == []
    assert client.get_usage().total_requests == 0


@pytest.mark.unit
@pytest.mark.anyio
async def test_list_stops() -> None:
    upstream = _Upstream(httpx.Response(200, json=STOP_LOOKUP_PAYLOAD))

    groups = await _client(upstream).list_stops()

    assert [g.id for g in groups] == ["740000005", "740025621"]
    assert upstream.requests[0].url.path == "/v1/stops/list"


@pytest.mark.unit
@pytest.mark.anyio
async def test_get_departures_maps_calls_and_alerts() -> None:
    upstream = _Upstream(httpx.Response(200, json=DEPARTURES_PAYLOAD))

    timetable = await _client(upstream).get_departures("740000005")

    assert upstream.requests[0].url.path == "/v1/departures/740000005"
    assert timetable.kind == "departures"
    assert timetable.stop_name == "Uppsala C"
    # Older responses use title/text for alerts.
    assert timetable.stop_alerts[0].header == "Hiss ur funktion"
    assert timetable.stop_alerts[0].details == "Hissen till spår 4 är trasig."

    train, bus = timetable.calls
    assert train.delay == 180
    assert train.line_name == "Upptåget"
    assert train.origin == "Uppsala C"
    assert train.destination == "Gävle C"
    assert train.trip_id == "14010000624867651"
    # The realtime platform wins over the scheduled one.
    assert train.platform == "5"
    assert train.alerts[0].header == "Ändrat spår"

    assert bus.canceled is True
    assert bus.is_realtime is False
    assert bus.line_name is None
    assert bus.trip_id is None
    assert bus.platform == "B1"
    assert bus.alerts == ()


@pytest.mark.unit
@pytest.mark.anyio
async def test_get_arrivals_at_a_given_time() -> None:
    upstream = _Upstream(httpx.Response(200, json=ARRIVALS_PAYLOAD))

    timetable = await _client(upstream).get_arrivals("740000005", "2024-02-28T09:00")

    assert upstream.requests[0].url.path == "/v1/arrivals/740000005/2024-02-28T09:00"
    assert timetable.kind == "arrivals"
    assert timetable.stop_alerts == ()
    assert [c.direction for c in timetable.calls] == ["Uppsala C"]


@pytest.mark.unit
@pytest.mark.anyio
@pytest.mark.parametrize(
    ("area_id", "time"),
    [("Uppsala", None), ("740000005", "28/02 09:00"), ("740000005", "2024-02-28")],
)
async def test_bad_timetable_arguments_are_rejected(area_id, time) -> None:
    upstream = _Upstream(httpx.Response(200, json=ARRIVALS_PAYLOAD))

    with pytest.raises(InvalidArgumentError):
        await _client(upstream).get_departures(area_id, time)

    assert upstream.requests == []


@pytest.mark.unit
@pytest.mark.anyio
async def test_unknown_area_is_an_api_error() -> None:
    upstream = _Upstream(httpx.Response(404, text="Stop area not found"))

    with pytest.raises(ApiResponseError) as exc_info:
        await _client(upstream).get_departures("1")

    assert exc_info.value.status_code == 404
    assert exc_info.value.endpoint == "/departures/1"


@pytest.mark.unit
@pytest.mark.anyio
async def test_network_failure_does_not_leak_the_key() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError(f"refused: {request.url}", request=request)

    client = HttpTrafiklabRealtimeClient(
        api_key="secret", base_url="https://tl.test/v1", transport=httpx.MockTransport(handler)
    )

    with pytest.raises(RemoteError) as exc_info:
        await client.get_arrivals("740000005")

    assert "secret" not in str(exc_info.value)
    assert client.get_usage().by_endpoint == {"/arrivals/740000005": 1}
