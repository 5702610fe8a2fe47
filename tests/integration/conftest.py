from __future__ import annotations

import os

import httpx
import pytest

from transit_se.adapters.sl.http_sl_transport_client import DEFAULT_BASE_URL


def _sl_reachable(base_url: str) -> bool:
    try:
        resp = httpx.head(base_url.rstrip("/") + "/sites", timeout=3.0)
    except httpx.HTTPError:
        return False
    return resp.status_code < 500


def _must_run() -> bool:
    return bool(os.getenv("REQUIRE_LIVE_APIS"))


@pytest.fixture(scope="session")
def require_sl() -> str:
    base_url = os.getenv("SL_TRANSPORT_BASE_URL") or DEFAULT_BASE_URL
    if not _sl_reachable(base_url):
        msg = f"SL Transport API not reachable at {base_url}"
        if _must_run():
            pytest.fail(msg, pytrace=False)
        pytest.skip(f"{msg}; skipping integration tests")
    return base_url


@pytest.fixture(scope="session")
def require_gtfs_key(require_sl: str) -> str:
    key = os.getenv("TRAFIKLAB_GTFS_KEY")
    if not key:
        msg = "TRAFIKLAB_GTFS_KEY not set"
        if _must_run():
            pytest.fail(msg, pytrace=False)
        pytest.skip(f"{msg}; skipping live GTFS-RT tests")
    return key


@pytest.fixture(scope="session")
def require_realtime_key() -> str:
    key = os.getenv("TRAFIKLAB_API_KEY")
    if not key:
        msg = "TRAFIKLAB_API_KEY not set"
        if _must_run():
            pytest.fail(msg, pytrace=False)
        pytest.skip(f"{msg}; skipping live Trafiklab Realtime tests")
    return key
