from __future__ import annotations

import asyncio

import pytest

from transit_se.app.services.single_flight import Empty, Loading, Populated, SingleFlight


def test_concurrent_gets_share_one_load() -> None:
    calls = 0

    async def loader() -> str:
        nonlocal calls
        calls += 1
        await asyncio.sleep(0.01)
        return "sites"

    async def run() -> list[str]:
        flight: SingleFlight[str] = SingleFlight(loader)
        return list(await asyncio.gather(*(flight.get() for _ in range(10))))

    out = asyncio.run(run())

    assert out == ["sites"] * 10
    assert calls == 1


def test_state_moves_from_empty_to_populated() -> None:
    async def loader() -> int:
        await asyncio.sleep(0)
        return 42

    async def run() -> None:
        flight: SingleFlight[int] = SingleFlight(loader)
        assert isinstance(flight.state, Empty)

        pending = asyncio.ensure_future(flight.get())
        await asyncio.sleep(0)
        assert isinstance(flight.state, Loading)

        assert await pending == 42
        assert flight.state == Populated(42)

    asyncio.run(run())


def test_populated_value_is_reused() -> None:
    calls = 0

    async def loader() -> tuple[int, ...]:
        nonlocal calls
        calls += 1
        return (1, 2, 3)

    async def run() -> None:
        flight: SingleFlight[tuple[int, ...]] = SingleFlight(loader)
        first = await flight.get()
        second = await flight.get()
        assert first is second

    asyncio.run(run())
    assert calls == 1


def test_failure_resets_to_empty_and_next_call_retries() -> None:
    attempts = 0

    async def loader() -> str:
        nonlocal attempts
        attempts += 1
        await asyncio.sleep(0)
        if attempts == 1:
            raise RuntimeError("upstream down")
        return "ok"

    async def run() -> None:
        flight: SingleFlight[str] = SingleFlight(loader)

        results = await asyncio.gather(flight.get(), flight.get(), return_exceptions=True)
        assert all(isinstance(r, RuntimeError) for r in results)
        assert isinstance(flight.state, Empty)

        assert await flight.get() == "ok"
        assert isinstance(flight.state, Populated)

    asyncio.run(run())
    assert attempts == 2


def test_cancelled_waiter_does_not_cancel_shared_load() -> None:
    async def loader() -> str:
        await asyncio.sleep(0.01)
        return "done"

    async def run() -> None:
        flight: SingleFlight[str] = SingleFlight(loader)
        impatient = asyncio.ensure_future(flight.get())
        patient = asyncio.ensure_future(flight.get())
        await asyncio.sleep(0)

        impatient.cancel()
        with pytest.raises(asyncio.CancelledError):
            await impatient

        assert await patient == "done"

    asyncio.run(run())
