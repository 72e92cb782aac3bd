# tests/unit/application/test_single_flight.py
"""测试进程内 single-flight 的合并、异常传播与清理。"""

import asyncio

import pytest

from locale_hub.application.single_flight import SingleFlight


@pytest.mark.asyncio
async def test_concurrent_calls_share_one_execution() -> None:
    flight: SingleFlight[int] = SingleFlight()
    calls = 0
    gate = asyncio.Event()

    async def work() -> int:
        nonlocal calls
        calls += 1
        await gate.wait()
        return 42

    tasks = [asyncio.create_task(flight.run("fr", work)) for _ in range(5)]
    await asyncio.sleep(0)
    assert flight.in_flight("fr")
    gate.set()

    assert await asyncio.gather(*tasks) == [42] * 5
    assert calls == 1
    assert not flight.in_flight("fr")


@pytest.mark.asyncio
async def test_different_keys_run_independently() -> None:
    flight: SingleFlight[str] = SingleFlight()

    def make(value: str):
        async def work() -> str:
            await asyncio.sleep(0)
            return value

        return work

    results = await asyncio.gather(
        flight.run(("en", None), make("en")),
        flight.run(("fr", None), make("fr")),
    )
    assert results == ["en", "fr"]


@pytest.mark.asyncio
async def test_exception_reaches_all_waiters_and_key_is_cleared() -> None:
    flight: SingleFlight[int] = SingleFlight()
    gate = asyncio.Event()

    async def failing() -> int:
        await gate.wait()
        raise RuntimeError("boom")

    tasks = [asyncio.create_task(flight.run("k", failing)) for _ in range(3)]
    await asyncio.sleep(0)
    gate.set()

    results = await asyncio.gather(*tasks, return_exceptions=True)
    assert all(isinstance(r, RuntimeError) for r in results)
    assert not flight.in_flight("k")

    async def ok() -> int:
        return 1

    assert await flight.run("k", ok) == 1


@pytest.mark.asyncio
async def test_cancelled_waiter_does_not_cancel_leader() -> None:
    flight: SingleFlight[int] = SingleFlight()
    gate = asyncio.Event()

    async def work() -> int:
        await gate.wait()
        return 7

    leader = asyncio.create_task(flight.run("k", work))
    await asyncio.sleep(0)
    waiter = asyncio.create_task(flight.run("k", work))
    await asyncio.sleep(0)
    waiter.cancel()
    gate.set()

    assert await leader == 7
    with pytest.raises(asyncio.CancelledError):
        await waiter
