"""Tests for the rate limiter."""

import asyncio

import pytest

from resumescorer.api.rate_limiter import RateLimiter
from resumescorer.config import RateLimitConfig


async def test_never_exceeds_max_concurrent():
    limiter = RateLimiter(max_concurrent=2, min_time_ms=0)
    in_flight = 0
    peak = 0

    async def task(i):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.02)
        in_flight -= 1
        return i

    results = await asyncio.gather(*(limiter.schedule(task, i) for i in range(5)))

    assert results == [0, 1, 2, 3, 4]
    assert peak == 2
    assert limiter.counts() == {"RUNNING": 0, "QUEUED": 0}


async def test_spaces_task_starts():
    limiter = RateLimiter(max_concurrent=None, min_time_ms=200)
    loop = asyncio.get_running_loop()
    starts = []

    async def task():
        starts.append(loop.time())

    await asyncio.gather(*(limiter.schedule(task) for _ in range(3)))

    assert len(starts) == 3
    for earlier, later in zip(starts, starts[1:]):
        assert later - earlier >= 0.2 - 0.005


async def test_admits_in_submission_order():
    limiter = RateLimiter(max_concurrent=1, min_time_ms=0)
    order = []

    async def task(i):
        order.append(i)
        await asyncio.sleep(0)

    tasks = []
    for i in range(5):
        tasks.append(asyncio.create_task(limiter.schedule(task, i)))
        await asyncio.sleep(0)
    await asyncio.gather(*tasks)

    assert order == [0, 1, 2, 3, 4]


async def test_task_error_propagates_and_frees_slot():
    limiter = RateLimiter(max_concurrent=1, min_time_ms=0)

    async def failing():
        raise ValueError("boom")

    async def ok():
        return "ok"

    with pytest.raises(ValueError, match="boom"):
        await limiter.schedule(failing)

    assert limiter.running == 0
    assert await limiter.schedule(ok) == "ok"


async def test_cancelled_queued_task_leaves_queue():
    limiter = RateLimiter(max_concurrent=1, min_time_ms=0)
    release = asyncio.Event()

    async def blocker():
        await release.wait()
        return "first"

    async def quick():
        return "third"

    first = asyncio.create_task(limiter.schedule(blocker))
    await asyncio.sleep(0)
    second = asyncio.create_task(limiter.schedule(quick))
    await asyncio.sleep(0)
    assert limiter.queued == 1

    second.cancel()
    with pytest.raises(asyncio.CancelledError):
        await second
    assert limiter.queued == 0

    release.set()
    assert await first == "first"
    assert await limiter.schedule(quick) == "third"
    assert limiter.counts() == {"RUNNING": 0, "QUEUED": 0}


async def test_cancelled_running_task_releases_slot():
    limiter = RateLimiter(max_concurrent=1, min_time_ms=0)

    async def forever():
        await asyncio.Event().wait()

    async def quick():
        return "done"

    running = asyncio.create_task(limiter.schedule(forever))
    await asyncio.sleep(0)
    assert limiter.running == 1

    running.cancel()
    with pytest.raises(asyncio.CancelledError):
        await running

    assert limiter.running == 0
    assert await asyncio.wait_for(limiter.schedule(quick), 1) == "done"


async def test_slot_context_manager_counts_as_running():
    limiter = RateLimiter(max_concurrent=2, min_time_ms=0)

    async with limiter.slot():
        assert limiter.running == 1

    assert limiter.running == 0


def test_from_config_and_validation():
    limiter = RateLimiter.from_config(RateLimitConfig(max_concurrent=2, min_time_ms=1000))
    assert limiter.max_concurrent == 2
    assert limiter.min_time == 1.0

    with pytest.raises(ValueError):
        RateLimiter(max_concurrent=0)
    with pytest.raises(ValueError):
        RateLimiter(min_time_ms=-1)
