import asyncio

import pytest

from ebay_mcp.core.concurrency import map_bounded


@pytest.mark.asyncio
async def test_output_order_matches_input_when_first_item_is_slowest():
    async def work(i):
        await asyncio.sleep(0.05 if i == 0 else 0.001)
        return i * 10

    outcomes = await map_bounded(list(range(10)), 3, work)

    assert len(outcomes) == 10
    assert all(o.ok for o in outcomes)
    assert [o.value for o in outcomes] == [i * 10 for i in range(10)]


@pytest.mark.asyncio
async def test_never_exceeds_concurrency_cap():
    in_flight = 0
    peak = 0

    async def work(i):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.01)
        in_flight -= 1
        return i

    await map_bounded(list(range(20)), 3, work)

    assert peak == 3


@pytest.mark.asyncio
async def test_failure_is_captured_per_item():
    async def work(i):
        if i == 2:
            raise RuntimeError("boom")
        await asyncio.sleep(0.001)
        return i

    outcomes = await map_bounded([0, 1, 2, 3, 4], 2, work)

    assert [o.ok for o in outcomes] == [True, True, False, True, True]
    assert isinstance(outcomes[2].error, RuntimeError)
    assert outcomes[2].value is None
    assert outcomes[4].value == 4


@pytest.mark.asyncio
async def test_non_positive_concurrency_runs_serially():
    in_flight = 0
    peak = 0

    async def work(i):
        nonlocal in_flight, peak
        in_flight += 1
        peak = max(peak, in_flight)
        await asyncio.sleep(0.001)
        in_flight -= 1
        return i

    outcomes = await map_bounded([1, 2, 3], 0, work)

    assert peak == 1
    assert [o.value for o in outcomes] == [1, 2, 3]


@pytest.mark.asyncio
async def test_empty_input():
    async def work(i):
        raise AssertionError("should not be called")

    assert await map_bounded([], 5, work) == []
