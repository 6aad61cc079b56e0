"""
Unit tests for SingleFlight

Test Coverage:
1. join(): concurrent callers share one execution
2. exclusive(): a second caller is refused immediately
3. The slot is always released
4. Shielded flights survive cancellation of the leading caller
"""

import asyncio

import anyio
import pytest

from bus_booking.platform.concurrency.single_flight import (
    AlreadyInFlightError,
    FlightAbandonedError,
    SingleFlight,
)
from bus_booking.platform.exception.exceptions import SubmissionInProgressError


pytestmark = pytest.mark.unit


class TestJoin:
    @pytest.mark.asyncio
    async def test_concurrent_callers_share_one_execution(self):
        flight: SingleFlight[int] = SingleFlight(name='test')
        calls = 0

        async def work() -> int:
            nonlocal calls
            calls += 1
            await asyncio.sleep(0.01)
            return 42

        results = await asyncio.gather(*(flight.join(work) for _ in range(5)))

        assert results == [42] * 5
        assert calls == 1
        assert not flight.in_flight

    @pytest.mark.asyncio
    async def test_sequential_calls_run_again(self):
        flight: SingleFlight[int] = SingleFlight(name='test')
        calls = 0

        async def work() -> int:
            nonlocal calls
            calls += 1
            return calls

        assert await flight.join(work) == 1
        assert await flight.join(work) == 2

    @pytest.mark.asyncio
    async def test_leader_cancelled_joiners_see_abandoned(self):
        flight: SingleFlight[int] = SingleFlight(name='test')
        started = anyio.Event()

        async def work() -> int:
            started.set()
            await anyio.sleep_forever()
            return 0

        leader = asyncio.create_task(flight.join(work))
        await started.wait()
        joiner = asyncio.create_task(flight.join(work))
        await asyncio.sleep(0)

        leader.cancel()

        with pytest.raises(FlightAbandonedError):
            await joiner
        assert not flight.in_flight

    @pytest.mark.asyncio
    async def test_join_after_invalidate_starts_new_flight(self):
        flight: SingleFlight[str] = SingleFlight(name='test')
        release = anyio.Event()

        async def stale_work() -> str:
            await release.wait()
            return 'stale'

        async def fresh_work() -> str:
            return 'fresh'

        stale = asyncio.create_task(flight.join(stale_work))
        while not flight.in_flight:
            await asyncio.sleep(0)

        flight.invalidate()

        assert await flight.join(fresh_work) == 'fresh'
        release.set()
        assert await stale == 'stale'
        assert not flight.in_flight


class TestExclusive:
    @pytest.mark.asyncio
    async def test_second_caller_refused(self):
        flight: SingleFlight[str] = SingleFlight(name='submission')
        release = anyio.Event()

        async def work() -> str:
            await release.wait()
            return 'done'

        first = asyncio.create_task(flight.exclusive(work))
        while not flight.in_flight:
            await asyncio.sleep(0)

        with pytest.raises(AlreadyInFlightError) as exc_info:
            await flight.exclusive(work)

        release.set()
        assert await first == 'done'
        assert isinstance(exc_info.value, SubmissionInProgressError)
        assert 'submission is already in progress' in exc_info.value.message

    @pytest.mark.asyncio
    async def test_slot_released_after_failure(self):
        flight: SingleFlight[str] = SingleFlight(name='submission')

        async def boom() -> str:
            raise ValueError('boom')

        async def ok() -> str:
            return 'ok'

        with pytest.raises(ValueError):
            await flight.exclusive(boom)

        assert not flight.in_flight
        assert await flight.exclusive(ok) == 'ok'

    @pytest.mark.asyncio
    async def test_shielded_flight_completes_when_caller_cancelled(self):
        flight: SingleFlight[str] = SingleFlight(name='submission', shield=True)
        completed = []

        async def work() -> str:
            await anyio.sleep(0.05)
            completed.append(True)
            return 'committed'

        # When: the caller's own scope times out while the flight is running
        with anyio.move_on_after(0.001):
            await flight.exclusive(work)

        # Then: the flight still ran to completion
        assert completed == [True]
        assert not flight.in_flight


class TestGeneration:
    def test_invalidate_bumps_generation(self):
        flight: SingleFlight[int] = SingleFlight(name='test')

        assert flight.invalidate() == 1
        assert flight.generation == 1
