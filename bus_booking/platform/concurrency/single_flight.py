"""
Single-flight primitive

At most one execution of an async operation is outstanding at a time.

Two ways to enter a flight:
- join():      concurrent callers share the outstanding execution and all receive
               its result (or its exception). Used for read-mostly reference data.
- exclusive(): a second caller is refused with AlreadyInFlightError instead of
               waiting. Used for booking submission, where the second request must
               never be sent and must not silently piggyback on the first.

Check-and-set of the in-flight slot never awaits between the check and the set, so
it is atomic with respect to the event loop. The slot is always cleared in a finally
block, so a failed flight can be retried immediately.

Each flight is tagged with the generation that was current when it started.
invalidate() bumps the generation; a flight that reads the generation when it starts
can tell whether it was superseded before it finished. join() never shares a flight
from an older generation; it leads a new one instead.
"""

from typing import Awaitable, Callable, Generic, Optional, TypeVar

import anyio
import attrs

from bus_booking.platform.exception.exceptions import SubmissionInProgressError
from bus_booking.platform.logging.loguru_io import Logger


T = TypeVar('T')


class AlreadyInFlightError(SubmissionInProgressError):
    def __init__(self, name: str) -> None:
        super().__init__(f'{name} is already in progress')


class FlightAbandonedError(RuntimeError):
    """The leading caller was cancelled before the flight produced a result."""


@attrs.define
class Flight(Generic[T]):
    generation: int
    done: anyio.Event = attrs.field(factory=anyio.Event)
    value: Optional[T] = None
    error: Optional[BaseException] = None


class SingleFlight(Generic[T]):
    def __init__(self, *, name: str, shield: bool = False) -> None:
        """
        Args:
            name: Label used in logs and error messages
            shield: Run the flight inside a shielded cancel scope, so cancelling the
                leading caller does not abort an operation the remote side may already
                have committed
        """
        self._name = name
        self._shield = shield
        self._flight: Optional[Flight[T]] = None
        self._generation = 0

    @property
    def name(self) -> str:
        return self._name

    @property
    def in_flight(self) -> bool:
        return self._flight is not None

    @property
    def generation(self) -> int:
        return self._generation

    def invalidate(self) -> int:
        """Mark every outstanding flight as stale. Returns the new generation."""
        self._generation += 1
        return self._generation

    async def join(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Run fn, or wait for the execution already in flight and share its outcome."""
        flight = self._flight
        if flight is not None and flight.generation != self._generation:
            Logger.base.debug(f'[SINGLE-FLIGHT] {self._name}: outstanding flight is stale')
        elif flight is not None:
            Logger.base.debug(f'[SINGLE-FLIGHT] {self._name}: joining outstanding flight')
            await flight.done.wait()
            if flight.error is not None:
                raise flight.error
            return flight.value  # type: ignore[return-value]

        return await self._lead(fn, self._start())

    async def exclusive(self, fn: Callable[[], Awaitable[T]]) -> T:
        """Run fn unless a flight is outstanding, in which case refuse immediately."""
        if self._flight is not None:
            Logger.base.info(f'[SINGLE-FLIGHT] {self._name}: refused, flight outstanding')
            raise AlreadyInFlightError(self._name)

        return await self._lead(fn, self._start())

    def _start(self) -> Flight[T]:
        flight: Flight[T] = Flight(generation=self._generation)
        self._flight = flight
        return flight

    async def _lead(self, fn: Callable[[], Awaitable[T]], flight: Flight[T]) -> T:
        try:
            with anyio.CancelScope(shield=self._shield):
                flight.value = await fn()
            return flight.value
        except BaseException as e:
            if isinstance(e, Exception):
                flight.error = e
            else:
                flight.error = FlightAbandonedError(f'{self._name} was cancelled')
            raise
        finally:
            if self._flight is flight:
                self._flight = None
            flight.done.set()
