"""
Route Cache

Process-wide cache of the origin/destination lists used by the search form.

- A read within the TTL never fetches
- Concurrent reads during a fetch share that one fetch (single-flight join)
- A failed fetch is recorded in last_error and never cached; the next read retries,
  and an expired entry keeps serving reads meanwhile
- invalidate() drops the entry and bumps the flight generation, so a fetch that was
  already running when the cache was invalidated does not write its result back
"""

import time
from typing import Callable, Optional

import attrs
from opentelemetry import trace

from bus_booking.platform.concurrency.single_flight import SingleFlight
from bus_booking.platform.config.core_setting import settings
from bus_booking.platform.logging.loguru_io import Logger
from bus_booking.service.booking.app.dto.route_dto import RouteData
from bus_booking.service.booking.app.interface.i_route_provider import IRouteProvider


@attrs.define(frozen=True)
class RouteCacheEntry:
    data: RouteData
    timestamp: float
    ttl: float

    def is_fresh(self, now: float) -> bool:
        return now - self.timestamp < self.ttl


class RouteCache:
    def __init__(
        self,
        *,
        provider: IRouteProvider,
        ttl_seconds: Optional[float] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._provider = provider
        self._ttl = settings.ROUTE_CACHE_TTL_SECONDS if ttl_seconds is None else ttl_seconds
        self._clock = clock
        self._flight: SingleFlight[RouteData] = SingleFlight(name='route fetch')
        self._entry: Optional[RouteCacheEntry] = None
        self.last_error: Optional[Exception] = None
        self.tracer = trace.get_tracer(__name__)

    @property
    def entry(self) -> Optional[RouteCacheEntry]:
        return self._entry

    @property
    def is_fetching(self) -> bool:
        return self._flight.in_flight

    async def get(self, *, force_refresh: bool = False) -> RouteData:
        entry = self._entry
        if entry is not None and not force_refresh and entry.is_fresh(self._clock()):
            return entry.data

        try:
            return await self._flight.join(self._fetch)
        except Exception:
            if entry is None:
                raise
            Logger.base.warning('[ROUTE-CACHE] Refresh failed, serving expired routes')
            return entry.data

    def invalidate(self) -> None:
        self._entry = None
        self._flight.invalidate()

    async def _fetch(self) -> RouteData:
        generation = self._flight.generation
        with self.tracer.start_as_current_span('use_case.route_cache.fetch') as span:
            try:
                data = await self._provider.fetch()
            except Exception as e:
                self.last_error = e
                span.set_attribute('fetch_failed', True)
                Logger.base.warning(f'[ROUTE-CACHE] Route fetch failed: {e}')
                raise

            if generation != self._flight.generation:
                span.set_attribute('superseded', True)
                Logger.base.debug('[ROUTE-CACHE] Cache invalidated during fetch, result not stored')
                return data

            self._entry = RouteCacheEntry(data=data, timestamp=self._clock(), ttl=self._ttl)
            self.last_error = None
            span.set_attribute('route.sources', len(data.sources))
            span.set_attribute('route.destinations', len(data.destinations))
            return data
