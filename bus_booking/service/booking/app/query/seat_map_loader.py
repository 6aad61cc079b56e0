"""
Seat Map Loader

Fetches the raw seat feed for a bus and turns it into a SeatMap.

Every load() takes a new generation number. When the user switches buses while a
fetch is still running, the older load resolves to None and its seats are never
applied. Raw feeds are cached per bus for a short window.
"""

import time
from typing import Any, Callable, Optional, TypedDict

from bus_booking.platform.config.core_setting import settings
from bus_booking.platform.exception.exceptions import SeatFetchError
from bus_booking.platform.logging.loguru_io import Logger
from bus_booking.service.booking.app.dto.seat_map_dto import SeatMap
from bus_booking.service.booking.app.interface.i_seat_detail_provider import ISeatDetailProvider
from bus_booking.service.booking.domain.layout_planner import LayoutPlanner
from bus_booking.service.booking.domain.seat_catalog import SeatCatalog


class CacheEntry(TypedDict):
    data: list[dict[str, Any]]
    timestamp: float


class SeatMapLoader:
    def __init__(
        self,
        *,
        provider: ISeatDetailProvider,
        planner: Optional[LayoutPlanner] = None,
        fallback_provider: Optional[ISeatDetailProvider] = None,
        allow_fallback: Optional[bool] = None,
        cache_ttl_seconds: Optional[float] = None,
        row_width: Optional[int] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """
        Args:
            provider: Live seat feed
            fallback_provider: Generated seats used when the live feed fails
            allow_fallback: Defaults to settings.ALLOW_MOCK_SEATS (off in production)
        """
        self._provider = provider
        self._planner = planner or LayoutPlanner()
        self._fallback_provider = fallback_provider
        self._allow_fallback = (
            settings.ALLOW_MOCK_SEATS if allow_fallback is None else allow_fallback
        )
        self._ttl_seconds = (
            settings.SEAT_DETAIL_CACHE_TTL_SECONDS if cache_ttl_seconds is None else cache_ttl_seconds
        )
        self._row_width = row_width or settings.SEAT_ROW_WIDTH
        self._clock = clock
        self._cache: dict[str, CacheEntry] = {}
        self._generation = 0

    @property
    def generation(self) -> int:
        return self._generation

    def _is_expired(self, *, entry: CacheEntry) -> bool:
        return self._clock() - entry['timestamp'] >= self._ttl_seconds

    def invalidate(self, bus_number: Optional[str] = None) -> None:
        if bus_number is None:
            self._cache.clear()
        else:
            self._cache.pop(bus_number, None)

    @Logger.io(truncate_content=True)
    async def load(self, bus_number: str, *, force_refresh: bool = False) -> Optional[SeatMap]:
        """
        Returns:
            SeatMap, or None when a newer load() started before this one finished

        Raises:
            SeatFetchError: Live feed failed and no fallback is allowed
        """
        self._generation += 1
        generation = self._generation

        raw_seats, is_mock = await self._fetch_raw(bus_number, force_refresh=force_refresh)

        if generation != self._generation:
            Logger.base.debug(f'[SEAT-MAP] Load of bus {bus_number} superseded, discarded')
            return None

        seats = SeatCatalog.normalize(raw_seats, row_width=self._row_width)
        return SeatMap(
            bus_number=bus_number,
            seats=tuple(seats),
            layout=self._planner.plan_bus(seats),
            is_mock=is_mock,
        )

    async def _fetch_raw(
        self, bus_number: str, *, force_refresh: bool
    ) -> tuple[list[dict[str, Any]], bool]:
        entry = self._cache.get(bus_number)
        if entry is not None and not force_refresh and not self._is_expired(entry=entry):
            return entry['data'], False

        try:
            raw_seats = await self._provider.fetch(bus_number)
        except SeatFetchError as e:
            if not self._allow_fallback or self._fallback_provider is None:
                raise
            Logger.base.warning(
                f'[SEAT-MAP] Seat feed for bus {bus_number} failed ({e.message}), using mock seats'
            )
            return await self._fallback_provider.fetch(bus_number), True

        self._cache[bus_number] = CacheEntry(data=raw_seats, timestamp=self._clock())
        return raw_seats, False
