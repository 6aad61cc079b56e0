"""
Mock Seat Provider

Generates a plausible seat feed when the live one is down, for local development and
demos. Wired only outside production (settings.ALLOW_MOCK_SEATS).
"""

import random
from typing import Any, Optional

from bus_booking.platform.config.core_setting import settings
from bus_booking.service.booking.app.interface.i_seat_detail_provider import ISeatDetailProvider


MOCK_SEAT_TYPES = ('STANDARD', 'WINDOW', 'SLEEPER', 'PREMIUM')
# AVAILABLE twice so roughly 40% of generated seats are free
MOCK_SEAT_STATUSES = ('AVAILABLE', 'BOOKED', 'LOCKED', 'AVAILABLE', 'PAYMENT_DONE')


class MockSeatProviderImpl(ISeatDetailProvider):
    def __init__(
        self,
        *,
        seat_count: Optional[int] = None,
        row_width: Optional[int] = None,
        seed: Optional[int] = None,
    ) -> None:
        self._seat_count = seat_count or settings.MOCK_SEAT_COUNT
        self._row_width = row_width or settings.SEAT_ROW_WIDTH
        self._random = random.Random(seed)

    def generate(self) -> list[dict[str, Any]]:
        return [
            {
                'id': f'seat-{i + 1}',
                'seatNumber': str(i + 1).zfill(2),
                'seatType': self._random.choice(MOCK_SEAT_TYPES),
                'status': self._random.choice(MOCK_SEAT_STATUSES),
                'seatPrice': 500 + self._random.randrange(1000),
                'row': i // self._row_width + 1,
                'column': i % self._row_width + 1,
            }
            for i in range(self._seat_count)
        ]

    async def fetch(self, bus_number: str) -> list[dict[str, Any]]:
        return self.generate()
