from typing import Any

import httpx
from opentelemetry import trace

from bus_booking.platform.exception.exceptions import SeatFetchError
from bus_booking.platform.logging.loguru_io import Logger
from bus_booking.service.booking.app.interface.i_seat_detail_provider import ISeatDetailProvider
from bus_booking.service.booking.driven_adapter.http.api_client import unwrap


class SeatDetailProviderImpl(ISeatDetailProvider):
    """GET /buses/seatDetails/{busNumber}"""

    def __init__(self, *, client: httpx.AsyncClient) -> None:
        self.client = client
        self.tracer = trace.get_tracer(__name__)

    @Logger.io(truncate_content=True)
    async def fetch(self, bus_number: str) -> list[dict[str, Any]]:
        with self.tracer.start_as_current_span(
            'http.seat_details.fetch', attributes={'bus.number': bus_number}
        ):
            try:
                response = await self.client.get(f'/buses/seatDetails/{bus_number}')
                response.raise_for_status()
                payload = unwrap(response.json())
            except (httpx.HTTPError, ValueError) as e:
                raise SeatFetchError(
                    f'Failed to fetch seat details for bus {bus_number}', cause=e
                ) from e

            # Some deployments nest the list one level deeper: {"data": {"seats": [...]}}
            if isinstance(payload, dict):
                payload = payload.get('seats', payload.get('seatDetails'))
            if not isinstance(payload, list):
                raise SeatFetchError(f'Seat details for bus {bus_number} are not a list')
            return [seat for seat in payload if isinstance(seat, dict)]
