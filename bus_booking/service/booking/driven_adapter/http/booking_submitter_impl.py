"""
Booking Submitter - POST /tickets

Status mapping:
- 2xx: BookingConfirmation (bookingId / ticketId, pnr / ticketNumber)
- 409: SeatConflictError with the seats the API reports as taken
- 400: BookingRejectedError with the API message
- 5xx, other statuses, transport errors: ServerError with the cause attached
"""

import re
from typing import Any

import httpx
from opentelemetry import trace

from bus_booking.platform.exception.exceptions import (
    BookingRejectedError,
    SeatConflictError,
    ServerError,
)
from bus_booking.platform.logging.loguru_io import Logger
from bus_booking.service.booking.app.dto.booking_dto import BookingConfirmation, BookingRequest
from bus_booking.service.booking.app.interface.i_booking_submitter import IBookingSubmitter
from bus_booking.service.booking.driven_adapter.http.api_client import error_message, unwrap


SEAT_IN_MESSAGE = re.compile(r'Seats?\s+(\d+(?:\s*,\s*\d+)*)', re.IGNORECASE)
UNAVAILABLE_KEYS = ('unavailableSeats', 'unavailableSeatIds', 'unavailableSeatNumbers')


def _conflicting_seats(response: httpx.Response) -> list[str]:
    try:
        body = response.json()
    except ValueError:
        return []
    if not isinstance(body, dict):
        return []

    for scope in (body, body.get('data') if isinstance(body.get('data'), dict) else {}):
        for key in UNAVAILABLE_KEYS:
            seats = scope.get(key)
            if isinstance(seats, list) and seats:
                return [str(seat) for seat in seats]

    # Older API versions only name the seat in the message, e.g. "Seat 12 is already booked"
    match = SEAT_IN_MESSAGE.search(str(body.get('message') or ''))
    if match:
        return [number.strip() for number in match.group(1).split(',')]
    return []


def _to_confirmation(payload: Any) -> BookingConfirmation:
    if not isinstance(payload, dict):
        raise ServerError('Unexpected booking response from server')
    booking_id = payload.get('bookingId') or payload.get('ticketId') or payload.get('id')
    if not booking_id:
        raise ServerError('Booking response did not contain a booking id')
    pnr = payload.get('pnr') or payload.get('ticketNumber') or ''
    return BookingConfirmation(booking_id=str(booking_id), pnr=str(pnr), raw=payload)


class BookingSubmitterImpl(IBookingSubmitter):
    def __init__(self, *, client: httpx.AsyncClient) -> None:
        self.client = client
        self.tracer = trace.get_tracer(__name__)

    @Logger.io
    async def submit(self, request: BookingRequest) -> BookingConfirmation:
        with self.tracer.start_as_current_span(
            'http.tickets.submit',
            attributes={
                'bus.number': request.journey.bus_number,
                'seat.count': len(request.seats),
            },
        ) as span:
            try:
                response = await self.client.post('/tickets', json=request.to_payload())
            except httpx.HTTPError as e:
                raise ServerError(
                    'No response from server. Please check your connection.', 503, cause=e
                ) from e

            span.set_attribute('http.status_code', response.status_code)

            if response.status_code == 409:
                raise SeatConflictError(
                    _conflicting_seats(response),
                    error_message(
                        response,
                        'One or more seats are no longer available. Please select different seats.',
                    ),
                )
            if response.status_code == 400:
                raise BookingRejectedError(
                    error_message(
                        response,
                        'Invalid booking data. Please check your details and try again.',
                    )
                )
            try:
                response.raise_for_status()
                payload = unwrap(response.json())
            except (httpx.HTTPStatusError, ValueError) as e:
                raise ServerError(
                    error_message(response, 'Server error. Please try again later.'),
                    response.status_code if response.status_code >= 500 else 502,
                    cause=e,
                ) from e

            return _to_confirmation(payload)
