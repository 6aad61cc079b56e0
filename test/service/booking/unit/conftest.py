"""
Conftest for booking unit tests - no external dependencies.

Factories are exposed as fixtures returning callables so test modules never import
each other.
"""

from datetime import date
from decimal import Decimal
from typing import Any, Callable, Optional
from unittest.mock import AsyncMock

import pytest

from bus_booking.service.booking.app.dto.booking_dto import BookingConfirmation, JourneyDetails
from bus_booking.service.booking.app.interface.i_booking_submitter import IBookingSubmitter
from bus_booking.service.booking.domain.entity.seat import Seat
from bus_booking.service.booking.domain.enum.seat_status import SeatStatus
from bus_booking.service.booking.domain.seat_catalog import SeatCatalog


@pytest.fixture
def make_seat() -> Callable[..., Seat]:
    def _make_seat(
        seat_id: str,
        *,
        row: int = 1,
        column: int = 1,
        status: SeatStatus = SeatStatus.AVAILABLE,
        price: str = '500',
        number: Optional[str] = None,
    ) -> Seat:
        return Seat(
            id=seat_id,
            number=number or seat_id,
            row=row,
            column=column,
            status=status,
            price=Decimal(price),
        )

    return _make_seat


@pytest.fixture
def make_catalog() -> Callable[..., SeatCatalog]:
    def _make_catalog(*seats: Seat) -> SeatCatalog:
        return SeatCatalog.from_seats(seats)

    return _make_catalog


@pytest.fixture
def journey() -> JourneyDetails:
    return JourneyDetails(
        bus_number='CG04-1234',
        source='Raipur',
        destination='Puri',
        journey_date=date(2026, 11, 2),
    )


@pytest.fixture
def submitter() -> AsyncMock:
    """Booking submitter that confirms every booking"""
    mock = AsyncMock(spec=IBookingSubmitter)
    mock.submit.return_value = BookingConfirmation(booking_id='bk-1', pnr='PNR123456')
    return mock


@pytest.fixture
def valid_passenger_fields() -> Callable[[int], dict[str, Any]]:
    def _fields(index: int) -> dict[str, Any]:
        return {
            'name': f'Passenger {index + 1}',
            'age': 30 + index,
            'gender': 'FEMALE' if index % 2 else 'MALE',
            'phone_number': '9876543210' if index == 0 else '',
        }

    return _fields
