"""
Booking DTOs

Request/Result DTOs for booking submission.
"""

from datetime import date
from decimal import Decimal
from enum import StrEnum
from typing import Any, Optional, Sequence

import attrs

from bus_booking.platform.exception.exceptions import FieldViolation
from bus_booking.service.booking.domain.entity.passenger import Passenger
from bus_booking.service.booking.domain.entity.seat import Seat


def _format_fare(amount: Decimal) -> int | float:
    return int(amount) if amount == amount.to_integral_value() else float(amount)


@attrs.define(frozen=True)
class JourneyDetails:
    """The bus and trip a session books seats on"""

    bus_number: str
    source: str = ''
    destination: str = ''
    journey_date: Optional[date] = None

    @property
    def formatted_date(self) -> str:
        # Ticketing API expects dd/MM/yyyy
        return self.journey_date.strftime('%d/%m/%Y') if self.journey_date else ''


@attrs.define(frozen=True)
class BookingRequest:
    journey: JourneyDetails
    seats: tuple[Seat, ...]
    passengers: tuple[Passenger, ...]
    total_fare: Decimal

    @classmethod
    def build(
        cls,
        *,
        journey: JourneyDetails,
        seats: Sequence[Seat],
        passengers: Sequence[Passenger],
    ) -> 'BookingRequest':
        return cls(
            journey=journey,
            seats=tuple(seats),
            passengers=tuple(attrs.evolve(p) for p in passengers),
            total_fare=sum((seat.price for seat in seats), Decimal('0')),
        )

    @property
    def seat_numbers(self) -> list[str]:
        return [seat.number for seat in self.seats]

    def to_payload(self) -> dict[str, Any]:
        """Body of POST /tickets. Passenger 0's phone is the booking contact."""
        contact_phone = self.passengers[0].phone_number if self.passengers else ''
        return {
            'profileUserPhone': contact_phone,
            'busNumber': self.journey.bus_number,
            'journeyDate': self.journey.formatted_date,
            'source': self.journey.source,
            'destination': self.journey.destination,
            'seatNumbers': self.seat_numbers,
            'passengers': [
                {
                    'name': p.name.strip(),
                    'age': p.age,
                    'gender': str(p.gender) if p.gender else None,
                    'phoneNumber': p.phone_number or None,
                    'seatNumber': seat.number,
                }
                for seat, p in zip(self.seats, self.passengers, strict=True)
            ],
            'totalFare': _format_fare(self.total_fare),
        }


@attrs.define(frozen=True)
class BookingConfirmation:
    booking_id: str
    pnr: str = ''
    raw: dict[str, Any] = attrs.field(factory=dict, eq=False, repr=False)


class BookingResultStatus(StrEnum):
    CONFIRMED = 'confirmed'
    ALREADY_IN_PROGRESS = 'already_in_progress'
    CONFLICT = 'conflict'
    REJECTED = 'rejected'
    FAILED = 'failed'


@attrs.define(frozen=True)
class BookingResult:
    """Outcome of confirm_passengers(); every non-confirmed outcome leaves the session retryable"""

    status: BookingResultStatus
    confirmation: Optional[BookingConfirmation] = None
    unavailable_seat_ids: tuple[str, ...] = ()
    message: str = ''
    violations: tuple[FieldViolation, ...] = ()
    cause: Optional[BaseException] = attrs.field(default=None, eq=False)

    @property
    def is_confirmed(self) -> bool:
        return self.status == BookingResultStatus.CONFIRMED

    @classmethod
    def confirmed(cls, confirmation: BookingConfirmation) -> 'BookingResult':
        return cls(
            status=BookingResultStatus.CONFIRMED,
            confirmation=confirmation,
            message=f'Booking confirmed, PNR {confirmation.pnr or confirmation.booking_id}',
        )

    @classmethod
    def already_in_progress(cls) -> 'BookingResult':
        return cls(
            status=BookingResultStatus.ALREADY_IN_PROGRESS,
            message='A booking submission is already in progress',
        )
