"""Booking Domain Enums"""

from bus_booking.service.booking.domain.enum.booking_step import BookingStep
from bus_booking.service.booking.domain.enum.gender import Gender
from bus_booking.service.booking.domain.enum.row_kind import Fixture, RowKind
from bus_booking.service.booking.domain.enum.seat_status import SeatStatus

__all__ = ['BookingStep', 'Fixture', 'Gender', 'RowKind', 'SeatStatus']
