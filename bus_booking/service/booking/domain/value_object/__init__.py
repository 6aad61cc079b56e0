"""Booking Domain Value Objects"""

from bus_booking.service.booking.domain.value_object.row_layout_policy import RowLayoutPolicy
from bus_booking.service.booking.domain.value_object.seat_row import BusLayout, SeatRow
from bus_booking.service.booking.domain.value_object.session_snapshot import SessionSnapshot

__all__ = ['BusLayout', 'RowLayoutPolicy', 'SeatRow', 'SessionSnapshot']
