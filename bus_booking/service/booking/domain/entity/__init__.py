"""Booking Domain Entities"""

from bus_booking.service.booking.domain.entity.passenger import Passenger
from bus_booking.service.booking.domain.entity.seat import Seat

__all__ = ['Passenger', 'Seat']
