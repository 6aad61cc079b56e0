"""Booking Service Interfaces"""

from bus_booking.service.booking.app.interface.i_booking_submitter import IBookingSubmitter
from bus_booking.service.booking.app.interface.i_route_provider import IRouteProvider
from bus_booking.service.booking.app.interface.i_seat_detail_provider import ISeatDetailProvider
from bus_booking.service.booking.app.interface.i_session_store import ISessionStore

__all__ = [
    'IBookingSubmitter',
    'IRouteProvider',
    'ISeatDetailProvider',
    'ISessionStore',
]
