from bus_booking.service.booking.app.dto.booking_dto import (
    BookingConfirmation,
    BookingRequest,
    BookingResult,
    BookingResultStatus,
    JourneyDetails,
)
from bus_booking.service.booking.app.dto.route_dto import RouteData
from bus_booking.service.booking.app.dto.seat_map_dto import SeatMap

__all__ = [
    'BookingConfirmation',
    'BookingRequest',
    'BookingResult',
    'BookingResultStatus',
    'JourneyDetails',
    'RouteData',
    'SeatMap',
]
