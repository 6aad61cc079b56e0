import attrs

from bus_booking.service.booking.domain.entity.seat import Seat
from bus_booking.service.booking.domain.value_object.seat_row import BusLayout


@attrs.define(frozen=True)
class SeatMap:
    """A normalized seat list and the layout derived from it"""

    bus_number: str
    seats: tuple[Seat, ...]
    layout: BusLayout
    is_mock: bool = False
