import attrs

from bus_booking.service.booking.domain.entity.seat import Seat
from bus_booking.service.booking.domain.enum.row_kind import Fixture, RowKind


@attrs.define(frozen=True)
class SeatRow:
    """One rendered row: exactly `width` slots, each a real seat or a placeholder."""

    row_number: int
    kind: RowKind
    slots: tuple[Seat, ...]
    groups: tuple[tuple[Seat, ...], ...]

    @property
    def width(self) -> int:
        return len(self.slots)

    @property
    def real_seats(self) -> tuple[Seat, ...]:
        return tuple(seat for seat in self.slots if not seat.is_placeholder)


@attrs.define(frozen=True)
class BusLayout:
    rows: tuple[SeatRow, ...]
    front_fixtures: tuple[Fixture, ...] = (Fixture.EXIT, Fixture.DRIVER)

    @property
    def seat_count(self) -> int:
        return sum(len(row.real_seats) for row in self.rows)
