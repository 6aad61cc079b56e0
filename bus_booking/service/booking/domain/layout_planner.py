"""
Layout Planner

Arranges canonical seats into the rows a seat map renders.

Output is a pure function of the input seats and the policy: the same seats always
give the same rows and the same placeholder positions, so unrelated state changes
(a passenger name keystroke) never reshuffle the map.
"""

from collections import defaultdict
from typing import Iterable, Optional

from bus_booking.platform.logging.loguru_io import Logger
from bus_booking.service.booking.domain.entity.seat import Seat
from bus_booking.service.booking.domain.enum.row_kind import RowKind
from bus_booking.service.booking.domain.value_object.row_layout_policy import RowLayoutPolicy
from bus_booking.service.booking.domain.value_object.seat_row import BusLayout, SeatRow


def _split(slots: tuple[Seat, ...], group_sizes: tuple[int, ...]) -> tuple[tuple[Seat, ...], ...]:
    groups: list[tuple[Seat, ...]] = []
    start = 0
    for size in group_sizes:
        groups.append(slots[start : start + size])
        start += size
    return tuple(groups)


class LayoutPlanner:
    def __init__(self, *, policy: Optional[RowLayoutPolicy] = None) -> None:
        self._policy = policy or RowLayoutPolicy()

    @property
    def policy(self) -> RowLayoutPolicy:
        return self._policy

    def plan(self, seats: Iterable[Seat]) -> list[SeatRow]:
        by_row: dict[int, list[Seat]] = defaultdict(list)
        for seat in seats:
            if seat.is_placeholder:
                continue
            by_row[seat.row].append(seat)

        row_numbers = sorted(by_row)
        rear_row = self._policy.resolve_rear_row(row_numbers)

        return [
            self._plan_row(row_number, by_row[row_number], is_rear=row_number == rear_row)
            for row_number in row_numbers
        ]

    def plan_bus(self, seats: Iterable[Seat]) -> BusLayout:
        return BusLayout(rows=tuple(self.plan(seats)))

    def _plan_row(self, row_number: int, row_seats: list[Seat], *, is_rear: bool) -> SeatRow:
        if is_rear:
            kind, width, group_sizes = RowKind.REAR, self._policy.rear_width, self._policy.rear_groups
        else:
            kind, width, group_sizes = (
                RowKind.REGULAR,
                self._policy.regular_width,
                self._policy.regular_groups,
            )

        by_column: dict[int, Seat] = {}
        # sorted() is stable, so the first feed record wins a duplicated column
        for seat in sorted(row_seats, key=lambda s: s.column):
            if seat.column > width:
                Logger.base.warning(
                    f'[LAYOUT] Seat {seat.id} at row {row_number} column {seat.column} '
                    f'does not fit a {kind.lower()} row of {width}, skipped'
                )
                continue
            by_column.setdefault(seat.column, seat)

        slots = tuple(
            by_column.get(column) or Seat.placeholder(row=row_number, column=column)
            for column in range(1, width + 1)
        )
        return SeatRow(
            row_number=row_number,
            kind=kind,
            slots=slots,
            groups=_split(slots, group_sizes),
        )
