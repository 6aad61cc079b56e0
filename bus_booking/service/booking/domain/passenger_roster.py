"""
Passenger Roster

One passenger per selected seat. Passengers are keyed by seat id and displayed in the
ledger's click order, so passenger i always belongs to the seat at selection index i.
Removing a seat drops exactly that seat's passenger and the tail shifts down by one,
with every remaining passenger still attached to its own seat.
"""

from typing import Any, Iterable

import attrs

from bus_booking.platform.exception.exceptions import DomainError, FieldViolation, NotFoundError
from bus_booking.platform.logging.loguru_io import Logger
from bus_booking.service.booking.domain.entity.passenger import EDITABLE_FIELDS, Passenger
from bus_booking.service.booking.domain.entity.seat import Seat
from bus_booking.service.booking.domain.selection_ledger import SelectionLedger


class PassengerRoster:
    def __init__(self, *, ledger: SelectionLedger) -> None:
        self._ledger = ledger
        self._by_seat: dict[str, Passenger] = {}

    @property
    def passengers(self) -> list[Passenger]:
        """Passengers for selected seats, in selection order (no reconciliation)."""
        return [self._by_seat[seat_id] for seat_id in self._ledger.seat_ids if seat_id in self._by_seat]

    def __len__(self) -> int:
        return len(self.passengers)

    def reconcile(self) -> list[Passenger]:
        """Add blank passengers for new seats and drop passengers of deselected seats."""
        selection = self._ledger.selection
        selected_ids = {seat.id for seat in selection}

        for seat_id in [sid for sid in self._by_seat if sid not in selected_ids]:
            del self._by_seat[seat_id]

        for seat in selection:
            passenger = self._by_seat.get(seat.id)
            if passenger is None:
                self._by_seat[seat.id] = Passenger.blank(seat_id=seat.id, seat_number=seat.number)
            else:
                passenger.seat_number = seat.number

        return self.passengers

    def pairs(self) -> list[tuple[Seat, Passenger]]:
        return list(zip(self._ledger.selection, self.reconcile(), strict=True))

    def _seat_id_at(self, index: int) -> str:
        seat_ids = self._ledger.seat_ids
        if not 0 <= index < len(seat_ids):
            raise NotFoundError(f'No passenger at index {index}')
        return seat_ids[index]

    def at(self, index: int) -> Passenger:
        seat_id = self._seat_id_at(index)
        self.reconcile()
        return self._by_seat[seat_id]

    @Logger.io
    def remove_at(self, index: int) -> list[Passenger]:
        """Remove the passenger and its seat from the selection in one step."""
        seat_id = self._seat_id_at(index)
        self._ledger.discard(seat_id)
        self._by_seat.pop(seat_id, None)
        return self.reconcile()

    def update(self, index: int, field: str, value: Any) -> Passenger:
        if field not in EDITABLE_FIELDS:
            raise DomainError(f'Unknown passenger field {field!r}', 400)
        passenger = self.at(index)
        passenger.set_field(field, value)
        return passenger

    def validate(self) -> list[FieldViolation]:
        violations: list[FieldViolation] = []
        for index, passenger in enumerate(self.reconcile()):
            violations.extend(passenger.validate(index=index))
        return violations

    def clear(self) -> None:
        self._by_seat.clear()

    def restore(self, passengers: Iterable[Passenger]) -> list[Passenger]:
        """Attach saved passengers to seats that are still selected."""
        self._by_seat = {
            p.seat_id: attrs.evolve(p) for p in passengers if p.seat_id in self._ledger
        }
        return self.reconcile()
