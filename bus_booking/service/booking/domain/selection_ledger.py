"""
Selection Ledger

Ordered set of selected seat ids for one session. Insertion order is click order and
is never re-sorted: passenger N belongs to the Nth clicked seat.

Selectability is judged against the catalog's current view of the seat, not the copy
the caller holds, so a click on a seat that turned BOOKED after the map was drawn is
ignored. Ignoring is deliberate: a stale click is an expected race between the seat
map and a refresh, not an error to show.
"""

from decimal import Decimal
from typing import Iterator, Union

from bus_booking.platform.logging.loguru_io import Logger
from bus_booking.service.booking.domain.entity.seat import Seat
from bus_booking.service.booking.domain.enum.seat_status import SeatStatus
from bus_booking.service.booking.domain.seat_catalog import SeatCatalog


class SelectionLedger:
    def __init__(self, *, catalog: SeatCatalog) -> None:
        self._catalog = catalog
        # dict keeps insertion order and gives O(1) membership
        self._seat_ids: dict[str, None] = {}

    @property
    def catalog(self) -> SeatCatalog:
        return self._catalog

    @property
    def seat_ids(self) -> list[str]:
        return list(self._seat_ids)

    @property
    def selection(self) -> list[Seat]:
        return [seat for seat_id in self._seat_ids if (seat := self._catalog.get(seat_id))]

    def __len__(self) -> int:
        return len(self._seat_ids)

    def __contains__(self, seat_id: object) -> bool:
        return seat_id in self._seat_ids

    def __iter__(self) -> Iterator[Seat]:
        return iter(self.selection)

    def toggle(self, seat: Union[Seat, str]) -> list[Seat]:
        seat_id = seat if isinstance(seat, str) else seat.id
        current = self._catalog.get(seat_id)
        if current is None and not isinstance(seat, str) and not seat.is_placeholder:
            # Seat restored from a snapshot before the map was fetched
            self._catalog.add(seat)
            current = seat

        if current is None or not current.is_selectable:
            Logger.base.debug(
                f'[SELECTION] Ignored click on seat {seat_id} '
                f'(status={current.status if current else "unknown"})'
            )
            return self.selection

        if seat_id in self._seat_ids:
            self.discard(seat_id)
        else:
            self._seat_ids[seat_id] = None
            self._catalog.set_status(seat_id, SeatStatus.SELECTED)
        return self.selection

    def discard(self, seat_id: str) -> bool:
        if seat_id not in self._seat_ids:
            return False
        del self._seat_ids[seat_id]
        seat = self._catalog.get(seat_id)
        if seat is not None and seat.status == SeatStatus.SELECTED:
            self._catalog.set_status(seat_id, SeatStatus.AVAILABLE)
        return True

    def clear(self) -> list[Seat]:
        for seat_id in list(self._seat_ids):
            self.discard(seat_id)
        return self.selection

    def prune_unavailable(self) -> list[str]:
        """
        Re-apply the selection after the catalog was reloaded from the feed.

        Seats still AVAILABLE are marked SELECTED again; seats taken in the meantime
        leave the selection. Returns the dropped seat ids.
        """
        dropped: list[str] = []
        for seat_id in list(self._seat_ids):
            seat = self._catalog.get(seat_id)
            if seat is None or not seat.is_selectable:
                del self._seat_ids[seat_id]
                dropped.append(seat_id)
            elif seat.status != SeatStatus.SELECTED:
                self._catalog.set_status(seat_id, SeatStatus.SELECTED)
        if dropped:
            Logger.base.info(f'[SELECTION] Dropped seats taken since selection: {dropped}')
        return dropped

    def total_fare(self) -> Decimal:
        return sum((seat.price for seat in self.selection), Decimal('0'))
