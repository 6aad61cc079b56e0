"""
Seat Catalog

The single place where raw seat feed records become canonical Seat entities.

The feed is inconsistent: prices arrive under five different keys, seat numbers may be
missing or duplicated, and statuses come in any casing ('Payment Done', 'payment-pending',
'OCCUPIED'). The catalog favours a degraded but renderable seat map over failing the
whole page, so malformed numbers fall back to 0 or to a derived position.
"""

from decimal import Decimal, InvalidOperation
import math
from typing import Any, Iterable, Mapping, Optional

from bus_booking.platform.logging.loguru_io import Logger
from bus_booking.service.booking.domain.entity.seat import Seat
from bus_booking.service.booking.domain.enum.seat_status import SeatStatus


RawSeat = Mapping[str, Any]

DEFAULT_ROW_WIDTH = 4

PRICE_KEYS = ('seatPrice', 'price', 'fare', 'seatFare', 'amount')
SEAT_NUMBER_KEYS = ('seatNumber', 'seatId', 'id')

STATUS_ALIASES: dict[str, SeatStatus] = {
    'OCCUPIED': SeatStatus.BOOKED,
    'SOLD': SeatStatus.BOOKED,
    'MAINTENANCE': SeatStatus.LOCKED,
    'RESERVED': SeatStatus.LOCKED,
    'HELD': SeatStatus.LOCKED,
    'PENDING_PAYMENT': SeatStatus.PAYMENT_PENDING,
    'PENDING': SeatStatus.PAYMENT_PENDING,
    'PAID': SeatStatus.PAYMENT_DONE,
    'BLOCKED': SeatStatus.UNAVAILABLE,
    'FREE': SeatStatus.AVAILABLE,
    'OPEN': SeatStatus.AVAILABLE,
}


def _first_present(raw: RawSeat, keys: Iterable[str]) -> Any:
    for key in keys:
        value = raw.get(key)
        if value is not None and value != '':
            return value
    return None


def _parse_price(value: Any) -> Decimal:
    if value is None or isinstance(value, bool):
        return Decimal('0')
    try:
        price = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return Decimal('0')
    if not price.is_finite() or price < 0:
        return Decimal('0')
    return price


def _parse_positive_int(value: Any) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        number = int(str(value).strip())
    except ValueError:
        return None
    return number if number > 0 else None


def _truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ('true', '1', 'yes', 'y')
    return bool(value)


def _status_from_flags(raw: RawSeat) -> SeatStatus:
    if _truthy(raw.get('isBooked')) or _truthy(raw.get('booked')):
        return SeatStatus.BOOKED
    for key in ('isAvailable', 'available'):
        if key in raw and raw[key] is not None and not _truthy(raw[key]):
            return SeatStatus.UNAVAILABLE
    return SeatStatus.AVAILABLE


def normalize_status(raw: RawSeat) -> SeatStatus:
    """
    Map a raw status to the closed enum.

    A missing or unrecognised status string defers to the boolean flags and is
    AVAILABLE when none of them says otherwise.
    """
    raw_status = raw.get('status')
    if raw_status is None or str(raw_status).strip() == '':
        return _status_from_flags(raw)

    canonical = str(raw_status).strip().upper().replace('-', '_').replace(' ', '_')
    if canonical in SeatStatus.__members__:
        return SeatStatus[canonical]
    if canonical in STATUS_ALIASES:
        return STATUS_ALIASES[canonical]

    status = _status_from_flags(raw)
    Logger.base.warning(f'[SEAT-CATALOG] Unknown seat status {raw_status!r}, treating as {status}')
    return status


def normalize_seat(raw: RawSeat, index: int, *, row_width: int = DEFAULT_ROW_WIDTH) -> Seat:
    seat_number = _first_present(raw, SEAT_NUMBER_KEYS)
    if seat_number is None:
        seat_number = f'temp-{index}'
    seat_number = str(seat_number).strip()

    # Position: explicit fields win, otherwise derive from the seat number
    seat_index = _parse_positive_int(seat_number) or index + 1
    row = _parse_positive_int(raw.get('row')) or math.ceil(seat_index / row_width)
    column = _parse_positive_int(_first_present(raw, ('column', 'col'))) or (
        (seat_index - 1) % row_width + 1
    )

    seat_type = _first_present(raw, ('seatType', 'type')) or 'STANDARD'
    seat_class = _first_present(raw, ('seatClass', 'class')) or 'standard'

    return Seat(
        # Index suffix keeps ids unique when the feed repeats or omits seat numbers
        id=f'seat-{seat_number}-{index}',
        number=seat_number.zfill(2),
        row=row,
        column=column,
        status=normalize_status(raw),
        type=str(seat_type).strip().upper(),
        price=_parse_price(_first_present(raw, PRICE_KEYS)),
        seat_class=str(seat_class).strip().lower(),
        is_window_seat=_truthy(raw.get('isWindowSeat') or raw.get('windowSeat')),
        is_emergency_exit=_truthy(raw.get('isEmergencyExit') or raw.get('emergencyExit')),
    )


class SeatCatalog:
    """
    Normalized seats of one bus, keyed by seat id, in feed order.

    Besides normalizing, the catalog is the local source of truth for seat status
    during a session: the selection ledger marks seats SELECTED here, and booking
    conflicts mark seats BOOKED here without re-fetching the seat map.
    """

    def __init__(self, *, row_width: int = DEFAULT_ROW_WIDTH) -> None:
        self._row_width = row_width
        self._seats: dict[str, Seat] = {}

    @staticmethod
    def normalize(
        raw_seats: Iterable[RawSeat], *, row_width: int = DEFAULT_ROW_WIDTH
    ) -> list[Seat]:
        return [
            normalize_seat(raw, index, row_width=row_width)
            for index, raw in enumerate(raw_seats)
            if isinstance(raw, Mapping)
        ]

    @classmethod
    def from_raw(
        cls, raw_seats: Iterable[RawSeat], *, row_width: int = DEFAULT_ROW_WIDTH
    ) -> 'SeatCatalog':
        catalog = cls(row_width=row_width)
        catalog.load(raw_seats)
        return catalog

    @classmethod
    def from_seats(cls, seats: Iterable[Seat]) -> 'SeatCatalog':
        catalog = cls()
        catalog.replace(seats)
        return catalog

    @Logger.io(truncate_content=True)
    def load(self, raw_seats: Iterable[RawSeat]) -> list[Seat]:
        """Replace the catalog content with freshly normalized raw seats."""
        seats = self.normalize(raw_seats, row_width=self._row_width)
        self.replace(seats)
        return seats

    def replace(self, seats: Iterable[Seat]) -> None:
        self._seats = {seat.id: seat for seat in seats if not seat.is_placeholder}

    @property
    def seats(self) -> list[Seat]:
        return list(self._seats.values())

    def __len__(self) -> int:
        return len(self._seats)

    def __contains__(self, seat_id: object) -> bool:
        return seat_id in self._seats

    def get(self, seat_id: str) -> Optional[Seat]:
        return self._seats.get(seat_id)

    def add(self, seat: Seat) -> None:
        if not seat.is_placeholder:
            self._seats.setdefault(seat.id, seat)

    def find(self, id_or_number: str) -> list[Seat]:
        """Seats matching an id, or a seat number as the booking API reports it."""
        key = str(id_or_number).strip()
        if key in self._seats:
            return [self._seats[key]]
        return [
            seat
            for seat in self._seats.values()
            if seat.number == key or seat.number == key.zfill(2)
        ]

    def set_status(self, seat_id: str, status: SeatStatus) -> Optional[Seat]:
        seat = self._seats.get(seat_id)
        if seat is None:
            return None
        updated = seat.with_status(status)
        self._seats[seat_id] = updated
        return updated

    @Logger.io
    def mark_booked(self, ids_or_numbers: Iterable[str]) -> list[Seat]:
        """Patch seats reported as taken to BOOKED. Returns the seats that changed."""
        patched: list[Seat] = []
        for key in ids_or_numbers:
            matches = self.find(key)
            if not matches:
                Logger.base.warning(f'[SEAT-CATALOG] Conflict for unknown seat {key!r}')
            for seat in matches:
                patched.append(self.set_status(seat.id, SeatStatus.BOOKED))  # type: ignore[arg-type]
        return patched
