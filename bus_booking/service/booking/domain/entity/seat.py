from decimal import Decimal
from typing import Any

import attrs

from bus_booking.service.booking.domain.enum.seat_status import SeatStatus


PLACEHOLDER_NUMBER = '00'


@attrs.define(frozen=True)
class Seat:
    """
    Canonical seat (Entity)

    Only SeatCatalog builds these from raw feed records; everything downstream works on
    this shape and the closed SeatStatus enum.
    """

    id: str
    number: str
    row: int
    column: int
    status: SeatStatus = SeatStatus.AVAILABLE
    type: str = 'STANDARD'
    price: Decimal = Decimal('0')
    is_placeholder: bool = False
    seat_class: str = 'standard'
    is_window_seat: bool = False
    is_emergency_exit: bool = False

    @classmethod
    def placeholder(cls, *, row: int, column: int) -> 'Seat':
        return cls(
            id=f'placeholder-{row}-{column}',
            number=PLACEHOLDER_NUMBER,
            row=row,
            column=column,
            status=SeatStatus.UNAVAILABLE,
            price=Decimal('0'),
            is_placeholder=True,
        )

    @property
    def is_selectable(self) -> bool:
        return not self.is_placeholder and self.status.is_selectable

    def with_status(self, status: SeatStatus) -> 'Seat':
        if self.is_placeholder:
            return self
        return attrs.evolve(self, status=status)

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.id,
            'number': self.number,
            'row': self.row,
            'column': self.column,
            'status': str(self.status),
            'type': self.type,
            'price': str(self.price),
            'is_placeholder': self.is_placeholder,
            'seat_class': self.seat_class,
            'is_window_seat': self.is_window_seat,
            'is_emergency_exit': self.is_emergency_exit,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Seat':
        return cls(
            id=data['id'],
            number=data['number'],
            row=int(data['row']),
            column=int(data['column']),
            status=SeatStatus(data.get('status', SeatStatus.AVAILABLE)),
            type=data.get('type', 'STANDARD'),
            price=Decimal(str(data.get('price', '0'))),
            is_placeholder=bool(data.get('is_placeholder', False)),
            seat_class=data.get('seat_class', 'standard'),
            is_window_seat=bool(data.get('is_window_seat', False)),
            is_emergency_exit=bool(data.get('is_emergency_exit', False)),
        )
