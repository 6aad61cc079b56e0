"""Seat Status Enum"""

from enum import StrEnum


class SeatStatus(StrEnum):
    AVAILABLE = 'AVAILABLE'
    SELECTED = 'SELECTED'
    LOCKED = 'LOCKED'
    BOOKED = 'BOOKED'
    PAYMENT_PENDING = 'PAYMENT_PENDING'
    PAYMENT_DONE = 'PAYMENT_DONE'
    UNAVAILABLE = 'UNAVAILABLE'

    @property
    def is_selectable(self) -> bool:
        """AVAILABLE seats may enter a selection, SELECTED seats may leave it."""
        return self in (SeatStatus.AVAILABLE, SeatStatus.SELECTED)
