"""Booking wizard step"""

from enum import StrEnum


class BookingStep(StrEnum):
    SEAT_SELECTION = 'SEAT_SELECTION'
    PASSENGER_DETAILS = 'PASSENGER_DETAILS'
    CONFIRMATION = 'CONFIRMATION'
