from enum import StrEnum


class RowKind(StrEnum):
    REGULAR = 'REGULAR'  # 2 + 2 around the aisle
    REAR = 'REAR'  # bench across the aisle, 1-1-1-1-1


class Fixture(StrEnum):
    """Non-seat furniture drawn at the front of the bus."""

    EXIT = 'EXIT'
    DRIVER = 'DRIVER'
