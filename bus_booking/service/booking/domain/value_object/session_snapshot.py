"""
Session Snapshot Value Object

What a hosting layer persists to resume a wizard after a page reload or a service
restart: the step, the selected seats in click order and their passengers. Cache
contents and the submission latch are process state and are never part of it.
"""

from typing import Any

import attrs
import orjson

from bus_booking.service.booking.domain.entity.passenger import Passenger
from bus_booking.service.booking.domain.entity.seat import Seat
from bus_booking.service.booking.domain.enum.booking_step import BookingStep


@attrs.define(frozen=True)
class SessionSnapshot:
    step: BookingStep
    selection: tuple[Seat, ...] = ()
    passengers: tuple[Passenger, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            'step': str(self.step),
            'selection': [seat.to_dict() for seat in self.selection],
            'passengers': [passenger.to_dict() for passenger in self.passengers],
        }

    def to_json(self) -> bytes:
        return orjson.dumps(self.to_dict())

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'SessionSnapshot':
        return cls(
            step=BookingStep(data['step']),
            selection=tuple(Seat.from_dict(s) for s in data.get('selection', [])),
            passengers=tuple(Passenger.from_dict(p) for p in data.get('passengers', [])),
        )

    @classmethod
    def from_json(cls, raw: bytes | str) -> 'SessionSnapshot':
        return cls.from_dict(orjson.loads(raw))
