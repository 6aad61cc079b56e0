import re
from typing import Any, Optional

import attrs

from bus_booking.platform.exception.exceptions import FieldViolation
from bus_booking.service.booking.domain.enum.gender import Gender


MIN_AGE = 1
MAX_AGE = 120
# 10-digit Indian mobile number
MOBILE_PATTERN = re.compile(r'[6-9]\d{9}')

EDITABLE_FIELDS = ('name', 'age', 'gender', 'phone_number')


def _coerce_age(value: Any) -> Optional[int]:
    if value is None or value == '':
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def _coerce_gender(value: Any) -> Optional[Gender]:
    if isinstance(value, Gender):
        return value
    try:
        return Gender(str(value or '').strip().upper())
    except ValueError:
        return None


@attrs.define
class Passenger:
    """Passenger travelling on one selected seat (Entity)"""

    seat_id: str
    seat_number: str
    name: str = ''
    age: Optional[int] = None
    # Invalid input is kept as None so validation reports it instead of failing the keystroke
    gender: Optional[Gender] = Gender.MALE
    phone_number: str = ''

    @classmethod
    def blank(cls, *, seat_id: str, seat_number: str) -> 'Passenger':
        return cls(seat_id=seat_id, seat_number=seat_number)

    def set_field(self, field: str, value: Any) -> None:
        if field == 'name':
            self.name = str(value or '')
        elif field == 'age':
            self.age = _coerce_age(value)
        elif field == 'gender':
            self.gender = _coerce_gender(value)
        elif field == 'phone_number':
            self.phone_number = str(value or '').strip()
        else:
            raise KeyError(field)

    def validate(self, *, index: int) -> list[FieldViolation]:
        """Collect every field problem; index 0 is the booking contact."""
        violations: list[FieldViolation] = []
        if not self.name.strip():
            violations.append(FieldViolation(index, 'name', 'Name is required'))
        if self.age is None or not MIN_AGE <= self.age <= MAX_AGE:
            violations.append(
                FieldViolation(index, 'age', f'Age must be between {MIN_AGE} and {MAX_AGE}')
            )
        if self.gender is None:
            violations.append(FieldViolation(index, 'gender', 'Gender is required'))
        if index == 0 and not self.phone_number:
            violations.append(FieldViolation(index, 'phone_number', 'Phone number is required'))
        elif self.phone_number and not MOBILE_PATTERN.fullmatch(self.phone_number):
            violations.append(
                FieldViolation(index, 'phone_number', 'Invalid phone number format')
            )
        return violations

    def to_dict(self) -> dict[str, Any]:
        return {
            'seat_id': self.seat_id,
            'seat_number': self.seat_number,
            'name': self.name,
            'age': self.age,
            'gender': str(self.gender) if self.gender else None,
            'phone_number': self.phone_number,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> 'Passenger':
        return cls(
            seat_id=data['seat_id'],
            seat_number=data.get('seat_number', ''),
            name=data.get('name') or '',
            age=_coerce_age(data.get('age')),
            gender=_coerce_gender(data.get('gender')),
            phone_number=data.get('phone_number') or '',
        )
