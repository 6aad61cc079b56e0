"""Row layout policy value object."""

from typing import Optional

import attrs


def _groups_cover(instance: 'RowLayoutPolicy', attribute: attrs.Attribute, value: tuple) -> None:
    width_attr = 'regular_width' if attribute.name == 'regular_groups' else 'rear_width'
    width = getattr(instance, width_attr)
    if sum(value) != width or any(size < 1 for size in value):
        raise ValueError(f'{attribute.name} {value} must split {width_attr}={width}')


@attrs.define(frozen=True)
class RowLayoutPolicy:
    """
    How the physical bus arranges seats (Value Object).

    A regular row is two pairs split by the aisle. The rear row is a bench where the
    aisle is also filled, so it carries one seat more. The rear row is the highest row
    number unless rear_row pins it explicitly, and has_rear_bench=False lays every row
    out as regular (a bus without a bench).
    """

    regular_width: int = 4
    regular_groups: tuple[int, ...] = attrs.field(default=(2, 2), validator=_groups_cover)
    rear_width: int = 5
    rear_groups: tuple[int, ...] = attrs.field(default=(1, 1, 1, 1, 1), validator=_groups_cover)
    rear_row: Optional[int] = None
    has_rear_bench: bool = True

    def resolve_rear_row(self, row_numbers: list[int]) -> Optional[int]:
        if not self.has_rear_bench or not row_numbers:
            return None
        if self.rear_row is not None:
            return self.rear_row
        return max(row_numbers)

    @classmethod
    def for_widths(
        cls, *, regular_width: int = 4, rear_width: int = 5, rear_row: Optional[int] = None
    ) -> 'RowLayoutPolicy':
        """Regular rows split evenly around the aisle; the rear bench is all singletons."""
        left = regular_width // 2
        return cls(
            regular_width=regular_width,
            regular_groups=(left, regular_width - left) if left else (regular_width,),
            rear_width=rear_width,
            rear_groups=(1,) * rear_width,
            rear_row=rear_row,
        )
