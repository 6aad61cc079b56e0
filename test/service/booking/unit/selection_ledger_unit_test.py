"""
Unit tests for SelectionLedger

Test Coverage:
1. Toggle on/off and click order
2. Non-selectable seats never enter the selection
3. Stale clicks judged against the catalog, not the caller's copy
4. Pruning after a catalog refresh
"""

from decimal import Decimal

import pytest

from bus_booking.service.booking.domain.entity.seat import Seat
from bus_booking.service.booking.domain.enum.seat_status import SeatStatus
from bus_booking.service.booking.domain.selection_ledger import SelectionLedger


pytestmark = pytest.mark.unit


class TestToggle:
    @pytest.fixture(autouse=True)
    def setup(self, make_seat, make_catalog):
        self.seats = {
            sid: make_seat(sid, column=i + 1, price=str(500 + 100 * i))
            for i, sid in enumerate(['a', 'b', 'c'])
        }
        self.catalog = make_catalog(*self.seats.values())
        self.ledger = SelectionLedger(catalog=self.catalog)

    def test_toggle_appends_in_click_order(self):
        self.ledger.toggle(self.seats['c'])
        self.ledger.toggle(self.seats['a'])
        selection = self.ledger.toggle(self.seats['b'])

        assert [seat.id for seat in selection] == ['c', 'a', 'b']
        assert all(seat.status == SeatStatus.SELECTED for seat in selection)

    def test_toggle_twice_restores_prior_selection_and_order(self):
        self.ledger.toggle(self.seats['a'])
        self.ledger.toggle(self.seats['c'])
        before = self.ledger.seat_ids

        self.ledger.toggle(self.seats['b'])
        self.ledger.toggle(self.seats['b'])

        assert self.ledger.seat_ids == before
        assert self.catalog.get('b').status == SeatStatus.AVAILABLE

    def test_toggle_with_stale_copy_still_deselects(self):
        """The caller's copy says AVAILABLE but the catalog knows it is SELECTED"""
        stale_copy = self.seats['a']
        self.ledger.toggle(stale_copy)

        selection = self.ledger.toggle(stale_copy)

        assert selection == []

    def test_toggle_by_id(self):
        self.ledger.toggle('b')

        assert 'b' in self.ledger
        assert len(self.ledger) == 1

    def test_removing_middle_keeps_order_of_the_rest(self):
        for sid in ['a', 'b', 'c']:
            self.ledger.toggle(sid)

        self.ledger.toggle('b')

        assert self.ledger.seat_ids == ['a', 'c']

    def test_clear(self):
        self.ledger.toggle('a')
        self.ledger.toggle('b')

        assert self.ledger.clear() == []
        assert all(seat.status == SeatStatus.AVAILABLE for seat in self.catalog.seats)

    def test_total_fare(self):
        self.ledger.toggle('a')
        self.ledger.toggle('c')

        assert self.ledger.total_fare() == Decimal('1200')


class TestNonSelectableSeats:
    @pytest.mark.parametrize(
        'status',
        [
            SeatStatus.BOOKED,
            SeatStatus.LOCKED,
            SeatStatus.PAYMENT_PENDING,
            SeatStatus.PAYMENT_DONE,
            SeatStatus.UNAVAILABLE,
        ],
    )
    def test_blocked_status_is_a_silent_no_op(self, status, make_seat, make_catalog):
        blocked = make_seat('x', status=status)
        ledger = SelectionLedger(catalog=make_catalog(blocked))

        selection = ledger.toggle(blocked)

        assert selection == []
        assert ledger.catalog.get('x').status == status

    def test_placeholder_is_ignored(self, make_catalog):
        ledger = SelectionLedger(catalog=make_catalog())

        assert ledger.toggle(Seat.placeholder(row=1, column=2)) == []

    def test_seat_booked_after_render_is_ignored(self, make_seat, make_catalog):
        # Given: the seat map was drawn while the seat was free
        rendered = make_seat('late')
        catalog = make_catalog(rendered)
        ledger = SelectionLedger(catalog=catalog)

        # When: a refresh marks it BOOKED before the click lands
        catalog.set_status('late', SeatStatus.BOOKED)
        selection = ledger.toggle(rendered)

        # Then
        assert selection == []

    def test_unknown_id_is_ignored(self, make_catalog):
        ledger = SelectionLedger(catalog=make_catalog())

        assert ledger.toggle('nope') == []

    def test_s1_s2_scenario(self, make_seat, make_catalog):
        s1 = make_seat('s1', column=1)
        s2 = make_seat('s2', column=2, status=SeatStatus.BOOKED)
        ledger = SelectionLedger(catalog=make_catalog(s1, s2))

        assert [seat.id for seat in ledger.toggle(s1)] == ['s1']
        assert [seat.id for seat in ledger.toggle(s2)] == ['s1']


class TestPruneUnavailable:
    def test_prune_after_refresh(self, make_seat, make_catalog):
        catalog = make_catalog(make_seat('a'), make_seat('b', column=2))
        ledger = SelectionLedger(catalog=catalog)
        ledger.toggle('a')
        ledger.toggle('b')

        # When: fresh feed has 'b' booked and 'a' plain AVAILABLE again
        catalog.replace([make_seat('a'), make_seat('b', column=2, status=SeatStatus.BOOKED)])
        dropped = ledger.prune_unavailable()

        # Then
        assert dropped == ['b']
        assert ledger.seat_ids == ['a']
        assert catalog.get('a').status == SeatStatus.SELECTED

    def test_discard_keeps_booked_status(self, make_seat, make_catalog):
        catalog = make_catalog(make_seat('a'))
        ledger = SelectionLedger(catalog=catalog)
        ledger.toggle('a')
        catalog.set_status('a', SeatStatus.BOOKED)

        assert ledger.discard('a') is True
        assert catalog.get('a').status == SeatStatus.BOOKED
        assert ledger.discard('a') is False
