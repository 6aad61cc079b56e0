"""
Unit tests for SeatCatalog

Test Coverage:
1. Price aliases and malformed numbers
2. Seat id / number resolution
3. Status canonicalization and boolean signals
4. Row/column derivation
5. Local status patching (mark_booked)
"""

from decimal import Decimal

import pytest

from bus_booking.service.booking.domain.enum.seat_status import SeatStatus
from bus_booking.service.booking.domain.seat_catalog import (
    SeatCatalog,
    normalize_seat,
    normalize_status,
)
from bus_booking.service.booking.domain.selection_ledger import SelectionLedger


pytestmark = pytest.mark.unit


class TestPriceResolution:
    @pytest.mark.parametrize(
        'raw, expected',
        [
            ({'seatNumber': '1', 'seatPrice': 650}, Decimal('650')),
            ({'seatNumber': '1', 'price': '720.50'}, Decimal('720.50')),
            ({'seatNumber': '1', 'fare': 400}, Decimal('400')),
            ({'seatNumber': '1', 'seatFare': 300}, Decimal('300')),
            ({'seatNumber': '1', 'amount': 250}, Decimal('250')),
        ],
    )
    def test_price_read_from_any_alias(self, raw, expected):
        assert normalize_seat(raw, 0).price == expected

    def test_first_non_empty_alias_wins(self):
        raw = {'seatNumber': '1', 'seatPrice': '', 'price': None, 'fare': 800, 'amount': 100}

        assert normalize_seat(raw, 0).price == Decimal('800')

    @pytest.mark.parametrize('bad', ['abc', -10, 'NaN', True])
    def test_malformed_price_defaults_to_zero(self, bad):
        """A bad price never breaks the seat map"""
        assert normalize_seat({'seatNumber': '1', 'price': bad}, 0).price == Decimal('0')


class TestSeatIdentity:
    def test_id_combines_number_and_index(self):
        seats = SeatCatalog.normalize([{'seatNumber': '7'}, {'seatNumber': '7'}])

        # Given: a feed that repeats seat number 7
        # Then: ids stay unique
        assert [s.id for s in seats] == ['seat-7-0', 'seat-7-1']

    def test_number_falls_back_through_aliases(self):
        assert normalize_seat({'seatId': '12'}, 3).number == '12'
        assert normalize_seat({'id': 5}, 3).number == '05'

    def test_missing_number_gets_temp_id(self):
        seat = normalize_seat({}, 4)

        assert seat.id == 'seat-temp-4-4'
        assert seat.number == 'temp-4'

    def test_non_mapping_records_are_skipped(self):
        seats = SeatCatalog.normalize([{'seatNumber': '1'}, None, 'junk', {'seatNumber': '2'}])

        assert [s.number for s in seats] == ['01', '02']


class TestStatusNormalization:
    @pytest.mark.parametrize(
        'raw_status, expected',
        [
            ('available', SeatStatus.AVAILABLE),
            ('  Booked ', SeatStatus.BOOKED),
            ('Payment Done', SeatStatus.PAYMENT_DONE),
            ('payment-pending', SeatStatus.PAYMENT_PENDING),
            ('PENDING_PAYMENT', SeatStatus.PAYMENT_PENDING),
            ('OCCUPIED', SeatStatus.BOOKED),
            ('maintenance', SeatStatus.LOCKED),
            ('locked', SeatStatus.LOCKED),
        ],
    )
    def test_status_spellings_map_to_enum(self, raw_status, expected):
        assert normalize_status({'status': raw_status}) == expected

    def test_missing_status_is_available(self):
        assert normalize_status({}) == SeatStatus.AVAILABLE

    def test_boolean_booked_signal_beats_missing_status(self):
        assert normalize_status({'isBooked': True}) == SeatStatus.BOOKED
        assert normalize_status({'booked': 'true'}) == SeatStatus.BOOKED

    def test_available_false_signal_is_unavailable(self):
        assert normalize_status({'isAvailable': False}) == SeatStatus.UNAVAILABLE

    def test_unknown_status_without_flags_is_available(self):
        status = normalize_status({'status': 'vacant'})

        assert status == SeatStatus.AVAILABLE
        assert status.is_selectable

    @pytest.mark.parametrize(
        'raw, expected',
        [
            ({'status': 'vacant', 'isBooked': True}, SeatStatus.BOOKED),
            ({'status': 'vacant', 'booked': 'yes'}, SeatStatus.BOOKED),
            ({'status': 'vacant', 'isAvailable': False}, SeatStatus.UNAVAILABLE),
            ({'status': 'vacant', 'available': 'false'}, SeatStatus.UNAVAILABLE),
        ],
    )
    def test_unknown_status_defers_to_boolean_flags(self, raw, expected):
        assert normalize_status(raw) == expected

    def test_seat_with_unknown_status_can_be_selected(self):
        # Given
        catalog = SeatCatalog.from_raw([{'seatNumber': '1', 'status': 'vacant'}])
        ledger = SelectionLedger(catalog=catalog)

        # When
        selection = ledger.toggle(catalog.seats[0])

        # Then
        assert [seat.number for seat in selection] == ['01']


class TestPositionDerivation:
    @pytest.mark.parametrize(
        'seat_number, row, column',
        [('1', 1, 1), ('4', 1, 4), ('5', 2, 1), ('10', 3, 2), ('40', 10, 4)],
    )
    def test_position_derived_from_seat_number(self, seat_number, row, column):
        seat = normalize_seat({'seatNumber': seat_number}, 0)

        assert (seat.row, seat.column) == (row, column)

    def test_explicit_row_and_column_win(self):
        seat = normalize_seat({'seatNumber': '1', 'row': 3, 'col': 2}, 0)

        assert (seat.row, seat.column) == (3, 2)

    def test_malformed_row_falls_back_to_derived(self):
        seat = normalize_seat({'seatNumber': '6', 'row': 'x', 'column': -1}, 0)

        assert (seat.row, seat.column) == (2, 2)

    def test_non_numeric_number_uses_position_in_feed(self):
        seat = normalize_seat({'seatNumber': 'A1'}, 5)

        # Given: index 5 -> seat index 6
        assert (seat.row, seat.column) == (2, 2)

    def test_row_width_is_configurable(self):
        seat = normalize_seat({'seatNumber': '6'}, 0, row_width=3)

        assert (seat.row, seat.column) == (2, 3)


class TestCatalogState:
    def setup_method(self):
        self.catalog = SeatCatalog.from_raw(
            [
                {'seatNumber': '1', 'status': 'AVAILABLE', 'price': 500},
                {'seatNumber': '2', 'status': 'AVAILABLE', 'price': 700},
                {'seatNumber': '3', 'status': 'BOOKED', 'price': 700},
            ]
        )

    def test_find_by_id_or_seat_number(self):
        assert [s.id for s in self.catalog.find('seat-2-1')] == ['seat-2-1']
        assert [s.id for s in self.catalog.find('2')] == ['seat-2-1']
        assert [s.id for s in self.catalog.find('02')] == ['seat-2-1']
        assert self.catalog.find('99') == []

    def test_mark_booked_patches_without_refetch(self):
        # When
        patched = self.catalog.mark_booked(['2', 'unknown'])

        # Then
        assert [s.id for s in patched] == ['seat-2-1']
        assert self.catalog.get('seat-2-1').status == SeatStatus.BOOKED
        assert self.catalog.get('seat-1-0').status == SeatStatus.AVAILABLE

    def test_load_replaces_previous_seats(self):
        self.catalog.load([{'seatNumber': '9'}])

        assert len(self.catalog) == 1
        assert 'seat-9-0' in self.catalog
