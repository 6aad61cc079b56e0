from decimal import Decimal
from typing import Any, Iterable, Optional, Union

from opentelemetry import trace
import uuid_utils

from bus_booking.platform.concurrency.single_flight import AlreadyInFlightError, SingleFlight
from bus_booking.platform.config.core_setting import settings
from bus_booking.platform.exception.exceptions import (
    BookingRejectedError,
    DomainError,
    EmptySelectionError,
    InvalidStepError,
    PassengerValidationError,
    RemoteServiceError,
    SeatConflictError,
    SubmissionInProgressError,
)
from bus_booking.platform.logging.loguru_io import Logger
from bus_booking.service.booking.app.dto.booking_dto import (
    BookingConfirmation,
    BookingRequest,
    BookingResult,
    BookingResultStatus,
    JourneyDetails,
)
from bus_booking.service.booking.app.interface.i_booking_submitter import IBookingSubmitter
from bus_booking.service.booking.domain.entity.passenger import Passenger
from bus_booking.service.booking.domain.entity.seat import Seat
from bus_booking.service.booking.domain.enum.booking_step import BookingStep
from bus_booking.service.booking.domain.passenger_roster import PassengerRoster
from bus_booking.service.booking.domain.seat_catalog import RawSeat, SeatCatalog
from bus_booking.service.booking.domain.selection_ledger import SelectionLedger
from bus_booking.service.booking.domain.value_object.session_snapshot import SessionSnapshot


class BookingSessionController:
    """
    Booking wizard for one session: SEAT_SELECTION -> PASSENGER_DETAILS -> CONFIRMATION

    Owns the selection and the passenger roster for the life of the session and
    guarantees a booking is submitted at most once at a time. While a submission is
    in flight every state-changing call is refused with SubmissionInProgressError,
    because the booking API may already hold the seats.

    Dependencies:
    - submitter: Issues the booking request
    - submission_flight: Exclusive single-flight latch, injectable for tests
    """

    def __init__(
        self,
        *,
        submitter: IBookingSubmitter,
        journey: Optional[JourneyDetails] = None,
        catalog: Optional[SeatCatalog] = None,
        submission_flight: Optional[SingleFlight[BookingConfirmation]] = None,
        session_id: Optional[str] = None,
    ) -> None:
        self.submitter = submitter
        self.journey = journey
        self.catalog = catalog or SeatCatalog(row_width=settings.SEAT_ROW_WIDTH)
        self.ledger = SelectionLedger(catalog=self.catalog)
        self.roster = PassengerRoster(ledger=self.ledger)
        self._submission: SingleFlight[BookingConfirmation] = submission_flight or SingleFlight(
            name='booking submission', shield=True
        )
        self.session_id = session_id or str(uuid_utils.uuid7())
        self._step = BookingStep.SEAT_SELECTION
        self.confirmation: Optional[BookingConfirmation] = None
        self.confirmed_request: Optional[BookingRequest] = None
        self.tracer = trace.get_tracer(__name__)

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def step(self) -> BookingStep:
        return self._step

    @property
    def selection(self) -> list[Seat]:
        return self.ledger.selection

    @property
    def passengers(self) -> list[Passenger]:
        return self.roster.reconcile()

    @property
    def submission_in_flight(self) -> bool:
        return self._submission.in_flight

    def total_fare(self) -> Decimal:
        return self.ledger.total_fare()

    def _require_step(self, expected: BookingStep, action: str) -> None:
        if self._step != expected:
            raise InvalidStepError(f'Cannot {action} during {self._step}, expected {expected}')

    def _ensure_idle(self) -> None:
        if self._submission.in_flight:
            raise SubmissionInProgressError()

    def _move_to(self, step: BookingStep) -> None:
        if step != self._step:
            Logger.base.info(f'[SESSION {self.session_id}] {self._step} -> {step}')
            self._step = step

    # ------------------------------------------------------------------
    # Seat selection
    # ------------------------------------------------------------------

    def toggle_seat(self, seat: Union[Seat, str]) -> list[Seat]:
        """Select or deselect a seat. Clicks on seats that are not selectable are ignored."""
        self._ensure_idle()
        self._require_step(BookingStep.SEAT_SELECTION, 'change seats')
        return self.ledger.toggle(seat)

    @Logger.io
    def confirm_seats(self) -> list[Passenger]:
        self._ensure_idle()
        self._require_step(BookingStep.SEAT_SELECTION, 'confirm seats')
        if not self.ledger:
            raise EmptySelectionError()

        passengers = self.roster.reconcile()
        self._move_to(BookingStep.PASSENGER_DETAILS)
        return passengers

    @Logger.io(truncate_content=True)
    def refresh_seats(self, raw_seats: Iterable[RawSeat]) -> list[str]:
        """Reload the seat map from a fresh feed; returns selected seat ids that are gone."""
        self._ensure_idle()
        self.catalog.load(raw_seats)
        return self._after_catalog_change()

    def apply_seats(self, seats: Iterable[Seat]) -> list[str]:
        """Same as refresh_seats() for seats that are already normalized."""
        self._ensure_idle()
        self.catalog.replace(seats)
        return self._after_catalog_change()

    def _after_catalog_change(self) -> list[str]:
        dropped = self.ledger.prune_unavailable()
        self.roster.reconcile()
        if self._step == BookingStep.PASSENGER_DETAILS and not self.ledger:
            self._move_to(BookingStep.SEAT_SELECTION)
        return dropped

    # ------------------------------------------------------------------
    # Passenger details
    # ------------------------------------------------------------------

    def update_passenger(self, index: int, field: str, value: Any) -> Passenger:
        self._ensure_idle()
        self._require_step(BookingStep.PASSENGER_DETAILS, 'edit passengers')
        return self.roster.update(index, field, value)

    @Logger.io
    def remove_passenger(self, index: int) -> list[Passenger]:
        """Drop a passenger together with its seat; with no seat left, go back to the map."""
        self._ensure_idle()
        self._require_step(BookingStep.PASSENGER_DETAILS, 'remove passengers')
        passengers = self.roster.remove_at(index)
        if not self.ledger:
            self._move_to(BookingStep.SEAT_SELECTION)
        return passengers

    @Logger.io
    async def confirm_passengers(self) -> BookingResult:
        """
        Validate passengers and submit the booking

        Flow:
        1. A submission already in flight -> ALREADY_IN_PROGRESS, nothing is sent
        2. Validate every passenger, raise PassengerValidationError with all violations
        3. Submit through the exclusive latch
        4. Apply the outcome: CONFIRMED / CONFLICT / REJECTED / FAILED

        Returns:
            BookingResult; only CONFIRMED moves the session to CONFIRMATION

        Raises:
            InvalidStepError: Not in PASSENGER_DETAILS
            PassengerValidationError: Session state is left unchanged
        """
        # Checked before validation so a double-click never reports errors for the first click
        if self._submission.in_flight:
            Logger.base.info(f'[SESSION {self.session_id}] Submission already in flight')
            return BookingResult.already_in_progress()

        self._require_step(BookingStep.PASSENGER_DETAILS, 'confirm passengers')
        if not self.ledger:
            raise EmptySelectionError()
        violations = self.roster.validate()
        if violations:
            raise PassengerValidationError(violations)
        if self.journey is None:
            raise DomainError('Journey details are required before booking')

        request = BookingRequest.build(
            journey=self.journey,
            seats=self.ledger.selection,
            passengers=self.roster.passengers,
        )

        with self.tracer.start_as_current_span(
            'use_case.confirm_passengers',
            attributes={
                'session.id': self.session_id,
                'bus.number': self.journey.bus_number,
                'seat.count': len(request.seats),
            },
        ) as span:
            try:
                confirmation = await self._submission.exclusive(
                    lambda: self.submitter.submit(request)
                )
            except AlreadyInFlightError:
                span.set_attribute('already_in_progress', True)
                return BookingResult.already_in_progress()
            except SeatConflictError as e:
                span.set_attribute('conflict', True)
                return self._apply_conflict(e)
            except BookingRejectedError as e:
                return BookingResult(
                    status=BookingResultStatus.REJECTED, message=e.message, cause=e
                )
            except RemoteServiceError as e:
                span.set_attribute('failed', True)
                return BookingResult(
                    status=BookingResultStatus.FAILED, message=e.message, cause=e.cause or e
                )

            span.set_attribute('booking.id', confirmation.booking_id)
            return self._apply_confirmation(request, confirmation)

    def _apply_confirmation(
        self, request: BookingRequest, confirmation: BookingConfirmation
    ) -> BookingResult:
        self.confirmation = confirmation
        self.confirmed_request = request
        self.catalog.mark_booked([seat.id for seat in request.seats])
        self.ledger.clear()
        self.roster.clear()
        self._move_to(BookingStep.CONFIRMATION)
        return BookingResult.confirmed(confirmation)

    def _apply_conflict(self, error: SeatConflictError) -> BookingResult:
        """Patch taken seats locally and drop them from the selection without a re-fetch."""
        patched = self.catalog.mark_booked(error.unavailable_seat_ids)
        for seat in patched:
            self.ledger.discard(seat.id)
        self.roster.reconcile()

        self._move_to(
            BookingStep.PASSENGER_DETAILS if self.ledger else BookingStep.SEAT_SELECTION
        )
        Logger.base.warning(
            f'[SESSION {self.session_id}] Seats no longer available: '
            f'{[seat.number for seat in patched] or error.unavailable_seat_ids}'
        )
        return BookingResult(
            status=BookingResultStatus.CONFLICT,
            unavailable_seat_ids=tuple(seat.id for seat in patched)
            or tuple(error.unavailable_seat_ids),
            message=error.message,
            cause=error,
        )

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def back(self) -> Optional[BookingStep]:
        """Step back; None from SEAT_SELECTION means the caller should leave the wizard."""
        self._ensure_idle()
        if self._step == BookingStep.PASSENGER_DETAILS:
            self._move_to(BookingStep.SEAT_SELECTION)
            return self._step
        if self._step == BookingStep.SEAT_SELECTION:
            return None
        raise InvalidStepError('A confirmed booking cannot go back, start a new session')

    def cancel_submission(self) -> None:
        """A submission cannot be withdrawn once issued; this only reports that fact."""
        if self._submission.in_flight:
            raise SubmissionInProgressError(
                'The booking is being processed and can no longer be cancelled'
            )

    @Logger.io
    def reset(self) -> str:
        """Start a fresh session on the same seat map. Returns the new session id."""
        self._ensure_idle()
        self.ledger.clear()
        self.roster.clear()
        self.confirmation = None
        self.confirmed_request = None
        self._step = BookingStep.SEAT_SELECTION
        self.session_id = str(uuid_utils.uuid7())
        return self.session_id

    # ------------------------------------------------------------------
    # Persistence boundary
    # ------------------------------------------------------------------

    def get_snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            step=self._step,
            selection=tuple(self.ledger.selection),
            passengers=tuple(Passenger.from_dict(p.to_dict()) for p in self.roster.reconcile()),
        )

    @Logger.io
    def restore(self, snapshot: SessionSnapshot) -> None:
        """
        Resume a saved session. Seats the catalog now knows as taken are not
        re-selected, and their passengers are dropped with them.
        """
        self._ensure_idle()
        self.ledger.clear()
        self.roster.clear()
        for seat in snapshot.selection:
            self.ledger.toggle(seat)
        self.roster.restore(snapshot.passengers)

        step = snapshot.step
        if step == BookingStep.PASSENGER_DETAILS and not self.ledger:
            step = BookingStep.SEAT_SELECTION
        self._step = step
