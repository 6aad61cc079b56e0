from typing import Iterable, Optional, Sequence

import attrs


class CustomBaseError(Exception):
    """Base class for all custom exceptions - controls logging behavior in @Logger.io"""

    def __init__(self, message: str, status_code: int) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class DomainError(CustomBaseError):
    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message, status_code)


class NotFoundError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 404)


class ConflictError(CustomBaseError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


# =============================================================================
# Booking session errors
# =============================================================================


@attrs.define(frozen=True)
class FieldViolation:
    """One field-level validation problem, e.g. passenger 2 has no name."""

    index: int
    field: str
    message: str

    @property
    def key(self) -> str:
        return f'{self.index}-{self.field}'


class EmptySelectionError(DomainError):
    def __init__(self, message: str = 'Please select at least one seat') -> None:
        super().__init__(message, 400)


class InvalidStepError(DomainError):
    def __init__(self, message: str) -> None:
        super().__init__(message, 409)


class PassengerValidationError(DomainError):
    def __init__(self, violations: Sequence[FieldViolation]) -> None:
        self.violations: list[FieldViolation] = list(violations)
        super().__init__(
            f'{len(self.violations)} passenger field(s) invalid: '
            + ', '.join(v.key for v in self.violations),
            400,
        )


class SubmissionInProgressError(ConflictError):
    def __init__(self, message: str = 'A booking submission is already in progress') -> None:
        super().__init__(message)


class SeatConflictError(ConflictError):
    """The booking API refused some seats because somebody else holds them."""

    def __init__(
        self,
        unavailable_seat_ids: Iterable[str],
        message: str = (
            'One or more seats are no longer available. Please select different seats.'
        ),
    ) -> None:
        self.unavailable_seat_ids: list[str] = [str(s) for s in unavailable_seat_ids]
        super().__init__(message)


class BookingRejectedError(DomainError):
    """The booking API rejected the payload (HTTP 400)."""

    def __init__(
        self,
        message: str = 'Invalid booking data. Please check your details and try again.',
    ) -> None:
        super().__init__(message, 400)


class RemoteServiceError(CustomBaseError):
    """Transport or server failure talking to the ticketing API."""

    def __init__(
        self, message: str, status_code: int = 502, cause: Optional[BaseException] = None
    ) -> None:
        self.cause = cause
        super().__init__(message, status_code)


class SeatFetchError(RemoteServiceError):
    def __init__(
        self, message: str = 'Failed to fetch seat details', cause: Optional[BaseException] = None
    ) -> None:
        super().__init__(message, 502, cause)


class RouteFetchError(RemoteServiceError):
    def __init__(
        self, message: str = 'Failed to load routes', cause: Optional[BaseException] = None
    ) -> None:
        super().__init__(message, 502, cause)


class ServerError(RemoteServiceError):
    def __init__(
        self,
        message: str = 'Server error. Please try again later.',
        status_code: int = 500,
        cause: Optional[BaseException] = None,
    ) -> None:
        super().__init__(message, status_code, cause)
