"""
Booking Submitter Interface

Issues the booking request for a confirmed session. Called at most once per
submission attempt; the controller owns de-duplication.
"""

from abc import ABC, abstractmethod

from bus_booking.service.booking.app.dto.booking_dto import BookingConfirmation, BookingRequest


class IBookingSubmitter(ABC):
    @abstractmethod
    async def submit(self, request: BookingRequest) -> BookingConfirmation:
        """
        Submit a booking

        Returns:
            BookingConfirmation with booking id and PNR

        Raises:
            SeatConflictError: Some seats were taken in the meantime (carries their ids)
            BookingRejectedError: The payload was refused as invalid
            ServerError: Transport failure or 5xx, underlying exception in `cause`
        """
        pass
