"""Booking ledger - seat allocation, duplicate prevention and cancellation.

Services:
- Depend only on interfaces (stores, notifier)
- Validate domain invariants
- Return domain models or raise domain errors
"""

import logging
import secrets
from dataclasses import replace

from studio import notifications
from studio.domain import (
    Attendee,
    Booking,
    BookingId,
    BookingStatus,
    ClassId,
    ClassOccurrence,
    CustomerBooking,
    EmailAddress,
)
from studio.domain import calendar
from studio.domain.errors import (
    AlreadyBookedError,
    BookingNotFoundError,
    ClassCancelledError,
    ClassFullError,
    ClassNotFoundError,
    InvalidBookingInputError,
)
from studio.domain.value_objects import normalize_email
from studio.notifications import Notifier, NullNotifier, notify_safely
from studio.services.common import Clock, parse_id
from studio.stores.interfaces import StudioStore

logger = logging.getLogger(__name__)


class BookingService:
    """Service for booking operations."""

    def __init__(
        self,
        store: StudioStore,
        notifier: Notifier | None = None,
        clock: Clock = calendar.utc_now,
    ) -> None:
        self._store = store
        self._notifier = notifier or NullNotifier()
        self._clock = clock

    def create_booking(
        self,
        class_id: str,
        customer_name: str,
        customer_email: str,
        village: str | None = None,
    ) -> Booking:
        """Reserve a seat in a class.

        The capacity check, duplicate check and insert run as one atomic unit
        with the class row locked, so two requests cannot both take the last seat.

        Raises:
            InvalidIdError: If the class_id is not a valid UUID.
            InvalidBookingInputError: If the name or email is missing or malformed.
            ClassNotFoundError: If the class does not exist.
            ClassCancelledError: If the class has been cancelled.
            ClassFullError: If every seat is taken.
            AlreadyBookedError: If this email already holds an active booking.
        """
        parsed = parse_id(ClassId.from_string, class_id, "class id")
        name = (customer_name or "").strip()
        if not name:
            raise InvalidBookingInputError("Customer name is required")
        try:
            email = EmailAddress(customer_email or "").value
        except ValueError:
            raise InvalidBookingInputError("A valid email address is required") from None
        village = (village or "").strip() or None

        with self._store.atomic():
            occurrence = self._store.get_class(parsed, for_update=True)
            if occurrence is None:
                raise ClassNotFoundError(class_id)
            if occurrence.is_cancelled:
                raise ClassCancelledError(class_id)
            if self._store.count_active_bookings(parsed) >= occurrence.capacity.value:
                logger.warning("Class %s is full, rejecting %s", class_id, email)
                raise ClassFullError(class_id)
            if self._store.find_active_booking(parsed, email) is not None:
                raise AlreadyBookedError(class_id)

            customer = self._store.get_customer_by_email(email)
            booking = Booking(
                id=BookingId.new(),
                class_id=parsed,
                customer_id=customer.id if customer else None,
                customer_name=name,
                customer_email=email,
                village=village,
                cancel_token=secrets.token_urlsafe(32),
                created_at=self._clock(),
            )
            self._store.add_booking(booking)

        logger.info("Booked %s into class %s", email, class_id)
        self._send(notifications.BOOKING_CONFIRMED, booking, occurrence)
        return booking

    def cancel_booking(self, cancel_token: str) -> Booking:
        """Cancel a booking by its token. Cancelling twice is a no-op.

        Raises:
            BookingNotFoundError: If no booking has this token.
        """
        with self._store.atomic():
            booking = self._store.get_booking_by_token(cancel_token or "", for_update=True)
            if booking is None:
                raise BookingNotFoundError("cancel token")
            if booking.status is BookingStatus.CANCELLED:
                return booking
            booking = replace(
                booking, status=BookingStatus.CANCELLED, cancelled_at=self._clock()
            )
            self._store.save_booking(booking)

        logger.info("Cancelled booking %s for class %s", booking.id, booking.class_id)
        occurrence = self._store.get_class(booking.class_id)
        if occurrence is not None:
            self._send(notifications.BOOKING_CANCELLED, booking, occurrence)
        return booking

    def list_bookings_by_email(self, email: str) -> list[CustomerBooking]:
        """Return every booking for an email, newest class first."""
        return self._store.list_customer_bookings(normalize_email(email or ""))

    def count_active_bookings(self, class_id: str) -> int:
        return self._store.count_active_bookings(parse_id(ClassId.from_string, class_id, "class id"))

    def list_attendees(self, class_id: str) -> list[Attendee]:
        """Return the roll call for a class.

        Raises:
            InvalidIdError: If the class_id is not a valid UUID.
            ClassNotFoundError: If the class does not exist.
        """
        parsed = parse_id(ClassId.from_string, class_id, "class id")
        if self._store.get_class(parsed) is None:
            raise ClassNotFoundError(class_id)
        return [
            Attendee(
                booking_id=booking.id,
                customer_name=booking.customer_name,
                customer_email=booking.customer_email,
                created_at=booking.created_at,
                attendance_status=booking.attendance_status,
            )
            for booking in self._store.list_active_bookings(parsed)
        ]

    def _send(self, kind: str, booking: Booking, occurrence: ClassOccurrence) -> None:
        notify_safely(
            self._notifier,
            kind,
            booking.customer_email,
            {
                "customer_name": booking.customer_name,
                "class_title": occurrence.title,
                "class_starts_at": occurrence.starts_at,
                "class_ends_at": occurrence.ends_at,
                "class_location": occurrence.location,
                "cancel_token": booking.cancel_token,
            },
        )
