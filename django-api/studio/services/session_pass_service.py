"""Session pass tracking.

A customer's pass is a pair of counters (remaining, total). Marking a
booking attended consumes one session and records a history row; marking
it absent afterwards gives the session back. The history row, unique per
booking, is what makes both transitions safe to repeat.
"""

import logging
import uuid
from dataclasses import replace

from studio.domain import (
    AttendanceStatus,
    Booking,
    BookingId,
    CompletedPass,
    CompletedSession,
    Customer,
    CustomerId,
    SessionPassHistoryEntry,
    SessionPassSummary,
)
from studio.domain import calendar
from studio.domain.errors import (
    BookingNotFoundError,
    CustomerNotFoundError,
    InvalidCustomerInputError,
    NoSessionsRemainingError,
)
from studio.domain.models import DEFAULT_PASS_SIZE
from studio.services.common import Clock, parse_id
from studio.stores.interfaces import StudioStore

logger = logging.getLogger(__name__)

LOW_BALANCE_MAX = 2


class SessionPassService:
    """Service for attendance marking and session pass renewal."""

    def __init__(
        self,
        store: StudioStore,
        clock: Clock = calendar.utc_now,
        default_pass_size: int = DEFAULT_PASS_SIZE,
    ) -> None:
        self._store = store
        self._clock = clock
        self._default_pass_size = default_pass_size

    def mark_attendance(self, booking_id: str, attendance_status: AttendanceStatus) -> int:
        """Record attendance for a booking and return the customer's remaining sessions.

        Raises:
            InvalidIdError: If the booking_id is not a valid UUID.
            BookingNotFoundError: If the booking does not exist.
            CustomerNotFoundError: If no customer is linked to the booking.
            NoSessionsRemainingError: If attending would overdraw the pass.
        """
        parsed = parse_id(BookingId.from_string, booking_id, "booking id")
        with self._store.atomic():
            booking = self._store.get_booking(parsed, for_update=True)
            if booking is None:
                raise BookingNotFoundError(booking_id)
            customer = self._customer_for(booking)

            if attendance_status is AttendanceStatus.ATTENDED:
                customer = self._consume(customer, booking)
            elif attendance_status is AttendanceStatus.ABSENT:
                customer = self._refund(customer, booking)

            if booking.attendance_status is not attendance_status:
                self._store.save_booking(replace(booking, attendance_status=attendance_status))

        logger.info(
            "Marked booking %s %s, %d sessions left",
            booking_id,
            attendance_status.value,
            customer.session_pass_remaining,
        )
        return customer.session_pass_remaining

    def purchase_new_pass(self, customer_id: str, session_count: int | None = None) -> Customer:
        """Start a new pass, archiving the current pass's history if it has any.

        A partly used pass can be renewed; its history is archived as it stands.

        Raises:
            InvalidIdError: If the customer_id is not a valid UUID.
            InvalidCustomerInputError: If session_count is below 1.
            CustomerNotFoundError: If the customer does not exist.
        """
        parsed = parse_id(CustomerId.from_string, customer_id, "customer id")
        if session_count is None:
            session_count = self._default_pass_size
        if session_count < 1:
            raise InvalidCustomerInputError("A pass must contain at least one session")

        now = self._clock()
        with self._store.atomic():
            customer = self._store.get_customer(parsed, for_update=True)
            if customer is None:
                raise CustomerNotFoundError(customer_id)

            history = self._store.list_history(customer.id)
            if history and customer.session_pass_purchase_date is not None:
                self._store.add_completed_pass(
                    CompletedPass(
                        id=str(uuid.uuid4()),
                        customer_id=customer.id,
                        purchase_date=customer.session_pass_purchase_date,
                        completed_date=now,
                        sessions_count=len(history),
                        sessions=tuple(
                            CompletedSession(
                                session_number=entry.session_number,
                                class_title=entry.class_title,
                                attended_date=entry.attended_date,
                            )
                            for entry in history
                        ),
                    )
                )
                self._store.clear_history(customer.id)
                logger.info("Archived %d sessions for customer %s", len(history), customer_id)

            customer = replace(
                customer,
                session_pass_remaining=session_count,
                session_pass_total=session_count,
                session_pass_purchase_date=now,
            )
            self._store.save_customer(customer)

        logger.info("Customer %s purchased a %d-session pass", customer_id, session_count)
        return customer

    def get_session_pass(self, customer_id: str) -> SessionPassSummary:
        customer = self._get_customer(customer_id)
        return SessionPassSummary(
            remaining=customer.session_pass_remaining,
            total=customer.session_pass_total,
            purchase_date=customer.session_pass_purchase_date,
            history=tuple(self._store.list_history(customer.id)),
        )

    def list_completed_passes(self, customer_id: str) -> list[CompletedPass]:
        """Return archived passes, most recently completed first."""
        customer = self._get_customer(customer_id)
        return self._store.list_completed_passes(customer.id)

    def list_expired_passes(self) -> list[Customer]:
        return self._store.list_customers_by_remaining(0, 0)

    def list_low_balance_passes(self) -> list[Customer]:
        return self._store.list_customers_by_remaining(1, LOW_BALANCE_MAX)

    def _consume(self, customer: Customer, booking: Booking) -> Customer:
        if self._store.get_history_for_booking(booking.id) is not None:
            return customer
        if customer.session_pass_remaining <= 0:
            raise NoSessionsRemainingError(str(customer.id))

        occurrence = self._store.get_class(booking.class_id)
        customer = replace(customer, session_pass_remaining=customer.session_pass_remaining - 1)
        self._store.save_customer(customer)
        self._store.add_history_entry(
            SessionPassHistoryEntry(
                id=str(uuid.uuid4()),
                customer_id=customer.id,
                booking_id=booking.id,
                session_number=customer.session_pass_total - customer.session_pass_remaining,
                class_title=occurrence.title,
                attended_date=occurrence.starts_at,
            )
        )
        return customer

    def _refund(self, customer: Customer, booking: Booking) -> Customer:
        if self._store.get_history_for_booking(booking.id) is None:
            return customer
        self._store.delete_history_for_booking(booking.id)
        # History is kept across a renewal when the old pass had no purchase
        # date, so the refunded session may belong to a pass that is already full.
        remaining = min(customer.session_pass_remaining + 1, customer.session_pass_total)
        customer = replace(customer, session_pass_remaining=remaining)
        self._store.save_customer(customer)
        return customer

    def _customer_for(self, booking: Booking) -> Customer:
        if booking.customer_id is not None:
            customer = self._store.get_customer(booking.customer_id, for_update=True)
        else:
            customer = self._store.get_customer_by_email(booking.customer_email, for_update=True)
        if customer is None:
            raise CustomerNotFoundError(booking.customer_email)
        return customer

    def _get_customer(self, customer_id: str) -> Customer:
        customer = self._store.get_customer(parse_id(CustomerId.from_string, customer_id, "customer id"))
        if customer is None:
            raise CustomerNotFoundError(customer_id)
        return customer
