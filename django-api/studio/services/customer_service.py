"""Customer directory: registration, profile edits and birthday greetings."""

import logging
from dataclasses import replace
from datetime import date

from studio import notifications
from studio.domain import Customer, CustomerId, CustomerListing, EmailAddress
from studio.domain.errors import (
    CustomerNotFoundError,
    EmailExistsError,
    InvalidCustomerInputError,
)
from studio.domain.models import DEFAULT_PASS_SIZE
from studio.domain.calendar import same_month_day
from studio.notifications import Notifier, NullNotifier, notify_safely
from studio.services.common import parse_id
from studio.stores.interfaces import StudioStore

logger = logging.getLogger(__name__)


def _email(value: str) -> str:
    try:
        return EmailAddress(value or "").value
    except ValueError:
        raise InvalidCustomerInputError("A valid email address is required") from None


def _name(value: str) -> str:
    name = (value or "").strip()
    if not name:
        raise InvalidCustomerInputError("Name is required")
    return name


def _check_pass(remaining: int, total: int) -> None:
    if total < 1:
        raise InvalidCustomerInputError("A pass must contain at least one session")
    if not 0 <= remaining <= total:
        raise InvalidCustomerInputError("Remaining sessions must be between 0 and the pass total")


class CustomerService:
    """Service for customer records."""

    def __init__(
        self,
        store: StudioStore,
        notifier: Notifier | None = None,
        default_pass_size: int = DEFAULT_PASS_SIZE,
    ) -> None:
        self._store = store
        self._notifier = notifier or NullNotifier()
        self._default_pass_size = default_pass_size

    def register_customer(
        self,
        name: str,
        email: str,
        village: str | None = None,
        birthdate: date | None = None,
        session_pass_total: int | None = None,
        session_pass_remaining: int | None = None,
    ) -> Customer:
        """Create a customer with a fresh, undated session pass.

        The pass holds the default number of sessions unless staff set the
        counters; remaining defaults to the total.

        Raises:
            InvalidCustomerInputError: If the name or email is missing or malformed,
                or the pass counters are out of range.
            EmailExistsError: If the email is already registered.
        """
        total = self._default_pass_size if session_pass_total is None else session_pass_total
        remaining = total if session_pass_remaining is None else session_pass_remaining
        _check_pass(remaining, total)
        customer = Customer(
            id=CustomerId.new(),
            name=_name(name),
            email=_email(email),
            village=(village or "").strip() or None,
            birthdate=birthdate,
            session_pass_remaining=remaining,
            session_pass_total=total,
        )
        with self._store.atomic():
            if self._store.get_customer_by_email(customer.email) is not None:
                raise EmailExistsError()
            self._store.add_customer(customer)
        logger.info("Registered customer %s", customer.id)
        return customer

    def get_customer(self, customer_id: str) -> Customer:
        """Return a customer by ID.

        Raises:
            InvalidIdError: If the customer_id is not a valid UUID.
            CustomerNotFoundError: If the customer does not exist.
        """
        customer = self._store.get_customer(parse_id(CustomerId.from_string, customer_id, "customer id"))
        if customer is None:
            raise CustomerNotFoundError(customer_id)
        return customer

    def update_profile(
        self,
        customer_id: str,
        name: str | None = None,
        email: str | None = None,
        village: str | None = None,
        birthdate: date | None = None,
        session_pass_remaining: int | None = None,
        session_pass_total: int | None = None,
    ) -> Customer:
        """Change profile fields. Fields left as None are not touched.

        The pass counters are staff corrections to the current pass; history
        and archived passes are left as they are.

        Raises:
            InvalidIdError: If the customer_id is not a valid UUID.
            InvalidCustomerInputError: If a field is malformed or the counters are out of range.
            CustomerNotFoundError: If the customer does not exist.
            EmailExistsError: If the new email belongs to another customer.
        """
        parsed = parse_id(CustomerId.from_string, customer_id, "customer id")
        changes = {}
        if name is not None:
            changes["name"] = _name(name)
        if email is not None:
            changes["email"] = _email(email)
        if village is not None:
            changes["village"] = village.strip() or None
        if birthdate is not None:
            changes["birthdate"] = birthdate
        if session_pass_remaining is not None:
            changes["session_pass_remaining"] = session_pass_remaining
        if session_pass_total is not None:
            changes["session_pass_total"] = session_pass_total

        with self._store.atomic():
            customer = self._store.get_customer(parsed, for_update=True)
            if customer is None:
                raise CustomerNotFoundError(customer_id)
            new_email = changes.get("email")
            if new_email and new_email != customer.email:
                owner = self._store.get_customer_by_email(new_email)
                if owner is not None and owner.id != customer.id:
                    raise EmailExistsError()
            _check_pass(
                changes.get("session_pass_remaining", customer.session_pass_remaining),
                changes.get("session_pass_total", customer.session_pass_total),
            )
            customer = replace(customer, **changes)
            self._store.save_customer(customer)
        if session_pass_remaining is not None or session_pass_total is not None:
            logger.info(
                "Set pass counters for customer %s to %d of %d",
                customer_id,
                customer.session_pass_remaining,
                customer.session_pass_total,
            )
        return customer

    def list_customers(self) -> list[CustomerListing]:
        """Return every customer by name with how many bookings their email holds."""
        counts = self._store.count_bookings_by_email()
        return [
            CustomerListing(customer=customer, booking_count=counts.get(customer.email, 0))
            for customer in self._store.list_customers()
        ]

    def customers_with_birthday(self, today: date) -> list[Customer]:
        return [
            customer
            for customer in self._store.list_customers_with_birthdate()
            if same_month_day(customer.birthdate, today)
        ]

    def send_birthday_greetings(self, today: date) -> int:
        """Greet every customer born on this month and day. Returns how many were sent."""
        sent = 0
        for customer in self.customers_with_birthday(today):
            if notify_safely(
                self._notifier,
                notifications.BIRTHDAY,
                customer.email,
                {"customer_name": customer.name},
            ):
                sent += 1
        logger.info("Sent %d birthday greetings", sent)
        return sent
