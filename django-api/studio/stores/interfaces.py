"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from contextlib import AbstractContextManager
from datetime import datetime
from typing import Iterable

from studio.domain import (
    Booking,
    BookingId,
    ClassId,
    ClassOccurrence,
    CompletedPass,
    Customer,
    CustomerBooking,
    CustomerId,
    SeriesId,
    SessionPassHistoryEntry,
    Village,
    VillageId,
)


class ClassStore(ABC):
    """Interface for class occurrence persistence operations."""

    @abstractmethod
    def get_class(self, class_id: ClassId, for_update: bool = False) -> ClassOccurrence | None:
        """Return an occurrence by ID, or None if not found.

        ``for_update`` locks the row until the surrounding atomic block ends.
        """
        ...

    @abstractmethod
    def add_class(self, occurrence: ClassOccurrence) -> None:
        """Persist a new occurrence."""
        ...

    @abstractmethod
    def save_class(self, occurrence: ClassOccurrence) -> None:
        """Overwrite an existing occurrence."""
        ...

    @abstractmethod
    def list_classes(
        self, starts_from: datetime | None = None, starts_to: datetime | None = None
    ) -> list[ClassOccurrence]:
        """Return occurrences in the optional start window, ordered by starts_at ascending."""
        ...

    @abstractmethod
    def list_series_from(self, series_id: SeriesId, starts_at: datetime) -> list[ClassOccurrence]:
        """Return scheduled occurrences of a series starting at or after ``starts_at``."""
        ...


class BookingStore(ABC):
    """Interface for booking persistence operations."""

    @abstractmethod
    def get_booking(self, booking_id: BookingId, for_update: bool = False) -> Booking | None:
        """Return a booking by ID, or None if not found."""
        ...

    @abstractmethod
    def get_booking_by_token(self, cancel_token: str, for_update: bool = False) -> Booking | None:
        """Return a booking by its cancellation token, or None if not found."""
        ...

    @abstractmethod
    def add_booking(self, booking: Booking) -> None:
        """Persist a new booking."""
        ...

    @abstractmethod
    def save_booking(self, booking: Booking) -> None:
        """Overwrite an existing booking."""
        ...

    @abstractmethod
    def count_active_bookings(self, class_id: ClassId) -> int:
        """Return the number of active bookings for a class."""
        ...

    @abstractmethod
    def count_active_bookings_by_class(self, class_ids: Iterable[ClassId]) -> dict[ClassId, int]:
        """Return active booking counts keyed by class; classes without bookings map to 0."""
        ...

    @abstractmethod
    def find_active_booking(self, class_id: ClassId, customer_email: str) -> Booking | None:
        """Return the active booking for a class and normalized email, if any."""
        ...

    @abstractmethod
    def list_active_bookings(self, class_id: ClassId) -> list[Booking]:
        """Return active bookings for a class, ordered by created_at ascending."""
        ...

    @abstractmethod
    def cancel_active_bookings(self, class_id: ClassId, cancelled_at: datetime) -> int:
        """Cancel every active booking of a class and return how many changed."""
        ...

    @abstractmethod
    def list_customer_bookings(self, customer_email: str) -> list[CustomerBooking]:
        """Return all bookings for a normalized email joined with their class,
        ordered by class start descending."""
        ...

    @abstractmethod
    def count_bookings_by_email(self) -> dict[str, int]:
        """Return how many bookings of any status each normalized email holds."""
        ...

    @abstractmethod
    def list_attended_bookings(self, before: datetime) -> list[CustomerBooking]:
        """Return active bookings of scheduled classes that started before ``before``,
        ordered by booking created_at ascending."""
        ...


class CustomerStore(ABC):
    """Interface for customer persistence operations."""

    @abstractmethod
    def get_customer(self, customer_id: CustomerId, for_update: bool = False) -> Customer | None:
        """Return a customer by ID, or None if not found."""
        ...

    @abstractmethod
    def get_customer_by_email(self, email: str, for_update: bool = False) -> Customer | None:
        """Return a customer by normalized email, or None if not found."""
        ...

    @abstractmethod
    def add_customer(self, customer: Customer) -> None:
        """Persist a new customer."""
        ...

    @abstractmethod
    def save_customer(self, customer: Customer) -> None:
        """Overwrite an existing customer."""
        ...

    @abstractmethod
    def list_customers(self) -> list[Customer]:
        """Return every customer ordered by name."""
        ...

    @abstractmethod
    def list_customers_by_remaining(self, minimum: int, maximum: int) -> list[Customer]:
        """Return customers whose remaining sessions fall in [minimum, maximum], ordered by name."""
        ...

    @abstractmethod
    def list_customers_with_birthdate(self) -> list[Customer]:
        """Return customers who have a birthdate on record."""
        ...


class SessionPassStore(ABC):
    """Interface for session pass history and archive persistence."""

    @abstractmethod
    def get_history_for_booking(self, booking_id: BookingId) -> SessionPassHistoryEntry | None:
        """Return the history row recorded for a booking, if any."""
        ...

    @abstractmethod
    def add_history_entry(self, entry: SessionPassHistoryEntry) -> None:
        """Persist a history row. At most one row may exist per booking."""
        ...

    @abstractmethod
    def delete_history_for_booking(self, booking_id: BookingId) -> None:
        """Delete the history row recorded for a booking."""
        ...

    @abstractmethod
    def list_history(self, customer_id: CustomerId) -> list[SessionPassHistoryEntry]:
        """Return a customer's live history ordered by session_number ascending."""
        ...

    @abstractmethod
    def clear_history(self, customer_id: CustomerId) -> int:
        """Delete a customer's live history and return how many rows were removed."""
        ...

    @abstractmethod
    def add_completed_pass(self, completed_pass: CompletedPass) -> None:
        """Persist an archived pass together with its sessions."""
        ...

    @abstractmethod
    def list_completed_passes(self, customer_id: CustomerId) -> list[CompletedPass]:
        """Return archived passes ordered by completed_date descending."""
        ...


class VillageStore(ABC):
    """Interface for the village registry."""

    @abstractmethod
    def list_villages(self) -> list[Village]:
        """Return every village ordered by name."""
        ...

    @abstractmethod
    def get_village(self, village_id: VillageId) -> Village | None:
        ...

    @abstractmethod
    def get_village_by_name(self, name: str) -> Village | None:
        """Return the village whose name matches ignoring case, if any."""
        ...

    @abstractmethod
    def add_village(self, village: Village) -> None:
        ...

    @abstractmethod
    def save_village(self, village: Village) -> None:
        ...

    @abstractmethod
    def delete_village(self, village_id: VillageId) -> bool:
        """Delete a village and return whether it existed."""
        ...


class StudioStore(ClassStore, BookingStore, CustomerStore, SessionPassStore, VillageStore):
    """The full record store consumed by the services."""

    @abstractmethod
    def atomic(self) -> AbstractContextManager:
        """Return a context manager that runs its block as one atomic unit."""
        ...
