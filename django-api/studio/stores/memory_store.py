"""In-memory implementation of the StudioStore.

Used by the unit tests and for running the services without a database.
A single re-entrant lock serializes every atomic block.
"""

import threading
from collections import Counter
from dataclasses import replace
from datetime import datetime
from typing import Iterable

from studio.domain import (
    Booking,
    BookingId,
    BookingStatus,
    ClassId,
    ClassOccurrence,
    ClassStatus,
    CompletedPass,
    Customer,
    CustomerBooking,
    CustomerId,
    SeriesId,
    SessionPassHistoryEntry,
    Village,
    VillageId,
)
from studio.stores.interfaces import StudioStore


class InMemoryStudioStore(StudioStore):
    """Dictionary-backed store. Insertion order doubles as creation order."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._classes: dict[ClassId, ClassOccurrence] = {}
        self._bookings: dict[BookingId, Booking] = {}
        self._customers: dict[CustomerId, Customer] = {}
        self._history: dict[BookingId, SessionPassHistoryEntry] = {}
        self._completed: list[CompletedPass] = []
        self._villages: dict[VillageId, Village] = {}

    def atomic(self) -> threading.RLock:
        return self._lock

    # Classes

    def get_class(self, class_id: ClassId, for_update: bool = False) -> ClassOccurrence | None:
        return self._classes.get(class_id)

    def add_class(self, occurrence: ClassOccurrence) -> None:
        with self._lock:
            self._classes[occurrence.id] = occurrence

    def save_class(self, occurrence: ClassOccurrence) -> None:
        with self._lock:
            if occurrence.id not in self._classes:
                raise KeyError(str(occurrence.id))
            self._classes[occurrence.id] = occurrence

    def list_classes(
        self, starts_from: datetime | None = None, starts_to: datetime | None = None
    ) -> list[ClassOccurrence]:
        classes = [
            occurrence
            for occurrence in self._classes.values()
            if (starts_from is None or occurrence.starts_at >= starts_from)
            and (starts_to is None or occurrence.starts_at <= starts_to)
        ]
        return sorted(classes, key=lambda occurrence: occurrence.starts_at)

    def list_series_from(self, series_id: SeriesId, starts_at: datetime) -> list[ClassOccurrence]:
        siblings = [
            occurrence
            for occurrence in self._classes.values()
            if occurrence.series_id == series_id
            and occurrence.status is ClassStatus.SCHEDULED
            and occurrence.starts_at >= starts_at
        ]
        return sorted(siblings, key=lambda occurrence: occurrence.starts_at)

    # Bookings

    def get_booking(self, booking_id: BookingId, for_update: bool = False) -> Booking | None:
        return self._bookings.get(booking_id)

    def get_booking_by_token(self, cancel_token: str, for_update: bool = False) -> Booking | None:
        return next(
            (b for b in self._bookings.values() if b.cancel_token == cancel_token),
            None,
        )

    def add_booking(self, booking: Booking) -> None:
        with self._lock:
            if self.get_booking_by_token(booking.cancel_token) is not None:
                raise ValueError("Duplicate cancellation token")
            self._bookings[booking.id] = booking

    def save_booking(self, booking: Booking) -> None:
        with self._lock:
            if booking.id not in self._bookings:
                raise KeyError(str(booking.id))
            self._bookings[booking.id] = booking

    def count_active_bookings(self, class_id: ClassId) -> int:
        return len(self.list_active_bookings(class_id))

    def count_active_bookings_by_class(self, class_ids: Iterable[ClassId]) -> dict[ClassId, int]:
        counts = {class_id: 0 for class_id in class_ids}
        for booking in self._bookings.values():
            if booking.is_active and booking.class_id in counts:
                counts[booking.class_id] += 1
        return counts

    def find_active_booking(self, class_id: ClassId, customer_email: str) -> Booking | None:
        return next(
            (
                b
                for b in self._bookings.values()
                if b.class_id == class_id and b.customer_email == customer_email and b.is_active
            ),
            None,
        )

    def list_active_bookings(self, class_id: ClassId) -> list[Booking]:
        return [b for b in self._bookings.values() if b.class_id == class_id and b.is_active]

    def cancel_active_bookings(self, class_id: ClassId, cancelled_at: datetime) -> int:
        with self._lock:
            active = self.list_active_bookings(class_id)
            for booking in active:
                self._bookings[booking.id] = replace(
                    booking, status=BookingStatus.CANCELLED, cancelled_at=cancelled_at
                )
            return len(active)

    def list_customer_bookings(self, customer_email: str) -> list[CustomerBooking]:
        joined = [
            self._join(b) for b in self._bookings.values() if b.customer_email == customer_email
        ]
        return sorted(joined, key=lambda row: row.class_starts_at, reverse=True)

    def count_bookings_by_email(self) -> dict[str, int]:
        return dict(Counter(b.customer_email for b in self._bookings.values()))

    def list_attended_bookings(self, before: datetime) -> list[CustomerBooking]:
        rows = []
        for booking in self._bookings.values():
            if not booking.is_active:
                continue
            row = self._join(booking)
            if row.class_status is ClassStatus.SCHEDULED and row.class_starts_at < before:
                rows.append(row)
        return rows

    def _join(self, booking: Booking) -> CustomerBooking:
        occurrence = self._classes[booking.class_id]
        return CustomerBooking(
            booking=booking,
            class_title=occurrence.title,
            class_starts_at=occurrence.starts_at,
            class_ends_at=occurrence.ends_at,
            class_status=occurrence.status,
            class_location=occurrence.location,
        )

    # Customers

    def get_customer(self, customer_id: CustomerId, for_update: bool = False) -> Customer | None:
        return self._customers.get(customer_id)

    def get_customer_by_email(self, email: str, for_update: bool = False) -> Customer | None:
        return next((c for c in self._customers.values() if c.email == email), None)

    def add_customer(self, customer: Customer) -> None:
        with self._lock:
            if self.get_customer_by_email(customer.email) is not None:
                raise ValueError("Duplicate customer email")
            self._customers[customer.id] = customer

    def save_customer(self, customer: Customer) -> None:
        with self._lock:
            if customer.id not in self._customers:
                raise KeyError(str(customer.id))
            self._customers[customer.id] = customer

    def list_customers(self) -> list[Customer]:
        return sorted(self._customers.values(), key=lambda c: c.name)

    def list_customers_by_remaining(self, minimum: int, maximum: int) -> list[Customer]:
        matches = [
            c
            for c in self._customers.values()
            if minimum <= c.session_pass_remaining <= maximum
        ]
        return sorted(matches, key=lambda c: c.name)

    def list_customers_with_birthdate(self) -> list[Customer]:
        return [c for c in self._customers.values() if c.birthdate is not None]

    # Session pass history

    def get_history_for_booking(self, booking_id: BookingId) -> SessionPassHistoryEntry | None:
        return self._history.get(booking_id)

    def add_history_entry(self, entry: SessionPassHistoryEntry) -> None:
        with self._lock:
            if entry.booking_id in self._history:
                raise ValueError("History already recorded for booking")
            self._history[entry.booking_id] = entry

    def delete_history_for_booking(self, booking_id: BookingId) -> None:
        with self._lock:
            self._history.pop(booking_id, None)

    def list_history(self, customer_id: CustomerId) -> list[SessionPassHistoryEntry]:
        entries = [e for e in self._history.values() if e.customer_id == customer_id]
        return sorted(entries, key=lambda e: e.session_number)

    def clear_history(self, customer_id: CustomerId) -> int:
        with self._lock:
            doomed = [e.booking_id for e in self._history.values() if e.customer_id == customer_id]
            for booking_id in doomed:
                del self._history[booking_id]
            return len(doomed)

    def add_completed_pass(self, completed_pass: CompletedPass) -> None:
        with self._lock:
            self._completed.append(completed_pass)

    def list_completed_passes(self, customer_id: CustomerId) -> list[CompletedPass]:
        passes = [p for p in self._completed if p.customer_id == customer_id]
        return sorted(passes, key=lambda p: p.completed_date, reverse=True)

    # Villages

    def list_villages(self) -> list[Village]:
        return sorted(self._villages.values(), key=lambda v: v.name)

    def get_village(self, village_id: VillageId) -> Village | None:
        return self._villages.get(village_id)

    def get_village_by_name(self, name: str) -> Village | None:
        wanted = name.casefold()
        return next((v for v in self._villages.values() if v.name.casefold() == wanted), None)

    def add_village(self, village: Village) -> None:
        with self._lock:
            if self.get_village_by_name(village.name) is not None:
                raise ValueError("Duplicate village name")
            self._villages[village.id] = village

    def save_village(self, village: Village) -> None:
        with self._lock:
            if village.id not in self._villages:
                raise KeyError(str(village.id))
            self._villages[village.id] = village

    def delete_village(self, village_id: VillageId) -> bool:
        with self._lock:
            return self._villages.pop(village_id, None) is not None
