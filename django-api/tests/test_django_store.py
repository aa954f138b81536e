"""Service flows against the Django ORM store.

The service unit tests run on the in-memory store; these check that the
ORM store gives the same answers for the queries the services depend on.
Run with: pytest tests/test_django_store.py -v
"""

from datetime import timedelta
from types import SimpleNamespace

import pytest

from studio import models as orm
from studio.domain import AttendanceStatus, BookingStatus, ClassStatus
from studio.domain.errors import (
    AlreadyBookedError,
    ClassFullError,
    NoSessionsRemainingError,
    VillageExistsError,
)
from studio.services import (
    BookingService,
    ClassInput,
    ClassPatch,
    ClassService,
    CustomerService,
    SessionPassService,
    StatsService,
    VillageService,
)
from studio.stores.django_store import DjangoStudioStore

from .conftest import NOW, run_together


@pytest.fixture
def orm_store(db) -> DjangoStudioStore:
    return DjangoStudioStore()


@pytest.fixture
def services(orm_store, clock, notifier):
    return SimpleNamespace(
        classes=ClassService(orm_store, clock=clock),
        bookings=BookingService(orm_store, notifier, clock=clock),
        passes=SessionPassService(orm_store, clock=clock),
        stats=StatsService(orm_store, clock=clock),
        customers=CustomerService(orm_store, notifier),
        villages=VillageService(orm_store),
    )


def class_input(starts_at=None, capacity=10, title="Chair Yoga") -> ClassInput:
    starts_at = starts_at or NOW + timedelta(days=1)
    return ClassInput(
        title=title,
        starts_at=starts_at,
        ends_at=starts_at + timedelta(hours=1),
        capacity=capacity,
        location="Rosewood Lounge",
    )


@pytest.mark.django_db
class TestClassPersistence:
    def test_series_round_trips_through_database(self, services):
        created = services.classes.create_recurring_series(class_input(), repeat_weeks=3)

        listed = [row.occurrence for row in services.classes.list_classes()]

        assert listed == created
        assert orm.FitnessClass.objects.filter(series_id=created[0].series_id.value).count() == 3

    def test_series_edit_and_cancel(self, services):
        created = services.classes.create_recurring_series(class_input(), repeat_weeks=3)
        series_id = str(created[0].series_id)

        assert services.classes.update_series(series_id, str(created[1].id), ClassPatch(capacity=4)) == 2
        assert services.classes.cancel_series(series_id, str(created[2].id)) == 1

        rows = orm.FitnessClass.objects.order_by("start_time")
        assert [row.capacity for row in rows] == [10, 4, 4]
        assert [row.status for row in rows] == ["scheduled", "scheduled", "cancelled"]

    def test_availability_counts_only_active_bookings(self, services):
        occurrence = services.classes.create_class(class_input(capacity=3))
        services.bookings.create_booking(str(occurrence.id), "Alice", "alice@example.com")
        withdrawn = services.bookings.create_booking(str(occurrence.id), "Bob", "bob@example.com")
        services.bookings.cancel_booking(withdrawn.cancel_token)

        [row] = services.classes.list_classes()

        assert (row.booked, row.spots_left) == (1, 2)


@pytest.mark.django_db
class TestBookingPersistence:
    """Given a class in the database, bookings respect capacity and uniqueness."""

    def test_capacity_and_duplicates(self, services):
        occurrence = services.classes.create_class(class_input(capacity=1))
        services.bookings.create_booking(str(occurrence.id), "Alice", "alice@example.com")

        with pytest.raises(ClassFullError):
            services.bookings.create_booking(str(occurrence.id), "Bob", "bob@example.com")
        assert orm.Booking.objects.count() == 1

    def test_duplicate_rejected(self, services):
        occurrence = services.classes.create_class(class_input())
        services.bookings.create_booking(str(occurrence.id), "Alice", "alice@example.com")
        with pytest.raises(AlreadyBookedError):
            services.bookings.create_booking(str(occurrence.id), "Alice", "ALICE@example.com")

    def test_cancelling_class_cancels_bookings(self, services):
        occurrence = services.classes.create_class(class_input())
        services.bookings.create_booking(str(occurrence.id), "Alice", "alice@example.com")

        services.classes.cancel_occurrence(str(occurrence.id))

        row = orm.Booking.objects.get()
        assert row.status == BookingStatus.CANCELLED.value
        assert row.cancelled_at == NOW
        assert orm.FitnessClass.objects.get().status == ClassStatus.CANCELLED.value


@pytest.mark.django_db
class TestSessionPassPersistence:
    def test_attendance_and_renewal(self, services):
        customer = services.customers.register_customer("Alice", "alice@example.com")
        services.passes.purchase_new_pass(str(customer.id), session_count=1)
        first = services.classes.create_class(class_input(title="Tai Chi"))
        second = services.classes.create_class(class_input(starts_at=NOW + timedelta(days=2)))
        booked = services.bookings.create_booking(str(first.id), "Alice", "alice@example.com")
        other = services.bookings.create_booking(str(second.id), "Alice", "alice@example.com")

        assert services.passes.mark_attendance(str(booked.id), AttendanceStatus.ATTENDED) == 0
        assert services.passes.mark_attendance(str(booked.id), AttendanceStatus.ATTENDED) == 0
        with pytest.raises(NoSessionsRemainingError):
            services.passes.mark_attendance(str(other.id), AttendanceStatus.ATTENDED)
        assert orm.SessionPassHistory.objects.count() == 1

        services.passes.purchase_new_pass(str(customer.id), session_count=5)

        [archived] = services.passes.list_completed_passes(str(customer.id))
        assert archived.sessions_count == 1
        assert archived.sessions[0].class_title == "Tai Chi"
        assert orm.SessionPassHistory.objects.count() == 0
        assert orm.Customer.objects.get().session_pass_remaining == 5

    def test_absent_restores_session(self, services):
        customer = services.customers.register_customer("Alice", "alice@example.com")
        occurrence = services.classes.create_class(class_input())
        booking = services.bookings.create_booking(str(occurrence.id), "Alice", "alice@example.com")

        services.passes.mark_attendance(str(booking.id), AttendanceStatus.ATTENDED)
        remaining = services.passes.mark_attendance(str(booking.id), AttendanceStatus.ABSENT)

        assert remaining == customer.session_pass_total
        assert orm.Booking.objects.get().attendance_status == AttendanceStatus.ABSENT.value


@pytest.mark.django_db
class TestStatsPersistence:
    def test_leaderboard_from_database(self, services):
        visits = [(1, "Bob", "bob@example.com"), (2, "Bob", "bob@example.com"), (1, "Alice", "alice@example.com")]
        for days, name, email in visits:
            occurrence = services.classes.create_class(
                class_input(starts_at=NOW - timedelta(days=days))
            )
            services.bookings.create_booking(str(occurrence.id), name, email)

        board = services.stats.leaderboard()

        assert [(e.customer_name, e.sessions_attended) for e in board] == [("Bob", 2), ("Alice", 1)]
        assert services.stats.customer_dashboard("bob@example.com").stats.streak == 1


@pytest.mark.django_db
class TestDirectoryPersistence:
    def test_village_registry(self, services):
        rosewood = services.villages.create_village("Rosewood")
        services.villages.create_village("Harbour View")

        with pytest.raises(VillageExistsError):
            services.villages.create_village("rosewood")
        services.villages.rename_village(str(rosewood.id), "Rosewood Gardens")
        assert [v.name for v in services.villages.list_villages()] == [
            "Harbour View",
            "Rosewood Gardens",
        ]

        services.villages.delete_village(str(rosewood.id))
        assert list(orm.Village.objects.values_list("name", flat=True)) == ["Harbour View"]

    def test_customer_listing_counts_bookings(self, services):
        services.customers.register_customer("Bob", "bob@example.com")
        services.customers.register_customer("Alice", "alice@example.com")
        for days in (1, 2):
            starts_at = NOW + timedelta(days=days)
            occurrence = services.classes.create_class(class_input(starts_at=starts_at))
            services.bookings.create_booking(str(occurrence.id), "Bob", "bob@example.com")

        listings = services.customers.list_customers()

        assert [(row.customer.name, row.booking_count) for row in listings] == [
            ("Alice", 0),
            ("Bob", 2),
        ]

    def test_pass_counters_saved(self, services):
        alice = services.customers.register_customer("Alice", "alice@example.com")
        services.customers.update_profile(
            str(alice.id), session_pass_remaining=4, session_pass_total=8
        )

        row = orm.Customer.objects.get()
        assert (row.session_pass_remaining, row.session_pass_total) == (4, 8)


@pytest.mark.django_db(transaction=True)
class TestConcurrentWrites:
    """Given two database connections writing at once, the second waits for the first."""

    def test_last_seat_goes_to_one_caller(self, services):
        occurrence = services.classes.create_class(class_input(capacity=1))
        class_id = str(occurrence.id)

        outcomes = run_together(
            lambda: services.bookings.create_booking(class_id, "Alice", "alice@example.com"),
            lambda: services.bookings.create_booking(class_id, "Bob", "bob@example.com"),
        )

        assert sum(isinstance(outcome, ClassFullError) for outcome in outcomes) == 1
        [booking] = [outcome for outcome in outcomes if not isinstance(outcome, Exception)]
        assert booking.status is BookingStatus.ACTIVE
        assert orm.Booking.objects.count() == 1

    def test_double_attendance_consumes_one_session(self, services):
        services.customers.register_customer("Alice", "alice@example.com")
        occurrence = services.classes.create_class(class_input())
        booking = services.bookings.create_booking(str(occurrence.id), "Alice", "alice@example.com")

        outcomes = run_together(
            lambda: services.passes.mark_attendance(str(booking.id), AttendanceStatus.ATTENDED),
            lambda: services.passes.mark_attendance(str(booking.id), AttendanceStatus.ATTENDED),
        )

        assert outcomes == [9, 9]
        assert orm.SessionPassHistory.objects.count() == 1
        assert orm.Customer.objects.get().session_pass_remaining == 9
