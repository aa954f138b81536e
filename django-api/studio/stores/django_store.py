"""Django ORM implementation of the StudioStore."""

from datetime import datetime
from typing import Iterable

from django.db import transaction
from django.db.models import Count, Q

from studio import models as orm
from studio.domain import (
    AttendanceStatus,
    Booking,
    BookingId,
    BookingStatus,
    Capacity,
    ClassId,
    ClassOccurrence,
    ClassStatus,
    CompletedPass,
    CompletedSession,
    Customer,
    CustomerBooking,
    CustomerId,
    SeriesId,
    SessionPassHistoryEntry,
    Village,
    VillageId,
)
from studio.stores.interfaces import StudioStore


def _to_class(row: orm.FitnessClass) -> ClassOccurrence:
    return ClassOccurrence(
        id=ClassId(row.id),
        title=row.title,
        starts_at=row.start_time,
        ends_at=row.end_time,
        capacity=Capacity(row.capacity),
        location=row.location,
        status=ClassStatus(row.status),
        series_id=SeriesId(row.series_id) if row.series_id else None,
    )


def _to_booking(row: orm.Booking) -> Booking:
    return Booking(
        id=BookingId(row.id),
        class_id=ClassId(row.fitness_class_id),
        customer_id=CustomerId(row.customer_id) if row.customer_id else None,
        customer_name=row.customer_name,
        customer_email=row.customer_email,
        village=row.village,
        status=BookingStatus(row.status),
        cancel_token=row.cancel_token,
        attendance_status=AttendanceStatus(row.attendance_status),
        created_at=row.created_at,
        cancelled_at=row.cancelled_at,
    )


def _to_customer_booking(row: orm.Booking) -> CustomerBooking:
    return CustomerBooking(
        booking=_to_booking(row),
        class_title=row.fitness_class.title,
        class_starts_at=row.fitness_class.start_time,
        class_ends_at=row.fitness_class.end_time,
        class_status=ClassStatus(row.fitness_class.status),
        class_location=row.fitness_class.location,
    )


def _to_customer(row: orm.Customer) -> Customer:
    return Customer(
        id=CustomerId(row.id),
        name=row.name,
        email=row.email,
        village=row.village,
        birthdate=row.birthdate,
        session_pass_remaining=row.session_pass_remaining,
        session_pass_total=row.session_pass_total,
        session_pass_purchase_date=row.session_pass_purchase_date,
    )


def _to_village(row: orm.Village) -> Village:
    return Village(id=VillageId(row.id), name=row.name)


def _to_history(row: orm.SessionPassHistory) -> SessionPassHistoryEntry:
    return SessionPassHistoryEntry(
        id=str(row.id),
        customer_id=CustomerId(row.customer_id),
        booking_id=BookingId(row.booking_id),
        session_number=row.session_number,
        class_title=row.class_title,
        attended_date=row.attended_date,
    )


def _to_completed_pass(row: orm.CompletedSessionPass) -> CompletedPass:
    return CompletedPass(
        id=str(row.id),
        customer_id=CustomerId(row.customer_id),
        purchase_date=row.purchase_date,
        completed_date=row.completed_date,
        sessions_count=row.sessions_count,
        sessions=tuple(
            CompletedSession(
                session_number=session.session_number,
                class_title=session.class_title,
                attended_date=session.attended_date,
            )
            for session in row.sessions.all()
        ),
    )


class DjangoStudioStore(StudioStore):
    """Relational store using Django ORM.

    Row locks taken with ``for_update=True`` last until the enclosing
    ``atomic()`` block commits.
    """

    def atomic(self) -> transaction.Atomic:
        return transaction.atomic()

    # Classes

    def get_class(self, class_id: ClassId, for_update: bool = False) -> ClassOccurrence | None:
        queryset = orm.FitnessClass.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        row = queryset.filter(id=class_id.value).first()
        return _to_class(row) if row else None

    def add_class(self, occurrence: ClassOccurrence) -> None:
        orm.FitnessClass.objects.create(
            id=occurrence.id.value,
            title=occurrence.title,
            start_time=occurrence.starts_at,
            end_time=occurrence.ends_at,
            capacity=occurrence.capacity.value,
            location=occurrence.location,
            status=occurrence.status.value,
            series_id=occurrence.series_id.value if occurrence.series_id else None,
        )

    def save_class(self, occurrence: ClassOccurrence) -> None:
        updated = orm.FitnessClass.objects.filter(id=occurrence.id.value).update(
            title=occurrence.title,
            start_time=occurrence.starts_at,
            end_time=occurrence.ends_at,
            capacity=occurrence.capacity.value,
            location=occurrence.location,
            status=occurrence.status.value,
            series_id=occurrence.series_id.value if occurrence.series_id else None,
        )
        if not updated:
            raise orm.FitnessClass.DoesNotExist(str(occurrence.id))

    def list_classes(
        self, starts_from: datetime | None = None, starts_to: datetime | None = None
    ) -> list[ClassOccurrence]:
        queryset = orm.FitnessClass.objects.order_by("start_time")
        if starts_from is not None:
            queryset = queryset.filter(start_time__gte=starts_from)
        if starts_to is not None:
            queryset = queryset.filter(start_time__lte=starts_to)
        return [_to_class(row) for row in queryset]

    def list_series_from(self, series_id: SeriesId, starts_at: datetime) -> list[ClassOccurrence]:
        queryset = orm.FitnessClass.objects.filter(
            series_id=series_id.value,
            status=ClassStatus.SCHEDULED.value,
            start_time__gte=starts_at,
        ).order_by("start_time")
        return [_to_class(row) for row in queryset]

    # Bookings

    def get_booking(self, booking_id: BookingId, for_update: bool = False) -> Booking | None:
        queryset = orm.Booking.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        row = queryset.filter(id=booking_id.value).first()
        return _to_booking(row) if row else None

    def get_booking_by_token(self, cancel_token: str, for_update: bool = False) -> Booking | None:
        queryset = orm.Booking.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        row = queryset.filter(cancel_token=cancel_token).first()
        return _to_booking(row) if row else None

    def add_booking(self, booking: Booking) -> None:
        orm.Booking.objects.create(
            id=booking.id.value,
            fitness_class_id=booking.class_id.value,
            customer_id=booking.customer_id.value if booking.customer_id else None,
            customer_name=booking.customer_name,
            customer_email=booking.customer_email,
            village=booking.village,
            status=booking.status.value,
            cancel_token=booking.cancel_token,
            attendance_status=booking.attendance_status.value,
            created_at=booking.created_at,
            cancelled_at=booking.cancelled_at,
        )

    def save_booking(self, booking: Booking) -> None:
        updated = orm.Booking.objects.filter(id=booking.id.value).update(
            customer_id=booking.customer_id.value if booking.customer_id else None,
            customer_name=booking.customer_name,
            customer_email=booking.customer_email,
            village=booking.village,
            status=booking.status.value,
            attendance_status=booking.attendance_status.value,
            cancelled_at=booking.cancelled_at,
        )
        if not updated:
            raise orm.Booking.DoesNotExist(str(booking.id))

    def count_active_bookings(self, class_id: ClassId) -> int:
        return orm.Booking.objects.filter(
            fitness_class_id=class_id.value, status=BookingStatus.ACTIVE.value
        ).count()

    def count_active_bookings_by_class(self, class_ids: Iterable[ClassId]) -> dict[ClassId, int]:
        ids = list(class_ids)
        rows = (
            orm.FitnessClass.objects.filter(id__in=[class_id.value for class_id in ids])
            .annotate(
                active=Count("bookings", filter=Q(bookings__status=BookingStatus.ACTIVE.value))
            )
            .values_list("id", "active")
        )
        counts = {class_id: 0 for class_id in ids}
        counts.update({ClassId(row_id): active for row_id, active in rows})
        return counts

    def find_active_booking(self, class_id: ClassId, customer_email: str) -> Booking | None:
        row = orm.Booking.objects.filter(
            fitness_class_id=class_id.value,
            customer_email=customer_email,
            status=BookingStatus.ACTIVE.value,
        ).first()
        return _to_booking(row) if row else None

    def list_active_bookings(self, class_id: ClassId) -> list[Booking]:
        queryset = orm.Booking.objects.filter(
            fitness_class_id=class_id.value, status=BookingStatus.ACTIVE.value
        ).order_by("created_at")
        return [_to_booking(row) for row in queryset]

    def cancel_active_bookings(self, class_id: ClassId, cancelled_at: datetime) -> int:
        return orm.Booking.objects.filter(
            fitness_class_id=class_id.value, status=BookingStatus.ACTIVE.value
        ).update(status=BookingStatus.CANCELLED.value, cancelled_at=cancelled_at)

    def list_customer_bookings(self, customer_email: str) -> list[CustomerBooking]:
        queryset = (
            orm.Booking.objects.select_related("fitness_class")
            .filter(customer_email=customer_email)
            .order_by("-fitness_class__start_time")
        )
        return [_to_customer_booking(row) for row in queryset]

    def count_bookings_by_email(self) -> dict[str, int]:
        rows = (
            orm.Booking.objects.order_by()
            .values("customer_email")
            .annotate(total=Count("id"))
        )
        return {row["customer_email"]: row["total"] for row in rows}

    def list_attended_bookings(self, before: datetime) -> list[CustomerBooking]:
        queryset = (
            orm.Booking.objects.select_related("fitness_class")
            .filter(
                status=BookingStatus.ACTIVE.value,
                fitness_class__status=ClassStatus.SCHEDULED.value,
                fitness_class__start_time__lt=before,
            )
            .order_by("created_at")
        )
        return [_to_customer_booking(row) for row in queryset]

    # Customers

    def get_customer(self, customer_id: CustomerId, for_update: bool = False) -> Customer | None:
        queryset = orm.Customer.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        row = queryset.filter(id=customer_id.value).first()
        return _to_customer(row) if row else None

    def get_customer_by_email(self, email: str, for_update: bool = False) -> Customer | None:
        queryset = orm.Customer.objects.all()
        if for_update:
            queryset = queryset.select_for_update()
        row = queryset.filter(email=email).first()
        return _to_customer(row) if row else None

    def add_customer(self, customer: Customer) -> None:
        orm.Customer.objects.create(
            id=customer.id.value,
            name=customer.name,
            email=customer.email,
            village=customer.village,
            birthdate=customer.birthdate,
            session_pass_remaining=customer.session_pass_remaining,
            session_pass_total=customer.session_pass_total,
            session_pass_purchase_date=customer.session_pass_purchase_date,
        )

    def save_customer(self, customer: Customer) -> None:
        updated = orm.Customer.objects.filter(id=customer.id.value).update(
            name=customer.name,
            email=customer.email,
            village=customer.village,
            birthdate=customer.birthdate,
            session_pass_remaining=customer.session_pass_remaining,
            session_pass_total=customer.session_pass_total,
            session_pass_purchase_date=customer.session_pass_purchase_date,
        )
        if not updated:
            raise orm.Customer.DoesNotExist(str(customer.id))

    def list_customers(self) -> list[Customer]:
        return [_to_customer(row) for row in orm.Customer.objects.order_by("name")]

    def list_customers_by_remaining(self, minimum: int, maximum: int) -> list[Customer]:
        queryset = orm.Customer.objects.filter(
            session_pass_remaining__gte=minimum,
            session_pass_remaining__lte=maximum,
        ).order_by("name")
        return [_to_customer(row) for row in queryset]

    def list_customers_with_birthdate(self) -> list[Customer]:
        return [_to_customer(row) for row in orm.Customer.objects.filter(birthdate__isnull=False)]

    # Session pass history

    def get_history_for_booking(self, booking_id: BookingId) -> SessionPassHistoryEntry | None:
        row = orm.SessionPassHistory.objects.filter(booking_id=booking_id.value).first()
        return _to_history(row) if row else None

    def add_history_entry(self, entry: SessionPassHistoryEntry) -> None:
        orm.SessionPassHistory.objects.create(
            id=entry.id,
            customer_id=entry.customer_id.value,
            booking_id=entry.booking_id.value,
            session_number=entry.session_number,
            class_title=entry.class_title,
            attended_date=entry.attended_date,
        )

    def delete_history_for_booking(self, booking_id: BookingId) -> None:
        orm.SessionPassHistory.objects.filter(booking_id=booking_id.value).delete()

    def list_history(self, customer_id: CustomerId) -> list[SessionPassHistoryEntry]:
        queryset = orm.SessionPassHistory.objects.filter(
            customer_id=customer_id.value
        ).order_by("session_number")
        return [_to_history(row) for row in queryset]

    def clear_history(self, customer_id: CustomerId) -> int:
        deleted, _ = orm.SessionPassHistory.objects.filter(
            customer_id=customer_id.value
        ).delete()
        return deleted

    def add_completed_pass(self, completed_pass: CompletedPass) -> None:
        with transaction.atomic():
            row = orm.CompletedSessionPass.objects.create(
                id=completed_pass.id,
                customer_id=completed_pass.customer_id.value,
                purchase_date=completed_pass.purchase_date,
                completed_date=completed_pass.completed_date,
                sessions_count=completed_pass.sessions_count,
            )
            orm.CompletedSession.objects.bulk_create(
                orm.CompletedSession(
                    completed_pass=row,
                    session_number=session.session_number,
                    class_title=session.class_title,
                    attended_date=session.attended_date,
                )
                for session in completed_pass.sessions
            )

    def list_completed_passes(self, customer_id: CustomerId) -> list[CompletedPass]:
        queryset = (
            orm.CompletedSessionPass.objects.filter(customer_id=customer_id.value)
            .prefetch_related("sessions")
            .order_by("-completed_date")
        )
        return [_to_completed_pass(row) for row in queryset]

    # Villages

    def list_villages(self) -> list[Village]:
        return [_to_village(row) for row in orm.Village.objects.order_by("name")]

    def get_village(self, village_id: VillageId) -> Village | None:
        row = orm.Village.objects.filter(id=village_id.value).first()
        return _to_village(row) if row else None

    def get_village_by_name(self, name: str) -> Village | None:
        row = orm.Village.objects.filter(name__iexact=name).first()
        return _to_village(row) if row else None

    def add_village(self, village: Village) -> None:
        orm.Village.objects.create(id=village.id.value, name=village.name)

    def save_village(self, village: Village) -> None:
        updated = orm.Village.objects.filter(id=village.id.value).update(name=village.name)
        if not updated:
            raise orm.Village.DoesNotExist(str(village.id))

    def delete_village(self, village_id: VillageId) -> bool:
        deleted, _ = orm.Village.objects.filter(id=village_id.value).delete()
        return deleted > 0
