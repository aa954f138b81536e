"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in studio/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from studio.domain.value_objects import (
    BookingId,
    Capacity,
    ClassId,
    CustomerId,
    SeriesId,
    VillageId,
)

DEFAULT_PASS_SIZE = 10
DEFAULT_VILLAGE = "Independent"


class ClassStatus(Enum):
    SCHEDULED = "scheduled"
    CANCELLED = "cancelled"


class BookingStatus(Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"


class AttendanceStatus(Enum):
    PENDING = "pending"
    ATTENDED = "attended"
    ABSENT = "absent"


@dataclass(frozen=True)
class ClassOccurrence:
    """One bookable instance of a class at a specific date and time."""

    id: ClassId
    title: str
    starts_at: datetime
    ends_at: datetime
    capacity: Capacity
    location: str | None = None
    status: ClassStatus = ClassStatus.SCHEDULED
    series_id: SeriesId | None = None

    @property
    def is_cancelled(self) -> bool:
        return self.status is ClassStatus.CANCELLED


@dataclass(frozen=True)
class Booking:
    """Domain representation of a Booking."""

    id: BookingId
    class_id: ClassId
    customer_name: str
    customer_email: str
    cancel_token: str
    created_at: datetime
    customer_id: CustomerId | None = None
    village: str | None = None
    status: BookingStatus = BookingStatus.ACTIVE
    attendance_status: AttendanceStatus = AttendanceStatus.PENDING
    cancelled_at: datetime | None = None

    @property
    def is_active(self) -> bool:
        return self.status is BookingStatus.ACTIVE


@dataclass(frozen=True)
class Customer:
    """Domain representation of a Customer and their current session pass."""

    id: CustomerId
    name: str
    email: str
    village: str | None = None
    birthdate: date | None = None
    session_pass_remaining: int = DEFAULT_PASS_SIZE
    session_pass_total: int = DEFAULT_PASS_SIZE
    session_pass_purchase_date: datetime | None = None

    def __post_init__(self) -> None:
        if self.session_pass_total < 1:
            raise ValueError("Session pass total must be at least 1")
        if not 0 <= self.session_pass_remaining <= self.session_pass_total:
            raise ValueError("Session pass remaining must be between 0 and total")


@dataclass(frozen=True)
class Village:
    """A retirement village customers can name as their home."""

    id: VillageId
    name: str


@dataclass(frozen=True)
class SessionPassHistoryEntry:
    """One consumed session within the customer's current pass."""

    id: str
    customer_id: CustomerId
    booking_id: BookingId
    session_number: int
    class_title: str
    attended_date: datetime


@dataclass(frozen=True)
class CompletedSession:
    session_number: int
    class_title: str
    attended_date: datetime


@dataclass(frozen=True)
class CompletedPass:
    """Archive of a replaced session pass, created at renewal time."""

    id: str
    customer_id: CustomerId
    purchase_date: datetime
    completed_date: datetime
    sessions_count: int
    sessions: tuple[CompletedSession, ...] = ()


# Read models


@dataclass(frozen=True)
class ClassAvailability:
    occurrence: ClassOccurrence
    booked: int

    @property
    def spots_left(self) -> int:
        return max(self.occurrence.capacity.value - self.booked, 0)


@dataclass(frozen=True)
class CustomerBooking:
    """A booking joined with the class it reserves."""

    booking: Booking
    class_title: str
    class_starts_at: datetime
    class_ends_at: datetime
    class_status: ClassStatus
    class_location: str | None = None


@dataclass(frozen=True)
class CustomerListing:
    """A customer with the number of bookings made under their email."""

    customer: Customer
    booking_count: int


@dataclass(frozen=True)
class Attendee:
    booking_id: BookingId
    customer_name: str
    customer_email: str
    created_at: datetime
    attendance_status: AttendanceStatus


@dataclass(frozen=True)
class LeaderboardEntry:
    customer_email: str
    customer_name: str
    village: str
    sessions_attended: int


@dataclass(frozen=True)
class CustomerStats:
    total_attended: int
    total_upcoming: int
    streak: int
    favorite_class: str | None
    rank: int | None


@dataclass(frozen=True)
class SessionPassSummary:
    remaining: int
    total: int
    purchase_date: datetime | None
    history: tuple[SessionPassHistoryEntry, ...] = ()


@dataclass(frozen=True)
class CustomerDashboard:
    upcoming_bookings: tuple[CustomerBooking, ...]
    past_bookings: tuple[CustomerBooking, ...]
    stats: CustomerStats
    session_pass: SessionPassSummary
    completed_passes: tuple[CompletedPass, ...] = ()
