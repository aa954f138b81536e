from studio.domain.models import (
    Attendee,
    AttendanceStatus,
    Booking,
    BookingStatus,
    ClassAvailability,
    ClassOccurrence,
    ClassStatus,
    CompletedPass,
    CompletedSession,
    Customer,
    CustomerBooking,
    CustomerDashboard,
    CustomerListing,
    CustomerStats,
    LeaderboardEntry,
    SessionPassHistoryEntry,
    SessionPassSummary,
    Village,
)
from studio.domain.value_objects import (
    BookingId,
    Capacity,
    ClassId,
    CustomerId,
    EmailAddress,
    SeriesId,
    VillageId,
)

__all__ = [
    "Attendee",
    "AttendanceStatus",
    "Booking",
    "BookingStatus",
    "ClassAvailability",
    "ClassOccurrence",
    "ClassStatus",
    "CompletedPass",
    "CompletedSession",
    "Customer",
    "CustomerBooking",
    "CustomerDashboard",
    "CustomerListing",
    "CustomerStats",
    "LeaderboardEntry",
    "SessionPassHistoryEntry",
    "SessionPassSummary",
    "Village",
    "BookingId",
    "Capacity",
    "ClassId",
    "CustomerId",
    "EmailAddress",
    "SeriesId",
    "VillageId",
]
