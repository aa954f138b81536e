from studio.handlers.views import (
    AdminClassDetailView,
    AdminClassListView,
    AdminCustomerDetailView,
    AdminCustomerListView,
    AdminVillageDetailView,
    AdminVillageListView,
    AttendanceView,
    AttendeeListView,
    BookingCancelView,
    BookingCreateView,
    BookingLookupView,
    ClassListView,
    CustomerCreateView,
    CustomerProfileView,
    DashboardView,
    LeaderboardView,
    SessionPassView,
    VillageListView,
)

__all__ = [
    "AdminClassDetailView",
    "AdminClassListView",
    "AdminCustomerDetailView",
    "AdminCustomerListView",
    "AdminVillageDetailView",
    "AdminVillageListView",
    "AttendanceView",
    "AttendeeListView",
    "BookingCancelView",
    "BookingCreateView",
    "BookingLookupView",
    "ClassListView",
    "CustomerCreateView",
    "CustomerProfileView",
    "DashboardView",
    "LeaderboardView",
    "SessionPassView",
    "VillageListView",
]
