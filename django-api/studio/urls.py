from django.urls import path

from studio.handlers import (
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

urlpatterns = [
    path("classes", ClassListView.as_view(), name="class-list"),
    path("bookings", BookingCreateView.as_view(), name="booking-create"),
    path("bookings/cancel", BookingCancelView.as_view(), name="booking-cancel"),
    path("bookings/lookup", BookingLookupView.as_view(), name="booking-lookup"),
    path("leaderboard", LeaderboardView.as_view(), name="leaderboard"),
    path("dashboard", DashboardView.as_view(), name="dashboard"),
    path("customers", CustomerCreateView.as_view(), name="customer-create"),
    path(
        "customers/<str:customer_id>",
        CustomerProfileView.as_view(),
        name="customer-profile",
    ),
    path("villages", VillageListView.as_view(), name="village-list"),
    path("admin/classes", AdminClassListView.as_view(), name="admin-class-list"),
    path(
        "admin/classes/<str:class_id>",
        AdminClassDetailView.as_view(),
        name="admin-class-detail",
    ),
    path(
        "admin/classes/<str:class_id>/attendees",
        AttendeeListView.as_view(),
        name="admin-class-attendees",
    ),
    path(
        "admin/bookings/<str:booking_id>/attendance",
        AttendanceView.as_view(),
        name="admin-booking-attendance",
    ),
    path("admin/session-passes", SessionPassView.as_view(), name="admin-session-passes"),
    path("admin/customers", AdminCustomerListView.as_view(), name="admin-customer-list"),
    path(
        "admin/customers/<str:customer_id>",
        AdminCustomerDetailView.as_view(),
        name="admin-customer-detail",
    ),
    path("admin/villages", AdminVillageListView.as_view(), name="admin-village-list"),
    path(
        "admin/villages/<str:village_id>",
        AdminVillageDetailView.as_view(),
        name="admin-village-detail",
    ),
]
