from django.contrib import admin

from studio.models import (
    Booking,
    CompletedSession,
    CompletedSessionPass,
    Customer,
    FitnessClass,
    SessionPassHistory,
    Village,
)


class BookingInline(admin.TabularInline):
    model = Booking
    extra = 0
    fields = ["customer_name", "customer_email", "status", "attendance_status"]
    readonly_fields = ["customer_name", "customer_email", "status", "attendance_status"]


class SessionPassHistoryInline(admin.TabularInline):
    model = SessionPassHistory
    extra = 0
    readonly_fields = ["booking", "session_number", "class_title", "attended_date"]


class CompletedSessionInline(admin.TabularInline):
    model = CompletedSession
    extra = 0
    readonly_fields = ["session_number", "class_title", "attended_date"]


@admin.register(FitnessClass)
class FitnessClassAdmin(admin.ModelAdmin):
    list_display = ["title", "start_time", "end_time", "capacity", "status"]
    list_filter = ["status", "location"]
    search_fields = ["title", "location"]
    inlines = [BookingInline]


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ["customer_name", "customer_email", "fitness_class", "status", "attendance_status"]
    list_filter = ["status", "attendance_status"]
    search_fields = ["customer_name", "customer_email"]
    readonly_fields = ["cancel_token", "created_at", "cancelled_at"]


@admin.register(Customer)
class CustomerAdmin(admin.ModelAdmin):
    list_display = ["name", "email", "village", "session_pass_remaining", "session_pass_total"]
    search_fields = ["name", "email"]
    inlines = [SessionPassHistoryInline]


@admin.register(CompletedSessionPass)
class CompletedSessionPassAdmin(admin.ModelAdmin):
    list_display = ["customer", "purchase_date", "completed_date", "sessions_count"]
    inlines = [CompletedSessionInline]


@admin.register(Village)
class VillageAdmin(admin.ModelAdmin):
    list_display = ["name", "created_at"]
    search_fields = ["name"]
