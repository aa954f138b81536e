"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import secrets
import uuid

from django.db import models

from studio.domain.models import DEFAULT_PASS_SIZE


def generate_cancel_token() -> str:
    return secrets.token_urlsafe(32)


class FitnessClass(models.Model):
    """Persistence model for class occurrences."""

    STATUS_CHOICES = [("scheduled", "Scheduled"), ("cancelled", "Cancelled")]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    start_time = models.DateTimeField()
    end_time = models.DateTimeField()
    capacity = models.PositiveIntegerField()
    location = models.CharField(max_length=255, blank=True, null=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default="scheduled")
    series_id = models.UUIDField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["start_time"]
        indexes = [
            models.Index(fields=["start_time"], name="studio_class_start_idx"),
            models.Index(fields=["series_id", "start_time"], name="studio_class_series_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.title} - {self.start_time}"


class Village(models.Model):
    """Persistence model for the retirement villages offered at sign-up."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Customer(models.Model):
    """Persistence model for customers and their current session pass."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    email = models.EmailField(unique=True)
    village = models.CharField(max_length=255, blank=True, null=True)
    birthdate = models.DateField(blank=True, null=True)
    session_pass_remaining = models.PositiveIntegerField(default=DEFAULT_PASS_SIZE)
    session_pass_total = models.PositiveIntegerField(default=DEFAULT_PASS_SIZE)
    session_pass_purchase_date = models.DateTimeField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class Booking(models.Model):
    """Persistence model for bookings."""

    STATUS_CHOICES = [("active", "Active"), ("cancelled", "Cancelled")]
    ATTENDANCE_CHOICES = [
        ("pending", "Pending"),
        ("attended", "Attended"),
        ("absent", "Absent"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    fitness_class = models.ForeignKey(
        FitnessClass, on_delete=models.PROTECT, related_name="bookings"
    )
    customer = models.ForeignKey(
        Customer,
        on_delete=models.SET_NULL,
        related_name="bookings",
        blank=True,
        null=True,
    )
    customer_name = models.CharField(max_length=255)
    customer_email = models.EmailField()
    village = models.CharField(max_length=255, blank=True, null=True)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default="active")
    cancel_token = models.CharField(max_length=64, unique=True, default=generate_cancel_token)
    attendance_status = models.CharField(
        max_length=16, choices=ATTENDANCE_CHOICES, default="pending"
    )
    created_at = models.DateTimeField()
    cancelled_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["fitness_class", "status"], name="studio_booking_class_idx"),
            models.Index(fields=["customer_email"], name="studio_booking_email_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.customer_name} - {self.fitness_class_id}"


class SessionPassHistory(models.Model):
    """One consumed session within a customer's current pass."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(
        Customer, on_delete=models.CASCADE, related_name="session_history"
    )
    booking = models.OneToOneField(
        Booking, on_delete=models.CASCADE, related_name="session_history"
    )
    session_number = models.PositiveIntegerField()
    class_title = models.CharField(max_length=255)
    attended_date = models.DateTimeField()

    class Meta:
        ordering = ["session_number"]
        verbose_name_plural = "session pass history"

    def __str__(self) -> str:
        return f"{self.customer_id} #{self.session_number}"


class CompletedSessionPass(models.Model):
    """Archive of a session pass replaced by a newer purchase."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    customer = models.ForeignKey(
        Customer, on_delete=models.CASCADE, related_name="completed_passes"
    )
    purchase_date = models.DateTimeField()
    completed_date = models.DateTimeField()
    sessions_count = models.PositiveIntegerField()

    class Meta:
        ordering = ["-completed_date"]

    def __str__(self) -> str:
        return f"{self.customer_id} ({self.sessions_count} sessions)"


class CompletedSession(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    completed_pass = models.ForeignKey(
        CompletedSessionPass, on_delete=models.CASCADE, related_name="sessions"
    )
    session_number = models.PositiveIntegerField()
    class_title = models.CharField(max_length=255)
    attended_date = models.DateTimeField()

    class Meta:
        ordering = ["session_number"]

    def __str__(self) -> str:
        return f"{self.class_title} #{self.session_number}"
