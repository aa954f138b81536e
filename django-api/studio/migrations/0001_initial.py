import uuid

import django.db.models.deletion
from django.db import migrations, models

import studio.models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="FitnessClass",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("title", models.CharField(max_length=255)),
                ("start_time", models.DateTimeField()),
                ("end_time", models.DateTimeField()),
                ("capacity", models.PositiveIntegerField()),
                ("location", models.CharField(blank=True, max_length=255, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("scheduled", "Scheduled"), ("cancelled", "Cancelled")],
                        default="scheduled",
                        max_length=16,
                    ),
                ),
                ("series_id", models.UUIDField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "ordering": ["start_time"],
                "indexes": [
                    models.Index(fields=["start_time"], name="studio_class_start_idx"),
                    models.Index(fields=["series_id", "start_time"], name="studio_class_series_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="Customer",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("name", models.CharField(max_length=255)),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("village", models.CharField(blank=True, max_length=255, null=True)),
                ("birthdate", models.DateField(blank=True, null=True)),
                ("session_pass_remaining", models.PositiveIntegerField(default=10)),
                ("session_pass_total", models.PositiveIntegerField(default=10)),
                ("session_pass_purchase_date", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
            ],
            options={
                "ordering": ["name"],
            },
        ),
        migrations.CreateModel(
            name="Booking",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("customer_name", models.CharField(max_length=255)),
                ("customer_email", models.EmailField(max_length=254)),
                ("village", models.CharField(blank=True, max_length=255, null=True)),
                (
                    "status",
                    models.CharField(
                        choices=[("active", "Active"), ("cancelled", "Cancelled")],
                        default="active",
                        max_length=16,
                    ),
                ),
                (
                    "cancel_token",
                    models.CharField(default=studio.models.generate_cancel_token, max_length=64, unique=True),
                ),
                (
                    "attendance_status",
                    models.CharField(
                        choices=[("pending", "Pending"), ("attended", "Attended"), ("absent", "Absent")],
                        default="pending",
                        max_length=16,
                    ),
                ),
                ("created_at", models.DateTimeField()),
                ("cancelled_at", models.DateTimeField(blank=True, null=True)),
                (
                    "customer",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="bookings",
                        to="studio.customer",
                    ),
                ),
                (
                    "fitness_class",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="bookings",
                        to="studio.fitnessclass",
                    ),
                ),
            ],
            options={
                "ordering": ["created_at"],
                "indexes": [
                    models.Index(fields=["fitness_class", "status"], name="studio_booking_class_idx"),
                    models.Index(fields=["customer_email"], name="studio_booking_email_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="CompletedSessionPass",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("purchase_date", models.DateTimeField()),
                ("completed_date", models.DateTimeField()),
                ("sessions_count", models.PositiveIntegerField()),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="completed_passes",
                        to="studio.customer",
                    ),
                ),
            ],
            options={
                "ordering": ["-completed_date"],
            },
        ),
        migrations.CreateModel(
            name="CompletedSession",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("session_number", models.PositiveIntegerField()),
                ("class_title", models.CharField(max_length=255)),
                ("attended_date", models.DateTimeField()),
                (
                    "completed_pass",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sessions",
                        to="studio.completedsessionpass",
                    ),
                ),
            ],
            options={
                "ordering": ["session_number"],
            },
        ),
        migrations.CreateModel(
            name="SessionPassHistory",
            fields=[
                ("id", models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ("session_number", models.PositiveIntegerField()),
                ("class_title", models.CharField(max_length=255)),
                ("attended_date", models.DateTimeField()),
                (
                    "booking",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="session_history",
                        to="studio.booking",
                    ),
                ),
                (
                    "customer",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="session_history",
                        to="studio.customer",
                    ),
                ),
            ],
            options={
                "ordering": ["session_number"],
                "verbose_name_plural": "session pass history",
            },
        ),
    ]
