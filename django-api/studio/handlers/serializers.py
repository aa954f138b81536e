"""Serializers for validating requests and transforming domain models to API responses."""

from rest_framework import serializers

from studio.domain import AttendanceStatus

MAX_REPEAT_WEEKS = 52


# Requests


class ClassCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    start_time = serializers.DateTimeField()
    end_time = serializers.DateTimeField()
    capacity = serializers.IntegerField(min_value=1)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)
    repeat_weeks = serializers.IntegerField(
        min_value=1, max_value=MAX_REPEAT_WEEKS, required=False, default=1
    )

    def validate(self, attrs):
        if attrs["end_time"] <= attrs["start_time"]:
            raise serializers.ValidationError("end_time must be after start_time")
        return attrs


class ClassUpdateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255, required=False)
    start_time = serializers.DateTimeField(required=False)
    end_time = serializers.DateTimeField(required=False)
    capacity = serializers.IntegerField(min_value=1, required=False)
    location = serializers.CharField(max_length=255, required=False, allow_blank=True)
    apply_to_series = serializers.BooleanField(required=False, default=False)


class BookingCreateSerializer(serializers.Serializer):
    class_id = serializers.UUIDField()
    customer_name = serializers.CharField(max_length=255)
    customer_email = serializers.EmailField()
    village = serializers.CharField(max_length=255, required=False, allow_blank=True)


class BookingCancelSerializer(serializers.Serializer):
    token = serializers.CharField(max_length=64)


class AttendanceSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[status.value for status in AttendanceStatus])


class PassPurchaseSerializer(serializers.Serializer):
    customer_id = serializers.UUIDField()
    session_count = serializers.IntegerField(min_value=1, required=False)


class CustomerCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    village = serializers.CharField(max_length=255, required=False, allow_blank=True)
    birthdate = serializers.DateField(required=False)


class CustomerProfileSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False)
    email = serializers.EmailField(required=False)
    village = serializers.CharField(max_length=255, required=False, allow_blank=True)
    birthdate = serializers.DateField(required=False)


class AdminCustomerCreateSerializer(CustomerCreateSerializer):
    session_pass_total = serializers.IntegerField(min_value=1, required=False)
    session_pass_remaining = serializers.IntegerField(min_value=0, required=False)


class AdminCustomerUpdateSerializer(CustomerProfileSerializer):
    session_pass_total = serializers.IntegerField(min_value=1, required=False)
    session_pass_remaining = serializers.IntegerField(min_value=0, required=False)


class VillageNameSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)


# Responses


class ClassSerializer(serializers.Serializer):
    """Serializer for ClassOccurrence domain model."""

    id = serializers.CharField(source="id.value")
    title = serializers.CharField()
    start_time = serializers.DateTimeField(source="starts_at")
    end_time = serializers.DateTimeField(source="ends_at")
    capacity = serializers.IntegerField(source="capacity.value")
    location = serializers.CharField(allow_null=True)
    status = serializers.CharField(source="status.value")
    series_id = serializers.SerializerMethodField()

    def get_series_id(self, occurrence) -> str | None:
        return str(occurrence.series_id) if occurrence.series_id else None


class ClassAvailabilitySerializer(serializers.Serializer):
    """Serializer for ClassAvailability: the class plus seat counts."""

    def to_representation(self, instance):
        data = ClassSerializer(instance.occurrence).data
        data["booked"] = instance.booked
        data["spots_left"] = instance.spots_left
        return data


class BookingSerializer(serializers.Serializer):
    """Serializer for Booking domain model."""

    id = serializers.CharField(source="id.value")
    class_id = serializers.CharField(source="class_id.value")
    customer_name = serializers.CharField()
    customer_email = serializers.CharField()
    village = serializers.CharField(allow_null=True)
    status = serializers.CharField(source="status.value")
    attendance_status = serializers.CharField(source="attendance_status.value")
    created_at = serializers.DateTimeField()
    cancelled_at = serializers.DateTimeField(allow_null=True)


class CustomerBookingSerializer(serializers.Serializer):
    """Serializer for a booking joined with its class."""

    id = serializers.CharField(source="booking.id.value")
    class_id = serializers.CharField(source="booking.class_id.value")
    class_title = serializers.CharField()
    class_location = serializers.CharField(allow_null=True)
    class_start_time = serializers.DateTimeField(source="class_starts_at")
    class_end_time = serializers.DateTimeField(source="class_ends_at")
    class_status = serializers.CharField(source="class_status.value")
    booking_status = serializers.CharField(source="booking.status.value")
    attendance_status = serializers.CharField(source="booking.attendance_status.value")
    cancel_token = serializers.CharField(source="booking.cancel_token")
    created_at = serializers.DateTimeField(source="booking.created_at")
    cancelled_at = serializers.DateTimeField(source="booking.cancelled_at", allow_null=True)


class AttendeeSerializer(serializers.Serializer):
    id = serializers.CharField(source="booking_id.value")
    customer_name = serializers.CharField()
    customer_email = serializers.CharField()
    created_at = serializers.DateTimeField()
    attendance_status = serializers.CharField(source="attendance_status.value")


class LeaderboardEntrySerializer(serializers.Serializer):
    """Public leaderboard row. Emails are deliberately left out."""

    customer_name = serializers.CharField()
    village = serializers.CharField()
    sessions_attended = serializers.IntegerField()


class CustomerSerializer(serializers.Serializer):
    id = serializers.CharField(source="id.value")
    name = serializers.CharField()
    email = serializers.CharField()
    village = serializers.CharField(allow_null=True)
    birthdate = serializers.DateField(allow_null=True)
    session_pass_remaining = serializers.IntegerField()
    session_pass_total = serializers.IntegerField()
    session_pass_purchase_date = serializers.DateTimeField(allow_null=True)


class CustomerListingSerializer(serializers.Serializer):
    """Serializer for the admin customer directory."""

    def to_representation(self, instance):
        data = CustomerSerializer(instance.customer).data
        data["booking_count"] = instance.booking_count
        return data


class VillageSerializer(serializers.Serializer):
    id = serializers.CharField(source="id.value")
    name = serializers.CharField()


class HistoryEntrySerializer(serializers.Serializer):
    id = serializers.CharField()
    session_number = serializers.IntegerField()
    class_title = serializers.CharField()
    attended_date = serializers.DateTimeField()


class CompletedSessionSerializer(serializers.Serializer):
    session_number = serializers.IntegerField()
    class_title = serializers.CharField()
    attended_date = serializers.DateTimeField()


class CompletedPassSerializer(serializers.Serializer):
    id = serializers.CharField()
    purchase_date = serializers.DateTimeField()
    completed_date = serializers.DateTimeField()
    sessions_count = serializers.IntegerField()
    sessions = CompletedSessionSerializer(many=True)


class SessionPassSerializer(serializers.Serializer):
    remaining = serializers.IntegerField()
    total = serializers.IntegerField()
    purchase_date = serializers.DateTimeField(allow_null=True)
    history = HistoryEntrySerializer(many=True)


class CustomerStatsSerializer(serializers.Serializer):
    total_attended = serializers.IntegerField()
    total_upcoming = serializers.IntegerField()
    streak = serializers.IntegerField()
    favorite_class = serializers.CharField(allow_null=True)
    rank = serializers.IntegerField(allow_null=True)


class DashboardSerializer(serializers.Serializer):
    upcoming_bookings = CustomerBookingSerializer(many=True)
    past_bookings = CustomerBookingSerializer(many=True)
    stats = CustomerStatsSerializer()
    session_pass = SessionPassSerializer()
    completed_passes = CompletedPassSerializer(many=True)
