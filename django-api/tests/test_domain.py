"""Unit tests for domain primitives and calendar helpers.

These test invariants that must hold at construction time.
Run with: pytest tests/test_domain.py -v
"""

from datetime import date, datetime, timedelta, timezone
from uuid import UUID

import pytest

from studio.domain import Capacity, ClassId, Customer, CustomerId, EmailAddress
from studio.domain import calendar
from studio.domain.errors import ClassFullError, ErrorCode


class TestCapacity:
    """Tests for Capacity value object."""

    def test_capacity_accepts_positive_value(self):
        """Capacity can be created with a positive value."""
        assert Capacity(12).value == 12

    def test_capacity_rejects_zero(self):
        """A class needs at least one seat."""
        with pytest.raises(ValueError):
            Capacity(0)

    def test_capacity_rejects_negative_value(self):
        with pytest.raises(ValueError):
            Capacity(-3)


class TestEmailAddress:
    """Tests for EmailAddress value object."""

    def test_email_is_trimmed_and_lowercased(self):
        assert EmailAddress("  Alice@Example.COM ").value == "alice@example.com"

    def test_email_without_at_sign_is_rejected(self):
        with pytest.raises(ValueError):
            EmailAddress("alice.example.com")

    def test_equal_after_normalization(self):
        """Emails differing only in case and whitespace compare equal."""
        assert EmailAddress("BOB@example.com") == EmailAddress(" bob@example.com")


class TestIds:
    """Tests for identifier value objects."""

    def test_from_string_valid_uuid(self):
        raw = "8c5c3d4e-9f57-4c1a-9d8b-3b0a2f6b8e11"
        assert ClassId.from_string(raw).value == UUID(raw)

    def test_from_string_invalid_uuid(self):
        """from_string raises ValueError for malformed input."""
        with pytest.raises(ValueError):
            ClassId.from_string("not-a-uuid")

    def test_new_ids_are_unique(self):
        assert CustomerId.new() != CustomerId.new()


class TestCustomer:
    """Tests for the session pass counter invariant."""

    def test_remaining_cannot_exceed_total(self):
        with pytest.raises(ValueError):
            Customer(
                id=CustomerId.new(),
                name="Alice",
                email="alice@example.com",
                session_pass_remaining=11,
                session_pass_total=10,
            )

    def test_remaining_cannot_be_negative(self):
        with pytest.raises(ValueError):
            Customer(
                id=CustomerId.new(),
                name="Alice",
                email="alice@example.com",
                session_pass_remaining=-1,
            )

    def test_new_customer_has_default_pass(self):
        customer = Customer(id=CustomerId.new(), name="Alice", email="alice@example.com")
        assert (customer.session_pass_remaining, customer.session_pass_total) == (10, 10)


class TestDomainErrors:
    def test_error_carries_code_and_message(self):
        error = ClassFullError("abc")
        assert error.code is ErrorCode.CLASS_FULL
        assert str(error) == "CLASS_FULL: Class is full"
        assert error.class_id == "abc"


class TestCalendar:
    """Tests for the shared week and date helpers."""

    def test_exact_week_shift_moves_one_bucket(self):
        moment = datetime(2026, 3, 4, 12, 0, tzinfo=timezone.utc)
        assert calendar.week_bucket(moment) - calendar.week_bucket(moment - calendar.ONE_WEEK) == 1

    def test_week_buckets_are_anchored_at_epoch(self):
        """The epoch fell on a Thursday, so buckets roll over on Thursdays."""
        wednesday = datetime(2026, 3, 4, 23, 59, tzinfo=timezone.utc)
        thursday = datetime(2026, 3, 5, 0, 0, tzinfo=timezone.utc)
        assert calendar.week_bucket(thursday) == calendar.week_bucket(wednesday) + 1

    def test_date_key_uses_utc_date(self):
        moment = datetime(2026, 3, 4, 23, 30, tzinfo=timezone(timedelta(hours=-5)))
        assert calendar.date_key(moment) == "2026-03-05"

    def test_with_time_of_day_keeps_date(self):
        moment = datetime(2026, 3, 11, 18, 0, tzinfo=timezone.utc)
        source = datetime(2026, 1, 1, 18, 30, 15, tzinfo=timezone.utc)
        assert calendar.with_time_of_day(moment, source) == datetime(
            2026, 3, 11, 18, 30, 15, tzinfo=timezone.utc
        )

    def test_weekly_shift_and_duration(self):
        start = datetime(2026, 3, 4, 9, 0, tzinfo=timezone.utc)
        assert calendar.weekly_shift(start, 2) == start + timedelta(days=14)
        assert calendar.duration(start, start + timedelta(minutes=45)) == timedelta(minutes=45)

    def test_same_month_day_ignores_year(self):
        assert calendar.same_month_day(date(1941, 3, 4), date(2026, 3, 4))
        assert not calendar.same_month_day(date(1941, 3, 5), date(2026, 3, 4))

    def test_upcoming_is_strictly_after_now(self):
        now = datetime(2026, 3, 4, 12, 0, tzinfo=timezone.utc)
        assert calendar.is_upcoming(now + timedelta(seconds=1), now)
        assert not calendar.is_upcoming(now, now)
