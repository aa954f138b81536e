"""Unit tests for leaderboard, streak and dashboard derivations.

Run with: pytest tests/test_stats_service.py -v
"""

from datetime import datetime, timedelta, timezone

import pytest

from studio.services.stats_service import count_streak, favorite_title

from .conftest import NOW


@pytest.fixture
def attend(make_class, booking_service):
    """Book a customer into a class that started ``days_ago`` days before NOW."""

    def _attend(name, email, days_ago=1, title="Chair Yoga", village=None):
        occurrence = make_class(title=title, starts_at=NOW - timedelta(days=days_ago))
        return booking_service.create_booking(str(occurrence.id), name, email, village=village)

    return _attend


class TestCountStreak:
    """Tests for the consecutive-week streak."""

    def test_no_attendance(self):
        assert count_streak([], NOW) == 0

    def test_three_consecutive_weeks(self):
        moments = [NOW - timedelta(days=d) for d in (1, 8, 15)]
        assert count_streak(moments, NOW) == 3

    def test_several_classes_in_one_week_count_once(self):
        moments = [NOW - timedelta(days=1), NOW - timedelta(hours=2), NOW - timedelta(days=8)]
        assert count_streak(moments, NOW) == 2

    def test_last_week_still_counts(self):
        assert count_streak([NOW - timedelta(days=7)], NOW) == 1

    def test_two_weeks_ago_breaks_streak(self):
        assert count_streak([NOW - timedelta(days=15)], NOW) == 0

    def test_gap_stops_the_count(self):
        moments = [NOW - timedelta(days=d) for d in (1, 15, 22)]
        assert count_streak(moments, NOW) == 1

    def test_weeks_roll_over_on_thursday(self):
        """Wednesday and the following Thursday fall in adjacent weeks."""
        wednesday = datetime(2026, 3, 4, 9, 0, tzinfo=timezone.utc)
        thursday = datetime(2026, 3, 5, 9, 0, tzinfo=timezone.utc)
        assert count_streak([wednesday, thursday], thursday) == 2


class TestFavoriteTitle:
    def test_most_frequent_wins(self):
        assert favorite_title(["Tai Chi", "Yoga", "Yoga"]) == "Yoga"

    def test_tie_goes_to_first_seen(self):
        assert favorite_title(["Tai Chi", "Yoga", "Yoga", "Tai Chi"]) == "Tai Chi"

    def test_empty(self):
        assert favorite_title([]) is None


class TestLeaderboard:
    """Tests for leaderboard ranking."""

    def test_ordered_by_sessions_attended(self, attend, stats_service):
        attend("Alice", "alice@example.com", days_ago=1)
        for days in (1, 2, 3):
            attend("Bob", "bob@example.com", days_ago=days)
        for days in (1, 2):
            attend("Cora", "cora@example.com", days_ago=days)

        board = stats_service.leaderboard()

        assert [(e.customer_name, e.sessions_attended) for e in board] == [
            ("Bob", 3),
            ("Cora", 2),
            ("Alice", 1),
        ]

    def test_ties_keep_first_seen_order(self, attend, stats_service):
        attend("Alice", "alice@example.com", days_ago=2)
        attend("Bob", "bob@example.com", days_ago=1)
        assert [e.customer_name for e in stats_service.leaderboard()] == ["Alice", "Bob"]

    def test_future_and_cancelled_bookings_do_not_count(
        self, attend, make_class, booking_service, class_service, stats_service
    ):
        attend("Alice", "alice@example.com", days_ago=1)
        upcoming = make_class(starts_at=NOW + timedelta(days=1))
        booking_service.create_booking(str(upcoming.id), "Alice", "alice@example.com")
        withdrawn = attend("Alice", "alice@example.com", days_ago=2)
        booking_service.cancel_booking(withdrawn.cancel_token)
        dropped = attend("Alice", "alice@example.com", days_ago=3)
        class_service.cancel_occurrence(str(dropped.class_id))

        [entry] = stats_service.leaderboard()
        assert entry.sessions_attended == 1

    def test_village_backfilled_from_later_booking(self, attend, stats_service):
        attend("Alice", "alice@example.com", days_ago=2)
        attend("Alice", "alice@example.com", days_ago=1, village="Rosewood")
        attend("Bob", "bob@example.com", days_ago=1)

        villages = {e.customer_name: e.village for e in stats_service.leaderboard()}
        assert villages == {"Alice": "Rosewood", "Bob": "Independent"}

    def test_limit(self, attend, stats_service):
        for i in range(12):
            attend(f"Customer {i}", f"c{i}@example.com")
        assert len(stats_service.leaderboard()) == 10
        assert len(stats_service.leaderboard(limit=3)) == 3
        assert len(stats_service.leaderboard(limit=None)) == 12

    def test_rank_is_matched_by_email(self, attend, stats_service):
        """Two customers named Pat are ranked separately."""
        for days in (1, 2):
            attend("Pat", "pat.one@example.com", days_ago=days)
        attend("Pat", "pat.two@example.com", days_ago=1)

        assert stats_service.rank("PAT.TWO@example.com") == 2
        assert stats_service.rank("pat.one@example.com") == 1
        assert stats_service.rank("nobody@example.com") is None


class TestCustomerDashboard:
    def test_streak_and_favorite(self, attend, stats_service):
        attend("Alice", "alice@example.com", days_ago=1, title="Tai Chi")
        attend("Alice", "alice@example.com", days_ago=8, title="Chair Yoga")
        attend("Alice", "alice@example.com", days_ago=9, title="Chair Yoga")

        assert stats_service.streak("alice@example.com") == 2
        assert stats_service.favorite_class("alice@example.com") == "Chair Yoga"

    def test_dashboard_splits_upcoming_and_past(self, attend, make_class, booking_service, stats_service):
        attend("Alice", "alice@example.com", days_ago=3, title="Older")
        attend("Alice", "alice@example.com", days_ago=1, title="Recent")
        for days, title in ((5, "Later"), (2, "Sooner")):
            occurrence = make_class(title=title, starts_at=NOW + timedelta(days=days))
            booking_service.create_booking(str(occurrence.id), "Alice", "alice@example.com")

        dashboard = stats_service.customer_dashboard("Alice@Example.com")

        assert [row.class_title for row in dashboard.upcoming_bookings] == ["Sooner", "Later"]
        assert [row.class_title for row in dashboard.past_bookings] == ["Recent", "Older"]
        assert dashboard.stats.total_attended == 2
        assert dashboard.stats.total_upcoming == 2
        assert dashboard.stats.rank == 1

    def test_class_starting_now_is_not_upcoming(self, make_class, booking_service, stats_service):
        """Given a class that starts at this exact moment, it is left out of upcoming."""
        for offset, title in ((0, "Starting"), (1, "Next")):
            occurrence = make_class(title=title, starts_at=NOW + timedelta(minutes=offset))
            booking_service.create_booking(str(occurrence.id), "Alice", "alice@example.com")

        dashboard = stats_service.customer_dashboard("alice@example.com")

        assert [row.class_title for row in dashboard.upcoming_bookings] == ["Next"]
        assert dashboard.stats.total_upcoming == 1

    def test_past_bookings_are_capped(self, attend, stats_service):
        for days in range(1, 13):
            attend("Alice", "alice@example.com", days_ago=days)
        dashboard = stats_service.customer_dashboard("alice@example.com")
        assert len(dashboard.past_bookings) == 10
        assert dashboard.stats.total_attended == 12

    def test_guest_gets_default_pass(self, attend, stats_service):
        attend("Guest", "guest@example.com")
        dashboard = stats_service.customer_dashboard("guest@example.com")
        assert (dashboard.session_pass.remaining, dashboard.session_pass.total) == (10, 10)
        assert dashboard.completed_passes == ()

    def test_registered_customer_pass(self, customer_service, pass_service, stats_service):
        customer = customer_service.register_customer("Alice", "alice@example.com")
        pass_service.purchase_new_pass(str(customer.id), session_count=4)

        stats = stats_service.customer_stats("alice@example.com")
        session_pass = stats_service.customer_dashboard("alice@example.com").session_pass

        assert stats.total_attended == 0
        assert stats.favorite_class is None
        assert (session_pass.remaining, session_pass.total) == (4, 4)
        assert session_pass.purchase_date == NOW
