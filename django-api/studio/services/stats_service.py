"""Leaderboard and per-customer statistics.

Everything here is derived from the booking ledger on every call; nothing
is stored or cached. A booking counts as attended when it is active, its
class is still scheduled and the class has started.
"""

from collections import Counter
from datetime import datetime
from typing import Iterable

from studio.domain import (
    ClassStatus,
    CustomerBooking,
    CustomerDashboard,
    CustomerStats,
    LeaderboardEntry,
    SessionPassSummary,
)
from studio.domain import calendar
from studio.domain.models import DEFAULT_PASS_SIZE, DEFAULT_VILLAGE
from studio.domain.value_objects import normalize_email
from studio.services.common import Clock
from studio.stores.interfaces import StudioStore

RECENT_PAST_LIMIT = 10


def count_streak(attended_at: Iterable[datetime], now: datetime) -> int:
    """Return the number of consecutive weeks with attendance, ending this week or last."""
    weeks = sorted((calendar.week_bucket(moment) for moment in attended_at), reverse=True)
    if not weeks or calendar.week_bucket(now) - weeks[0] > 1:
        return 0

    streak = 1
    for previous, current in zip(weeks, weeks[1:]):
        if previous - current == 1:
            streak += 1
        elif previous != current:
            break
    return streak


def favorite_title(titles: Iterable[str]) -> str | None:
    """Return the most frequent title; the first one seen wins a tie."""
    counts = Counter(titles)
    if not counts:
        return None
    # Counter preserves insertion order and max() keeps the first maximum.
    return max(counts, key=counts.__getitem__)


class StatsService:
    """Read-side service for leaderboard, streak and dashboard data."""

    def __init__(self, store: StudioStore, clock: Clock = calendar.utc_now) -> None:
        self._store = store
        self._clock = clock

    def leaderboard(self, limit: int | None = 10) -> list[LeaderboardEntry]:
        """Return customers ordered by sessions attended, most first.

        Ties keep the order in which customers were first seen. ``limit=None``
        returns everyone.
        """
        tally: dict[str, dict] = {}
        for row in self._store.list_attended_bookings(self._clock()):
            booking = row.booking
            email = normalize_email(booking.customer_email)
            entry = tally.get(email)
            if entry is None:
                tally[email] = {
                    "name": booking.customer_name,
                    "village": booking.village,
                    "count": 1,
                }
                continue
            entry["count"] += 1
            if booking.village and not entry["village"]:
                entry["village"] = booking.village

        ranked = sorted(tally.items(), key=lambda item: item[1]["count"], reverse=True)
        if limit is not None:
            ranked = ranked[:limit]
        return [
            LeaderboardEntry(
                customer_email=email,
                customer_name=entry["name"],
                village=entry["village"] or DEFAULT_VILLAGE,
                sessions_attended=entry["count"],
            )
            for email, entry in ranked
        ]

    def rank(self, email: str) -> int | None:
        """Return the customer's 1-based leaderboard position, matched by email."""
        email = normalize_email(email)
        for position, entry in enumerate(self.leaderboard(limit=None), start=1):
            if entry.customer_email == email:
                return position
        return None

    def streak(self, email: str) -> int:
        now = self._clock()
        attended = self._attended(self._store.list_customer_bookings(normalize_email(email)), now)
        return count_streak((row.class_starts_at for row in attended), now)

    def favorite_class(self, email: str) -> str | None:
        now = self._clock()
        attended = self._attended(self._store.list_customer_bookings(normalize_email(email)), now)
        return favorite_title(row.class_title for row in attended)

    def customer_stats(self, email: str) -> CustomerStats:
        return self.customer_dashboard(email).stats

    def customer_dashboard(self, email: str) -> CustomerDashboard:
        """Return bookings, stats and session pass data for one customer."""
        email = normalize_email(email)
        now = self._clock()
        bookings = self._store.list_customer_bookings(email)
        attended = self._attended(bookings, now)
        upcoming = sorted(
            (
                row
                for row in bookings
                if self._is_live(row) and calendar.is_upcoming(row.class_starts_at, now)
            ),
            key=lambda row: row.class_starts_at,
        )

        stats = CustomerStats(
            total_attended=len(attended),
            total_upcoming=len(upcoming),
            streak=count_streak((row.class_starts_at for row in attended), now),
            favorite_class=favorite_title(row.class_title for row in attended),
            rank=self.rank(email),
        )

        customer = self._store.get_customer_by_email(email)
        if customer is None:
            session_pass = SessionPassSummary(
                remaining=DEFAULT_PASS_SIZE, total=DEFAULT_PASS_SIZE, purchase_date=None
            )
            completed = ()
        else:
            session_pass = SessionPassSummary(
                remaining=customer.session_pass_remaining,
                total=customer.session_pass_total,
                purchase_date=customer.session_pass_purchase_date,
                history=tuple(self._store.list_history(customer.id)),
            )
            completed = tuple(self._store.list_completed_passes(customer.id))

        return CustomerDashboard(
            upcoming_bookings=tuple(upcoming),
            past_bookings=tuple(attended[:RECENT_PAST_LIMIT]),
            stats=stats,
            session_pass=session_pass,
            completed_passes=completed,
        )

    @staticmethod
    def _is_live(row: CustomerBooking) -> bool:
        return row.booking.is_active and row.class_status is ClassStatus.SCHEDULED

    def _attended(self, bookings: list[CustomerBooking], now: datetime) -> list[CustomerBooking]:
        """Return attended bookings, most recent class first."""
        return sorted(
            (row for row in bookings if self._is_live(row) and row.class_starts_at < now),
            key=lambda row: row.class_starts_at,
            reverse=True,
        )
