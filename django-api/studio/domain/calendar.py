"""Calendar helpers shared by recurrence and streak calculations.

A "week" here is a 7-day bucket counted from the Unix epoch, not a
Sunday- or Monday-aligned calendar week.
"""

from datetime import date, datetime, timedelta, timezone

ONE_WEEK = timedelta(days=7)
_WEEK_SECONDS = int(ONE_WEEK.total_seconds())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def week_bucket(moment: datetime) -> int:
    """Return the epoch-anchored week number containing ``moment``."""
    return int(moment.timestamp()) // _WEEK_SECONDS


def date_key(moment: datetime) -> str:
    """Return the UTC calendar date of ``moment`` as YYYY-MM-DD."""
    return moment.astimezone(timezone.utc).date().isoformat()


def duration(starts_at: datetime, ends_at: datetime) -> timedelta:
    return ends_at - starts_at


def weekly_shift(moment: datetime, weeks: int) -> datetime:
    return moment + weeks * ONE_WEEK


def with_time_of_day(moment: datetime, source: datetime) -> datetime:
    """Keep the UTC date of ``moment`` but take hour, minute and second from ``source``."""
    source_utc = source.astimezone(timezone.utc)
    return moment.astimezone(timezone.utc).replace(
        hour=source_utc.hour,
        minute=source_utc.minute,
        second=source_utc.second,
    )


def is_upcoming(moment: datetime, now: datetime) -> bool:
    return moment > now


def same_month_day(day: date, other: date) -> bool:
    return (day.month, day.day) == (other.month, other.day)
