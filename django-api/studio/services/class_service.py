"""Class catalog and recurring series management.

A series is a set of weekly occurrences sharing a SeriesId. Series edits
and cancellations apply to the reference occurrence and every scheduled
occurrence after it; earlier occurrences are never touched.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime

from studio.domain import (
    Capacity,
    ClassAvailability,
    ClassId,
    ClassOccurrence,
    ClassStatus,
    SeriesId,
)
from studio.domain import calendar
from studio.domain.errors import (
    ClassNotFoundError,
    InvalidClassInputError,
    NotRecurringError,
)
from studio.services.common import Clock, parse_id
from studio.stores.interfaces import StudioStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ClassInput:
    title: str
    starts_at: datetime
    ends_at: datetime
    capacity: int
    location: str | None = None


@dataclass(frozen=True)
class ClassPatch:
    """Fields to change on an occurrence. None means "leave as is"."""

    title: str | None = None
    starts_at: datetime | None = None
    ends_at: datetime | None = None
    capacity: int | None = None
    location: str | None = None

    def is_empty(self) -> bool:
        return all(
            value is None
            for value in (self.title, self.starts_at, self.ends_at, self.capacity, self.location)
        )


def _check_times(starts_at: datetime, ends_at: datetime) -> None:
    if starts_at.tzinfo is None or ends_at.tzinfo is None:
        raise InvalidClassInputError("Class times must include a timezone")
    if ends_at <= starts_at:
        raise InvalidClassInputError("Class must end after it starts")


def _check_title(title: str) -> str:
    title = title.strip()
    if not title:
        raise InvalidClassInputError("Class title is required")
    return title


def _capacity(value: int) -> Capacity:
    try:
        return Capacity(int(value))
    except (TypeError, ValueError):
        raise InvalidClassInputError("Capacity must be at least 1") from None


class ClassService:
    """Service for class catalog and recurrence operations."""

    def __init__(self, store: StudioStore, clock: Clock = calendar.utc_now) -> None:
        self._store = store
        self._clock = clock

    def get_class(self, class_id: str) -> ClassAvailability:
        """Return an occurrence with its current booking count.

        Raises:
            InvalidIdError: If the class_id is not a valid UUID.
            ClassNotFoundError: If the occurrence does not exist.
        """
        occurrence = self._get(parse_id(ClassId.from_string, class_id, "class id"))
        return ClassAvailability(
            occurrence=occurrence,
            booked=self._store.count_active_bookings(occurrence.id),
        )

    def list_classes(
        self, starts_from: datetime | None = None, starts_to: datetime | None = None
    ) -> list[ClassAvailability]:
        """Return occurrences in the window, ordered by start, with spots left."""
        classes = self._store.list_classes(starts_from, starts_to)
        counts = self._store.count_active_bookings_by_class(c.id for c in classes)
        return [ClassAvailability(occurrence=c, booked=counts.get(c.id, 0)) for c in classes]

    def create_class(self, data: ClassInput) -> ClassOccurrence:
        """Create a single scheduled occurrence."""
        occurrence = self._build(data, data.starts_at, data.ends_at, series_id=None)
        self._store.add_class(occurrence)
        logger.info("Created class %s (%s)", occurrence.id, occurrence.title)
        return occurrence

    def create_recurring_series(self, data: ClassInput, repeat_weeks: int) -> list[ClassOccurrence]:
        """Create ``repeat_weeks`` weekly occurrences sharing one series id.

        Every occurrence keeps the template's duration.
        """
        if repeat_weeks < 1:
            raise InvalidClassInputError("A series needs at least one week")
        _check_times(data.starts_at, data.ends_at)
        length = calendar.duration(data.starts_at, data.ends_at)
        series_id = SeriesId.new()

        occurrences = []
        for week in range(repeat_weeks):
            starts_at = calendar.weekly_shift(data.starts_at, week)
            occurrences.append(self._build(data, starts_at, starts_at + length, series_id))

        with self._store.atomic():
            for occurrence in occurrences:
                self._store.add_class(occurrence)
        logger.info(
            "Created series %s with %d occurrences of %s", series_id, repeat_weeks, data.title
        )
        return occurrences

    def update_occurrence(self, class_id: str, patch: ClassPatch) -> ClassOccurrence:
        """Update a single occurrence.

        Raises:
            InvalidIdError: If the class_id is not a valid UUID.
            ClassNotFoundError: If the occurrence does not exist.
            InvalidClassInputError: If the result would be invalid.
        """
        parsed = parse_id(ClassId.from_string, class_id, "class id")
        with self._store.atomic():
            occurrence = self._get(parsed, for_update=True)
            updated = self._apply(occurrence, patch, keep_dates=False)
            if updated != occurrence:
                self._store.save_class(updated)
        return updated

    def update_series(self, series_id: str, reference_id: str, patch: ClassPatch) -> int:
        """Apply ``patch`` to the reference occurrence and all later scheduled ones.

        Time changes keep each occurrence's date and replace only the time of day.
        Returns the number of occurrences changed.

        Raises:
            ClassNotFoundError: If the reference occurrence does not exist.
            NotRecurringError: If nothing in the series is left to update.
        """
        with self._store.atomic():
            siblings = self._select_future(series_id, reference_id)
            if patch.is_empty():
                return 0
            # Validate every sibling before writing any of them.
            updated = [self._apply(sibling, patch, keep_dates=True) for sibling in siblings]
            for occurrence in updated:
                self._store.save_class(occurrence)
        logger.info("Updated %d occurrences of series %s", len(updated), series_id)
        return len(updated)

    def cancel_occurrence(self, class_id: str) -> ClassOccurrence:
        """Cancel an occurrence and every active booking for it.

        Raises:
            InvalidIdError: If the class_id is not a valid UUID.
            ClassNotFoundError: If the occurrence does not exist.
        """
        parsed = parse_id(ClassId.from_string, class_id, "class id")
        with self._store.atomic():
            occurrence = self._get(parsed, for_update=True)
            return self._cancel(occurrence)

    def cancel_series(self, series_id: str, reference_id: str) -> int:
        """Cancel the reference occurrence and all later scheduled ones.

        Each occurrence is cancelled in its own transaction, so a failure part
        way through keeps the earlier cancellations and the call can be re-run.

        Raises:
            ClassNotFoundError: If the reference occurrence does not exist.
            NotRecurringError: If nothing in the series is left to cancel.
        """
        siblings = self._select_future(series_id, reference_id)
        for sibling in siblings:
            with self._store.atomic():
                self._cancel(sibling)
        logger.info("Cancelled %d occurrences of series %s", len(siblings), series_id)
        return len(siblings)

    def _get(self, class_id: ClassId, for_update: bool = False) -> ClassOccurrence:
        occurrence = self._store.get_class(class_id, for_update=for_update)
        if occurrence is None:
            raise ClassNotFoundError(str(class_id))
        return occurrence

    def _select_future(self, series_id: str, reference_id: str) -> list[ClassOccurrence]:
        reference = self._get(parse_id(ClassId.from_string, reference_id, "class id"))
        try:
            parsed_series = SeriesId.from_string(str(series_id))
        except ValueError:
            raise NotRecurringError(str(reference.id)) from None
        if reference.series_id != parsed_series:
            raise NotRecurringError(str(reference.id))
        siblings = self._store.list_series_from(parsed_series, reference.starts_at)
        if not siblings:
            raise NotRecurringError(str(reference.id))
        return siblings

    def _cancel(self, occurrence: ClassOccurrence) -> ClassOccurrence:
        cancelled = replace(occurrence, status=ClassStatus.CANCELLED)
        if occurrence.status is not ClassStatus.CANCELLED:
            self._store.save_class(cancelled)
        released = self._store.cancel_active_bookings(occurrence.id, self._clock())
        logger.info("Cancelled class %s and %d bookings", occurrence.id, released)
        return cancelled

    def _build(
        self,
        data: ClassInput,
        starts_at: datetime,
        ends_at: datetime,
        series_id: SeriesId | None,
    ) -> ClassOccurrence:
        _check_times(starts_at, ends_at)
        location = data.location.strip() if data.location else None
        return ClassOccurrence(
            id=ClassId.new(),
            title=_check_title(data.title),
            starts_at=starts_at,
            ends_at=ends_at,
            capacity=_capacity(data.capacity),
            location=location or None,
            series_id=series_id,
        )

    @staticmethod
    def _apply(occurrence: ClassOccurrence, patch: ClassPatch, keep_dates: bool) -> ClassOccurrence:
        changes = {}
        if patch.title is not None:
            changes["title"] = _check_title(patch.title)
        if patch.capacity is not None:
            changes["capacity"] = _capacity(patch.capacity)
        if patch.location is not None:
            changes["location"] = patch.location.strip() or None
        if patch.starts_at is not None:
            changes["starts_at"] = (
                calendar.with_time_of_day(occurrence.starts_at, patch.starts_at)
                if keep_dates
                else patch.starts_at
            )
        if patch.ends_at is not None:
            changes["ends_at"] = (
                calendar.with_time_of_day(occurrence.ends_at, patch.ends_at)
                if keep_dates
                else patch.ends_at
            )
        if not changes:
            return occurrence
        updated = replace(occurrence, **changes)
        _check_times(updated.starts_at, updated.ends_at)
        return updated
