"""Pytest configuration and shared fixtures."""

import threading
from datetime import datetime, timedelta, timezone

import pytest
from django.db import connections
from rest_framework.test import APIClient

from studio.notifications import Notifier
from studio.services import (
    BookingService,
    ClassInput,
    ClassService,
    CustomerService,
    SessionPassService,
    StatsService,
    VillageService,
)
from studio.stores.memory_store import InMemoryStudioStore

# A Wednesday, midday UTC.
NOW = datetime(2026, 3, 4, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    """Controllable stand-in for calendar.utc_now."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingNotifier(Notifier):
    def __init__(self) -> None:
        self.sent: list[tuple[str, str, dict]] = []
        self.fail = False

    def send(self, kind, recipient_email, template_data):
        if self.fail:
            raise ConnectionError("mail server unavailable")
        self.sent.append((kind, recipient_email, template_data))
        return True

    def kinds(self) -> list[str]:
        return [kind for kind, _, _ in self.sent]


def run_together(*calls):
    """Start every call in its own thread at the same instant.

    Returns each call's result, or the exception it raised, in call order.
    Threads close their database connections before exiting.
    """
    barrier = threading.Barrier(len(calls))
    outcomes = [None] * len(calls)

    def worker(index, call):
        try:
            barrier.wait()
            outcomes[index] = call()
        except Exception as error:
            outcomes[index] = error
        finally:
            connections.close_all()

    threads = [threading.Thread(target=worker, args=(i, call)) for i, call in enumerate(calls)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=30)
    return outcomes


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(NOW)


@pytest.fixture
def store() -> InMemoryStudioStore:
    return InMemoryStudioStore()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def class_service(store, clock) -> ClassService:
    return ClassService(store, clock=clock)


@pytest.fixture
def booking_service(store, notifier, clock) -> BookingService:
    return BookingService(store, notifier, clock=clock)


@pytest.fixture
def pass_service(store, clock) -> SessionPassService:
    return SessionPassService(store, clock=clock)


@pytest.fixture
def stats_service(store, clock) -> StatsService:
    return StatsService(store, clock=clock)


@pytest.fixture
def customer_service(store, notifier) -> CustomerService:
    return CustomerService(store, notifier)


@pytest.fixture
def village_service(store) -> VillageService:
    return VillageService(store)


@pytest.fixture
def make_class(class_service):
    """Create a one-hour class starting ``starts_at`` (default: tomorrow)."""

    def _make(title="Chair Yoga", starts_at=None, capacity=10, location=None):
        starts_at = starts_at or NOW + timedelta(days=1)
        return class_service.create_class(
            ClassInput(
                title=title,
                starts_at=starts_at,
                ends_at=starts_at + timedelta(hours=1),
                capacity=capacity,
                location=location,
            )
        )

    return _make


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def admin_api_client(db, django_user_model) -> APIClient:
    user = django_user_model.objects.create_user(
        username="daphne", password="not-used", is_staff=True
    )
    client = APIClient()
    client.force_authenticate(user=user)
    return client
