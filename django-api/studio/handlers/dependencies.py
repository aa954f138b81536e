"""Wire services to the ORM store and email notifier for request handling."""

from django.conf import settings

from studio.notifications import EmailNotifier
from studio.services import (
    BookingService,
    ClassService,
    CustomerService,
    SessionPassService,
    StatsService,
    VillageService,
)
from studio.stores.django_store import DjangoStudioStore


def get_class_service() -> ClassService:
    return ClassService(DjangoStudioStore())


def get_booking_service() -> BookingService:
    return BookingService(DjangoStudioStore(), EmailNotifier())


def get_session_pass_service() -> SessionPassService:
    return SessionPassService(
        DjangoStudioStore(), default_pass_size=settings.STUDIO_DEFAULT_PASS_SIZE
    )


def get_stats_service() -> StatsService:
    return StatsService(DjangoStudioStore())


def get_customer_service() -> CustomerService:
    return CustomerService(
        DjangoStudioStore(),
        EmailNotifier(),
        default_pass_size=settings.STUDIO_DEFAULT_PASS_SIZE,
    )


def get_village_service() -> VillageService:
    return VillageService(DjangoStudioStore())
