from studio.services.booking_service import BookingService
from studio.services.class_service import ClassInput, ClassPatch, ClassService
from studio.services.customer_service import CustomerService
from studio.services.session_pass_service import SessionPassService
from studio.services.stats_service import StatsService
from studio.services.village_service import VillageService

__all__ = [
    "BookingService",
    "ClassInput",
    "ClassPatch",
    "ClassService",
    "CustomerService",
    "SessionPassService",
    "StatsService",
    "VillageService",
]
