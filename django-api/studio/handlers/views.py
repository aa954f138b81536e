"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Leave domain errors to studio.handlers.errors for HTTP mapping
- Never contain business logic
"""

from django.utils.dateparse import parse_datetime
from rest_framework import status
from rest_framework.exceptions import ValidationError
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from studio.domain import AttendanceStatus
from studio.handlers import dependencies
from studio.handlers.serializers import (
    AdminCustomerCreateSerializer,
    AdminCustomerUpdateSerializer,
    AttendanceSerializer,
    AttendeeSerializer,
    BookingCancelSerializer,
    BookingCreateSerializer,
    BookingSerializer,
    ClassAvailabilitySerializer,
    ClassCreateSerializer,
    ClassSerializer,
    ClassUpdateSerializer,
    CustomerBookingSerializer,
    CustomerCreateSerializer,
    CustomerListingSerializer,
    CustomerProfileSerializer,
    CustomerSerializer,
    DashboardSerializer,
    LeaderboardEntrySerializer,
    PassPurchaseSerializer,
    VillageNameSerializer,
    VillageSerializer,
)
from studio.services import ClassInput, ClassPatch

DEFAULT_LEADERBOARD_SIZE = 10
MAX_LEADERBOARD_SIZE = 100


def _datetime_param(request: Request, name: str):
    raw = request.query_params.get(name)
    if not raw:
        return None
    value = parse_datetime(raw)
    if value is None or value.tzinfo is None:
        raise ValidationError({name: "Expected an ISO 8601 datetime with timezone"})
    return value


def _email_param(request: Request) -> str:
    email = (request.query_params.get("email") or "").strip()
    if not email:
        raise ValidationError({"email": "This query parameter is required"})
    return email


class ClassListView(APIView):
    """Handler for GET /api/classes"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        classes = dependencies.get_class_service().list_classes(
            _datetime_param(request, "from"), _datetime_param(request, "to")
        )
        return Response(ClassAvailabilitySerializer(classes, many=True).data)


class AdminClassListView(APIView):
    """Handler for POST /api/admin/classes"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request) -> Response:
        serializer = ClassCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        class_input = ClassInput(
            title=data["title"],
            starts_at=data["start_time"],
            ends_at=data["end_time"],
            capacity=data["capacity"],
            location=data.get("location") or None,
        )
        service = dependencies.get_class_service()
        if data["repeat_weeks"] > 1:
            created = service.create_recurring_series(class_input, data["repeat_weeks"])
        else:
            created = [service.create_class(class_input)]
        return Response(
            {"classes": ClassSerializer(created, many=True).data},
            status=status.HTTP_201_CREATED,
        )


class AdminClassDetailView(APIView):
    """Handler for PATCH and DELETE /api/admin/classes/{class_id}"""

    permission_classes = [IsAdminUser]

    def patch(self, request: Request, class_id: str) -> Response:
        serializer = ClassUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        patch = ClassPatch(
            title=data.get("title"),
            starts_at=data.get("start_time"),
            ends_at=data.get("end_time"),
            capacity=data.get("capacity"),
            location=data.get("location"),
        )
        service = dependencies.get_class_service()
        if data["apply_to_series"]:
            occurrence = service.get_class(class_id).occurrence
            updated = service.update_series(str(occurrence.series_id or ""), class_id, patch)
            return Response({"updated": updated})
        occurrence = service.update_occurrence(class_id, patch)
        return Response(ClassSerializer(occurrence).data)

    def delete(self, request: Request, class_id: str) -> Response:
        service = dependencies.get_class_service()
        if request.query_params.get("series") == "true":
            occurrence = service.get_class(class_id).occurrence
            cancelled = service.cancel_series(str(occurrence.series_id or ""), class_id)
            return Response({"cancelled": cancelled})
        occurrence = service.cancel_occurrence(class_id)
        return Response(ClassSerializer(occurrence).data)


class AttendeeListView(APIView):
    """Handler for GET /api/admin/classes/{class_id}/attendees"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request, class_id: str) -> Response:
        attendees = dependencies.get_booking_service().list_attendees(class_id)
        return Response(AttendeeSerializer(attendees, many=True).data)


class BookingCreateView(APIView):
    """Handler for POST /api/bookings"""

    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        booking = dependencies.get_booking_service().create_booking(
            str(data["class_id"]),
            data["customer_name"],
            data["customer_email"],
            data.get("village") or None,
        )
        return Response(
            {"booking": BookingSerializer(booking).data, "cancel_token": booking.cancel_token},
            status=status.HTTP_201_CREATED,
        )


class BookingCancelView(APIView):
    """Handler for POST /api/bookings/cancel"""

    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        serializer = BookingCancelSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = dependencies.get_booking_service().cancel_booking(
            serializer.validated_data["token"]
        )
        return Response({"booking": BookingSerializer(booking).data})


class BookingLookupView(APIView):
    """Handler for GET /api/bookings/lookup?email="""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        bookings = dependencies.get_booking_service().list_bookings_by_email(
            _email_param(request)
        )
        return Response(CustomerBookingSerializer(bookings, many=True).data)


class AttendanceView(APIView):
    """Handler for POST /api/admin/bookings/{booking_id}/attendance"""

    permission_classes = [IsAdminUser]

    def post(self, request: Request, booking_id: str) -> Response:
        serializer = AttendanceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        remaining = dependencies.get_session_pass_service().mark_attendance(
            booking_id, AttendanceStatus(serializer.validated_data["status"])
        )
        return Response({"session_pass_remaining": remaining})


class SessionPassView(APIView):
    """Handler for GET and POST /api/admin/session-passes"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request) -> Response:
        service = dependencies.get_session_pass_service()
        return Response(
            {
                "expired": CustomerSerializer(service.list_expired_passes(), many=True).data,
                "low": CustomerSerializer(service.list_low_balance_passes(), many=True).data,
            }
        )

    def post(self, request: Request) -> Response:
        serializer = PassPurchaseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        customer = dependencies.get_session_pass_service().purchase_new_pass(
            str(data["customer_id"]), data.get("session_count")
        )
        return Response(CustomerSerializer(customer).data)


class LeaderboardView(APIView):
    """Handler for GET /api/leaderboard"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        try:
            limit = int(request.query_params.get("limit", DEFAULT_LEADERBOARD_SIZE))
        except ValueError:
            raise ValidationError({"limit": "Expected an integer"}) from None
        limit = min(max(limit, 1), MAX_LEADERBOARD_SIZE)
        entries = dependencies.get_stats_service().leaderboard(limit)
        return Response(LeaderboardEntrySerializer(entries, many=True).data)


class DashboardView(APIView):
    """Handler for GET /api/dashboard?email="""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        dashboard = dependencies.get_stats_service().customer_dashboard(_email_param(request))
        return Response(DashboardSerializer(dashboard).data)


class CustomerCreateView(APIView):
    """Handler for POST /api/customers"""

    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        serializer = CustomerCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        customer = dependencies.get_customer_service().register_customer(
            data["name"],
            data["email"],
            data.get("village") or None,
            data.get("birthdate"),
        )
        return Response(CustomerSerializer(customer).data, status=status.HTTP_201_CREATED)


class CustomerProfileView(APIView):
    """Handler for GET and PATCH /api/customers/{customer_id}"""

    permission_classes = [AllowAny]

    def get(self, request: Request, customer_id: str) -> Response:
        customer = dependencies.get_customer_service().get_customer(customer_id)
        return Response(CustomerSerializer(customer).data)

    def patch(self, request: Request, customer_id: str) -> Response:
        serializer = CustomerProfileSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        customer = dependencies.get_customer_service().update_profile(
            customer_id, **serializer.validated_data
        )
        return Response(CustomerSerializer(customer).data)


class AdminCustomerListView(APIView):
    """Handler for GET and POST /api/admin/customers"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request) -> Response:
        listings = dependencies.get_customer_service().list_customers()
        return Response(CustomerListingSerializer(listings, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = AdminCustomerCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        customer = dependencies.get_customer_service().register_customer(
            data["name"],
            data["email"],
            data.get("village") or None,
            data.get("birthdate"),
            session_pass_total=data.get("session_pass_total"),
            session_pass_remaining=data.get("session_pass_remaining"),
        )
        return Response(CustomerSerializer(customer).data, status=status.HTTP_201_CREATED)


class AdminCustomerDetailView(APIView):
    """Handler for GET and PATCH /api/admin/customers/{customer_id}"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request, customer_id: str) -> Response:
        customer = dependencies.get_customer_service().get_customer(customer_id)
        return Response(CustomerSerializer(customer).data)

    def patch(self, request: Request, customer_id: str) -> Response:
        serializer = AdminCustomerUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        customer = dependencies.get_customer_service().update_profile(
            customer_id, **serializer.validated_data
        )
        return Response(CustomerSerializer(customer).data)


class VillageListView(APIView):
    """Handler for GET /api/villages"""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        villages = dependencies.get_village_service().list_villages()
        return Response(VillageSerializer(villages, many=True).data)


class AdminVillageListView(APIView):
    """Handler for GET and POST /api/admin/villages"""

    permission_classes = [IsAdminUser]

    def get(self, request: Request) -> Response:
        villages = dependencies.get_village_service().list_villages()
        return Response(VillageSerializer(villages, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = VillageNameSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        village = dependencies.get_village_service().create_village(
            serializer.validated_data["name"]
        )
        return Response(VillageSerializer(village).data, status=status.HTTP_201_CREATED)


class AdminVillageDetailView(APIView):
    """Handler for PATCH and DELETE /api/admin/villages/{village_id}"""

    permission_classes = [IsAdminUser]

    def patch(self, request: Request, village_id: str) -> Response:
        serializer = VillageNameSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        village = dependencies.get_village_service().rename_village(
            village_id, serializer.validated_data["name"]
        )
        return Response(VillageSerializer(village).data)

    def delete(self, request: Request, village_id: str) -> Response:
        dependencies.get_village_service().delete_village(village_id)
        return Response(status=status.HTTP_204_NO_CONTENT)
