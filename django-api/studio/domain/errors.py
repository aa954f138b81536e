"""Domain error codes for the studio module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    INVALID_ID = "INVALID_ID"
    INVALID_CLASS_INPUT = "INVALID_CLASS_INPUT"
    INVALID_BOOKING_INPUT = "INVALID_BOOKING_INPUT"
    INVALID_CUSTOMER_INPUT = "INVALID_CUSTOMER_INPUT"
    INVALID_VILLAGE_INPUT = "INVALID_VILLAGE_INPUT"
    CLASS_NOT_FOUND = "CLASS_NOT_FOUND"
    BOOKING_NOT_FOUND = "BOOKING_NOT_FOUND"
    CUSTOMER_NOT_FOUND = "CUSTOMER_NOT_FOUND"
    VILLAGE_NOT_FOUND = "VILLAGE_NOT_FOUND"
    CLASS_CANCELLED = "CLASS_CANCELLED"
    CLASS_FULL = "CLASS_FULL"
    ALREADY_BOOKED = "ALREADY_BOOKED"
    NOT_RECURRING = "NOT_RECURRING"
    EMAIL_EXISTS = "EMAIL_EXISTS"
    VILLAGE_EXISTS = "VILLAGE_EXISTS"
    NO_SESSIONS_REMAINING = "NO_SESSIONS_REMAINING"


@dataclass(eq=False)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class InvalidInputError(DomainError):
    """Raised when input is rejected before touching state."""


class InvalidIdError(InvalidInputError):
    """Raised when an identifier is not a valid UUID."""

    def __init__(self, kind: str = "id") -> None:
        super().__init__(
            code=ErrorCode.INVALID_ID,
            message=f"Invalid {kind} format",
        )


class InvalidClassInputError(InvalidInputError):
    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_CLASS_INPUT, message=message)


class InvalidBookingInputError(InvalidInputError):
    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_BOOKING_INPUT, message=message)


class InvalidCustomerInputError(InvalidInputError):
    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_CUSTOMER_INPUT, message=message)


class InvalidVillageInputError(InvalidInputError):
    def __init__(self, message: str) -> None:
        super().__init__(code=ErrorCode.INVALID_VILLAGE_INPUT, message=message)


class NotFoundError(DomainError):
    """Raised when an id or token does not resolve to a record."""


class ClassNotFoundError(NotFoundError):
    """Raised when a class occurrence is not found."""

    def __init__(self, class_id: str) -> None:
        super().__init__(
            code=ErrorCode.CLASS_NOT_FOUND,
            message="Class not found",
        )
        self.class_id = class_id


class BookingNotFoundError(NotFoundError):
    """Raised when a booking id or cancellation token is unknown."""

    def __init__(self, reference: str) -> None:
        super().__init__(
            code=ErrorCode.BOOKING_NOT_FOUND,
            message="Booking not found",
        )
        self.reference = reference


class CustomerNotFoundError(NotFoundError):
    def __init__(self, reference: str) -> None:
        super().__init__(
            code=ErrorCode.CUSTOMER_NOT_FOUND,
            message="Customer not found",
        )
        self.reference = reference


class VillageNotFoundError(NotFoundError):
    def __init__(self, village_id: str) -> None:
        super().__init__(
            code=ErrorCode.VILLAGE_NOT_FOUND,
            message="Village not found",
        )
        self.village_id = village_id


class ConflictError(DomainError):
    """Raised when the request conflicts with current state."""


class ClassCancelledError(ConflictError):
    def __init__(self, class_id: str) -> None:
        super().__init__(
            code=ErrorCode.CLASS_CANCELLED,
            message="Class has been cancelled",
        )
        self.class_id = class_id


class ClassFullError(ConflictError):
    def __init__(self, class_id: str) -> None:
        super().__init__(
            code=ErrorCode.CLASS_FULL,
            message="Class is full",
        )
        self.class_id = class_id


class AlreadyBookedError(ConflictError):
    def __init__(self, class_id: str) -> None:
        super().__init__(
            code=ErrorCode.ALREADY_BOOKED,
            message="You are already booked into this class",
        )
        self.class_id = class_id


class NotRecurringError(ConflictError):
    """Raised when a series operation finds no recurring occurrences to act on."""

    def __init__(self, class_id: str) -> None:
        super().__init__(
            code=ErrorCode.NOT_RECURRING,
            message="Class is not part of a recurring series",
        )
        self.class_id = class_id


class EmailExistsError(ConflictError):
    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.EMAIL_EXISTS,
            message="Email is already registered",
        )


class VillageExistsError(ConflictError):
    def __init__(self, name: str) -> None:
        super().__init__(
            code=ErrorCode.VILLAGE_EXISTS,
            message="A village with this name already exists",
        )
        self.name = name


class NoSessionsRemainingError(DomainError):
    """Raised when attendance would consume a session from an empty pass."""

    def __init__(self, customer_id: str) -> None:
        super().__init__(
            code=ErrorCode.NO_SESSIONS_REMAINING,
            message="No sessions remaining on the current pass",
        )
        self.customer_id = customer_id
