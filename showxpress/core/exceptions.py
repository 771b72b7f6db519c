"""Domain errors raised by the booking services.

Every error carries a stable code, a user-safe message and the HTTP status
the API layer answers with. Handlers in ``showxpress.api.errors`` turn them
into structured JSON bodies.
"""

from enum import Enum
from typing import Iterable, List, Optional


class ErrorCode(str, Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    NOT_FOUND = "NOT_FOUND"
    SEAT_CONFLICT = "SEAT_CONFLICT"
    ALREADY_CANCELLED = "ALREADY_CANCELLED"
    SHOW_HAS_ACTIVE_BOOKINGS = "SHOW_HAS_ACTIVE_BOOKINGS"
    PAYMENT_NOT_VERIFIED = "PAYMENT_NOT_VERIFIED"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    STORAGE_FAILURE = "STORAGE_FAILURE"
    UNAUTHORIZED = "UNAUTHORIZED"


class ShowXpressError(Exception):
    """Base class for all domain-level errors."""

    code: ErrorCode = ErrorCode.VALIDATION_ERROR
    status_code: int = 400

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"

    def to_dict(self) -> dict:
        return {"error": self.code.value, "message": self.message}


class InvalidInputError(ShowXpressError):
    """Malformed input, rejected before touching storage."""

    code = ErrorCode.VALIDATION_ERROR
    status_code = 422

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict:
        body = super().to_dict()
        if self.field:
            body["field"] = self.field
        return body


class NotFoundError(ShowXpressError):
    code = ErrorCode.NOT_FOUND
    status_code = 404

    def __init__(self, resource: str, resource_id: str):
        super().__init__(f"{resource} not found")
        self.resource = resource
        self.resource_id = resource_id


class SeatConflictError(ShowXpressError):
    """Requested seats overlap seats already sold for the show."""

    code = ErrorCode.SEAT_CONFLICT
    status_code = 409

    def __init__(self, conflicting_seats: Iterable[str]):
        self.conflicting_seats: List[str] = list(conflicting_seats)
        super().__init__(
            "Some seats are already booked: " + ", ".join(self.conflicting_seats)
        )

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["conflicting_seats"] = self.conflicting_seats
        return body


class AlreadyCancelledError(ShowXpressError):
    code = ErrorCode.ALREADY_CANCELLED
    status_code = 409

    def __init__(self, booking_id: str):
        super().__init__("Booking already cancelled")
        self.booking_id = booking_id


class ShowHasActiveBookingsError(ShowXpressError):
    code = ErrorCode.SHOW_HAS_ACTIVE_BOOKINGS
    status_code = 409

    def __init__(self, show_id: str, active_bookings: int):
        super().__init__(
            f"Show has {active_bookings} confirmed booking(s); cancel them before deleting"
        )
        self.show_id = show_id
        self.active_bookings = active_bookings


class PaymentVerificationError(ShowXpressError):
    """The payment provider did not confirm a matching, completed charge."""

    code = ErrorCode.PAYMENT_NOT_VERIFIED
    status_code = 402


class UpstreamError(ShowXpressError):
    code = ErrorCode.UPSTREAM_ERROR
    status_code = 502


class PaymentProviderError(UpstreamError):
    def __init__(self, message: str = "Payment provider is unavailable, please retry"):
        super().__init__(message)


class MetadataProviderError(UpstreamError):
    def __init__(self, message: str = "Movie metadata provider is unavailable, please retry"):
        super().__init__(message)


class StorageFailureError(ShowXpressError):
    code = ErrorCode.STORAGE_FAILURE
    status_code = 503

    def __init__(self, message: str = "Could not save your request, please retry"):
        super().__init__(message)


class AuthenticationError(ShowXpressError):
    code = ErrorCode.UNAUTHORIZED
    status_code = 401
