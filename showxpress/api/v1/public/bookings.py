from typing import List

from fastapi import APIRouter, Depends, status

from showxpress.api.deps import get_booking_service
from showxpress.schemas.booking import (
    BookingCreate,
    Booking as BookingSchema,
    BookingCancelResponse,
)
from showxpress.schemas.common import ErrorResponse, SeatConflictResponse, ValidationErrorResponse
from showxpress.services.booking_service import BookingService

router = APIRouter(prefix="/bookings", tags=["Bookings"])


# ---------------------------------------------------------------------------
# POST /bookings: create a booking
# ---------------------------------------------------------------------------


@router.post(
    "/",
    response_model=BookingSchema,
    status_code=status.HTTP_201_CREATED,
    responses={
        402: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"model": SeatConflictResponse},
        422: {"model": ValidationErrorResponse},
    },
)
def create_booking(
    data: BookingCreate,
    service: BookingService = Depends(get_booking_service),
):
    """
    Book seats on a show.

    - The total is summed from the seat prices on the server.
    - With a `payment_intent_id`, the charge is verified with the payment
      provider and the booking is marked paid; without one it stays pending.
    - Seats already sold fail with 409 and the list of `conflicting_seats`.
    """
    return service.create_booking(
        user_id=data.user_id,
        show_id=data.show_id,
        seats=data.seats,
        payment_ref=data.payment_intent_id,
    )


# ---------------------------------------------------------------------------
# GET /bookings/user/{user_id}: a user's bookings
# ---------------------------------------------------------------------------


@router.get("/user/{user_id}", response_model=List[BookingSchema])
def list_user_bookings(
    user_id: str,
    service: BookingService = Depends(get_booking_service),
):
    """Return the user's bookings, newest first."""
    return service.list_bookings_for_user(user_id)


@router.get("/{booking_id}", response_model=BookingSchema)
def get_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
):
    return service.get_booking(booking_id)


# ---------------------------------------------------------------------------
# PATCH /bookings/{id}/cancel
# ---------------------------------------------------------------------------


@router.patch(
    "/{booking_id}/cancel",
    response_model=BookingCancelResponse,
    responses={404: {"model": ErrorResponse}, 409: {"model": ErrorResponse}},
)
def cancel_booking(
    booking_id: str,
    service: BookingService = Depends(get_booking_service),
):
    """
    Cancel a confirmed booking and free its seats.
    Cancelling twice answers 409 ALREADY_CANCELLED. No refund is issued here.
    """
    booking, released = service.cancel_booking(booking_id)
    return BookingCancelResponse(
        id=booking.id,
        status=booking.status,
        cancelled_at=booking.cancelled_at,
        released_seats=released,
    )
