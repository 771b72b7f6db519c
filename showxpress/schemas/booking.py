from typing import Optional, List
from pydantic import BaseModel, Field, UUID4
from decimal import Decimal
from datetime import datetime

from showxpress.schemas.movie import MovieSummary
from showxpress.schemas.show import ShowSummary


# One seat picked on the seat map
class SeatSelection(BaseModel):
    row: str
    number: int
    price: Decimal = Field(ge=0, max_digits=10, decimal_places=2)


# Booking: Create (POST /bookings). Any client-sent total is ignored.
class BookingCreate(BaseModel):
    user_id: str
    show_id: UUID4
    seats: List[SeatSelection]
    payment_intent_id: Optional[str] = None

    class Config:
        extra = "ignore"


class BookingSeatResponse(BaseModel):
    row: str
    number: int
    price: Decimal

    class Config:
        from_attributes = True


# Booking: Full response (POST /bookings, GET /bookings/user/{id})
class Booking(BaseModel):
    id: UUID4
    user_id: str
    show_id: Optional[UUID4] = None
    movie_id: UUID4
    seats: List[BookingSeatResponse] = []
    total_amount: Decimal
    booking_date: datetime
    status: str
    payment_intent_id: Optional[str] = None
    payment_status: str
    cancelled_at: Optional[datetime] = None
    show: Optional[ShowSummary] = None
    movie: Optional[MovieSummary] = None

    class Config:
        from_attributes = True


# Booking: Cancel response (PATCH /bookings/{id}/cancel)
class BookingCancelResponse(BaseModel):
    id: UUID4
    status: str
    cancelled_at: datetime
    released_seats: List[str]


# Denormalized user display info for the admin view
class UserInfo(BaseModel):
    name: str
    email: str
    image: Optional[str] = None


# Booking: Admin view (GET /admin/bookings, includes user info)
class AdminBooking(Booking):
    user_info: Optional[UserInfo] = None
