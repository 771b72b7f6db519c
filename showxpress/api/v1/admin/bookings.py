from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from showxpress.api.deps import get_booking_service, get_current_admin
from showxpress.db.session import get_db
from showxpress.models.booking import Booking
from showxpress.models.user import User
from showxpress.schemas.booking import AdminBooking, Booking as BookingSchema, UserInfo
from showxpress.schemas.user import User as UserSchema
from showxpress.services.booking_service import BookingService

router = APIRouter(
    prefix="/admin",
    tags=["Admin - Bookings"],
    dependencies=[Depends(get_current_admin)],
)


def _serialize_admin_booking(booking: Booking, user: Optional[User]) -> AdminBooking:
    user_info = None
    if user:
        user_info = UserInfo(name=user.name, email=user.email, image=user.image)
    data = BookingSchema.model_validate(booking).model_dump()
    return AdminBooking(**data, user_info=user_info)


@router.get("/bookings/", response_model=List[AdminBooking])
def list_all_bookings(
    status: Optional[str] = Query(None, description="Filter by booking status (confirmed, cancelled)"),
    service: BookingService = Depends(get_booking_service),
):
    """
    Every booking, newest first, with the booking user's name/email/image.
    A booking whose user has no profile record comes back with user_info null.
    """
    rows = service.list_all_bookings()
    if status:
        rows = [(b, u) for b, u in rows if b.status == status]
    return [_serialize_admin_booking(b, u) for b, u in rows]


@router.get("/users/", response_model=List[UserSchema])
def list_users(db: Session = Depends(get_db)):
    return db.query(User).order_by(User.created_at.desc()).all()
