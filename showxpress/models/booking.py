import uuid
import enum
from datetime import datetime, timezone
from sqlalchemy import Column, Uuid, String, DateTime, func, DECIMAL, Integer, ForeignKey
from sqlalchemy.orm import relationship
from showxpress.db.session import Base
from showxpress.utils.seating import seat_label

class BookingStatus(str, enum.Enum):
    confirmed = "confirmed"
    cancelled = "cancelled"

class PaymentStatus(str, enum.Enum):
    pending = "pending"
    paid = "paid"
    failed = "failed"

def _utcnow():
    return datetime.now(timezone.utc)

class Booking(Base):
    __tablename__ = "bookings"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(String(255), nullable=False, index=True) # identity provider id
    show_id = Column(Uuid, ForeignKey("shows.id", ondelete="SET NULL"), nullable=True, index=True)
    movie_id = Column(Uuid, ForeignKey("movies.id"), nullable=False)
    total_amount = Column(DECIMAL(10, 2), nullable=False)
    # Python-side default keeps sub-second ordering on every backend
    booking_date = Column(DateTime(timezone=True), default=_utcnow, nullable=False, index=True)
    status = Column(String(20), default=BookingStatus.confirmed.value, nullable=False, index=True)
    payment_intent_id = Column(String(255), unique=True, nullable=True) # one booking per charge
    payment_status = Column(String(20), default=PaymentStatus.pending.value, nullable=False)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    # Relationships
    show = relationship("Show", back_populates="bookings")
    movie = relationship("Movie")
    seats = relationship(
        "BookingSeat",
        back_populates="booking",
        cascade="all, delete-orphan",
        order_by="BookingSeat.position",
    )

    @property
    def seat_labels(self) -> list[str]:
        return [s.label for s in self.seats]

class BookingSeat(Base):
    __tablename__ = "booking_seats"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    booking_id = Column(Uuid, ForeignKey("bookings.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False) # order chosen by the customer
    row = Column(String(2), nullable=False)
    number = Column(Integer, nullable=False)
    price = Column(DECIMAL(10, 2), nullable=False)

    booking = relationship("Booking", back_populates="seats")

    @property
    def label(self) -> str:
        return seat_label(self.row, self.number)
