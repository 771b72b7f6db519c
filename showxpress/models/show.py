import uuid
from sqlalchemy import Column, Uuid, String, DateTime, Date, func, DECIMAL, Integer, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from showxpress.db.session import Base
from showxpress.utils.seating import SeatLayout, sort_labels

class Show(Base):
    __tablename__ = "shows"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    movie_id = Column(Uuid, ForeignKey("movies.id"), nullable=False, index=True)
    show_price = Column(DECIMAL(10, 2), nullable=False)
    show_date = Column(Date, nullable=False, index=True)
    show_time = Column(DateTime(timezone=True), nullable=False)
    theater = Column(String(255), nullable=False, default="PVR Cinemas")
    total_seats = Column(Integer, nullable=False, default=100)
    seats_per_row = Column(Integer, nullable=False, default=10)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now(), nullable=True)

    # Relationships
    movie = relationship("Movie", back_populates="shows")
    seats = relationship("ShowSeat", back_populates="show", cascade="all, delete-orphan")
    bookings = relationship("Booking", back_populates="show")

    @property
    def layout(self) -> SeatLayout:
        return SeatLayout(total_seats=self.total_seats, seats_per_row=self.seats_per_row)

    @property
    def occupied_seats(self) -> list[str]:
        return sort_labels(s.seat_label for s in self.seats)

class ShowSeat(Base):
    """One sold seat of a show. The unique constraint is what prevents double sales."""

    __tablename__ = "show_seats"
    __table_args__ = (
        UniqueConstraint("show_id", "seat_label", name="uq_show_seats_show_label"),
    )

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    show_id = Column(Uuid, ForeignKey("shows.id", ondelete="CASCADE"), nullable=False, index=True)
    seat_label = Column(String(8), nullable=False)
    booking_id = Column(Uuid, ForeignKey("bookings.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    show = relationship("Show", back_populates="seats")
