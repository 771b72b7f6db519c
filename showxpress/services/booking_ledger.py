import logging
import uuid
from datetime import datetime, timezone
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple, Union

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, joinedload, selectinload

from showxpress.core.exceptions import (
    AlreadyCancelledError,
    InvalidInputError,
    NotFoundError,
    PaymentVerificationError,
    ShowXpressError,
    StorageFailureError,
)
from showxpress.models.booking import Booking, BookingSeat, BookingStatus, PaymentStatus
from showxpress.models.show import Show
from showxpress.models.user import User
from showxpress.schemas.booking import SeatSelection
from showxpress.services.show_inventory import ShowInventory
from showxpress.utils.ids import parse_id
from showxpress.utils.seating import seat_label

logger = logging.getLogger(__name__)


class BookingLedger:
    """
    Owns booking records and their only transition, confirmed -> cancelled.

    Every state change commits together with the matching seat change in
    the show inventory, or not at all.
    """

    def __init__(self, db: Session, inventory: Optional[ShowInventory] = None):
        self.db = db
        self.inventory = inventory or ShowInventory(db)

    def _query(self):
        return self.db.query(Booking).options(
            selectinload(Booking.seats),
            joinedload(Booking.show),
            joinedload(Booking.movie),
        )

    def get_booking(self, booking_id: Union[str, uuid.UUID]) -> Booking:
        booking = self._query().filter(Booking.id == parse_id(booking_id, "Booking")).first()
        if booking is None:
            raise NotFoundError("Booking", str(booking_id))
        return booking

    def payment_ref_used(self, payment_ref: str) -> Optional[uuid.UUID]:
        """Id of the booking already paid with `payment_ref`, if any."""
        row = self.db.query(Booking.id).filter(Booking.payment_intent_id == payment_ref).first()
        return row[0] if row else None

    def _flush_booking(self, payment_ref: Optional[str]) -> None:
        try:
            self.db.flush()
        except IntegrityError as e:
            # payment_intent_id is unique: a concurrent booking took this charge
            if not payment_ref:
                raise
            self.db.rollback()
            if not self.payment_ref_used(payment_ref):
                logger.exception("Could not persist booking paid with %s", payment_ref)
                raise StorageFailureError() from e
            logger.warning("Payment reference %s used by a concurrent booking", payment_ref)
            raise PaymentVerificationError(
                "This payment has already been used for another booking"
            ) from e

    def create_booking(
        self,
        user_id: str,
        show: Show,
        seats: Sequence[SeatSelection],
        payment_ref: Optional[str] = None,
        payment_status: PaymentStatus = PaymentStatus.pending,
    ) -> Booking:
        if not seats:
            raise InvalidInputError("Select at least one seat", field="seats")

        labels = [seat_label(s.row, s.number) for s in seats]
        total_amount = sum((Decimal(s.price) for s in seats), Decimal("0"))
        show_id = show.id

        booking = Booking(
            id=uuid.uuid4(),
            user_id=user_id,
            show_id=show_id,
            movie_id=show.movie_id,
            total_amount=total_amount,
            status=BookingStatus.confirmed.value,
            payment_intent_id=payment_ref,
            payment_status=payment_status.value,
            seats=[
                BookingSeat(
                    position=i,
                    row=s.row.strip().upper(),
                    number=s.number,
                    price=Decimal(s.price),
                )
                for i, s in enumerate(seats)
            ],
        )

        try:
            # Held until commit, so the show cannot be deleted under this sale
            self.inventory.lock_show(show_id)
            self.db.add(booking)
            self._flush_booking(payment_ref)
            self.inventory.reserve_seats(show_id, labels, booking.id)
            self.db.commit()
        except ShowXpressError:
            self.db.rollback()
            raise
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Could not persist booking for show %s", show_id)
            raise StorageFailureError() from e

        logger.info(
            "Booking %s confirmed for user %s on show %s: %s (total %s, payment %s)",
            booking.id, user_id, show_id, ", ".join(labels), total_amount, payment_status.value,
        )
        return self.get_booking(booking.id)

    def cancel_booking(self, booking_id: Union[str, uuid.UUID]) -> Tuple[Booking, List[str]]:
        """
        Cancel a confirmed booking and free its seats.

        Returns the booking and the labels released. The status flip is a
        conditional update so two concurrent cancels cannot both succeed.
        """
        booking = self.get_booking(booking_id)
        if booking.status == BookingStatus.cancelled.value:
            raise AlreadyCancelledError(str(booking.id))

        labels = booking.seat_labels
        show_id = booking.show_id
        try:
            flipped = (
                self.db.query(Booking)
                .filter(Booking.id == booking.id, Booking.status == BookingStatus.confirmed.value)
                .update(
                    {
                        "status": BookingStatus.cancelled.value,
                        "cancelled_at": datetime.now(timezone.utc),
                    },
                    synchronize_session="fetch",
                )
            )
            if flipped:
                if show_id is not None:
                    self.inventory.release_seats(show_id, labels)
                self.db.commit()
            else:
                self.db.rollback()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Could not cancel booking %s", booking.id)
            raise StorageFailureError() from e

        if not flipped:
            raise AlreadyCancelledError(str(booking.id))

        logger.info("Booking %s cancelled, released %s", booking.id, ", ".join(labels))
        return self.get_booking(booking.id), labels

    def list_for_user(self, user_id: str) -> List[Booking]:
        return (
            self._query()
            .filter(Booking.user_id == user_id)
            .order_by(Booking.booking_date.desc())
            .all()
        )

    def list_all(self) -> List[Tuple[Booking, Optional[User]]]:
        """All bookings, newest first, each paired with its user record if one exists."""
        bookings = self._query().order_by(Booking.booking_date.desc()).all()

        user_ids = {b.user_id for b in bookings}
        users = {}
        if user_ids:
            users = {
                u.clerk_id: u
                for u in self.db.query(User).filter(User.clerk_id.in_(user_ids)).all()
            }
        return [(b, users.get(b.user_id)) for b in bookings]
