import logging
import uuid
from decimal import Decimal
from typing import List, Optional, Sequence, Tuple, Union

from sqlalchemy.orm import Session

from showxpress.core.config import settings
from showxpress.core.exceptions import (
    InvalidInputError,
    PaymentProviderError,
    PaymentVerificationError,
)
from showxpress.integrations.payments import PaymentGateway, to_minor_units
from showxpress.models.booking import Booking, PaymentStatus
from showxpress.models.show import Show
from showxpress.models.user import User
from showxpress.schemas.booking import SeatSelection
from showxpress.services.booking_ledger import BookingLedger
from showxpress.services.show_inventory import ShowInventory
from showxpress.utils.seating import seat_label

logger = logging.getLogger(__name__)

# Amounts are stored as DECIMAL(10, 2)
CENT = Decimal("0.01")
MAX_AMOUNT = Decimal("99999999.99")


def _check_price(price, field: str) -> None:
    """A seat price must be a non-negative amount that fits the money columns exactly."""
    try:
        price = Decimal(price)
    except (TypeError, ValueError, ArithmeticError):
        raise InvalidInputError("Seat price is not a number", field=field)
    if not price.is_finite():
        raise InvalidInputError("Seat price is not a number", field=field)
    if price < 0:
        raise InvalidInputError("Seat price cannot be negative", field=field)
    if price > MAX_AMOUNT:
        raise InvalidInputError("Seat price is too large", field=field)
    if price != price.quantize(CENT):
        raise InvalidInputError("Seat price cannot have more than 2 decimal places", field=field)


class BookingService:
    """Application service coordinating the booking workflow."""

    def __init__(
        self,
        db: Session,
        payment_gateway: Optional[PaymentGateway] = None,
        currency: Optional[str] = None,
    ):
        self.db = db
        self.inventory = ShowInventory(db)
        self.ledger = BookingLedger(db, self.inventory)
        self.payment_gateway = payment_gateway
        self.currency = (currency or settings.CURRENCY).lower()

    # ------------------------------------------------------------------
    # Validation
    # ------------------------------------------------------------------

    @staticmethod
    def _check_request(user_id: str, seats: Sequence[SeatSelection]) -> None:
        """Checks that need no storage access."""
        if not user_id or not user_id.strip():
            raise InvalidInputError("user_id is required", field="user_id")
        if not seats:
            raise InvalidInputError("Select at least one seat", field="seats")

        seen = set()
        for i, seat in enumerate(seats):
            if not seat.row or not seat.row.strip():
                raise InvalidInputError("Seat row is required", field=f"seats[{i}].row")
            _check_price(seat.price, field=f"seats[{i}].price")
            label = seat_label(seat.row, seat.number)
            if label in seen:
                raise InvalidInputError(f"Seat {label} selected twice", field=f"seats[{i}]")
            seen.add(label)

    @staticmethod
    def _check_layout(show: Show, seats: Sequence[SeatSelection]) -> List[str]:
        layout = show.layout
        labels = []
        for i, seat in enumerate(seats):
            label = seat_label(seat.row, seat.number)
            if not layout.contains_label(label):
                raise InvalidInputError(
                    f"Seat {label} does not exist in this show's seating layout",
                    field=f"seats[{i}]",
                )
            labels.append(label)
        return labels

    def quote(
        self,
        user_id: str,
        show_id: Union[str, uuid.UUID],
        seats: Sequence[SeatSelection],
    ) -> Tuple[Show, List[str], Decimal]:
        """Validate a seat selection and price it. Nothing is written."""
        self._check_request(user_id, seats)
        show = self.inventory.get_show(show_id)
        labels = self._check_layout(show, seats)
        total = sum((Decimal(s.price) for s in seats), Decimal("0"))
        if total > MAX_AMOUNT:
            raise InvalidInputError("Booking total is too large", field="seats")
        return show, labels, total

    # ------------------------------------------------------------------
    # Payment
    # ------------------------------------------------------------------

    def _verify_payment(self, payment_ref: str, total_amount: Decimal) -> None:
        """
        Accept a payment reference only if the provider reports a completed
        charge for exactly this booking's total, in our currency.
        """
        if self.payment_gateway is None:
            raise PaymentProviderError("Payment verification is not configured")

        reused = self.ledger.payment_ref_used(payment_ref)
        if reused:
            logger.warning("Payment reference %s already used by booking %s", payment_ref, reused)
            raise PaymentVerificationError("This payment has already been used for another booking")

        intent = self.payment_gateway.retrieve_intent(payment_ref)
        if intent is None:
            logger.warning("Unknown payment reference %s", payment_ref)
            raise PaymentVerificationError("Payment reference not recognised")
        if not intent.succeeded:
            logger.warning("Payment %s not completed (status %s)", payment_ref, intent.status)
            raise PaymentVerificationError(f"Payment not completed (status: {intent.status})")

        expected = to_minor_units(total_amount)
        if intent.amount != expected or intent.currency != self.currency:
            logger.warning(
                "Payment %s is %s %s, booking total is %s %s",
                payment_ref, intent.amount, intent.currency, expected, self.currency,
            )
            raise PaymentVerificationError("Payment amount does not match the booking total")

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def create_booking(
        self,
        user_id: str,
        show_id: Union[str, uuid.UUID],
        seats: Sequence[SeatSelection],
        payment_ref: Optional[str] = None,
    ) -> Booking:
        show, _, total = self.quote(user_id, show_id, seats)

        payment_status = PaymentStatus.pending
        if payment_ref:
            self._verify_payment(payment_ref, total)
            payment_status = PaymentStatus.paid

        return self.ledger.create_booking(
            user_id=user_id.strip(),
            show=show,
            seats=seats,
            payment_ref=payment_ref or None,
            payment_status=payment_status,
        )

    def cancel_booking(self, booking_id: Union[str, uuid.UUID]) -> Tuple[Booking, List[str]]:
        return self.ledger.cancel_booking(booking_id)

    def get_booking(self, booking_id: Union[str, uuid.UUID]) -> Booking:
        return self.ledger.get_booking(booking_id)

    def list_bookings_for_user(self, user_id: str) -> List[Booking]:
        return self.ledger.list_for_user(user_id)

    def list_all_bookings(self) -> List[Tuple[Booking, Optional[User]]]:
        return self.ledger.list_all()
