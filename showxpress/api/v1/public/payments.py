import json
from typing import Optional

from fastapi import APIRouter, Depends

from showxpress.api.deps import get_booking_service, get_payment_gateway
from showxpress.core.exceptions import NotFoundError, PaymentProviderError
from showxpress.integrations.payments import PaymentGateway, from_minor_units, to_minor_units
from showxpress.schemas.payment import (
    PaymentIntentCreate,
    PaymentIntentResponse,
    PaymentVerifyRequest,
    PaymentVerifyResponse,
)
from showxpress.services.booking_service import BookingService

router = APIRouter(prefix="/payments", tags=["Payments"])


def _require_gateway(gateway: Optional[PaymentGateway]) -> PaymentGateway:
    if gateway is None:
        raise PaymentProviderError("Payments are not configured")
    return gateway


@router.post("/intents", response_model=PaymentIntentResponse)
def create_payment_intent(
    body: PaymentIntentCreate,
    service: BookingService = Depends(get_booking_service),
    gateway: Optional[PaymentGateway] = Depends(get_payment_gateway),
):
    """
    Start checkout. The amount is priced here from the selected seats, so the
    intent always matches the total the booking will be created with.
    """
    gateway = _require_gateway(gateway)
    show, labels, total = service.quote(body.user_id, body.show_id, body.seats)
    intent = gateway.create_intent(
        amount=to_minor_units(total),
        currency=service.currency,
        metadata={
            "userId": body.user_id,
            "showId": str(show.id),
            "seats": json.dumps(labels),
        },
    )
    return PaymentIntentResponse(
        payment_intent_id=intent.id,
        client_secret=intent.client_secret,
        amount=total,
        currency=intent.currency,
    )


@router.post("/verify", response_model=PaymentVerifyResponse)
def verify_payment(
    body: PaymentVerifyRequest,
    gateway: Optional[PaymentGateway] = Depends(get_payment_gateway),
):
    intent = _require_gateway(gateway).retrieve_intent(body.payment_intent_id)
    if intent is None:
        raise NotFoundError("Payment", body.payment_intent_id)
    return PaymentVerifyResponse(
        payment_intent_id=intent.id,
        status=intent.status,
        succeeded=intent.succeeded,
        amount=from_minor_units(intent.amount),
        currency=intent.currency,
    )
