from typing import List, Optional
from pydantic import BaseModel, UUID4
from decimal import Decimal

from showxpress.schemas.booking import SeatSelection


# POST /payments/intents: the amount is priced server-side from the seats
class PaymentIntentCreate(BaseModel):
    user_id: str
    show_id: UUID4
    seats: List[SeatSelection]


class PaymentIntentResponse(BaseModel):
    payment_intent_id: str
    client_secret: Optional[str] = None
    amount: Decimal
    currency: str


class PaymentVerifyRequest(BaseModel):
    payment_intent_id: str


class PaymentVerifyResponse(BaseModel):
    payment_intent_id: str
    status: str
    succeeded: bool
    amount: Decimal
    currency: str
