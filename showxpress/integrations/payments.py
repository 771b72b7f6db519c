import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

import requests

from showxpress.core.exceptions import PaymentProviderError

logger = logging.getLogger(__name__)


def to_minor_units(amount: Decimal) -> int:
    """Rupees -> paise (the provider expects integer amounts)."""
    return int((Decimal(amount) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount: int) -> Decimal:
    return (Decimal(amount) / 100).quantize(Decimal("0.01"))


@dataclass(frozen=True)
class PaymentIntent:
    id: str
    status: str
    amount: int  # minor units
    currency: str
    client_secret: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.status == "succeeded"


class PaymentGateway(ABC):
    """Interface to the payment provider."""

    @abstractmethod
    def create_intent(self, amount: int, currency: str, metadata: dict) -> PaymentIntent:
        """Create a payment intent for `amount` minor units."""
        ...

    @abstractmethod
    def retrieve_intent(self, intent_id: str) -> Optional[PaymentIntent]:
        """Return the intent, or None if the provider does not know it."""
        ...

    def close(self) -> None:
        """Release connections held by the gateway."""


class StripePaymentGateway(PaymentGateway):
    """Stripe PaymentIntents over the REST API."""

    def __init__(
        self,
        secret_key: str,
        api_base: str = "https://api.stripe.com/v1",
        timeout: float = 10.0,
        session: Optional[requests.Session] = None,
    ):
        self.api_base = api_base.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Authorization": f"Bearer {secret_key}"})

    def close(self) -> None:
        self.session.close()

    @staticmethod
    def _to_intent(data: dict) -> PaymentIntent:
        return PaymentIntent(
            id=data["id"],
            status=data.get("status", ""),
            amount=int(data.get("amount", 0)),
            currency=(data.get("currency") or "").lower(),
            client_secret=data.get("client_secret"),
        )

    def create_intent(self, amount: int, currency: str, metadata: dict) -> PaymentIntent:
        form = {
            "amount": amount,
            "currency": currency,
            "automatic_payment_methods[enabled]": "true",
            "automatic_payment_methods[allow_redirects]": "always",
        }
        for key, value in metadata.items():
            form[f"metadata[{key}]"] = str(value)

        try:
            response = self.session.post(
                f"{self.api_base}/payment_intents", data=form, timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error("Creating payment intent failed: %s", e)
            raise PaymentProviderError() from e

        if response.status_code >= 400:
            logger.error("Creating payment intent returned %s", response.status_code)
            raise PaymentProviderError()
        return self._to_intent(response.json())

    def retrieve_intent(self, intent_id: str) -> Optional[PaymentIntent]:
        try:
            response = self.session.get(
                f"{self.api_base}/payment_intents/{intent_id}", timeout=self.timeout
            )
        except requests.RequestException as e:
            logger.error("Retrieving payment intent %s failed: %s", intent_id, e)
            raise PaymentProviderError() from e

        if response.status_code == 404:
            return None
        if response.status_code >= 400:
            logger.error("Retrieving payment intent %s returned %s", intent_id, response.status_code)
            raise PaymentProviderError()
        return self._to_intent(response.json())
