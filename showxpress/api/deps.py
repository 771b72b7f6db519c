from typing import Iterator, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from showxpress.core.config import settings
from showxpress.core.exceptions import AuthenticationError
from showxpress.core.security import decode_token
from showxpress.db.session import get_db
from showxpress.integrations.payments import PaymentGateway, StripePaymentGateway
from showxpress.integrations.tmdb import TMDBClient
from showxpress.services.booking_service import BookingService
from showxpress.services.show_catalog import ShowCatalog

bearer_scheme = HTTPBearer(auto_error=False)


def get_movie_provider() -> Iterator[TMDBClient]:
    provider = TMDBClient(
        api_key=settings.TMDB_API_KEY,
        base_url=settings.TMDB_BASE_URL,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    try:
        yield provider
    finally:
        provider.close()


def get_payment_gateway() -> Iterator[Optional[PaymentGateway]]:
    if not settings.STRIPE_SECRET_KEY:
        yield None
        return
    gateway = StripePaymentGateway(
        secret_key=settings.STRIPE_SECRET_KEY,
        api_base=settings.STRIPE_API_BASE,
        timeout=settings.HTTP_TIMEOUT_SECONDS,
    )
    try:
        yield gateway
    finally:
        gateway.close()


def get_booking_service(
    db: Session = Depends(get_db),
    payment_gateway: Optional[PaymentGateway] = Depends(get_payment_gateway),
) -> BookingService:
    return BookingService(db, payment_gateway=payment_gateway)


def get_show_catalog(
    db: Session = Depends(get_db),
    movie_provider: TMDBClient = Depends(get_movie_provider),
) -> ShowCatalog:
    return ShowCatalog(db, movie_provider=movie_provider)


def get_current_admin(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> dict:
    """Admin console guard: a bearer JWT whose role claim is 'admin'."""
    if credentials is None:
        raise AuthenticationError("Unauthorized - No token provided")
    claims = decode_token(credentials.credentials)
    if not claims or claims.get("role") != "admin":
        raise AuthenticationError("Unauthorized - Invalid or expired token")
    return claims
