from fastapi import APIRouter

from showxpress.core.config import settings
from showxpress.core.exceptions import AuthenticationError
from showxpress.core.security import create_access_token, verify_password
from showxpress.schemas.user import AdminLogin, Token

router = APIRouter(prefix="/admin/auth", tags=["Admin - Auth"])


@router.post("/login", response_model=Token)
def login(body: AdminLogin):
    """Exchange the admin console credentials for a bearer token."""
    if body.email.lower() != settings.ADMIN_EMAIL.lower() or not verify_password(
        body.password, settings.ADMIN_PASSWORD_HASH
    ):
        raise AuthenticationError("Incorrect email or password")
    return Token(
        access_token=create_access_token(subject=body.email, role="admin"),
        token_type="bearer",
    )
