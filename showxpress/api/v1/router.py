from fastapi import APIRouter

# Public: catalog and shows
from showxpress.api.v1.public.shows import router as shows_router

# Public: bookings and checkout
from showxpress.api.v1.public.bookings import router as bookings_router
from showxpress.api.v1.public.payments import router as payments_router

# Public: user profiles synced from the identity provider
from showxpress.api.v1.public.users import router as users_router

# Admin
from showxpress.api.v1.admin.auth import router as admin_auth_router
from showxpress.api.v1.admin.shows import router as admin_shows_router
from showxpress.api.v1.admin.bookings import router as admin_bookings_router

api_router = APIRouter()

# --- Public ---
api_router.include_router(shows_router)
api_router.include_router(bookings_router)
api_router.include_router(payments_router)
api_router.include_router(users_router)

# --- Admin ---
api_router.include_router(admin_auth_router)
api_router.include_router(admin_shows_router)
api_router.include_router(admin_bookings_router)
