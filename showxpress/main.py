import logging

from fastapi import FastAPI
from contextlib import asynccontextmanager
from fastapi.middleware.cors import CORSMiddleware

from showxpress.db.init_db import create_database
from showxpress.db.base import Base
from showxpress.db.session import engine
from showxpress.core.config import settings
from showxpress.api.errors import register_exception_handlers
from showxpress.api.v1.router import api_router

logging.basicConfig(level=settings.LOG_LEVEL)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup: Ensure DB exists and create tables
    create_database()
    Base.metadata.create_all(bind=engine)
    logger.info("%s started", settings.PROJECT_NAME)
    yield


app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)
app.include_router(api_router, prefix=settings.API_V1_STR)


@app.get("/")
def read_root():
    return {
        "success": True,
        "message": settings.PROJECT_NAME,
        "endpoints": {
            "health": "/health",
            "shows": f"{settings.API_V1_STR}/shows",
            "bookings": f"{settings.API_V1_STR}/bookings",
            "payments": f"{settings.API_V1_STR}/payments",
            "admin": f"{settings.API_V1_STR}/admin",
        },
    }


@app.get("/health")
def health():
    return {"success": True, "message": "Server is running!"}
