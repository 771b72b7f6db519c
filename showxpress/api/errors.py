import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from showxpress.core.exceptions import AuthenticationError, ShowXpressError, StorageFailureError

logger = logging.getLogger(__name__)


async def domain_error_handler(request: Request, exc: ShowXpressError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc)

    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def storage_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # Database errors raised outside the services (e.g. plain route queries)
    logger.exception("Storage error on %s %s", request.method, request.url.path)
    error = StorageFailureError()
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


EXCEPTION_HANDLERS = {
    ShowXpressError: domain_error_handler,
    SQLAlchemyError: storage_error_handler,
}


def register_exception_handlers(app: FastAPI) -> None:
    for exception_class, handler in EXCEPTION_HANDLERS.items():
        app.add_exception_handler(exception_class, handler)
