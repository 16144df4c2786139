"""Exception handlers: map the error taxonomy to JSON responses of the form {"message": ...}."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from kalat.core.errors import ArchiveError, AuthenticationError, TransientError

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error"


async def archive_error_handler(request: Request, exc: ArchiveError) -> JSONResponse:
    """Validation, auth and transient errors raised by routes and services."""
    headers = None
    if isinstance(exc, AuthenticationError):
        headers = {"WWW-Authenticate": "Bearer"}
    if isinstance(exc, TransientError):
        # The raising route logged the cause; the message is already generic.
        logger.warning("%s %s -> %s", request.method, request.url.path, exc.message)
    else:
        logger.info(
            "%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.message
        )
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.message},
        headers=headers,
    )


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Framework HTTP errors (404 route, 405 method, 413 body size)."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Malformed request bodies are a client error: 400 with field details."""
    logger.info("Invalid request body: %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": "Invalid request body", "errors": jsonable_encoder(exc.errors())},
    )


async def database_exception_handler(
    request: Request, exc: SQLAlchemyError
) -> JSONResponse:
    """Database failures that escaped a route: log detail, return a generic message."""
    logger.error(
        "Database error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": GENERIC_ERROR_MESSAGE},
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Anything unexpected: log with traceback, never leak internals to the client."""
    logger.error(
        "Unexpected error on %s %s", request.method, request.url.path, exc_info=exc
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": GENERIC_ERROR_MESSAGE},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ArchiveError, archive_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, database_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
