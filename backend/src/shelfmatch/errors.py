"""HTTP error mapping.

Every error response has the shape {"error": <code>, "message": <text>} plus
optional "details". Database and unexpected errors are logged in full but
reported to clients generically.
"""

from typing import Any, Optional

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from .matching.ports import CatalogItemNotFoundError, MatcherError
from .observability.logging_config import get_logger

logger = get_logger(__name__)


def error_response(status_code: int, error: str, message: str, details: Optional[Any] = None) -> JSONResponse:
    content = {"error": error, "message": message}
    if details is not None:
        content["details"] = jsonable_encoder(details)
    return JSONResponse(status_code=status_code, content=content)


async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.warning(f"Rejected {request.method} {request.url.path}: {len(exc.errors())} validation error(s)")
    return error_response(
        status.HTTP_422_UNPROCESSABLE_ENTITY,
        "validation_error",
        "Request validation failed",
        exc.errors(),
    )


async def handle_item_not_found(request: Request, exc: CatalogItemNotFoundError) -> JSONResponse:
    # Items of other tenants are indistinguishable from missing ones
    return error_response(status.HTTP_404_NOT_FOUND, "not_found", str(exc))


async def handle_matcher_error(request: Request, exc: MatcherError) -> JSONResponse:
    logger.error(f"Matcher error on {request.method} {request.url.path}", exc_info=exc)
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "matcher_error",
        "Matching failed. Please try again later.",
    )


async def handle_database_error(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error(
        f"Database error on {request.method} {request.url.path}",
        extra={"error_type": type(exc).__name__},
        exc_info=exc
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "database_error",
        "A database error occurred. Please try again later.",
    )


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    logger.error(
        f"Unhandled exception on {request.method} {request.url.path}",
        extra={"error_type": type(exc).__name__},
        exc_info=exc
    )
    return error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        "internal_error",
        "An unexpected error occurred. Please try again later.",
    )


def register_exception_handlers(app: FastAPI) -> None:
    # CatalogItemNotFoundError subclasses MatcherError; Starlette picks the most specific handler
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(CatalogItemNotFoundError, handle_item_not_found)
    app.add_exception_handler(MatcherError, handle_matcher_error)
    app.add_exception_handler(SQLAlchemyError, handle_database_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
