"""Exception handlers producing the {success, message} error envelope."""

import logging

import fastapi
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from components.core.schemas import ErrorResponse, FieldError

logger = logging.getLogger(__name__)


def _field_name(loc) -> str:
    # drop the "body"/"query"/"path" source marker
    parts = [str(part) for part in loc[1:]] if len(loc) > 1 else [str(part) for part in loc]
    return ".".join(parts) or "body"


def _field_message(error: dict) -> str:
    ctx_error = error.get("ctx", {}).get("error")
    if isinstance(ctx_error, ValueError):
        return str(ctx_error)
    return error.get("msg", "Invalid value")


def _json(status_code: int, body: ErrorResponse, headers=None) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(exclude_none=True),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Not found, auth and business rule errors."""
    message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)
    return _json(exc.status_code, ErrorResponse(message=message), getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed input is rejected before anything is written."""
    errors = [
        FieldError(field=_field_name(error.get("loc", ())), message=_field_message(error))
        for error in exc.errors()
    ]
    return _json(400, ErrorResponse(message="Validation errors", errors=errors))


async def store_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Store error on %s %s", request.method, request.url.path)
    return _json(500, ErrorResponse(message="Server error while processing request"))


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return _json(500, ErrorResponse(message="Something went wrong!"))


def register_exception_handlers(app: fastapi.FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(SQLAlchemyError, store_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
