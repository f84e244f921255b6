"""
Error types shared by the service layer and the HTTP layer.

Services raise ``ServiceError`` subclasses; each carries the HTTP
status it maps to.  ``register_exception_handlers`` makes every error
response look the same to the client: a JSON object with a ``msg``
field.
"""

import logging

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

# Largest value SQLite can store in an INTEGER column.
MAX_ID = 2**63 - 1


class ServiceError(ValueError):
    """Base class for expected failures of a service operation."""

    status_code = status.HTTP_400_BAD_REQUEST


class ValidationFailed(ServiceError):
    status_code = status.HTTP_400_BAD_REQUEST


class ConflictError(ServiceError):
    """The record is not in a state that allows the operation."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotAuthorizedError(ServiceError):
    """The caller is not the participant the operation requires."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenError(ServiceError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND


def parse_id(raw: object, label: str) -> int:
    """Convert a path identifier to an integer.

    Malformed identifiers cannot match any record, so they are reported
    as ``NotFoundError`` rather than as a validation failure.
    """
    try:
        value = int(str(raw))
    except (TypeError, ValueError):
        raise NotFoundError(f"{label} not found")
    if value < 1 or value > MAX_ID:
        raise NotFoundError(f"{label} not found")
    return value


def to_http(exc: ServiceError) -> HTTPException:
    return HTTPException(status_code=exc.status_code, detail=str(exc))


def server_error(exc: Exception, action: str) -> HTTPException:
    """Log an unexpected failure and hide its details from the client."""
    logger.exception("Unexpected error while %s: %s", action, exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server Error"
    )


def _first_validation_message(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = [str(part) for part in first.get("loc", ()) if part not in ("body", "query", "path")]
    message = first.get("msg", "Invalid value")
    if location:
        return f"{'.'.join(location)}: {message}"
    return message


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers that render every error as ``{"msg": ...}``."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(
        request: Request, exc: StarletteHTTPException
    ) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"msg": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"msg": _first_validation_message(exc)},
        )

    @app.exception_handler(ServiceError)
    async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
        return JSONResponse(status_code=exc.status_code, content={"msg": str(exc)})
