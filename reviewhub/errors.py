"""Error kinds raised by the data-access layer and request guards.

Every failure a route can report falls into one ``ErrorKind``; the kind alone
decides the HTTP status. Store failures that are not translated into a more
specific kind are logged and reported as a fixed 500 message, so no driver
detail ever reaches the caller.
"""
import enum
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ErrorKind(str, enum.Enum):
    VALIDATION = "validation"
    UNAUTHENTICATED = "unauthenticated"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    INTERNAL = "internal"


STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UNAUTHENTICATED: 401,
    ErrorKind.FORBIDDEN: 403,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.CONFLICT: 409,
    ErrorKind.INTERNAL: 500,
}


class ServiceError(Exception):
    kind = ErrorKind.INTERNAL

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]


class ValidationFailed(ServiceError):
    kind = ErrorKind.VALIDATION


class Unauthenticated(ServiceError):
    kind = ErrorKind.UNAUTHENTICATED


class Forbidden(ServiceError):
    kind = ErrorKind.FORBIDDEN


class NotFound(ServiceError):
    kind = ErrorKind.NOT_FOUND


class Conflict(ServiceError):
    kind = ErrorKind.CONFLICT


class InternalError(ServiceError):
    kind = ErrorKind.INTERNAL


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    if exc.kind is ErrorKind.INTERNAL:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message, exc_info=exc.__cause__)
    headers = {"WWW-Authenticate": "Bearer"} if exc.kind is ErrorKind.UNAUTHENTICATED else None
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message}, headers=headers)


async def store_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "internal server error"})


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Malformed bodies and query params are client input errors too
    return JSONResponse(status_code=400, content={"detail": "invalid request"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(SQLAlchemyError, store_error_handler)
