"""Maps domain errors to HTTP responses.

Every error body has the shape ``{"message": ...}``. Server-side failures
get a fixed message; their details only go to the log.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from domain.model.errors import (
    DomainError,
    DuplicateError,
    InvalidOtpError,
    NotFoundError,
    OtpExpiredError,
    ProviderMismatchError,
    RateLimitedError,
    UnauthorizedError,
    ValidationError,
)

logger = logging.getLogger(__name__)

SERVER_ERROR_MESSAGE = "Server error"

# Checked in order; the first matching class wins.
_STATUS_BY_ERROR: list[tuple[type[DomainError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (DuplicateError, status.HTTP_400_BAD_REQUEST),
    (ProviderMismatchError, status.HTTP_400_BAD_REQUEST),
    (InvalidOtpError, status.HTTP_400_BAD_REQUEST),
    (OtpExpiredError, status.HTTP_400_BAD_REQUEST),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (UnauthorizedError, status.HTTP_401_UNAUTHORIZED),
    (RateLimitedError, status.HTTP_429_TOO_MANY_REQUESTS),
]


def status_for(exc: DomainError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def _message(status_code: int, message: str, headers: dict | None = None) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message}, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:

    @app.exception_handler(DomainError)
    async def handle_domain_error(request: Request, exc: DomainError):
        status_code = status_for(exc)
        if status_code >= 500:
            logger.error(
                "Request failed",
                extra={"path": request.url.path, "error": str(exc), "errorType": type(exc).__name__},
            )
            return _message(status_code, SERVER_ERROR_MESSAGE)

        headers = None
        if isinstance(exc, UnauthorizedError):
            headers = {"WWW-Authenticate": "Bearer"}
        elif isinstance(exc, RateLimitedError):
            headers = {"Retry-After": str(exc.retry_after)}
        return _message(status_code, str(exc), headers)

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        return _message(exc.status_code, str(exc.detail), getattr(exc, "headers", None))

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        logger.debug("Malformed request body", extra={"path": request.url.path, "errors": str(exc.errors())})
        return _message(status.HTTP_400_BAD_REQUEST, "Invalid request body")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("Unexpected error", extra={"path": request.url.path}, exc_info=exc)
        return _message(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE)
