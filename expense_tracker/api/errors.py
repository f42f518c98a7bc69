"""
HTTP error mapping.

Every failure leaves the service as {"error": "<message>"}. Storage and
unexpected errors get a generic message; their details only go to the log.
"""

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from expense_tracker.auth import (
    AuthenticationError,
    InvalidTokenError,
    MissingTokenError,
)
from expense_tracker.services.storage import ConflictError, NotFoundError, StorageError
from expense_tracker.validation import ValidationError


logger = structlog.get_logger(__name__)


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


def register_exception_handlers(app: FastAPI) -> None:
    """Map domain exceptions to HTTP responses."""

    @app.exception_handler(ValidationError)
    async def validation_error(request: Request, exc: ValidationError):
        return error_response(400, str(exc))

    @app.exception_handler(RequestValidationError)
    async def request_validation_error(request: Request, exc: RequestValidationError):
        return error_response(400, "Invalid request body")

    # Duplicate usernames keep the 400 clients already handle
    @app.exception_handler(ConflictError)
    async def conflict_error(request: Request, exc: ConflictError):
        return error_response(400, str(exc))

    @app.exception_handler(MissingTokenError)
    async def missing_token(request: Request, exc: MissingTokenError):
        return error_response(401, str(exc))

    @app.exception_handler(InvalidTokenError)
    async def invalid_token(request: Request, exc: InvalidTokenError):
        return error_response(403, str(exc))

    @app.exception_handler(AuthenticationError)
    async def authentication_error(request: Request, exc: AuthenticationError):
        return error_response(401, str(exc))

    @app.exception_handler(NotFoundError)
    async def not_found(request: Request, exc: NotFoundError):
        return error_response(404, str(exc))

    @app.exception_handler(StorageError)
    async def storage_error(request: Request, exc: StorageError):
        logger.error("storage_error", path=request.url.path, error=str(exc))
        return error_response(500, "Server error")

    @app.exception_handler(StarletteHTTPException)
    async def http_error(request: Request, exc: StarletteHTTPException):
        return error_response(exc.status_code, str(exc.detail))

    @app.exception_handler(Exception)
    async def unhandled_error(request: Request, exc: Exception):
        logger.exception("unhandled_error", path=request.url.path)
        await request.app.state.components.audit_logger.log_error(
            error_type=type(exc).__name__,
            error_message=str(exc),
            details={"method": request.method, "path": request.url.path},
        )
        return error_response(500, "Something went wrong!")
