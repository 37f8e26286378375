"""
Exception handlers mapping domain errors to HTTP responses.

Each shared error category maps to one status code. Responses use the
ErrorResponse shape from api.models.errors.
"""

import logging
from http import HTTPStatus

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from modules.auth.exceptions import LedgerTokenError
from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ExternalServiceError,
    NotFoundError,
    StorageError,
    TeamdeskError,
    ValidationError,
)

from .models.errors import ErrorResponse

logger = logging.getLogger(__name__)

# Checked in order; the first matching base wins
STATUS_BY_ERROR: list[tuple[type[TeamdeskError], int]] = [
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (ConflictError, 409),
    (ValidationError, 400),
    (StorageError, 500),
    (ExternalServiceError, 500),
]

# Every ledger token failure renders identically
LEDGER_TOKEN_DETAIL = "Invalid or expired token"
LEDGER_TOKEN_CODE = "INVALID_TOKEN"


def status_for(exc: TeamdeskError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


def _error_response(status_code: int, detail: str, code: str) -> JSONResponse:
    body = ErrorResponse(error=HTTPStatus(status_code).phrase, detail=detail, code=code)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(status_code=status_code, content=body.model_dump(), headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Install handlers for TeamdeskError and for anything unhandled."""

    @app.exception_handler(TeamdeskError)
    async def handle_teamdesk_error(request: Request, exc: TeamdeskError) -> JSONResponse:
        status_code = status_for(exc)

        if status_code >= 500:
            logger.error(
                f"{request.method} {request.url.path} failed: {exc.code} {exc.message}"
            )
            # Storage internals stay in the log
            detail = "Internal server error" if isinstance(exc, StorageError) else exc.message
            return _error_response(status_code, detail, exc.code)

        logger.warning(f"{request.method} {request.url.path} -> {status_code} {exc.code}")

        if isinstance(exc, LedgerTokenError):
            return _error_response(status_code, LEDGER_TOKEN_DETAIL, LEDGER_TOKEN_CODE)
        return _error_response(status_code, exc.message, exc.code)

    app.add_exception_handler(Exception, handle_uncaught)


async def handle_uncaught(request: Request, exc: Exception) -> JSONResponse:
    """Log the traceback and hide the details behind a generic 500."""
    logger.error(
        f"Unhandled error on {request.method} {request.url.path}",
        exc_info=(type(exc), exc, exc.__traceback__),
    )
    return _error_response(500, "Internal server error", "INTERNAL_ERROR")
