"""
API error types and the handlers that render them.

Each error class declares its HTTP status and default code; services pass
only the message (and an error code when a caller needs to tell cases
apart). Plain ``ValueError``/``KeyError`` raised from a service are mapped
too. Every response body has the shape
``{"detail": ..., "error_code": ..., "path": ...}``.
"""

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class APIError(HTTPException):
    http_status = status.HTTP_400_BAD_REQUEST
    default_detail = "Request failed"
    default_code = "BAD_REQUEST"
    default_headers: Optional[Dict[str, str]] = None

    def __init__(
        self,
        detail: Optional[str] = None,
        error_code: Optional[str] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=self.http_status,
            detail=detail or self.default_detail,
            headers=headers or self.default_headers,
        )
        self.error_code = error_code or self.default_code


class NotFoundError(APIError):
    http_status = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"
    default_code = "NOT_FOUND"


class ValidationError(APIError):
    default_detail = "Validation failed"
    default_code = "VALIDATION_ERROR"


class AuthenticationError(APIError):
    http_status = status.HTTP_401_UNAUTHORIZED
    default_detail = "Could not validate credentials"
    default_code = "AUTH_FAILED"
    default_headers = {"WWW-Authenticate": "Bearer"}


class PermissionError(APIError):
    http_status = status.HTTP_403_FORBIDDEN
    default_detail = "Permission denied"
    default_code = "PERMISSION_DENIED"


class ConflictError(APIError):
    http_status = status.HTTP_409_CONFLICT
    default_detail = "Resource conflict"
    default_code = "CONFLICT"


def _respond(
    request: Request,
    status_code: int,
    detail: Any,
    error_code: Optional[str],
    headers: Optional[Dict[str, str]] = None,
) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"detail": detail, "error_code": error_code, "path": request.url.path},
        headers=headers,
    )


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{exc.error_code} at {request.url.path}: {exc.detail}")
    return _respond(request, exc.status_code, exc.detail, exc.error_code, exc.headers)


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    """Service-level ValueError: the request was invalid."""
    logger.warning(f"ValueError at {request.url.path}: {exc}")
    return _respond(request, status.HTTP_400_BAD_REQUEST, str(exc), ValidationError.default_code)


async def handle_key_error(request: Request, exc: KeyError) -> JSONResponse:
    """Service-level KeyError: a referenced entity does not exist."""
    logger.warning(f"KeyError at {request.url.path}: {exc}")
    return _respond(
        request, status.HTTP_404_NOT_FOUND, f"Resource not found: {exc}", NotFoundError.default_code
    )


def register_exception_handlers(app):
    app.add_exception_handler(APIError, handle_api_error)
    app.add_exception_handler(ValueError, handle_value_error)
    app.add_exception_handler(KeyError, handle_key_error)
