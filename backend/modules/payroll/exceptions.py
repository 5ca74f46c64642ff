# backend/modules/payroll/exceptions.py

"""
Payroll error taxonomy and its HTTP rendering.
"""

import logging
from typing import Optional, List, Any

from fastapi import Request
from fastapi.responses import JSONResponse

from .schemas.error_schemas import ErrorDetail, ErrorResponse, PayrollErrorCodes

logger = logging.getLogger(__name__)


class PayrollException(Exception):
    """Base exception for payroll module"""

    def __init__(
        self,
        message: str,
        code: str = PayrollErrorCodes.INVALID_INPUT,
        details: Optional[List[ErrorDetail]] = None,
        status_code: int = 400,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or []
        self.status_code = status_code


class PayrollValidationError(PayrollException):
    """Rejected input: negative amounts, malformed periods, over-limit claims"""

    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        code: str = PayrollErrorCodes.INVALID_INPUT,
        details: Optional[List[ErrorDetail]] = None,
    ):
        if field and not details:
            details = [ErrorDetail(field=field, message=message, code=code)]
        super().__init__(message=message, code=code, details=details, status_code=422)
        self.field = field


class PayrollConfigurationError(PayrollException):
    """Required payroll configuration is missing for a position"""

    def __init__(self, position: str, message: Optional[str] = None):
        message = message or f"Monthly Target Hours are not set for position: {position}"
        super().__init__(
            message=message,
            code=PayrollErrorCodes.CONFIG_NOT_FOUND,
            details=[
                ErrorDetail(
                    field="position", message=position, code=PayrollErrorCodes.CONFIG_NOT_FOUND
                )
            ],
            status_code=422,
        )
        self.position = position


class UpstreamFetchError(PayrollException):
    """A collaborator query (attendance, advances) failed or returned bad data"""

    def __init__(self, source: str, message: str):
        super().__init__(
            message=f"Failed to fetch {source}: {message}",
            code=PayrollErrorCodes.UPSTREAM_FETCH_FAILED,
            details=[ErrorDetail(field=source, message=message)],
            status_code=502,
        )
        self.source = source


class TerminalStateViolation(PayrollException):
    """Attempt to change a record that has reached a terminal state"""

    def __init__(
        self, message: str, code: str = PayrollErrorCodes.TERMINAL_STATE
    ):
        super().__init__(message=message, code=code, status_code=409)


class PayrollNotFoundError(PayrollException):
    """Resource not found error"""

    def __init__(self, resource: str, identifier: Any):
        super().__init__(
            message=f"{resource} with identifier {identifier} not found",
            code=PayrollErrorCodes.RECORD_NOT_FOUND,
            status_code=404,
        )


async def payroll_exception_handler(request: Request, exc: PayrollException) -> JSONResponse:
    """Render a PayrollException as an ErrorResponse body"""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{type(exc).__name__} at {request.url.path}: {exc.message}")
    body = ErrorResponse(
        error=type(exc).__name__,
        message=exc.message,
        code=exc.code,
        details=exc.details or None,
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))
