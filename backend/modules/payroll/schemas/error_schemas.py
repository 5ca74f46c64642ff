# backend/modules/payroll/schemas/error_schemas.py

"""
Error response schemas for structured error handling.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List
from datetime import datetime


class ErrorDetail(BaseModel):
    """Detailed error information"""

    field: Optional[str] = None
    message: str
    code: Optional[str] = None


class ErrorResponse(BaseModel):
    """Standardized error response"""

    error: str = Field(..., description="Error type or category")
    message: str = Field(..., description="Human-readable error message")
    code: str = Field(..., description="Machine-readable error code")
    details: Optional[List[ErrorDetail]] = Field(
        None, description="Additional error details"
    )
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "error": "PayrollConfigurationError",
                "message": "Monthly Target Hours are not set for position: Stylist",
                "code": "PAYROLL_CONFIG_NOT_FOUND",
                "details": [
                    {
                        "field": "position",
                        "message": "Stylist",
                        "code": "PAYROLL_CONFIG_NOT_FOUND",
                    }
                ],
                "timestamp": "2025-01-30T12:00:00Z",
            }
        }
    )


class PayrollErrorCodes:
    """Centralized error codes for payroll module"""

    # Validation errors
    INVALID_AMOUNT = "PAYROLL_INVALID_AMOUNT"
    INVALID_PERIOD = "PAYROLL_INVALID_PERIOD"
    INVALID_INPUT = "PAYROLL_INVALID_INPUT"
    EXCEEDS_BALANCE = "PAYROLL_EXCEEDS_BALANCE"

    # State errors
    PAYMENT_ALREADY_PROCESSED = "PAYROLL_PAYMENT_ALREADY_PROCESSED"
    TERMINAL_STATE = "PAYROLL_TERMINAL_STATE"

    # Configuration errors
    CONFIG_NOT_FOUND = "PAYROLL_CONFIG_NOT_FOUND"
    INVALID_CONFIG_VALUE = "PAYROLL_INVALID_CONFIG_VALUE"

    # Collaborator errors
    UPSTREAM_FETCH_FAILED = "PAYROLL_UPSTREAM_FETCH_FAILED"

    # Lookup errors
    RECORD_NOT_FOUND = "PAYROLL_RECORD_NOT_FOUND"
