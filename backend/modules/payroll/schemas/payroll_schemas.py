# backend/modules/payroll/schemas/payroll_schemas.py

"""
Pydantic schemas for payroll module API endpoints.

Provides request/response models for:
- Rate and target hour configuration
- Salary processing and payment
- Cash advances
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List, Dict
from datetime import date, datetime
from decimal import Decimal

from ..enums.payroll_enums import AdvanceStatus, SalaryRecordStatus


# Configuration Schemas


class DefaultRatesPayload(BaseModel):
    default_ot_rate: Decimal = Field(..., ge=0)
    default_extra_day_rate: Decimal = Field(..., ge=0)


class RateOverridePayload(BaseModel):
    ot_rate: Decimal = Field(..., ge=0)
    extra_day_rate: Decimal = Field(..., ge=0)


class RateOverrideResponse(BaseModel):
    position_name: str
    ot_rate: Decimal
    extra_day_rate: Decimal

    model_config = ConfigDict(from_attributes=True)


class RateConfigurationResponse(BaseModel):
    default_ot_rate: Decimal
    default_extra_day_rate: Decimal
    position_overrides: List[RateOverrideResponse] = []


class TargetHoursPayload(BaseModel):
    required_hours: int = Field(..., ge=0)


class TargetHoursResponse(BaseModel):
    position_name: str
    required_hours: int

    model_config = ConfigDict(from_attributes=True)


class TargetHoursMap(BaseModel):
    position_hours: Dict[str, int]


# Salary Schemas


class SalaryInputs(BaseModel):
    """Operator inputs for a salary computation."""

    staff_id: int
    year: int = Field(..., ge=2000, le=2100)
    month: int = Field(..., ge=1, le=12)
    ot_hours: Optional[Decimal] = Field(
        None, ge=0, description="Defaults to attendance overtime when blank or zero"
    )
    extra_days: int = Field(0, ge=0)
    addition: Decimal = Field(Decimal("0"), ge=0, description="e.g. food allowance")
    deduction: Decimal = Field(Decimal("0"), ge=0, description="e.g. recurring expense")


class SalaryBreakdownResponse(BaseModel):
    staff_id: int
    year: int
    month: int
    fixed_salary: Decimal
    target_hours: int
    total_working_hours: Decimal
    regular_hours: Decimal
    hourly_rate: Decimal
    base_salary: Decimal
    ot_hours: Decimal
    ot_rate: Decimal
    ot_amount: Decimal
    extra_days: int
    extra_day_rate: Decimal
    extra_day_pay: Decimal
    addition: Decimal
    deduction: Decimal
    advance_deducted: Decimal
    total_earnings: Decimal
    total_deductions: Decimal
    net_salary: Decimal


class SalaryRecordResponse(SalaryBreakdownResponse):
    id: int
    status: SalaryRecordStatus
    is_paid: bool
    paid_date: Optional[date] = None
    processed_by: Optional[int] = None
    paid_by: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class MarkPaidRequest(BaseModel):
    is_paid: bool
    paid_date: date

    @field_validator("is_paid")
    @classmethod
    def must_be_paid(cls, v: bool) -> bool:
        if v is not True:
            raise ValueError("Only marking a record as paid is supported")
        return v


class SalaryMonthlySummary(BaseModel):
    year: int
    month: int
    processed_count: int
    paid_count: int
    pending_count: int
    total_paid_amount: Decimal
    total_net_processed: Decimal


# Advance Schemas


class AdvanceRequest(BaseModel):
    staff_id: int
    amount: Decimal = Field(..., gt=0)
    reason: str = Field(..., min_length=1)
    repayment_plan: str = Field(..., min_length=1, max_length=200)


class AdvanceDecision(BaseModel):
    status: AdvanceStatus

    @field_validator("status")
    @classmethod
    def must_be_decision(cls, v: AdvanceStatus) -> AdvanceStatus:
        if v == AdvanceStatus.PENDING:
            raise ValueError("Status must be 'approved' or 'rejected'")
        return v


class AdvanceResponse(BaseModel):
    id: int
    staff_id: int
    amount: Decimal
    reason: str
    repayment_plan: str
    status: AdvanceStatus
    request_date: datetime
    approved_date: Optional[datetime] = None
    requested_by: Optional[int] = None
    decided_by: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)


class ApprovedAdvanceTotal(BaseModel):
    """Advance ledger answer for one staff member and month."""

    staff_id: int
    year: int
    month: int
    amount: Decimal = Field(..., ge=0)
