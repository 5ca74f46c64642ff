# backend/modules/payroll/routes/salary_routes.py

"""
Salary processing and payment endpoints.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from core.auth import CurrentUser, require_permission
from core.database import get_db
from core.permissions import Permission
from ..schemas.payroll_schemas import (
    MarkPaidRequest,
    SalaryBreakdownResponse,
    SalaryInputs,
    SalaryMonthlySummary,
    SalaryRecordResponse,
)
from ..services.salary_service import SalaryService

router = APIRouter()

require_salary_read = require_permission(Permission.STAFF_SALARY_READ)
require_salary_manage = require_permission(Permission.STAFF_SALARY_MANAGE)


@router.post("/preview", response_model=SalaryBreakdownResponse)
async def preview_salary(
    inputs: SalaryInputs,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_salary_read),
):
    """
    Compute a salary breakdown without saving it.

    ## Error Responses
    - **404**: Staff member not found
    - **422**: Monthly target hours not set for the staff member's position
    - **502**: Attendance or advance data could not be fetched
    """
    breakdown = SalaryService(db).preview_salary(current_user.tenant_id, inputs)
    return SalaryBreakdownResponse(
        staff_id=inputs.staff_id,
        year=inputs.year,
        month=inputs.month,
        **breakdown.as_record_values(),
    )


@router.post("", response_model=SalaryRecordResponse)
async def process_salary(
    inputs: SalaryInputs,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_salary_manage),
):
    """
    Process (or reprocess) the salary for a staff member and month.

    ## Request Body
    - **staff_id**, **year**, **month**: Record key
    - **ot_hours**: Overtime hours; blank or zero uses attendance overtime
    - **extra_days**: Extra days worked
    - **addition**: Positive adjustment (e.g. food allowance)
    - **deduction**: Positive adjustment (e.g. recurring expense)

    ## Error Responses
    - **409**: The month is already paid
    - **422**: Monthly target hours not set for the position
    - **502**: Attendance or advance data could not be fetched
    """
    return SalaryService(db).process_salary(current_user.tenant_id, current_user.id, inputs)


@router.get("", response_model=List[SalaryRecordResponse])
async def list_salary_records(
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    staff_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_salary_read),
):
    return SalaryService(db).list_records(current_user.tenant_id, year, month, staff_id)


@router.get("/summary", response_model=SalaryMonthlySummary)
async def salary_summary(
    year: int = Query(..., ge=2000, le=2100),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_salary_read),
):
    """
    Processed, paid and pending counts plus the month's paid salary expense.
    """
    return SalaryService(db).monthly_summary(current_user.tenant_id, year, month)


@router.get("/{record_id}", response_model=SalaryRecordResponse)
async def get_salary_record(
    record_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_salary_read),
):
    return SalaryService(db).get_record(current_user.tenant_id, record_id)


@router.patch("/{record_id}/pay", response_model=SalaryRecordResponse)
async def mark_salary_paid(
    record_id: int,
    request: MarkPaidRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_salary_manage),
):
    """
    Mark a processed salary record as paid. Paid records are final.

    ## Error Responses
    - **404**: Salary record not found
    - **409**: Record already paid
    """
    return SalaryService(db).mark_paid(
        current_user.tenant_id, record_id, request.paid_date, current_user.id
    )


@router.delete("/{record_id}", status_code=204)
async def delete_salary_record(
    record_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_salary_manage),
):
    SalaryService(db).delete_record(current_user.tenant_id, record_id)
