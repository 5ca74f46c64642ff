# backend/modules/staff/routes/attendance_routes.py

"""
Attendance capture and monthly summary endpoints.
"""

from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.auth import CurrentUser, require_permission
from core.database import get_db
from core.permissions import Permission
from ..schemas.attendance_schemas import (
    AttendanceRecordOut,
    AttendanceSummary,
    CheckInRequest,
    MarkDayRequest,
    TemporaryExitOut,
    TemporaryExitStart,
)
from ..services.attendance_service import AttendanceService

router = APIRouter(prefix="/attendance", tags=["Attendance"])

require_attendance_read = require_permission(Permission.STAFF_ATTENDANCE_READ)
require_attendance_manage = require_permission(Permission.STAFF_ATTENDANCE_MANAGE)


@router.post("/check-in", response_model=AttendanceRecordOut, status_code=201)
async def check_in(
    request: CheckInRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_attendance_manage),
):
    return AttendanceService(db).check_in(
        current_user.tenant_id, request.staff_id, request.required_hours
    )


@router.post("/{attendance_id}/check-out", response_model=AttendanceRecordOut)
async def check_out(
    attendance_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_attendance_manage),
):
    """
    Close the day for an attendance record.

    ## Error Responses
    - **400**: No check-in, or a temporary exit is still open
    - **404**: Attendance record not found
    - **409**: Already checked out
    """
    return AttendanceService(db).check_out(current_user.tenant_id, attendance_id)


@router.post(
    "/{attendance_id}/temporary-exits", response_model=TemporaryExitOut, status_code=201
)
async def start_temporary_exit(
    attendance_id: int,
    request: TemporaryExitStart,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_attendance_manage),
):
    return AttendanceService(db).start_temporary_exit(
        current_user.tenant_id, attendance_id, request.reason
    )


@router.put("/temporary-exits/{exit_id}/end", response_model=TemporaryExitOut)
async def end_temporary_exit(
    exit_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_attendance_manage),
):
    return AttendanceService(db).end_temporary_exit(current_user.tenant_id, exit_id)


@router.post("/mark-day", response_model=AttendanceRecordOut)
async def mark_day(
    request: MarkDayRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_attendance_manage),
):
    return AttendanceService(db).mark_day(
        current_user.tenant_id, request.staff_id, request.work_date, request.status
    )


@router.get("/records", response_model=List[AttendanceRecordOut])
async def list_month(
    staff_id: int = Query(...),
    year: int = Query(..., ge=1),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_attendance_read),
):
    return AttendanceService(db).list_month(current_user.tenant_id, staff_id, year, month)


@router.get("/summary", response_model=AttendanceSummary)
async def monthly_summary(
    staff_id: int = Query(...),
    year: int = Query(..., ge=1),
    month: int = Query(..., ge=1, le=12),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_attendance_read),
):
    """
    Total working and overtime hours for one staff member in a month.

    ## Query Parameters
    - **staff_id**: Staff member ID
    - **year**, **month**: Period (month is 1-12)
    """
    return AttendanceService(db).monthly_summary(current_user.tenant_id, staff_id, year, month)
