from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ..enums.attendance_enums import AttendanceStatus


class CheckInRequest(BaseModel):
    staff_id: int
    required_hours: Decimal = Field(..., gt=0, le=24)


class TemporaryExitStart(BaseModel):
    reason: str = Field(..., min_length=1, max_length=500)


class MarkDayRequest(BaseModel):
    staff_id: int
    work_date: date
    status: AttendanceStatus


class TemporaryExitOut(BaseModel):
    id: int
    attendance_id: int
    reason: str
    start_time: datetime
    end_time: Optional[datetime] = None
    duration_minutes: int

    model_config = ConfigDict(from_attributes=True)


class AttendanceRecordOut(BaseModel):
    id: int
    staff_id: int
    work_date: date
    check_in: Optional[datetime] = None
    check_out: Optional[datetime] = None
    required_minutes: Optional[int] = None
    total_working_minutes: int
    overtime_minutes: int
    is_work_complete: bool
    status: AttendanceStatus
    temporary_exits: List[TemporaryExitOut] = []

    model_config = ConfigDict(from_attributes=True)


class AttendanceSummary(BaseModel):
    """Monthly attendance totals for one staff member."""

    staff_id: int
    year: int
    month: int = Field(..., ge=1, le=12)
    total_working_hours: Decimal = Field(..., ge=0)
    total_overtime_hours: Decimal = Field(..., ge=0)
    present_days: int = 0
    absent_days: int = 0
    on_leave_days: int = 0
    week_off_days: int = 0

    @model_validator(mode="after")
    def overtime_within_total(self):
        if self.total_overtime_hours > self.total_working_hours:
            raise ValueError("total_overtime_hours cannot exceed total_working_hours")
        return self
