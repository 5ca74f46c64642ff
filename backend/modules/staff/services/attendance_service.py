# backend/modules/staff/services/attendance_service.py

"""
Daily attendance capture and monthly aggregation.

A day's worked minutes are the check-in to check-out span less any
temporary exits. Overtime is whatever exceeds the minutes required for
that day. The monthly summary feeds salary processing.
"""

import logging
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.orm import Session

from core.config import settings
from core.exceptions import ConflictError, NotFoundError, ValidationError
from ..enums.attendance_enums import AttendanceStatus, MANUAL_DAY_STATUSES
from ..models.attendance_models import AttendanceRecord, TemporaryExit
from ..schemas.attendance_schemas import AttendanceSummary
from .staff_service import StaffService

logger = logging.getLogger(__name__)

HOURS_QUANTUM = Decimal("0.01")


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    """Return [first day of month, first day of next month)."""
    if not 1 <= month <= 12:
        raise ValidationError(f"Invalid month: {month}")
    if year < 1:
        raise ValidationError(f"Invalid year: {year}")
    start = date(year, month, 1)
    end = date(year + 1, 1, 1) if month == 12 else date(year, month + 1, 1)
    return start, end


def minutes_to_hours(minutes: int) -> Decimal:
    return (Decimal(minutes) / Decimal(60)).quantize(HOURS_QUANTUM, rounding=ROUND_HALF_UP)


def _minutes_between(start: datetime, end: datetime) -> int:
    return max(0, int((end - start).total_seconds() // 60))


class AttendanceService:
    def __init__(self, db: Session):
        self.db = db
        self.staff_service = StaffService(db)

    def get_record(self, tenant_id: int, attendance_id: int) -> AttendanceRecord:
        record = (
            self.db.query(AttendanceRecord)
            .filter(
                AttendanceRecord.tenant_id == tenant_id,
                AttendanceRecord.id == attendance_id,
            )
            .first()
        )
        if not record:
            raise NotFoundError("Attendance record not found", error_code="ATTENDANCE_NOT_FOUND")
        return record

    def _get_day(self, tenant_id: int, staff_id: int, work_date: date) -> Optional[AttendanceRecord]:
        return (
            self.db.query(AttendanceRecord)
            .filter(
                AttendanceRecord.tenant_id == tenant_id,
                AttendanceRecord.staff_id == staff_id,
                AttendanceRecord.work_date == work_date,
            )
            .first()
        )

    def check_in(
        self,
        tenant_id: int,
        staff_id: int,
        required_hours: Decimal,
        now: Optional[datetime] = None,
    ) -> AttendanceRecord:
        now = now or datetime.utcnow()
        if required_hours is None or Decimal(str(required_hours)) <= 0:
            raise ValidationError("required_hours must be greater than zero")

        staff = self.staff_service.get_staff(tenant_id, staff_id)
        if not staff.is_active:
            raise ValidationError(f"Staff member {staff_id} is inactive")

        required_minutes = int(Decimal(str(required_hours)) * 60)
        record = self._get_day(tenant_id, staff_id, now.date())

        if record is not None:
            if record.check_in is not None:
                raise ConflictError(
                    "Attendance already recorded and checked-in for today",
                    error_code="ALREADY_CHECKED_IN",
                )
            # Day was pre-marked (absent, leave, week off); a check-in replaces it
            record.check_in = now
            record.required_minutes = required_minutes
            record.status = AttendanceStatus.INCOMPLETE
        else:
            record = AttendanceRecord(
                tenant_id=tenant_id,
                staff_id=staff_id,
                work_date=now.date(),
                check_in=now,
                required_minutes=required_minutes,
                status=AttendanceStatus.INCOMPLETE,
            )
            self.db.add(record)

        self.db.commit()
        self.db.refresh(record)
        logger.info(f"Staff {staff_id} checked in at {now.isoformat()} (tenant {tenant_id})")
        return record

    def start_temporary_exit(
        self,
        tenant_id: int,
        attendance_id: int,
        reason: str,
        now: Optional[datetime] = None,
    ) -> TemporaryExit:
        now = now or datetime.utcnow()
        if not reason or not reason.strip():
            raise ValidationError("A valid reason is required.")

        record = self.get_record(tenant_id, attendance_id)
        if record.check_in is None:
            raise ValidationError("Cannot start temp exit before check-in")
        if record.check_out is not None:
            raise ValidationError("Cannot start temp exit after check-out")
        if record.has_open_exit:
            raise ConflictError("An exit is already ongoing.", error_code="EXIT_ONGOING")

        temp_exit = TemporaryExit(
            tenant_id=tenant_id,
            attendance_id=record.id,
            reason=reason.strip(),
            start_time=now,
        )
        self.db.add(temp_exit)
        self.db.commit()
        self.db.refresh(temp_exit)
        return temp_exit

    def end_temporary_exit(
        self, tenant_id: int, exit_id: int, now: Optional[datetime] = None
    ) -> TemporaryExit:
        now = now or datetime.utcnow()
        temp_exit = (
            self.db.query(TemporaryExit)
            .filter(TemporaryExit.tenant_id == tenant_id, TemporaryExit.id == exit_id)
            .first()
        )
        if not temp_exit:
            raise NotFoundError("Temporary exit not found", error_code="EXIT_NOT_FOUND")
        if temp_exit.end_time is not None:
            raise ConflictError("Temporary exit already ended", error_code="EXIT_ENDED")

        temp_exit.end_time = now
        temp_exit.duration_minutes = _minutes_between(temp_exit.start_time, now)
        self.db.commit()
        self.db.refresh(temp_exit)
        return temp_exit

    def check_out(
        self, tenant_id: int, attendance_id: int, now: Optional[datetime] = None
    ) -> AttendanceRecord:
        now = now or datetime.utcnow()
        record = self.get_record(tenant_id, attendance_id)

        if record.check_out is not None:
            raise ConflictError("Already checked out", error_code="ALREADY_CHECKED_OUT")
        if record.check_in is None:
            raise ValidationError("Cannot check-out without a check-in record")
        if record.has_open_exit:
            raise ValidationError("An exit is still ongoing. End it before checking out.")

        required = record.required_minutes or settings.attendance_default_required_minutes
        exit_minutes = sum(e.duration_minutes or 0 for e in record.temporary_exits)
        worked = max(0, _minutes_between(record.check_in, now) - exit_minutes)

        record.check_out = now
        record.required_minutes = required
        record.total_working_minutes = worked
        record.overtime_minutes = max(0, worked - required)
        record.is_work_complete = worked >= required
        record.status = (
            AttendanceStatus.PRESENT if record.is_work_complete else AttendanceStatus.INCOMPLETE
        )

        self.db.commit()
        self.db.refresh(record)
        logger.info(
            f"Staff {record.staff_id} checked out: {worked} min worked, "
            f"{record.overtime_minutes} min overtime (tenant {tenant_id})"
        )
        return record

    def mark_day(
        self,
        tenant_id: int,
        staff_id: int,
        work_date: date,
        status: AttendanceStatus,
    ) -> AttendanceRecord:
        if status not in MANUAL_DAY_STATUSES:
            raise ValidationError(f"Status {status.value} cannot be set manually")
        self.staff_service.get_staff(tenant_id, staff_id)

        record = self._get_day(tenant_id, staff_id, work_date)
        if record is not None and record.check_in is not None:
            raise ConflictError(
                "Cannot mark a day that already has a check-in",
                error_code="ALREADY_CHECKED_IN",
            )
        if record is None:
            record = AttendanceRecord(
                tenant_id=tenant_id, staff_id=staff_id, work_date=work_date
            )
            self.db.add(record)
        record.status = status

        self.db.commit()
        self.db.refresh(record)
        return record

    def list_month(
        self, tenant_id: int, staff_id: int, year: int, month: int
    ) -> List[AttendanceRecord]:
        start, end = month_bounds(year, month)
        return (
            self.db.query(AttendanceRecord)
            .filter(
                AttendanceRecord.tenant_id == tenant_id,
                AttendanceRecord.staff_id == staff_id,
                AttendanceRecord.work_date >= start,
                AttendanceRecord.work_date < end,
            )
            .order_by(AttendanceRecord.work_date)
            .all()
        )

    def monthly_summary(
        self, tenant_id: int, staff_id: int, year: int, month: int
    ) -> AttendanceSummary:
        """
        Aggregate a month of attendance for one staff member.

        Args:
            tenant_id: Owning tenant
            staff_id: Staff member ID
            year: Calendar year
            month: Calendar month (1-12)

        Returns:
            AttendanceSummary with total and overtime hours plus day counts
        """
        start, end = month_bounds(year, month)
        in_month = (
            AttendanceRecord.tenant_id == tenant_id,
            AttendanceRecord.staff_id == staff_id,
            AttendanceRecord.work_date >= start,
            AttendanceRecord.work_date < end,
        )

        total_minutes, overtime_minutes = (
            self.db.query(
                func.coalesce(func.sum(AttendanceRecord.total_working_minutes), 0),
                func.coalesce(func.sum(AttendanceRecord.overtime_minutes), 0),
            )
            .filter(*in_month)
            .one()
        )

        day_counts = dict(
            self.db.query(AttendanceRecord.status, func.count(AttendanceRecord.id))
            .filter(*in_month)
            .group_by(AttendanceRecord.status)
            .all()
        )

        return AttendanceSummary(
            staff_id=staff_id,
            year=year,
            month=month,
            total_working_hours=minutes_to_hours(int(total_minutes)),
            total_overtime_hours=minutes_to_hours(int(overtime_minutes)),
            present_days=day_counts.get(AttendanceStatus.PRESENT, 0),
            absent_days=day_counts.get(AttendanceStatus.ABSENT, 0),
            on_leave_days=day_counts.get(AttendanceStatus.ON_LEAVE, 0),
            week_off_days=day_counts.get(AttendanceStatus.WEEK_OFF, 0),
        )
