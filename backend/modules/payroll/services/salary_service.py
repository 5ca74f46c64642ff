# backend/modules/payroll/services/salary_service.py

"""
Salary processing, payment and reporting.

Processing one staff member's month is a single operation: load the
contract and configuration, fetch attendance and the advance total,
compute, then upsert the record keyed by (tenant, staff, month, year).

Collaborator failures are never papered over with zeros. They abort the
operation as ``UpstreamFetchError`` so nothing is persisted.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Callable, List, Optional

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from core.exceptions import APIError, ConflictError
from modules.staff.models.staff_models import StaffMember
from modules.staff.schemas.attendance_schemas import AttendanceSummary
from modules.staff.services.attendance_service import AttendanceService
from modules.staff.services.staff_service import StaffService
from .advance_service import AdvanceService
from .payroll_configuration_service import PayrollConfigurationService
from .payroll_engine import (
    AttendanceHours,
    ManualInputs,
    SalaryBreakdown,
    StaffContract,
    compute_salary,
)
from .rate_resolver import resolve_rates
from ..exceptions import (
    PayrollException,
    PayrollNotFoundError,
    PayrollValidationError,
    TerminalStateViolation,
    UpstreamFetchError,
)
from ..models.payroll_models import SalaryRecord
from ..schemas.error_schemas import PayrollErrorCodes
from ..schemas.payroll_schemas import (
    ApprovedAdvanceTotal,
    SalaryInputs,
    SalaryMonthlySummary,
)

logger = logging.getLogger(__name__)

# (tenant_id, staff_id, year, month) -> collaborator answer
AttendanceFetcher = Callable[[int, int, int, int], object]
AdvanceFetcher = Callable[[int, int, int, int], object]


class SalaryService:
    """
    Service for computing and storing monthly salary records.

    ``attendance_fetcher`` and ``advance_fetcher`` default to the local
    attendance and advance services; callers may supply remote clients
    with the same signature.
    """

    def __init__(
        self,
        db: Session,
        attendance_fetcher: Optional[AttendanceFetcher] = None,
        advance_fetcher: Optional[AdvanceFetcher] = None,
    ):
        self.db = db
        self.staff_service = StaffService(db)
        self.config_service = PayrollConfigurationService(db)
        self.attendance_fetcher = attendance_fetcher or AttendanceService(db).monthly_summary
        self.advance_fetcher = advance_fetcher or AdvanceService(db).approved_total_for_month

    # Collaborators

    def _fetch_attendance(
        self, tenant_id: int, staff_id: int, year: int, month: int
    ) -> AttendanceHours:
        try:
            raw = self.attendance_fetcher(tenant_id, staff_id, year, month)
            summary = (
                raw
                if isinstance(raw, AttendanceSummary)
                else AttendanceSummary.model_validate(raw)
            )
        except (PayrollException, APIError):
            raise
        except Exception as e:
            logger.error(f"Attendance fetch failed for staff {staff_id} {year}-{month:02d}: {e}")
            raise UpstreamFetchError("attendance", str(e)) from e

        if summary.staff_id != staff_id or (summary.year, summary.month) != (year, month):
            raise UpstreamFetchError(
                "attendance", "summary does not match the requested staff member and period"
            )
        return AttendanceHours(
            total_working_hours=summary.total_working_hours,
            total_overtime_hours=summary.total_overtime_hours,
        )

    def _fetch_advance_total(
        self, tenant_id: int, staff_id: int, year: int, month: int
    ) -> Decimal:
        try:
            raw = self.advance_fetcher(tenant_id, staff_id, year, month)
            if isinstance(raw, dict):
                total = ApprovedAdvanceTotal.model_validate(raw)
            else:
                total = ApprovedAdvanceTotal(
                    staff_id=staff_id, year=year, month=month, amount=raw
                )
        except (PayrollException, APIError):
            raise
        except Exception as e:
            logger.error(f"Advance fetch failed for staff {staff_id} {year}-{month:02d}: {e}")
            raise UpstreamFetchError("advances", str(e)) from e
        return total.amount

    # Computation

    def _find_record(
        self, tenant_id: int, staff_id: int, year: int, month: int
    ) -> Optional[SalaryRecord]:
        return (
            self.db.query(SalaryRecord)
            .filter(
                SalaryRecord.tenant_id == tenant_id,
                SalaryRecord.staff_id == staff_id,
                SalaryRecord.year == year,
                SalaryRecord.month == month,
            )
            .first()
        )

    def _compute(
        self,
        tenant_id: int,
        staff: StaffMember,
        inputs: SalaryInputs,
        existing: Optional[SalaryRecord],
    ) -> SalaryBreakdown:
        # Configuration is checked before any collaborator is called
        target_hours = self.config_service.require_target_hours(tenant_id, staff.position)
        rate_config = self.config_service.get_rate_configuration(tenant_id)
        rates = resolve_rates(staff.position, rate_config.overrides, rate_config.defaults)

        attendance = self._fetch_attendance(tenant_id, staff.id, inputs.year, inputs.month)

        previous_advance = None
        if existing is not None:
            # Keep a processed record stable against advances approved later
            previous_advance = Decimal(existing.advance_deducted)
            advance_total = previous_advance
        else:
            advance_total = self._fetch_advance_total(
                tenant_id, staff.id, inputs.year, inputs.month
            )

        return compute_salary(
            contract=StaffContract(
                staff_id=staff.id,
                position=staff.position,
                fixed_salary=Decimal(staff.fixed_salary),
            ),
            target_hours=target_hours,
            attendance=attendance,
            approved_advance_total=advance_total,
            manual_inputs=ManualInputs(
                ot_hours=inputs.ot_hours,
                extra_days=inputs.extra_days,
                addition=inputs.addition,
                deduction=inputs.deduction,
            ),
            rates=rates,
            previous_advance_deducted=previous_advance,
        )

    def preview_salary(self, tenant_id: int, inputs: SalaryInputs) -> SalaryBreakdown:
        """Compute a breakdown without persisting it."""
        staff = self.staff_service.get_staff(tenant_id, inputs.staff_id)
        existing = self._find_record(tenant_id, inputs.staff_id, inputs.year, inputs.month)
        return self._compute(tenant_id, staff, inputs, existing)

    def process_salary(
        self, tenant_id: int, actor_id: Optional[int], inputs: SalaryInputs
    ) -> SalaryRecord:
        """
        Compute and store the salary for one staff member and month.

        A new record takes the month's approved advance total; recomputing
        an unpaid record keeps the advance amount it was first stored with.

        Raises:
            PayrollConfigurationError: position has no target hours
            UpstreamFetchError: attendance or advance data unavailable
            TerminalStateViolation: the month is already paid
        """
        staff = self.staff_service.get_staff(tenant_id, inputs.staff_id)
        existing = self._find_record(tenant_id, inputs.staff_id, inputs.year, inputs.month)
        if existing is not None and existing.is_paid:
            raise TerminalStateViolation(
                f"Salary for staff {inputs.staff_id} for {inputs.year}-{inputs.month:02d} "
                "is already paid and cannot be recomputed",
                code=PayrollErrorCodes.PAYMENT_ALREADY_PROCESSED,
            )

        breakdown = self._compute(tenant_id, staff, inputs, existing)

        record = existing
        if record is None:
            record = SalaryRecord(
                tenant_id=tenant_id,
                staff_id=staff.id,
                year=inputs.year,
                month=inputs.month,
                is_paid=False,
            )
            self.db.add(record)
        for column, value in breakdown.as_record_values().items():
            setattr(record, column, value)
        record.processed_by = actor_id

        try:
            self.db.commit()
        except IntegrityError as e:
            self.db.rollback()
            logger.warning(f"Concurrent salary processing for staff {staff.id}: {e}")
            raise ConflictError(
                "Salary record for this staff member and month was created concurrently",
                error_code="SALARY_RECORD_CONFLICT",
            )
        self.db.refresh(record)

        logger.info(
            f"Salary {'updated' if existing else 'processed'} for staff {staff.id} "
            f"{inputs.year}-{inputs.month:02d}: net {record.net_salary} (by user {actor_id})"
        )
        return record

    # Payment

    def get_record(self, tenant_id: int, record_id: int) -> SalaryRecord:
        record = (
            self.db.query(SalaryRecord)
            .filter(SalaryRecord.tenant_id == tenant_id, SalaryRecord.id == record_id)
            .first()
        )
        if not record:
            raise PayrollNotFoundError("Salary record", record_id)
        return record

    def mark_paid(
        self,
        tenant_id: int,
        record_id: int,
        paid_date: date,
        actor_id: Optional[int] = None,
    ) -> SalaryRecord:
        """
        Transition a processed record to paid.

        Raises:
            PayrollValidationError: no paid date given
            TerminalStateViolation: the record is already paid
        """
        if not isinstance(paid_date, date):
            raise PayrollValidationError("A valid paid date is required", field="paid_date")

        record = self.get_record(tenant_id, record_id)
        if record.is_paid:
            raise TerminalStateViolation(
                f"Salary record {record_id} is already paid",
                code=PayrollErrorCodes.PAYMENT_ALREADY_PROCESSED,
            )

        record.is_paid = True
        record.paid_date = paid_date
        record.paid_by = actor_id
        self.db.commit()
        self.db.refresh(record)
        logger.info(f"Salary record {record_id} marked paid on {paid_date} by user {actor_id}")
        return record

    def delete_record(self, tenant_id: int, record_id: int) -> None:
        record = self.get_record(tenant_id, record_id)
        if record.is_paid:
            raise TerminalStateViolation(f"Salary record {record_id} is paid and cannot be deleted")
        self.db.delete(record)
        self.db.commit()
        logger.info(f"Salary record {record_id} deleted")

    # Reporting

    def list_records(
        self,
        tenant_id: int,
        year: int,
        month: int,
        staff_id: Optional[int] = None,
    ) -> List[SalaryRecord]:
        query = self.db.query(SalaryRecord).filter(
            SalaryRecord.tenant_id == tenant_id,
            SalaryRecord.year == year,
            SalaryRecord.month == month,
        )
        if staff_id is not None:
            query = query.filter(SalaryRecord.staff_id == staff_id)
        return query.order_by(SalaryRecord.staff_id).all()

    def monthly_summary(self, tenant_id: int, year: int, month: int) -> SalaryMonthlySummary:
        if not 1 <= month <= 12:
            raise PayrollValidationError(
                f"Invalid month: {month}", field="month", code=PayrollErrorCodes.INVALID_PERIOD
            )

        in_period = (
            SalaryRecord.tenant_id == tenant_id,
            SalaryRecord.year == year,
            SalaryRecord.month == month,
        )
        processed_count, total_net = (
            self.db.query(
                func.count(SalaryRecord.id),
                func.coalesce(func.sum(SalaryRecord.net_salary), 0),
            )
            .filter(*in_period)
            .one()
        )
        paid_count, total_paid = (
            self.db.query(
                func.count(SalaryRecord.id),
                func.coalesce(func.sum(SalaryRecord.net_salary), 0),
            )
            .filter(*in_period, SalaryRecord.is_paid.is_(True))
            .one()
        )

        return SalaryMonthlySummary(
            year=year,
            month=month,
            processed_count=processed_count,
            paid_count=paid_count,
            pending_count=processed_count - paid_count,
            total_paid_amount=Decimal(str(total_paid)).quantize(Decimal("0.01")),
            total_net_processed=Decimal(str(total_net)).quantize(Decimal("0.01")),
        )
