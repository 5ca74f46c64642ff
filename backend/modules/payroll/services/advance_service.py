# backend/modules/payroll/services/advance_service.py

"""
Cash advance ledger.

An advance is requested as pending and decided exactly once. Only an
approved advance counts toward salary, in the month of its approval.
"""

import logging
from datetime import datetime
from decimal import Decimal
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from modules.staff.services.attendance_service import month_bounds
from modules.staff.services.staff_service import StaffService
from ..enums.payroll_enums import AdvanceStatus
from ..exceptions import (
    PayrollNotFoundError,
    PayrollValidationError,
    TerminalStateViolation,
)
from ..models.payroll_models import AdvancePayment
from ..schemas.error_schemas import PayrollErrorCodes

logger = logging.getLogger(__name__)


class AdvanceService:
    def __init__(self, db: Session):
        self.db = db

    def request_advance(
        self,
        tenant_id: int,
        actor_id: Optional[int],
        staff_id: int,
        amount: Decimal,
        reason: str,
        repayment_plan: str,
        now: Optional[datetime] = None,
    ) -> AdvancePayment:
        if amount is None or Decimal(amount) <= 0:
            raise PayrollValidationError(
                "Amount must be greater than zero",
                field="amount",
                code=PayrollErrorCodes.INVALID_AMOUNT,
            )
        if not reason or not reason.strip():
            raise PayrollValidationError("Reason is required", field="reason")
        if not repayment_plan or not repayment_plan.strip():
            raise PayrollValidationError("Repayment plan is required", field="repayment_plan")

        StaffService(self.db).get_staff(tenant_id, staff_id)

        advance = AdvancePayment(
            tenant_id=tenant_id,
            staff_id=staff_id,
            amount=Decimal(amount),
            reason=reason.strip(),
            repayment_plan=repayment_plan.strip(),
            status=AdvanceStatus.PENDING,
            request_date=now or datetime.utcnow(),
            requested_by=actor_id,
        )
        self.db.add(advance)
        self.db.commit()
        self.db.refresh(advance)
        logger.info(f"Advance {advance.id} of {advance.amount} requested for staff {staff_id}")
        return advance

    def get_advance(self, tenant_id: int, advance_id: int) -> AdvancePayment:
        advance = (
            self.db.query(AdvancePayment)
            .filter(AdvancePayment.tenant_id == tenant_id, AdvancePayment.id == advance_id)
            .first()
        )
        if not advance:
            raise PayrollNotFoundError("Advance", advance_id)
        return advance

    def decide_advance(
        self,
        tenant_id: int,
        advance_id: int,
        status: AdvanceStatus,
        actor_id: Optional[int],
        now: Optional[datetime] = None,
    ) -> AdvancePayment:
        """
        Approve or reject a pending advance.

        Raises:
            PayrollValidationError: status is not approved or rejected
            TerminalStateViolation: advance was already decided
        """
        if status not in (AdvanceStatus.APPROVED, AdvanceStatus.REJECTED):
            raise PayrollValidationError(
                "Status must be 'approved' or 'rejected'", field="status"
            )

        advance = self.get_advance(tenant_id, advance_id)
        if advance.status != AdvanceStatus.PENDING:
            raise TerminalStateViolation(
                f"Advance {advance_id} is already {advance.status.value}"
            )

        advance.status = status
        advance.decided_by = actor_id
        if status == AdvanceStatus.APPROVED:
            advance.approved_date = now or datetime.utcnow()

        self.db.commit()
        self.db.refresh(advance)
        logger.info(f"Advance {advance_id} {status.value} by user {actor_id}")
        return advance

    def list_advances(
        self,
        tenant_id: int,
        staff_id: Optional[int] = None,
        status: Optional[AdvanceStatus] = None,
    ) -> List[AdvancePayment]:
        query = self.db.query(AdvancePayment).filter(AdvancePayment.tenant_id == tenant_id)
        if staff_id is not None:
            query = query.filter(AdvancePayment.staff_id == staff_id)
        if status is not None:
            query = query.filter(AdvancePayment.status == status)
        return query.order_by(AdvancePayment.request_date.desc()).all()

    def approved_total_for_month(
        self, tenant_id: int, staff_id: int, year: int, month: int
    ) -> Decimal:
        """Sum of approved advances whose approval date falls in the month."""
        start, end = month_bounds(year, month)
        total = (
            self.db.query(func.coalesce(func.sum(AdvancePayment.amount), 0))
            .filter(
                AdvancePayment.tenant_id == tenant_id,
                AdvancePayment.staff_id == staff_id,
                AdvancePayment.status == AdvanceStatus.APPROVED,
                AdvancePayment.approved_date >= datetime.combine(start, datetime.min.time()),
                AdvancePayment.approved_date < datetime.combine(end, datetime.min.time()),
            )
            .scalar()
        )
        return Decimal(str(total))
