# backend/modules/payroll/services/incentive_payout_service.py

"""
Incentive payout claims.

A staff member may claim up to their balance: total incentive earned so
far less the payouts already approved. Partial claims are allowed.
"""

import logging
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from core.exceptions import NotFoundError
from modules.staff.services.staff_service import StaffService
from .incentive_engine import IncentiveEngine
from .incentive_service import IncentiveService
from ..enums.payroll_enums import PayoutStatus
from ..exceptions import (
    PayrollNotFoundError,
    PayrollValidationError,
    TerminalStateViolation,
)
from ..models.incentive_models import IncentivePayout
from ..schemas.error_schemas import PayrollErrorCodes
from ..schemas.incentive_schemas import PayoutBalance

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")


def _round(value: Decimal) -> Decimal:
    return Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


class IncentivePayoutService:
    def __init__(self, db: Session):
        self.db = db
        self.incentive_service = IncentiveService(db)

    def get_balance(self, tenant_id: int, staff_id: int) -> PayoutBalance:
        """
        Earned, approved-paid and remaining incentive for a staff member.

        Raises:
            NotFoundError: staff member missing or without a salary
        """
        staff = StaffService(self.db).get_staff(tenant_id, staff_id)
        if not staff.fixed_salary or staff.fixed_salary <= 0:
            raise NotFoundError(
                "Staff member not found or their salary is not set.",
                error_code="STAFF_SALARY_NOT_SET",
            )

        engine = IncentiveEngine(staff.fixed_salary, self.incentive_service.list_rules(tenant_id))
        earned = engine.total_earned(self.incentive_service.list_sales(tenant_id, staff_id))

        paid = (
            self.db.query(func.coalesce(func.sum(IncentivePayout.amount), 0))
            .filter(
                IncentivePayout.tenant_id == tenant_id,
                IncentivePayout.staff_id == staff_id,
                IncentivePayout.status == PayoutStatus.APPROVED,
            )
            .scalar()
        )
        paid = Decimal(str(paid))

        return PayoutBalance(
            staff_id=staff_id,
            total_earned=_round(earned),
            total_paid=_round(paid),
            balance=_round(earned - paid),
        )

    def max_claimable(self, tenant_id: int, staff_id: int) -> Decimal:
        return self.get_balance(tenant_id, staff_id).balance

    def request_payout(
        self,
        tenant_id: int,
        actor_id: Optional[int],
        staff_id: int,
        amount: Decimal,
        reason: str,
    ) -> IncentivePayout:
        """
        Submit a payout claim.

        Raises:
            PayrollValidationError: non-positive amount, missing reason,
                or an amount above the claimable balance
        """
        if amount is None or Decimal(amount) <= 0:
            raise PayrollValidationError(
                "Amount must be greater than zero",
                field="amount",
                code=PayrollErrorCodes.INVALID_AMOUNT,
            )
        if not reason or not reason.strip():
            raise PayrollValidationError("Reason is required", field="reason")

        claimable = self.max_claimable(tenant_id, staff_id)
        if Decimal(amount) > claimable:
            logger.warning(
                f"Payout of {amount} for staff {staff_id} exceeds claimable balance {claimable}"
            )
            raise PayrollValidationError(
                f"Requested amount {amount} exceeds available balance {claimable}",
                field="amount",
                code=PayrollErrorCodes.EXCEEDS_BALANCE,
            )

        payout = IncentivePayout(
            tenant_id=tenant_id,
            staff_id=staff_id,
            amount=Decimal(amount),
            reason=reason.strip(),
            status=PayoutStatus.PENDING,
            requested_by=actor_id,
        )
        self.db.add(payout)
        self.db.commit()
        self.db.refresh(payout)
        logger.info(f"Payout {payout.id} of {payout.amount} requested for staff {staff_id}")
        return payout

    def decide_payout(
        self,
        tenant_id: int,
        payout_id: int,
        status: PayoutStatus,
        actor_id: Optional[int],
        now: Optional[datetime] = None,
    ) -> IncentivePayout:
        if status not in (PayoutStatus.APPROVED, PayoutStatus.REJECTED):
            raise PayrollValidationError(
                "Status must be 'approved' or 'rejected'", field="status"
            )

        payout = (
            self.db.query(IncentivePayout)
            .filter(IncentivePayout.tenant_id == tenant_id, IncentivePayout.id == payout_id)
            .first()
        )
        if not payout:
            raise PayrollNotFoundError("Payout", payout_id)
        if payout.status != PayoutStatus.PENDING:
            raise TerminalStateViolation(f"Payout {payout_id} is already {payout.status.value}")

        payout.status = status
        payout.processed_date = now or datetime.utcnow()
        payout.decided_by = actor_id
        self.db.commit()
        self.db.refresh(payout)
        logger.info(f"Payout {payout_id} {status.value} by user {actor_id}")
        return payout

    def list_payouts(
        self,
        tenant_id: int,
        staff_id: Optional[int] = None,
        status: Optional[PayoutStatus] = None,
    ) -> List[IncentivePayout]:
        query = self.db.query(IncentivePayout).filter(IncentivePayout.tenant_id == tenant_id)
        if staff_id is not None:
            query = query.filter(IncentivePayout.staff_id == staff_id)
        if status is not None:
            query = query.filter(IncentivePayout.status == status)
        return query.order_by(IncentivePayout.created_at.desc(), IncentivePayout.id.desc()).all()
