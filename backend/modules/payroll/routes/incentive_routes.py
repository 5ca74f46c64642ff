# backend/modules/payroll/routes/incentive_routes.py

"""
Incentive rules, daily sales and payout claim endpoints.
"""

from datetime import date
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from core.auth import CurrentUser, require_permission
from core.database import get_db
from core.permissions import Permission
from ..enums.payroll_enums import IncentiveRuleType, PayoutStatus
from ..schemas.incentive_schemas import (
    DailySaleCreate,
    DailySaleResponse,
    IncentiveRuleCreate,
    IncentiveRuleResponse,
    PayoutBalance,
    PayoutDecision,
    PayoutRequest,
    PayoutResponse,
)
from ..services.incentive_payout_service import IncentivePayoutService
from ..services.incentive_service import IncentiveService

router = APIRouter()

require_incentives_read = require_permission(Permission.STAFF_INCENTIVES_READ)
require_incentives_manage = require_permission(Permission.STAFF_INCENTIVES_MANAGE)


@router.get("/rules", response_model=List[IncentiveRuleResponse])
async def list_rules(
    rule_type: Optional[IncentiveRuleType] = Query(None),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_incentives_read),
):
    return IncentiveService(db).list_rules(current_user.tenant_id, rule_type)


@router.post("/rules", response_model=IncentiveRuleResponse, status_code=201)
async def create_rule(
    rule: IncentiveRuleCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_incentives_manage),
):
    """
    Add a new version of an incentive rule.

    The new version applies to sales recorded from now on; earlier sales
    keep the version that was in effect when they were recorded.
    """
    return IncentiveService(db).create_rule(current_user.tenant_id, rule)


@router.get("/sales", response_model=List[DailySaleResponse])
async def list_sales(
    staff_id: int = Query(...),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_incentives_read),
):
    return IncentiveService(db).list_sales(current_user.tenant_id, staff_id, start, end)


@router.post("/sales", response_model=DailySaleResponse, status_code=201)
async def record_sale(
    sale: DailySaleCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_incentives_manage),
):
    return IncentiveService(db).record_daily_sale(current_user.tenant_id, sale)


@router.get("/payouts", response_model=List[PayoutResponse])
async def list_payouts(
    staff_id: Optional[int] = Query(None),
    status: Optional[PayoutStatus] = Query(None),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_incentives_read),
):
    return IncentivePayoutService(db).list_payouts(current_user.tenant_id, staff_id, status)


@router.get("/payouts/staff/{staff_id}/balance", response_model=PayoutBalance)
async def payout_balance(
    staff_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_incentives_read),
):
    """
    Total earned, total approved payouts and the claimable balance.
    """
    return IncentivePayoutService(db).get_balance(current_user.tenant_id, staff_id)


@router.post("/payouts", response_model=PayoutResponse, status_code=201)
async def request_payout(
    request: PayoutRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_incentives_manage),
):
    """
    Claim part or all of the available incentive balance.

    ## Error Responses
    - **404**: Staff member not found or salary not set
    - **422**: Amount exceeds the available balance
    """
    return IncentivePayoutService(db).request_payout(
        current_user.tenant_id,
        current_user.id,
        request.staff_id,
        request.amount,
        request.reason,
    )


@router.patch("/payouts/{payout_id}", response_model=PayoutResponse)
async def decide_payout(
    payout_id: int,
    decision: PayoutDecision,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_incentives_manage),
):
    return IncentivePayoutService(db).decide_payout(
        current_user.tenant_id, payout_id, decision.status, current_user.id
    )
