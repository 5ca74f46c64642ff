# backend/modules/payroll/routes/advance_routes.py

"""
Cash advance request and approval endpoints.
"""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional

from core.auth import CurrentUser, require_permission
from core.database import get_db
from core.permissions import Permission
from ..enums.payroll_enums import AdvanceStatus
from ..schemas.payroll_schemas import AdvanceDecision, AdvanceRequest, AdvanceResponse
from ..services.advance_service import AdvanceService

router = APIRouter()

require_advance_read = require_permission(Permission.STAFF_ADVANCE_READ)
require_advance_manage = require_permission(Permission.STAFF_ADVANCE_MANAGE)


@router.get("", response_model=List[AdvanceResponse])
async def list_advances(
    staff_id: Optional[int] = Query(None),
    status: Optional[AdvanceStatus] = Query(None),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_advance_read),
):
    return AdvanceService(db).list_advances(current_user.tenant_id, staff_id, status)


@router.post("", response_model=AdvanceResponse, status_code=201)
async def request_advance(
    request: AdvanceRequest,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_advance_manage),
):
    return AdvanceService(db).request_advance(
        current_user.tenant_id,
        current_user.id,
        request.staff_id,
        request.amount,
        request.reason,
        request.repayment_plan,
    )


@router.patch("/{advance_id}", response_model=AdvanceResponse)
async def decide_advance(
    advance_id: int,
    decision: AdvanceDecision,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_advance_manage),
):
    """
    Approve or reject a pending advance.

    Approval stamps the approval date, which decides the salary month the
    advance is deducted from.

    ## Error Responses
    - **404**: Advance not found
    - **409**: Advance already approved or rejected
    """
    return AdvanceService(db).decide_advance(
        current_user.tenant_id, advance_id, decision.status, current_user.id
    )
