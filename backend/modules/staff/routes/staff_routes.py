# backend/modules/staff/routes/staff_routes.py

"""
Staff contract endpoints.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from core.auth import CurrentUser, require_permission
from core.database import get_db
from core.permissions import Permission
from ..enums.staff_enums import StaffStatus
from ..schemas.staff_schemas import StaffCreate, StaffOut, StaffUpdate
from ..services.staff_service import StaffService

router = APIRouter(prefix="/staff", tags=["Staff"])

require_staff_read = require_permission(Permission.STAFF_READ)
require_staff_manage = require_permission(Permission.STAFF_MANAGE)


@router.get("/members", response_model=List[StaffOut])
async def list_staff(
    status: Optional[StaffStatus] = Query(None),
    position: Optional[str] = Query(None),
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_staff_read),
):
    return StaffService(db).list_staff(current_user.tenant_id, status=status, position=position)


@router.post("/members", response_model=StaffOut, status_code=201)
async def add_staff(
    staff_data: StaffCreate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_staff_manage),
):
    return StaffService(db).create_staff(current_user.tenant_id, staff_data)


@router.get("/members/{staff_id}", response_model=StaffOut)
async def get_staff(
    staff_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_staff_read),
):
    return StaffService(db).get_staff(current_user.tenant_id, staff_id)


@router.patch("/members/{staff_id}", response_model=StaffOut)
async def update_staff(
    staff_id: int,
    staff_data: StaffUpdate,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_staff_manage),
):
    return StaffService(db).update_staff(current_user.tenant_id, staff_id, staff_data)


@router.post("/members/{staff_id}/deactivate", response_model=StaffOut)
async def deactivate_staff(
    staff_id: int,
    db: Session = Depends(get_db),
    current_user: CurrentUser = Depends(require_staff_manage),
):
    """
    Deactivate a staff member.

    Staff records are never deleted; their salary and attendance history
    stays attached to them.
    """
    return StaffService(db).deactivate_staff(current_user.tenant_id, staff_id)
