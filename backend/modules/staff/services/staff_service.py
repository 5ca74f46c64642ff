# backend/modules/staff/services/staff_service.py

"""
Staff contract management.

Staff members are never physically deleted; deactivation flips their
status so historical salary and attendance records keep their owner.
"""

import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from core.exceptions import NotFoundError, ValidationError
from ..enums.staff_enums import StaffStatus
from ..models.staff_models import StaffMember
from ..schemas.staff_schemas import StaffCreate, StaffUpdate

logger = logging.getLogger(__name__)


class StaffService:
    def __init__(self, db: Session):
        self.db = db

    def create_staff(self, tenant_id: int, data: StaffCreate) -> StaffMember:
        staff = StaffMember(
            tenant_id=tenant_id,
            status=StaffStatus.ACTIVE,
            **data.model_dump(),
        )
        self.db.add(staff)
        self.db.commit()
        self.db.refresh(staff)
        logger.info(f"Created staff member {staff.id} ({staff.position}) in tenant {tenant_id}")
        return staff

    def get_staff(self, tenant_id: int, staff_id: int) -> StaffMember:
        staff = (
            self.db.query(StaffMember)
            .filter(StaffMember.tenant_id == tenant_id, StaffMember.id == staff_id)
            .first()
        )
        if not staff:
            raise NotFoundError(
                f"Staff member with ID {staff_id} not found", error_code="STAFF_NOT_FOUND"
            )
        return staff

    def list_staff(
        self,
        tenant_id: int,
        status: Optional[StaffStatus] = None,
        position: Optional[str] = None,
    ) -> List[StaffMember]:
        query = self.db.query(StaffMember).filter(StaffMember.tenant_id == tenant_id)
        if status is not None:
            query = query.filter(StaffMember.status == status)
        if position is not None:
            query = query.filter(StaffMember.position == position)
        return query.order_by(StaffMember.name).all()

    def update_staff(self, tenant_id: int, staff_id: int, data: StaffUpdate) -> StaffMember:
        staff = self.get_staff(tenant_id, staff_id)
        changes = data.model_dump(exclude_unset=True)

        if changes.get("fixed_salary") is not None and changes["fixed_salary"] < 0:
            raise ValidationError("fixed_salary must be non-negative")
        for field in ("name", "position", "fixed_salary"):
            if field in changes and changes[field] is None:
                raise ValidationError(f"{field} cannot be cleared")

        for field, value in changes.items():
            setattr(staff, field, value)

        self.db.commit()
        self.db.refresh(staff)
        logger.info(f"Updated staff member {staff_id} in tenant {tenant_id}: {sorted(changes)}")
        return staff

    def deactivate_staff(self, tenant_id: int, staff_id: int) -> StaffMember:
        staff = self.get_staff(tenant_id, staff_id)
        if staff.status != StaffStatus.INACTIVE:
            staff.status = StaffStatus.INACTIVE
            self.db.commit()
            self.db.refresh(staff)
            logger.info(f"Deactivated staff member {staff_id} in tenant {tenant_id}")
        return staff
