# backend/modules/payroll/services/incentive_service.py

"""
Incentive rule versions and daily sales capture.
"""

import logging
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy.orm import Session

from modules.staff.services.staff_service import StaffService
from ..enums.payroll_enums import IncentiveRuleType
from ..models.incentive_models import DailySale, IncentiveRule
from ..schemas.incentive_schemas import DailySaleCreate, IncentiveRuleCreate

logger = logging.getLogger(__name__)


class IncentiveService:
    def __init__(self, db: Session):
        self.db = db

    def create_rule(
        self, tenant_id: int, data: IncentiveRuleCreate, now: Optional[datetime] = None
    ) -> IncentiveRule:
        """Add a rule version; it supersedes older versions of its type from ``now``."""
        rule = IncentiveRule(
            tenant_id=tenant_id,
            effective_from=now or datetime.utcnow(),
            **data.model_dump(),
        )
        self.db.add(rule)
        self.db.commit()
        self.db.refresh(rule)
        logger.info(f"Incentive rule {rule.id} ({rule.rule_type.value}) added in tenant {tenant_id}")
        return rule

    def list_rules(
        self, tenant_id: int, rule_type: Optional[IncentiveRuleType] = None
    ) -> List[IncentiveRule]:
        query = self.db.query(IncentiveRule).filter(IncentiveRule.tenant_id == tenant_id)
        if rule_type is not None:
            query = query.filter(IncentiveRule.rule_type == rule_type)
        return query.order_by(IncentiveRule.effective_from.desc()).all()

    def record_daily_sale(
        self, tenant_id: int, data: DailySaleCreate, now: Optional[datetime] = None
    ) -> DailySale:
        StaffService(self.db).get_staff(tenant_id, data.staff_id)
        sale = DailySale(
            tenant_id=tenant_id,
            recorded_at=now or datetime.utcnow(),
            **data.model_dump(),
        )
        self.db.add(sale)
        self.db.commit()
        self.db.refresh(sale)
        return sale

    def list_sales(
        self,
        tenant_id: int,
        staff_id: int,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[DailySale]:
        query = self.db.query(DailySale).filter(
            DailySale.tenant_id == tenant_id, DailySale.staff_id == staff_id
        )
        if start is not None:
            query = query.filter(DailySale.sale_date >= start)
        if end is not None:
            query = query.filter(DailySale.sale_date <= end)
        return query.order_by(DailySale.sale_date, DailySale.recorded_at).all()
