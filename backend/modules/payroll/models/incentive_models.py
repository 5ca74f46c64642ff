# backend/modules/payroll/models/incentive_models.py

from sqlalchemy import (
    Column,
    Integer,
    Numeric,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Enum,
    Text,
    CheckConstraint,
)
from sqlalchemy.orm import relationship
from core.database import Base
from core.mixins import TimestampMixin, TenantMixin
from ..enums.payroll_enums import IncentiveApplyOn, IncentiveRuleType, PayoutStatus


class IncentiveRule(Base, TenantMixin, TimestampMixin):
    """
    One version of an incentive rule.

    Rules are never edited in place: a new row supersedes older rows of the
    same type from ``effective_from`` on, so historical sales keep being
    evaluated against the rule that applied when they were recorded.
    """
    __tablename__ = "incentive_rules"

    id = Column(Integer, primary_key=True, index=True)
    rule_type = Column(
        Enum(IncentiveRuleType, values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        index=True,
    )
    effective_from = Column(DateTime, nullable=False, index=True)

    # Target: salary multiplier (daily, monthly) or fixed value (package, gift card)
    target_multiplier = Column(Numeric(8, 4), nullable=True)
    target_value = Column(Numeric(12, 2), nullable=True)

    include_service_sale = Column(Boolean, nullable=False, default=True)
    include_product_sale = Column(Boolean, nullable=False, default=False)
    review_name_value = Column(Numeric(10, 2), nullable=False, default=0)
    review_photo_value = Column(Numeric(10, 2), nullable=False, default=0)

    rate = Column(Numeric(6, 4), nullable=False)
    double_rate = Column(Numeric(6, 4), nullable=False)
    apply_on = Column(
        Enum(IncentiveApplyOn, values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=IncentiveApplyOn.TOTAL_SALE_VALUE,
    )

    __table_args__ = (
        CheckConstraint("rate >= 0 AND double_rate >= 0", name="ck_incentive_rates_non_negative"),
        {"comment": "Versioned incentive rules"},
    )


class DailySale(Base, TenantMixin, TimestampMixin):
    """Sales attributed to one staff member on one day."""
    __tablename__ = "daily_sales"

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff_members.id"), nullable=False, index=True)
    sale_date = Column(Date, nullable=False, index=True)
    recorded_at = Column(DateTime, nullable=False)
    service_sale = Column(Numeric(12, 2), nullable=False, default=0)
    product_sale = Column(Numeric(12, 2), nullable=False, default=0)
    package_sale = Column(Numeric(12, 2), nullable=False, default=0)
    gift_card_sale = Column(Numeric(12, 2), nullable=False, default=0)
    reviews_with_name = Column(Integer, nullable=False, default=0)
    reviews_with_photo = Column(Integer, nullable=False, default=0)

    staff_member = relationship("StaffMember")


class IncentivePayout(Base, TenantMixin, TimestampMixin):
    """A claim against a staff member's earned incentive balance."""
    __tablename__ = "incentive_payouts"

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff_members.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    reason = Column(Text, nullable=False)
    status = Column(
        Enum(PayoutStatus, values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=PayoutStatus.PENDING,
        index=True,
    )
    processed_date = Column(DateTime, nullable=True)
    requested_by = Column(Integer, nullable=True)
    decided_by = Column(Integer, nullable=True)

    staff_member = relationship("StaffMember")

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_payout_amount_positive"),
        {"comment": "Incentive payout claims"},
    )
