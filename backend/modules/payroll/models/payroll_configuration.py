"""
Payroll configuration models.

Rates and monthly target hours are configured per tenant. Position
overrides and target hours are keyed by the exact position name.
"""

from sqlalchemy import (
    Column, Integer, String, Numeric, CheckConstraint, UniqueConstraint
)
from core.database import Base
from core.mixins import TimestampMixin, TenantMixin


class PayrollRateSettings(Base, TenantMixin, TimestampMixin):
    """Tenant-wide default overtime and extra-day rates."""
    __tablename__ = "payroll_rate_settings"

    id = Column(Integer, primary_key=True, index=True)
    default_ot_rate = Column(Numeric(10, 2), nullable=False, default=0)
    default_extra_day_rate = Column(Numeric(10, 2), nullable=False, default=0)

    __table_args__ = (
        UniqueConstraint("tenant_id", name="uq_payroll_rate_settings_tenant"),
        CheckConstraint("default_ot_rate >= 0", name="ck_default_ot_rate_non_negative"),
        CheckConstraint(
            "default_extra_day_rate >= 0", name="ck_default_extra_day_rate_non_negative"
        ),
        {"comment": "Default overtime and extra-day rates per tenant"},
    )


class PositionRateOverride(Base, TenantMixin, TimestampMixin):
    """Overtime and extra-day rates for one position, replacing the defaults."""
    __tablename__ = "position_rate_overrides"

    id = Column(Integer, primary_key=True, index=True)
    position_name = Column(String(100), nullable=False)
    ot_rate = Column(Numeric(10, 2), nullable=False)
    extra_day_rate = Column(Numeric(10, 2), nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "position_name", name="uq_position_rate_override"),
        CheckConstraint("ot_rate >= 0", name="ck_override_ot_rate_non_negative"),
        CheckConstraint("extra_day_rate >= 0", name="ck_override_extra_day_rate_non_negative"),
        {"comment": "Per-position overtime and extra-day rates"},
    )


class PositionTargetHours(Base, TenantMixin, TimestampMixin):
    """Monthly required hours for a position; the pro-rating denominator."""
    __tablename__ = "position_target_hours"

    id = Column(Integer, primary_key=True, index=True)
    position_name = Column(String(100), nullable=False)
    required_hours = Column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("tenant_id", "position_name", name="uq_position_target_hours"),
        CheckConstraint("required_hours >= 0", name="ck_required_hours_non_negative"),
        {"comment": "Monthly required hours per position"},
    )
