# backend/modules/payroll/models/payroll_models.py

from sqlalchemy import (
    Column,
    Integer,
    String,
    Numeric,
    Boolean,
    Date,
    DateTime,
    ForeignKey,
    Enum,
    Text,
    CheckConstraint,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from core.database import Base
from core.mixins import TimestampMixin, TenantMixin
from ..enums.payroll_enums import AdvanceStatus, SalaryRecordStatus


class SalaryRecord(Base, TenantMixin, TimestampMixin):
    """
    Computed salary for one staff member and month.

    Stores every intermediate quantity of the computation so the full
    breakdown can be shown verbatim. Created unpaid; marking it paid is
    the only transition and it is final.
    """
    __tablename__ = "salary_records"

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff_members.id"), nullable=False, index=True)
    month = Column(Integer, nullable=False)
    year = Column(Integer, nullable=False)

    # Contract and attendance snapshot
    fixed_salary = Column(Numeric(12, 2), nullable=False)
    target_hours = Column(Integer, nullable=False)
    total_working_hours = Column(Numeric(8, 2), nullable=False, default=0)
    regular_hours = Column(Numeric(8, 2), nullable=False, default=0)
    hourly_rate = Column(Numeric(14, 6), nullable=False)
    base_salary = Column(Numeric(12, 2), nullable=False)

    # Overtime and extra days
    ot_hours = Column(Numeric(8, 2), nullable=False, default=0)
    ot_rate = Column(Numeric(10, 2), nullable=False, default=0)
    ot_amount = Column(Numeric(12, 2), nullable=False, default=0)
    extra_days = Column(Integer, nullable=False, default=0)
    extra_day_rate = Column(Numeric(10, 2), nullable=False, default=0)
    extra_day_pay = Column(Numeric(12, 2), nullable=False, default=0)

    # Adjustments
    addition = Column(Numeric(12, 2), nullable=False, default=0)
    deduction = Column(Numeric(12, 2), nullable=False, default=0)
    advance_deducted = Column(Numeric(12, 2), nullable=False, default=0)

    # Totals
    total_earnings = Column(Numeric(12, 2), nullable=False)
    total_deductions = Column(Numeric(12, 2), nullable=False)
    net_salary = Column(Numeric(12, 2), nullable=False)

    # Payment
    is_paid = Column(Boolean, nullable=False, default=False)
    paid_date = Column(Date, nullable=True)
    processed_by = Column(Integer, nullable=True)
    paid_by = Column(Integer, nullable=True)

    staff_member = relationship("StaffMember")

    __table_args__ = (
        UniqueConstraint("tenant_id", "staff_id", "month", "year", name="uq_salary_record_period"),
        CheckConstraint("month >= 1 AND month <= 12", name="ck_salary_record_month"),
        {"comment": "Monthly salary computations"},
    )

    @property
    def status(self) -> SalaryRecordStatus:
        return SalaryRecordStatus.PAID if self.is_paid else SalaryRecordStatus.PROCESSED


class AdvancePayment(Base, TenantMixin, TimestampMixin):
    """Cash advance request. Decided once, then immutable."""
    __tablename__ = "advance_payments"

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff_members.id"), nullable=False, index=True)
    amount = Column(Numeric(12, 2), nullable=False)
    reason = Column(Text, nullable=False)
    repayment_plan = Column(String(200), nullable=False)
    status = Column(
        Enum(AdvanceStatus, values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=AdvanceStatus.PENDING,
        index=True,
    )
    request_date = Column(DateTime, nullable=False)
    approved_date = Column(DateTime, nullable=True, index=True)
    requested_by = Column(Integer, nullable=True)
    decided_by = Column(Integer, nullable=True)

    staff_member = relationship("StaffMember")

    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_advance_amount_positive"),
        {"comment": "Staff cash advances"},
    )
