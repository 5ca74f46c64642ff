from sqlalchemy import Column, Integer, String, Date, Enum, Numeric, CheckConstraint
from sqlalchemy.orm import relationship
from core.database import Base
from core.mixins import TimestampMixin, TenantMixin
from ..enums.staff_enums import StaffStatus


class StaffMember(Base, TenantMixin, TimestampMixin):
    """Staff contract: position and fixed monthly salary. Never deleted."""

    __tablename__ = "staff_members"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(200))
    phone = Column(String(50))
    position = Column(String(100), nullable=False, index=True)
    fixed_salary = Column(Numeric(12, 2), nullable=False, default=0)
    status = Column(
        Enum(StaffStatus, values_callable=lambda obj: [e.value for e in obj]),
        default=StaffStatus.ACTIVE,
        nullable=False,
    )
    start_date = Column(Date)

    attendance_records = relationship("AttendanceRecord", back_populates="staff_member")

    __table_args__ = (
        CheckConstraint("fixed_salary >= 0", name="ck_staff_fixed_salary_non_negative"),
    )

    @property
    def is_active(self) -> bool:
        return self.status == StaffStatus.ACTIVE
