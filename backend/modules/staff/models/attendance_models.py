from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    Date,
    DateTime,
    Boolean,
    Enum,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from core.database import Base
from core.mixins import TimestampMixin, TenantMixin
from ..enums.attendance_enums import AttendanceStatus


class AttendanceRecord(Base, TenantMixin, TimestampMixin):
    """One day of attendance for one staff member."""

    __tablename__ = "attendance_records"

    id = Column(Integer, primary_key=True, index=True)
    staff_id = Column(Integer, ForeignKey("staff_members.id"), nullable=False, index=True)
    work_date = Column(Date, nullable=False, index=True)
    check_in = Column(DateTime)
    check_out = Column(DateTime)
    required_minutes = Column(Integer)
    total_working_minutes = Column(Integer, nullable=False, default=0)
    overtime_minutes = Column(Integer, nullable=False, default=0)
    is_work_complete = Column(Boolean, nullable=False, default=False)
    status = Column(
        Enum(AttendanceStatus, values_callable=lambda obj: [e.value for e in obj]),
        nullable=False,
        default=AttendanceStatus.INCOMPLETE,
    )

    staff_member = relationship("StaffMember", back_populates="attendance_records")
    temporary_exits = relationship(
        "TemporaryExit",
        back_populates="attendance",
        order_by="TemporaryExit.start_time",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint("tenant_id", "staff_id", "work_date", name="uq_attendance_staff_day"),
    )

    @property
    def has_open_exit(self) -> bool:
        return any(e.end_time is None for e in self.temporary_exits)


class TemporaryExit(Base, TenantMixin, TimestampMixin):
    """A stretch of time inside a shift that does not count as worked."""

    __tablename__ = "attendance_temporary_exits"

    id = Column(Integer, primary_key=True, index=True)
    attendance_id = Column(
        Integer, ForeignKey("attendance_records.id"), nullable=False, index=True
    )
    reason = Column(String(500), nullable=False)
    start_time = Column(DateTime, nullable=False)
    end_time = Column(DateTime)
    duration_minutes = Column(Integer, nullable=False, default=0)

    attendance = relationship("AttendanceRecord", back_populates="temporary_exits")
