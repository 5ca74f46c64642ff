from .staff_models import StaffMember
from .attendance_models import AttendanceRecord, TemporaryExit

__all__ = [
    "StaffMember",
    "AttendanceRecord",
    "TemporaryExit",
]
