from enum import Enum


class AttendanceStatus(str, Enum):
    PRESENT = "present"
    INCOMPLETE = "incomplete"
    ABSENT = "absent"
    ON_LEAVE = "on_leave"
    WEEK_OFF = "week_off"


# Statuses an operator may record for a day without a check-in
MANUAL_DAY_STATUSES = (
    AttendanceStatus.ABSENT,
    AttendanceStatus.ON_LEAVE,
    AttendanceStatus.WEEK_OFF,
)
