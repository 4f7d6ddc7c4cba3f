from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Role carried in the session, used for authorization."""

    ADMIN = "admin"
    EMPLOYEE = "employee"


class AttendanceStatus(str, Enum):
    """Classified status of one employee-day."""

    PRESENT = "present"
    LATE = "late"
    ABSENT = "absent"
    WEEKEND = "weekend"
    HOLIDAY = "holiday"

    @property
    def is_working_day(self) -> bool:
        return self in {AttendanceStatus.PRESENT, AttendanceStatus.LATE, AttendanceStatus.ABSENT}

    @property
    def is_attended(self) -> bool:
        return self in {AttendanceStatus.PRESENT, AttendanceStatus.LATE}
