from __future__ import annotations

from dataclasses import dataclass
from datetime import date, time
from decimal import Decimal
from typing import Optional, Union

from ..common.datetime_utils import format_wall_clock
from ..core.enums import AttendanceStatus

# Validated values are datetime.time; unreadable legacy column text stays a str.
WallClock = Union[time, str, None]


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one employee-day, unique per (tenant_id, employee_id, work_date)."""

    attendance_id: int
    tenant_id: int
    employee_id: int
    work_date: date
    status: AttendanceStatus
    check_in_time: WallClock = None
    check_out_time: WallClock = None
    work_hours: Optional[Decimal] = None
    productivity_rating: Optional[int] = None
    location: Optional[str] = None
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "date": self.work_date.strftime("%Y-%m-%d"),
            "status": self.status.value,
            "checkInTime": format_wall_clock(self.check_in_time),
            "checkOutTime": format_wall_clock(self.check_out_time),
            "workHours": float(self.work_hours) if self.work_hours is not None else None,
            "productivityRating": self.productivity_rating,
            "location": self.location,
            "notes": self.notes,
        }
