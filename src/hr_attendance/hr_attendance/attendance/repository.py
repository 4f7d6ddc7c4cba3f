from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Optional, Protocol, Sequence

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def get_for_employee_and_date(
        self, *, tenant_id: int, employee_id: int, work_date: date
    ) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def list_for_range(
        self,
        *,
        tenant_id: int,
        start: date,
        end: date,
        employee_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[AttendanceRecord]:
        raise NotImplementedError

    def create_checkin(
        self,
        *,
        tenant_id: int,
        employee_id: int,
        work_date: date,
        check_in_time: time,
        status: AttendanceStatus,
        location: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        raise NotImplementedError

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: time,
        work_hours: Decimal,
        notes: Optional[str] = None,
    ) -> bool:
        raise NotImplementedError

    def update_productivity(self, *, attendance_id: int, rating: int) -> bool:
        raise NotImplementedError

    def upsert_manual(
        self,
        *,
        tenant_id: int,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
        check_in_time: time,
        check_out_time: time,
        work_hours: Decimal,
        notes: Optional[str] = None,
    ) -> int:
        """Admin correction keyed by (tenant_id, employee_id, work_date).

        Concurrent writers coalesce: the last write wins.
        """

        raise NotImplementedError
