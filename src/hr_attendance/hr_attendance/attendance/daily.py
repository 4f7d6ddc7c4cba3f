from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Dict, List, Optional, Tuple

from ..common.datetime_utils import format_wall_clock, iter_days
from ..common.validators import branch_filter
from ..core.constants import MAX_LOOKBACK_DAYS
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..holidays.service import HolidayService
from ..settings.service import SettingsService
from .classifier import classify
from .model import AttendanceRecord
from .repository import AttendanceRepository


@dataclass(frozen=True)
class DailyRow:
    employee: Employee
    work_date: date
    status: AttendanceStatus
    record: Optional[AttendanceRecord] = None

    def to_dict(self) -> dict:
        r = self.record
        return {
            "employeeId": self.employee.employee_code,
            "employeeName": self.employee.full_name,
            "department": self.employee.department,
            "branch": self.employee.branch_name,
            "date": self.work_date.strftime("%Y-%m-%d"),
            "status": self.status.value,
            "checkInTime": format_wall_clock(r.check_in_time) if r else None,
            "checkOutTime": format_wall_clock(r.check_out_time) if r else None,
            "workHours": float(r.work_hours) if r and r.work_hours is not None else None,
            "productivityRating": r.productivity_rating if r else None,
            "notes": r.notes if r else None,
        }


@dataclass(frozen=True)
class DailyView:
    work_date: date
    rows: List[DailyRow]

    @property
    def counts(self) -> Dict[str, int]:
        """Summed over the returned rows so counts always match what is shown."""

        counts = {s.value: 0 for s in AttendanceStatus}
        for row in self.rows:
            counts[row.status.value] += 1
        counts["total"] = len(self.rows)
        return counts


class DailyViewBuilder:
    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        holidays: HolidayService,
        settings: SettingsService,
    ):
        self._employees = employees
        self._attendance = attendance
        self._holidays = holidays
        self._settings = settings

    def build_daily(
        self,
        *,
        tenant_id: int,
        work_date: date,
        branch: Optional[str] = None,
        department: Optional[str] = None,
        employee_code: Optional[str] = None,
    ) -> DailyView:
        rows = self._rows(
            tenant_id=tenant_id,
            start=work_date,
            end=work_date,
            branch=branch,
            department=department,
            employee_code=employee_code,
        )
        return DailyView(work_date=work_date, rows=rows)

    def build_range(
        self,
        *,
        tenant_id: int,
        start: date,
        end: date,
        branch: Optional[str] = None,
        department: Optional[str] = None,
        employee_code: Optional[str] = None,
    ) -> List[DailyRow]:
        """One row per employee per day from ``start`` to ``end`` inclusive, by date then employee code."""

        if start > end:
            raise ValidationError("fromDate must not be after toDate")
        if (end - start).days + 1 > MAX_LOOKBACK_DAYS:
            raise ValidationError(f"Date range must not exceed {MAX_LOOKBACK_DAYS} days")
        return self._rows(
            tenant_id=tenant_id,
            start=start,
            end=end,
            branch=branch,
            department=department,
            employee_code=employee_code,
        )

    def _rows(
        self,
        *,
        tenant_id: int,
        start: date,
        end: date,
        branch: Optional[str],
        department: Optional[str],
        employee_code: Optional[str],
    ) -> List[DailyRow]:
        employees = self._employees.list_for_tenant(
            tenant_id=tenant_id,
            branch=branch_filter(branch),
            department=department or None,
            employee_code=employee_code or None,
        )
        employees = sorted(employees, key=lambda x: x.employee_code)
        rules = self._settings.rules(tenant_id)
        holidays = self._holidays.lookup_for_range(tenant_id=tenant_id, start=start, end=end)
        records: Dict[Tuple[int, date], AttendanceRecord] = {
            (r.employee_id, r.work_date): r
            for r in self._attendance.list_for_range(
                tenant_id=tenant_id,
                start=start,
                end=end,
                employee_ids=[e.employee_id for e in employees],
            )
        }

        rows = []
        for d in iter_days(start, end):
            for e in employees:
                record = records.get((e.employee_id, d))
                status = classify(d, record, holidays.for_date(d, e.branch_id), rules.for_branch(e.branch_id))
                rows.append(DailyRow(employee=e, work_date=d, status=status, record=record))
        return rows
