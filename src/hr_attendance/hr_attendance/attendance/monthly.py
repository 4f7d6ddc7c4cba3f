"""Monthly aggregation.

One pass over every day of the month per employee produces both the
counters and the calendar grid, so the summary can never disagree with the
grid. Weekend and holiday days are outside the attendance denominator.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from ..common.datetime_utils import format_year_month, iter_days, month_bounds, parse_year_month
from ..common.validators import branch_filter
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..holidays.model import HolidayLookup
from ..holidays.service import HolidayService
from ..settings.model import AttendanceRules, TenantAttendanceConfig
from ..settings.service import SettingsService
from .cache import MonthlyCalendarCache
from .classifier import classify
from .model import AttendanceRecord
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)

_ONE_PLACE = Decimal("0.1")


@dataclass(frozen=True)
class CalendarDay:
    day: int
    date: date
    status: AttendanceStatus

    @property
    def day_of_week(self) -> str:
        return self.date.strftime("%A")

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "date": self.date.strftime("%Y-%m-%d"),
            "status": self.status.value,
            "dayOfWeek": self.day_of_week,
        }


@dataclass(frozen=True)
class MonthTally:
    """Counters and calendar grid of one employee-month."""

    year_month: str
    present_days: int
    late_days: int
    absent_days: int
    weekend_days: int
    holiday_days: int
    total_worked_hours: Decimal
    days: Tuple[CalendarDay, ...]

    @property
    def days_in_month(self) -> int:
        return len(self.days)

    @property
    def attended_days(self) -> int:
        return self.present_days + self.late_days

    @property
    def working_days(self) -> int:
        return self.present_days + self.late_days + self.absent_days

    @property
    def attendance_percentage(self) -> int:
        if self.working_days == 0:
            return 0
        pct = Decimal(self.attended_days) * 100 / Decimal(self.working_days)
        return int(pct.quantize(Decimal("1"), rounding=ROUND_HALF_UP))

    @property
    def avg_hours(self) -> Decimal:
        return (self.total_worked_hours / max(1, self.attended_days)).quantize(_ONE_PLACE, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class EmployeeMonth:
    employee: Employee
    tally: MonthTally

    def to_summary_dict(self) -> dict:
        t = self.tally
        return {
            "employeeId": self.employee.employee_code,
            "employeeName": self.employee.full_name,
            "department": self.employee.department,
            "branch": self.employee.branch_name,
            "month": t.year_month,
            "totalDays": t.working_days,
            "presentDays": t.present_days,
            "absentDays": t.absent_days,
            "lateDays": t.late_days,
            "weekendDays": t.weekend_days,
            "holidayDays": t.holiday_days,
            "attendancePercentage": t.attendance_percentage,
            "totalWorkedHours": float(t.total_worked_hours),
            "avgHours": float(t.avg_hours),
        }

    def to_calendar_dict(self) -> dict:
        return {
            "employeeId": self.employee.employee_code,
            "employeeName": self.employee.full_name,
            "month": self.tally.year_month,
            "days": [d.to_dict() for d in self.tally.days],
        }


@dataclass(frozen=True)
class MonthlyView:
    per_employee: List[EmployeeMonth]
    include_weekends: bool


def tally_month(
    *,
    year: int,
    month: int,
    records_by_date: Mapping[date, AttendanceRecord],
    holidays: HolidayLookup,
    branch_id: Optional[int],
    config: TenantAttendanceConfig,
) -> MonthTally:
    counts: Dict[AttendanceStatus, int] = {s: 0 for s in AttendanceStatus}
    total_hours = Decimal("0")
    days: List[CalendarDay] = []

    start, end = month_bounds(year, month)
    for d in iter_days(start, end):
        record = records_by_date.get(d)
        status = classify(d, record, holidays.for_date(d, branch_id), config)
        counts[status] += 1
        if status.is_attended and record is not None and record.work_hours is not None:
            total_hours += Decimal(record.work_hours)
        days.append(CalendarDay(day=d.day, date=d, status=status))

    return MonthTally(
        year_month=format_year_month(year, month),
        present_days=counts[AttendanceStatus.PRESENT],
        late_days=counts[AttendanceStatus.LATE],
        absent_days=counts[AttendanceStatus.ABSENT],
        weekend_days=counts[AttendanceStatus.WEEKEND],
        holiday_days=counts[AttendanceStatus.HOLIDAY],
        total_worked_hours=total_hours,
        days=tuple(days),
    )


class MonthlyAggregator:
    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        holidays: HolidayService,
        settings: SettingsService,
        *,
        cache: Optional[MonthlyCalendarCache] = None,
    ):
        self._employees = employees
        self._attendance = attendance
        self._holidays = holidays
        self._settings = settings
        self._cache = cache

    def build_monthly(
        self,
        *,
        tenant_id: int,
        year_month: str,
        employee_code: Optional[str] = None,
        branch: Optional[str] = None,
        department: Optional[str] = None,
    ) -> MonthlyView:
        year, month = parse_year_month(year_month)
        generation = self._generation(tenant_id)
        employees = self._employees.list_for_tenant(
            tenant_id=tenant_id,
            branch=branch_filter(branch),
            department=department or None,
            employee_code=employee_code or None,
        )
        rules = self._settings.rules(tenant_id)
        results = self._tally_employees(
            tenant_id=tenant_id, year=year, month=month, employees=employees, rules=rules, generation=generation
        )
        return MonthlyView(per_employee=results, include_weekends=rules.default.include_weekends)

    def build_calendar(self, *, tenant_id: int, employee_code: str, year_month: str) -> EmployeeMonth:
        year, month = parse_year_month(year_month)
        generation = self._generation(tenant_id)
        employee = self._employees.get_by_code(employee_code=employee_code, tenant_id=tenant_id)
        if employee is None:
            raise NotFoundError("Employee not found")
        rules = self._settings.rules(tenant_id)
        months = self._tally_employees(
            tenant_id=tenant_id, year=year, month=month, employees=[employee], rules=rules, generation=generation
        )
        return months[0]

    def _generation(self, tenant_id: int) -> Optional[int]:
        # Taken before any storage read so a concurrent write keeps its result out of the cache.
        return self._cache.generation(tenant_id) if self._cache is not None else None

    def _tally_employees(
        self,
        *,
        tenant_id: int,
        year: int,
        month: int,
        employees: Sequence[Employee],
        rules: AttendanceRules,
        generation: Optional[int] = None,
    ) -> List[EmployeeMonth]:
        ym = format_year_month(year, month)
        cached: Dict[int, MonthTally] = {}
        missing: List[Employee] = []
        for e in employees:
            hit = self._cache.get(self._cache.key(e.employee_id, tenant_id, ym)) if self._cache else None
            if hit is not None:
                cached[e.employee_id] = hit
            else:
                missing.append(e)

        if missing:
            # Holidays and records are read once for the whole call.
            start, end = month_bounds(year, month)
            holidays = self._holidays.lookup_for_range(tenant_id=tenant_id, start=start, end=end)
            records = self._attendance.list_for_range(
                tenant_id=tenant_id, start=start, end=end, employee_ids=[e.employee_id for e in missing]
            )
            by_employee: Dict[int, Dict[date, AttendanceRecord]] = {}
            for r in records:
                by_employee.setdefault(r.employee_id, {})[r.work_date] = r

            for e in missing:
                tally = tally_month(
                    year=year,
                    month=month,
                    records_by_date=by_employee.get(e.employee_id, {}),
                    holidays=holidays,
                    branch_id=e.branch_id,
                    config=rules.for_branch(e.branch_id),
                )
                cached[e.employee_id] = tally
                if self._cache is not None:
                    self._cache.put(
                        self._cache.key(e.employee_id, tenant_id, ym), tally, branch_id=e.branch_id, generation=generation
                    )

        logger.debug("monthly tally tenant=%s month=%s employees=%d computed=%d", tenant_id, ym, len(employees), len(missing))
        return [EmployeeMonth(employee=e, tally=cached[e.employee_id]) for e in employees]
