from __future__ import annotations

import logging
from datetime import date, datetime, time, timedelta
from typing import Any, List, Optional

from ..common.datetime_utils import format_year_month, iter_days, now_local
from ..common.validators import optional_text, require_int_range
from ..core.constants import DEFAULT_DETAIL_DAYS, DEFAULT_HISTORY_DAYS, MAX_LOOKBACK_DAYS
from ..core.enums import AttendanceStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..holidays.service import HolidayService
from ..settings.service import SettingsService
from .cache import MonthlyCalendarCache
from .classifier import check_in_status, classify
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .work_hours import StandardWorkHoursCalculator

logger = logging.getLogger(__name__)


class AttendanceService:
    """Employee self-service (check-in/out, rating, history) and the admin detail view."""

    def __init__(
        self,
        employees: EmployeeRepository,
        attendance: AttendanceRepository,
        holidays: HolidayService,
        settings: SettingsService,
        *,
        cache: Optional[MonthlyCalendarCache] = None,
        calculator: Optional[StandardWorkHoursCalculator] = None,
    ):
        self._employees = employees
        self._attendance = attendance
        self._holidays = holidays
        self._settings = settings
        self._cache = cache
        self._calculator = calculator or StandardWorkHoursCalculator()

    def _is_holiday(self, employee: Employee, d: date) -> bool:
        lookup = self._holidays.lookup_for_range(tenant_id=employee.tenant_id, start=d, end=d)
        return lookup.for_date(d, employee.branch_id) is not None

    def _get(self, employee: Employee, d: date) -> Optional[AttendanceRecord]:
        return self._attendance.get_for_employee_and_date(
            tenant_id=employee.tenant_id, employee_id=employee.employee_id, work_date=d
        )

    def _touch(self, employee: Employee, d: date) -> None:
        if self._cache is not None:
            self._cache.invalidate(
                self._cache.key(employee.employee_id, employee.tenant_id, format_year_month(d.year, d.month))
            )

    @staticmethod
    def _wall_clock(now: datetime) -> time:
        return now.time().replace(second=0, microsecond=0)

    def check_in(
        self,
        employee: Employee,
        *,
        now: Optional[datetime] = None,
        location: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()
        location = optional_text(location, "location")
        notes = optional_text(notes, "notes")

        if self._is_holiday(employee, today):
            raise ValidationError("Check-in is not allowed on a holiday.")

        existing = self._get(employee, today)
        if existing and existing.check_in_time is not None:
            raise ValidationError("Already checked in today")

        config = self._settings.get(employee.tenant_id, employee.branch_id)
        check_in = self._wall_clock(now)
        status = check_in_status(check_in, config)

        if existing:
            # A record without check-in only exists after a correction; rewrite it.
            self._attendance.upsert_manual(
                tenant_id=employee.tenant_id,
                employee_id=employee.employee_id,
                work_date=today,
                status=status,
                check_in_time=check_in,
                check_out_time=None,
                work_hours=None,
                notes=notes or existing.notes,
            )
        else:
            self._attendance.create_checkin(
                tenant_id=employee.tenant_id,
                employee_id=employee.employee_id,
                work_date=today,
                check_in_time=check_in,
                status=status,
                location=location,
                notes=notes,
            )
        self._touch(employee, today)
        logger.info("check-in employee=%s date=%s status=%s", employee.employee_code, today, status.value)
        return self._saved(employee, today)

    def check_out(self, employee: Employee, *, now: Optional[datetime] = None, notes: Optional[str] = None) -> AttendanceRecord:
        now = now or now_local()
        today = now.date()
        extra = optional_text(notes, "notes") or ""

        if self._is_holiday(employee, today):
            raise ValidationError("Check-out is not allowed on a holiday.")

        record = self._get(employee, today)
        if not record or record.check_in_time is None:
            raise ValidationError("Must check in before checking out")
        if record.check_out_time is not None:
            raise ValidationError("Already checked out today")
        if not isinstance(record.check_in_time, time):
            raise ValidationError("Stored check-in time is unreadable; ask an administrator to correct it")

        check_out = self._wall_clock(now)
        merged = f"{record.notes} | {extra}" if record.notes and extra else (extra or record.notes)

        self._attendance.update_checkout(
            attendance_id=record.attendance_id,
            check_out_time=check_out,
            work_hours=self._calculator.worked_hours(record.check_in_time, check_out),
            notes=merged,
        )
        self._touch(employee, today)
        logger.info("check-out employee=%s date=%s", employee.employee_code, today)
        return self._saved(employee, today)

    def rate_productivity(self, employee: Employee, rating: Any, *, today: Optional[date] = None) -> AttendanceRecord:
        rating = require_int_range(rating, "rating", low=0, high=100)
        today = today or now_local().date()

        if self._is_holiday(employee, today):
            raise ValidationError("Productivity rating cannot be submitted on a holiday.")

        record = self._get(employee, today)
        if not record:
            raise ValidationError("Please mark your attendance before submitting the rating.")

        self._attendance.update_productivity(attendance_id=record.attendance_id, rating=rating)
        return self._saved(employee, today)

    def today(self, employee: Employee, *, today: Optional[date] = None) -> dict:
        today = today or now_local().date()
        record = self._get(employee, today)
        holiday = self._holidays.lookup_for_range(tenant_id=employee.tenant_id, start=today, end=today).for_date(
            today, employee.branch_id
        )
        status = classify(today, record, holiday, self._settings.get(employee.tenant_id, employee.branch_id))
        out = record.to_dict() if record else {"date": today.strftime("%Y-%m-%d")}
        out.update({"status": status.value, "isHoliday": holiday is not None, "holidayName": holiday.name if holiday else None})
        return out

    def history(self, employee: Employee, *, days: Any = None, today: Optional[date] = None) -> List[dict]:
        """The ``days`` days before today, newest first, each classified."""

        days = DEFAULT_HISTORY_DAYS if days in (None, "") else require_int_range(days, "days", low=1, high=MAX_LOOKBACK_DAYS)
        today = today or now_local().date()
        start, end = today - timedelta(days=days), today - timedelta(days=1)

        config = self._settings.get(employee.tenant_id, employee.branch_id)
        holidays = self._holidays.lookup_for_range(tenant_id=employee.tenant_id, start=start, end=end)
        records = {
            r.work_date: r
            for r in self._attendance.list_for_range(
                tenant_id=employee.tenant_id, start=start, end=end, employee_ids=[employee.employee_id]
            )
        }

        out: List[dict] = []
        for d in reversed(list(iter_days(start, end))):
            record = records.get(d)
            status = classify(d, record, holidays.for_date(d, employee.branch_id), config)
            row = record.to_dict() if record and status != AttendanceStatus.HOLIDAY else {
                "date": d.strftime("%Y-%m-%d"),
                "checkInTime": None,
                "checkOutTime": None,
                "workHours": 0,
            }
            row["status"] = status.value
            out.append(row)
        return out

    def employee_details(
        self, *, tenant_id: int, employee_code: str, days: Any = None, today: Optional[date] = None
    ) -> dict:
        days = DEFAULT_DETAIL_DAYS if days in (None, "") else require_int_range(days, "days", low=1, high=MAX_LOOKBACK_DAYS)
        employee = self._employees.get_by_code(employee_code=employee_code, tenant_id=tenant_id)
        if employee is None:
            raise NotFoundError("Employee not found")

        today = today or now_local().date()
        records = self._attendance.list_for_range(
            tenant_id=tenant_id, start=today - timedelta(days=days), end=today, employee_ids=[employee.employee_id]
        )
        records = sorted(records, key=lambda r: r.work_date, reverse=True)
        return {
            "employee": {
                "employeeId": employee.employee_code,
                "fullName": employee.full_name,
                "department": employee.department,
                "branch": employee.branch_name,
            },
            "attendances": [r.to_dict() for r in records],
        }

    def _saved(self, employee: Employee, d: date) -> AttendanceRecord:
        record = self._get(employee, d)
        if record is None:
            raise NotFoundError("Attendance record not found")
        return record
