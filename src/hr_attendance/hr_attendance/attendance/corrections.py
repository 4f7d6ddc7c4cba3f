from __future__ import annotations

import logging
from datetime import date
from decimal import Decimal
from typing import Any, Optional

from ..common.datetime_utils import format_year_month, now_local, parse_iso_date
from ..common.validators import optional_text, require_decimal, require_non_empty
from ..core.constants import DEFAULT_MANUAL_WORK_HOURS
from ..core.enums import AttendanceStatus
from ..core.exceptions import (
    ForbiddenError,
    FutureDateError,
    InvalidTransitionError,
    NotFoundError,
    ValidationError,
)
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from ..holidays.service import HolidayService
from ..settings.service import SettingsService
from .cache import MonthlyCalendarCache
from .classifier import classify
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .work_hours import MAX_WORK_HOURS, StandardWorkHoursCalculator

logger = logging.getLogger(__name__)


class ManualCorrectionService:
    """Administrator correction: turn a computed ``absent`` day into ``present``.

    Preconditions, checked in order: the date is not in the future, the
    day's recomputed status is absent, the employee is in the admin's tenant.
    """

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

    def mark_present(
        self,
        admin: Employee,
        *,
        employee_code: str,
        work_date: str,
        status: str = AttendanceStatus.PRESENT.value,
        work_hours: Any = None,
        today: Optional[date] = None,
    ) -> AttendanceRecord:
        employee_code = require_non_empty(employee_code, "employeeId")
        d = parse_iso_date(work_date)
        if (optional_text(status, "status") or "").lower() != AttendanceStatus.PRESENT.value:
            raise ValidationError("Only 'present' can be set by a manual mark")

        hours = Decimal(DEFAULT_MANUAL_WORK_HOURS) if work_hours in (None, "") else require_decimal(work_hours, "workHours")
        if hours <= 0 or hours > MAX_WORK_HOURS:
            raise ValidationError(f"workHours must be greater than 0 and at most {MAX_WORK_HOURS}")

        employee = self._employees.get_by_code(employee_code=employee_code, tenant_id=admin.tenant_id)
        if employee is None:
            employee = self._employees.get_by_code(employee_code=employee_code)
        if employee is None:
            raise NotFoundError("Employee not found")

        today = today or now_local().date()
        if d > today:
            raise FutureDateError("Cannot mark attendance for a future date.")

        config = self._settings.rules(employee.tenant_id).for_branch(employee.branch_id)
        holiday = self._holidays.lookup_for_range(tenant_id=employee.tenant_id, start=d, end=d).for_date(
            d, employee.branch_id
        )
        existing = self._attendance.get_for_employee_and_date(
            tenant_id=employee.tenant_id, employee_id=employee.employee_id, work_date=d
        )
        current = classify(d, existing, holiday, config)
        if current != AttendanceStatus.ABSENT:
            raise InvalidTransitionError(
                f"Cannot mark {d.isoformat()} as present: the day is already '{current.value}'"
            )

        if employee.tenant_id != admin.tenant_id:
            raise ForbiddenError("Employee belongs to another tenant")

        check_in = config.standard_check_in
        if not self._calculator.fits_in_day(check_in, hours):
            raise ValidationError(
                f"workHours {hours} from the standard check-in {check_in.strftime('%H:%M')} would run past midnight"
            )

        self._attendance.upsert_manual(
            tenant_id=employee.tenant_id,
            employee_id=employee.employee_id,
            work_date=d,
            status=AttendanceStatus.PRESENT,
            check_in_time=check_in,
            check_out_time=self._calculator.check_out_for(check_in, hours),
            work_hours=hours,
            notes=f"manually marked by {admin.employee_code}",
        )
        if self._cache is not None:
            self._cache.invalidate(
                self._cache.key(employee.employee_id, employee.tenant_id, format_year_month(d.year, d.month))
            )

        logger.info(
            "manual mark tenant=%s employee=%s date=%s hours=%s by=%s",
            employee.tenant_id,
            employee.employee_code,
            d,
            hours,
            admin.employee_code,
        )

        saved = self._attendance.get_for_employee_and_date(
            tenant_id=employee.tenant_id, employee_id=employee.employee_id, work_date=d
        )
        if saved is None:
            raise NotFoundError("Attendance record not found after update")
        return saved
