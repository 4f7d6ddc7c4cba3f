from __future__ import annotations

import calendar
import logging
from datetime import date
from typing import Any, List, Optional

from ..attendance.cache import MonthlyCalendarCache
from ..common.datetime_utils import format_year_month, month_bounds, parse_iso_date
from ..common.validators import optional_int, optional_text, require_max_length, require_non_empty
from ..core.constants import MAX_HOLIDAY_DESCRIPTION_LENGTH, MAX_HOLIDAY_NAME_LENGTH
from ..core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import Holiday, HolidayLookup
from .repository import HolidayRepository

logger = logging.getLogger(__name__)


class HolidayService:
    """Tenant/branch holiday calendar."""

    def __init__(
        self,
        holidays: HolidayRepository,
        employees: EmployeeRepository,
        *,
        cache: Optional[MonthlyCalendarCache] = None,
    ):
        self._holidays = holidays
        self._employees = employees
        self._cache = cache

    def create(
        self,
        admin: Employee,
        *,
        holiday_date: str,
        name: str,
        description: Optional[str] = None,
        branch_id: Any = None,
    ) -> Holiday:
        d = parse_iso_date(holiday_date)
        name = require_non_empty(optional_text(name, "name"), "name")
        require_max_length(name, "name", MAX_HOLIDAY_NAME_LENGTH)
        description = optional_text(description, "description")
        require_max_length(description, "description", MAX_HOLIDAY_DESCRIPTION_LENGTH)
        branch_id = optional_int(branch_id, "branchId")

        tenant_id = admin.tenant_id
        if branch_id is not None and not self._employees.get_branch(tenant_id=tenant_id, branch_id=branch_id):
            raise NotFoundError("Branch not found")

        if self._holidays.find_for_scope(tenant_id=tenant_id, branch_id=branch_id, holiday_date=d):
            raise ConflictError(f"A holiday is already declared on {d.isoformat()} for this scope")

        holiday_id = self._holidays.create(
            tenant_id=tenant_id,
            branch_id=branch_id,
            holiday_date=d,
            name=name,
            description=description,
            created_by=admin.employee_id,
        )
        self._invalidate(tenant_id, d, branch_id)
        logger.info("holiday created id=%s tenant=%s branch=%s date=%s", holiday_id, tenant_id, branch_id, d)

        created = self._holidays.get_by_id(holiday_id)
        if created is None:
            raise NotFoundError("Holiday not found")
        return created

    def delete(self, admin: Employee, holiday_id: Any) -> bool:
        """Idempotent: returns False when the holiday is already gone."""

        holiday_id = optional_int(holiday_id, "holidayId")
        if holiday_id is None:
            raise ValidationError("holidayId is required")

        holiday = self._holidays.get_by_id(holiday_id)
        if holiday is None:
            return False
        if holiday.tenant_id != admin.tenant_id:
            raise ForbiddenError("Holiday belongs to another tenant")

        removed = self._holidays.delete(holiday_id)
        self._invalidate(holiday.tenant_id, holiday.holiday_date, holiday.branch_id)
        logger.info("holiday deleted id=%s tenant=%s removed=%s", holiday_id, holiday.tenant_id, removed)
        return removed

    def list_for_month(
        self, *, tenant_id: int, year: Any, month: Any, branch_id: Any = None
    ) -> List[Holiday]:
        """With a branch: tenant-wide plus that branch's holidays; without: all of the tenant's."""

        y = optional_int(year, "year")
        m = optional_int(month, "month")
        if y is None or m is None or not (1 <= m <= 12) or not (1 <= y <= 9999):
            raise ValidationError("year and month are required (month 1-12)")
        branch_id = optional_int(branch_id, "branchId")

        start, end = month_bounds(y, m)
        holidays = self._holidays.list_range(tenant_id=int(tenant_id), start=start, end=end)
        if branch_id is None:
            return list(holidays)
        return [h for h in holidays if h.branch_id is None or h.branch_id == branch_id]

    def calendar(self, *, tenant_id: int, year: Any, month: Any, branch_id: Any = None) -> dict:
        holidays = self.list_for_month(tenant_id=tenant_id, year=year, month=month, branch_id=branch_id)
        y, m = int(year), int(month)
        return {
            "holidays": [h.to_dict() for h in holidays],
            "year": y,
            "month": m,
            "monthName": calendar.month_name[m],
        }

    def lookup_for_range(self, *, tenant_id: int, start: date, end: date) -> HolidayLookup:
        return HolidayLookup.from_holidays(self._holidays.list_range(tenant_id=int(tenant_id), start=start, end=end))

    def _invalidate(self, tenant_id: int, d: date, branch_id: Optional[int]) -> None:
        if self._cache is not None:
            self._cache.invalidate_scope(
                tenant_id=tenant_id, year_month=format_year_month(d.year, d.month), branch_id=branch_id
            )
