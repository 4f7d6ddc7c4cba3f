from __future__ import annotations

import logging
from dataclasses import replace
from typing import Any, Optional

from ..attendance.cache import MonthlyCalendarCache
from ..common.datetime_utils import parse_wall_clock
from ..common.validators import optional_bool, require_int_range
from ..core.constants import MAX_LATE_THRESHOLD_MINUTES
from ..core.exceptions import NotFoundError
from ..employees.model import Employee
from ..employees.repository import EmployeeRepository
from .model import AttendanceRules, TenantAttendanceConfig
from .repository import SettingsRepository

logger = logging.getLogger(__name__)


class SettingsService:
    """Use cases around the tenant attendance configuration."""

    def __init__(
        self,
        settings: SettingsRepository,
        employees: EmployeeRepository,
        *,
        cache: Optional[MonthlyCalendarCache] = None,
    ):
        self._settings = settings
        self._employees = employees
        self._cache = cache

    def rules(self, tenant_id: int) -> AttendanceRules:
        return AttendanceRules.from_configs(int(tenant_id), self._settings.list_for_tenant(int(tenant_id)))

    def get(self, tenant_id: int, branch_id: Optional[int] = None) -> TenantAttendanceConfig:
        return self.rules(tenant_id).for_branch(branch_id)

    def update(
        self,
        admin: Employee,
        *,
        branch_id: Optional[int] = None,
        include_weekends: Any = None,
        standard_check_in: Optional[str] = None,
        late_threshold_minutes: Any = None,
    ) -> TenantAttendanceConfig:
        tenant_id = admin.tenant_id
        if branch_id is not None and not self._employees.get_branch(tenant_id=tenant_id, branch_id=int(branch_id)):
            raise NotFoundError("Branch not found")

        # Start from the effective config so a new branch override inherits the tenant row.
        config = replace(self.get(tenant_id, branch_id), tenant_id=tenant_id, branch_id=branch_id)

        weekends = optional_bool(include_weekends, "includeWeekends")
        if weekends is not None:
            config = replace(config, include_weekends=weekends)
        if standard_check_in is not None:
            config = replace(config, standard_check_in=parse_wall_clock(standard_check_in))
        if late_threshold_minutes is not None:
            config = replace(
                config,
                late_threshold_minutes=require_int_range(
                    late_threshold_minutes, "lateThresholdMinutes", low=0, high=MAX_LATE_THRESHOLD_MINUTES
                ),
            )

        self._settings.upsert(config)
        if self._cache is not None:
            self._cache.invalidate_scope(tenant_id=tenant_id, branch_id=branch_id)

        logger.info("attendance settings updated tenant=%s branch=%s by=%s", tenant_id, branch_id, admin.employee_code)
        return config
