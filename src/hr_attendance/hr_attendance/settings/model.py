from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import time
from typing import Dict, Optional

from ..core.constants import DEFAULT_LATE_THRESHOLD_MINUTES, DEFAULT_STANDARD_CHECK_IN


@dataclass(frozen=True)
class TenantAttendanceConfig:
    """Classification parameters for a tenant, or one of its branches."""

    tenant_id: int
    branch_id: Optional[int] = None
    include_weekends: bool = False
    standard_check_in: time = DEFAULT_STANDARD_CHECK_IN
    late_threshold_minutes: int = DEFAULT_LATE_THRESHOLD_MINUTES

    def to_dict(self) -> dict:
        return {
            "tenantId": self.tenant_id,
            "branchId": self.branch_id,
            "includeWeekends": self.include_weekends,
            "standardCheckInTime": self.standard_check_in.strftime("%H:%M"),
            "lateThresholdMinutes": self.late_threshold_minutes,
        }


@dataclass(frozen=True)
class AttendanceRules:
    """Snapshot of a tenant's config plus branch overrides.

    Read once per request so every day of one response is classified with
    the same rule version.
    """

    default: TenantAttendanceConfig
    overrides: Dict[int, TenantAttendanceConfig] = field(default_factory=dict)

    def for_branch(self, branch_id: Optional[int]) -> TenantAttendanceConfig:
        if branch_id is not None and branch_id in self.overrides:
            return self.overrides[branch_id]
        return self.default

    @classmethod
    def from_configs(cls, tenant_id: int, configs) -> "AttendanceRules":
        default = TenantAttendanceConfig(tenant_id=tenant_id)
        overrides: Dict[int, TenantAttendanceConfig] = {}
        for c in configs:
            if c.branch_id is None:
                default = c
            else:
                overrides[c.branch_id] = c
        return cls(default=default, overrides=overrides)

    def with_override(self, config: TenantAttendanceConfig) -> "AttendanceRules":
        if config.branch_id is None:
            return replace(self, default=config)
        return replace(self, overrides={**self.overrides, config.branch_id: config})
