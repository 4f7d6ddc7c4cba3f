from __future__ import annotations

from typing import Protocol, Sequence

from .model import TenantAttendanceConfig


class SettingsRepository(Protocol):
    def list_for_tenant(self, tenant_id: int) -> Sequence[TenantAttendanceConfig]:
        """Tenant row (branch_id None) and branch overrides, if any were saved."""

        raise NotImplementedError

    def upsert(self, config: TenantAttendanceConfig) -> None:
        raise NotImplementedError
