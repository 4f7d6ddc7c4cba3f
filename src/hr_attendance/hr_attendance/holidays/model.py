from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, Iterable, Optional, Tuple


@dataclass(frozen=True)
class Holiday:
    """A declared non-working date, tenant-wide when ``branch_id`` is None."""

    holiday_id: int
    tenant_id: int
    branch_id: Optional[int]
    holiday_date: date
    name: str
    description: Optional[str] = None
    branch_name: Optional[str] = None
    created_by: Optional[int] = None

    def to_dict(self) -> dict:
        return {
            "holidayId": self.holiday_id,
            "tenantId": self.tenant_id,
            "branchId": self.branch_id,
            "branchName": self.branch_name,
            "date": self.holiday_date.strftime("%Y-%m-%d"),
            "name": self.name,
            "description": self.description,
            "createdBy": self.created_by,
        }


@dataclass(frozen=True)
class HolidayLookup:
    """Holiday set for one tenant and date range, loaded once per request."""

    tenant_wide: Dict[date, Holiday] = field(default_factory=dict)
    by_branch: Dict[Tuple[int, date], Holiday] = field(default_factory=dict)

    @classmethod
    def from_holidays(cls, holidays: Iterable[Holiday]) -> "HolidayLookup":
        tenant_wide: Dict[date, Holiday] = {}
        by_branch: Dict[Tuple[int, date], Holiday] = {}
        for h in holidays:
            if h.branch_id is None:
                tenant_wide[h.holiday_date] = h
            else:
                by_branch[(h.branch_id, h.holiday_date)] = h
        return cls(tenant_wide=tenant_wide, by_branch=by_branch)

    def for_date(self, d: date, branch_id: Optional[int]) -> Optional[Holiday]:
        # Branch-scoped declarations win over tenant-wide ones.
        if branch_id is not None:
            h = self.by_branch.get((branch_id, d))
            if h:
                return h
        return self.tenant_wide.get(d)
