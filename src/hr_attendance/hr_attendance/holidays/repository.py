from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Holiday


class HolidayRepository(Protocol):
    def create(
        self,
        *,
        tenant_id: int,
        branch_id: Optional[int],
        holiday_date: date,
        name: str,
        description: Optional[str] = None,
        created_by: Optional[int] = None,
    ) -> int:
        """Insert; a duplicate (tenant, branch-or-null, date) raises ConflictError."""

        raise NotImplementedError

    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        raise NotImplementedError

    def find_for_scope(self, *, tenant_id: int, branch_id: Optional[int], holiday_date: date) -> Optional[Holiday]:
        raise NotImplementedError

    def delete(self, holiday_id: int) -> bool:
        raise NotImplementedError

    def list_range(self, *, tenant_id: int, start: date, end: date) -> Sequence[Holiday]:
        """All holidays of a tenant in [start, end], every branch included."""

        raise NotImplementedError
