from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Branch, Employee


class EmployeeRepository(Protocol):
    """Read-only port over the employee directory.

    Employee CRUD lives outside this service; the engine only reads.
    """

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[Employee]:
        raise NotImplementedError

    def get_by_code(self, *, employee_code: str, tenant_id: Optional[int] = None) -> Optional[Employee]:
        """Find by public code; without ``tenant_id`` the lowest id wins."""

        raise NotImplementedError

    def list_for_tenant(
        self,
        *,
        tenant_id: int,
        branch: Optional[str] = None,
        department: Optional[str] = None,
        employee_code: Optional[str] = None,
    ) -> Sequence[Employee]:
        """Active employees of a tenant, ordered by employee_code ascending."""

        raise NotImplementedError

    def get_branch(self, *, tenant_id: int, branch_id: int) -> Optional[Branch]:
        raise NotImplementedError
