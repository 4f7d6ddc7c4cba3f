from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.constants import ACTIVE_EMPLOYEE_STATUS
from ..core.enums import Role


@dataclass(frozen=True)
class Branch:
    branch_id: int
    tenant_id: int
    name: str


@dataclass(frozen=True)
class Employee:
    """Domain entity: an employee of one tenant.

    ``employee_id`` is the internal key; ``employee_code`` is the public
    identifier shown as ``employeeId`` in the API.
    """

    employee_id: int
    tenant_id: int
    employee_code: str
    full_name: str
    department: Optional[str]
    branch_id: Optional[int]
    branch_name: Optional[str]
    username: str
    password_hash: str
    role: Role = Role.EMPLOYEE
    status: str = ACTIVE_EMPLOYEE_STATUS

    @property
    def is_active(self) -> bool:
        return self.status == ACTIVE_EMPLOYEE_STATUS

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
