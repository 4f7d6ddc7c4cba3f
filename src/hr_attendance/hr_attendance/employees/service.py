from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from werkzeug.security import check_password_hash

from ..common.validators import require_non_empty
from ..core.enums import Role
from ..core.exceptions import AuthenticationError, ForbiddenError
from .model import Employee
from .repository import EmployeeRepository


@dataclass(frozen=True)
class SessionEmployee:
    """What we store into Flask session after login."""

    employee_id: int
    tenant_id: int
    employee_code: str
    full_name: str
    role: Role


class AuthService:
    """Use case: authenticate an employee and resolve the session back to one."""

    def __init__(self, employees: EmployeeRepository):
        self._employees = employees

    def authenticate(self, username: str, password: str) -> SessionEmployee:
        username = require_non_empty(username, "username")
        if not password:
            raise AuthenticationError("Invalid username or password")

        employee = self._employees.get_by_username(username)
        if not employee or not check_password_hash(employee.password_hash, password):
            raise AuthenticationError("Invalid username or password")
        if not employee.is_active:
            raise AuthenticationError("Account is disabled")

        return SessionEmployee(
            employee_id=employee.employee_id,
            tenant_id=employee.tenant_id,
            employee_code=employee.employee_code,
            full_name=employee.full_name,
            role=employee.role,
        )

    def resolve(self, *, employee_id: Any, tenant_id: Any) -> Employee:
        """Map session claims to the acting employee; any mismatch is a 401."""

        if not employee_id or not tenant_id:
            raise AuthenticationError("Authentication required")

        employee: Optional[Employee] = self._employees.get_by_id(int(employee_id))
        if not employee:
            raise AuthenticationError("Employee not found")
        if employee.tenant_id != int(tenant_id) or not employee.is_active:
            raise AuthenticationError("Invalid session")
        return employee

    @staticmethod
    def require_admin(employee: Employee) -> Employee:
        if not employee.is_admin:
            raise ForbiddenError("Administrator role required")
        return employee
