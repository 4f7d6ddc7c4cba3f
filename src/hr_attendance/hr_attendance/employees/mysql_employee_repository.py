from __future__ import annotations

from typing import Any, Dict, Optional, Sequence

from ..core.constants import ACTIVE_EMPLOYEE_STATUS
from ..core.enums import Role
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Branch, Employee
from .repository import EmployeeRepository

_SELECT = """
    SELECT
        e.employee_id, e.tenant_id, e.employee_code, e.full_name, e.department,
        e.branch_id, b.name AS branch_name, e.username, e.password_hash, e.role, e.status
    FROM employees e
    LEFT JOIN branches b ON b.branch_id = e.branch_id
"""


def _to_employee(r: Dict[str, Any]) -> Employee:
    return Employee(
        employee_id=int(r["employee_id"]),
        tenant_id=int(r["tenant_id"]),
        employee_code=r["employee_code"],
        full_name=r["full_name"],
        department=r.get("department"),
        branch_id=int(r["branch_id"]) if r.get("branch_id") is not None else None,
        branch_name=r.get("branch_name"),
        username=r["username"],
        password_hash=r["password_hash"],
        role=Role(r["role"]),
        status=r.get("status") or ACTIVE_EMPLOYEE_STATUS,
    )


class MySQLEmployeeRepository(EmployeeRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.employee_id=%s", (int(employee_id),))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_username(self, username: str) -> Optional[Employee]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE e.username=%s", (username,))
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def get_by_code(self, *, employee_code: str, tenant_id: Optional[int] = None) -> Optional[Employee]:
        clauses = ["e.employee_code=%s"]
        params: list[object] = [employee_code]
        if tenant_id is not None:
            clauses.append("e.tenant_id=%s")
            params.append(int(tenant_id))

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + f" WHERE {' AND '.join(clauses)} ORDER BY e.employee_id ASC LIMIT 1",
                tuple(params),
            )
            r = fetchone(cur)
            return _to_employee(r) if r else None

    def list_for_tenant(
        self,
        *,
        tenant_id: int,
        branch: Optional[str] = None,
        department: Optional[str] = None,
        employee_code: Optional[str] = None,
    ) -> Sequence[Employee]:
        clauses = ["e.tenant_id=%s", "e.status=%s"]
        params: list[object] = [int(tenant_id), ACTIVE_EMPLOYEE_STATUS]

        if branch:
            clauses.append("b.name=%s")
            params.append(branch)
        if department:
            clauses.append("e.department=%s")
            params.append(department)
        if employee_code:
            clauses.append("e.employee_code=%s")
            params.append(employee_code)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {where} ORDER BY e.employee_code ASC", tuple(params))
            return [_to_employee(r) for r in fetchall(cur)]

    def get_branch(self, *, tenant_id: int, branch_id: int) -> Optional[Branch]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT branch_id, tenant_id, name FROM branches WHERE branch_id=%s AND tenant_id=%s",
                (int(branch_id), int(tenant_id)),
            )
            r = fetchone(cur)
            if not r:
                return None
            return Branch(branch_id=int(r["branch_id"]), tenant_id=int(r["tenant_id"]), name=r["name"])
