from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date, datetime, time
from decimal import Decimal
from typing import Dict, List, Optional, Sequence, Tuple

import pytest
from werkzeug.security import generate_password_hash

from src.hr_attendance.hr_attendance.attendance.cache import MonthlyCalendarCache
from src.hr_attendance.hr_attendance.attendance.model import AttendanceRecord
from src.hr_attendance.hr_attendance.container import Container, build_services
from src.hr_attendance.hr_attendance.core.enums import AttendanceStatus, Role
from src.hr_attendance.hr_attendance.core.exceptions import ConflictError
from src.hr_attendance.hr_attendance.employees.model import Branch, Employee
from src.hr_attendance.hr_attendance.holidays.model import Holiday
from src.hr_attendance.hr_attendance.settings.model import TenantAttendanceConfig


class InMemoryEmployees:
    def __init__(self, employees: Sequence[Employee], branches: Sequence[Branch]):
        self.by_id: Dict[int, Employee] = {e.employee_id: e for e in employees}
        self.branches: Dict[int, Branch] = {b.branch_id: b for b in branches}

    def get_by_id(self, employee_id: int) -> Optional[Employee]:
        return self.by_id.get(employee_id)

    def get_by_username(self, username: str) -> Optional[Employee]:
        return next((e for e in self.by_id.values() if e.username == username), None)

    def get_by_code(self, *, employee_code: str, tenant_id: Optional[int] = None) -> Optional[Employee]:
        for e in sorted(self.by_id.values(), key=lambda x: x.employee_id):
            if e.employee_code == employee_code and (tenant_id is None or e.tenant_id == tenant_id):
                return e
        return None

    def list_for_tenant(self, *, tenant_id: int, branch=None, department=None, employee_code=None) -> List[Employee]:
        out = [
            e
            for e in self.by_id.values()
            if e.tenant_id == tenant_id
            and e.is_active
            and (not branch or e.branch_name == branch)
            and (not department or e.department == department)
            and (not employee_code or e.employee_code == employee_code)
        ]
        return sorted(out, key=lambda e: e.employee_code)

    def get_branch(self, *, tenant_id: int, branch_id: int) -> Optional[Branch]:
        b = self.branches.get(int(branch_id))
        return b if b and b.tenant_id == tenant_id else None


class InMemoryAttendance:
    def __init__(self):
        self._by_key: Dict[Tuple[int, int, date], AttendanceRecord] = {}
        self._id = 0
        self.range_queries = 0

    def add(self, record: AttendanceRecord) -> AttendanceRecord:
        self._by_key[(record.tenant_id, record.employee_id, record.work_date)] = record
        self._id = max(self._id, record.attendance_id)
        return record

    def get_for_employee_and_date(self, *, tenant_id: int, employee_id: int, work_date: date):
        return self._by_key.get((tenant_id, employee_id, work_date))

    def list_for_range(self, *, tenant_id: int, start: date, end: date, employee_ids=None):
        self.range_queries += 1
        if employee_ids is not None and not employee_ids:
            return []
        return sorted(
            (
                r
                for (t, emp, d), r in self._by_key.items()
                if t == tenant_id and start <= d <= end and (employee_ids is None or emp in employee_ids)
            ),
            key=lambda r: (r.work_date, r.employee_id),
        )

    def create_checkin(self, *, tenant_id, employee_id, work_date, check_in_time, status, location=None, notes=None) -> int:
        if (tenant_id, employee_id, work_date) in self._by_key:
            raise ConflictError("Record already exists")
        self._id += 1
        self.add(
            AttendanceRecord(
                attendance_id=self._id,
                tenant_id=tenant_id,
                employee_id=employee_id,
                work_date=work_date,
                status=status,
                check_in_time=check_in_time,
                location=location,
                notes=notes,
            )
        )
        return self._id

    def _find(self, attendance_id: int):
        return next(((k, r) for k, r in self._by_key.items() if r.attendance_id == attendance_id), (None, None))

    def update_checkout(self, *, attendance_id, check_out_time, work_hours, notes=None) -> bool:
        key, rec = self._find(attendance_id)
        if rec is None:
            return False
        self._by_key[key] = replace(rec, check_out_time=check_out_time, work_hours=work_hours, notes=notes)
        return True

    def update_productivity(self, *, attendance_id: int, rating: int) -> bool:
        key, rec = self._find(attendance_id)
        if rec is None:
            return False
        self._by_key[key] = replace(rec, productivity_rating=rating)
        return True

    def upsert_manual(
        self, *, tenant_id, employee_id, work_date, status, check_in_time, check_out_time, work_hours, notes=None
    ) -> int:
        key = (tenant_id, employee_id, work_date)
        existing = self._by_key.get(key)
        if existing is None:
            self._id += 1
            existing = AttendanceRecord(
                attendance_id=self._id, tenant_id=tenant_id, employee_id=employee_id, work_date=work_date, status=status
            )
        self._by_key[key] = replace(
            existing,
            status=status,
            check_in_time=check_in_time,
            check_out_time=check_out_time,
            work_hours=work_hours,
            notes=notes,
        )
        return existing.attendance_id


class InMemoryHolidays:
    def __init__(self):
        self.by_id: Dict[int, Holiday] = {}
        self._id = 0

    def create(self, *, tenant_id, branch_id, holiday_date, name, description=None, created_by=None) -> int:
        if self.find_for_scope(tenant_id=tenant_id, branch_id=branch_id, holiday_date=holiday_date):
            raise ConflictError("Record already exists")
        self._id += 1
        self.by_id[self._id] = Holiday(
            holiday_id=self._id,
            tenant_id=tenant_id,
            branch_id=branch_id,
            holiday_date=holiday_date,
            name=name,
            description=description,
            created_by=created_by,
        )
        return self._id

    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        return self.by_id.get(holiday_id)

    def find_for_scope(self, *, tenant_id, branch_id, holiday_date) -> Optional[Holiday]:
        return next(
            (
                h
                for h in self.by_id.values()
                if h.tenant_id == tenant_id and h.branch_id == branch_id and h.holiday_date == holiday_date
            ),
            None,
        )

    def delete(self, holiday_id: int) -> bool:
        return self.by_id.pop(holiday_id, None) is not None

    def list_range(self, *, tenant_id: int, start: date, end: date) -> List[Holiday]:
        return sorted(
            (h for h in self.by_id.values() if h.tenant_id == tenant_id and start <= h.holiday_date <= end),
            key=lambda h: (h.holiday_date, h.branch_id or 0),
        )


class InMemorySettings:
    def __init__(self):
        self.rows: Dict[Tuple[int, Optional[int]], TenantAttendanceConfig] = {}

    def list_for_tenant(self, tenant_id: int) -> List[TenantAttendanceConfig]:
        return [c for (t, _), c in self.rows.items() if t == tenant_id]

    def upsert(self, config: TenantAttendanceConfig) -> None:
        self.rows[(config.tenant_id, config.branch_id)] = config


def make_employee(
    employee_id: int,
    code: str,
    *,
    tenant_id: int = 1,
    branch_id: Optional[int] = 1,
    branch_name: Optional[str] = "Head Office",
    department: Optional[str] = "Engineering",
    role: Role = Role.EMPLOYEE,
    status: str = "Active",
    password_hash: str = "",
) -> Employee:
    return Employee(
        employee_id=employee_id,
        tenant_id=tenant_id,
        employee_code=code,
        full_name=f"Employee {code}",
        department=department,
        branch_id=branch_id,
        branch_name=branch_name,
        username=code.lower(),
        password_hash=password_hash,
        role=role,
        status=status,
    )


def attended(record_id: int, employee: Employee, d: date, check_in: time = time(9, 0), hours: str = "8") -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=record_id,
        tenant_id=employee.tenant_id,
        employee_id=employee.employee_id,
        work_date=d,
        status=AttendanceStatus.PRESENT,
        check_in_time=check_in,
        check_out_time=time(17, 0),
        work_hours=Decimal(hours),
    )


@dataclass
class World:
    container: Container
    employees: InMemoryEmployees
    attendance: InMemoryAttendance
    holidays: InMemoryHolidays
    settings: InMemorySettings
    cache: MonthlyCalendarCache
    admin: Employee
    alice: Employee
    bob: Employee
    other_admin: Employee
    outsider: Employee


@pytest.fixture
def fixed_now() -> datetime:
    # Monday 18 November 2024, tenant-local
    return datetime(2024, 11, 18, 9, 10, 0)


@pytest.fixture
def world() -> World:
    branches = [
        Branch(branch_id=1, tenant_id=1, name="Head Office"),
        Branch(branch_id=2, tenant_id=1, name="North"),
        Branch(branch_id=3, tenant_id=2, name="Other HQ"),
    ]
    admin = make_employee(1, "EMP001", role=Role.ADMIN, department="HR", password_hash=generate_password_hash("admin123"))
    alice = make_employee(2, "EMP002", password_hash=generate_password_hash("alice-pw"))
    bob = make_employee(3, "EMP003", branch_id=2, branch_name="North", department="Sales")
    inactive = make_employee(4, "EMP004", status="Inactive")
    other_admin = make_employee(10, "ADM900", tenant_id=2, branch_id=3, branch_name="Other HQ", role=Role.ADMIN)
    outsider = make_employee(11, "EMP900", tenant_id=2, branch_id=3, branch_name="Other HQ")

    employees = InMemoryEmployees([admin, alice, bob, inactive, other_admin, outsider], branches)
    attendance = InMemoryAttendance()
    holidays = InMemoryHolidays()
    settings = InMemorySettings()
    cache = MonthlyCalendarCache()

    container = build_services(
        employees_repo=employees,
        attendance_repo=attendance,
        holidays_repo=holidays,
        settings_repo=settings,
        cache=cache,
    )
    return World(
        container=container,
        employees=employees,
        attendance=attendance,
        holidays=holidays,
        settings=settings,
        cache=cache,
        admin=admin,
        alice=alice,
        bob=bob,
        other_admin=other_admin,
        outsider=outsider,
    )
