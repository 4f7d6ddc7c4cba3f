from __future__ import annotations

from datetime import date, time

import pytest

from conftest import attended
from src.hr_attendance.hr_attendance.core.exceptions import ValidationError

MONDAY = date(2024, 11, 18)
SATURDAY = date(2024, 11, 16)


def test_daily_rows_and_counts(world):
    world.attendance.add(attended(1, world.alice, MONDAY, check_in=time(9, 5)))
    world.attendance.add(attended(2, world.bob, MONDAY, check_in=time(9, 40)))

    view = world.container.daily_builder.build_daily(tenant_id=1, work_date=MONDAY)
    rows = [r.to_dict() for r in view.rows]

    assert [r["employeeId"] for r in rows] == ["EMP001", "EMP002", "EMP003"]
    assert [r["status"] for r in rows] == ["absent", "present", "late"]
    assert rows[1]["checkInTime"] == "09:05"
    assert rows[1]["workHours"] == 8.0
    assert rows[0]["checkInTime"] is None
    assert view.counts == {"present": 1, "late": 1, "absent": 1, "weekend": 0, "holiday": 0, "total": 3}


def test_counts_follow_filters(world):
    world.attendance.add(attended(1, world.alice, MONDAY))

    view = world.container.daily_builder.build_daily(tenant_id=1, work_date=MONDAY, branch="North")
    assert [r.employee.employee_code for r in view.rows] == ["EMP003"]
    assert view.counts["total"] == 1
    assert view.counts["absent"] == 1
    assert view.counts["present"] == 0


def test_department_and_code_filters(world):
    by_dept = world.container.daily_builder.build_daily(tenant_id=1, work_date=MONDAY, department="Sales")
    assert [r.employee.employee_code for r in by_dept.rows] == ["EMP003"]

    by_code = world.container.daily_builder.build_daily(tenant_id=1, work_date=MONDAY, employee_code="EMP002")
    assert [r.employee.employee_code for r in by_code.rows] == ["EMP002"]


def test_weekend_and_branch_holiday(world):
    weekend = world.container.daily_builder.build_daily(tenant_id=1, work_date=SATURDAY)
    assert weekend.counts["weekend"] == 3

    world.container.holiday_service.create(world.admin, holiday_date="2024-11-18", name="Local fair", branch_id=2)
    view = world.container.daily_builder.build_daily(tenant_id=1, work_date=MONDAY)
    statuses = {r.employee.employee_code: r.status.value for r in view.rows}
    assert statuses == {"EMP001": "absent", "EMP002": "absent", "EMP003": "holiday"}


def test_other_tenant_records_are_invisible(world):
    world.attendance.add(attended(1, world.outsider, MONDAY))
    view = world.container.daily_builder.build_daily(tenant_id=1, work_date=MONDAY)
    assert "EMP900" not in {r.employee.employee_code for r in view.rows}
    assert view.counts["present"] == 0


def test_range_rows_by_date_then_code(world):
    friday = date(2024, 11, 15)
    world.attendance.add(attended(1, world.alice, friday))
    world.container.holiday_service.create(world.admin, holiday_date="2024-11-18", name="Founders day")
    queries = world.attendance.range_queries

    rows = world.container.daily_builder.build_range(tenant_id=1, start=friday, end=MONDAY, branch="Head Office")

    assert world.attendance.range_queries == queries + 1
    assert [(r.work_date.day, r.employee.employee_code) for r in rows] == [
        (15, "EMP001"),
        (15, "EMP002"),
        (16, "EMP001"),
        (16, "EMP002"),
        (17, "EMP001"),
        (17, "EMP002"),
        (18, "EMP001"),
        (18, "EMP002"),
    ]
    alice = [r.to_dict() for r in rows if r.employee.employee_code == "EMP002"]
    assert [r["status"] for r in alice] == ["present", "weekend", "weekend", "holiday"]
    assert [r["date"] for r in alice] == ["2024-11-15", "2024-11-16", "2024-11-17", "2024-11-18"]
    assert alice[0]["checkInTime"] == "09:00"


def test_range_of_one_day_matches_daily_view(world):
    world.attendance.add(attended(1, world.bob, MONDAY, check_in=time(9, 40)))

    rows = world.container.daily_builder.build_range(tenant_id=1, start=MONDAY, end=MONDAY)
    daily = world.container.daily_builder.build_daily(tenant_id=1, work_date=MONDAY)
    assert [r.to_dict() for r in rows] == [r.to_dict() for r in daily.rows]


def test_range_bounds_are_validated(world):
    with pytest.raises(ValidationError):
        world.container.daily_builder.build_range(tenant_id=1, start=MONDAY, end=SATURDAY)
    with pytest.raises(ValidationError):
        world.container.daily_builder.build_range(tenant_id=1, start=date(2023, 1, 1), end=date(2024, 11, 18))


def test_all_branches_selection_is_no_filter(world):
    rows = world.container.daily_builder.build_range(
        tenant_id=1, start=MONDAY, end=MONDAY, branch="All Branches"
    )
    assert [r.employee.employee_code for r in rows] == ["EMP001", "EMP002", "EMP003"]
