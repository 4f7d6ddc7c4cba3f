from __future__ import annotations

from datetime import date, time, timedelta

import pytest

from conftest import attended
from src.hr_attendance.hr_attendance.core.enums import AttendanceStatus
from src.hr_attendance.hr_attendance.core.exceptions import NotFoundError, ValidationError


def test_check_in_on_time(world, fixed_now):
    record = world.container.attendance_service.check_in(world.alice, now=fixed_now, location="HQ")

    assert record.status == AttendanceStatus.PRESENT
    assert record.check_in_time == time(9, 10)
    assert record.location == "HQ"


def test_check_in_late_uses_branch_override(world, fixed_now):
    world.container.settings_service.update(world.admin, branch_id=2, late_threshold_minutes=5)

    bob = world.container.attendance_service.check_in(world.bob, now=fixed_now)
    alice = world.container.attendance_service.check_in(world.alice, now=fixed_now)
    assert bob.status == AttendanceStatus.LATE
    assert alice.status == AttendanceStatus.PRESENT


def test_double_check_in_rejected(world, fixed_now):
    svc = world.container.attendance_service
    svc.check_in(world.alice, now=fixed_now)
    with pytest.raises(ValidationError):
        svc.check_in(world.alice, now=fixed_now + timedelta(minutes=5))


def test_check_in_on_holiday_rejected(world, fixed_now):
    world.container.holiday_service.create(world.admin, holiday_date="2024-11-18", name="Closure")
    with pytest.raises(ValidationError, match="holiday"):
        world.container.attendance_service.check_in(world.alice, now=fixed_now)


def test_check_out_computes_hours_and_appends_notes(world, fixed_now):
    svc = world.container.attendance_service
    svc.check_in(world.alice, now=fixed_now, notes="on site")

    record = svc.check_out(world.alice, now=fixed_now.replace(hour=17, minute=40), notes="left early meeting")
    assert record.check_out_time == time(17, 40)
    assert float(record.work_hours) == 8.5
    assert record.notes == "on site | left early meeting"


def test_check_out_requires_check_in_once(world, fixed_now):
    svc = world.container.attendance_service
    with pytest.raises(ValidationError):
        svc.check_out(world.alice, now=fixed_now)

    svc.check_in(world.alice, now=fixed_now)
    svc.check_out(world.alice, now=fixed_now.replace(hour=17))
    with pytest.raises(ValidationError):
        svc.check_out(world.alice, now=fixed_now.replace(hour=18))


def test_check_in_invalidates_cached_month(world, fixed_now):
    aggregator = world.container.monthly_aggregator
    before = aggregator.build_calendar(tenant_id=1, employee_code="EMP002", year_month="2024-11")

    world.container.attendance_service.check_in(world.alice, now=fixed_now)

    after = aggregator.build_calendar(tenant_id=1, employee_code="EMP002", year_month="2024-11")
    assert after.tally.present_days == before.tally.present_days + 1


def test_productivity_rating(world, fixed_now):
    svc = world.container.attendance_service
    with pytest.raises(ValidationError):
        svc.rate_productivity(world.alice, 80, today=fixed_now.date())

    svc.check_in(world.alice, now=fixed_now)
    assert svc.rate_productivity(world.alice, "80", today=fixed_now.date()).productivity_rating == 80

    with pytest.raises(ValidationError):
        svc.rate_productivity(world.alice, 101, today=fixed_now.date())


def test_today_reports_classified_status(world, fixed_now):
    svc = world.container.attendance_service
    assert svc.today(world.alice, today=fixed_now.date())["status"] == "absent"

    svc.check_in(world.alice, now=fixed_now.replace(hour=9, minute=30))
    today = svc.today(world.alice, today=fixed_now.date())
    assert today["status"] == "late"
    assert today["checkInTime"] == "09:30"
    assert today["isHoliday"] is False


def test_history_newest_first_and_classified(world, fixed_now):
    world.attendance.add(attended(1, world.alice, date(2024, 11, 15), check_in=time(9, 20)))
    world.attendance.add(attended(2, world.alice, date(2024, 11, 14)))
    world.container.holiday_service.create(world.admin, holiday_date="2024-11-13", name="Closure")

    rows = world.container.attendance_service.history(world.alice, today=fixed_now.date())
    assert [(r["date"], r["status"]) for r in rows] == [
        ("2024-11-17", "weekend"),
        ("2024-11-16", "weekend"),
        ("2024-11-15", "late"),
        ("2024-11-14", "present"),
        ("2024-11-13", "holiday"),
    ]


def test_history_days_is_validated(world, fixed_now):
    with pytest.raises(ValidationError):
        world.container.attendance_service.history(world.alice, days="0", today=fixed_now.date())


def test_employee_details_newest_first(world, fixed_now):
    world.attendance.add(attended(1, world.alice, date(2024, 11, 1)))
    world.attendance.add(attended(2, world.alice, date(2024, 11, 15)))
    world.attendance.add(attended(3, world.alice, date(2024, 9, 1)))

    data = world.container.attendance_service.employee_details(
        tenant_id=1, employee_code="EMP002", today=fixed_now.date()
    )
    assert data["employee"]["employeeId"] == "EMP002"
    assert [a["date"] for a in data["attendances"]] == ["2024-11-15", "2024-11-01"]


def test_employee_details_outside_tenant_is_not_found(world, fixed_now):
    with pytest.raises(NotFoundError):
        world.container.attendance_service.employee_details(
            tenant_id=1, employee_code="EMP900", today=fixed_now.date()
        )
