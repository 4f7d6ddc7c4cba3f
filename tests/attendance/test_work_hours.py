from datetime import time
from decimal import Decimal

from src.hr_attendance.hr_attendance.attendance.work_hours import StandardWorkHoursCalculator


def test_worked_hours_rounds_to_two_places():
    calc = StandardWorkHoursCalculator()
    assert calc.worked_hours(time(9, 0), time(17, 30)) == Decimal("8.50")
    assert calc.worked_hours(time(9, 0), time(9, 20)) == Decimal("0.33")


def test_worked_hours_never_negative():
    calc = StandardWorkHoursCalculator()
    assert calc.worked_hours(time(18, 0), time(9, 0)) == Decimal("0.00")


def test_synthetic_check_out():
    calc = StandardWorkHoursCalculator()
    assert calc.check_out_for(time(9, 0), Decimal("8")) == time(17, 0)
    assert calc.check_out_for(time(9, 0), Decimal("7.5")) == time(16, 30)


def test_synthetic_check_out_is_capped_before_midnight():
    calc = StandardWorkHoursCalculator()
    assert calc.check_out_for(time(9, 0), Decimal("24")) == time(23, 59)


def test_fits_in_day():
    calc = StandardWorkHoursCalculator()
    assert calc.fits_in_day(time(9, 0), Decimal("14.98"))
    assert not calc.fits_in_day(time(9, 0), Decimal("15"))
    assert not calc.fits_in_day(time(0, 0), Decimal("24"))
