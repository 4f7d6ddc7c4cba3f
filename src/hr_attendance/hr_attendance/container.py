from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.cache import MonthlyCalendarCache
from .attendance.corrections import ManualCorrectionService
from .attendance.daily import DailyViewBuilder
from .attendance.monthly import MonthlyAggregator
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .attendance.work_hours import StandardWorkHoursCalculator
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import AuthService
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .holidays.service import HolidayService
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .settings.repository import SettingsRepository
from .settings.service import SettingsService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    employees_repo: EmployeeRepository
    attendance_repo: AttendanceRepository
    holidays_repo: HolidayRepository
    settings_repo: SettingsRepository
    cache: MonthlyCalendarCache

    auth_service: AuthService
    settings_service: SettingsService
    holiday_service: HolidayService
    attendance_service: AttendanceService
    daily_builder: DailyViewBuilder
    monthly_aggregator: MonthlyAggregator
    correction_service: ManualCorrectionService


def build_services(
    *,
    employees_repo: EmployeeRepository,
    attendance_repo: AttendanceRepository,
    holidays_repo: HolidayRepository,
    settings_repo: SettingsRepository,
    cache: Optional[MonthlyCalendarCache] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire the services on top of any repository implementations."""

    cache = cache if cache is not None else MonthlyCalendarCache()
    calculator = StandardWorkHoursCalculator()

    settings_service = SettingsService(settings_repo, employees_repo, cache=cache)
    holiday_service = HolidayService(holidays_repo, employees_repo, cache=cache)

    return Container(
        conn=conn,
        employees_repo=employees_repo,
        attendance_repo=attendance_repo,
        holidays_repo=holidays_repo,
        settings_repo=settings_repo,
        cache=cache,
        auth_service=AuthService(employees_repo),
        settings_service=settings_service,
        holiday_service=holiday_service,
        attendance_service=AttendanceService(
            employees_repo, attendance_repo, holiday_service, settings_service, cache=cache, calculator=calculator
        ),
        daily_builder=DailyViewBuilder(employees_repo, attendance_repo, holiday_service, settings_service),
        monthly_aggregator=MonthlyAggregator(
            employees_repo, attendance_repo, holiday_service, settings_service, cache=cache
        ),
        correction_service=ManualCorrectionService(
            employees_repo, attendance_repo, holiday_service, settings_service, cache=cache, calculator=calculator
        ),
    )


def build_container(*, db_config: dict, cache_enabled: bool = True) -> Container:
    conn = DatabaseConnection(DBConfig.from_mapping(db_config))
    return build_services(
        employees_repo=MySQLEmployeeRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        holidays_repo=MySQLHolidayRepository(conn),
        settings_repo=MySQLSettingsRepository(conn),
        cache=MonthlyCalendarCache(enabled=cache_enabled),
        conn=conn,
    )
