"""Daily status classification.

``classify`` is a pure function of (date, record, holiday, config); the
payroll day-counts depend on identical inputs always giving identical output.
Precedence, first match wins:

1. a holiday is declared for the date (branch-scoped beats tenant-wide,
   resolved by ``HolidayLookup``)            -> holiday
2. no record, Saturday/Sunday, weekends off  -> weekend
3. no record                                  -> absent
4. record without a check-in                  -> absent
5. check-in after standard + threshold        -> late, otherwise present
"""

from __future__ import annotations

import logging
from datetime import date, time
from typing import Optional

from ..common.datetime_utils import is_weekend, minute_of_day, parse_wall_clock
from ..core.enums import AttendanceStatus
from ..core.exceptions import ValidationError
from ..holidays.model import Holiday
from ..settings.model import TenantAttendanceConfig
from .model import AttendanceRecord, WallClock

logger = logging.getLogger(__name__)


def late_after_minute(config: TenantAttendanceConfig) -> int:
    """Last minute-of-day that still counts as on time."""
    return minute_of_day(config.standard_check_in) + int(config.late_threshold_minutes)


def check_in_status(check_in: WallClock, config: TenantAttendanceConfig) -> AttendanceStatus:
    t = check_in
    if not isinstance(t, time):
        try:
            t = parse_wall_clock(str(t))
        except ValidationError:
            logger.warning(
                "data quality: unparsable check-in time %r for tenant %s, classified as present",
                check_in,
                config.tenant_id,
            )
            return AttendanceStatus.PRESENT

    if minute_of_day(t) > late_after_minute(config):
        return AttendanceStatus.LATE
    return AttendanceStatus.PRESENT


def classify(
    work_date: date,
    record: Optional[AttendanceRecord],
    holiday: Optional[Holiday],
    config: TenantAttendanceConfig,
) -> AttendanceStatus:
    if holiday is not None:
        return AttendanceStatus.HOLIDAY

    if record is None:
        if is_weekend(work_date) and not config.include_weekends:
            return AttendanceStatus.WEEKEND
        return AttendanceStatus.ABSENT

    if record.check_in_time is None:
        return AttendanceStatus.ABSENT

    return check_in_status(record.check_in_time, config)
