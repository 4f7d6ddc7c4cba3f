from __future__ import annotations

from datetime import datetime, time, timedelta
from decimal import ROUND_HALF_UP, Decimal

_TWO_PLACES = Decimal("0.01")
_END_OF_DAY = time(23, 59)
# DECIMAL(4,2) column
MAX_WORK_HOURS = Decimal("24")


class StandardWorkHoursCalculator:
    """Standard rule: hours between check-in and check-out, not below 0.

    Both ends are wall-clock times of the same local day.
    """

    def worked_hours(self, check_in: time, check_out: time) -> Decimal:
        minutes = (check_out.hour * 60 + check_out.minute) - (check_in.hour * 60 + check_in.minute)
        hours = Decimal(max(minutes, 0)) / Decimal(60)
        return hours.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP)

    def fits_in_day(self, check_in: time, work_hours: Decimal) -> bool:
        """True when the shift starting at ``check_in`` ends by 23:59 the same day."""

        start = check_in.hour * 60 + check_in.minute
        return start + Decimal(work_hours) * 60 <= _END_OF_DAY.hour * 60 + _END_OF_DAY.minute

    def check_out_for(self, check_in: time, work_hours: Decimal) -> time:
        """Synthetic check-out for a supplied duration, capped at 23:59."""

        start = datetime.combine(datetime.min.date(), check_in)
        end = start + timedelta(minutes=int((Decimal(work_hours) * 60).to_integral_value(rounding=ROUND_HALF_UP)))
        if end.date() != start.date():
            return _END_OF_DAY
        return end.time().replace(second=0, microsecond=0)
