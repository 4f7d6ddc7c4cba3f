from __future__ import annotations

import calendar
from datetime import date, datetime, time, timedelta
from typing import Iterator, Optional, Tuple

from ..core.exceptions import ValidationError


def _text(value, what: str) -> str:
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"Invalid {what} {value!r}, expected a string")
    return value.strip()


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    text = _text(value, "date")
    try:
        return datetime.strptime(text, "%Y-%m-%d").date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}, expected YYYY-MM-DD")


def parse_year_month(value: str) -> Tuple[int, int]:
    """Parse YYYY-MM string into (year, month)."""
    text = _text(value, "month")
    try:
        d = datetime.strptime(text, "%Y-%m")
    except ValueError:
        raise ValidationError(f"Invalid month {value!r}, expected YYYY-MM")
    return d.year, d.month


def format_year_month(year: int, month: int) -> str:
    return f"{year:04d}-{month:02d}"


def parse_wall_clock(value: str) -> time:
    """Parse a tenant-local HH:MM (or HH:MM:SS) string.

    Raises ValidationError so malformed times never reach storage.
    """

    v = _text(value, "time")
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(v, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"Invalid time {value!r}, expected HH:MM")


def format_wall_clock(value) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, time):
        return value.strftime("%H:%M")
    return str(value)


def minute_of_day(value: time) -> int:
    return value.hour * 60 + value.minute


def month_bounds(year: int, month: int) -> Tuple[date, date]:
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def iter_days(start: date, end: date) -> Iterator[date]:
    d = start
    while d <= end:
        yield d
        d += timedelta(days=1)


def is_weekend(d: date) -> bool:
    return d.weekday() >= 5


def now_local() -> datetime:
    """Current tenant-local wall-clock time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()
