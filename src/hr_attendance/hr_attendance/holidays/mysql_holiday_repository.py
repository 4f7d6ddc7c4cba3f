from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Holiday
from .repository import HolidayRepository

_SELECT = """
    SELECT h.holiday_id, h.tenant_id, h.branch_id, b.name AS branch_name,
           h.holiday_date, h.name, h.description, h.created_by
    FROM holidays h
    LEFT JOIN branches b ON b.branch_id = h.branch_id
"""


def _to_holiday(r: Dict[str, Any]) -> Holiday:
    d = r["holiday_date"]
    if isinstance(d, datetime):
        d = d.date()
    return Holiday(
        holiday_id=int(r["holiday_id"]),
        tenant_id=int(r["tenant_id"]),
        branch_id=int(r["branch_id"]) if r.get("branch_id") is not None else None,
        holiday_date=d,
        name=r["name"],
        description=r.get("description"),
        branch_name=r.get("branch_name"),
        created_by=int(r["created_by"]) if r.get("created_by") is not None else None,
    )


class MySQLHolidayRepository(HolidayRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def create(
        self,
        *,
        tenant_id: int,
        branch_id: Optional[int],
        holiday_date: date,
        name: str,
        description: Optional[str] = None,
        created_by: Optional[int] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO holidays(tenant_id, branch_id, holiday_date, name, description, created_by)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (int(tenant_id), branch_id, holiday_date, name, description, created_by),
            )
            return int(cur.lastrowid)

    def get_by_id(self, holiday_id: int) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + " WHERE h.holiday_id=%s", (int(holiday_id),))
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def find_for_scope(self, *, tenant_id: int, branch_id: Optional[int], holiday_date: date) -> Optional[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE h.tenant_id=%s AND h.branch_scope=COALESCE(%s, 0) AND h.holiday_date=%s",
                (int(tenant_id), branch_id, holiday_date),
            )
            r = fetchone(cur)
            return _to_holiday(r) if r else None

    def delete(self, holiday_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM holidays WHERE holiday_id=%s", (int(holiday_id),))
            return cur.rowcount > 0

    def list_range(self, *, tenant_id: int, start: date, end: date) -> Sequence[Holiday]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE h.tenant_id=%s AND h.holiday_date BETWEEN %s AND %s"
                " ORDER BY h.holiday_date ASC, h.branch_scope ASC",
                (int(tenant_id), start, end),
            )
            return [_to_holiday(r) for r in fetchall(cur)]
