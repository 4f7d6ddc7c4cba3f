from __future__ import annotations

from datetime import date, time
from decimal import Decimal
from typing import Any, Dict, Optional, Sequence

from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone, read_wall_clock
from .model import AttendanceRecord
from .repository import AttendanceRepository

_SELECT = """
    SELECT attendance_id, tenant_id, employee_id, work_date, status, check_in_time, check_out_time,
           work_hours, productivity_rating, location, notes
    FROM attendance
"""


def _to_record(r: Dict[str, Any]) -> AttendanceRecord:
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        tenant_id=int(r["tenant_id"]),
        employee_id=int(r["employee_id"]),
        work_date=r["work_date"],
        status=AttendanceStatus(str(r["status"]).lower()),
        check_in_time=read_wall_clock(r.get("check_in_time")),
        check_out_time=read_wall_clock(r.get("check_out_time")),
        work_hours=Decimal(str(r["work_hours"])) if r.get("work_hours") is not None else None,
        productivity_rating=int(r["productivity_rating"]) if r.get("productivity_rating") is not None else None,
        location=r.get("location"),
        notes=r.get("notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_employee_and_date(
        self, *, tenant_id: int, employee_id: int, work_date: date
    ) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                _SELECT + " WHERE tenant_id=%s AND employee_id=%s AND work_date=%s",
                (int(tenant_id), int(employee_id), work_date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def list_for_range(
        self,
        *,
        tenant_id: int,
        start: date,
        end: date,
        employee_ids: Optional[Sequence[int]] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses = ["tenant_id=%s", "work_date BETWEEN %s AND %s"]
        params: list[object] = [int(tenant_id), start, end]

        if employee_ids is not None:
            if not employee_ids:
                return []
            clauses.append(f"employee_id IN ({','.join(['%s'] * len(employee_ids))})")
            params.extend(int(e) for e in employee_ids)

        where = " AND ".join(clauses)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(_SELECT + f" WHERE {where} ORDER BY work_date DESC, employee_id ASC", tuple(params))
            return [_to_record(r) for r in fetchall(cur)]

    def create_checkin(
        self,
        *,
        tenant_id: int,
        employee_id: int,
        work_date: date,
        check_in_time: time,
        status: AttendanceStatus,
        location: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance(tenant_id, employee_id, work_date, status, check_in_time, location, notes)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (int(tenant_id), int(employee_id), work_date, status.value, check_in_time, location, notes),
            )
            return int(cur.lastrowid)

    def update_checkout(
        self,
        *,
        attendance_id: int,
        check_out_time: time,
        work_hours: Decimal,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance
                SET check_out_time=%s, work_hours=%s, notes=%s
                WHERE attendance_id=%s
                """,
                (check_out_time, work_hours, notes, int(attendance_id)),
            )
            return cur.rowcount > 0

    def update_productivity(self, *, attendance_id: int, rating: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE attendance SET productivity_rating=%s WHERE attendance_id=%s",
                (int(rating), int(attendance_id)),
            )
            return cur.rowcount > 0

    def upsert_manual(
        self,
        *,
        tenant_id: int,
        employee_id: int,
        work_date: date,
        status: AttendanceStatus,
        check_in_time: time,
        check_out_time: time,
        work_hours: Decimal,
        notes: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance
                    (tenant_id, employee_id, work_date, status, check_in_time, check_out_time, work_hours, notes)
                VALUES(%s,%s,%s,%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    status=VALUES(status),
                    check_in_time=VALUES(check_in_time),
                    check_out_time=VALUES(check_out_time),
                    work_hours=VALUES(work_hours),
                    notes=VALUES(notes)
                """,
                (
                    int(tenant_id),
                    int(employee_id),
                    work_date,
                    status.value,
                    check_in_time,
                    check_out_time,
                    work_hours,
                    notes,
                ),
            )

            # If it was an update, lastrowid can be 0; fetch attendance_id.
            if cur.lastrowid:
                return int(cur.lastrowid)

            cur.execute(
                "SELECT attendance_id FROM attendance WHERE tenant_id=%s AND employee_id=%s AND work_date=%s",
                (int(tenant_id), int(employee_id), work_date),
            )
            r = fetchone(cur)
            return int(r["attendance_id"]) if r else 0
