from __future__ import annotations

from typing import Sequence

from ..core.constants import DEFAULT_STANDARD_CHECK_IN
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, normalize_mysql_time
from .model import TenantAttendanceConfig
from .repository import SettingsRepository


class MySQLSettingsRepository(SettingsRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list_for_tenant(self, tenant_id: int) -> Sequence[TenantAttendanceConfig]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT tenant_id, branch_id, include_weekends, standard_check_in, late_threshold_minutes
                FROM attendance_settings
                WHERE tenant_id=%s
                """,
                (int(tenant_id),),
            )
            return [
                TenantAttendanceConfig(
                    tenant_id=int(r["tenant_id"]),
                    branch_id=int(r["branch_id"]) if r.get("branch_id") is not None else None,
                    include_weekends=bool(r["include_weekends"]),
                    standard_check_in=normalize_mysql_time(r["standard_check_in"]) or DEFAULT_STANDARD_CHECK_IN,
                    late_threshold_minutes=int(r["late_threshold_minutes"]),
                )
                for r in fetchall(cur)
            ]

    def upsert(self, config: TenantAttendanceConfig) -> None:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_settings
                    (tenant_id, branch_id, include_weekends, standard_check_in, late_threshold_minutes)
                VALUES(%s,%s,%s,%s,%s)
                ON DUPLICATE KEY UPDATE
                    include_weekends=VALUES(include_weekends),
                    standard_check_in=VALUES(standard_check_in),
                    late_threshold_minutes=VALUES(late_threshold_minutes)
                """,
                (
                    int(config.tenant_id),
                    config.branch_id,
                    1 if config.include_weekends else 0,
                    config.standard_check_in,
                    int(config.late_threshold_minutes),
                ),
            )
