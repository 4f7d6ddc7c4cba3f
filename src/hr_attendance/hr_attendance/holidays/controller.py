from __future__ import annotations

from flask import Flask, g, request

from ..common.api import json_body, make_guards, ok
from ..common.datetime_utils import now_local
from ..container import Container


def register(app: Flask, container: Container) -> None:
    _, admin_required = make_guards(container.auth_service)

    @app.route("/admin/attendance/holidays", methods=["POST"], endpoint="admin_create_holiday")
    @admin_required
    def admin_create_holiday():
        body = json_body()
        holiday = container.holiday_service.create(
            g.employee,
            holiday_date=body.get("date", ""),
            name=body.get("name", ""),
            description=body.get("description"),
            branch_id=body.get("branchId"),
        )
        return ok(holiday.to_dict(), status=201, message="Holiday created")

    @app.route("/admin/attendance/holidays/<holiday_id>", methods=["DELETE"], endpoint="admin_delete_holiday")
    @admin_required
    def admin_delete_holiday(holiday_id: str):
        removed = container.holiday_service.delete(g.employee, holiday_id)
        return ok(message="Holiday deleted" if removed else "Holiday already removed")

    @app.route("/admin/attendance/holiday-calendar", methods=["GET"], endpoint="admin_holiday_calendar")
    @admin_required
    def admin_holiday_calendar():
        today = now_local().date()
        data = container.holiday_service.calendar(
            tenant_id=g.employee.tenant_id,
            year=request.args.get("year") or today.year,
            month=request.args.get("month") or today.month,
            branch_id=request.args.get("branchId"),
        )
        return ok(data)
