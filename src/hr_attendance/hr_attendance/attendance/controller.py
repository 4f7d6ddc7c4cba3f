from __future__ import annotations

from flask import Flask, g, request

from ..common.api import json_body, make_guards, ok
from ..common.datetime_utils import format_year_month, now_local, parse_iso_date
from ..container import Container
from ..core.exceptions import ValidationError


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = make_guards(container.auth_service)

    def _current_month() -> str:
        today = now_local().date()
        return format_year_month(today.year, today.month)

    # ---- Admin views ----

    @app.route("/admin/attendance/daily", methods=["GET"], endpoint="admin_attendance_daily")
    @admin_required
    def admin_attendance_daily():
        raw_date = request.args.get("date")
        work_date = parse_iso_date(raw_date) if raw_date else now_local().date()

        view = container.daily_builder.build_daily(
            tenant_id=g.employee.tenant_id,
            work_date=work_date,
            branch=request.args.get("branch"),
            department=request.args.get("department"),
            employee_code=request.args.get("employeeId"),
        )
        return ok([row.to_dict() for row in view.rows], count=len(view.rows), counts=view.counts)

    @app.route("/admin/attendance/range", methods=["GET"], endpoint="admin_attendance_range")
    @admin_required
    def admin_attendance_range():
        from_date, to_date = request.args.get("fromDate"), request.args.get("toDate")
        if not from_date or not to_date:
            raise ValidationError("fromDate and toDate are required")

        rows = container.daily_builder.build_range(
            tenant_id=g.employee.tenant_id,
            start=parse_iso_date(from_date),
            end=parse_iso_date(to_date),
            branch=request.args.get("branch"),
            department=request.args.get("department"),
            employee_code=request.args.get("employeeId"),
        )
        return ok([row.to_dict() for row in rows], count=len(rows))

    @app.route("/admin/attendance/monthly", methods=["GET"], endpoint="admin_attendance_monthly")
    @admin_required
    def admin_attendance_monthly():
        view = container.monthly_aggregator.build_monthly(
            tenant_id=g.employee.tenant_id,
            year_month=request.args.get("month") or _current_month(),
            employee_code=request.args.get("employeeId"),
            branch=request.args.get("branch"),
            department=request.args.get("department"),
        )
        return ok(
            [m.to_summary_dict() for m in view.per_employee],
            includeWeekends=view.include_weekends,
            count=len(view.per_employee),
        )

    @app.route(
        "/admin/attendance/monthly/<employee_code>/calendar",
        methods=["GET"],
        endpoint="admin_attendance_calendar",
    )
    @admin_required
    def admin_attendance_calendar(employee_code: str):
        result = container.monthly_aggregator.build_calendar(
            tenant_id=g.employee.tenant_id,
            employee_code=employee_code,
            year_month=request.args.get("month") or _current_month(),
        )
        return ok(result.to_calendar_dict())

    @app.route("/admin/attendance/employee/<employee_code>", methods=["GET"], endpoint="admin_employee_attendance")
    @admin_required
    def admin_employee_attendance(employee_code: str):
        data = container.attendance_service.employee_details(
            tenant_id=g.employee.tenant_id,
            employee_code=employee_code,
            days=request.args.get("days"),
        )
        return ok(data)

    @app.route("/admin/attendance/manual-mark", methods=["POST"], endpoint="admin_manual_mark")
    @admin_required
    def admin_manual_mark():
        body = json_body()
        record = container.correction_service.mark_present(
            g.employee,
            employee_code=body.get("employeeId", ""),
            work_date=body.get("date", ""),
            status=body.get("status", "present"),
            work_hours=body.get("workHours"),
        )
        return ok(record.to_dict(), message="Attendance marked as present")

    # ---- Employee self-service ----

    @app.route("/attendance/check-in", methods=["POST"], endpoint="attendance_check_in")
    @login_required
    def attendance_check_in():
        body = request.get_json(silent=True) or {}
        record = container.attendance_service.check_in(
            g.employee, location=body.get("location"), notes=body.get("notes")
        )
        return ok(record.to_dict(), message="Checked in")

    @app.route("/attendance/check-out", methods=["POST"], endpoint="attendance_check_out")
    @login_required
    def attendance_check_out():
        body = request.get_json(silent=True) or {}
        record = container.attendance_service.check_out(g.employee, notes=body.get("notes"))
        return ok(record.to_dict(), message="Checked out")

    @app.route("/attendance/productivity", methods=["POST"], endpoint="attendance_productivity")
    @login_required
    def attendance_productivity():
        body = json_body()
        record = container.attendance_service.rate_productivity(g.employee, body.get("rating"))
        return ok(record.to_dict(), message="Productivity rating saved")

    @app.route("/attendance/today", methods=["GET"], endpoint="attendance_today")
    @login_required
    def attendance_today():
        return ok(container.attendance_service.today(g.employee))

    @app.route("/attendance/history", methods=["GET"], endpoint="attendance_history")
    @login_required
    def attendance_history():
        return ok(container.attendance_service.history(g.employee, days=request.args.get("days")))
