from __future__ import annotations

from flask import Flask, g, request

from ..common.api import json_body, make_guards, ok
from ..common.validators import optional_int
from ..container import Container


def register(app: Flask, container: Container) -> None:
    _, admin_required = make_guards(container.auth_service)

    @app.route("/admin/attendance/settings", methods=["GET"], endpoint="admin_get_settings")
    @admin_required
    def admin_get_settings():
        branch_id = optional_int(request.args.get("branchId"), "branchId")
        return ok(container.settings_service.get(g.employee.tenant_id, branch_id).to_dict())

    @app.route("/admin/attendance/settings", methods=["PUT"], endpoint="admin_update_settings")
    @admin_required
    def admin_update_settings():
        body = json_body()
        branch_id = optional_int(request.args.get("branchId", body.get("branchId")), "branchId")
        config = container.settings_service.update(
            g.employee,
            branch_id=branch_id,
            include_weekends=body.get("includeWeekends"),
            standard_check_in=body.get("standardCheckInTime"),
            late_threshold_minutes=body.get("lateThresholdMinutes"),
        )
        return ok(config.to_dict(), message="Attendance settings updated")
