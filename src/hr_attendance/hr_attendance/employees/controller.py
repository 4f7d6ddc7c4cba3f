from __future__ import annotations

import logging

from flask import Flask, session

from ..common.api import json_body, ok
from ..container import Container

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    @app.route("/auth/login", methods=["POST"], endpoint="login")
    def login():
        body = json_body()
        s_emp = container.auth_service.authenticate(body.get("username", ""), body.get("password", ""))

        session.clear()
        session.permanent = bool(body.get("rememberMe"))

        session["employee_id"] = s_emp.employee_id
        session["tenant_id"] = s_emp.tenant_id
        session["role"] = s_emp.role.value

        logger.info("login employee=%s tenant=%s", s_emp.employee_code, s_emp.tenant_id)
        return ok(
            {
                "employeeId": s_emp.employee_code,
                "tenantId": s_emp.tenant_id,
                "name": s_emp.full_name,
                "role": s_emp.role.value,
            }
        )

    @app.route("/auth/logout", methods=["POST"], endpoint="logout")
    def logout():
        session.clear()
        return ok(message="Logged out")
