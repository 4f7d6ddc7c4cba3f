"""Shared helpers for the JSON controllers.

Every response has the shape ``{"success": bool, ...}``; errors carry a
``message``. Domain errors map to their ``status_code``.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import Any, Callable, Tuple

from flask import Flask, g, jsonify, request, session
from werkzeug.exceptions import HTTPException

from ..core.exceptions import DomainError, ValidationError

logger = logging.getLogger(__name__)


def ok(data: Any = None, *, status: int = 200, **extra: Any):
    body = {"success": True}
    if data is not None:
        body["data"] = data
    body.update(extra)
    return jsonify(body), status


def fail(message: str, status: int):
    return jsonify({"success": False, "message": message}), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError("Request body must be a JSON object")
    return data


def register_error_handlers(app: Flask) -> None:
    @app.errorhandler(DomainError)
    def _domain_error(e: DomainError):
        if e.status_code >= 500:
            logger.error("%s on %s %s: %s", type(e).__name__, request.method, request.path, e)
        return fail(str(e), e.status_code)

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        return fail(e.description or e.name, e.code or 500)

    @app.errorhandler(Exception)
    def _unhandled(e: Exception):
        logger.exception("unhandled error on %s %s", request.method, request.path)
        return fail("Internal server error", 500)


def make_guards(auth_service) -> Tuple[Callable, Callable]:
    """Build (login_required, admin_required) decorators.

    Both resolve the session to the acting employee and expose it as
    ``g.employee``; the tenant always comes from that employee.
    """

    def login_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            g.employee = auth_service.resolve(
                employee_id=session.get("employee_id"),
                tenant_id=session.get("tenant_id"),
            )
            return view(*args, **kwargs)

        return wrapper

    def admin_required(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            employee = auth_service.resolve(
                employee_id=session.get("employee_id"),
                tenant_id=session.get("tenant_id"),
            )
            g.employee = auth_service.require_admin(employee)
            return view(*args, **kwargs)

        return wrapper

    return login_required, admin_required
