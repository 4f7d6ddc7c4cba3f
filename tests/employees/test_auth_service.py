import pytest

from src.hr_attendance.hr_attendance.core.enums import Role
from src.hr_attendance.hr_attendance.core.exceptions import AuthenticationError, ForbiddenError


def test_authenticate_success(world):
    s_emp = world.container.auth_service.authenticate("emp001", "admin123")
    assert s_emp.employee_id == 1
    assert s_emp.tenant_id == 1
    assert s_emp.role == Role.ADMIN


@pytest.mark.parametrize("username, password", [("emp001", "wrong"), ("ghost", "x"), ("emp001", "")])
def test_authenticate_rejects_bad_credentials(world, username, password):
    with pytest.raises(AuthenticationError):
        world.container.auth_service.authenticate(username, password)


def test_resolve_checks_tenant_claim(world):
    auth = world.container.auth_service
    assert auth.resolve(employee_id=2, tenant_id=1) == world.alice
    with pytest.raises(AuthenticationError):
        auth.resolve(employee_id=2, tenant_id=2)
    with pytest.raises(AuthenticationError):
        auth.resolve(employee_id=None, tenant_id=1)
    with pytest.raises(AuthenticationError):
        auth.resolve(employee_id=4, tenant_id=1)


def test_require_admin(world):
    auth = world.container.auth_service
    assert auth.require_admin(world.admin) is world.admin
    with pytest.raises(ForbiddenError):
        auth.require_admin(world.alice)
