import pytest

from src.zen_payroll.zen_payroll.core.enums import UserRole
from src.zen_payroll.zen_payroll.core.exceptions import AuthorizationError
from src.zen_payroll.zen_payroll.core.permissions import (
    COMPANIES_MANAGE,
    LEAVES_APPROVE,
    PAYROLL_RUN,
    allowed_tabs,
    has_permission,
    require_permission,
)
from src.zen_payroll.zen_payroll.users.model import ANONYMOUS


def test_role_matrix():
    assert has_permission(UserRole.ADMIN, COMPANIES_MANAGE)
    assert not has_permission(UserRole.HR, COMPANIES_MANAGE)
    assert has_permission(UserRole.ACCOUNTANT, PAYROLL_RUN)
    assert not has_permission(UserRole.HR, PAYROLL_RUN)
    assert has_permission(UserRole.HR, LEAVES_APPROVE)
    assert not has_permission(UserRole.EMPLOYEE, LEAVES_APPROVE)


def test_tabs_per_role():
    assert allowed_tabs(UserRole.EMPLOYEE, has_employee_record=True) == ["leave-request", "leave-history", "profile"]
    assert "role-management" in allowed_tabs(UserRole.ADMIN)
    assert "payroll" not in allowed_tabs(UserRole.HR)
    assert "leave-management" not in allowed_tabs(UserRole.ACCOUNTANT)


def test_anonymous_is_never_allowed(make_profile):
    with pytest.raises(AuthorizationError):
        require_permission(ANONYMOUS, COMPANIES_MANAGE)

    require_permission(make_profile(UserRole.ADMIN), COMPANIES_MANAGE)
