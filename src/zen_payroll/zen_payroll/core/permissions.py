"""Role to permission map.

Every mutating service call checks the caller's role here; navigation
gating in clients is derived from the same table.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .enums import UserRole
from .exceptions import AuthorizationError

if TYPE_CHECKING:
    from ..users.model import AdminProfile

DASHBOARD_VIEW = "dashboard.view"
EMPLOYEES_VIEW = "employees.view"
EMPLOYEES_MANAGE = "employees.manage"
DEPARTMENTS_MANAGE = "departments.manage"
PAYROLL_RUN = "payroll.run"
LEDGER_VIEW = "ledger.view"
INSIGHTS_VIEW = "insights.view"
LEAVES_APPROVE = "leaves.approve"
LEAVES_REQUEST = "leaves.request"
ROLES_MANAGE = "roles.manage"
COMPANIES_MANAGE = "companies.manage"

ROLE_PERMISSIONS: dict[UserRole, frozenset[str]] = {
    UserRole.ADMIN: frozenset(
        {
            DASHBOARD_VIEW,
            EMPLOYEES_VIEW,
            EMPLOYEES_MANAGE,
            DEPARTMENTS_MANAGE,
            PAYROLL_RUN,
            LEDGER_VIEW,
            INSIGHTS_VIEW,
            LEAVES_APPROVE,
            LEAVES_REQUEST,
            ROLES_MANAGE,
            COMPANIES_MANAGE,
        }
    ),
    UserRole.HR: frozenset(
        {
            DASHBOARD_VIEW,
            EMPLOYEES_VIEW,
            EMPLOYEES_MANAGE,
            DEPARTMENTS_MANAGE,
            INSIGHTS_VIEW,
            LEAVES_APPROVE,
            LEAVES_REQUEST,
        }
    ),
    UserRole.ACCOUNTANT: frozenset({DASHBOARD_VIEW, EMPLOYEES_VIEW, PAYROLL_RUN, LEDGER_VIEW, LEAVES_REQUEST}),
    UserRole.EMPLOYEE: frozenset({LEAVES_REQUEST}),
}

# Navigation sections and the permission that exposes each of them.
TABS: tuple[tuple[str, str], ...] = (
    ("dashboard", DASHBOARD_VIEW),
    ("employees", EMPLOYEES_MANAGE),
    ("payroll", PAYROLL_RUN),
    ("ledger", LEDGER_VIEW),
    ("reports", INSIGHTS_VIEW),
    ("leave-management", LEAVES_APPROVE),
    ("role-management", ROLES_MANAGE),
)


def has_permission(role: UserRole, permission: str) -> bool:
    return permission in ROLE_PERMISSIONS.get(UserRole(role), frozenset())


def require_permission(profile: "AdminProfile", permission: str) -> None:
    if not profile.is_logged_in:
        raise AuthorizationError("Please sign in to continue")
    if not has_permission(profile.role, permission):
        raise AuthorizationError(f"Role {profile.role.value} is not allowed to perform {permission}")


def allowed_tabs(role: UserRole, *, has_employee_record: bool = False) -> list[str]:
    tabs = [tab for tab, perm in TABS if has_permission(role, perm)]
    if has_employee_record:
        tabs += ["leave-request", "leave-history"]
    tabs.append("profile")
    return tabs
