from __future__ import annotations

from dataclasses import replace
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import AVATAR_URL_TEMPLATE
from ..core.enums import EmployeeStatus, UserRole
from ..core.exceptions import AuthenticationError, ValidationError
from ..storage.facade import PersistenceFacade
from .model import AdminProfile
from .session_store import SessionStore

# email, password, role, display name
DEMO_ACCOUNTS = (
    ("admin@zenpayroll.ai", "admin123", UserRole.ADMIN, "Master Admin"),
    ("hr@zenpayroll.ai", "hr123", UserRole.HR, "HR Manager"),
    ("acc@zenpayroll.ai", "acc123", UserRole.ACCOUNTANT, "Senior Accountant"),
)


def avatar_for(email: str) -> str:
    return AVATAR_URL_TEMPLATE.format(email=email)


class AuthService:
    """Use case: sign in / sign up / sign out.

    Note: The returned AdminProfile is the session; callers pass it to every
    other service instead of reading a global.
    """

    def __init__(
        self,
        facade: PersistenceFacade,
        sessions: SessionStore,
        *,
        employee_password: Optional[str] = None,
    ):
        self._facade = facade
        self._sessions = sessions
        self._accounts = {
            email: (generate_password_hash(password), role, name) for email, password, role, name in DEMO_ACCOUNTS
        }
        self._employee_password_hash = generate_password_hash(employee_password) if employee_password else None

    async def authenticate(self, email: str, password: str) -> AdminProfile:
        email = (email or "").strip().lower()
        account = self._accounts.get(email)
        if account:
            password_hash, role, name = account
            if not check_password_hash(password_hash, password or ""):
                raise AuthenticationError("Invalid email or password")
            profile = AdminProfile(name=name, email=email, role=role, avatar=avatar_for(email))
        else:
            profile = await self._authenticate_employee(email, password)

        await self._sessions.save(profile)
        return profile

    async def _authenticate_employee(self, email: str, password: str) -> AdminProfile:
        if not self._employee_password_hash:
            raise AuthenticationError("Access denied. Use the demo credentials.")
        employees = await self._facade.employees.list()
        emp = next((e for e in employees if e.email.lower() == email), None)
        if not emp or emp.status != EmployeeStatus.ACTIVE:
            raise AuthenticationError("Invalid email or password")
        if not check_password_hash(self._employee_password_hash, password or ""):
            raise AuthenticationError("Invalid email or password")
        return AdminProfile(
            name=emp.name,
            email=emp.email,
            role=emp.system_role,
            avatar=avatar_for(emp.email),
            employee_id=emp.id,
        )

    async def register(self, *, name: str, email: str, password: str, role: UserRole) -> AdminProfile:
        email = require_email(email)
        require_min_length(password, "Password", 6)
        role = UserRole(role)
        if role == UserRole.ADMIN:
            raise ValidationError("Admin accounts cannot be created from sign-up")
        if email in self._accounts:
            raise ValidationError("Email is already registered")

        profile = AdminProfile(
            name=(name or "").strip() or "New User",
            email=email,
            role=role,
            avatar=avatar_for(email),
        )
        await self._sessions.save(profile)
        return profile

    async def restore(self) -> Optional[AdminProfile]:
        return await self._sessions.restore()

    async def sign_out(self) -> None:
        await self._sessions.clear()


class ProfileService:
    def __init__(self, sessions: SessionStore):
        self._sessions = sessions

    async def update(
        self,
        profile: AdminProfile,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> AdminProfile:
        updated = replace(
            profile,
            name=require_non_empty(name, "Name") if name is not None else profile.name,
            email=require_email(email) if email is not None else profile.email,
            avatar=avatar.strip() if avatar is not None else profile.avatar,
            is_logged_in=True,
        )
        await self._sessions.save(updated)
        return updated
