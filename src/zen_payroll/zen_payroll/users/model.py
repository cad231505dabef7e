from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from ..core.enums import UserRole


@dataclass(frozen=True)
class AdminProfile:
    """The currently authenticated actor.

    Passed explicitly into services; the persisted mirror lives under the
    session key of the storage backend.
    """

    name: str
    email: str
    role: UserRole
    avatar: str
    is_logged_in: bool = True
    employee_id: Optional[str] = None


ANONYMOUS = AdminProfile(name="", email="", role=UserRole.ADMIN, avatar="", is_logged_in=False)
