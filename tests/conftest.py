from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

import pytest

from src.zen_payroll.zen_payroll.core.constants import SEED_EMPLOYEES
from src.zen_payroll.zen_payroll.core.enums import UserRole
from src.zen_payroll.zen_payroll.payroll.advisory import AdvisoryResult, Insight
from src.zen_payroll.zen_payroll.storage.backend import InMemoryStorage
from src.zen_payroll.zen_payroll.storage.codec import employee_from_dict
from src.zen_payroll.zen_payroll.storage.facade import PersistenceFacade
from src.zen_payroll.zen_payroll.users.model import AdminProfile


class TickClock:
    """Deterministic clock: every call is one second after the previous one."""

    def __init__(self, start: datetime = datetime(2024, 3, 15, 9, 0, tzinfo=timezone.utc)):
        self._now = start

    def __call__(self) -> datetime:
        self._now += timedelta(seconds=1)
        return self._now


class FakeAdvisor:
    def __init__(self, result=None, insights=None, error: Exception | None = None):
        self.result = result
        self._insights = insights or []
        self.error = error
        self.calls = 0

    async def explain(self, employee, inputs):
        self.calls += 1
        if self.error:
            raise self.error
        return self.result

    async def insights(self, summary):
        self.calls += 1
        if self.error:
            raise self.error
        return self._insights


def profile(role: UserRole, *, email: str | None = None, employee_id: str | None = None) -> AdminProfile:
    email = email or f"{role.value.lower()}@zenpayroll.ai"
    return AdminProfile(name=role.value, email=email, role=role, avatar="", employee_id=employee_id)


@pytest.fixture
def backend():
    return InMemoryStorage()


@pytest.fixture
def facade(backend):
    return PersistenceFacade(backend, latency_scale=0)


@pytest.fixture
def clock():
    return TickClock()


@pytest.fixture
def arif():
    return employee_from_dict(SEED_EMPLOYEES[0])


@pytest.fixture
def admin():
    return profile(UserRole.ADMIN)


@pytest.fixture
def hr():
    return profile(UserRole.HR)


@pytest.fixture
def accountant():
    return profile(UserRole.ACCOUNTANT, email="acc@zenpayroll.ai")


@pytest.fixture
def employee_session():
    return profile(UserRole.EMPLOYEE, email="arif@techflow.com", employee_id="EMP001")


@pytest.fixture
def fake_advisor():
    return FakeAdvisor(
        result=AdvisoryResult(tax_explanation="BD slab rates applied.", compliance_note="Within limits."),
        insights=[Insight(type="saving", message="Trim overtime", action="Review rosters")],
    )


@pytest.fixture
def today():
    return date(2024, 3, 15)


@pytest.fixture
def make_profile():
    return profile


@pytest.fixture
def make_advisor():
    return FakeAdvisor
