from __future__ import annotations

import random
from dataclasses import replace

import pytest

from src.zen_payroll.zen_payroll.core.enums import Country, EmployeeStatus, UserRole
from src.zen_payroll.zen_payroll.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from src.zen_payroll.zen_payroll.employees.service import DepartmentService, EmployeeService


@pytest.fixture
def service(facade, today):
    return EmployeeService(facade, rng=random.Random(7), today=lambda: today)


async def _onboard(service, session, **overrides):
    fields = dict(
        company_id="C001",
        name="Nadia Islam",
        email="Nadia@TechFlow.com",
        role="QA Engineer",
        department="Engineering",
        country=Country.BD,
        basic=40000,
        hra=15000,
    )
    fields.update(overrides)
    return await service.onboard(session, **fields)


@pytest.mark.asyncio
async def test_onboard_creates_active_employee(service, facade, hr, today):
    emp = await _onboard(service, hr)

    assert emp.id.startswith("EMP") and len(emp.id) == 7
    assert emp.status == EmployeeStatus.ACTIVE
    assert emp.system_role == UserRole.EMPLOYEE
    assert emp.email == "nadia@techflow.com"
    assert emp.join_date == today
    assert emp.salary_structure.basic == 40000
    assert emp in await facade.employees.list("C001")


@pytest.mark.asyncio
async def test_onboard_validates_input(service, hr):
    with pytest.raises(ValidationError):
        await _onboard(service, hr, name="")
    with pytest.raises(ValidationError):
        await _onboard(service, hr, email="not-an-email")
    with pytest.raises(ValidationError):
        await _onboard(service, hr, company_id="C404")


@pytest.mark.asyncio
async def test_accountant_and_employee_cannot_onboard(service, accountant, employee_session):
    with pytest.raises(AuthorizationError):
        await _onboard(service, accountant)
    with pytest.raises(AuthorizationError):
        await _onboard(service, employee_session)


@pytest.mark.asyncio
async def test_role_changes_are_admin_only(service, admin, hr):
    with pytest.raises(AuthorizationError):
        await service.update_role(hr, "EMP001", UserRole.HR)

    updated = await service.update_role(admin, "EMP001", UserRole.HR)
    assert updated.system_role == UserRole.HR
    assert (await service.get("EMP001")).system_role == UserRole.HR


@pytest.mark.asyncio
async def test_toggle_activation_flips_status(service, admin):
    assert (await service.toggle_activation(admin, "EMP001")).status == EmployeeStatus.INACTIVE
    assert (await service.toggle_activation(admin, "EMP001")).status == EmployeeStatus.ACTIVE


@pytest.mark.asyncio
async def test_toggle_activation_checks_role_before_lookup(service, hr):
    for employee_id in ("EMP001", "EMP404"):
        with pytest.raises(AuthorizationError):
            await service.toggle_activation(hr, employee_id)


@pytest.mark.asyncio
async def test_update_requires_existing_company(service, facade, hr, arif):
    with pytest.raises(ValidationError):
        await service.update(hr, replace(arif, company_id="C404"))
    assert (await facade.employees.get("EMP001")).company_id == "C001"

    moved = await service.update(hr, replace(arif, company_id="C002"))
    assert (await facade.employees.get("EMP001")) == moved


@pytest.mark.asyncio
async def test_revoke_access_removes_employee(service, facade, admin):
    await service.revoke_access(admin, "EMP002")

    assert [e.id for e in await facade.employees.list()] == ["EMP001"]
    with pytest.raises(NotFoundError):
        await service.revoke_access(admin, "EMP002")


@pytest.mark.asyncio
async def test_search_matches_name_email_title_and_department(facade):
    employees = await facade.employees.list()

    assert [e.id for e in EmployeeService.search(employees, "ARIF")] == ["EMP001"]
    assert [e.id for e in EmployeeService.search(employees, "operations")] == ["EMP002"]
    assert EmployeeService.search(employees, "") == employees


@pytest.mark.asyncio
async def test_departments_add_and_delete(facade, hr, accountant):
    service = DepartmentService(facade)

    assert (await service.add_department(hr, "Legal"))[-1] == "Legal"
    assert "Legal" not in await service.delete_department(hr, "Legal")
    with pytest.raises(AuthorizationError):
        await service.add_department(accountant, "Audit")
