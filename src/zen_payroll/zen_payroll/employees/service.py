from __future__ import annotations

import random
from dataclasses import replace
from datetime import date
from typing import Callable, Iterable, Optional

from ..common.datetime_utils import now_local
from ..common.validators import require_email, require_non_empty
from ..core.enums import Country, EmployeeStatus, UserRole
from ..core.exceptions import NotFoundError, ValidationError
from ..core.permissions import (
    DEPARTMENTS_MANAGE,
    EMPLOYEES_MANAGE,
    ROLES_MANAGE,
    require_permission,
)
from ..storage.facade import PersistenceFacade
from ..users.model import AdminProfile
from .model import Employee, SalaryStructure


class EmployeeService:
    """Use case: employee registry and role management."""

    def __init__(
        self,
        facade: PersistenceFacade,
        *,
        rng: Optional[random.Random] = None,
        today: Callable[[], date] = lambda: now_local().date(),
    ):
        self._facade = facade
        self._rng = rng or random.Random()
        self._today = today

    async def list_for_company(self, company_id: str) -> list[Employee]:
        return await self._facade.employees.list(company_id)

    async def get(self, employee_id: str) -> Employee:
        emp = await self._facade.employees.get(employee_id)
        if not emp:
            raise NotFoundError("Employee does not exist")
        return emp

    async def _require_company(self, company_id: str) -> None:
        if not await self._facade.companies.get(company_id):
            raise ValidationError("Company does not exist")

    async def _new_id(self) -> str:
        taken = {e.id for e in await self._facade.employees.list()}
        while True:
            candidate = f"EMP{self._rng.randint(1000, 9999)}"
            if candidate not in taken:
                return candidate

    async def onboard(
        self,
        session: AdminProfile,
        *,
        company_id: str,
        name: str,
        email: str,
        role: str,
        department: str,
        country: Country = Country.BD,
        basic: float = 0,
        hra: float = 0,
        transport: float = 0,
        medical: float = 0,
    ) -> Employee:
        require_permission(session, EMPLOYEES_MANAGE)
        name = require_non_empty(name, "Name")
        email = require_email(email)
        department = require_non_empty(department, "Department")

        await self._require_company(company_id)

        employee = Employee(
            id=await self._new_id(),
            name=name,
            role=(role or "").strip(),
            department=department,
            status=EmployeeStatus.ACTIVE,
            email=email,
            country=Country(country),
            join_date=self._today(),
            company_id=company_id,
            salary_structure=SalaryStructure(basic=basic, hra=hra, transport=transport, medical=medical),
            system_role=UserRole.EMPLOYEE,
        )
        return await self._facade.employees.add(employee)

    async def update(self, session: AdminProfile, employee: Employee) -> Employee:
        require_permission(session, EMPLOYEES_MANAGE)
        await self._require_company(employee.company_id)
        if not await self._facade.employees.replace(employee):
            raise NotFoundError("Employee does not exist")
        return employee

    async def _change(self, employee_id: str, **changes) -> Employee:
        updated = replace(await self.get(employee_id), **changes)
        if not await self._facade.employees.replace(updated):
            raise NotFoundError("Employee does not exist")
        return updated

    async def update_role(self, session: AdminProfile, employee_id: str, new_role: UserRole) -> Employee:
        require_permission(session, ROLES_MANAGE)
        return await self._change(employee_id, system_role=UserRole(new_role))

    async def set_status(self, session: AdminProfile, employee_id: str, status: EmployeeStatus) -> Employee:
        require_permission(session, ROLES_MANAGE)
        return await self._change(employee_id, status=EmployeeStatus(status))

    async def toggle_activation(self, session: AdminProfile, employee_id: str) -> Employee:
        require_permission(session, ROLES_MANAGE)
        current = await self.get(employee_id)
        nxt = EmployeeStatus.INACTIVE if current.status == EmployeeStatus.ACTIVE else EmployeeStatus.ACTIVE
        return await self.set_status(session, employee_id, nxt)

    async def revoke_access(self, session: AdminProfile, employee_id: str) -> None:
        require_permission(session, ROLES_MANAGE)
        if not await self._facade.employees.discard(employee_id):
            raise NotFoundError("Employee does not exist")

    @staticmethod
    def search(employees: Iterable[Employee], term: str) -> list[Employee]:
        t = (term or "").strip().lower()
        if not t:
            return list(employees)
        return [
            e
            for e in employees
            if t in e.name.lower() or t in e.email.lower() or t in e.role.lower() or t in e.department.lower()
        ]


class DepartmentService:
    def __init__(self, facade: PersistenceFacade):
        self._facade = facade

    async def list_departments(self) -> list[str]:
        return await self._facade.departments.list()

    async def add_department(self, session: AdminProfile, name: str) -> list[str]:
        require_permission(session, DEPARTMENTS_MANAGE)
        await self._facade.departments.add(require_non_empty(name, "Department"))
        return await self._facade.departments.list()

    async def delete_department(self, session: AdminProfile, name: str) -> list[str]:
        require_permission(session, DEPARTMENTS_MANAGE)
        await self._facade.departments.remove(name)
        return await self._facade.departments.list()
