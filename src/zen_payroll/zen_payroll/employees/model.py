from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from ..core.enums import Country, EmployeeStatus, SalaryItemType, UserRole


@dataclass(frozen=True)
class CustomSalaryItem:
    id: str
    name: str
    amount: float
    type: SalaryItemType


@dataclass(frozen=True)
class SalaryStructure:
    basic: float
    hra: float
    transport: float
    medical: float
    custom_items: tuple[CustomSalaryItem, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Employee:
    """Domain entity: Employee.

    Note: Plain data object. `system_role` gates what the employee may do when
    signed in; `role` is the job title.
    """

    id: str
    name: str
    role: str
    department: str
    status: EmployeeStatus
    email: str
    country: Country
    join_date: date
    company_id: str
    salary_structure: SalaryStructure
    system_role: UserRole = UserRole.EMPLOYEE
