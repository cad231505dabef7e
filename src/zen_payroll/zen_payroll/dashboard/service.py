from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from typing import Callable, Iterable, Optional, Sequence

from ..common.datetime_utils import last_n_month_abbrevs, now_local
from ..core.enums import EmployeeStatus, UserRole
from ..core.permissions import INSIGHTS_VIEW, require_permission
from ..employees.model import Employee
from ..payroll.advisory import Insight, NullPayrollAdvisor, PayrollAdvisor
from ..payroll.model import PayrollRecord
from ..users.model import AdminProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardStats:
    total_payroll: float
    active_employees: int
    average_salary: float
    record_count: int


@dataclass(frozen=True)
class ChartPoint:
    month: str
    total: float


@dataclass(frozen=True)
class DepartmentShare:
    label: str
    cost: float
    percent: float


def _amount(session: AdminProfile, record: PayrollRecord) -> float:
    # Employees look at what they received, everybody else at company cost.
    return record.net_salary if session.role == UserRole.EMPLOYEE else record.gross_salary


class DashboardService:
    """Read-only aggregates over the in-memory mirrors of the current company."""

    def __init__(
        self,
        *,
        advisor: Optional[PayrollAdvisor] = None,
        today: Callable[[], date] = lambda: now_local().date(),
    ):
        self._advisor = advisor or NullPayrollAdvisor()
        self._today = today

    def stats(
        self, session: AdminProfile, employees: Iterable[Employee], records: Sequence[PayrollRecord]
    ) -> DashboardStats:
        total = sum(_amount(session, r) for r in records)
        return DashboardStats(
            total_payroll=total,
            active_employees=sum(1 for e in employees if e.status == EmployeeStatus.ACTIVE),
            average_salary=total / len(records) if records else 0,
            record_count=len(records),
        )

    def monthly_chart(
        self, session: AdminProfile, records: Iterable[PayrollRecord], *, months: int = 6
    ) -> list[ChartPoint]:
        totals: dict[str, float] = defaultdict(float)
        for r in records:
            totals[r.month] += _amount(session, r)
        return [ChartPoint(month=m, total=totals.get(m, 0)) for m in last_n_month_abbrevs(self._today(), months)]

    @staticmethod
    def department_breakdown(employees: Iterable[Employee], *, top: int = 5) -> list[DepartmentShare]:
        costs: dict[str, float] = defaultdict(float)
        for e in employees:
            costs[e.department] += e.salary_structure.basic + e.salary_structure.hra
        grand_total = sum(costs.values())
        shares = [
            DepartmentShare(label=dept, cost=cost, percent=round(cost / grand_total * 100) if grand_total else 0)
            for dept, cost in costs.items()
        ]
        shares.sort(key=lambda s: s.cost, reverse=True)
        return shares[:top]

    def insights_summary(self, employees: Sequence[Employee], records: Iterable[PayrollRecord]) -> dict:
        department_cost: dict[str, float] = defaultdict(float)
        for e in employees:
            department_cost[e.department] += e.salary_structure.basic * 1.5  # rough loaded-cost estimate
        return {
            "totalEmployees": len(employees),
            "totalMonthlyCost": sum(r.gross_salary for r in records),
            "departmentCost": dict(department_cost),
        }

    async def insights(
        self, session: AdminProfile, employees: Sequence[Employee], records: Iterable[PayrollRecord]
    ) -> list[Insight]:
        require_permission(session, INSIGHTS_VIEW)
        summary = self.insights_summary(employees, records)
        try:
            return await self._advisor.insights(summary)
        except Exception:
            logger.exception("Payroll insights failed")
            return []
