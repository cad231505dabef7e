from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..core.enums import PayrollStatus


@dataclass(frozen=True)
class PayrollInputs:
    """Period-specific adjustments entered for one payroll run."""

    overtime_hours: float = 0
    overtime_rate: float = 0
    bonus: float = 0
    unpaid_leave_days: float = 0
    unpaid_leave_rate: float = 0
    tax_percent: float = 0
    vat_percent: float = 0


@dataclass(frozen=True)
class PayslipPreview:
    base_pay: float
    overtime_total: float
    leave_deduction: float
    gross_salary: float
    tax_amount: int
    vat_amount: int
    net_salary: float
    breakdown: dict[str, Any] = field(default_factory=dict)
    warnings: tuple[str, ...] = ()


@dataclass(frozen=True)
class PayrollRecord:
    id: str
    employee_id: str
    company_id: str
    month: str
    year: int
    gross_salary: float
    net_salary: float
    tax: float
    other_deductions: float
    bonuses: float
    overtime_hours: float
    overtime_rate: float
    unpaid_leaves: float
    unpaid_leave_rate: float
    tax_percent: float
    vat_percent: float
    status: PayrollStatus
    breakdown: dict[str, Any]
    generated_at: datetime
    vat: Optional[float] = None
