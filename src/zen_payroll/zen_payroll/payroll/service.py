from __future__ import annotations

import csv
import io
import logging
from dataclasses import replace
from datetime import datetime
from typing import Callable, Iterable, Optional

from ..common.datetime_utils import epoch_millis, month_abbrev, now_utc
from ..companies.model import Company
from ..core.constants import FALLBACK_TAX_EXPLANATION
from ..core.enums import PayrollStatus, UserRole
from ..core.exceptions import AuthorizationError, ValidationError
from ..core.permissions import PAYROLL_RUN, require_permission
from ..employees.model import Employee
from ..storage.facade import PersistenceFacade
from ..users.model import AdminProfile
from .advisory import NullPayrollAdvisor, PayrollAdvisor
from .calculator.base import PayrollCalculator
from .calculator.standard_calculator import StandardPayrollCalculator
from .leave_sync import LeaveSyncSuggestion, sync_unpaid_leave
from .model import PayrollInputs, PayrollRecord, PayslipPreview

logger = logging.getLogger(__name__)

CSV_HEADERS = ["ID", "Employee", "Month", "Year", "Gross", "Net", "Status"]


class PayrollService:
    def __init__(
        self,
        facade: PersistenceFacade,
        *,
        calculator: Optional[PayrollCalculator] = None,
        advisor: Optional[PayrollAdvisor] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._facade = facade
        self._calculator = calculator or StandardPayrollCalculator()
        self._advisor = advisor or NullPayrollAdvisor()
        self._clock = clock

    def calculate(self, employee: Employee, inputs: PayrollInputs) -> PayslipPreview:
        return self._calculator.calculate(employee, inputs)

    async def preview(
        self,
        session: AdminProfile,
        employee: Employee,
        inputs: PayrollInputs,
        *,
        use_advisory: bool = True,
    ) -> PayslipPreview:
        """Local calculation, optionally annotated by the advisory service."""
        require_permission(session, PAYROLL_RUN)
        preview = self.calculate(employee, inputs)
        if not use_advisory:
            return preview

        try:
            advice = await self._advisor.explain(employee, inputs)
        except Exception:
            logger.exception("Payroll advisory failed for %s", employee.id)
            advice = None
        if advice is None:
            return preview

        breakdown = dict(preview.breakdown)
        breakdown["taxExplanation"] = advice.tax_explanation or FALLBACK_TAX_EXPLANATION
        warnings = list(preview.warnings)
        if advice.warning:
            warnings.append(advice.warning)
            breakdown["warning"] = "; ".join(warnings)
        if advice.compliance_note:
            breakdown["complianceNote"] = advice.compliance_note
        return replace(preview, breakdown=breakdown, warnings=tuple(warnings))

    async def suggest_unpaid_leave(self, session: AdminProfile, employee: Employee) -> LeaveSyncSuggestion:
        require_permission(session, PAYROLL_RUN)
        requests = await self._facade.leave_requests.list(employee.id)
        return sync_unpaid_leave(employee, requests)

    async def disburse(
        self,
        session: AdminProfile,
        *,
        employee: Employee,
        company: Company,
        inputs: PayrollInputs,
        preview: Optional[PayslipPreview] = None,
    ) -> PayrollRecord:
        """Finalize a payslip and append it to the ledger."""
        require_permission(session, PAYROLL_RUN)
        if employee.company_id != company.id:
            raise ValidationError("Employee does not belong to the selected company")

        preview = preview or self.calculate(employee, inputs)
        now = self._clock()
        record = PayrollRecord(
            id=f"PAY{epoch_millis(now)}",
            employee_id=employee.id,
            company_id=company.id,
            month=month_abbrev(now.date()),
            year=now.year,
            gross_salary=preview.gross_salary,
            net_salary=preview.net_salary,
            tax=preview.tax_amount,
            vat=preview.vat_amount,
            other_deductions=preview.leave_deduction,
            bonuses=inputs.bonus,
            overtime_hours=inputs.overtime_hours,
            overtime_rate=inputs.overtime_rate,
            unpaid_leaves=inputs.unpaid_leave_days,
            unpaid_leave_rate=inputs.unpaid_leave_rate,
            tax_percent=inputs.tax_percent,
            vat_percent=inputs.vat_percent,
            status=PayrollStatus.PAID,
            breakdown=dict(preview.breakdown),
            generated_at=now,
        )
        saved = await self._facade.payroll_records.add(record)
        logger.info("Disbursed %s to %s (%s %s)", record.net_salary, employee.id, record.month, record.year)
        return saved

    async def list_records(self, session: AdminProfile, company_id: str) -> list[PayrollRecord]:
        """Company ledger; employees only see their own payslips."""
        if not session.is_logged_in:
            raise AuthorizationError("Please sign in to continue")
        records = await self._facade.payroll_records.list(company_id)
        if session.role == UserRole.EMPLOYEE:
            records = [r for r in records if r.employee_id == session.employee_id]
        return records

    @staticmethod
    def ledger(
        records: Iterable[PayrollRecord],
        employees: Iterable[Employee],
        *,
        status: Optional[PayrollStatus] = None,
        term: str = "",
    ) -> list[PayrollRecord]:
        """Filter by status and search by employee name or record id, newest first."""
        names = {e.id: e.name.lower() for e in employees}
        t = (term or "").strip().lower()
        out = [
            r
            for r in records
            if (status is None or r.status == status)
            and (not t or t in names.get(r.employee_id, "unknown") or t in r.id.lower())
        ]
        out.sort(key=lambda r: r.generated_at, reverse=True)
        return out

    @staticmethod
    def export_csv(records: Iterable[PayrollRecord]) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf, lineterminator="\n")
        writer.writerow(CSV_HEADERS)
        for r in records:
            writer.writerow([r.id, r.employee_id, r.month, r.year, r.gross_salary, r.net_salary, r.status.value])
        return buf.getvalue()
