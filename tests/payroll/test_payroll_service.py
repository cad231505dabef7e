from __future__ import annotations

from dataclasses import replace
from datetime import date

import pytest

from src.zen_payroll.zen_payroll.companies.model import Company
from src.zen_payroll.zen_payroll.core.constants import FALLBACK_TAX_EXPLANATION
from src.zen_payroll.zen_payroll.core.enums import (
    Country,
    LeaveStatus,
    LeaveType,
    PaymentStatus,
    PayrollStatus,
)
from src.zen_payroll.zen_payroll.core.exceptions import AuthorizationError, ValidationError
from src.zen_payroll.zen_payroll.leaves.model import LeaveRequest
from src.zen_payroll.zen_payroll.payroll.advisory import AdvisoryResult
from src.zen_payroll.zen_payroll.payroll.model import PayrollInputs
from src.zen_payroll.zen_payroll.payroll.service import PayrollService

TECHFLOW = Company(id="C001", name="TechFlow Solutions", logo="🚀", currency="BDT", symbol="৳", default_country=Country.BD)
OASIS = Company(id="C002", name="Desert Oasis Ltd", logo="🌴", currency="SAR", symbol="﷼", default_country=Country.KSA)

INPUTS = PayrollInputs(
    overtime_hours=10, overtime_rate=200, bonus=5000, unpaid_leave_days=2, unpaid_leave_rate=2000, tax_percent=10
)


@pytest.fixture
def service(facade, clock, fake_advisor):
    return PayrollService(facade, advisor=fake_advisor, clock=clock)


@pytest.mark.asyncio
async def test_preview_merges_advisory_text(service, accountant, arif):
    p = await service.preview(accountant, arif, INPUTS)

    assert p.net_salary == 87800
    assert p.breakdown["taxExplanation"] == "BD slab rates applied."
    assert p.breakdown["complianceNote"] == "Within limits."


@pytest.mark.asyncio
async def test_preview_keeps_local_numbers_when_advisory_fails(facade, accountant, arif, make_advisor):
    service = PayrollService(facade, advisor=make_advisor(error=RuntimeError("timeout")))

    p = await service.preview(accountant, arif, INPUTS)

    assert p.net_salary == 87800
    assert p.breakdown["taxExplanation"] == FALLBACK_TAX_EXPLANATION


@pytest.mark.asyncio
async def test_advisory_warning_is_appended(facade, accountant, arif, make_advisor):
    advisor = make_advisor(result=AdvisoryResult(tax_explanation="ok", warning="Bonus looks high"))
    service = PayrollService(facade, advisor=advisor)

    p = await service.preview(accountant, arif, INPUTS)

    assert p.warnings == ("Bonus looks high",)
    assert p.breakdown["warning"] == "Bonus looks high"


@pytest.mark.asyncio
async def test_preview_without_advisory_skips_the_call(service, accountant, arif, fake_advisor):
    await service.preview(accountant, arif, INPUTS, use_advisory=False)

    assert fake_advisor.calls == 0


@pytest.mark.asyncio
async def test_hr_cannot_run_payroll(service, hr, arif):
    with pytest.raises(AuthorizationError):
        await service.preview(hr, arif, INPUTS)
    with pytest.raises(AuthorizationError):
        await service.disburse(hr, employee=arif, company=TECHFLOW, inputs=INPUTS)


@pytest.mark.asyncio
async def test_disburse_appends_paid_record(service, facade, accountant, arif):
    record = await service.disburse(accountant, employee=arif, company=TECHFLOW, inputs=INPUTS)

    assert record.id.startswith("PAY")
    assert record.status == PayrollStatus.PAID
    assert (record.month, record.year) == ("Mar", 2024)
    assert (record.gross_salary, record.net_salary) == (102000, 87800)
    assert (record.tax, record.vat, record.other_deductions) == (10200, 0, 4000)
    assert record.net_salary == record.gross_salary - (record.tax + record.vat + record.other_deductions)
    assert await facade.payroll_records.list("C001") == [record]


@pytest.mark.asyncio
async def test_disburse_rejects_employee_of_another_company(service, accountant, arif):
    with pytest.raises(ValidationError):
        await service.disburse(accountant, employee=arif, company=OASIS, inputs=INPUTS)


@pytest.mark.asyncio
async def test_employee_sees_only_own_records(service, facade, accountant, employee_session, arif):
    other = replace(arif, id="EMP777", name="Rina Das")
    await service.disburse(accountant, employee=arif, company=TECHFLOW, inputs=INPUTS)
    await service.disburse(accountant, employee=other, company=TECHFLOW, inputs=INPUTS)

    assert len(await service.list_records(accountant, "C001")) == 2
    mine = await service.list_records(employee_session, "C001")
    assert [r.employee_id for r in mine] == ["EMP001"]


@pytest.mark.asyncio
async def test_suggest_unpaid_leave_reads_stored_requests(service, facade, accountant, arif, clock):
    await facade.leave_requests.add(
        LeaveRequest(
            id="LR1",
            employee_id="EMP001",
            type=LeaveType.UNPAID,
            start_date=date(2024, 1, 1),
            end_date=date(2024, 1, 3),
            reason="Travel",
            status=LeaveStatus.APPROVED,
            applied_at=clock(),
            payment_status=PaymentStatus.UNPAID,
        )
    )

    s = await service.suggest_unpaid_leave(accountant, arif)

    assert (s.days, s.rate, s.synced) == (3, 2000, True)


@pytest.mark.asyncio
async def test_ledger_filters_searches_and_exports(service, accountant, arif, facade):
    first = await service.disburse(accountant, employee=arif, company=TECHFLOW, inputs=INPUTS)
    second = await service.disburse(accountant, employee=arif, company=TECHFLOW, inputs=PayrollInputs())
    records = await service.list_records(accountant, "C001")
    employees = await facade.employees.list("C001")

    assert PayrollService.ledger(records, employees) == [second, first]
    assert PayrollService.ledger(records, employees, term="arif") == [second, first]
    assert PayrollService.ledger(records, employees, term="nobody") == []
    assert PayrollService.ledger(records, employees, status=PayrollStatus.PENDING) == []

    csv_text = PayrollService.export_csv([first])
    lines = csv_text.splitlines()
    assert lines[0] == "ID,Employee,Month,Year,Gross,Net,Status"
    assert lines[1] == f"{first.id},EMP001,Mar,2024,102000,87800,Paid"
