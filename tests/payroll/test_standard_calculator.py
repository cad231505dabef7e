from dataclasses import replace

import pytest

from src.zen_payroll.zen_payroll.core.constants import FALLBACK_TAX_EXPLANATION
from src.zen_payroll.zen_payroll.payroll.calculator.base import round_half_up
from src.zen_payroll.zen_payroll.payroll.calculator.standard_calculator import StandardPayrollCalculator
from src.zen_payroll.zen_payroll.payroll.model import PayrollInputs


def test_reference_payslip(arif):
    inputs = PayrollInputs(
        overtime_hours=10,
        overtime_rate=200,
        bonus=5000,
        unpaid_leave_days=2,
        unpaid_leave_rate=2000,
        tax_percent=10,
        vat_percent=0,
    )

    p = StandardPayrollCalculator().calculate(arif, inputs)

    assert p.base_pay == 95000
    assert p.overtime_total == 2000
    assert p.gross_salary == 102000
    assert p.leave_deduction == 4000
    assert p.tax_amount == 10200
    assert p.vat_amount == 0
    assert p.net_salary == 87800
    assert p.warnings == ()
    assert p.breakdown["taxExplanation"] == FALLBACK_TAX_EXPLANATION


@pytest.mark.parametrize(
    "inputs",
    [
        PayrollInputs(),
        PayrollInputs(overtime_hours=3.5, overtime_rate=333, tax_percent=12.5, vat_percent=7.5),
        PayrollInputs(bonus=-1000, unpaid_leave_days=31, unpaid_leave_rate=5000, tax_percent=33),
    ],
)
def test_net_equals_gross_minus_deductions(arif, inputs):
    p = StandardPayrollCalculator().calculate(arif, inputs)

    assert p.net_salary == p.gross_salary - (p.leave_deduction + p.tax_amount + p.vat_amount)


def test_tax_and_vat_round_half_up(arif):
    # gross 95005 -> tax 9500.5 -> 9501, vat 4750.25 -> 4750
    p = StandardPayrollCalculator().calculate(arif, PayrollInputs(bonus=5, tax_percent=10, vat_percent=5))

    assert p.tax_amount == 9501
    assert p.vat_amount == 4750


def test_round_half_up_with_places():
    assert round_half_up(2.5) == 3
    assert round_half_up(2.345, 2) == 2.35
    assert round_half_up(2000.0, 2) == 2000.0


def test_custom_items_are_listed_but_not_added(arif):
    p = StandardPayrollCalculator().calculate(arif, PayrollInputs())

    assert p.gross_salary == 95000
    assert [i["name"] for i in p.breakdown["customItems"]] == ["Performance Bonus", "Health Insurance"]


def test_unrealistic_overtime_and_negative_net_are_warned(arif):
    poor = replace(arif, salary_structure=replace(arif.salary_structure, basic=0, hra=0, transport=0, medical=0))

    p = StandardPayrollCalculator().calculate(
        poor, PayrollInputs(overtime_hours=150, overtime_rate=1, unpaid_leave_days=10, unpaid_leave_rate=100)
    )

    assert p.net_salary == 150 - 1000
    assert len(p.warnings) == 2
    assert "overtime" in p.breakdown["warning"]
