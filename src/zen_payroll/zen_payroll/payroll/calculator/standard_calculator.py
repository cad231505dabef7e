from __future__ import annotations

from ...core.constants import FALLBACK_TAX_EXPLANATION, MAX_REASONABLE_OVERTIME_HOURS
from ...employees.model import Employee
from ..model import PayrollInputs, PayslipPreview
from .base import PayrollCalculator, round_half_up


class StandardPayrollCalculator(PayrollCalculator):
    """Standard rule: fixed pay + overtime + bonus, minus leave, tax and VAT.

    Tax and VAT are percentages of gross, rounded half-up to whole units
    before they are subtracted. Inputs are not validated; negative values flow
    through the arithmetic unchanged.
    """

    def calculate(self, employee: Employee, inputs: PayrollInputs) -> PayslipPreview:
        s = employee.salary_structure
        base_pay = s.basic + s.hra + s.transport + s.medical
        overtime_total = inputs.overtime_hours * inputs.overtime_rate
        leave_deduction = inputs.unpaid_leave_days * inputs.unpaid_leave_rate
        gross_salary = base_pay + overtime_total + inputs.bonus
        tax_amount = round_half_up(gross_salary * inputs.tax_percent / 100)
        vat_amount = round_half_up(gross_salary * inputs.vat_percent / 100)
        net_salary = gross_salary - (leave_deduction + tax_amount + vat_amount)

        warnings = []
        if inputs.overtime_hours > MAX_REASONABLE_OVERTIME_HOURS:
            warnings.append(f"{inputs.overtime_hours:g} overtime hours in one period looks unrealistic")
        if net_salary < 0:
            warnings.append("Deductions exceed gross salary; net pay is negative")

        breakdown = {
            "baseTotal": base_pay,
            "overtimePay": overtime_total,
            "bonusAmount": inputs.bonus,
            "leaveDeduction": leave_deduction,
            "taxAmount": tax_amount,
            "vatAmount": vat_amount,
            "taxExplanation": FALLBACK_TAX_EXPLANATION,
            "customItems": [
                {"name": i.name, "amount": i.amount, "type": i.type.value}
                for i in s.custom_items
            ],
        }
        if warnings:
            breakdown["warning"] = "; ".join(warnings)

        return PayslipPreview(
            base_pay=base_pay,
            overtime_total=overtime_total,
            leave_deduction=leave_deduction,
            gross_salary=gross_salary,
            tax_amount=tax_amount,
            vat_amount=vat_amount,
            net_salary=net_salary,
            breakdown=breakdown,
            warnings=tuple(warnings),
        )
