"""Example: drive the app state without Flask.

Signs in as the demo accountant, previews and disburses one payslip, then
prints the company ledger as CSV.
"""

import asyncio
import importlib

from config import get_settings_module

from src.zen_payroll.zen_payroll.container import build_container
from src.zen_payroll.zen_payroll.payroll.model import PayrollInputs
from src.zen_payroll.zen_payroll.payroll.service import PayrollService


async def run():
    settings = importlib.import_module(get_settings_module())
    state = build_container(settings).app_state()

    if not await state.sign_in("acc@zenpayroll.ai", "acc123"):
        print(state.pop_alerts())
        return

    emp = state.employees[0]
    inputs = PayrollInputs(overtime_hours=10, overtime_rate=200, bonus=5000, tax_percent=10)
    preview = await state.preview_payroll(emp.id, inputs)
    if preview is None:
        print(state.pop_alerts())
        return
    print(f"{emp.name}: gross={preview.gross_salary} net={preview.net_salary}")
    print(preview.breakdown["taxExplanation"])

    await state.disburse_payroll(emp.id, inputs, preview)
    print(PayrollService.export_csv(state.records))


def main():
    asyncio.run(run())


if __name__ == "__main__":
    main()
