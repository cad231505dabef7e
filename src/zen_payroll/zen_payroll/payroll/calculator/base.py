from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import ROUND_HALF_UP, Decimal

from ...employees.model import Employee
from ..model import PayrollInputs, PayslipPreview


def round_half_up(value: float, places: int = 0) -> float:
    """Round like a payslip does: halves go away from zero."""
    quantum = Decimal(1).scaleb(-places)
    rounded = Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP)
    return int(rounded) if places == 0 else float(rounded)


class PayrollCalculator(ABC):
    """Calculator interface (Strategy Pattern for payroll)."""

    @abstractmethod
    def calculate(self, employee: Employee, inputs: PayrollInputs) -> PayslipPreview:
        raise NotImplementedError
