from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterable, Optional

from ..common.datetime_utils import inclusive_days
from ..core.constants import DAYS_PER_MONTH
from ..core.enums import LeaveStatus, PaymentStatus
from ..employees.model import Employee
from ..leaves.model import LeaveRequest
from .calculator.base import round_half_up


@dataclass(frozen=True)
class LeaveSyncSuggestion:
    """Pre-filled unpaid-leave fields for the payroll form."""

    days: float
    rate: float
    synced: bool
    request_ids: tuple[str, ...] = ()

    def override(self, *, days: Optional[float] = None, rate: Optional[float] = None) -> "LeaveSyncSuggestion":
        """Operator edit: keeps the other field and drops the synced indicator."""
        return replace(
            self,
            days=self.days if days is None else days,
            rate=self.rate if rate is None else rate,
            synced=False,
        )


def is_unpaid_approved(request: LeaveRequest) -> bool:
    return request.status == LeaveStatus.APPROVED and request.payment_status == PaymentStatus.UNPAID


def sync_unpaid_leave(employee: Employee, requests: Iterable[LeaveRequest]) -> LeaveSyncSuggestion:
    matched = [r for r in requests if r.employee_id == employee.id and is_unpaid_approved(r)]
    days = sum(inclusive_days(r.start_date, r.end_date) for r in matched)
    rate = round_half_up(employee.salary_structure.basic / DAYS_PER_MONTH, 2)
    return LeaveSyncSuggestion(
        days=days,
        rate=rate,
        synced=bool(matched),
        request_ids=tuple(r.id for r in matched),
    )
