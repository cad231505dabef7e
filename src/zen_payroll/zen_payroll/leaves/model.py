from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import LeaveStatus, LeaveType, PaymentStatus


@dataclass(frozen=True)
class LeaveRequest:
    id: str
    employee_id: str
    type: LeaveType
    start_date: date
    end_date: date
    reason: str
    status: LeaveStatus
    applied_at: datetime
    payment_status: Optional[PaymentStatus] = None
    decided_by: Optional[str] = None
    decided_at: Optional[datetime] = None
