from __future__ import annotations

import logging
from dataclasses import replace
from datetime import date, datetime
from typing import Callable, Iterable, Optional

from ..common.datetime_utils import epoch_millis, inclusive_days, now_utc
from ..common.validators import require_non_empty
from ..core.enums import LeaveStatus, LeaveType, PaymentStatus
from ..core.exceptions import AuthorizationError, InvalidTransitionError, NotFoundError, ValidationError
from ..core.permissions import LEAVES_APPROVE, LEAVES_REQUEST, require_permission
from ..employees.model import Employee
from ..storage.facade import PersistenceFacade
from ..users.model import AdminProfile
from .model import LeaveRequest

logger = logging.getLogger(__name__)


def requested_days(request: LeaveRequest) -> int:
    return max(inclusive_days(request.start_date, request.end_date), 0)


class LeaveService:
    """Use case: leave requests and their approval flow.

    Pending -> Approved | Rejected. A decided request is terminal unless
    `allow_amendment` is set, in which case it can be decided again.
    """

    def __init__(
        self,
        facade: PersistenceFacade,
        *,
        allow_amendment: bool = False,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._facade = facade
        self._allow_amendment = allow_amendment
        self._clock = clock

    async def submit(
        self,
        session: AdminProfile,
        *,
        type: LeaveType,
        start_date: date,
        end_date: date,
        reason: str,
    ) -> LeaveRequest:
        require_permission(session, LEAVES_REQUEST)
        if not session.employee_id:
            raise AuthorizationError("Only accounts linked to an employee can request leave")
        if end_date < start_date:
            raise ValidationError("End date must be on or after start date")

        now = self._clock()
        request = LeaveRequest(
            id=f"LR{epoch_millis(now)}",
            employee_id=session.employee_id,
            type=LeaveType(type),
            start_date=start_date,
            end_date=end_date,
            reason=require_non_empty(reason, "Reason"),
            status=LeaveStatus.PENDING,
            applied_at=now,
        )
        return await self._facade.leave_requests.add(request)

    async def decide(
        self,
        session: AdminProfile,
        *,
        request_id: str,
        status: LeaveStatus,
        payment_status: Optional[PaymentStatus] = None,
    ) -> LeaveRequest:
        require_permission(session, LEAVES_APPROVE)
        status = LeaveStatus(status)
        if status == LeaveStatus.PENDING:
            raise ValidationError("A decision must approve or reject the request")
        if status == LeaveStatus.APPROVED and payment_status is None:
            raise ValidationError("Approving a leave request requires a payment status")

        payment = PaymentStatus(payment_status) if status == LeaveStatus.APPROVED else None

        def apply(req: LeaveRequest) -> LeaveRequest:
            if req.status != LeaveStatus.PENDING:
                if not self._allow_amendment:
                    raise InvalidTransitionError(f"Leave request is already {req.status.value}")
                logger.info(
                    "Leave request %s amended from %s to %s by %s",
                    req.id,
                    req.status.value,
                    status.value,
                    session.email,
                )
            return replace(
                req,
                status=status,
                payment_status=payment,
                decided_by=session.email,
                decided_at=self._clock(),
            )

        updated = await self._facade.leave_requests.update_where(request_id, apply)
        if updated is None:
            raise NotFoundError("Leave request does not exist")
        return updated

    async def approve(
        self, session: AdminProfile, request_id: str, payment_status: PaymentStatus
    ) -> LeaveRequest:
        return await self.decide(
            session, request_id=request_id, status=LeaveStatus.APPROVED, payment_status=payment_status
        )

    async def reject(self, session: AdminProfile, request_id: str) -> LeaveRequest:
        return await self.decide(session, request_id=request_id, status=LeaveStatus.REJECTED)

    async def list_mine(self, session: AdminProfile) -> list[LeaveRequest]:
        if not session.employee_id:
            return []
        items = await self._facade.leave_requests.list(session.employee_id)
        return sorted(items, key=lambda r: r.applied_at, reverse=True)

    async def list_all(self, session: AdminProfile) -> list[LeaveRequest]:
        require_permission(session, LEAVES_APPROVE)
        items = await self._facade.leave_requests.list_all()
        return sorted(items, key=lambda r: r.applied_at, reverse=True)

    async def list_for_employee(self, employee_id: str) -> list[LeaveRequest]:
        return await self._facade.leave_requests.list(employee_id)

    @staticmethod
    def filter_requests(
        requests: Iterable[LeaveRequest],
        employees: Iterable[Employee],
        *,
        status: Optional[LeaveStatus] = None,
        term: str = "",
    ) -> list[LeaveRequest]:
        names = {e.id: e.name.lower() for e in employees}
        t = (term or "").strip().lower()
        out = []
        for r in requests:
            if status is not None and r.status != status:
                continue
            if t and t not in names.get(r.employee_id, "") and t not in r.id.lower():
                continue
            out.append(r)
        return out
