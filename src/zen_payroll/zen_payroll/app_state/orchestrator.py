"""In-process client state.

AppState keeps in-memory mirrors of the stored collections for the signed-in
profile and the selected company, routes every mutation through the services
and only touches a mirror after the write succeeded. Failures never escape:
they are logged and turned into alert messages.
"""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Any, Awaitable, Callable, Optional, TypeVar

from ..companies.model import Company
from ..core.enums import Country, LeaveStatus, LeaveType, PaymentStatus, UserRole
from ..core.exceptions import DomainError, NotFoundError, StorageUnavailableError
from ..core.permissions import LEAVES_APPROVE, allowed_tabs, has_permission
from ..employees.model import Employee
from ..leaves.model import LeaveRequest
from ..payroll.leave_sync import LeaveSyncSuggestion
from ..payroll.model import PayrollInputs, PayrollRecord, PayslipPreview
from ..users.model import ANONYMOUS, AdminProfile

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AppState:
    def __init__(self, container):
        self._c = container
        self._pending: set[str] = set()
        self._reset()

    def _reset(self) -> None:
        self.profile: AdminProfile = ANONYMOUS
        self.companies: list[Company] = []
        self.departments: list[str] = []
        self.current_company: Optional[Company] = None
        self.employees: list[Employee] = []
        self.records: list[PayrollRecord] = []
        self.leave_history: list[LeaveRequest] = []
        self.all_leave_requests: list[LeaveRequest] = []
        self.payslip_preview: Optional[PayslipPreview] = None
        self.leave_suggestion: Optional[LeaveSyncSuggestion] = None
        self.alerts: list[str] = []

    @property
    def loading(self) -> bool:
        return bool(self._pending)

    @property
    def tabs(self) -> list[str]:
        if not self.profile.is_logged_in:
            return []
        return allowed_tabs(self.profile.role, has_employee_record=bool(self.profile.employee_id))

    def pop_alerts(self) -> list[str]:
        alerts, self.alerts = self.alerts, []
        return alerts

    def _alert(self, message: str) -> None:
        logger.info("alert: %s", message)
        self.alerts.append(message)

    async def _guarded(self, action: str, failure: str, op: Callable[[], Awaitable[T]]) -> Optional[T]:
        if action in self._pending:
            logger.debug("%s already in progress; ignoring re-entry", action)
            return None
        self._pending.add(action)
        try:
            return await op()
        except StorageUnavailableError as e:
            logger.error("%s failed: %s", action, e)
            self._alert(failure)
        except DomainError as e:
            self._alert(str(e))
        finally:
            self._pending.discard(action)
        return None

    def _employee(self, employee_id: str) -> Employee:
        emp = next((e for e in self.employees if e.id == employee_id), None)
        if emp is None:
            raise NotFoundError("Employee is not part of the selected company")
        return emp

    # Session

    async def restore_session(self) -> bool:
        async def op():
            profile = await self._c.auth_service.restore()
            if not profile:
                return False
            self.profile = profile
            await self._load_initial()
            return True

        return bool(await self._guarded("session", "Could not restore the previous session.", op))

    async def sign_in(self, email: str, password: str) -> bool:
        async def op():
            self.profile = await self._c.auth_service.authenticate(email, password)
            await self._load_initial()
            return True

        return bool(await self._guarded("session", "Sign-in failed. Please try again.", op))

    async def sign_up(self, *, name: str, email: str, password: str, role: UserRole) -> bool:
        async def op():
            self.profile = await self._c.auth_service.register(name=name, email=email, password=password, role=role)
            await self._load_initial()
            return True

        return bool(await self._guarded("session", "Sign-up failed. Please try again.", op))

    async def sign_out(self) -> None:
        async def op():
            await self._c.auth_service.sign_out()

        await self._guarded("session.clear", "Could not clear the stored session.", op)
        self._reset()

    async def update_profile(self, **changes: Any) -> Optional[AdminProfile]:
        async def op():
            self.profile = await self._c.profile_service.update(self.profile, **changes)
            return self.profile

        return await self._guarded("profile", "Failed to update profile.", op)

    # Loading

    async def _load_initial(self) -> None:
        self.companies, self.departments = await asyncio.gather(
            self._c.company_service.list_companies(),
            self._c.department_service.list_departments(),
        )
        self.current_company = self.companies[0] if self.companies else None
        await self._load_company_data()

    async def _load_company_data(self) -> None:
        if not self.current_company or not self.profile.is_logged_in:
            self.employees, self.records = [], []
            return
        company_id = self.current_company.id
        self.employees, self.records = await asyncio.gather(
            self._c.employee_service.list_for_company(company_id),
            self._c.payroll_service.list_records(self.profile, company_id),
        )
        if self.profile.employee_id:
            self.leave_history = await self._c.leave_service.list_mine(self.profile)
        if has_permission(self.profile.role, LEAVES_APPROVE):
            self.all_leave_requests = await self._c.leave_service.list_all(self.profile)

    async def reload_company_data(self) -> None:
        await self._guarded("load", "Failed to load company data.", self._load_company_data)

    async def switch_company(self, company_id: str) -> bool:
        company = next((c for c in self.companies if c.id == company_id), None)
        if company is None:
            self._alert("Company does not exist")
            return False
        self.current_company = company
        self.payslip_preview = None
        self.leave_suggestion = None
        await self.reload_company_data()
        return True

    # Employees and roles

    async def onboard_employee(self, **fields: Any) -> Optional[Employee]:
        async def op():
            if not self.current_company:
                raise DomainError("Select a company first")
            emp = await self._c.employee_service.onboard(self.profile, company_id=self.current_company.id, **fields)
            self.employees = [*self.employees, emp]
            return emp

        return await self._guarded("employees.add", "Failed to onboard employee.", op)

    async def _replace_employee(self, action: str, failure: str, change) -> Optional[Employee]:
        async def op():
            updated = await change()
            self.employees = [updated if e.id == updated.id else e for e in self.employees]
            return updated

        return await self._guarded(action, failure, op)

    async def update_role(self, employee_id: str, new_role: UserRole) -> Optional[Employee]:
        return await self._replace_employee(
            f"roles.{employee_id}",
            "System error updating role.",
            lambda: self._c.employee_service.update_role(self.profile, employee_id, new_role),
        )

    async def toggle_activation(self, employee_id: str) -> Optional[Employee]:
        return await self._replace_employee(
            f"roles.{employee_id}",
            "System error updating status.",
            lambda: self._c.employee_service.toggle_activation(self.profile, employee_id),
        )

    async def revoke_access(self, employee_id: str) -> bool:
        async def op():
            await self._c.employee_service.revoke_access(self.profile, employee_id)
            self.employees = [e for e in self.employees if e.id != employee_id]
            return True

        return bool(await self._guarded(f"roles.{employee_id}", "System error revoking access.", op))

    async def add_department(self, name: str) -> None:
        async def op():
            self.departments = await self._c.department_service.add_department(self.profile, name)

        await self._guarded("departments", "Error adding department.", op)

    async def delete_department(self, name: str) -> None:
        async def op():
            self.departments = await self._c.department_service.delete_department(self.profile, name)

        await self._guarded("departments", "Error deleting department.", op)

    # Companies

    async def add_company(self, *, name: str, logo: str = "", country: Country = Country.BD) -> Optional[Company]:
        async def op():
            self.companies = await self._c.company_service.add_company(self.profile, name=name, logo=logo, country=country)
            return self.companies[-1]

        company = await self._guarded("companies", "Failed to add company.", op)
        if company:
            await self.switch_company(company.id)
        return company

    async def delete_company(self, company_id: str) -> bool:
        async def op():
            result = await self._c.company_service.delete_company(self.profile, company_id)
            self.companies = result.companies
            return True

        ok = bool(await self._guarded("companies", "Failed to delete company.", op))
        if ok and (not self.current_company or self.current_company.id == company_id):
            if self.companies:
                await self.switch_company(self.companies[0].id)
            else:
                self.current_company = None
        return ok

    # Payroll

    async def suggest_unpaid_leave(self, employee_id: str) -> Optional[LeaveSyncSuggestion]:
        async def op():
            self.leave_suggestion = await self._c.payroll_service.suggest_unpaid_leave(
                self.profile, self._employee(employee_id)
            )
            return self.leave_suggestion

        return await self._guarded("payroll.sync", "Failed to read leave history.", op)

    async def preview_payroll(self, employee_id: str, inputs: PayrollInputs) -> Optional[PayslipPreview]:
        async def op():
            self.payslip_preview = await self._c.payroll_service.preview(
                self.profile, self._employee(employee_id), inputs
            )
            return self.payslip_preview

        return await self._guarded("payroll.preview", "Failed to calculate payroll.", op)

    async def disburse_payroll(
        self, employee_id: str, inputs: PayrollInputs, preview: Optional[PayslipPreview] = None
    ) -> Optional[PayrollRecord]:
        async def op():
            if not self.current_company:
                raise DomainError("Select a company first")
            record = await self._c.payroll_service.disburse(
                self.profile,
                employee=self._employee(employee_id),
                company=self.current_company,
                inputs=inputs,
                preview=preview or self.payslip_preview,
            )
            self.records = [*self.records, record]
            self.payslip_preview = None
            self.leave_suggestion = None
            return record

        return await self._guarded("payroll.disburse", "Failed to save record.", op)

    # Leave

    async def submit_leave(
        self, *, type: LeaveType, start_date: date, end_date: date, reason: str
    ) -> Optional[LeaveRequest]:
        async def op():
            req = await self._c.leave_service.submit(
                self.profile, type=type, start_date=start_date, end_date=end_date, reason=reason
            )
            self.leave_history = [req, *self.leave_history]
            self.all_leave_requests = [req, *self.all_leave_requests]
            return req

        return await self._guarded("leaves.submit", "Failed to submit leave request.", op)

    async def decide_leave(
        self, request_id: str, status: LeaveStatus, payment_status: Optional[PaymentStatus] = None
    ) -> Optional[LeaveRequest]:
        async def op():
            saved = await self._c.leave_service.decide(
                self.profile, request_id=request_id, status=status, payment_status=payment_status
            )
            self.all_leave_requests = [saved if r.id == request_id else r for r in self.all_leave_requests]
            self.leave_history = [saved if r.id == request_id else r for r in self.leave_history]
            return saved

        return await self._guarded(f"leaves.{request_id}", "Failed to update leave status.", op)
