"""Mapping between domain records and their stored JSON shape.

Stored documents keep the camelCase layout used by existing browser data
(`companyId`, `salaryStructure.customItems`, `generatedAt`, ...), so a dump
of the old local storage can be loaded as-is.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Optional, TypeVar

from ..common.datetime_utils import parse_iso_date, parse_iso_timestamp, to_iso_timestamp
from ..companies.model import Company
from ..core.enums import (
    Country,
    EmployeeStatus,
    LeaveStatus,
    LeaveType,
    PaymentStatus,
    PayrollStatus,
    SalaryItemType,
    UserRole,
)
from ..employees.model import CustomSalaryItem, Employee, SalaryStructure
from ..leaves.model import LeaveRequest
from ..payroll.model import PayrollRecord
from ..users.model import AdminProfile

T = TypeVar("T")


@dataclass(frozen=True)
class Codec(Generic[T]):
    encode: Callable[[T], Any]
    decode: Callable[[Any], T]
    key: Callable[[T], str]


def _num(value: Any) -> float:
    return value if isinstance(value, (int, float)) else float(value or 0)


# Companies


def company_to_dict(c: Company) -> dict:
    return {
        "id": c.id,
        "name": c.name,
        "logo": c.logo,
        "currency": c.currency,
        "symbol": c.symbol,
        "defaultCountry": c.default_country.value,
    }


def company_from_dict(d: dict) -> Company:
    return Company(
        id=str(d["id"]),
        name=str(d.get("name", "")),
        logo=str(d.get("logo", "")),
        currency=str(d.get("currency", "")),
        symbol=str(d.get("symbol", "")),
        default_country=Country(d.get("defaultCountry", Country.BD.value)),
    )


# Employees


def salary_structure_to_dict(s: SalaryStructure) -> dict:
    return {
        "basic": s.basic,
        "hra": s.hra,
        "transport": s.transport,
        "medical": s.medical,
        "customItems": [
            {"id": i.id, "name": i.name, "amount": i.amount, "type": i.type.value} for i in s.custom_items
        ],
    }


def salary_structure_from_dict(d: dict) -> SalaryStructure:
    return SalaryStructure(
        basic=_num(d.get("basic")),
        hra=_num(d.get("hra")),
        transport=_num(d.get("transport")),
        medical=_num(d.get("medical")),
        custom_items=tuple(
            CustomSalaryItem(
                id=str(i["id"]),
                name=str(i.get("name", "")),
                amount=_num(i.get("amount")),
                type=SalaryItemType(i.get("type", SalaryItemType.ALLOWANCE.value)),
            )
            for i in d.get("customItems") or []
        ),
    )


def employee_to_dict(e: Employee) -> dict:
    return {
        "id": e.id,
        "name": e.name,
        "role": e.role,
        "department": e.department,
        "status": e.status.value,
        "email": e.email,
        "country": e.country.value,
        "joinDate": e.join_date.isoformat(),
        "companyId": e.company_id,
        "systemRole": e.system_role.value,
        "salaryStructure": salary_structure_to_dict(e.salary_structure),
    }


def employee_from_dict(d: dict) -> Employee:
    return Employee(
        id=str(d["id"]),
        name=str(d.get("name", "")),
        role=str(d.get("role", "")),
        department=str(d.get("department", "")),
        status=EmployeeStatus(d.get("status", EmployeeStatus.ACTIVE.value)),
        email=str(d.get("email", "")),
        country=Country(d.get("country", Country.BD.value)),
        join_date=parse_iso_date(d["joinDate"]),
        company_id=str(d.get("companyId", "")),
        salary_structure=salary_structure_from_dict(d.get("salaryStructure") or {}),
        system_role=UserRole(d.get("systemRole") or UserRole.EMPLOYEE.value),
    )


# Payroll records


def payroll_record_to_dict(r: PayrollRecord) -> dict:
    out = {
        "id": r.id,
        "employeeId": r.employee_id,
        "companyId": r.company_id,
        "month": r.month,
        "year": r.year,
        "grossSalary": r.gross_salary,
        "netSalary": r.net_salary,
        "tax": r.tax,
        "otherDeductions": r.other_deductions,
        "bonuses": r.bonuses,
        "overtimeHours": r.overtime_hours,
        "overtimeRate": r.overtime_rate,
        "unpaidLeaves": r.unpaid_leaves,
        "unpaidLeaveRate": r.unpaid_leave_rate,
        "taxPercent": r.tax_percent,
        "vatPercent": r.vat_percent,
        "status": r.status.value,
        "breakdown": r.breakdown,
        "generatedAt": to_iso_timestamp(r.generated_at),
    }
    if r.vat is not None:
        out["vat"] = r.vat
    return out


def payroll_record_from_dict(d: dict) -> PayrollRecord:
    vat = d.get("vat")
    return PayrollRecord(
        id=str(d["id"]),
        employee_id=str(d["employeeId"]),
        company_id=str(d["companyId"]),
        month=str(d.get("month", "")),
        year=int(d.get("year", 0)),
        gross_salary=_num(d.get("grossSalary")),
        net_salary=_num(d.get("netSalary")),
        tax=_num(d.get("tax")),
        other_deductions=_num(d.get("otherDeductions")),
        bonuses=_num(d.get("bonuses")),
        overtime_hours=_num(d.get("overtimeHours")),
        overtime_rate=_num(d.get("overtimeRate")),
        unpaid_leaves=_num(d.get("unpaidLeaves")),
        unpaid_leave_rate=_num(d.get("unpaidLeaveRate")),
        tax_percent=_num(d.get("taxPercent")),
        vat_percent=_num(d.get("vatPercent")),
        status=PayrollStatus(d.get("status", PayrollStatus.PENDING.value)),
        breakdown=dict(d.get("breakdown") or {}),
        generated_at=parse_iso_timestamp(d["generatedAt"]),
        vat=None if vat is None else _num(vat),
    )


# Leave requests


def leave_request_to_dict(r: LeaveRequest) -> dict:
    out = {
        "id": r.id,
        "employeeId": r.employee_id,
        "type": r.type.value,
        "startDate": r.start_date.isoformat(),
        "endDate": r.end_date.isoformat(),
        "reason": r.reason,
        "status": r.status.value,
        "appliedAt": to_iso_timestamp(r.applied_at),
    }
    if r.payment_status is not None:
        out["paymentStatus"] = r.payment_status.value
    if r.decided_by is not None:
        out["decidedBy"] = r.decided_by
    if r.decided_at is not None:
        out["decidedAt"] = to_iso_timestamp(r.decided_at)
    return out


def leave_request_from_dict(d: dict) -> LeaveRequest:
    payment = d.get("paymentStatus")
    decided_at = d.get("decidedAt")
    return LeaveRequest(
        id=str(d["id"]),
        employee_id=str(d["employeeId"]),
        type=LeaveType(d.get("type", LeaveType.ANNUAL.value)),
        start_date=parse_iso_date(d["startDate"]),
        end_date=parse_iso_date(d["endDate"]),
        reason=str(d.get("reason", "")),
        status=LeaveStatus(d.get("status", LeaveStatus.PENDING.value)),
        applied_at=parse_iso_timestamp(d["appliedAt"]),
        payment_status=PaymentStatus(payment) if payment else None,
        decided_by=d.get("decidedBy"),
        decided_at=parse_iso_timestamp(decided_at) if decided_at else None,
    )


# Session profile


def profile_to_dict(p: AdminProfile) -> dict:
    out = {
        "name": p.name,
        "email": p.email,
        "role": p.role.value,
        "avatar": p.avatar,
        "isLoggedIn": p.is_logged_in,
    }
    if p.employee_id is not None:
        out["employeeId"] = p.employee_id
    return out


def profile_from_dict(d: dict) -> AdminProfile:
    employee_id: Optional[str] = d.get("employeeId")
    return AdminProfile(
        name=str(d.get("name", "")),
        email=str(d.get("email", "")),
        role=UserRole(d.get("role", UserRole.ADMIN.value)),
        avatar=str(d.get("avatar", "")),
        is_logged_in=bool(d.get("isLoggedIn", False)),
        employee_id=employee_id,
    )


COMPANY_CODEC: Codec[Company] = Codec(company_to_dict, company_from_dict, lambda c: c.id)
EMPLOYEE_CODEC: Codec[Employee] = Codec(employee_to_dict, employee_from_dict, lambda e: e.id)
PAYROLL_CODEC: Codec[PayrollRecord] = Codec(payroll_record_to_dict, payroll_record_from_dict, lambda r: r.id)
LEAVE_CODEC: Codec[LeaveRequest] = Codec(leave_request_to_dict, leave_request_from_dict, lambda r: r.id)
DEPARTMENT_CODEC: Codec[str] = Codec(str, str, lambda d: d)
