from __future__ import annotations

from enum import Enum


class UserRole(str, Enum):
    """System role used for access control."""

    ADMIN = "Admin"
    HR = "HR"
    ACCOUNTANT = "Accountant"
    EMPLOYEE = "Employee"


class EmployeeStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class Country(str, Enum):
    BD = "BD"
    KSA = "KSA"
    UAE = "UAE"
    USA = "USA"


class SalaryItemType(str, Enum):
    ALLOWANCE = "allowance"
    DEDUCTION = "deduction"


class PayrollStatus(str, Enum):
    PENDING = "Pending"
    PAID = "Paid"


class LeaveType(str, Enum):
    ANNUAL = "Annual"
    SICK = "Sick"
    UNPAID = "Unpaid"
    EMERGENCY = "Emergency"


class LeaveStatus(str, Enum):
    """Approval flow status of a leave request."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class PaymentStatus(str, Enum):
    PAID = "Paid"
    UNPAID = "Unpaid"


class CompanyDeletePolicy(str, Enum):
    """What happens to a company's dependents when the company is deleted."""

    ORPHAN = "orphan"
    CASCADE = "cascade"
    BLOCK = "block"
