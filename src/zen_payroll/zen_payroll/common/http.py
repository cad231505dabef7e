"""Helpers shared by the JSON controllers."""

from __future__ import annotations

import logging
import math
from datetime import date
from functools import wraps
from typing import Any

from flask import current_app, jsonify, request, session

from ..core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    DomainError,
    InvalidTransitionError,
    NotFoundError,
    StorageUnavailableError,
    ValidationError,
)
from ..payroll.model import PayrollInputs, PayslipPreview
from ..storage.codec import profile_from_dict, profile_to_dict
from ..users.model import ANONYMOUS, AdminProfile
from .datetime_utils import parse_iso_date

logger = logging.getLogger(__name__)

# Most specific first: ConcurrentWriteError is a StorageUnavailableError.
_STATUS_CODES: tuple[tuple[type[DomainError], int], ...] = (
    (ValidationError, 400),
    (AuthenticationError, 401),
    (AuthorizationError, 403),
    (NotFoundError, 404),
    (InvalidTransitionError, 409),
    (StorageUnavailableError, 503),
)


def status_for(error: DomainError) -> int:
    for exc_type, code in _STATUS_CODES:
        if isinstance(error, exc_type):
            return code
    return 400


def current_profile() -> AdminProfile:
    data = session.get("profile")
    return profile_from_dict(data) if data else ANONYMOUS


def store_profile(profile: AdminProfile) -> None:
    session["profile"] = profile_to_dict(profile)


def json_body() -> dict:
    return request.get_json(silent=True) or {}


def body_date(data: dict, name: str) -> date:
    try:
        return parse_iso_date(str(data.get(name) or ""))
    except ValueError as e:
        raise ValidationError(f"{name} must be a YYYY-MM-DD date") from e


def body_number(data: dict, name: str) -> float:
    value = data.get(name, 0)
    try:
        number = float(value or 0)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be a number") from e
    if not math.isfinite(number):
        raise ValidationError(f"{name} must be a finite number")
    return number


def payroll_inputs(data: dict) -> PayrollInputs:
    return PayrollInputs(
        overtime_hours=body_number(data, "overtimeHours"),
        overtime_rate=body_number(data, "overtimeRate"),
        bonus=body_number(data, "bonus"),
        unpaid_leave_days=body_number(data, "unpaidLeaveDays"),
        unpaid_leave_rate=body_number(data, "unpaidLeaveRate"),
        tax_percent=body_number(data, "taxPercent"),
        vat_percent=body_number(data, "vatPercent"),
    )


def preview_to_dict(p: PayslipPreview) -> dict:
    return {
        "basePay": p.base_pay,
        "overtimeTotal": p.overtime_total,
        "leaveDeduction": p.leave_deduction,
        "grossSalary": p.gross_salary,
        "taxAmount": p.tax_amount,
        "vatAmount": p.vat_amount,
        "netSalary": p.net_salary,
        "breakdown": p.breakdown,
        "warnings": list(p.warnings),
    }


def json_view(view):
    """Turn domain errors into JSON error bodies with a matching status."""

    @wraps(view)
    async def wrapper(*args: Any, **kwargs: Any):
        try:
            return await view(*args, **kwargs)
        except DomainError as e:
            code = status_for(e)
            if code >= 500:
                logger.error("%s %s failed: %s", request.method, request.path, e)
            return jsonify({"error": str(e)}), code
        except Exception as e:
            logger.exception("%s %s crashed", request.method, request.path)
            message = f"Internal error: {e}" if current_app.config.get("DEBUG") else "Internal error"
            return jsonify({"error": message}), 500

    return wrapper
