from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import body_date, current_profile, json_body, json_view
from ..core.enums import LeaveStatus, LeaveType, PaymentStatus
from ..core.exceptions import ValidationError
from ..container import Container
from ..storage.codec import leave_request_to_dict
from .service import LeaveService


def register(app: Flask, container: Container) -> None:
    def _enum(enum_cls, value, label):
        try:
            return enum_cls(value)
        except ValueError as e:
            raise ValidationError(f"Unknown {label}") from e

    @app.route("/api/leaves", methods=["GET"], endpoint="my_leaves")
    @json_view
    async def my_leaves():
        items = await container.leave_service.list_mine(current_profile())
        return jsonify([leave_request_to_dict(r) for r in items])

    @app.route("/api/leaves", methods=["POST"], endpoint="request_leave")
    @json_view
    async def request_leave():
        data = json_body()
        req = await container.leave_service.submit(
            current_profile(),
            type=_enum(LeaveType, data.get("type", LeaveType.ANNUAL.value), "leave type"),
            start_date=body_date(data, "startDate"),
            end_date=body_date(data, "endDate"),
            reason=data.get("reason", ""),
        )
        return jsonify(leave_request_to_dict(req)), 201

    @app.route("/api/leaves/all", methods=["GET"], endpoint="all_leaves")
    @json_view
    async def all_leaves():
        items = await container.leave_service.list_all(current_profile())
        raw_status = request.args.get("status")
        status = _enum(LeaveStatus, raw_status, "leave status") if raw_status and raw_status != "All" else None
        employees = await container.facade.employees.list()
        items = LeaveService.filter_requests(items, employees, status=status, term=request.args.get("q", ""))
        return jsonify([leave_request_to_dict(r) for r in items])

    @app.route("/api/leaves/<request_id>/decision", methods=["POST"], endpoint="decide_leave")
    @json_view
    async def decide_leave(request_id: str):
        data = json_body()
        payment = data.get("paymentStatus")
        saved = await container.leave_service.decide(
            current_profile(),
            request_id=request_id,
            status=_enum(LeaveStatus, data.get("status", ""), "leave status"),
            payment_status=_enum(PaymentStatus, payment, "payment status") if payment else None,
        )
        return jsonify(leave_request_to_dict(saved))
