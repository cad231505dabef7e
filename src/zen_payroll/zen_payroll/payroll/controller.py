from __future__ import annotations

from dataclasses import asdict

from flask import Flask, Response, jsonify, request

from ..common.http import current_profile, json_body, json_view, payroll_inputs, preview_to_dict
from ..core.enums import PayrollStatus
from ..core.exceptions import NotFoundError, ValidationError
from ..core.permissions import LEDGER_VIEW, require_permission
from ..container import Container
from ..storage.codec import payroll_record_to_dict
from .service import PayrollService


def register(app: Flask, container: Container) -> None:
    async def _company(company_id: str):
        companies = await container.company_service.list_companies()
        company = next((c for c in companies if c.id == company_id), None)
        if company is None:
            raise NotFoundError("Company does not exist")
        return company

    def _status_filter():
        raw = request.args.get("status")
        if not raw or raw == "All":
            return None
        try:
            return PayrollStatus(raw)
        except ValueError as e:
            raise ValidationError("Unknown payroll status") from e

    @app.route("/api/employees/<employee_id>/unpaid-leave", methods=["GET"], endpoint="unpaid_leave_suggestion")
    @json_view
    async def unpaid_leave_suggestion(employee_id: str):
        employee = await container.employee_service.get(employee_id)
        suggestion = await container.payroll_service.suggest_unpaid_leave(current_profile(), employee)
        return jsonify(asdict(suggestion))

    @app.route("/api/employees/<employee_id>/payroll/preview", methods=["POST"], endpoint="preview_payroll")
    @json_view
    async def preview_payroll(employee_id: str):
        data = json_body()
        employee = await container.employee_service.get(employee_id)
        preview = await container.payroll_service.preview(
            current_profile(),
            employee,
            payroll_inputs(data),
            use_advisory=bool(data.get("useAdvisory", True)),
        )
        return jsonify(preview_to_dict(preview))

    @app.route("/api/employees/<employee_id>/payroll", methods=["POST"], endpoint="disburse_payroll")
    @json_view
    async def disburse_payroll(employee_id: str):
        data = json_body()
        employee = await container.employee_service.get(employee_id)
        company = await _company(str(data.get("companyId") or employee.company_id))
        record = await container.payroll_service.disburse(
            current_profile(), employee=employee, company=company, inputs=payroll_inputs(data)
        )
        return jsonify(payroll_record_to_dict(record)), 201

    @app.route("/api/companies/<company_id>/payroll", methods=["GET"], endpoint="payroll_ledger")
    @json_view
    async def payroll_ledger(company_id: str):
        profile = current_profile()
        records = await container.payroll_service.list_records(profile, company_id)
        employees = await container.employee_service.list_for_company(company_id)
        rows = PayrollService.ledger(records, employees, status=_status_filter(), term=request.args.get("q", ""))
        return jsonify([payroll_record_to_dict(r) for r in rows])

    @app.route("/api/companies/<company_id>/payroll.csv", methods=["GET"], endpoint="export_payroll_csv")
    @json_view
    async def export_payroll_csv(company_id: str):
        profile = current_profile()
        require_permission(profile, LEDGER_VIEW)
        records = await container.payroll_service.list_records(profile, company_id)
        employees = await container.employee_service.list_for_company(company_id)
        rows = PayrollService.ledger(records, employees, status=_status_filter(), term=request.args.get("q", ""))
        return Response(
            PayrollService.export_csv(rows),
            mimetype="text/csv",
            headers={"Content-Disposition": f"attachment; filename=payroll_ledger_{company_id}.csv"},
        )
