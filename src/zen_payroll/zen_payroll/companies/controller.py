from __future__ import annotations

from dataclasses import asdict

from flask import Flask, jsonify

from ..common.http import current_profile, json_body, json_view
from ..core.enums import Country, UserRole
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..core.permissions import DASHBOARD_VIEW, INSIGHTS_VIEW, require_permission
from ..container import Container
from ..storage.codec import company_to_dict


def register(app: Flask, container: Container) -> None:
    async def _company(company_id: str):
        companies = await container.company_service.list_companies()
        company = next((c for c in companies if c.id == company_id), None)
        if company is None:
            raise NotFoundError("Company does not exist")
        return company

    @app.route("/api/companies", methods=["GET"], endpoint="list_companies")
    @json_view
    async def list_companies():
        if not current_profile().is_logged_in:
            raise AuthorizationError("Please sign in to continue")
        companies = await container.company_service.list_companies()
        return jsonify([company_to_dict(c) for c in companies])

    @app.route("/api/companies", methods=["POST"], endpoint="add_company")
    @json_view
    async def add_company():
        data = json_body()
        try:
            country = Country(data.get("country", Country.BD.value))
        except ValueError as e:
            raise ValidationError("Unknown country") from e
        companies = await container.company_service.add_company(
            current_profile(), name=data.get("name", ""), logo=data.get("logo", ""), country=country
        )
        return jsonify([company_to_dict(c) for c in companies]), 201

    @app.route("/api/companies/<company_id>", methods=["DELETE"], endpoint="delete_company")
    @json_view
    async def delete_company(company_id: str):
        result = await container.company_service.delete_company(current_profile(), company_id)
        return jsonify(
            {
                "companies": [company_to_dict(c) for c in result.companies],
                "removedEmployeeIds": list(result.removed_employee_ids),
                "removedLeaveRequestIds": list(result.removed_leave_request_ids),
                "orphanedEmployeeIds": list(result.orphaned_employee_ids),
                "keptPayrollRecordIds": list(result.kept_payroll_record_ids),
            }
        )

    @app.route("/api/companies/<company_id>/dashboard", methods=["GET"], endpoint="company_dashboard")
    @json_view
    async def company_dashboard(company_id: str):
        profile = current_profile()
        if profile.role != UserRole.EMPLOYEE:
            require_permission(profile, DASHBOARD_VIEW)
        company = await _company(company_id)
        employees = await container.employee_service.list_for_company(company.id)
        records = await container.payroll_service.list_records(profile, company.id)
        dashboard = container.dashboard_service
        return jsonify(
            {
                "company": company_to_dict(company),
                "stats": asdict(dashboard.stats(profile, employees, records)),
                "chart": [asdict(p) for p in dashboard.monthly_chart(profile, records)],
                "departments": [asdict(d) for d in dashboard.department_breakdown(employees)],
            }
        )

    @app.route("/api/companies/<company_id>/insights", methods=["GET"], endpoint="company_insights")
    @json_view
    async def company_insights(company_id: str):
        profile = current_profile()
        require_permission(profile, INSIGHTS_VIEW)
        company = await _company(company_id)
        employees = await container.employee_service.list_for_company(company.id)
        records = await container.payroll_service.list_records(profile, company.id)
        insights = await container.dashboard_service.insights(profile, employees, records)
        return jsonify([asdict(i) for i in insights])
