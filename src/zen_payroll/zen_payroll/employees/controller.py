from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import body_number, current_profile, json_body, json_view
from ..core.enums import Country, UserRole
from ..core.exceptions import ValidationError
from ..core.permissions import EMPLOYEES_VIEW, require_permission
from ..container import Container
from ..storage.codec import employee_to_dict
from .service import EmployeeService


def register(app: Flask, container: Container) -> None:
    @app.route("/api/companies/<company_id>/employees", methods=["GET"], endpoint="list_employees")
    @json_view
    async def list_employees(company_id: str):
        require_permission(current_profile(), EMPLOYEES_VIEW)
        employees = await container.employee_service.list_for_company(company_id)
        employees = EmployeeService.search(employees, request.args.get("q", ""))
        return jsonify([employee_to_dict(e) for e in employees])

    @app.route("/api/companies/<company_id>/employees", methods=["POST"], endpoint="onboard_employee")
    @json_view
    async def onboard_employee(company_id: str):
        data = json_body()
        salary = data.get("salaryStructure") or {}
        try:
            country = Country(data.get("country", Country.BD.value))
        except ValueError as e:
            raise ValidationError("Unknown country") from e
        emp = await container.employee_service.onboard(
            current_profile(),
            company_id=company_id,
            name=data.get("name", ""),
            email=data.get("email", ""),
            role=data.get("role", ""),
            department=data.get("department", ""),
            country=country,
            basic=body_number(salary, "basic"),
            hra=body_number(salary, "hra"),
            transport=body_number(salary, "transport"),
            medical=body_number(salary, "medical"),
        )
        return jsonify(employee_to_dict(emp)), 201

    @app.route("/api/employees/<employee_id>/role", methods=["PUT"], endpoint="update_employee_role")
    @json_view
    async def update_employee_role(employee_id: str):
        try:
            role = UserRole(json_body().get("role", ""))
        except ValueError as e:
            raise ValidationError("Unknown role") from e
        emp = await container.employee_service.update_role(current_profile(), employee_id, role)
        return jsonify(employee_to_dict(emp))

    @app.route("/api/employees/<employee_id>/activation", methods=["POST"], endpoint="toggle_employee_activation")
    @json_view
    async def toggle_employee_activation(employee_id: str):
        emp = await container.employee_service.toggle_activation(current_profile(), employee_id)
        return jsonify(employee_to_dict(emp))

    @app.route("/api/employees/<employee_id>", methods=["DELETE"], endpoint="revoke_employee_access")
    @json_view
    async def revoke_employee_access(employee_id: str):
        await container.employee_service.revoke_access(current_profile(), employee_id)
        return jsonify({"ok": True})

    @app.route("/api/departments", methods=["GET"], endpoint="list_departments")
    @json_view
    async def list_departments():
        require_permission(current_profile(), EMPLOYEES_VIEW)
        return jsonify(await container.department_service.list_departments())

    @app.route("/api/departments", methods=["POST"], endpoint="add_department")
    @json_view
    async def add_department():
        departments = await container.department_service.add_department(
            current_profile(), json_body().get("name", "")
        )
        return jsonify(departments), 201

    @app.route("/api/departments/<name>", methods=["DELETE"], endpoint="delete_department")
    @json_view
    async def delete_department(name: str):
        return jsonify(await container.department_service.delete_department(current_profile(), name))
