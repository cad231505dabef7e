from __future__ import annotations

from flask import Flask, jsonify, session

from ..common.http import current_profile, json_body, json_view, store_profile
from ..core.enums import UserRole
from ..core.exceptions import AuthorizationError, ValidationError
from ..core.permissions import allowed_tabs
from ..container import Container
from ..storage.codec import profile_to_dict


def _me(profile):
    return {
        "profile": profile_to_dict(profile),
        "tabs": allowed_tabs(profile.role, has_employee_record=bool(profile.employee_id)),
    }


def register(app: Flask, container: Container) -> None:
    @app.route("/api/auth/login", methods=["POST"], endpoint="login")
    @json_view
    async def login():
        data = json_body()
        profile = await container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))
        store_profile(profile)
        return jsonify(_me(profile))

    @app.route("/api/auth/register", methods=["POST"], endpoint="register")
    @json_view
    async def register_account():
        data = json_body()
        try:
            role = UserRole(data.get("role", UserRole.EMPLOYEE.value))
        except ValueError as e:
            raise ValidationError("Unknown role") from e
        profile = await container.auth_service.register(
            name=data.get("name", ""),
            email=data.get("email", ""),
            password=data.get("password", ""),
            role=role,
        )
        store_profile(profile)
        return jsonify(_me(profile)), 201

    @app.route("/api/auth/logout", methods=["POST"], endpoint="logout")
    @json_view
    async def logout():
        await container.auth_service.sign_out()
        session.clear()
        return jsonify({"ok": True})

    @app.route("/api/me", methods=["GET"], endpoint="me")
    @json_view
    async def me():
        profile = current_profile()
        if not profile.is_logged_in:
            raise AuthorizationError("Please sign in to continue")
        return jsonify(_me(profile))

    @app.route("/api/me", methods=["PATCH"], endpoint="update_me")
    @json_view
    async def update_me():
        profile = current_profile()
        if not profile.is_logged_in:
            raise AuthorizationError("Please sign in to continue")
        data = json_body()
        updated = await container.profile_service.update(
            profile, name=data.get("name"), email=data.get("email"), avatar=data.get("avatar")
        )
        store_profile(updated)
        return jsonify(_me(updated))
