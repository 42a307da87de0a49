from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import format_iso
from ..common.http import json_body
from ..common.pagination import PageRequest
from ..identity.guards import build_guards
from ..container import Container
from .model import User

# camelCase request keys accepted by the profile update endpoint.
_PROFILE_KEYS = {
    "displayName": "display_name",
    "phoneNumber": "phone_number",
    "department": "department",
    "position": "position",
    "designation": "designation",
    "officeLocation": "office_location",
    "homeLocation": "home_location",
    "seatingLocation": "seating_location",
    "extensionNumber": "extension_number",
    "employeeType": "employee_type",
    "dateOfBirth": "date_of_birth",
    "dateOfJoining": "date_of_joining",
    "reportingManagerId": "reporting_manager_id",
    "email": "email",
}


def user_to_json(user: User) -> dict:
    return {
        "uid": user.uid,
        "email": user.email,
        "displayName": user.display_name,
        "role": user.role.value,
        "status": user.status.value,
        "department": user.department,
        "position": user.position,
        "designation": user.designation,
        "phoneNumber": user.phone_number,
        "officeLocation": user.office_location,
        "homeLocation": user.home_location,
        "seatingLocation": user.seating_location,
        "extensionNumber": user.extension_number,
        "employeeType": user.employee_type,
        "dateOfBirth": format_iso(user.date_of_birth),
        "dateOfJoining": format_iso(user.date_of_joining),
        "reportingManagerId": user.reporting_manager_id,
        "reportingManagerName": user.reporting_manager_name,
        "lastActive": format_iso(user.last_active),
        "isActive": user.is_active,
        "createdAt": format_iso(user.created_at),
    }


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = build_guards(container.identity, container.users_repo)

    @app.route("/api/users", methods=["GET"], endpoint="api_list_users")
    @admin_required
    def list_users():
        page = PageRequest.from_args(request.args.get("page"), request.args.get("limit"))
        result = container.user_service.list_users(current_role=g.caller.role, page=page)
        return jsonify({"users": [user_to_json(u) for u in result.items], "pagination": result.meta()})

    @app.route("/api/users/managers", methods=["GET"], endpoint="api_list_managers")
    @login_required
    def list_managers():
        managers = container.user_service.list_managers()
        return jsonify(
            {"managers": [{"uid": m.uid, "displayName": m.display_name, "email": m.email} for m in managers]}
        )

    @app.route("/api/users/<uid>", methods=["GET"], endpoint="api_get_user")
    @login_required
    def get_user(uid: str):
        user = container.user_service.get_user(current_uid=g.caller.uid, current_role=g.caller.role, uid=uid)
        return jsonify({"user": user_to_json(user)})

    @app.route("/api/users/<uid>", methods=["PUT"], endpoint="api_update_user")
    @login_required
    def update_user(uid: str):
        data = json_body()
        changes = {field: data[key] for key, field in _PROFILE_KEYS.items() if key in data}
        user = container.user_service.update_profile(
            current_uid=g.caller.uid,
            current_role=g.caller.role,
            uid=uid,
            changes=changes,
        )
        return jsonify({"user": user_to_json(user)})

    @app.route("/api/users/<uid>", methods=["DELETE"], endpoint="api_delete_user")
    @admin_required
    def delete_user(uid: str):
        container.user_service.delete_user(current_uid=g.caller.uid, current_role=g.caller.role, uid=uid)
        return jsonify({"message": "User deleted"})

    @app.route("/api/users/<uid>/role", methods=["PUT"], endpoint="api_update_role")
    @admin_required
    def update_role(uid: str):
        user = container.user_service.update_role(
            current_uid=g.caller.uid,
            current_role=g.caller.role,
            uid=uid,
            role=str(json_body().get("role") or ""),
        )
        return jsonify({"user": user_to_json(user)})

    @app.route("/api/users/<uid>/status", methods=["PUT"], endpoint="api_update_status")
    @admin_required
    def update_status(uid: str):
        user = container.user_service.update_status(
            current_uid=g.caller.uid,
            current_role=g.caller.role,
            uid=uid,
            status=str(json_body().get("status") or ""),
        )
        return jsonify({"user": user_to_json(user)})
