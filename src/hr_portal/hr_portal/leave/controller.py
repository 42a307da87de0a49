from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import format_iso
from ..common.http import json_body
from ..core.enums import RequestKind
from ..identity.guards import build_guards
from ..users.authorization import require_access
from ..container import Container
from .model import DocumentRequest, LeaveBalance, LeaveRequest
from .service import parse_request_kind


def balance_to_json(b: LeaveBalance) -> dict:
    return {
        "userId": b.user_id,
        "sickLeave": b.sick_leave,
        "annualLeave": b.annual_leave,
        "emergencyLeave": b.emergency_leave,
        "updatedAt": format_iso(b.updated_at),
    }


def _request_to_json(r) -> dict:
    data = {
        "id": r.request_id,
        "userId": r.user_id,
        "userName": r.user_name,
        "reason": r.reason,
        "status": r.status.value,
        "reportingManagerId": r.reporting_manager_id,
        "reportingManagerName": r.reporting_manager_name,
        "createdAt": format_iso(r.created_at),
    }
    if isinstance(r, LeaveRequest):
        data.update(
            {
                "type": RequestKind.LEAVE.value,
                "leaveType": r.leave_type.value,
                "startDate": r.start_date.isoformat(),
                "endDate": r.end_date.isoformat(),
                "numberOfDays": r.number_of_days,
            }
        )
    elif isinstance(r, DocumentRequest):
        data.update({"type": RequestKind.DOCUMENT.value, "documentType": r.document_type})
    return data


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = build_guards(container.identity, container.users_repo)
    service = container.leave_service

    @app.route("/api/leave/balance", methods=["GET"], endpoint="api_leave_balance")
    @login_required
    def get_balance():
        uid = request.args.get("userId") or g.caller.uid
        require_access(g.caller.uid, g.caller.role, uid)
        return jsonify({"balance": balance_to_json(service.get_balance(uid))})

    @app.route("/api/leave/balance/<uid>", methods=["PUT"], endpoint="api_set_leave_balance")
    @admin_required
    def set_balance(uid: str):
        data = json_body()
        balance = service.set_balance(
            current_uid=g.caller.uid,
            current_role=g.caller.role,
            user_id=uid,
            sick_leave=data.get("sickLeave"),
            annual_leave=data.get("annualLeave"),
            emergency_leave=data.get("emergencyLeave"),
        )
        return jsonify({"balance": balance_to_json(balance)})

    @app.route("/api/leave/request", methods=["POST"], endpoint="api_submit_request")
    @login_required
    def submit_request():
        data = json_body()
        kind = parse_request_kind(data.get("type"))
        if kind == RequestKind.DOCUMENT:
            submission = service.submit_document(
                user_id=g.caller.uid,
                document_type=data.get("documentType", ""),
                reason=data.get("reason", ""),
            )
        else:
            submission = service.submit_leave(
                user_id=g.caller.uid,
                leave_type=data.get("leaveType", ""),
                start_date=data.get("startDate", ""),
                end_date=data.get("endDate", ""),
                reason=data.get("reason", ""),
                number_of_days=data.get("numberOfDays"),
            )
        return (
            jsonify(
                {
                    "message": "Request submitted",
                    "requestId": submission.request_id,
                    "type": submission.kind.value,
                    "reportingManager": submission.reporting_manager_name or "Not assigned",
                }
            ),
            201,
        )

    @app.route("/api/leave/request", methods=["GET"], endpoint="api_list_requests")
    @login_required
    def list_requests():
        uid = request.args.get("userId") or g.caller.uid
        require_access(g.caller.uid, g.caller.role, uid)
        items = service.list_requests(
            user_id=uid,
            kind=request.args.get("type"),
            status=request.args.get("status"),
        )
        return jsonify({"requests": [_request_to_json(r) for r in items]})
