from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import format_clock, format_iso, now_local, parse_iso_date
from ..common.http import json_body
from ..common.pagination import PageRequest
from ..core.constants import DEFAULT_HISTORY_LIMIT
from ..core.enums import TodayState
from ..core.exceptions import ValidationError
from ..identity.guards import build_guards
from ..users.authorization import require_access
from ..container import Container
from .model import AttendanceRecord, DailyOverviewRow, DailyReportRow, MonthlySummary


def record_to_json(r: AttendanceRecord) -> dict:
    return {
        "id": r.attendance_id,
        "userId": r.user_id,
        "date": r.work_date.isoformat(),
        "checkIn": format_clock(r.check_in_time),
        "checkOut": format_clock(r.check_out_time),
        "status": r.status.value,
    }


def summary_to_json(s: MonthlySummary) -> dict:
    return {
        "totalDays": s.total_days,
        "presentDays": s.present_days,
        "lateDays": s.late_days,
        "absentDays": s.absent_days,
        "percentage": s.percentage,
    }


def _overview_to_json(r: DailyOverviewRow) -> dict:
    return {
        "userId": r.user_id,
        "displayName": r.display_name,
        "email": r.email,
        "department": r.department,
        "checkInTime": format_clock(r.check_in_time),
        "checkOutTime": format_clock(r.check_out_time),
        "status": r.status,
        "isActive": r.is_active,
        "lastActive": format_iso(r.last_active),
    }


def _report_to_json(r: DailyReportRow) -> dict:
    return {
        "userId": r.user_id,
        "userName": r.user_name,
        "department": r.department,
        "checkIn": format_clock(r.check_in_time),
        "checkOut": format_clock(r.check_out_time),
        "status": r.status.value,
    }


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = build_guards(container.identity, container.users_repo)
    service = container.attendance_service

    def _target_uid() -> str:
        uid = request.args.get("userId") or g.caller.uid
        require_access(g.caller.uid, g.caller.role, uid)
        return uid

    def _date_arg():
        value = request.args.get("date")
        return parse_iso_date(value) if value else now_local().date()

    @app.route("/api/attendance/status", methods=["GET"], endpoint="api_attendance_status")
    @login_required
    def today_status():
        today = service.get_today_status(_target_uid())
        if today is None:
            return jsonify({"today": None, "state": TodayState.NOT_CHECKED_IN.value})
        return jsonify(
            {
                "today": {
                    "recordId": today.record_id,
                    "checkIn": format_clock(today.check_in),
                    "checkOut": format_clock(today.check_out),
                    "status": today.status.value,
                },
                "state": today.state.value,
            }
        )

    @app.route("/api/attendance/check-in", methods=["POST"], endpoint="api_check_in")
    @login_required
    def check_in():
        attendance_id = service.check_in(g.caller.uid)
        return jsonify({"message": "Checked in", "attendanceId": attendance_id}), 201

    @app.route("/api/attendance/check-out", methods=["POST"], endpoint="api_check_out")
    @login_required
    def check_out():
        raw = json_body().get("attendanceId")
        try:
            attendance_id = int(raw)
        except (TypeError, ValueError):
            raise ValidationError("attendanceId is required")
        service.check_out(g.caller.uid, attendance_id)
        return jsonify({"message": "Checked out"})

    @app.route("/api/attendance/monthly", methods=["GET"], endpoint="api_attendance_monthly")
    @login_required
    def monthly():
        uid = _target_uid()
        as_of = now_local()
        records = service.get_monthly_records(uid, as_of=as_of)
        return jsonify(
            {
                "summary": summary_to_json(service.get_monthly_summary(uid, as_of=as_of)),
                "records": [record_to_json(r) for r in records],
            }
        )

    @app.route("/api/attendance/history", methods=["GET"], endpoint="api_attendance_history")
    @login_required
    def history():
        uid = _target_uid()
        try:
            limit = int(request.args.get("limit") or DEFAULT_HISTORY_LIMIT)
        except ValueError:
            raise ValidationError("limit must be an integer")
        return jsonify({"records": [record_to_json(r) for r in service.get_history(uid, limit=limit)]})

    @app.route("/api/attendance/heartbeat", methods=["POST"], endpoint="api_heartbeat")
    @login_required
    def heartbeat():
        at = service.heartbeat(g.caller.uid)
        return jsonify({"lastActive": format_iso(at)})

    @app.route("/api/admin/attendance", methods=["GET"], endpoint="api_admin_attendance")
    @admin_required
    def admin_attendance():
        page = PageRequest.from_args(request.args.get("page"), request.args.get("limit"))
        work_date = _date_arg()
        result = service.daily_overview(current_role=g.caller.role, work_date=work_date, page=page)
        return jsonify(
            {
                "date": work_date.isoformat(),
                "users": [_overview_to_json(r) for r in result.items],
                "pagination": result.meta(),
            }
        )

    @app.route("/api/admin/reports/daily", methods=["GET"], endpoint="api_admin_daily_report")
    @admin_required
    def admin_daily_report():
        work_date = _date_arg()
        rows = service.daily_report(current_role=g.caller.role, work_date=work_date)
        return jsonify({"date": work_date.isoformat(), "records": [_report_to_json(r) for r in rows]})
