from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import format_iso
from ..common.http import json_body
from ..common.pagination import PageRequest
from ..identity.guards import build_guards
from ..container import Container
from .model import Announcement


def announcement_to_json(a: Announcement) -> dict:
    return {
        "id": a.announcement_id,
        "title": a.title,
        "content": a.content,
        "priority": a.priority.value,
        "authorId": a.author_id,
        "authorName": a.author_name,
        "isActive": a.is_active,
        "createdAt": format_iso(a.created_at),
        "updatedAt": format_iso(a.updated_at),
    }


def register(app: Flask, container: Container) -> None:
    login_required, admin_required = build_guards(container.identity, container.users_repo)

    @app.route("/api/announcements", methods=["GET"], endpoint="api_list_announcements")
    @login_required
    def list_announcements():
        page = PageRequest.from_args(request.args.get("page"), request.args.get("limit"))
        result = container.announcement_service.list_active(page=page)
        return jsonify(
            {"announcements": [announcement_to_json(a) for a in result.items], "pagination": result.meta()}
        )

    @app.route("/api/announcements", methods=["POST"], endpoint="api_publish_announcement")
    @admin_required
    def publish_announcement():
        data = json_body()
        announcement = container.announcement_service.publish(
            author=g.caller.user,
            title=data.get("title", ""),
            content=data.get("content", ""),
            priority=data.get("priority"),
        )
        return jsonify({"announcement": announcement_to_json(announcement)}), 201

    @app.route("/api/announcements/<int:announcement_id>", methods=["DELETE"], endpoint="api_deactivate_announcement")
    @admin_required
    def deactivate_announcement(announcement_id: int):
        container.announcement_service.deactivate(
            current_uid=g.caller.uid,
            current_role=g.caller.role,
            announcement_id=announcement_id,
        )
        return jsonify({"message": "Announcement removed"})
