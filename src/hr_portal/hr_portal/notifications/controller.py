from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.datetime_utils import format_iso
from ..identity.guards import build_guards
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required, _ = build_guards(container.identity, container.users_repo)

    @app.route("/api/notifications", methods=["GET"], endpoint="api_notifications")
    @login_required
    def list_notifications():
        unread_only = request.args.get("unread", "").lower() in {"1", "true", "yes"}
        items = container.notification_service.list_for_user(g.caller.uid, unread_only=unread_only)
        return jsonify(
            {
                "notifications": [
                    {
                        "id": n.notification_id,
                        "type": n.type.value,
                        "title": n.title,
                        "message": n.message,
                        "relatedId": n.related_id,
                        "read": n.read,
                        "createdAt": format_iso(n.created_at),
                    }
                    for n in items
                ]
            }
        )
