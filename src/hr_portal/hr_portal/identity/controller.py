from __future__ import annotations

import logging

from flask import Flask, g, jsonify, session

from ..common.http import json_body
from ..container import Container
from ..users.controller import user_to_json
from .guards import SESSION_KEY, build_guards

logger = logging.getLogger(__name__)


def register(app: Flask, container: Container) -> None:
    login_required, _ = build_guards(container.identity, container.users_repo)

    @app.route("/api/auth/register", methods=["POST"], endpoint="api_register")
    def register_account():
        data = json_body()
        user = container.auth_service.register(
            email=data.get("email", ""),
            password=data.get("password", ""),
            display_name=data.get("displayName", ""),
            department=data.get("department", ""),
            position=data.get("position", ""),
        )
        return jsonify({"message": "Registration successful. Awaiting activation.", "user": user_to_json(user)}), 201

    @app.route("/api/auth/signin", methods=["POST"], endpoint="api_signin")
    def signin():
        data = json_body()
        user = container.auth_service.authenticate(data.get("email", ""), data.get("password", ""))

        session.clear()
        session[SESSION_KEY] = container.identity.create_session_cookie(user)
        session.permanent = True
        logger.info("User %s signed in", user.uid)

        return jsonify({"token": container.identity.issue_token(user), "user": user_to_json(user)})

    @app.route("/api/auth/signout", methods=["POST"], endpoint="api_signout")
    def signout():
        session.clear()
        return jsonify({"message": "Signed out"})

    @app.route("/api/auth/verify", methods=["GET"], endpoint="api_verify")
    @login_required
    def verify():
        return jsonify({"user": user_to_json(g.caller.user)})

    @app.route("/api/auth/password", methods=["PUT"], endpoint="api_change_password")
    @login_required
    def change_password():
        data = json_body()
        container.auth_service.change_password(
            uid=g.caller.uid,
            current_password=data.get("currentPassword", ""),
            new_password=data.get("newPassword", ""),
        )
        return jsonify({"message": "Password updated"})
