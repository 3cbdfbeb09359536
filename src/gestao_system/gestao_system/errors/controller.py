from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import auth_required, error_boundary, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container)

    # Error capture must work without a session (login page, expired tokens).
    @app.route("/api/errors", methods=["POST"], endpoint="errors_register")
    @error_boundary(container, "function:registerAndAnalyzeError")
    def errors_register():
        payload = json_body()
        if not payload.get("user_agent"):
            payload["user_agent"] = request.headers.get("User-Agent", "")
        return jsonify(container.error_log_service.register(payload))

    @app.route("/api/errors", methods=["GET"], endpoint="errors_list")
    @login_required
    @error_boundary(container, "api:errors_list")
    def errors_list():
        status = request.args.get("status") or None
        limit = request.args.get("limit", default=100, type=int)
        return jsonify({"success": True, "errors": container.error_log_service.list_errors(status=status, limit=limit)})
