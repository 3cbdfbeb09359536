from __future__ import annotations

from flask import Flask, g, jsonify

from ..common.http import auth_required, error_boundary, json_body
from ..core.enums import Role
from ..core.exceptions import AuthorizationError, ValidationError
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container)

    def _require_admin() -> None:
        if g.current_user.role != Role.ADMIN:
            raise AuthorizationError("Acesso restrito a administradores")

    @app.route("/api/auth/login", methods=["POST"], endpoint="auth_login")
    @error_boundary(container, "api:auth_login")
    def auth_login():
        data = json_body()
        token = container.auth_service.authenticate(data.get("username") or "", data.get("password") or "")
        return jsonify(
            {
                "success": True,
                "token": token.token,
                "token_type": "Bearer",
                "expires_in": token.expires_in,
                "user": token.user.to_dict(),
            }
        )

    @app.route("/api/auth/me", methods=["GET"], endpoint="auth_me")
    @login_required
    def auth_me():
        return jsonify({"success": True, "user": g.current_user.to_dict()})

    @app.route("/api/usuarios", methods=["GET"], endpoint="usuarios_list")
    @login_required
    @error_boundary(container, "api:usuarios_list")
    def usuarios_list():
        _require_admin()
        return jsonify({"success": True, "usuarios": container.user_service.list_users()})

    @app.route("/api/usuarios", methods=["POST"], endpoint="usuarios_create")
    @login_required
    @error_boundary(container, "api:usuarios_create")
    def usuarios_create():
        _require_admin()
        data = json_body()
        try:
            role = Role(data.get("role") or Role.USER.value)
        except ValueError as e:
            raise ValidationError("Papel inválido") from e

        user_id = container.user_service.create_user(
            full_name=data.get("full_name") or "",
            username=data.get("username") or "",
            password=data.get("password") or "",
            email=data.get("email") or "",
            role=role,
        )
        return jsonify({"success": True, "message": "Usuário criado com sucesso", "id": user_id}), 201
