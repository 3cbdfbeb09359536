from __future__ import annotations

from flask import Flask, jsonify, request

from ..common.http import auth_required, error_boundary, json_body
from ..container import Container

_RESERVED_ARGS = ("sort", "limit")


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container)

    @app.route("/api/cadastros/<entidade>", methods=["GET"], endpoint="cadastros_list")
    @login_required
    @error_boundary(container, "api:cadastros_list")
    def cadastros_list(entidade: str):
        criteria = {k: v for k, v in request.args.items() if k not in _RESERVED_ARGS}
        rows = container.cadastro_service.list(
            entidade,
            criteria=criteria or None,
            sort=request.args.get("sort") or None,
            limit=request.args.get("limit", type=int),
        )
        return jsonify({"success": True, "registros": rows})

    @app.route("/api/cadastros/<entidade>", methods=["POST"], endpoint="cadastros_create")
    @login_required
    @error_boundary(container, "api:cadastros_create")
    def cadastros_create(entidade: str):
        record = container.cadastro_service.create(entidade, request.get_json(silent=True))
        return jsonify({"success": True, "registro": record}), 201

    @app.route("/api/cadastros/<entidade>/<record_id>", methods=["GET"], endpoint="cadastros_get")
    @login_required
    @error_boundary(container, "api:cadastros_get")
    def cadastros_get(entidade: str, record_id: str):
        return jsonify({"success": True, "registro": container.cadastro_service.get(entidade, record_id)})

    @app.route("/api/cadastros/<entidade>/<record_id>", methods=["PUT"], endpoint="cadastros_update")
    @login_required
    @error_boundary(container, "api:cadastros_update")
    def cadastros_update(entidade: str, record_id: str):
        record = container.cadastro_service.update(entidade, record_id, json_body())
        return jsonify({"success": True, "registro": record})

    @app.route("/api/cadastros/<entidade>/<record_id>", methods=["DELETE"], endpoint="cadastros_delete")
    @login_required
    @error_boundary(container, "api:cadastros_delete")
    def cadastros_delete(entidade: str, record_id: str):
        container.cadastro_service.delete(entidade, record_id)
        return jsonify({"success": True, "message": "Registro excluído"})
