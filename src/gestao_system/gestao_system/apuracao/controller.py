from __future__ import annotations

from flask import Flask, jsonify

from ..common.http import auth_required, error_boundary, json_body
from ..container import Container


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container)

    @app.route("/api/ponto/apurar", methods=["POST"], endpoint="ponto_apurar")
    @login_required
    @error_boundary(container, "function:apurarPonto")
    def ponto_apurar():
        data = json_body()
        result = container.apuracao_service.apurar(data.get("funcionario_id"), data.get("mes_referencia"))
        return jsonify(result.to_dict())

    @app.route("/api/banco-horas/recalcular", methods=["POST"], endpoint="banco_horas_recalcular")
    @login_required
    @error_boundary(container, "function:recalcularBancoHoras")
    def banco_horas_recalcular():
        data = json_body()
        result = container.hour_bank_service.recalcular(data.get("funcionario_id"), data.get("mes_referencia"))
        return jsonify(result.to_dict())

    @app.route("/api/banco-horas/<funcionario_id>/saldo", methods=["GET"], endpoint="banco_horas_saldo")
    @login_required
    @error_boundary(container, "function:saldoBancoHoras")
    def banco_horas_saldo(funcionario_id: str):
        return jsonify(container.hour_bank_service.saldo(funcionario_id))
