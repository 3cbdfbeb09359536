from __future__ import annotations

import base64
import binascii
from typing import Optional

from flask import Flask, jsonify, request

from ..common.http import auth_required, error_boundary, json_body
from ..core.exceptions import ValidationError
from ..container import Container


def _decode_file_data(file_data: str) -> bytes:
    # Browsers send data URLs ("data:<mime>;base64,<payload>").
    payload = file_data.split(",", 1)[1] if file_data.startswith("data:") else file_data
    try:
        return base64.b64decode(payload, validate=False)
    except (binascii.Error, ValueError) as e:
        raise ValidationError("file_data inválido (base64 esperado)") from e


def _read_upload() -> tuple[Optional[str], Optional[bytes], Optional[str]]:
    """(pasted text, file bytes, file name) from a multipart form or a JSON body."""
    if request.files or request.form:
        upload = request.files.get("file")
        content = request.form.get("conteudo_colado") or None
        filename = request.form.get("nome_arquivo") or (upload.filename if upload else None)
        return content, (upload.read() if upload else None), filename

    data = json_body()
    content = data.get("conteudo_colado") or None
    file_data = data.get("file_data")
    file_bytes = _decode_file_data(file_data) if isinstance(file_data, str) and file_data else None
    return content, file_bytes, data.get("nome_arquivo")


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container)

    @app.route("/api/ponto/preview", methods=["POST"], endpoint="ponto_preview")
    @login_required
    @error_boundary(container, "function:processarPontoPreview")
    def ponto_preview():
        content, file_bytes, filename = _read_upload()
        result = container.timeclock_service.preview(content=content, file_bytes=file_bytes, filename=filename)
        return jsonify(result.to_dict())

    @app.route("/api/ponto/confirmar", methods=["POST"], endpoint="ponto_confirmar")
    @login_required
    @error_boundary(container, "function:confirmarImportacaoPonto")
    def ponto_confirmar():
        data = json_body()
        result = container.timeclock_service.confirm(
            data.get("registros_normalizados"),
            arquivo_nome=data.get("arquivo_nome"),
            periodo_inicio=data.get("periodo_inicio"),
            periodo_fim=data.get("periodo_fim"),
            metadados=data.get("metadados"),
            log_erros=data.get("log_erros"),
            total_validos=data.get("total_validos"),
            total_invalidos=data.get("total_invalidos"),
        )
        return jsonify(result.to_dict())

    @app.route("/api/ponto/salvar", methods=["POST"], endpoint="ponto_salvar")
    @login_required
    @error_boundary(container, "function:salvarRegistrosPonto")
    def ponto_salvar():
        result = container.timeclock_service.save_reviewed(json_body().get("registros"))
        return jsonify(result.to_dict())

    @app.route("/api/ponto/importar", methods=["POST"], endpoint="ponto_importar")
    @login_required
    @error_boundary(container, "function:importarPontoDireto")
    def ponto_importar():
        content, file_bytes, filename = _read_upload()
        result = container.timeclock_service.import_direct(content=content, file_bytes=file_bytes, filename=filename)
        return jsonify(result.to_dict())

    @app.route("/api/ponto/importacoes", methods=["GET"], endpoint="ponto_importacoes")
    @login_required
    @error_boundary(container, "function:listarImportacoes")
    def ponto_importacoes():
        limit = request.args.get("limit", default=50, type=int)
        return jsonify({"success": True, "importacoes": list(container.timeclock_service.list_imports(limit=limit))})
