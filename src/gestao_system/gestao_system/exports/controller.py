from __future__ import annotations

from flask import Flask

from ..common.http import auth_required, error_boundary, json_body
from ..container import Container
from .model import ExportFile


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container)

    def _attachment(export: ExportFile):
        return app.response_class(
            export.content,
            mimetype=export.mimetype,
            headers={"Content-Disposition": f'attachment; filename="{export.filename}"'},
        )

    @app.route("/api/exportar/tabela", methods=["POST"], endpoint="exportar_tabela")
    @login_required
    @error_boundary(container, "function:exportarTabela")
    def exportar_tabela():
        data = json_body()
        export = container.table_export_service.export(
            data.get("entityName"), data.get("format") or "xlsx", data.get("filters")
        )
        return _attachment(export)

    @app.route("/api/exportar/pdf", methods=["POST"], endpoint="exportar_pdf")
    @login_required
    @error_boundary(container, "function:gerarPdfTabela")
    def exportar_pdf():
        data = json_body()
        export = container.pdf_service.render(
            columns=data.get("colunas"),
            rows=data.get("linhas"),
            title=data.get("titulo"),
            orientation=data.get("orientation"),
        )
        return _attachment(export)
