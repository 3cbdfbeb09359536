from __future__ import annotations

from datetime import date

from flask import Flask, jsonify, request

from ..common.datetime_utils import parse_iso_date
from ..common.http import auth_required, error_boundary
from ..common.spreadsheet import CSV_MIMETYPE, XLSX_MIMETYPE, rows_to_csv, rows_to_xlsx
from ..core.exceptions import ValidationError
from ..container import Container
from .service import ROW_FIELDS


def _parse_date(value: str) -> date:
    try:
        return parse_iso_date(value)
    except ValueError as e:
        raise ValidationError(f"Data inválida: {value!r} (use YYYY-MM-DD)") from e


def register(app: Flask, container: Container) -> None:
    login_required = auth_required(container)

    def _attachment(body: bytes, *, mimetype: str, filename: str):
        return app.response_class(
            body,
            mimetype=mimetype,
            headers={"Content-Disposition": f"attachment; filename={filename}"},
        )

    @app.route("/api/relatorios/espelho", methods=["GET"], endpoint="relatorio_espelho")
    @login_required
    @error_boundary(container, "function:espelhoPonto")
    def relatorio_espelho():
        today = date.today()
        start = _parse_date(request.args.get("start") or today.replace(day=1).isoformat())
        end = _parse_date(request.args.get("end") or today.isoformat())
        fmt = (request.args.get("format") or "json").lower()

        data = container.report_service.build_report(
            start=start,
            end=end,
            funcionario_id=request.args.get("funcionario_id") or None,
            departamento_id=request.args.get("departamento_id") or None,
        )

        filename = f"espelho_ponto_{start.strftime('%Y%m%d')}_{end.strftime('%Y%m%d')}"
        if fmt == "csv":
            return _attachment(rows_to_csv(data.rows, ROW_FIELDS), mimetype=CSV_MIMETYPE, filename=f"{filename}.csv")
        if fmt == "xlsx":
            body = rows_to_xlsx(data.rows, ROW_FIELDS, sheet_name="Espelho")
            return _attachment(body, mimetype=XLSX_MIMETYPE, filename=f"{filename}.xlsx")
        if fmt != "json":
            raise ValidationError("Formato inválido. Use json, csv ou xlsx.")

        return jsonify(
            {
                "success": True,
                "start": start.isoformat(),
                "end": end.isoformat(),
                "rows": data.rows,
                "summary": data.summary,
            }
        )
