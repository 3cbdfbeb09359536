from __future__ import annotations

import io
import logging
from xml.sax.saxutils import escape
from typing import Any, Mapping, Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape, portrait
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..common.spreadsheet import CSV_MIMETYPE, XLSX_MIMETYPE, rows_to_csv, rows_to_xlsx
from ..common.validators import s
from ..core.exceptions import ValidationError
from ..entities.store import Entity
from .model import ExportFile
from .repository import ExportRepository

logger = logging.getLogger(__name__)

BUDGET_COLUMNS = [
    "Nº Orçamento",
    "Data",
    "Validade",
    "Cliente/Contato",
    "Vendedor",
    "Forma de Pagamento",
    "Condição de Pagamento",
    "Produtos",
    "Serviços",
    "Desconto",
    "Valor Total",
    "Status",
]

PDF_MIMETYPE = "application/pdf"


def _number(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def items_total(orc: Mapping, tipo: str) -> float:
    return sum(_number(i.get("valor_total")) for i in (orc.get("itens") or []) if i.get("tipo") == tipo)


def discount_amount(orc: Mapping, subtotal: float) -> float:
    if orc.get("desconto_tipo") == "percentual":
        return subtotal * _number(orc.get("desconto_valor")) / 100
    return _number(orc.get("desconto_valor"))


def contact_name(orc: Mapping, clients: Mapping[str, str], employees: Mapping[str, str]) -> str:
    contato_id = orc.get("contato_id")
    if orc.get("contato_tipo") == "cliente" and contato_id:
        return clients.get(str(contato_id)) or "Cliente não encontrado"
    if orc.get("contato_tipo") == "funcionario" and contato_id:
        return employees.get(str(contato_id)) or "Funcionário não encontrado"
    if orc.get("cliente_id"):
        return clients.get(str(orc["cliente_id"])) or "Cliente não encontrado"
    return "N/A"


class TableExportService:
    """Spreadsheet export of registered entities (budgets only for now)."""

    def __init__(self, repo: ExportRepository):
        self._repo = repo

    def budget_rows(self, filters: Optional[dict[str, Any]] = None) -> list[dict]:
        clients = self._repo.client_names()
        employees = self._repo.employee_names()

        rows = []
        for orc in self._repo.filter_budgets(filters or {}):
            produtos = items_total(orc, "produto")
            servicos = items_total(orc, "servico")
            rows.append(
                {
                    "Nº Orçamento": orc.get("numero_orcamento") or "",
                    "Data": orc.get("data_orcamento") or "",
                    "Validade": orc.get("data_validade") or "-",
                    "Cliente/Contato": contact_name(orc, clients, employees),
                    "Vendedor": employees.get(str(orc.get("vendedor_id"))) or "N/A",
                    "Forma de Pagamento": orc.get("forma_pagamento") or "-",
                    "Condição de Pagamento": orc.get("condicao_pagamento") or "-",
                    "Produtos": produtos,
                    "Serviços": servicos,
                    "Desconto": discount_amount(orc, produtos + servicos),
                    "Valor Total": _number(orc.get("valor_total")),
                    "Status": orc.get("status") or "",
                }
            )
        return rows

    def export(self, entity_name: Any, fmt: Any = "xlsx", filters: Any = None) -> ExportFile:
        if s(entity_name) != Entity.ORCAMENTO:
            raise ValidationError("Entidade não suportada para exportação.")
        fmt = "csv" if s(fmt).lower() == "csv" else "xlsx"
        rows = self.budget_rows(filters if isinstance(filters, dict) else {})
        logger.info("Exporting %s budgets as %s", len(rows), fmt)

        filename = f"relatorio_orcamentos.{fmt}"
        if fmt == "csv":
            return ExportFile(filename=filename, mimetype=CSV_MIMETYPE, content=rows_to_csv(rows, BUDGET_COLUMNS))
        return ExportFile(
            filename=filename,
            mimetype=XLSX_MIMETYPE,
            content=rows_to_xlsx(rows, BUDGET_COLUMNS, sheet_name="Orçamentos"),
        )


class PdfTableService:
    """Render a table already shown on screen as an A4 PDF."""

    MARGIN = 0.5 * cm

    def render(
        self,
        *,
        columns: Any,
        rows: Any,
        title: Optional[str] = None,
        orientation: Optional[str] = "portrait",
    ) -> ExportFile:
        if not isinstance(columns, list) or not columns:
            raise ValidationError("colunas é obrigatório")
        if rows is not None and not isinstance(rows, list):
            raise ValidationError("linhas deve ser uma lista")

        headers = [s(c) for c in columns]
        pagesize = landscape(A4) if orientation == "landscape" else portrait(A4)

        buf = io.BytesIO()
        doc = SimpleDocTemplate(
            buf,
            pagesize=pagesize,
            rightMargin=self.MARGIN,
            leftMargin=self.MARGIN,
            topMargin=self.MARGIN,
            bottomMargin=self.MARGIN,
            title=s(title) or "Relatório",
        )
        styles = getSampleStyleSheet()
        cell_style = styles["BodyText"]
        story = []

        if s(title):
            story.append(Paragraph(escape(s(title)), styles["Title"]))
            story.append(Spacer(1, 12))

        data = [headers]
        for row in rows or []:
            data.append([Paragraph(escape(s(v)), cell_style) for v in self._cells(row, headers)])

        col_width = doc.width / len(headers)
        table = Table(data, colWidths=[col_width] * len(headers), repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.lightgrey),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.black),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("ALIGN", (0, 0), (-1, -1), "LEFT"),
                    ("VALIGN", (0, 0), (-1, -1), "TOP"),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.black),
                    ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
                ]
            )
        )
        story.append(table)
        doc.build(story)
        return ExportFile(filename="relatorio.pdf", mimetype=PDF_MIMETYPE, content=buf.getvalue())

    @staticmethod
    def _cells(row: Any, headers: Sequence[str]) -> list[Any]:
        if isinstance(row, dict):
            return [row.get(h, "") for h in headers]
        if isinstance(row, (list, tuple)):
            values = list(row)[: len(headers)]
            return values + [""] * (len(headers) - len(values))
        return [row] + [""] * (len(headers) - 1)
