from __future__ import annotations

from datetime import date

import pytest

from src.gestao_system.gestao_system.core.exceptions import ValidationError
from src.gestao_system.gestao_system.reports.calculator.standard_calculator import StandardWorkedMinutesCalculator
from src.gestao_system.gestao_system.reports.service import TimesheetReportService


class FakeReportRepo:
    def __init__(self, rows):
        self._rows = rows
        self.last_args = None

    def list_daily(self, *, start, end, funcionario_id=None):
        self.last_args = {"start": start, "end": end, "funcionario_id": funcionario_id}
        return self._rows

    def employees_by_id(self):
        return {
            "f1": {"id": "f1", "nome": "Ana", "departamento_id": "d1"},
            "f2": {"id": "f2", "nome": "Bruno", "departamento_id": "d2"},
        }

    def department_names(self):
        return {"d1": "Oficina", "d2": "Vendas"}


ROWS = [
    {
        "funcionario_id": "f1",
        "data": "2025-01-02",
        "entrada_1": "08:00:00",
        "saida_1": "12:00:00",
        "entrada_2": "13:00:00",
        "saida_2": "17:00:00",
        "atraso_min": 0,
        "hora_extra_min": 0,
        "status": "ok",
    },
    {
        "funcionario_id": "f2",
        "data": "2025-01-02",
        "entrada_1": "08:10",
        "saida_1": "18:40",
        "atraso_min": 10,
        "hora_extra_min": 150,
        "status": "ok",
    },
    {"funcionario_id": "f1", "data": "2025-01-03", "falta_min": 480, "status": "falta"},
]


def test_standard_calculator_sums_closed_periods():
    calc = StandardWorkedMinutesCalculator()

    assert calc.worked_minutes(ROWS[0]) == 8 * 60
    assert calc.worked_minutes({"entrada_1": "08:00", "saida_1": None}) == 0
    assert calc.worked_minutes({"entrada_1": "12:00", "saida_1": "08:00"}) == 0


def test_report_rows_and_summary():
    svc = TimesheetReportService(FakeReportRepo(ROWS))
    report = svc.build_report(start=date(2025, 1, 1), end=date(2025, 1, 31))

    assert report.rows[0]["trabalhado"] == "08:00"
    assert report.rows[0]["departamento"] == "Oficina"
    assert report.rows[2]["falta"] == "08:00"
    assert report.rows[2]["entrada_1"] == "-"

    assert [s["nome"] for s in report.summary] == ["Bruno", "Ana"]
    ana = report.summary[1]
    assert ana["total_trabalhado"] == "08:00"
    assert ana["dias_falta"] == 1
    assert report.summary[0]["total_hora_extra"] == "02:30"


def test_report_filters_department():
    svc = TimesheetReportService(FakeReportRepo(ROWS))
    report = svc.build_report(start=date(2025, 1, 1), end=date(2025, 1, 31), departamento_id="d2")

    assert {r["funcionario_id"] for r in report.rows} == {"f2"}


def test_report_forwards_employee_filter():
    repo = FakeReportRepo([])
    TimesheetReportService(repo).build_report(start=date(2025, 1, 1), end=date(2025, 1, 31), funcionario_id="f9")

    assert repo.last_args["funcionario_id"] == "f9"


def test_report_rejects_inverted_range():
    with pytest.raises(ValidationError):
        TimesheetReportService(FakeReportRepo([])).build_report(start=date(2025, 2, 1), end=date(2025, 1, 1))
