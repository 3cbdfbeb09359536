from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..common.datetime_utils import minutes_to_hhmm
from ..core.enums import DayStatus
from ..core.exceptions import ValidationError
from .calculator.base import WorkedMinutesCalculator
from .calculator.standard_calculator import StandardWorkedMinutesCalculator
from .repository import ReportRepository

ROW_FIELDS = [
    "data",
    "funcionario_id",
    "nome",
    "departamento",
    "entrada_1",
    "saida_1",
    "entrada_2",
    "saida_2",
    "trabalhado",
    "atraso",
    "hora_extra",
    "falta",
    "status",
]


@dataclass(frozen=True)
class ReportData:
    rows: list[dict]
    summary: list[dict]


class TimesheetReportService:
    def __init__(self, repo: ReportRepository, *, calculator: Optional[WorkedMinutesCalculator] = None):
        self._repo = repo
        self._calculator = calculator or StandardWorkedMinutesCalculator()

    def build_report(
        self,
        *,
        start: date,
        end: date,
        funcionario_id: Optional[str] = None,
        departamento_id: Optional[str] = None,
    ) -> ReportData:
        if end < start:
            raise ValidationError("Data final anterior à inicial")

        employees = self._repo.employees_by_id()
        departments = self._repo.department_names()

        summary_map: dict[str, dict] = {}
        out_rows: list[dict] = []

        for r in self._repo.list_daily(start=start, end=end, funcionario_id=funcionario_id):
            emp_id = str(r.get("funcionario_id") or "")
            emp = employees.get(emp_id, {})
            if departamento_id and str(emp.get("departamento_id") or "") != departamento_id:
                continue

            minutes = self._calculator.worked_minutes(r)
            atraso = int(r.get("atraso_min") or 0)
            extra = int(r.get("hora_extra_min") or 0)
            out_rows.append(
                {
                    "data": r.get("data"),
                    "funcionario_id": emp_id,
                    "nome": emp.get("nome") or "-",
                    "departamento": departments.get(str(emp.get("departamento_id") or ""), "-"),
                    "entrada_1": r.get("entrada_1") or "-",
                    "saida_1": r.get("saida_1") or "-",
                    "entrada_2": r.get("entrada_2") or "-",
                    "saida_2": r.get("saida_2") or "-",
                    "trabalhado": minutes_to_hhmm(minutes),
                    "atraso": minutes_to_hhmm(atraso),
                    "hora_extra": minutes_to_hhmm(extra),
                    "falta": minutes_to_hhmm(int(r.get("falta_min") or 0)),
                    "status": r.get("status") or "",
                }
            )

            s = summary_map.get(emp_id)
            if not s:
                s = {
                    "funcionario_id": emp_id,
                    "nome": emp.get("nome") or "-",
                    "worked": 0,
                    "late": 0,
                    "extra": 0,
                    "faltas": 0,
                }
                summary_map[emp_id] = s
            s["worked"] += minutes
            s["late"] += atraso
            s["extra"] += extra
            if r.get("status") == DayStatus.ABSENT.value:
                s["faltas"] += 1

        ordered = sorted(summary_map.values(), key=lambda x: x["worked"], reverse=True)
        summary = [
            {
                "funcionario_id": s["funcionario_id"],
                "nome": s["nome"],
                "total_trabalhado": minutes_to_hhmm(s["worked"]),
                "total_atraso": minutes_to_hhmm(s["late"]),
                "total_hora_extra": minutes_to_hhmm(s["extra"]),
                "dias_falta": s["faltas"],
            }
            for s in ordered
        ]
        return ReportData(rows=out_rows, summary=summary)
