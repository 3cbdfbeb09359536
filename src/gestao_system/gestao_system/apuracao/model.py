from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Mapping, Optional

from ..common.datetime_utils import hhmm_to_minutes
from ..core.constants import (
    DEFAULT_DAILY_LOAD_MINUTES,
    DEFAULT_EXPECTED_START,
    DEFAULT_TOLERANCE_MINUTES,
    DEFAULT_WORK_DAYS,
)
from ..core.enums import DayStatus, OccurrenceType


def parse_work_days(value: Any) -> frozenset[int]:
    """'1,2,3,4,5' (0=domingo) or a list of ints -> set of weekday numbers."""
    if isinstance(value, (list, tuple, set, frozenset)):
        items = [str(v) for v in value]
    else:
        items = str(value or "").split(",")
    days = {int(v.strip()) for v in items if v.strip().isdigit() and 0 <= int(v.strip()) <= 6}
    return frozenset(days)


def sunday_based_weekday(day: date) -> int:
    return (day.weekday() + 1) % 7


@dataclass(frozen=True)
class WorkSchedule:
    """EscalaTrabalho in effect, with the defaults applied."""

    escala_id: Optional[str] = None
    tolerancia_minutos: int = DEFAULT_TOLERANCE_MINUTES
    carga_diaria_minutos: int = DEFAULT_DAILY_LOAD_MINUTES
    entrada_prevista_min: int = 8 * 60
    dias_semana: frozenset[int] = field(default_factory=lambda: parse_work_days(DEFAULT_WORK_DAYS))

    @classmethod
    def from_record(cls, record: Optional[Mapping[str, Any]]) -> "WorkSchedule":
        if not record:
            return cls()
        start = hhmm_to_minutes(record.get("hora_entrada_prevista")) or hhmm_to_minutes(DEFAULT_EXPECTED_START)
        days = parse_work_days(record.get("dias_semana")) if record.get("dias_semana") else None
        return cls(
            escala_id=record.get("id"),
            tolerancia_minutos=int(record.get("tolerancia_minutos") or DEFAULT_TOLERANCE_MINUTES),
            carga_diaria_minutos=int(record.get("carga_diaria_minutos") or DEFAULT_DAILY_LOAD_MINUTES),
            entrada_prevista_min=int(start),
            dias_semana=days or parse_work_days(DEFAULT_WORK_DAYS),
        )

    def is_work_day(self, day: date) -> bool:
        return sunday_based_weekday(day) in self.dias_semana


@dataclass(frozen=True)
class DayContext:
    day: date
    horas: tuple[str, ...]
    schedule: WorkSchedule
    occurrence: Optional[OccurrenceType] = None


@dataclass(frozen=True)
class DayResult:
    """Computed fields of one ApuracaoDiariaPonto."""

    status: DayStatus
    entrada_1: Optional[str] = None
    saida_1: Optional[str] = None
    entrada_2: Optional[str] = None
    saida_2: Optional[str] = None
    total_trabalhado_min: int = 0
    atraso_min: int = 0
    falta_min: int = 0
    hora_extra_min: int = 0
    banco_horas_min: int = 0
    observacoes: Optional[str] = None

    def to_dict(self) -> dict:
        data = asdict(self)
        data["status"] = self.status.value
        return data


@dataclass(frozen=True)
class ApuracaoResult:
    funcionario_id: str
    mes_referencia: str
    dias: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": True,
            "message": f"Apuração gerada para {self.funcionario_id} no mês {self.mes_referencia}",
            "total_dias": len(self.dias),
            "dias": self.dias,
        }


@dataclass(frozen=True)
class RecalculoResult:
    total_lancamentos: int
    total_ja_existente: int

    def to_dict(self) -> dict:
        return {
            "success": True,
            "message": (
                f"Recálculo concluído: {self.total_lancamentos} lançamentos criados, "
                f"{self.total_ja_existente} já existentes."
            ),
            "totalLancamentos": self.total_lancamentos,
            "totalJaExistente": self.total_ja_existente,
        }
