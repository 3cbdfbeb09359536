from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from ...common.datetime_utils import hhmm_to_minutes
from ...core.enums import DayStatus
from ..model import DayContext, DayResult


def minutes_between(start: Optional[str], end: Optional[str]) -> int:
    m1 = hhmm_to_minutes(start)
    m2 = hhmm_to_minutes(end)
    if m1 is None or m2 is None:
        return 0
    return max(m2 - m1, 0)


class DayStrategy(ABC):
    """Strategy Pattern: encapsulate how one day of punches is judged."""

    @abstractmethod
    def decide(self, ctx: DayContext) -> DayResult:
        raise NotImplementedError


class WorkedDayStrategy(DayStrategy):
    """Complete days: lateness, overtime and hour-bank balance from the periods."""

    @abstractmethod
    def periods(self, horas: tuple[str, ...]) -> list[tuple[str, str]]:
        raise NotImplementedError

    def decide(self, ctx: DayContext) -> DayResult:
        periods = self.periods(ctx.horas)
        worked = sum(minutes_between(a, b) for a, b in periods)
        schedule = ctx.schedule

        atraso = 0
        first_in = hhmm_to_minutes(periods[0][0])
        if first_in is not None and first_in > schedule.entrada_prevista_min + schedule.tolerancia_minutos:
            atraso = first_in - schedule.entrada_prevista_min

        extra = max(worked - schedule.carga_diaria_minutos, 0)
        flat = [h for period in periods for h in period] + [None] * 4
        return DayResult(
            status=DayStatus.OK,
            entrada_1=flat[0],
            saida_1=flat[1],
            entrada_2=flat[2],
            saida_2=flat[3],
            total_trabalhado_min=worked,
            atraso_min=atraso,
            hora_extra_min=extra,
            banco_horas_min=worked - schedule.carga_diaria_minutos,
        )
