from __future__ import annotations

from ...core.enums import DayStatus
from ..model import DayContext, DayResult
from .base import DayStrategy, minutes_between


class IncompleteStrategy(DayStrategy):
    """One or three punches. With three, first and last count as a single period."""

    def decide(self, ctx: DayContext) -> DayResult:
        horas = ctx.horas
        if len(horas) == 1:
            return DayResult(status=DayStatus.INCOMPLETE, entrada_1=horas[0])

        return DayResult(
            status=DayStatus.INCOMPLETE,
            entrada_1=horas[0],
            saida_1=horas[-1],
            total_trabalhado_min=minutes_between(horas[0], horas[-1]),
        )
