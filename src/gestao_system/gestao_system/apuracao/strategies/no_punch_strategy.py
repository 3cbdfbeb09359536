from __future__ import annotations

from ...core.enums import DayStatus
from ..model import DayContext, DayResult
from .base import DayStrategy


class NoPunchStrategy(DayStrategy):
    """Day without punches: excused, day off or absence."""

    def decide(self, ctx: DayContext) -> DayResult:
        if ctx.occurrence is not None and ctx.occurrence.excuses_absence:
            return DayResult(status=DayStatus.EXCUSED, observacoes=ctx.occurrence.value)
        if not ctx.schedule.is_work_day(ctx.day):
            return DayResult(status=DayStatus.DAY_OFF)

        carga = ctx.schedule.carga_diaria_minutos
        return DayResult(status=DayStatus.ABSENT, falta_min=carga, banco_horas_min=-carga)
