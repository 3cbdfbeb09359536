from __future__ import annotations

from .base import WorkedDayStrategy


class TwoPeriodsStrategy(WorkedDayStrategy):
    """Entrada, saída para intervalo, retorno e saída. Extra punches are ignored."""

    def periods(self, horas: tuple[str, ...]) -> list[tuple[str, str]]:
        return [(horas[0], horas[1]), (horas[2], horas[3])]
