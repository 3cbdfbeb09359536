from __future__ import annotations

from .base import WorkedDayStrategy


class SinglePeriodStrategy(WorkedDayStrategy):
    """Entrada e saída, sem intervalo registrado."""

    def periods(self, horas: tuple[str, ...]) -> list[tuple[str, str]]:
        return [(horas[0], horas[1])]
