from __future__ import annotations

from dataclasses import dataclass

from .strategies.base import DayStrategy
from .strategies.incomplete_strategy import IncompleteStrategy
from .strategies.no_punch_strategy import NoPunchStrategy
from .strategies.single_period_strategy import SinglePeriodStrategy
from .strategies.two_periods_strategy import TwoPeriodsStrategy


@dataclass
class DayStrategyFactory:
    """Factory Pattern: choose the day strategy from the number of punches."""

    def for_punch_count(self, count: int) -> DayStrategy:
        if count <= 0:
            return NoPunchStrategy()
        if count == 2:
            return SinglePeriodStrategy()
        if count >= 4:
            return TwoPeriodsStrategy()
        return IncompleteStrategy()
