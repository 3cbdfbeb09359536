from __future__ import annotations

from typing import Mapping

from ...common.datetime_utils import hhmm_to_minutes
from .base import WorkedMinutesCalculator


class StandardWorkedMinutesCalculator(WorkedMinutesCalculator):
    """Standard rule: sum of the closed periods, not below 0."""

    PERIODS = (("entrada_1", "saida_1"), ("entrada_2", "saida_2"))

    def worked_minutes(self, row: Mapping) -> int:
        total = 0
        for start_key, end_key in self.PERIODS:
            start = hhmm_to_minutes(row.get(start_key))
            end = hhmm_to_minutes(row.get(end_key))
            if start is None or end is None:
                continue
            total += max(end - start, 0)
        return max(total, 0)
