from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Mapping


class WorkedMinutesCalculator(ABC):
    """Calculator interface (Strategy Pattern for the timesheet mirror)."""

    @abstractmethod
    def worked_minutes(self, row: Mapping) -> int:
        raise NotImplementedError
