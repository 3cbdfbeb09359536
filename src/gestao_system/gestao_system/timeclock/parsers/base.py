from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Sequence, Union

from ..model import RawPunch

# Column synonyms shared by the tabular formats (lower-case).
EN_NO_KEYS = ("enno", "empno", "userid")
NAME_KEYS = ("name", "nome", "employee")
DATE_TIME_KEYS = ("datetime", "checktime", "timestamp")
DEVICE_KEYS = ("tmno", "deviceid")
MODE_KEYS = ("mode", "modo")


class PunchParser(ABC):
    """Strategy Pattern: one parser per clock export format."""

    format_name: str = "desconhecido"

    @abstractmethod
    def parse(self, content: Union[str, bytes]) -> Sequence[RawPunch]:
        raise NotImplementedError
