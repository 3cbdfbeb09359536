from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Papel do usuário usado na autorização."""

    ADMIN = "admin"
    USER = "user"


class ImportStatus(str, Enum):
    """Estado de uma ImportacaoPonto."""

    PROCESSING = "processando"
    DONE = "concluida"
    ERROR = "erro"


class DayStatus(str, Enum):
    """Resultado da apuração de um dia."""

    OK = "ok"
    ABSENT = "falta"
    INCOMPLETE = "incompleto"
    DAY_OFF = "folga"
    EXCUSED = "abonado"


class OccurrenceType(str, Enum):
    MEDICAL = "atestado"
    EXCUSED = "abonado"
    DAY_OFF = "folga"
    VACATION = "ferias"
    JUSTIFICATION = "justificativa"

    @property
    def excuses_absence(self) -> bool:
        return self is not OccurrenceType.JUSTIFICATION


class LedgerType(str, Enum):
    CREDIT = "credito"
    DEBIT = "debito"


class Severity(str, Enum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorStatus(str, Enum):
    NEW = "novo"
    IN_PROGRESS = "em_analise"
    RESOLVED = "resolvido"
