from __future__ import annotations

import hashlib
from datetime import date, datetime
from typing import Any, Iterable, Mapping, Optional, Sequence

from ..common.validators import is_numeric_id, s
from ..core.constants import RAW_LINE_LIMIT
from .model import NormalizedPunch, PreviewStats, RawPunch

UNLINKED_REASON = "EnNo sem funcionário vinculado"
DIRECT_IMPORT_UNLINKED_REASON = "Funcionário não vinculado ao ID do relógio"

_CLOCK_FORMATS = (
    "%Y-%m-%d %H:%M:%S",
    "%Y-%m-%d %H:%M",
    "%Y-%m-%d",
    "%d-%m-%Y %H:%M:%S",
    "%d-%m-%Y %H:%M",
)


def parse_clock_datetime(value: Any) -> Optional[datetime]:
    """Parse a clock date-time. Values are clock local time and kept naive."""
    if isinstance(value, datetime):
        return value.replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)

    text = s(value)
    if not text:
        return None
    text = text.replace("/", "-").replace("T", " ", 1).split(".")[0].strip()

    for fmt in _CLOCK_FORMATS:
        try:
            return datetime.strptime(text, fmt)
        except ValueError:
            continue
    return None


def _invalid(raw: RawPunch, en_no: str, reason: str) -> NormalizedPunch:
    return NormalizedPunch(
        user_id_relogio=en_no or None,
        nome_detectado=raw.name,
        data=None,
        hora=None,
        data_hora=None,
        metodo=raw.mode,
        dispositivo_id=raw.device_id,
        raw_linha=raw.raw[:RAW_LINE_LIMIT],
        valido=False,
        motivo_invalido=reason,
    )


def employee_index(employees: Iterable[Mapping[str, Any]]) -> dict[str, str]:
    """Map ``user_id_relogio`` to the employee id."""
    index: dict[str, str] = {}
    for emp in employees:
        key = s(emp.get("user_id_relogio"))
        if key and emp.get("id"):
            index.setdefault(key, str(emp["id"]))
    return index


def normalize_punch(
    raw: RawPunch, employees_by_clock_id: Mapping[str, str], *, unlinked_reason: str = UNLINKED_REASON
) -> NormalizedPunch:
    en_no = s(raw.en_no)
    if not en_no:
        return _invalid(raw, en_no, "EnNo vazio")
    if not is_numeric_id(en_no):
        return _invalid(raw, en_no, "EnNo não numérico")

    dt = parse_clock_datetime(raw.date_time)
    if dt is None:
        return _invalid(raw, en_no, f'DateTime inválido: "{s(raw.date_time)}"')

    funcionario_id = employees_by_clock_id.get(en_no)
    return NormalizedPunch(
        user_id_relogio=en_no,
        nome_detectado=raw.name,
        data=dt.strftime("%Y-%m-%d"),
        hora=dt.strftime("%H:%M:%S"),
        data_hora=dt.strftime("%Y-%m-%dT%H:%M:%S"),
        metodo=raw.mode,
        dispositivo_id=raw.device_id,
        raw_linha=raw.raw[:RAW_LINE_LIMIT],
        valido=funcionario_id is not None,
        motivo_invalido=None if funcionario_id else unlinked_reason,
        funcionario_id=funcionario_id,
    )


def normalize(
    raw_punches: Iterable[RawPunch],
    employees: Iterable[Mapping[str, Any]],
    *,
    unlinked_reason: str = UNLINKED_REASON,
) -> list[NormalizedPunch]:
    index = employee_index(employees)
    return [normalize_punch(raw, index, unlinked_reason=unlinked_reason) for raw in raw_punches]


def compute_stats(registros: Sequence[NormalizedPunch], formato: str) -> PreviewStats:
    validos = sum(1 for r in registros if r.valido)
    datas = sorted(r.data for r in registros if r.data)
    return PreviewStats(
        total=len(registros),
        validos=validos,
        invalidos=len(registros) - validos,
        periodo_inicio=datas[0] if datas else None,
        periodo_fim=datas[-1] if datas else None,
        formato=formato,
    )


def content_hash(registros: Iterable[Mapping[str, Any]]) -> str:
    """SHA-256 over the sorted ``user_id_relogio|funcionario_id|data_hora`` lines."""
    lines = sorted(
        f"{s(r.get('user_id_relogio'))}|{s(r.get('funcionario_id'))}|{s(r.get('data_hora'))}" for r in registros
    )
    return hashlib.sha256("\n".join(lines).encode("utf-8")).hexdigest()


def unmapped_clock_ids(registros: Iterable[NormalizedPunch]) -> list[str]:
    """Distinct numeric EnNo values with no linked employee, in first-seen order."""
    seen: dict[str, None] = {}
    for r in registros:
        if r.user_id_relogio and is_numeric_id(r.user_id_relogio) and not r.funcionario_id:
            seen.setdefault(r.user_id_relogio, None)
    return list(seen)
