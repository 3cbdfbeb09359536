from __future__ import annotations

import logging
from collections import defaultdict
from datetime import timedelta
from typing import Any, Optional

from ..common.datetime_utils import minutes_to_hhmm, month_bounds, now_iso
from ..common.validators import s
from ..core.enums import LedgerType, OccurrenceType
from ..core.exceptions import ValidationError
from .factory import DayStrategyFactory
from .model import ApuracaoResult, DayContext, RecalculoResult, WorkSchedule
from .repository import LEDGER_ORIGIN, ApuracaoRepository, HourBankRepository

logger = logging.getLogger(__name__)


def _month(mes_referencia: str):
    try:
        return month_bounds(mes_referencia)
    except ValueError as e:
        raise ValidationError(str(e)) from e


def _occurrence_type(value: Any) -> Optional[OccurrenceType]:
    try:
        return OccurrenceType(s(value))
    except ValueError:
        return None


class AttendanceCalculationService:
    def __init__(self, repo: ApuracaoRepository, *, strategy_factory: Optional[DayStrategyFactory] = None):
        self._repo = repo
        self._factory = strategy_factory or DayStrategyFactory()

    def apurar(self, funcionario_id: Any, mes_referencia: Any) -> ApuracaoResult:
        funcionario_id = s(funcionario_id)
        mes_referencia = s(mes_referencia)
        if not funcionario_id or not mes_referencia:
            raise ValidationError("funcionario_id e mes_referencia são obrigatórios")

        start, end = _month(mes_referencia)
        schedule = WorkSchedule.from_record(self._repo.find_schedule_for_period(funcionario_id, start, end))

        by_day: dict[str, list[dict]] = defaultdict(list)
        for punch in self._repo.list_valid_punches(funcionario_id, start, end):
            by_day[punch["data"]].append(punch)

        occurrences: dict[str, OccurrenceType] = {}
        for occ in self._repo.list_approved_occurrences(funcionario_id, start, end):
            tipo = _occurrence_type(occ.get("tipo"))
            if tipo is not None and tipo.excuses_absence:
                occurrences[occ["data"]] = tipo

        dias: list[dict] = []
        day = start
        while day <= end:
            key = day.isoformat()
            punches = sorted(by_day.get(key, []), key=lambda p: s(p.get("hora")))
            horas = tuple(s(p.get("hora")) for p in punches if s(p.get("hora")))

            ctx = DayContext(day=day, horas=horas, schedule=schedule, occurrence=occurrences.get(key))
            result = self._factory.for_punch_count(len(horas)).decide(ctx)

            payload = {
                "funcionario_id": funcionario_id,
                "data": key,
                "escala_id": schedule.escala_id,
                "batidas_ids": ",".join(str(p["id"]) for p in punches),
                **result.to_dict(),
                "gerado_em": now_iso(),
            }
            existing = self._repo.find_daily(funcionario_id, key)
            saved = self._repo.save_daily(existing["id"] if existing else None, payload)
            dias.append(saved)
            day += timedelta(days=1)

        logger.info("Apuração %s %s: %s days", funcionario_id, mes_referencia[:7], len(dias))
        return ApuracaoResult(funcionario_id=funcionario_id, mes_referencia=mes_referencia, dias=dias)


class HourBankService:
    def __init__(self, daily: ApuracaoRepository, ledger: HourBankRepository):
        self._daily = daily
        self._ledger = ledger

    def recalcular(self, funcionario_id: Any, mes_referencia: Any) -> RecalculoResult:
        """Turn the month's daily balances into BancoHoras entries, once per day."""
        funcionario_id = s(funcionario_id)
        mes_referencia = s(mes_referencia)
        if not funcionario_id or not mes_referencia:
            raise ValidationError("Parâmetros obrigatórios: funcionario_id e mes_referencia (YYYY-MM)")
        _month(mes_referencia)

        criados = 0
        existentes = 0
        for apu in self._daily.list_daily(funcionario_id, prefix=mes_referencia[:7]):
            saldo = int(apu.get("banco_horas_min") or 0)
            if saldo == 0:
                continue
            if self._ledger.find_ledger_for(str(apu["id"])):
                existentes += 1
                continue

            self._ledger.create_ledger(
                {
                    "funcionario_id": funcionario_id,
                    "data": apu.get("data"),
                    "tipo": (LedgerType.CREDIT if saldo > 0 else LedgerType.DEBIT).value,
                    "origem": LEDGER_ORIGIN,
                    "minutos": abs(saldo),
                    "observacao": f"Apuração automática do dia {apu.get('data')}",
                    "referencia_id": str(apu["id"]),
                }
            )
            criados += 1

        return RecalculoResult(total_lancamentos=criados, total_ja_existente=existentes)

    def saldo(self, funcionario_id: str) -> dict:
        total = 0
        for entry in self._ledger.list_ledger(funcionario_id):
            minutos = int(entry.get("minutos") or 0)
            total += minutos if entry.get("tipo") == LedgerType.CREDIT.value else -minutos
        return {
            "success": True,
            "funcionario_id": funcionario_id,
            "saldo_min": total,
            "saldo_hhmm": minutes_to_hhmm(total),
        }
