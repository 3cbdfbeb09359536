from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..entities.store import Entity, EntityStore

APPROVED = "aprovado"
LEDGER_ORIGIN = "apuracao"


class ApuracaoRepository(Protocol):
    def list_valid_punches(self, funcionario_id: str, start: date, end: date) -> Sequence[dict]:
        raise NotImplementedError

    def find_schedule_for_period(self, funcionario_id: str, start: date, end: date) -> Optional[dict]:
        raise NotImplementedError

    def list_approved_occurrences(self, funcionario_id: str, start: date, end: date) -> Sequence[dict]:
        raise NotImplementedError

    def find_daily(self, funcionario_id: str, data: str) -> Optional[dict]:
        raise NotImplementedError

    def save_daily(self, existing_id: Optional[str], data: dict) -> dict:
        raise NotImplementedError

    def list_daily(self, funcionario_id: str, *, prefix: str = "") -> Sequence[dict]:
        raise NotImplementedError


class HourBankRepository(Protocol):
    def find_ledger_for(self, referencia_id: str) -> Optional[dict]:
        raise NotImplementedError

    def create_ledger(self, data: dict) -> dict:
        raise NotImplementedError

    def list_ledger(self, funcionario_id: str) -> Sequence[dict]:
        raise NotImplementedError


class StoreApuracaoRepository(ApuracaoRepository, HourBankRepository):
    def __init__(self, store: EntityStore):
        self._store = store

    def list_valid_punches(self, funcionario_id: str, start: date, end: date) -> Sequence[dict]:
        lo, hi = start.isoformat(), end.isoformat()
        rows = self._store.filter(
            Entity.PONTO_REGISTRO, {"funcionario_id": funcionario_id, "valido": True}, sort="data_hora"
        )
        return [r for r in rows if r.get("data") and lo <= r["data"] <= hi]

    def find_schedule_for_period(self, funcionario_id: str, start: date, end: date) -> Optional[dict]:
        lo, hi = start.isoformat(), end.isoformat()
        for link in self._store.filter(Entity.FUNCIONARIO_ESCALA, {"funcionario_id": funcionario_id}):
            inicio = link.get("vigencia_inicio") or ""
            fim = link.get("vigencia_fim") or "9999-12-31"
            if inicio <= lo and hi <= fim:
                return self._store.get(Entity.ESCALA_TRABALHO, link.get("escala_id") or "")
        return None

    def list_approved_occurrences(self, funcionario_id: str, start: date, end: date) -> Sequence[dict]:
        lo, hi = start.isoformat(), end.isoformat()
        rows = self._store.filter(Entity.OCORRENCIA_PONTO, {"funcionario_id": funcionario_id, "status": APPROVED})
        return [r for r in rows if r.get("data") and lo <= r["data"] <= hi]

    def find_daily(self, funcionario_id: str, data: str) -> Optional[dict]:
        found = self._store.filter(Entity.APURACAO_DIARIA, {"funcionario_id": funcionario_id, "data": data})
        return found[0] if found else None

    def save_daily(self, existing_id: Optional[str], data: dict) -> dict:
        if existing_id:
            return self._store.update(Entity.APURACAO_DIARIA, existing_id, data)
        return self._store.create(Entity.APURACAO_DIARIA, data)

    def list_daily(self, funcionario_id: str, *, prefix: str = "") -> Sequence[dict]:
        rows = self._store.filter(Entity.APURACAO_DIARIA, {"funcionario_id": funcionario_id}, sort="data")
        return [r for r in rows if str(r.get("data") or "").startswith(prefix)]

    def find_ledger_for(self, referencia_id: str) -> Optional[dict]:
        found = self._store.filter(Entity.BANCO_HORAS, {"referencia_id": referencia_id, "origem": LEDGER_ORIGIN})
        return found[0] if found else None

    def create_ledger(self, data: dict) -> dict:
        return self._store.create(Entity.BANCO_HORAS, data)

    def list_ledger(self, funcionario_id: str) -> Sequence[dict]:
        return self._store.filter(Entity.BANCO_HORAS, {"funcionario_id": funcionario_id}, sort="data")
