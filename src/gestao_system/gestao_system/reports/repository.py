from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from ..entities.store import Entity, EntityStore


class ReportRepository(Protocol):
    def list_daily(self, *, start: date, end: date, funcionario_id: Optional[str] = None) -> Sequence[dict]:
        raise NotImplementedError

    def employees_by_id(self) -> dict[str, dict]:
        raise NotImplementedError

    def department_names(self) -> dict[str, str]:
        raise NotImplementedError


class StoreReportRepository(ReportRepository):
    def __init__(self, store: EntityStore):
        self._store = store

    def list_daily(self, *, start: date, end: date, funcionario_id: Optional[str] = None) -> Sequence[dict]:
        lo, hi = start.isoformat(), end.isoformat()
        if funcionario_id:
            rows = self._store.filter(Entity.APURACAO_DIARIA, {"funcionario_id": funcionario_id}, sort="data")
        else:
            rows = self._store.list(Entity.APURACAO_DIARIA, sort="data")
        return [r for r in rows if r.get("data") and lo <= r["data"] <= hi]

    def employees_by_id(self) -> dict[str, dict]:
        return {str(e["id"]): e for e in self._store.list(Entity.FUNCIONARIO)}

    def department_names(self) -> dict[str, str]:
        return {str(d["id"]): d.get("nome") or "-" for d in self._store.list(Entity.DEPARTAMENTO)}
