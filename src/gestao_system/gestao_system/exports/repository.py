from __future__ import annotations

from typing import Any, Protocol, Sequence

from ..entities.store import Entity, EntityStore


class ExportRepository(Protocol):
    def filter_budgets(self, filters: dict[str, Any]) -> Sequence[dict]:
        raise NotImplementedError

    def client_names(self) -> dict[str, str]:
        raise NotImplementedError

    def employee_names(self) -> dict[str, str]:
        raise NotImplementedError


class StoreExportRepository(ExportRepository):
    def __init__(self, store: EntityStore):
        self._store = store

    def filter_budgets(self, filters: dict[str, Any]) -> Sequence[dict]:
        return self._store.filter(Entity.ORCAMENTO, filters)

    def client_names(self) -> dict[str, str]:
        return {str(c["id"]): c.get("nome") for c in self._store.list(Entity.CLIENTE)}

    def employee_names(self) -> dict[str, str]:
        return {str(f["id"]): f.get("nome") for f in self._store.list(Entity.FUNCIONARIO)}
