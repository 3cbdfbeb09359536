from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..entities.store import Entity, EntityStore


class TimeclockRepository(Protocol):
    """Interface over the clock punches, import logs and employees used for linkage."""

    def list_employees(self) -> Sequence[dict]:
        raise NotImplementedError

    def find_import_by_hash(self, arquivo_hash: str) -> Optional[dict]:
        raise NotImplementedError

    def create_import(self, data: dict) -> dict:
        raise NotImplementedError

    def update_import(self, importacao_id: str, data: dict) -> dict:
        raise NotImplementedError

    def create_punch(self, data: dict) -> dict:
        raise NotImplementedError

    def list_imports(self, *, limit: int = 50) -> Sequence[dict]:
        raise NotImplementedError


class StoreTimeclockRepository(TimeclockRepository):
    def __init__(self, store: EntityStore):
        self._store = store

    def list_employees(self) -> Sequence[dict]:
        return self._store.list(Entity.FUNCIONARIO)

    def find_import_by_hash(self, arquivo_hash: str) -> Optional[dict]:
        found = self._store.filter(Entity.IMPORTACAO_PONTO, {"arquivo_hash": arquivo_hash})
        return found[0] if found else None

    def create_import(self, data: dict) -> dict:
        return self._store.create(Entity.IMPORTACAO_PONTO, data)

    def update_import(self, importacao_id: str, data: dict) -> dict:
        return self._store.update(Entity.IMPORTACAO_PONTO, importacao_id, data)

    def create_punch(self, data: dict) -> dict:
        return self._store.create(Entity.PONTO_REGISTRO, data)

    def list_imports(self, *, limit: int = 50) -> Sequence[dict]:
        return self._store.list(Entity.IMPORTACAO_PONTO, sort="-data_importacao", limit=limit)
