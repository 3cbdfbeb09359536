from __future__ import annotations

import logging
from typing import Any, Optional

from ..core.exceptions import NotFoundError, ValidationError
from ..entities.store import Entity, EntityStore
from .validators import VALIDATORS

logger = logging.getLogger(__name__)

EDITABLE_ENTITIES = frozenset(
    {
        Entity.CLIENTE,
        Entity.FUNCIONARIO,
        Entity.CARGO,
        Entity.DEPARTAMENTO,
        Entity.ORDEM_SERVICO,
        Entity.ORCAMENTO,
        Entity.OCORRENCIA_PONTO,
        Entity.ESCALA_TRABALHO,
        Entity.FUNCIONARIO_ESCALA,
        Entity.ADIANTAMENTO,
        Entity.CONFIGURACOES,
    }
)

_SYSTEM_FIELDS = ("id", "created_date", "updated_date")


def _editable(entity: str) -> str:
    if entity not in EDITABLE_ENTITIES:
        raise ValidationError(f"Entidade não permitida: {entity}")
    return entity


class CadastroService:
    """Generic CRUD over the registry entities, with per-entity form rules."""

    def __init__(self, store: EntityStore):
        self._store = store

    def _clean(self, entity: str, data: dict, record_id: Optional[str]) -> dict:
        cleaned = {k: v for k, v in data.items() if k not in _SYSTEM_FIELDS}
        validator = VALIDATORS.get(entity)
        if validator is None:
            return cleaned
        existing = self._store.list(entity) if entity == Entity.FUNCIONARIO else []
        return validator(cleaned, existing, record_id)

    def list(self, entity: str, *, criteria: Optional[dict[str, Any]] = None, sort: Optional[str] = None, limit: Optional[int] = None) -> list[dict]:
        _editable(entity)
        if criteria:
            rows = self._store.filter(entity, criteria, sort=sort)
            return rows[:limit] if limit is not None else rows
        return self._store.list(entity, sort=sort, limit=limit)

    def get(self, entity: str, record_id: str) -> dict:
        record = self._store.get(_editable(entity), record_id)
        if not record:
            raise NotFoundError(f"{entity} não encontrado")
        return record

    def create(self, entity: str, data: Any) -> dict:
        _editable(entity)
        if not isinstance(data, dict):
            raise ValidationError("Corpo da requisição inválido")
        record = self._store.create(entity, self._clean(entity, data, None))
        logger.info("%s %s created", entity, record["id"])
        return record

    def update(self, entity: str, record_id: str, data: Any) -> dict:
        current = self.get(entity, record_id)
        if not isinstance(data, dict):
            raise ValidationError("Corpo da requisição inválido")
        merged = {**current, **data}
        return self._store.update(entity, record_id, self._clean(entity, merged, record_id))

    def delete(self, entity: str, record_id: str) -> None:
        if not self._store.delete(_editable(entity), record_id):
            raise NotFoundError(f"{entity} não encontrado")
        logger.info("%s %s deleted", entity, record_id)
