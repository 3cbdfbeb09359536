from __future__ import annotations

import copy
import uuid
from typing import Any, Optional

from ..common.datetime_utils import now_iso
from ..core.exceptions import NotFoundError
from .store import EntityStore, apply_limit, ensure_entity, matches, sort_records


class InMemoryEntityStore(EntityStore):
    """Process-local entity store used for tests and ``STORE_BACKEND=memory``.

    Records are deep-copied in and out so callers never share state with the store.
    """

    def __init__(self) -> None:
        self._data: dict[str, dict[str, dict]] = {}

    def _table(self, entity: str) -> dict[str, dict]:
        return self._data.setdefault(ensure_entity(entity), {})

    def list(self, entity: str, *, sort: Optional[str] = None, limit: Optional[int] = None) -> list[dict]:
        records = sort_records(self._table(entity).values(), sort or "created_date")
        return [copy.deepcopy(r) for r in apply_limit(records, limit)]

    def filter(self, entity: str, criteria: dict[str, Any], *, sort: Optional[str] = None) -> list[dict]:
        found = [r for r in self._table(entity).values() if matches(r, criteria)]
        return [copy.deepcopy(r) for r in sort_records(found, sort or "created_date")]

    def get(self, entity: str, record_id: str) -> Optional[dict]:
        record = self._table(entity).get(str(record_id))
        return copy.deepcopy(record) if record else None

    def create(self, entity: str, data: dict[str, Any]) -> dict:
        table = self._table(entity)
        stamp = now_iso()
        record = copy.deepcopy(dict(data))
        record.pop("id", None)
        record_id = uuid.uuid4().hex
        record.update({"id": record_id, "created_date": stamp, "updated_date": stamp})
        table[record_id] = record
        return copy.deepcopy(record)

    def update(self, entity: str, record_id: str, data: dict[str, Any]) -> dict:
        table = self._table(entity)
        record = table.get(str(record_id))
        if record is None:
            raise NotFoundError(f"{entity} {record_id} não encontrado")
        changes = {k: v for k, v in copy.deepcopy(dict(data)).items() if k not in {"id", "created_date"}}
        record.update(changes)
        record["updated_date"] = now_iso()
        return copy.deepcopy(record)

    def delete(self, entity: str, record_id: str) -> bool:
        return self._table(entity).pop(str(record_id), None) is not None
