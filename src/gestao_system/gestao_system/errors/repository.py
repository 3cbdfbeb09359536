from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import ErrorStatus
from ..entities.store import Entity, EntityStore


class ErrorLogRepository:
    def __init__(self, store: EntityStore):
        self._store = store

    def find_open_by_fingerprint(self, fingerprint: str) -> Optional[dict]:
        for record in self._store.filter(Entity.ERROR_LOG, {"fingerprint": fingerprint}, sort="-last_seen"):
            if record.get("status") != ErrorStatus.RESOLVED.value:
                return record
        return None

    def create(self, data: dict) -> dict:
        return self._store.create(Entity.ERROR_LOG, data)

    def update(self, error_id: str, data: dict) -> dict:
        return self._store.update(Entity.ERROR_LOG, error_id, data)

    def list_recent(self, *, status: Optional[str] = None, limit: int = 100) -> Sequence[dict]:
        if status:
            return self._store.filter(Entity.ERROR_LOG, {"status": status}, sort="-last_seen")[:limit]
        return self._store.list(Entity.ERROR_LOG, sort="-last_seen", limit=limit)
