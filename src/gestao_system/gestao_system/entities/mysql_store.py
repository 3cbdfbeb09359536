from __future__ import annotations

import uuid
from datetime import datetime
from typing import Any, Optional

from ..common.datetime_utils import now_local
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, dumps_document, fetchall, fetchone, loads_document
from .store import EntityStore, apply_limit, ensure_entity, sort_records


def _stamp(value: Any) -> Optional[str]:
    if isinstance(value, datetime):
        return value.isoformat(timespec="seconds")
    return value


def _to_record(row: dict) -> dict:
    record = loads_document(row["data"])
    record["id"] = row["id"]
    record["created_date"] = _stamp(row["created_date"])
    record["updated_date"] = _stamp(row["updated_date"])
    return record


def _document(data: dict[str, Any]) -> dict[str, Any]:
    return {k: v for k, v in data.items() if k not in {"id", "created_date", "updated_date"}}


class MySQLEntityStore(EntityStore):
    """Entity documents stored as JSON rows in ``entity_records``."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def list(self, entity: str, *, sort: Optional[str] = None, limit: Optional[int] = None) -> list[dict]:
        ensure_entity(entity)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, data, created_date, updated_date
                FROM entity_records
                WHERE entity_name=%s
                ORDER BY created_date ASC
                """,
                (entity,),
            )
            records = [_to_record(r) for r in fetchall(cur)]
        return apply_limit(sort_records(records, sort), limit)

    def filter(self, entity: str, criteria: dict[str, Any], *, sort: Optional[str] = None) -> list[dict]:
        ensure_entity(entity)
        if not criteria:
            return self.list(entity, sort=sort)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, data, created_date, updated_date
                FROM entity_records
                WHERE entity_name=%s AND JSON_CONTAINS(data, %s)
                ORDER BY created_date ASC
                """,
                (entity, dumps_document(criteria)),
            )
            records = [_to_record(r) for r in fetchall(cur)]
        return sort_records(records, sort)

    def get(self, entity: str, record_id: str) -> Optional[dict]:
        ensure_entity(entity)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, data, created_date, updated_date
                FROM entity_records
                WHERE entity_name=%s AND id=%s
                """,
                (entity, str(record_id)),
            )
            row = fetchone(cur)
        return _to_record(row) if row else None

    def create(self, entity: str, data: dict[str, Any]) -> dict:
        ensure_entity(entity)
        record_id = uuid.uuid4().hex
        now = now_local().replace(microsecond=0)
        document = _document(data)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO entity_records (entity_name, id, data, created_date, updated_date)
                VALUES (%s, %s, %s, %s, %s)
                """,
                (entity, record_id, dumps_document(document), now, now),
            )
        stamp = now.isoformat(timespec="seconds")
        return {**document, "id": record_id, "created_date": stamp, "updated_date": stamp}

    def update(self, entity: str, record_id: str, data: dict[str, Any]) -> dict:
        ensure_entity(entity)
        now = now_local().replace(microsecond=0)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT id, data, created_date, updated_date
                FROM entity_records
                WHERE entity_name=%s AND id=%s
                FOR UPDATE
                """,
                (entity, str(record_id)),
            )
            row = fetchone(cur)
            if not row:
                raise NotFoundError(f"{entity} {record_id} não encontrado")

            document = _document({**loads_document(row["data"]), **data})
            cur.execute(
                """
                UPDATE entity_records
                SET data=%s, updated_date=%s
                WHERE entity_name=%s AND id=%s
                """,
                (dumps_document(document), now, entity, str(record_id)),
            )
        return {
            **document,
            "id": row["id"],
            "created_date": _stamp(row["created_date"]),
            "updated_date": now.isoformat(timespec="seconds"),
        }

    def delete(self, entity: str, record_id: str) -> bool:
        ensure_entity(entity)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "DELETE FROM entity_records WHERE entity_name=%s AND id=%s",
                (entity, str(record_id)),
            )
            return cur.rowcount > 0
