from __future__ import annotations

import json
import logging
import traceback
from typing import Any, Optional

from ..common.datetime_utils import now_iso
from ..common.validators import s
from ..core.constants import ERROR_MESSAGE_LIMIT, ERROR_STACK_LIMIT, ERROR_USER_AGENT_LIMIT
from ..core.enums import ErrorStatus, Severity
from ..core.exceptions import ValidationError
from .model import categorize, determine_severity, extract_location, fingerprint
from .repository import ErrorLogRepository

logger = logging.getLogger(__name__)


class ErrorLogService:
    """Registra erros do frontend e das rotinas do backend no ErrorLog."""

    def __init__(self, errors: ErrorLogRepository):
        self._errors = errors

    def register(self, payload: dict[str, Any]) -> dict:
        message = s(payload.get("message"))
        if not message:
            raise ValidationError("message is required")

        stack = s(payload.get("stack"))
        source = s(payload.get("source")) or "unknown"
        component = s(payload.get("component"))
        file = s(payload.get("file"))

        location = extract_location(stack)
        category = categorize(message, source)
        fp = fingerprint(message, file, component)
        severity = determine_severity(message, s(payload.get("severity")) or Severity.ERROR.value)
        now = now_iso()

        existing = self._errors.find_open_by_fingerprint(fp)
        if existing:
            count = int(existing.get("occurrence_count") or 1) + 1
            self._errors.update(existing["id"], {"occurrence_count": count, "last_seen": now})
            logger.info("error %s seen again (%s times)", existing["id"], count)
            return {
                "success": True,
                "error_id": existing["id"],
                "grouped": True,
                "occurrence_count": count,
                "severity": existing.get("severity", severity),
                "category": category,
            }

        extra = payload.get("extra") if isinstance(payload.get("extra"), dict) else {}
        full = {
            "message": message[:ERROR_MESSAGE_LIMIT],
            "stack": stack[:ERROR_STACK_LIMIT],
            "source": source,
            "url": s(payload.get("url")),
            "user_agent": s(payload.get("user_agent"))[:ERROR_USER_AGENT_LIMIT],
            "component": component or location.component or "unknown",
            "file": file or location.file or "",
            "line": payload.get("line") or location.line or 0,
            "column": payload.get("column") or location.column or 0,
            "severity": severity,
            "status": ErrorStatus.NEW.value,
            "first_seen": now,
            "last_seen": now,
            "occurrence_count": 1,
            "fingerprint": fp,
            "extra": json.dumps({**extra, "location": location.to_dict(), "category": category}, ensure_ascii=False, default=str),
        }

        try:
            record = self._errors.create(full)
        except Exception:
            logger.warning("full ErrorLog create failed, retrying simplified", exc_info=True)
            record = self._errors.create(
                {
                    "message": message[:500],
                    "source": source,
                    "severity": severity,
                    "status": ErrorStatus.NEW.value,
                    "fingerprint": fp,
                    "last_seen": now,
                }
            )

        logger.info("error registered %s (%s, %s)", record["id"], severity, category)
        return {
            "success": True,
            "error_id": record["id"],
            "grouped": False,
            "occurrence_count": 1,
            "severity": severity,
            "category": category,
        }

    def record_exception(self, *, source: str, exc: BaseException, url: Optional[str] = None) -> None:
        """Best-effort log of a backend failure; never raises."""
        try:
            stack = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
            now = now_iso()
            self._errors.create(
                {
                    "message": (str(exc) or type(exc).__name__)[:ERROR_MESSAGE_LIMIT],
                    "stack": stack[:ERROR_STACK_LIMIT],
                    "source": source,
                    "url": url or source,
                    "severity": Severity.ERROR.value,
                    "status": ErrorStatus.NEW.value,
                    "first_seen": now,
                    "last_seen": now,
                    "occurrence_count": 1,
                }
            )
        except Exception:
            logger.warning("could not write ErrorLog for %s", source, exc_info=True)

    def list_errors(self, *, status: Optional[str] = None, limit: int = 100) -> list[dict]:
        return list(self._errors.list_recent(status=status, limit=limit))
