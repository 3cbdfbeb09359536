from __future__ import annotations

import logging
from functools import wraps
from typing import TYPE_CHECKING, Any, Optional

from flask import g, jsonify, request

from ..core.exceptions import DomainError

if TYPE_CHECKING:
    from ..container import Container

logger = logging.getLogger(__name__)


def bearer_token() -> Optional[str]:
    header = request.headers.get("Authorization", "")
    scheme, _, token = header.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def json_error(message: str, status: int, **extra: Any):
    body = {"success": False, "error": message}
    body.update(extra)
    return jsonify(body), status


def json_body() -> dict:
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def _unexpected_error(container: "Container", source: str, exc: Exception):
    logger.exception("%s failed", source)
    container.error_log_service.record_exception(source=source, exc=exc)
    return json_error(str(exc) or "Erro interno", 500)


def auth_required(container: "Container"):
    """Resolve the bearer token into ``g.current_user`` or answer 401."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                g.current_user = container.auth_service.me(bearer_token())
            except DomainError as e:
                return json_error(e.message, e.status_code, **e.extra)
            except Exception as e:
                return _unexpected_error(container, "api:auth", e)
            return view(*args, **kwargs)

        return wrapper

    return decorator


def error_boundary(container: "Container", source: str):
    """Map domain errors to their status; anything else is a 500 logged to ErrorLog."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                return view(*args, **kwargs)
            except DomainError as e:
                if e.status_code >= 500:
                    logger.error("%s failed: %s", source, e.message)
                return json_error(e.message, e.status_code, **e.extra)
            except Exception as e:
                return _unexpected_error(container, source, e)

        return wrapper

    return decorator
