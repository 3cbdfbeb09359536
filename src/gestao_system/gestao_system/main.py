from __future__ import annotations

import importlib
import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .container import build_container
from .database.bootstrap import apply_schema, ensure_admin_user, list_tables
from .entities.store import EntityStore
from .apuracao.controller import register as register_apuracao
from .cadastros.controller import register as register_cadastros
from .errors.controller import register as register_errors
from .exports.controller import register as register_exports
from .reports.controller import register as register_reports
from .timeclock.controller import register as register_timeclock
from .users.controller import register as register_users

logger = logging.getLogger(__name__)


def create_app(*, store: Optional[EntityStore] = None) -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))

    logging.basicConfig(
        level=getattr(settings, "LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    backend = str(getattr(settings, "STORE_BACKEND", "mysql"))
    logger.info(
        "settings=%s store=%s db=%s@%s:%s/%s",
        settings_module,
        "injected" if store is not None else backend,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    container = build_container(
        secret_key=app.secret_key,
        db_config=db_config,
        store_backend=backend,
        store=store,
        token_max_age_seconds=int(getattr(settings, "TOKEN_MAX_AGE_SECONDS")),
        import_chunk_size=int(getattr(settings, "IMPORT_CHUNK_SIZE")),
    )

    if container.conn is not None and bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(container.conn, schema_path=schema_path)
        logger.info("schema ready (tables=%s)", len(list_tables(container.conn)))
    if bool(getattr(settings, "AUTO_SEED_DB", False)):
        ensure_admin_user(
            container.store,
            username=getattr(settings, "ADMIN_USERNAME"),
            password=getattr(settings, "ADMIN_PASSWORD"),
        )

    app.extensions["gestao_container"] = container

    @app.route("/api/health", methods=["GET"], endpoint="health")
    def health():
        return jsonify({"success": True, "status": "ok"})

    register_users(app, container)
    register_errors(app, container)
    register_timeclock(app, container)
    register_apuracao(app, container)
    register_reports(app, container)
    register_exports(app, container)
    register_cadastros(app, container)

    return app
