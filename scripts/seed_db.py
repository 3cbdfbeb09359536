from __future__ import annotations

import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from src.gestao_system.gestao_system.database.bootstrap import ensure_admin_user
from src.gestao_system.gestao_system.database.connection import DBConfig, DatabaseConnection
from src.gestao_system.gestao_system.entities.mysql_store import MySQLEntityStore


def main() -> None:
    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)
    if not settings.ADMIN_PASSWORD:
        raise SystemExit("Defina ADMIN_PASSWORD antes de rodar o seed.")

    store = MySQLEntityStore(DatabaseConnection.get_instance(DBConfig.from_dict(db_config)))
    user_id = ensure_admin_user(store, username=settings.ADMIN_USERNAME, password=settings.ADMIN_PASSWORD)

    print(
        f"OK: admin '{settings.ADMIN_USERNAME}' ({user_id}) -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    )


if __name__ == "__main__":
    main()
