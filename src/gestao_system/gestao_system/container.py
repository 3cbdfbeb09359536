from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .apuracao.factory import DayStrategyFactory
from .apuracao.repository import StoreApuracaoRepository
from .apuracao.service import AttendanceCalculationService, HourBankService
from .cadastros.service import CadastroService
from .core.constants import DEFAULT_TOKEN_MAX_AGE_SECONDS, IMPORT_CHUNK_SIZE
from .database.connection import DBConfig, DatabaseConnection
from .entities.memory_store import InMemoryEntityStore
from .entities.mysql_store import MySQLEntityStore
from .entities.store import EntityStore
from .errors.repository import ErrorLogRepository
from .errors.service import ErrorLogService
from .exports.repository import StoreExportRepository
from .exports.service import PdfTableService, TableExportService
from .reports.repository import StoreReportRepository
from .reports.service import TimesheetReportService
from .timeclock.parsers.factory import ParserFactory
from .timeclock.repository import StoreTimeclockRepository
from .timeclock.service import TimeclockImportService
from .users.repository import StoreUserRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    store: EntityStore

    users_repo: StoreUserRepository
    timeclock_repo: StoreTimeclockRepository
    apuracao_repo: StoreApuracaoRepository
    errors_repo: ErrorLogRepository

    auth_service: AuthService
    user_service: UserService
    error_log_service: ErrorLogService
    timeclock_service: TimeclockImportService
    apuracao_service: AttendanceCalculationService
    hour_bank_service: HourBankService
    report_service: TimesheetReportService
    table_export_service: TableExportService
    pdf_service: PdfTableService
    cadastro_service: CadastroService


def build_store(*, backend: str, db_config: Optional[dict] = None) -> tuple[Optional[DatabaseConnection], EntityStore]:
    if backend == "memory":
        return None, InMemoryEntityStore()
    if backend != "mysql":
        raise ValueError(f"STORE_BACKEND desconhecido: {backend!r}")
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config or {}))
    return conn, MySQLEntityStore(conn)


def build_container(
    *,
    secret_key: str,
    db_config: Optional[dict] = None,
    store_backend: str = "mysql",
    store: Optional[EntityStore] = None,
    token_max_age_seconds: int = DEFAULT_TOKEN_MAX_AGE_SECONDS,
    import_chunk_size: int = IMPORT_CHUNK_SIZE,
) -> Container:
    conn: Optional[DatabaseConnection] = None
    if store is None:
        conn, store = build_store(backend=store_backend, db_config=db_config)

    users_repo = StoreUserRepository(store)
    timeclock_repo = StoreTimeclockRepository(store)
    apuracao_repo = StoreApuracaoRepository(store)
    errors_repo = ErrorLogRepository(store)

    auth_service = AuthService(users_repo, secret_key=secret_key, max_age_seconds=token_max_age_seconds)
    user_service = UserService(users_repo)
    error_log_service = ErrorLogService(errors_repo)
    timeclock_service = TimeclockImportService(
        timeclock_repo,
        parser_factory=ParserFactory(),
        chunk_size=import_chunk_size,
    )
    apuracao_service = AttendanceCalculationService(apuracao_repo, strategy_factory=DayStrategyFactory())
    hour_bank_service = HourBankService(apuracao_repo, apuracao_repo)
    report_service = TimesheetReportService(StoreReportRepository(store))
    table_export_service = TableExportService(StoreExportRepository(store))
    pdf_service = PdfTableService()
    cadastro_service = CadastroService(store)

    return Container(
        conn=conn,
        store=store,
        users_repo=users_repo,
        timeclock_repo=timeclock_repo,
        apuracao_repo=apuracao_repo,
        errors_repo=errors_repo,
        auth_service=auth_service,
        user_service=user_service,
        error_log_service=error_log_service,
        timeclock_service=timeclock_service,
        apuracao_service=apuracao_service,
        hour_bank_service=hour_bank_service,
        report_service=report_service,
        table_export_service=table_export_service,
        pdf_service=pdf_service,
        cadastro_service=cadastro_service,
    )
