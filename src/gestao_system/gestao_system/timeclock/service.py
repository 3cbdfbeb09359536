from __future__ import annotations

import json
import logging
from typing import Any, Optional, Sequence

from ..common.datetime_utils import now_iso
from ..common.validators import s
from ..core.constants import (
    DEFAULT_CLOCK_ID,
    DEFAULT_IMPORT_NAME,
    IMPORT_CHUNK_SIZE,
    IMPORT_LOG_LIMIT,
    REVIEWED_IMPORT_NAME,
)
from ..core.enums import ImportStatus
from ..core.exceptions import DuplicateImportError, ImportPersistenceError, ValidationError
from .model import ConfirmResult, DirectImportResult, NormalizedPunch, PreviewResult, SaveResult
from .normalizer import (
    DIRECT_IMPORT_UNLINKED_REASON,
    UNLINKED_REASON,
    compute_stats,
    content_hash,
    normalize,
    unmapped_clock_ids,
)
from .parsers.factory import ParserFactory, detect_format
from .repository import TimeclockRepository

logger = logging.getLogger(__name__)

# Keys added by the review screen that are not PontoRegistro fields.
_TRANSIENT_PREFIX = "_"


def is_persistable(registro: Any) -> bool:
    return bool(
        isinstance(registro, dict)
        and registro.get("valido") is True
        and s(registro.get("funcionario_id"))
        and s(registro.get("data_hora"))
    )


def _optional_count(value: Any, field_name: str) -> Optional[int]:
    if value is None or value == "":
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} deve ser um número inteiro")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{field_name} deve ser um número inteiro") from e


def _chunks(items: Sequence[dict], size: int):
    for i in range(0, len(items), size):
        yield items[i : i + size]


class TimeclockImportService:
    def __init__(
        self,
        repo: TimeclockRepository,
        *,
        parser_factory: Optional[ParserFactory] = None,
        chunk_size: int = IMPORT_CHUNK_SIZE,
    ):
        self._repo = repo
        self._parsers = parser_factory or ParserFactory()
        self._chunk_size = max(int(chunk_size), 1)

    def _parse(
        self,
        content: Optional[str],
        file_bytes: Optional[bytes],
        filename: Optional[str],
        *,
        unlinked_reason: str = UNLINKED_REASON,
    ) -> tuple[str, list[NormalizedPunch], int]:
        if content:
            fmt = detect_format(None, content)
            payload: Any = content
        elif file_bytes:
            fmt = detect_format(filename or "")
            payload = file_bytes
        else:
            raise ValidationError("Nenhum arquivo ou conteúdo fornecido")

        raw = list(self._parsers.create(fmt).parse(payload))
        logger.info("Parsed %s punch lines (format=%s)", len(raw), fmt)
        if not raw:
            return fmt, [], 0

        registros = normalize(raw, self._repo.list_employees(), unlinked_reason=unlinked_reason)
        return fmt, registros, len(raw)

    def preview(
        self,
        content: Optional[str] = None,
        file_bytes: Optional[bytes] = None,
        filename: Optional[str] = None,
    ) -> PreviewResult:
        """Parse and normalize without saving anything."""
        fmt, registros, _ = self._parse(content, file_bytes, filename)
        if not registros:
            return PreviewResult(success=False, error="Nenhum registro encontrado no arquivo")
        return PreviewResult(success=True, registros=registros, stats=compute_stats(registros, fmt))

    def confirm(
        self,
        registros_normalizados: Any,
        *,
        arquivo_nome: Optional[str] = None,
        periodo_inicio: Optional[str] = None,
        periodo_fim: Optional[str] = None,
        metadados: Optional[str] = None,
        log_erros: Optional[str] = None,
        total_validos: Optional[int] = None,
        total_invalidos: Optional[int] = None,
    ) -> ConfirmResult:
        registros = registros_normalizados if isinstance(registros_normalizados, list) else []
        if not registros:
            raise ValidationError("Nenhum registro para importar")
        total_validos = _optional_count(total_validos, "total_validos")
        total_invalidos = _optional_count(total_invalidos, "total_invalidos")

        validos = [r for r in registros if is_persistable(r)]
        if not validos:
            raise ValidationError(
                "Nenhum registro válido para persistir",
                extra={"dica": "Mapeie os IDs do relógio (EnNo) para funcionários antes de confirmar."},
            )

        seen: set[str] = set()
        dedup: list[dict] = []
        for r in validos:
            key = f"{s(r.get('funcionario_id'))}|{s(r.get('data_hora'))}"
            if key in seen:
                continue
            seen.add(key)
            dedup.append(r)

        arquivo_hash = content_hash(dedup)
        if self._repo.find_import_by_hash(arquivo_hash):
            raise DuplicateImportError(
                "Arquivo duplicado",
                extra={"mensagem": "Este conteúdo já foi importado anteriormente", "arquivo_hash": arquivo_hash},
            )

        importacao = self._repo.create_import(
            {
                "data_importacao": now_iso(),
                "arquivo_nome": s(arquivo_nome) or DEFAULT_IMPORT_NAME,
                "arquivo_hash": arquivo_hash,
                "periodo_inicio": periodo_inicio,
                "periodo_fim": periodo_fim,
                "total_linhas": len(registros),
                "total_registros_validos": total_validos if total_validos is not None else len(validos),
                "total_ignorados": (
                    total_invalidos if total_invalidos is not None else len(registros) - len(validos)
                ),
                "status": ImportStatus.PROCESSING.value,
                "conteudo_txt": s(metadados),
                "log_erros": s(log_erros),
            }
        )
        importacao_id = str(importacao["id"])
        logger.info("Import %s started: %s punches (hash=%s)", importacao_id, len(dedup), arquivo_hash)

        inseridos = 0
        for chunk in _chunks(dedup, self._chunk_size):
            for reg in chunk:
                funcionario_id = s(reg.get("funcionario_id"))
                data_hora = s(reg.get("data_hora"))
                user_id_relogio = s(reg.get("user_id_relogio"))
                if not funcionario_id or not data_hora or not user_id_relogio:
                    continue

                rest = {k: v for k, v in reg.items() if not str(k).startswith(_TRANSIENT_PREFIX)}
                rest.pop("id", None)
                rest.update(
                    {
                        "funcionario_id": funcionario_id,
                        "user_id_relogio": user_id_relogio,
                        "data_hora": data_hora,
                        "importacao_id": importacao_id,
                        "relogio_id": DEFAULT_CLOCK_ID,
                        "valido": True,
                        "motivo_invalido": None,
                    }
                )
                try:
                    self._repo.create_punch(rest)
                except Exception as e:
                    logger.exception("Import %s aborted after %s punches", importacao_id, inseridos)
                    self._mark_import(importacao_id, ImportStatus.ERROR)
                    raise ImportPersistenceError(
                        "Erro ao criar PontoRegistro",
                        extra={"detalhe": str(e), "importacao_id": importacao_id},
                    ) from e
                inseridos += 1

        self._mark_import(importacao_id, ImportStatus.DONE)
        logger.info("Import %s finished: %s punches saved", importacao_id, inseridos)
        return ConfirmResult(importacao_id=importacao_id, total_inseridos=inseridos, arquivo_hash=arquivo_hash)

    def _mark_import(self, importacao_id: str, status: ImportStatus) -> None:
        try:
            self._repo.update_import(importacao_id, {"status": status.value})
        except Exception:
            logger.warning("Could not mark import %s as %s", importacao_id, status.value, exc_info=True)

    def save_reviewed(self, registros: Any) -> SaveResult:
        """Persist reviewed records one by one, valid or not."""
        if not isinstance(registros, list) or not registros:
            raise ValidationError("Nenhum registro fornecido")

        salvos: list[dict] = []
        erros: list[dict] = []
        for registro in registros:
            if not isinstance(registro, dict):
                erros.append({"registro": registro, "erro": "Registro inválido"})
                continue
            try:
                salvos.append(
                    self._repo.create_punch(
                        {
                            "funcionario_id": registro.get("funcionario_id") or None,
                            "user_id_relogio": registro.get("user_id_relogio"),
                            "data": registro.get("data"),
                            "hora": registro.get("hora"),
                            "data_hora": registro.get("data_hora"),
                            "origem": registro.get("origem") or "relogio",
                            "metodo": registro.get("metodo") or "",
                            "dispositivo_id": registro.get("dispositivo_id") or "",
                            "raw_linha": registro.get("raw_linha") or "",
                            "valido": bool(registro.get("valido")),
                            "motivo_invalido": registro.get("motivo_invalido") or None,
                        }
                    )
                )
            except Exception as e:
                logger.warning("Could not save reviewed punch: %s", e)
                erros.append({"registro": registro, "erro": str(e)})

        validos = sum(1 for r in salvos if r.get("valido"))
        datas = sorted(r["data"] for r in salvos if r.get("data"))
        importacao = self._repo.create_import(
            {
                "data_importacao": now_iso(),
                "arquivo_nome": REVIEWED_IMPORT_NAME,
                "periodo_inicio": datas[0] if datas else None,
                "periodo_fim": datas[-1] if datas else None,
                "total_linhas": len(registros),
                "total_registros_validos": validos,
                "total_ignorados": len(salvos) - validos,
                "status": ImportStatus.DONE.value,
                "log_erros": json.dumps(erros, ensure_ascii=False, default=str) if erros else None,
            }
        )
        return SaveResult(
            importacao_id=str(importacao["id"]), total_salvos=len(salvos), total_validos=validos, erros=erros
        )

    def import_direct(
        self,
        content: Optional[str] = None,
        file_bytes: Optional[bytes] = None,
        filename: Optional[str] = None,
    ) -> DirectImportResult:
        """Parse, normalize and save every record in one step."""
        fmt, registros, total_lidos = self._parse(
            content, file_bytes, filename, unlinked_reason=DIRECT_IMPORT_UNLINKED_REASON
        )
        if not registros:
            return DirectImportResult(
                importacao_id=None,
                total_lidos=0,
                total_salvos=0,
                stats=None,
                error="Nenhum registro válido encontrado no arquivo",
            )

        salvos = 0
        for registro in registros:
            try:
                self._repo.create_punch(registro.to_dict())
                salvos += 1
            except Exception as e:
                logger.warning("Could not save punch %s: %s", registro.user_id_relogio, e)

        stats = compute_stats(registros, fmt)
        invalid_lines = [f"{r.motivo_invalido} | EnNo: {r.user_id_relogio}" for r in registros if not r.valido]
        log_erros = "\n".join(invalid_lines[:IMPORT_LOG_LIMIT])

        importacao = self._repo.create_import(
            {
                "data_importacao": now_iso(),
                "arquivo_nome": s(filename) or "arquivo",
                "periodo_inicio": stats.periodo_inicio,
                "periodo_fim": stats.periodo_fim,
                "total_linhas": total_lidos,
                "total_registros_validos": stats.validos,
                "total_ignorados": stats.invalidos,
                "status": ImportStatus.DONE.value,
                "log_erros": log_erros or None,
            }
        )
        return DirectImportResult(
            importacao_id=str(importacao["id"]),
            total_lidos=total_lidos,
            total_salvos=salvos,
            stats=stats,
            ids_sem_mapeamento=unmapped_clock_ids(registros),
        )

    def list_imports(self, *, limit: int = 50) -> Sequence[dict]:
        return self._repo.list_imports(limit=limit)
