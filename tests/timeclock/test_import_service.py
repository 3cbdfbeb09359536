from __future__ import annotations

import json

import pytest

from src.gestao_system.gestao_system.core.constants import IMPORT_CHUNK_SIZE
from src.gestao_system.gestao_system.core.exceptions import (
    DuplicateImportError,
    ImportPersistenceError,
    ValidationError,
)
from src.gestao_system.gestao_system.entities.store import Entity
from src.gestao_system.gestao_system.timeclock.repository import StoreTimeclockRepository
from src.gestao_system.gestao_system.timeclock.service import TimeclockImportService

PASTED = (
    "EnNo\tName\tDateTime\n"
    "7\tJoao\t2025-01-02 08:00:00\n"
    "7\tJoao\t2025-01-02 12:00:00\n"
    "7\tJoao\t2025-01-02 13:00:00\n"
    "99\tNinguem\t2025-01-02 08:00:00\n"
)


class FailingPunchRepo(StoreTimeclockRepository):
    def __init__(self, store, *, fail_on: int):
        super().__init__(store)
        self._calls = 0
        self._fail_on = fail_on

    def create_punch(self, data):
        self._calls += 1
        if self._calls == self._fail_on:
            raise RuntimeError("campo inexistente: relogio_id")
        return super().create_punch(data)


@pytest.fixture
def employee(store):
    return store.create(Entity.FUNCIONARIO, {"nome": "Joao", "user_id_relogio": "7"})


@pytest.fixture
def service(store, employee):
    return TimeclockImportService(StoreTimeclockRepository(store), chunk_size=2)


def _valid(service):
    return [r.to_dict() for r in service.preview(content=PASTED).registros if r.valido]


def test_preview_parses_pasted_text(service, employee, store):
    result = service.preview(content=PASTED)

    assert result.success is True
    assert result.stats.total == 4
    assert result.stats.validos == 3
    assert result.stats.formato == "txt"
    assert result.registros[0].funcionario_id == employee["id"]
    assert store.list(Entity.PONTO_REGISTRO) == []


def test_preview_requires_input(service):
    with pytest.raises(ValidationError) as exc:
        service.preview()
    assert exc.value.message == "Nenhum arquivo ou conteúdo fornecido"


def test_preview_without_rows_is_not_an_error(service):
    result = service.preview(content="# nothing here\n")

    assert result.to_dict() == {"success": False, "error": "Nenhum registro encontrado no arquivo"}


def test_preview_uses_file_extension(service):
    with pytest.raises(ValidationError):
        service.preview(file_bytes=b"x", filename="ponto.pdf")


def test_confirm_persists_in_chunks_and_marks_import_done(service, store, employee, fixed_now):
    registros = _valid(service)
    registros[0]["_tr"] = "row-0"
    registros[0]["_inOut"] = "in"
    registros.append(dict(registros[1]))  # same employee and time: deduplicated

    result = service.confirm(registros, arquivo_nome="AttendLog.txt", periodo_inicio="2025-01-02", periodo_fim="2025-01-02")

    assert result.total_inseridos == 3
    punches = store.filter(Entity.PONTO_REGISTRO, {"importacao_id": result.importacao_id})
    assert len(punches) == 3
    assert all(p["relogio_id"] == "1" and p["valido"] is True for p in punches)
    assert all("_tr" not in p and "_inOut" not in p for p in punches)

    importacao = store.get(Entity.IMPORTACAO_PONTO, result.importacao_id)
    assert importacao["status"] == "concluida"
    assert importacao["arquivo_hash"] == result.arquivo_hash
    assert importacao["arquivo_nome"] == "AttendLog.txt"
    assert importacao["total_linhas"] == 4
    assert importacao["data_importacao"] == "2025-02-10T09:30:00"
    assert result.to_dict()["message"] == "Importação concluída: 3 registros salvos"


def test_confirm_rejects_duplicate_content(service):
    registros = _valid(service)
    first = service.confirm(registros)

    with pytest.raises(DuplicateImportError) as exc:
        service.confirm(list(reversed(registros)))

    assert exc.value.status_code == 409
    assert exc.value.extra["arquivo_hash"] == first.arquivo_hash


def test_confirm_requires_records(service):
    with pytest.raises(ValidationError) as exc:
        service.confirm([])
    assert exc.value.message == "Nenhum registro para importar"


def test_default_chunk_size(store, employee):
    assert IMPORT_CHUNK_SIZE == 100

    service = TimeclockImportService(StoreTimeclockRepository(store))
    result = service.confirm(_valid(service))

    assert result.total_inseridos == 3


def test_confirm_without_linked_records_gives_hint(service):
    registros = [r.to_dict() for r in service.preview(content=PASTED).registros if not r.valido]

    with pytest.raises(ValidationError) as exc:
        service.confirm(registros)

    assert exc.value.message == "Nenhum registro válido para persistir"
    assert "EnNo" in exc.value.extra["dica"]


def test_confirm_default_import_name(service, store):
    result = service.confirm(_valid(service))

    assert store.get(Entity.IMPORTACAO_PONTO, result.importacao_id)["arquivo_nome"] == "Importação Manual"


def test_confirm_uses_client_totals_when_numeric(service, store):
    result = service.confirm(_valid(service), total_validos="3", total_invalidos=1)

    importacao = store.get(Entity.IMPORTACAO_PONTO, result.importacao_id)
    assert importacao["total_registros_validos"] == 3
    assert importacao["total_ignorados"] == 1


@pytest.mark.parametrize("totals", [{"total_validos": "muitos"}, {"total_invalidos": [1]}, {"total_validos": True}])
def test_confirm_rejects_non_numeric_totals(service, store, totals):
    with pytest.raises(ValidationError) as exc:
        service.confirm(_valid(service), **totals)

    assert exc.value.status_code == 400
    assert store.list(Entity.IMPORTACAO_PONTO) == []
    assert store.list(Entity.PONTO_REGISTRO) == []


def test_confirm_aborts_and_marks_error_when_insert_fails(store, employee):
    service = TimeclockImportService(FailingPunchRepo(store, fail_on=2), chunk_size=2)
    registros = _valid(service)

    with pytest.raises(ImportPersistenceError) as exc:
        service.confirm(registros)

    assert exc.value.status_code == 500
    assert "relogio_id" in exc.value.extra["detalhe"]
    (importacao,) = store.list(Entity.IMPORTACAO_PONTO)
    assert importacao["status"] == "erro"
    assert len(store.list(Entity.PONTO_REGISTRO)) == 1


def test_save_reviewed_keeps_invalid_records_and_logs_errors(store, employee):
    service = TimeclockImportService(FailingPunchRepo(store, fail_on=3))
    registros = [r.to_dict() for r in service.preview(content=PASTED).registros]

    result = service.save_reviewed(registros)

    assert result.total_salvos == 3
    assert result.total_validos == 2
    assert len(result.erros) == 1
    importacao = store.get(Entity.IMPORTACAO_PONTO, result.importacao_id)
    assert importacao["arquivo_nome"] == "Importação manual (revisada)"
    assert importacao["total_linhas"] == 4
    assert importacao["total_ignorados"] == 1
    assert json.loads(importacao["log_erros"])[0]["erro"] == "campo inexistente: relogio_id"
    assert result.to_dict()["stats"] == {"total_salvos": 3, "total_validos": 2, "total_erros": 1}


def test_save_reviewed_requires_records(service):
    with pytest.raises(ValidationError):
        service.save_reviewed([])


def test_import_direct_saves_everything_and_reports_unmapped_ids(service, store):
    result = service.import_direct(content=PASTED)

    assert result.total_lidos == 4
    assert result.total_salvos == 4
    assert result.ids_sem_mapeamento == ["99"]
    importacao = store.get(Entity.IMPORTACAO_PONTO, result.importacao_id)
    assert importacao["log_erros"] == "Funcionário não vinculado ao ID do relógio | EnNo: 99"
    (unlinked,) = store.filter(Entity.PONTO_REGISTRO, {"user_id_relogio": "99"})
    assert unlinked["motivo_invalido"] == "Funcionário não vinculado ao ID do relógio"
    body = result.to_dict()
    assert body["stats"]["formato_detectado"] == "txt"
    assert body["stats"]["total_invalidos"] == 1


def test_import_direct_without_rows(service):
    result = service.import_direct(content="nada")

    assert result.to_dict() == {"success": False, "error": "Nenhum registro válido encontrado no arquivo"}
