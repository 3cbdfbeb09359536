from __future__ import annotations

import pytest

from src.gestao_system.gestao_system.apuracao.repository import StoreApuracaoRepository
from src.gestao_system.gestao_system.apuracao.service import AttendanceCalculationService, HourBankService
from src.gestao_system.gestao_system.core.exceptions import ValidationError
from src.gestao_system.gestao_system.entities.store import Entity


def _punch(store, funcionario_id, data, hora, *, valido=True):
    return store.create(
        Entity.PONTO_REGISTRO,
        {
            "funcionario_id": funcionario_id,
            "data": data,
            "hora": hora,
            "data_hora": f"{data}T{hora}",
            "valido": valido,
        },
    )


@pytest.fixture
def january(store):
    # Jan 2025 starts on a Wednesday and has 23 weekdays.
    for hora in ("17:30:00", "08:00:00", "12:00:00", "13:00:00"):
        _punch(store, "f1", "2025-01-02", hora)
    _punch(store, "f1", "2025-01-03", "08:20:00")
    _punch(store, "f1", "2025-01-03", "17:00:00")
    _punch(store, "f1", "2025-01-06", "08:00:00")
    _punch(store, "f1", "2025-01-08", "08:00:00", valido=False)
    _punch(store, "f1", "2025-02-03", "08:00:00")
    _punch(store, "f2", "2025-01-02", "08:00:00")
    store.create(Entity.OCORRENCIA_PONTO, {"funcionario_id": "f1", "data": "2025-01-07", "tipo": "atestado", "status": "aprovado"})
    store.create(Entity.OCORRENCIA_PONTO, {"funcionario_id": "f1", "data": "2025-01-09", "tipo": "folga", "status": "pendente"})
    return store


@pytest.fixture
def repo(store):
    return StoreApuracaoRepository(store)


def _by_day(result):
    return {d["data"]: d for d in result.dias}


def test_apurar_generates_one_record_per_day(january, repo):
    result = AttendanceCalculationService(repo).apurar("f1", "2025-01")
    days = _by_day(result)

    assert len(days) == 31
    assert days["2025-01-01"]["status"] == "falta"
    assert days["2025-01-02"]["status"] == "ok"
    assert days["2025-01-02"]["entrada_1"] == "08:00:00"
    assert days["2025-01-02"]["saida_2"] == "17:30:00"
    assert days["2025-01-02"]["banco_horas_min"] == 30
    assert days["2025-01-03"]["atraso_min"] == 20
    assert days["2025-01-04"]["status"] == "folga"
    assert days["2025-01-06"]["status"] == "incompleto"
    assert days["2025-01-07"]["status"] == "abonado"
    assert days["2025-01-08"]["status"] == "falta"
    assert days["2025-01-09"]["status"] == "falta"
    assert len(days["2025-01-02"]["batidas_ids"].split(",")) == 4
    assert result.to_dict()["total_dias"] == 31


def test_apurar_is_an_upsert(january, repo, store):
    service = AttendanceCalculationService(repo)
    service.apurar("f1", "2025-01")
    _punch(store, "f1", "2025-01-06", "17:00:00")

    service.apurar("f1", "2025-01-15")

    rows = store.filter(Entity.APURACAO_DIARIA, {"funcionario_id": "f1"})
    assert len(rows) == 31
    (jan6,) = [r for r in rows if r["data"] == "2025-01-06"]
    assert jan6["status"] == "ok"


def test_apurar_uses_schedule_in_effect(january, repo, store):
    escala = store.create(
        Entity.ESCALA_TRABALHO,
        {"hora_entrada_prevista": "08:30", "hora_saida_prevista": "17:00", "carga_diaria_minutos": 420, "tolerancia_minutos": 10, "dias_semana": "1,2,3,4,5,6"},
    )
    store.create(Entity.FUNCIONARIO_ESCALA, {"funcionario_id": "f1", "escala_id": escala["id"], "vigencia_inicio": "2024-12-01"})

    days = _by_day(AttendanceCalculationService(repo).apurar("f1", "2025-01"))

    assert days["2025-01-03"]["atraso_min"] == 0
    assert days["2025-01-03"]["hora_extra_min"] == 100
    assert days["2025-01-04"]["status"] == "falta"
    assert days["2025-01-04"]["falta_min"] == 420
    assert days["2025-01-04"]["escala_id"] == escala["id"]


def test_apurar_requires_parameters(repo):
    with pytest.raises(ValidationError):
        AttendanceCalculationService(repo).apurar("", "2025-01")
    with pytest.raises(ValidationError):
        AttendanceCalculationService(repo).apurar("f1", "janeiro")


def test_recalcular_creates_ledger_entries_once(january, repo, store):
    AttendanceCalculationService(repo).apurar("f1", "2025-01")
    bank = HourBankService(repo, repo)

    first = bank.recalcular("f1", "2025-01")
    second = bank.recalcular("f1", "2025-01")

    # 2 credits (Jan 2 and 3) and 19 absences
    assert (first.total_lancamentos, first.total_ja_existente) == (21, 0)
    assert (second.total_lancamentos, second.total_ja_existente) == (0, 21)
    credit = store.filter(Entity.BANCO_HORAS, {"data": "2025-01-02"})[0]
    assert (credit["tipo"], credit["minutos"], credit["origem"]) == ("credito", 30, "apuracao")
    debit = store.filter(Entity.BANCO_HORAS, {"data": "2025-01-01"})[0]
    assert (debit["tipo"], debit["minutos"]) == ("debito", 480)


def test_saldo_sums_credits_minus_debits(january, repo):
    AttendanceCalculationService(repo).apurar("f1", "2025-01")
    bank = HourBankService(repo, repo)
    bank.recalcular("f1", "2025-01")

    saldo = bank.saldo("f1")

    assert saldo["saldo_min"] == 70 - 19 * 480
    assert saldo["saldo_hhmm"] == "-150:50"
