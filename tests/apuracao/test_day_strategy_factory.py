from datetime import date

import pytest

from src.gestao_system.gestao_system.apuracao.factory import DayStrategyFactory
from src.gestao_system.gestao_system.apuracao.model import DayContext, WorkSchedule
from src.gestao_system.gestao_system.apuracao.strategies.incomplete_strategy import IncompleteStrategy
from src.gestao_system.gestao_system.apuracao.strategies.no_punch_strategy import NoPunchStrategy
from src.gestao_system.gestao_system.apuracao.strategies.single_period_strategy import SinglePeriodStrategy
from src.gestao_system.gestao_system.apuracao.strategies.two_periods_strategy import TwoPeriodsStrategy
from src.gestao_system.gestao_system.core.enums import DayStatus, OccurrenceType

THURSDAY = date(2025, 1, 2)
SATURDAY = date(2025, 1, 4)


@pytest.mark.parametrize(
    "count,expected",
    [(0, NoPunchStrategy), (1, IncompleteStrategy), (2, SinglePeriodStrategy), (3, IncompleteStrategy), (4, TwoPeriodsStrategy), (6, TwoPeriodsStrategy)],
)
def test_factory_by_punch_count(count, expected):
    assert isinstance(DayStrategyFactory().for_punch_count(count), expected)


def _decide(day, horas, *, schedule=None, occurrence=None):
    ctx = DayContext(day=day, horas=tuple(horas), schedule=schedule or WorkSchedule(), occurrence=occurrence)
    return DayStrategyFactory().for_punch_count(len(horas)).decide(ctx)


def test_two_periods_with_overtime():
    result = _decide(THURSDAY, ["08:00:00", "12:00:00", "13:00:00", "17:30:00"])

    assert result.status == DayStatus.OK
    assert (result.entrada_1, result.saida_1, result.entrada_2, result.saida_2) == ("08:00:00", "12:00:00", "13:00:00", "17:30:00")
    assert result.total_trabalhado_min == 510
    assert result.hora_extra_min == 30
    assert result.atraso_min == 0
    assert result.banco_horas_min == 30


def test_single_period_late_beyond_tolerance():
    result = _decide(THURSDAY, ["08:20", "17:00"])

    assert result.status == DayStatus.OK
    assert result.atraso_min == 20
    assert result.total_trabalhado_min == 520
    assert result.saida_2 is None


def test_lateness_within_tolerance_is_ignored():
    result = _decide(THURSDAY, ["08:05", "12:00"])

    assert result.atraso_min == 0
    assert result.banco_horas_min == 235 - 480


def test_three_punches_are_incomplete_first_to_last():
    result = _decide(THURSDAY, ["08:00", "12:00", "17:00"])

    assert result.status == DayStatus.INCOMPLETE
    assert (result.entrada_1, result.saida_1) == ("08:00", "17:00")
    assert result.total_trabalhado_min == 540
    assert result.banco_horas_min == 0


def test_single_punch_is_incomplete():
    result = _decide(THURSDAY, ["08:00"])

    assert result.status == DayStatus.INCOMPLETE
    assert result.entrada_1 == "08:00"
    assert result.total_trabalhado_min == 0


def test_no_punch_on_workday_is_absence():
    result = _decide(THURSDAY, [])

    assert result.status == DayStatus.ABSENT
    assert result.falta_min == 480
    assert result.banco_horas_min == -480


def test_no_punch_on_weekend_is_day_off():
    result = _decide(SATURDAY, [])

    assert result.status == DayStatus.DAY_OFF
    assert result.falta_min == 0


def test_approved_occurrence_excuses_absence():
    result = _decide(THURSDAY, [], occurrence=OccurrenceType.MEDICAL)

    assert result.status == DayStatus.EXCUSED
    assert result.banco_horas_min == 0


def test_schedule_from_record_applies_defaults():
    schedule = WorkSchedule.from_record({"id": "e1", "hora_entrada_prevista": "07:30", "dias_semana": "1,2,3,4,5,6", "tolerancia_minutos": 0})

    assert schedule.escala_id == "e1"
    assert schedule.entrada_prevista_min == 450
    assert schedule.tolerancia_minutos == 5
    assert schedule.carga_diaria_minutos == 480
    assert schedule.is_work_day(SATURDAY)
    assert not schedule.is_work_day(date(2025, 1, 5))
