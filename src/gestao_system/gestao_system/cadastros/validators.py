from __future__ import annotations

from typing import Any, Callable, Mapping, Optional

from ..common.datetime_utils import parse_hhmm, parse_iso_date
from ..common.validators import only_digits, parse_money, require_non_empty, s
from ..core.enums import OccurrenceType
from ..core.exceptions import ValidationError
from ..entities.store import Entity

UFS = frozenset(
    "AC AL AP AM BA CE DF ES GO MA MT MS MG PA PB PR PE PI RJ RN RS RO RR SC SP SE TO".split()
)

# (data, existing records of the entity, id being updated) -> cleaned data
Validator = Callable[[dict, list, Optional[str]], dict]


def _require_date(value: Any, field_name: str) -> str:
    text = require_non_empty(value, field_name)
    try:
        parse_iso_date(text[:10])
    except ValueError as e:
        raise ValidationError(f"{field_name} inválida (use YYYY-MM-DD)") from e
    return text


def validate_cliente(data: dict, existing: list, record_id: Optional[str]) -> dict:
    data["nome"] = require_non_empty(data.get("nome"), "Nome")
    data["telefone"] = require_non_empty(data.get("telefone"), "Telefone")

    if s(data.get("cpf_cnpj")):
        digits = only_digits(data["cpf_cnpj"])
        if len(digits) not in (11, 14):
            raise ValidationError("CPF/CNPJ deve ter 11 ou 14 dígitos")
        data["cpf_cnpj"] = digits

    if s(data.get("uf")):
        uf = s(data["uf"]).upper()
        if uf not in UFS:
            raise ValidationError("UF inválida")
        data["uf"] = uf

    if s(data.get("cep")):
        data["cep"] = only_digits(data["cep"])
    return data


def validate_funcionario(data: dict, existing: list, record_id: Optional[str]) -> dict:
    data["nome"] = require_non_empty(data.get("nome"), "Nome")
    data["cpf"] = require_non_empty(data.get("cpf"), "CPF")
    data["cargo_id"] = require_non_empty(data.get("cargo_id"), "Cargo")
    data["data_inicio"] = _require_date(data.get("data_inicio"), "Data de início")

    if data.get("user_id_relogio") not in (None, ""):
        clock_id = only_digits(data["user_id_relogio"])
        if not clock_id:
            raise ValidationError("ID do relógio deve ser numérico")
        for other in existing:
            if other.get("id") != record_id and s(other.get("user_id_relogio")) == clock_id:
                raise ValidationError(f"ID do relógio {clock_id} já vinculado a {other.get('nome') or 'outro funcionário'}")
        data["user_id_relogio"] = clock_id
    return data


def validate_adiantamento(data: dict, existing: list, record_id: Optional[str]) -> dict:
    data["funcionario_id"] = require_non_empty(data.get("funcionario_id"), "Funcionário")
    data["data_adiantamento"] = _require_date(data.get("data_adiantamento"), "Data do adiantamento")
    valor = parse_money(data.get("valor"), "Valor")
    if valor <= 0:
        raise ValidationError("Valor deve ser maior que zero")
    data["valor"] = valor
    data["status"] = s(data.get("status")) or "pendente"
    return data


def _hhmm(value: Any, label: str) -> str:
    try:
        return parse_hhmm(s(value)[:5]).strftime("%H:%M")
    except ValueError as e:
        raise ValidationError(f"{label} inválida (use HH:MM)") from e


def validate_escala(data: dict, existing: list, record_id: Optional[str]) -> dict:
    if not s(data.get("nome")):
        raise ValidationError("Nome da escala é obrigatório.")
    data["nome"] = s(data["nome"])

    if not s(data.get("hora_entrada_prevista")) or not s(data.get("hora_saida_prevista")):
        raise ValidationError("Horários de entrada e saída são obrigatórios.")
    data["hora_entrada_prevista"] = _hhmm(data["hora_entrada_prevista"], "Hora de entrada")
    data["hora_saida_prevista"] = _hhmm(data["hora_saida_prevista"], "Hora de saída")
    if data["hora_saida_prevista"] <= data["hora_entrada_prevista"]:
        raise ValidationError("Horário de saída deve ser posterior à entrada.")

    for key, label in (("intervalo_inicio_previsto", "Início do intervalo"), ("intervalo_fim_previsto", "Fim do intervalo")):
        if s(data.get(key)):
            data[key] = _hhmm(data[key], label)
    if s(data.get("intervalo_inicio_previsto")) and s(data.get("intervalo_fim_previsto")):
        if data["intervalo_fim_previsto"] <= data["intervalo_inicio_previsto"]:
            raise ValidationError("Fim do intervalo deve ser posterior ao início.")

    try:
        carga = int(data.get("carga_diaria_minutos") or 0)
    except (TypeError, ValueError) as e:
        raise ValidationError("Carga diária inválida") from e
    if carga <= 0:
        raise ValidationError("Carga diária deve ser maior que zero")
    data["carga_diaria_minutos"] = carga

    if data.get("tolerancia_minutos") not in (None, ""):
        try:
            data["tolerancia_minutos"] = max(int(data["tolerancia_minutos"]), 0)
        except (TypeError, ValueError) as e:
            raise ValidationError("Tolerância inválida") from e
    return data


def validate_ocorrencia(data: dict, existing: list, record_id: Optional[str]) -> dict:
    try:
        data["tipo"] = OccurrenceType(s(data.get("tipo"))).value
    except ValueError as e:
        raise ValidationError("Tipo de ocorrência inválido") from e
    data["funcionario_id"] = require_non_empty(data.get("funcionario_id"), "Funcionário")
    data["data"] = _require_date(data.get("data"), "Data")
    return data


def _item_total(item: Mapping) -> float:
    if item.get("quantidade") not in (None, "") and item.get("valor_unitario") not in (None, ""):
        return parse_money(item["quantidade"], "Quantidade") * parse_money(item["valor_unitario"], "Valor unitário")
    if item.get("valor_total") in (None, ""):
        return 0.0
    return parse_money(item["valor_total"], "Valor do item")


def validate_orcamento(data: dict, existing: list, record_id: Optional[str]) -> dict:
    itens = data.get("itens") or []
    if not isinstance(itens, list):
        raise ValidationError("itens deve ser uma lista")

    cleaned = []
    subtotal = 0.0
    for item in itens:
        if not isinstance(item, dict):
            raise ValidationError("Item de orçamento inválido")
        total = round(_item_total(item), 2)
        cleaned.append({**item, "valor_total": total})
        subtotal += total

    desconto = parse_money(data["desconto_valor"], "Desconto") if data.get("desconto_valor") not in (None, "") else 0.0
    if data.get("desconto_tipo") == "percentual":
        valor_desconto = subtotal * desconto / 100
    else:
        valor_desconto = desconto

    data["itens"] = cleaned
    data["desconto_valor"] = desconto
    data["valor_total"] = round(max(subtotal - valor_desconto, 0.0), 2)
    return data


VALIDATORS: dict[str, Validator] = {
    Entity.CLIENTE: validate_cliente,
    Entity.FUNCIONARIO: validate_funcionario,
    Entity.ADIANTAMENTO: validate_adiantamento,
    Entity.ESCALA_TRABALHO: validate_escala,
    Entity.OCORRENCIA_PONTO: validate_ocorrencia,
    Entity.ORCAMENTO: validate_orcamento,
}
