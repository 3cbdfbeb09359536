from __future__ import annotations

from typing import Any, Iterable, Optional, Protocol, Sequence

from ..core.exceptions import ValidationError


class Entity:
    """Nomes das entidades persistidas na plataforma."""

    CLIENTE = "Cliente"
    FUNCIONARIO = "Funcionario"
    CARGO = "Cargo"
    DEPARTAMENTO = "Departamento"
    ORDEM_SERVICO = "OrdemServico"
    ORCAMENTO = "Orcamento"
    ADIANTAMENTO = "Adiantamento"
    PONTO_REGISTRO = "PontoRegistro"
    IMPORTACAO_PONTO = "ImportacaoPonto"
    OCORRENCIA_PONTO = "OcorrenciaPonto"
    ESCALA_TRABALHO = "EscalaTrabalho"
    FUNCIONARIO_ESCALA = "FuncionarioEscala"
    APURACAO_DIARIA = "ApuracaoDiariaPonto"
    BANCO_HORAS = "BancoHoras"
    CONFIGURACOES = "Configuracoes"
    USER = "User"
    ERROR_LOG = "ErrorLog"

    ALL = frozenset(
        {
            CLIENTE,
            FUNCIONARIO,
            CARGO,
            DEPARTAMENTO,
            ORDEM_SERVICO,
            ORCAMENTO,
            ADIANTAMENTO,
            PONTO_REGISTRO,
            IMPORTACAO_PONTO,
            OCORRENCIA_PONTO,
            ESCALA_TRABALHO,
            FUNCIONARIO_ESCALA,
            APURACAO_DIARIA,
            BANCO_HORAS,
            CONFIGURACOES,
            USER,
            ERROR_LOG,
        }
    )


def ensure_entity(name: str) -> str:
    if name not in Entity.ALL:
        raise ValidationError(f"Entidade desconhecida: {name}")
    return name


class EntityStore(Protocol):
    """Entity storage of the platform.

    Records are plain dicts with ``id``, ``created_date`` and ``updated_date``
    plus the entity fields. ``sort`` takes a field name, ``-field`` for
    descending order.
    """

    def list(self, entity: str, *, sort: Optional[str] = None, limit: Optional[int] = None) -> list[dict]:
        raise NotImplementedError

    def filter(self, entity: str, criteria: dict[str, Any], *, sort: Optional[str] = None) -> list[dict]:
        raise NotImplementedError

    def get(self, entity: str, record_id: str) -> Optional[dict]:
        raise NotImplementedError

    def create(self, entity: str, data: dict[str, Any]) -> dict:
        raise NotImplementedError

    def update(self, entity: str, record_id: str, data: dict[str, Any]) -> dict:
        raise NotImplementedError

    def delete(self, entity: str, record_id: str) -> bool:
        raise NotImplementedError


def matches(record: dict, criteria: dict[str, Any]) -> bool:
    return all(record.get(key) == value for key, value in criteria.items())


def _sort_key(value: Any) -> tuple:
    # None first, then numbers, then text.
    if value is None:
        return (0, 0, 0)
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return (1, 0, value)
    return (1, 1, str(value))


def sort_records(records: Iterable[dict], sort: Optional[str]) -> list[dict]:
    items = list(records)
    if not sort:
        return items
    reverse = sort.startswith("-")
    field = sort.lstrip("-")
    return sorted(items, key=lambda r: _sort_key(r.get(field)), reverse=reverse)


def apply_limit(records: Sequence[dict], limit: Optional[int]) -> list[dict]:
    if limit is None:
        return list(records)
    return list(records[: max(int(limit), 0)])
