from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Optional

ORIGIN_CLOCK = "relogio"


@dataclass(frozen=True)
class RawPunch:
    """Linha lida do arquivo do relógio, ainda sem validação."""

    en_no: str
    date_time: Any
    name: str = ""
    device_id: str = ""
    mode: str = ""
    raw: str = ""


@dataclass(frozen=True)
class NormalizedPunch:
    """Candidato a PontoRegistro, no formato exibido para revisão."""

    user_id_relogio: Optional[str]
    nome_detectado: str
    data: Optional[str]
    hora: Optional[str]
    data_hora: Optional[str]
    metodo: str
    dispositivo_id: str
    raw_linha: str
    valido: bool
    motivo_invalido: Optional[str]
    funcionario_id: Optional[str] = None
    origem: str = ORIGIN_CLOCK

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class PreviewStats:
    total: int
    validos: int
    invalidos: int
    periodo_inicio: Optional[str]
    periodo_fim: Optional[str]
    formato: str

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class PreviewResult:
    success: bool
    registros: list[NormalizedPunch] = field(default_factory=list)
    stats: Optional[PreviewStats] = None
    error: Optional[str] = None

    def to_dict(self) -> dict:
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "registros": [r.to_dict() for r in self.registros],
            "stats": self.stats.to_dict() if self.stats else None,
        }


@dataclass(frozen=True)
class ConfirmResult:
    importacao_id: str
    total_inseridos: int
    arquivo_hash: str

    def to_dict(self) -> dict:
        return {
            "success": True,
            "message": f"Importação concluída: {self.total_inseridos} registros salvos",
            "importacao_id": self.importacao_id,
            "total_inseridos": self.total_inseridos,
            "arquivo_hash": self.arquivo_hash,
        }


@dataclass(frozen=True)
class SaveResult:
    importacao_id: str
    total_salvos: int
    total_validos: int
    erros: list[dict] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "success": True,
            "message": f"{self.total_salvos} registros salvos com sucesso",
            "importacao_id": self.importacao_id,
            "stats": {
                "total_salvos": self.total_salvos,
                "total_validos": self.total_validos,
                "total_erros": len(self.erros),
            },
        }


@dataclass(frozen=True)
class DirectImportResult:
    importacao_id: Optional[str]
    total_lidos: int
    total_salvos: int
    stats: Optional[PreviewStats]
    ids_sem_mapeamento: list[str] = field(default_factory=list)
    error: Optional[str] = None

    def to_dict(self) -> dict:
        if self.error:
            return {"success": False, "error": self.error}
        stats = self.stats
        return {
            "success": True,
            "message": f"{self.total_salvos} registros importados com sucesso",
            "importacao_id": self.importacao_id,
            "stats": {
                "total_lidos": self.total_lidos,
                "total_salvos": self.total_salvos,
                "total_validos": stats.validos if stats else 0,
                "total_invalidos": stats.invalidos if stats else 0,
                "periodo_inicio": stats.periodo_inicio if stats else None,
                "periodo_fim": stats.periodo_fim if stats else None,
                "formato_detectado": stats.formato if stats else None,
            },
            "ids_sem_mapeamento": list(self.ids_sem_mapeamento),
        }
