"""
Data Transfer Objects (DTOs) do Domínio de Categorias.

Input DTOs recebem dados já desserializados pela camada de API;
Output DTOs formatam entidades para resposta.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from .entities import Categoria, RegraAtribuicao


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CriarCategoriaInputDTO:
    """
    DTO de entrada para criar categoria.

    Attributes:
        nome: Nome único da categoria
        descricao: Descrição livre
        horas_primeira_resposta: SLA de primeira resposta (1-168)
        horas_resolucao: SLA de resolução (1-720)
        campos: Definições de campos (dicts name/label/type/required/options)
        dias_reabertura: Janela de reabertura em dias (1-30, opcional)
    """

    nome: str
    descricao: str = ""
    horas_primeira_resposta: int = 4
    horas_resolucao: int = 24
    campos: tuple = field(default_factory=tuple)
    dias_reabertura: Optional[int] = None


@dataclass(frozen=True)
class CriarRegraInputDTO:
    """
    DTO de entrada para criar regra de atribuição.

    Attributes:
        campo: Nome do campo personalizado avaliado
        operador: equals|not_equals|contains|gt|gte|lt|lte
        valor: Valor de comparação (sempre texto)
        atendente_id: Atendente alvo (precisa ter vínculo ativo)
        prioridade: Menor valor é avaliado primeiro
    """

    campo: str
    operador: str
    valor: str
    atendente_id: int
    prioridade: int = 0


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class CategoriaOutputDTO:
    id: int
    nome: str
    descricao: str
    horas_primeira_resposta: int
    horas_resolucao: int
    ativa: bool
    dias_reabertura: Optional[int]
    campos: List[dict] = field(default_factory=list)

    @classmethod
    def from_entity(cls, entity: Categoria) -> "CategoriaOutputDTO":
        return cls(
            id=entity.id,
            nome=entity.nome,
            descricao=entity.descricao,
            horas_primeira_resposta=entity.horas_primeira_resposta,
            horas_resolucao=entity.horas_resolucao,
            ativa=entity.ativa,
            dias_reabertura=entity.dias_reabertura,
            campos=[campo.to_dict() for campo in entity.campos],
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "nome": self.nome,
            "descricao": self.descricao,
            "horas_primeira_resposta": self.horas_primeira_resposta,
            "horas_resolucao": self.horas_resolucao,
            "ativa": self.ativa,
            "dias_reabertura": self.dias_reabertura,
            "campos": self.campos,
        }


@dataclass
class RegraOutputDTO:
    id: int
    categoria_id: int
    campo: str
    operador: str
    valor: str
    atendente_id: int
    prioridade: int

    @classmethod
    def from_entity(cls, entity: RegraAtribuicao) -> "RegraOutputDTO":
        return cls(
            id=entity.id,
            categoria_id=entity.categoria_id,
            campo=entity.campo,
            operador=entity.operador.value,
            valor=entity.valor,
            atendente_id=entity.atendente_id,
            prioridade=entity.prioridade,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "categoria_id": self.categoria_id,
            "campo": self.campo,
            "operador": self.operador,
            "valor": self.valor,
            "atendente_id": self.atendente_id,
            "prioridade": self.prioridade,
        }
