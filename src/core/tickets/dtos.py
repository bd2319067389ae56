"""
Data Transfer Objects (DTOs) do Domínio de Tickets.

DTOs são estruturas simples para transportar dados entre camadas,
evitando vazamento das entidades para a camada de API.

Tipos de DTOs:
- Input DTOs: dados de entrada (de Forms/APIs)
- Output DTOs: dados formatados para resposta
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Optional

from .entities import HistoricoTicket, TicketEntity


# =============================================================================
# INPUT DTOs (Entrada)
# =============================================================================

@dataclass(frozen=True)
class CriarTicketInputDTO:
    """
    DTO de entrada para criar ticket.

    Attributes:
        solicitante_id: Usuário que abre o ticket
        categoria_id: Categoria escolhida
        assunto: Resumo do problema
        descricao: Descrição detalhada
        prioridade: low|medium|high|urgent (ou nome do enum)
        dados_personalizados: Respostas aos campos da categoria
    """

    solicitante_id: int
    categoria_id: int
    assunto: str
    descricao: str
    prioridade: str = "medium"
    dados_personalizados: Dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class AtualizarTicketInputDTO:
    """
    Patch da atualização genérica. Campos None não são alterados.

    Attributes:
        status: Novo status (valor, ex: "pending_user")
        prioridade: Nova prioridade
        atendente_id: Novo atendente (não é possível remover o atendente)
    """

    status: Optional[str] = None
    prioridade: Optional[str] = None
    atendente_id: Optional[int] = None

    @property
    def vazio(self) -> bool:
        return self.status is None and self.prioridade is None and self.atendente_id is None


# =============================================================================
# OUTPUT DTOs (Saída)
# =============================================================================

@dataclass
class TicketOutputDTO:
    """
    DTO de saída completo com dados do ticket.

    ``sla_status`` (ok|warning|violated) só é preenchido por consultas
    que passam pelo SlaService.
    """

    id: int
    solicitante_id: int
    atendente_id: Optional[int]
    categoria_id: int
    assunto: str
    descricao: str
    status: str
    prioridade: str
    prazo_primeira_resposta: datetime
    prazo_resolucao: datetime
    dados_personalizados: Dict[str, Any]
    criado_em: datetime
    atualizado_em: datetime
    fechado_em: Optional[datetime] = None
    reaberto_em: Optional[datetime] = None
    sla_status: Optional[str] = None

    @classmethod
    def from_entity(cls, entity: TicketEntity, sla_status: Optional[str] = None) -> "TicketOutputDTO":
        return cls(
            id=entity.id,
            solicitante_id=entity.solicitante_id,
            atendente_id=entity.atendente_id,
            categoria_id=entity.categoria_id,
            assunto=entity.assunto,
            descricao=entity.descricao,
            status=entity.status.value,
            prioridade=entity.prioridade.value,
            prazo_primeira_resposta=entity.prazo_primeira_resposta,
            prazo_resolucao=entity.prazo_resolucao,
            dados_personalizados=dict(entity.dados_personalizados),
            criado_em=entity.criado_em,
            atualizado_em=entity.atualizado_em,
            fechado_em=entity.fechado_em,
            reaberto_em=entity.reaberto_em,
            sla_status=sla_status,
        )

    def to_dict(self) -> dict:
        """Converte para dicionário (serialização JSON)."""
        return {
            "id": self.id,
            "solicitante_id": self.solicitante_id,
            "atendente_id": self.atendente_id,
            "categoria_id": self.categoria_id,
            "assunto": self.assunto,
            "descricao": self.descricao,
            "status": self.status,
            "prioridade": self.prioridade,
            "prazo_primeira_resposta": _iso(self.prazo_primeira_resposta),
            "prazo_resolucao": _iso(self.prazo_resolucao),
            "dados_personalizados": self.dados_personalizados,
            "criado_em": _iso(self.criado_em),
            "atualizado_em": _iso(self.atualizado_em),
            "fechado_em": _iso(self.fechado_em),
            "reaberto_em": _iso(self.reaberto_em),
            "sla_status": self.sla_status,
        }


@dataclass
class HistoricoOutputDTO:
    id: int
    ticket_id: int
    autor_id: int
    mensagem: str
    anexo: Optional[str]
    criado_em: datetime

    @classmethod
    def from_entity(cls, entity: HistoricoTicket) -> "HistoricoOutputDTO":
        return cls(
            id=entity.id,
            ticket_id=entity.ticket_id,
            autor_id=entity.autor_id,
            mensagem=entity.mensagem,
            anexo=entity.anexo,
            criado_em=entity.criado_em,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "ticket_id": self.ticket_id,
            "autor_id": self.autor_id,
            "mensagem": self.mensagem,
            "anexo": self.anexo,
            "criado_em": _iso(self.criado_em),
        }


def _iso(valor: Optional[datetime]) -> Optional[str]:
    return valor.isoformat() if valor else None
