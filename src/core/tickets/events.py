"""
Domain Events do Domínio de Tickets.

Eventos (``event_name`` entre parênteses):
- TicketCriadoEvent (ticket.created)
- TicketStatusAlteradoEvent (ticket.status_changed)
- TicketAtribuidoEvent (ticket.assigned)
- TicketAprovacaoSolicitadaEvent (ticket.approval_required)
- TicketMensagemAdicionadaEvent (ticket.message_added)
- TicketExcluidoEvent (ticket.deleted)
- TicketSlaAvisoEvent (ticket.sla_warning)
- TicketSlaVioladoEvent (ticket.sla_violated)

Uso:
    Use cases enfileiram eventos no UnitOfWork; o SLA Monitor publica
    direto no EventPublisher, pois não grava nada.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import ClassVar, Optional

from src.core.shared.events import DomainEvent


class _TicketEvent(DomainEvent):
    @property
    def aggregate_type(self) -> str:
        return "Ticket"


@dataclass
class TicketCriadoEvent(_TicketEvent):
    """
    Evento: Ticket foi criado.

    Handlers típicos:
    - Notificar atendente pré-atribuído ou equipe da categoria
    - Confirmar abertura ao solicitante
    """

    event_name: ClassVar[str] = "ticket.created"

    solicitante_id: int = 0
    categoria_id: int = 0
    atendente_id: Optional[int] = None
    assunto: str = ""
    prioridade: str = ""


@dataclass
class TicketStatusAlteradoEvent(_TicketEvent):
    """
    Evento: Status do ticket mudou.

    Emitido por assumir, atualizar, solicitar aprovação, aprovar,
    rejeitar, fechar e reabrir.
    """

    event_name: ClassVar[str] = "ticket.status_changed"

    status_anterior: str = ""
    status_novo: str = ""
    alterado_por_id: int = 0
    solicitante_id: int = 0
    atendente_id: Optional[int] = None
    motivo: Optional[str] = None


@dataclass
class TicketAtribuidoEvent(_TicketEvent):
    """Evento: Atendente responsável foi trocado via atualização."""

    event_name: ClassVar[str] = "ticket.assigned"

    atendente_id: int = 0
    atendente_anterior_id: Optional[int] = None
    atribuido_por_id: int = 0


@dataclass
class TicketAprovacaoSolicitadaEvent(_TicketEvent):
    """
    Evento: Atendente finalizou e aguarda confirmação do solicitante.

    Handler típico: notificar o solicitante para aprovar ou rejeitar.
    """

    event_name: ClassVar[str] = "ticket.approval_required"

    solicitante_id: int = 0
    solicitado_por_id: int = 0


@dataclass
class TicketMensagemAdicionadaEvent(_TicketEvent):
    """Evento: Mensagem adicionada ao histórico."""

    event_name: ClassVar[str] = "ticket.message_added"

    autor_id: int = 0
    solicitante_id: int = 0
    atendente_id: Optional[int] = None
    preview: str = ""
    tem_anexo: bool = False


@dataclass
class TicketExcluidoEvent(_TicketEvent):
    """Evento: Ticket excluído (histórico removido em cascata)."""

    event_name: ClassVar[str] = "ticket.deleted"

    excluido_por_id: int = 0


def _agora_utc() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class TicketSlaAvisoEvent(_TicketEvent):
    """
    Evento: Ticket a menos do tempo de antecedência de um prazo.

    Attributes:
        tipo: "first_response" ou "resolution"
        prazo: Prazo que está para vencer
        minutos_restantes: Minutos até o prazo no momento da varredura
    """

    event_name: ClassVar[str] = "ticket.sla_warning"

    tipo: str = ""
    prazo: datetime = field(default_factory=_agora_utc)
    minutos_restantes: float = 0.0
    status: str = ""
    atendente_id: Optional[int] = None


@dataclass
class TicketSlaVioladoEvent(_TicketEvent):
    """
    Evento: Prazo de SLA vencido com o ticket ainda em status sujeito a ele.

    Emitido uma vez por varredura enquanto a violação persistir; a
    camada de notificação decide se deduplica ou escala.

    Attributes:
        tipo: "first_response" ou "resolution"
        prazo: Prazo vencido
        horas_atraso: Horas desde o vencimento no momento da varredura
    """

    event_name: ClassVar[str] = "ticket.sla_violated"

    tipo: str = ""
    prazo: datetime = field(default_factory=_agora_utc)
    horas_atraso: float = 0.0
    status: str = ""
    atendente_id: Optional[int] = None
