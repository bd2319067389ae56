"""
Domínio de Tickets - Ciclo de vida dos chamados.

Este módulo contém a máquina de estados do ticket e os casos de uso
que a operam:
- Entidades (TicketEntity, TicketStatus, TicketPriority, HistoricoTicket)
- Use Cases (Criar, Assumir, Atualizar, Aprovação, Fechar, Reabrir...)
- Domain Events (ticket.created, ticket.status_changed, ...)
- DTOs (Input/Output Data Transfer Objects)
- Ports (Interfaces para repositórios)

Características do Domínio:
- Prazos de SLA fixados na abertura a partir da categoria
- Atendente inicial decidido pelo motor de atribuição
- Transições de status controladas e guardadas por papel
- Eventos disparados para side-effects assíncronos
"""

from .entities import (
    HistoricoTicket,
    TicketEntity,
    TicketPriority,
    TicketStatus,
)
from .events import (
    TicketAprovacaoSolicitadaEvent,
    TicketAtribuidoEvent,
    TicketCriadoEvent,
    TicketExcluidoEvent,
    TicketMensagemAdicionadaEvent,
    TicketSlaAvisoEvent,
    TicketSlaVioladoEvent,
    TicketStatusAlteradoEvent,
)
from .dtos import (
    AtualizarTicketInputDTO,
    CriarTicketInputDTO,
    HistoricoOutputDTO,
    TicketOutputDTO,
)
from .ports import HistoricoRepository, TicketRepository
from .policies import PoliticaAcessoTicket
from .use_cases import (
    AdicionarMensagemService,
    AprovarTicketService,
    AssumirTicketService,
    AtualizarTicketService,
    CriarTicketService,
    ExcluirTicketService,
    FecharTicketService,
    ListarHistoricoService,
    ListarTicketsService,
    ObterTicketService,
    ReabrirTicketService,
    RejeitarTicketService,
    SolicitarAprovacaoService,
)

__all__ = [
    # Entities
    "HistoricoTicket",
    "TicketEntity",
    "TicketPriority",
    "TicketStatus",
    # Events
    "TicketAprovacaoSolicitadaEvent",
    "TicketAtribuidoEvent",
    "TicketCriadoEvent",
    "TicketExcluidoEvent",
    "TicketMensagemAdicionadaEvent",
    "TicketSlaAvisoEvent",
    "TicketSlaVioladoEvent",
    "TicketStatusAlteradoEvent",
    # DTOs
    "AtualizarTicketInputDTO",
    "CriarTicketInputDTO",
    "HistoricoOutputDTO",
    "TicketOutputDTO",
    # Ports
    "HistoricoRepository",
    "TicketRepository",
    "PoliticaAcessoTicket",
    # Use Cases
    "AdicionarMensagemService",
    "AprovarTicketService",
    "AssumirTicketService",
    "AtualizarTicketService",
    "CriarTicketService",
    "ExcluirTicketService",
    "FecharTicketService",
    "ListarHistoricoService",
    "ListarTicketsService",
    "ObterTicketService",
    "ReabrirTicketService",
    "RejeitarTicketService",
    "SolicitarAprovacaoService",
]
