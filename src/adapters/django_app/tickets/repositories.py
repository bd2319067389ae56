"""
Repositórios Django para persistência de Tickets.

Implementam as interfaces (Ports) definidas no Core.
São DRIVEN ADAPTERS - acionados pelo Core em resposta a operações.

Responsabilidades:
- Implementar TicketRepository / HistoricoRepository / EventStore
- Mapear entities para models e vice-versa
- Executar queries no banco via ORM

Concorrência:
    Atualização de ticket é ``UPDATE tickets SET ..., versao = versao + 1
    WHERE id = ? AND versao = ?``. Zero linhas afetadas vira
    ConcurrencyError; o Unit of Work faz o rollback.
"""

from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional
import logging

from django.db.models import F

from src.core.shared.events import DomainEvent
from src.core.shared.exceptions import ConcurrencyError
from src.core.shared.interfaces import EventStore
from src.core.tickets.entities import (
    HistoricoTicket,
    STATUS_PRAZO_RESOLUCAO,
    TicketEntity,
    TicketStatus,
)

from .mappers import DomainEventMapper, HistoricoMapper, TicketMapper
from .models import DomainEventModel, TicketHistoryModel, TicketModel

logger = logging.getLogger(__name__)

_STATUS_RESOLUCAO = [s.value for s in STATUS_PRAZO_RESOLUCAO]


class DjangoTicketRepository:
    """
    Implementação Django do TicketRepository.

    Example:
        repo = DjangoTicketRepository()

        # Criar (id e versao atribuídos)
        repo.save(ticket_entity)

        # Atualizar (escrita condicional pela versão)
        ticket = repo.get_by_id(1)
        ticket.assumir(atendente_id=7, agora=agora)
        repo.save(ticket)
    """

    def __init__(self):
        self._mapper = TicketMapper()

    def save(self, ticket: TicketEntity) -> TicketEntity:
        data = self._mapper.to_model_data(ticket)

        if ticket.id is None:
            model = TicketModel.objects.create(versao=1, **data)
            ticket.id = model.id
            ticket.versao = model.versao
            logger.info(f"Ticket created: {ticket.id}")
            return ticket

        atualizados = (
            TicketModel.objects
            .filter(id=ticket.id, versao=ticket.versao)
            .update(versao=F('versao') + 1, **data)
        )
        if atualizados == 0:
            logger.warning(
                f"Conditional update missed: ticket {ticket.id} versao {ticket.versao}"
            )
            raise ConcurrencyError(
                f"Ticket {ticket.id} foi modificado por outro processo"
            )

        ticket.versao += 1
        logger.debug(f"Ticket saved: {ticket.id} (versao {ticket.versao})")
        return ticket

    def get_by_id(self, ticket_id: int) -> Optional[TicketEntity]:
        try:
            return self._mapper.to_entity(TicketModel.objects.get(id=ticket_id))
        except TicketModel.DoesNotExist:
            logger.debug(f"Ticket not found: {ticket_id}")
            return None

    def delete(self, ticket_id: int) -> None:
        """Remove ticket; TicketHistoryModel sai em cascata."""
        deleted_count, _ = TicketModel.objects.filter(id=ticket_id).delete()

        if deleted_count > 0:
            logger.info(f"Ticket deleted: {ticket_id}")
        else:
            logger.debug(f"Ticket not found for deletion: {ticket_id}")

    def list_all(self) -> List[TicketEntity]:
        return self._mapper.to_entity_list(TicketModel.objects.order_by('id'))

    def list_by_status(self, statuses: Iterable[TicketStatus]) -> List[TicketEntity]:
        models = TicketModel.objects.filter(
            status__in=[s.value for s in statuses]
        ).order_by('id')
        return self._mapper.to_entity_list(models)

    # =========================================================================
    # Consultas de SLA
    # =========================================================================

    def list_primeira_resposta_vencida(self, agora: datetime) -> List[TicketEntity]:
        models = TicketModel.objects.filter(
            status=TicketStatus.ABERTO.value,
            prazo_primeira_resposta__lt=agora,
        ).order_by('prazo_primeira_resposta', 'id')
        return self._mapper.to_entity_list(models)

    def list_resolucao_vencida(self, agora: datetime) -> List[TicketEntity]:
        models = TicketModel.objects.filter(
            status__in=_STATUS_RESOLUCAO,
            prazo_resolucao__lt=agora,
        ).order_by('prazo_resolucao', 'id')
        return self._mapper.to_entity_list(models)

    def list_primeira_resposta_a_vencer(self, agora: datetime, limite: datetime) -> List[TicketEntity]:
        models = TicketModel.objects.filter(
            status=TicketStatus.ABERTO.value,
            prazo_primeira_resposta__gt=agora,
            prazo_primeira_resposta__lte=limite,
        ).order_by('prazo_primeira_resposta', 'id')
        return self._mapper.to_entity_list(models)

    def list_resolucao_a_vencer(self, agora: datetime, limite: datetime) -> List[TicketEntity]:
        models = TicketModel.objects.filter(
            status__in=_STATUS_RESOLUCAO,
            prazo_resolucao__gt=agora,
            prazo_resolucao__lte=limite,
        ).order_by('prazo_resolucao', 'id')
        return self._mapper.to_entity_list(models)

    def count(self) -> int:
        return TicketModel.objects.count()


class DjangoHistoricoRepository:
    """Histórico append-only em ``ticket_history``."""

    def adicionar(self, entrada: HistoricoTicket) -> HistoricoTicket:
        model = HistoricoMapper.to_model(entrada)
        model.save()
        return HistoricoMapper.to_entity(model)

    def list_by_ticket(self, ticket_id: int) -> List[HistoricoTicket]:
        models = TicketHistoryModel.objects.filter(
            ticket_id=ticket_id,
        ).order_by('criado_em', 'id')
        return [HistoricoMapper.to_entity(m) for m in models]

    def delete_by_ticket(self, ticket_id: int) -> int:
        removidas, _ = TicketHistoryModel.objects.filter(ticket_id=ticket_id).delete()
        return removidas


class DjangoEventStore(EventStore):
    """
    Event Store usando Django ORM.

    Persiste Domain Events para auditoria ("este ticket já violou o
    SLA?") e replay.
    """

    def append(self, event: DomainEvent, sequence: int = 0) -> None:
        model = DomainEventMapper.to_model(event=event, sequence=sequence)
        model.save()

        logger.debug(f"Event stored: {event.event_type} for {event.aggregate_id}")

    def get_events_for_aggregate(
        self,
        aggregate_id: str,
        since_sequence: int = 0,
    ) -> List[Dict[str, Any]]:
        events = (
            DomainEventModel.objects
            .filter(aggregate_id=str(aggregate_id), sequence__gte=since_sequence)
            .order_by('sequence', 'recorded_at')
        )

        return [
            {
                'event_id': e.event_id,
                'event_type': e.event_type,
                'aggregate_id': e.aggregate_id,
                'event_data': e.event_data,
                'sequence': e.sequence,
                'occurred_at': e.occurred_at,
            }
            for e in events
        ]

    def last_sequence(self, aggregate_id: str) -> int:
        ultimo = (
            DomainEventModel.objects
            .filter(aggregate_id=str(aggregate_id))
            .order_by('-sequence')
            .values_list('sequence', flat=True)
            .first()
        )
        return ultimo or 0
