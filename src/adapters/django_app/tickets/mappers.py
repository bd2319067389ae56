"""
Mappers para conversão entre Entities (Core) e Models (Django).

Responsabilidades:
- Converter TicketEntity ↔ TicketModel
- Converter HistoricoTicket ↔ TicketHistoryModel
- Converter DomainEvent → DomainEventModel (para Event Store)

Princípios:
- Mappers são stateless
- Não contêm lógica de negócio
- Tratam apenas conversão de dados
"""

from typing import List

from src.core.shared.events import DomainEvent
from src.core.tickets.entities import (
    HistoricoTicket,
    TicketEntity,
    TicketPriority,
    TicketStatus,
)

from .models import DomainEventModel, TicketHistoryModel, TicketModel


class TicketMapper:
    """
    Mapper para conversão entre TicketEntity e TicketModel.

    - to_entity(): Model → Entity
    - to_model_data(): Entity → campos para create/update
    - to_entity_list(): List[Model] → List[Entity]
    """

    @staticmethod
    def to_model_data(entity: TicketEntity) -> dict:
        """
        Campos persistidos do ticket (sem ``id`` e ``versao``).

        ``versao`` é controlada pelo repositório na escrita condicional.
        """
        return {
            'solicitante_id': entity.solicitante_id,
            'atendente_id': entity.atendente_id,
            'categoria_id': entity.categoria_id,
            'assunto': entity.assunto,
            'descricao': entity.descricao,
            'status': entity.status.value,
            'prioridade': entity.prioridade.value,
            'prazo_primeira_resposta': entity.prazo_primeira_resposta,
            'prazo_resolucao': entity.prazo_resolucao,
            'dados_personalizados': dict(entity.dados_personalizados),
            'criado_em': entity.criado_em,
            'atualizado_em': entity.atualizado_em,
            'fechado_em': entity.fechado_em,
            'reaberto_em': entity.reaberto_em,
        }

    @staticmethod
    def to_entity(model: TicketModel) -> TicketEntity:
        """
        Converte TicketModel para TicketEntity.

        Note:
            Bypassa validações do factory method .criar()
            pois dados já foram validados na criação original
        """
        return TicketEntity(
            id=model.id,
            solicitante_id=model.solicitante_id,
            atendente_id=model.atendente_id,
            categoria_id=model.categoria_id,
            assunto=model.assunto,
            descricao=model.descricao,
            status=TicketStatus(model.status),
            prioridade=TicketPriority(model.prioridade),
            prazo_primeira_resposta=model.prazo_primeira_resposta,
            prazo_resolucao=model.prazo_resolucao,
            dados_personalizados=dict(model.dados_personalizados or {}),
            criado_em=model.criado_em,
            atualizado_em=model.atualizado_em,
            fechado_em=model.fechado_em,
            reaberto_em=model.reaberto_em,
            versao=model.versao,
        )

    @staticmethod
    def to_entity_list(models) -> List[TicketEntity]:
        return [TicketMapper.to_entity(model) for model in models]


class HistoricoMapper:

    @staticmethod
    def to_entity(model: TicketHistoryModel) -> HistoricoTicket:
        return HistoricoTicket(
            id=model.id,
            ticket_id=model.ticket_id,
            autor_id=model.autor_id,
            mensagem=model.mensagem,
            anexo=model.anexo,
            criado_em=model.criado_em,
        )

    @staticmethod
    def to_model(entity: HistoricoTicket) -> TicketHistoryModel:
        return TicketHistoryModel(
            ticket_id=entity.ticket_id,
            autor_id=entity.autor_id,
            mensagem=entity.mensagem,
            anexo=entity.anexo,
            criado_em=entity.criado_em,
        )


class DomainEventMapper:
    """
    Mapper de DomainEvent para DomainEventModel (Event Store).
    """

    @staticmethod
    def to_model(event: DomainEvent, sequence: int = 0) -> DomainEventModel:
        """
        Args:
            event: Evento de domínio
            sequence: Número de sequência no agregado

        Returns:
            Model pronto para persistência
        """
        return DomainEventModel(
            event_id=event.event_id,
            event_type=event.event_type,
            aggregate_type=event.aggregate_type,
            aggregate_id=event.aggregate_id,
            event_data=event._get_event_data(),
            version=event.version,
            sequence=sequence,
            occurred_at=event.occurred_at,
        )
