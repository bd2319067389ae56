"""
Unit of Work - Implementação Django.

Gerencia transações atômicas entre múltiplos repositórios,
garantindo que leitura, guarda, escrita condicional do ticket e linha
de histórico sejam persistidas juntas.

Responsabilidades:
- Iniciar/finalizar transações (``transaction.atomic``)
- Commit/Rollback coordenado
- Persistir eventos no Event Store (dentro da transação)
- Publicar eventos após commit bem-sucedido

Falha de publicação nunca desfaz nem falha a operação: é logada e
descartada.
"""

from typing import Dict, List, Optional
import logging

from django.db import transaction

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher, EventStore, UnitOfWork

logger = logging.getLogger(__name__)


def _publicar_eventos(event_publisher: Optional[EventPublisher], events: List[DomainEvent]) -> None:
    for event in events:
        logger.info(
            f"Publishing event: {event.event_type} "
            f"for aggregate {event.aggregate_id}"
        )

        if event_publisher is None:
            continue
        try:
            event_publisher.publish(event)
        except Exception as e:
            logger.error(
                f"Failed to publish event {event.event_type} ({event.event_id}): {e}",
                exc_info=True,
            )


class DjangoUnitOfWork(UnitOfWork):
    """
    Implementação Django do Unit of Work.

    Usa ``django.db.transaction.atomic``; dentro de outro bloco atomic
    (ex: testes) vira um savepoint. Eventos são publicados apenas após
    commit bem-sucedido.

    Example:
        with DjangoUnitOfWork(event_publisher=publisher) as uow:
            ticket_repo.save(ticket)
            historico_repo.adicionar(entrada)
            uow.publish_event(TicketStatusAlteradoEvent(...))
        # Commit automático + eventos publicados

    Example com rollback:
        with DjangoUnitOfWork() as uow:
            repo.save(entity)
            uow.publish_event(MyEvent(...))
            raise Exception("Erro!")
        # Rollback automático, eventos descartados
    """

    def __init__(
        self,
        event_publisher: Optional[EventPublisher] = None,
        event_store: Optional[EventStore] = None,
    ):
        """
        Args:
            event_publisher: Publicador de eventos (Celery, logging...)
            event_store: Store para persistência de eventos
        """
        super().__init__()
        self._event_publisher = event_publisher
        self._event_store = event_store
        self._atomic = None
        self._committed = False
        self._rolled_back = False

    def _begin_transaction(self) -> None:
        self._committed = False
        self._rolled_back = False
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        logger.debug("Transaction started")

    def commit(self) -> None:
        """
        Ordem de execução:
        1. Persistir eventos no Event Store (mesma transação)
        2. Commit da transação no banco
        3. Publicar eventos para handlers (após commit)
        4. Limpar estado interno

        Raises:
            Exception: Se commit falhar, re-lança exceção
        """
        if self._atomic is None:
            logger.warning("Transaction already finalized")
            return

        try:
            if self._event_store and self._events:
                self._persist_events()
        except Exception as e:
            logger.error(f"Event store append failed: {e}")
            self.rollback(e)
            raise

        atomic, self._atomic = self._atomic, None
        atomic.__exit__(None, None, None)
        self._committed = True
        logger.debug("Transaction committed")

        events = self.collect_events()
        self.clear_events()
        if events:
            _publicar_eventos(self._event_publisher, events)

    def rollback(self, exc: Optional[BaseException] = None) -> None:
        """
        Desfaz todas as mudanças e descarta eventos.

        Chamado automaticamente se exceção ocorrer dentro do contexto.
        """
        self.clear_events()
        if self._atomic is None:
            return

        atomic, self._atomic = self._atomic, None
        error = exc or RuntimeError("rollback")
        atomic.__exit__(type(error), error, error.__traceback__)
        self._rolled_back = True
        logger.debug("Transaction rolled back")

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback(exc_val)
        else:
            self.commit()
        return False

    def _persist_events(self) -> None:
        sequences: Dict[str, int] = {}
        for event in self._events:
            if event.aggregate_id not in sequences:
                sequences[event.aggregate_id] = self._event_store.last_sequence(event.aggregate_id)
            sequences[event.aggregate_id] += 1

            self._event_store.append(event=event, sequence=sequences[event.aggregate_id])

    @property
    def is_committed(self) -> bool:
        return self._committed

    @property
    def is_rolled_back(self) -> bool:
        return self._rolled_back


class InMemoryUnitOfWork(UnitOfWork):
    """
    Unit of Work em memória para testes.

    Não persiste nada - apenas simula commit/rollback e, se houver
    publisher, entrega os eventos após o commit (com a mesma regra de
    falha silenciosa do DjangoUnitOfWork).

    Example:
        uow = InMemoryUnitOfWork()
        with uow:
            uow.publish_event(event)

        assert uow.committed
        assert len(uow.published_events) == 1
    """

    def __init__(self, event_publisher: Optional[EventPublisher] = None):
        super().__init__()
        self._event_publisher = event_publisher
        self._committed = False
        self._rolled_back = False
        self._published_events: List[DomainEvent] = []

    def _begin_transaction(self) -> None:
        pass

    def commit(self) -> None:
        self._committed = True
        events = self.collect_events()
        self.clear_events()
        self._published_events.extend(events)
        _publicar_eventos(self._event_publisher, events)

    def rollback(self) -> None:
        self._rolled_back = True
        self.clear_events()

    @property
    def committed(self) -> bool:
        return self._committed

    @property
    def rolled_back(self) -> bool:
        return self._rolled_back

    @property
    def published_events(self) -> List[DomainEvent]:
        """Eventos que passaram pelo commit."""
        return self._published_events

    def reset(self) -> None:
        """Reset para próximo teste."""
        self._committed = False
        self._rolled_back = False
        self._published_events.clear()
        self.clear_events()
