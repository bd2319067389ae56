"""
Event Publishers - Publicadores de Eventos de Domínio.

Responsável por entregar eventos à camada de notificação.
Implementações:
- LoggingEventPublisher: Apenas loga (desenvolvimento)
- CeleryEventPublisher: Publica via Celery (produção)
- EventStorePublisher: Grava no Event Store (auditoria de SLA)
- InMemoryEventPublisher: Para testes
- CompositeEventPublisher: Vários destinos

Do ponto de vista do Core a entrega é fire-and-forget: falhas são
logadas e nunca desfazem a operação que gerou o evento.
"""

from typing import Callable, Dict, List, Optional
import json
import logging
import threading

from src.core.shared.events import DomainEvent
from src.core.shared.interfaces import EventPublisher, EventStore

logger = logging.getLogger(__name__)

EventHandler = Callable[[DomainEvent], None]


class _HandlersLocais:
    """Registro de handlers síncronos por nome de evento."""

    def __init__(self):
        self._handlers: Dict[str, List[EventHandler]] = {}

    def register_handler(self, event_type: str, handler: EventHandler) -> None:
        """Registra handler para tipo de evento (ex: "ticket.sla_violated")."""
        self._handlers.setdefault(event_type, []).append(handler)

    def _dispatch_to_handlers(self, event: DomainEvent) -> None:
        for handler in self._handlers.get(event.event_type, []):
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Erro em handler para {event.event_type}: {e}", exc_info=True)


class LoggingEventPublisher(_HandlersLocais, EventPublisher):
    """
    Publisher que apenas loga eventos.

    Usado em desenvolvimento para visualizar eventos
    sem necessidade de infraestrutura de mensageria.
    """

    def __init__(self, log_level: int = logging.INFO, include_data: bool = False):
        """
        Args:
            log_level: Nível de log para eventos
            include_data: Se deve logar também o payload
        """
        super().__init__()
        self._log_level = log_level
        self._include_data = include_data

    def publish(self, event: DomainEvent) -> None:
        mensagem = f"[EVENT] {event.event_type} | aggregate={event.aggregate_id}"
        if self._include_data:
            mensagem += f" | data={json.dumps(event.to_dict()['data'], default=str)}"

        logger.log(self._log_level, mensagem)
        self._dispatch_to_handlers(event)

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)


class CeleryEventPublisher(EventPublisher):
    """
    Publisher que envia eventos para o dispatcher Celery.

    Usado em produção para processamento assíncrono. Broker fora do ar
    vira log de erro; o fluxo principal segue.
    """

    def __init__(self, also_log: bool = True):
        self._also_log = also_log

    def publish(self, event: DomainEvent) -> None:
        if self._also_log:
            logger.info(
                f"[EVENT->CELERY] {event.event_type} | "
                f"aggregate={event.aggregate_id}"
            )

        try:
            from src.adapters.django_app.events.handlers import dispatch_domain_event
            dispatch_domain_event.delay(event.event_type, event.to_dict())
        except Exception as e:
            logger.error(f"Falha ao publicar evento no Celery: {e}", exc_info=True)

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)


class EventStorePublisher(EventPublisher):
    """
    Grava eventos publicados fora de um Unit of Work no Event Store.

    O SLA Monitor não grava nada no banco: é por aqui que
    ``ticket.sla_violated`` entra no histórico de auditoria
    ("este ticket já esteve atrasado?").
    """

    def __init__(self, event_store: EventStore):
        self._event_store = event_store
        self._lock = threading.Lock()

    def publish(self, event: DomainEvent) -> None:
        with self._lock:
            sequence = self._event_store.last_sequence(event.aggregate_id) + 1
            self._event_store.append(event=event, sequence=sequence)

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)


class InMemoryEventPublisher(_HandlersLocais, EventPublisher):
    """
    Publisher em memória para testes.

    Armazena eventos publicados para verificação em testes.
    """

    def __init__(self):
        super().__init__()
        self._published_events: List[DomainEvent] = []
        self._lock = threading.Lock()

    def publish(self, event: DomainEvent) -> None:
        with self._lock:
            self._published_events.append(event)
        self._dispatch_to_handlers(event)

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)

    @property
    def published_events(self) -> List[DomainEvent]:
        with self._lock:
            return list(self._published_events)

    def clear(self) -> None:
        with self._lock:
            self._published_events.clear()

    def get_events_by_type(self, event_type: str) -> List[DomainEvent]:
        """Filtra eventos pelo nome público (ex: "ticket.created")."""
        return [e for e in self.published_events if e.event_type == event_type]


class CompositeEventPublisher(EventPublisher):
    """
    Publisher que delega para múltiplos publishers.

    Falha em um destino não impede a entrega aos demais.
    """

    def __init__(self, publishers: Optional[List[EventPublisher]] = None):
        self._publishers = list(publishers or [])

    def add_publisher(self, publisher: EventPublisher) -> None:
        self._publishers.append(publisher)

    def publish(self, event: DomainEvent) -> None:
        for publisher in self._publishers:
            try:
                publisher.publish(event)
            except Exception as e:
                logger.error(
                    f"Erro ao publicar {event.event_type} em "
                    f"{publisher.__class__.__name__}: {e}",
                    exc_info=True,
                )

    def publish_batch(self, events: List[DomainEvent]) -> None:
        for event in events:
            self.publish(event)


def get_event_publisher(mode: str = "sync") -> EventPublisher:
    """
    Factory para obter publisher apropriado.

    Args:
        mode: "celery" para processamento assíncrono; qualquer outro
            valor usa o LoggingEventPublisher

    Returns:
        Publisher configurado
    """
    if (mode or "").lower() == "celery":
        return CeleryEventPublisher()
    return LoggingEventPublisher()
