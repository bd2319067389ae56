"""
Interfaces (Ports) - Contratos entre Core e Adapters.

Este módulo define as interfaces que os Adapters devem implementar.
São os "Ports" da Arquitetura Hexagonal.

Tipos de Ports:
- Driven Ports: UnitOfWork, EventPublisher, EventStore, Clock
- Driving Ports: definidos nos Use Cases de cada domínio

Princípio: Core define interfaces; Adapters implementam.
O fluxo de dependência sempre aponta para o Core.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from typing import List
import threading

from .events import DomainEvent


class UnitOfWork(ABC):
    """
    Unit of Work - Coordena transações atômicas.

    Garante que a leitura do ticket, a checagem de guarda, a escrita
    condicional e a linha de histórico sejam persistidas juntas: ou
    tudo é persistido ou nada é.

    Pattern: Context Manager
        with uow:
            repo.save(ticket)
            historico_repo.adicionar(entrada)
            uow.publish_event(event)
        # Commit automático ao sair sem erro
        # Rollback automático se exceção

    Eventos enfileirados só são publicados após commit bem-sucedido.
    Em rollback, são descartados.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []

    def __enter__(self) -> "UnitOfWork":
        self._begin_transaction()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is not None:
            self.rollback()
        else:
            self.commit()
        return False  # Não suprime exceções

    @abstractmethod
    def _begin_transaction(self) -> None:
        """Inicia uma nova transação."""
        raise NotImplementedError

    @abstractmethod
    def commit(self) -> None:
        """
        Persiste todas as mudanças e publica eventos.

        Ordem de execução:
        1. Commit da transação no banco
        2. Publicação de eventos enfileirados
        3. Limpeza de estado interno
        """
        raise NotImplementedError

    @abstractmethod
    def rollback(self) -> None:
        """Desfaz todas as mudanças e descarta eventos."""
        raise NotImplementedError

    def publish_event(self, event: DomainEvent) -> None:
        """
        Enfileira evento para publicação após commit.

        Args:
            event: Evento de domínio a ser publicado
        """
        self._events.append(event)

    def collect_events(self) -> List[DomainEvent]:
        """Retorna eventos enfileirados (para testing/debugging)."""
        return list(self._events)

    def clear_events(self) -> None:
        """Limpa fila de eventos."""
        self._events.clear()


class EventPublisher(ABC):
    """
    Interface para publicação de eventos (sink externo).

    Do ponto de vista do Core a entrega é fire-and-forget: quem chama
    ``publish`` nunca depende do sucesso da notificação.
    """

    @abstractmethod
    def publish(self, event: DomainEvent) -> None:
        """Publica evento para consumidores."""
        raise NotImplementedError

    @abstractmethod
    def publish_batch(self, events: List[DomainEvent]) -> None:
        """Publica múltiplos eventos em batch."""
        raise NotImplementedError


class EventStore(ABC):
    """
    Interface para persistência de eventos.

    Guarda o histórico append-only de eventos (inclusive violações de
    SLA), respondendo à pergunta "este ticket já esteve atrasado?".
    """

    @abstractmethod
    def append(self, event: DomainEvent, sequence: int = 0) -> None:
        """
        Adiciona evento ao store.

        Args:
            event: Evento a ser persistido
            sequence: Sequência do evento dentro do agregado
        """
        raise NotImplementedError

    @abstractmethod
    def get_events_for_aggregate(self, aggregate_id: str, since_sequence: int = 0) -> List[dict]:
        """Recupera eventos de um agregado, ordenados por sequência."""
        raise NotImplementedError

    def last_sequence(self, aggregate_id: str) -> int:
        """Última sequência gravada para o agregado (0 se nenhuma)."""
        eventos = self.get_events_for_aggregate(aggregate_id)
        return eventos[-1]["sequence"] if eventos else 0


class Clock(ABC):
    """
    Provedor de "agora".

    Toda comparação de prazo passa por aqui, nunca pelo relógio do
    sistema diretamente. Sempre retorna datetime com timezone UTC.
    """

    @abstractmethod
    def now(self) -> datetime:
        raise NotImplementedError


class SystemClock(Clock):
    """Relógio real (UTC)."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class FixedClock(Clock):
    """
    Relógio controlável para testes.

    Example:
        clock = FixedClock(datetime(2024, 1, 1, 9, tzinfo=timezone.utc))
        clock.advance(hours=5)
    """

    def __init__(self, instante: datetime):
        self._lock = threading.Lock()
        self._instante = _garantir_utc(instante)

    def now(self) -> datetime:
        with self._lock:
            return self._instante

    def set(self, instante: datetime) -> None:
        with self._lock:
            self._instante = _garantir_utc(instante)

    def advance(self, **kwargs) -> datetime:
        """Avança o relógio (kwargs de ``timedelta``) e retorna o novo instante."""
        with self._lock:
            self._instante = self._instante + timedelta(**kwargs)
            return self._instante


def _garantir_utc(instante: datetime) -> datetime:
    if instante.tzinfo is None:
        return instante.replace(tzinfo=timezone.utc)
    return instante.astimezone(timezone.utc)


# Type alias para facilitar tipagem
UoW = UnitOfWork
