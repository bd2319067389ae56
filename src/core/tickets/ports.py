"""
Ports (Interfaces) do Domínio de Tickets.

Define os contratos que os Adapters de infraestrutura devem implementar
para persistência de tickets e do histórico.

Concorrência:
    ``TicketRepository.save`` de ticket existente é uma escrita
    condicional (``WHERE id = ? AND versao = ?``). Se nenhuma linha for
    afetada, lança ConcurrencyError: outro ator alterou o ticket entre a
    leitura e a escrita. É isso que garante um único vencedor quando
    vários atendentes assumem o mesmo ticket ao mesmo tempo.

Example:
    class DjangoTicketRepository:
        def save(self, ticket: TicketEntity) -> TicketEntity:
            ...
"""

from copy import deepcopy
from dataclasses import replace
from datetime import datetime
from typing import Dict, Iterable, List, Optional, Protocol, runtime_checkable
import itertools
import threading

from src.core.shared.exceptions import ConcurrencyError

from .entities import (
    HistoricoTicket,
    STATUS_PRAZO_RESOLUCAO,
    TicketEntity,
    TicketStatus,
)


@runtime_checkable
class TicketRepository(Protocol):
    """
    Interface para persistência de Tickets.

    Implementações:
    - DjangoTicketRepository (ORM)
    - InMemoryTicketRepository (testes)

    Consultas de SLA recebem ``agora`` explicitamente; o repositório
    nunca lê o relógio.
    """

    def save(self, ticket: TicketEntity) -> TicketEntity:
        """
        Persiste ticket.

        Sem id: insere, atribui id e ``versao = 1``.
        Com id: escrita condicional pela versão; sucesso incrementa ``versao``.

        Raises:
            ConcurrencyError: Versão mudou desde a leitura (ou ticket sumiu)
        """
        ...

    def get_by_id(self, ticket_id: int) -> Optional[TicketEntity]:
        ...

    def delete(self, ticket_id: int) -> None:
        """Remove ticket (histórico em cascata)."""
        ...

    def list_all(self) -> List[TicketEntity]:
        ...

    def list_by_status(self, statuses: Iterable[TicketStatus]) -> List[TicketEntity]:
        ...

    def list_primeira_resposta_vencida(self, agora: datetime) -> List[TicketEntity]:
        """Status ABERTO e ``prazo_primeira_resposta < agora``."""
        ...

    def list_resolucao_vencida(self, agora: datetime) -> List[TicketEntity]:
        """Status em STATUS_PRAZO_RESOLUCAO e ``prazo_resolucao < agora``."""
        ...

    def list_primeira_resposta_a_vencer(self, agora: datetime, limite: datetime) -> List[TicketEntity]:
        """Status ABERTO e ``agora < prazo_primeira_resposta <= limite``."""
        ...

    def list_resolucao_a_vencer(self, agora: datetime, limite: datetime) -> List[TicketEntity]:
        """Status em STATUS_PRAZO_RESOLUCAO e ``agora < prazo_resolucao <= limite``."""
        ...


@runtime_checkable
class HistoricoRepository(Protocol):
    """Interface append-only para o histórico de tickets."""

    def adicionar(self, entrada: HistoricoTicket) -> HistoricoTicket:
        """Grava entrada e retorna com id atribuído."""
        ...

    def list_by_ticket(self, ticket_id: int) -> List[HistoricoTicket]:
        """Entradas do ticket em ordem cronológica."""
        ...

    def delete_by_ticket(self, ticket_id: int) -> int:
        ...


class InMemoryTicketRepository:
    """
    Implementação em memória do TicketRepository.

    Útil para testes unitários e para o TestingContainer. Guarda cópias
    e faz a escrita condicional sob lock, reproduzindo a semântica de
    ``UPDATE ... WHERE versao = ?``.

    Example:
        repo = InMemoryTicketRepository()
        repo.save(ticket)
        found = repo.get_by_id(ticket.id)
    """

    def __init__(self):
        self._tickets: Dict[int, TicketEntity] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def save(self, ticket: TicketEntity) -> TicketEntity:
        with self._lock:
            if ticket.id is None:
                ticket.id = next(self._ids)
                ticket.versao = 1
                self._tickets[ticket.id] = deepcopy(ticket)
                return ticket

            atual = self._tickets.get(ticket.id)
            if atual is None or atual.versao != ticket.versao:
                raise ConcurrencyError(
                    f"Ticket {ticket.id} foi modificado por outro processo"
                )
            ticket.versao += 1
            self._tickets[ticket.id] = deepcopy(ticket)
            return ticket

    def get_by_id(self, ticket_id: int) -> Optional[TicketEntity]:
        with self._lock:
            ticket = self._tickets.get(ticket_id)
            return deepcopy(ticket) if ticket else None

    def delete(self, ticket_id: int) -> None:
        with self._lock:
            self._tickets.pop(ticket_id, None)

    def list_all(self) -> List[TicketEntity]:
        return self._filtrar(lambda t: True)

    def list_by_status(self, statuses: Iterable[TicketStatus]) -> List[TicketEntity]:
        statuses = set(statuses)
        return self._filtrar(lambda t: t.status in statuses)

    def list_primeira_resposta_vencida(self, agora: datetime) -> List[TicketEntity]:
        return self._filtrar(
            lambda t: t.status == TicketStatus.ABERTO
            and t.prazo_primeira_resposta is not None
            and t.prazo_primeira_resposta < agora
        )

    def list_resolucao_vencida(self, agora: datetime) -> List[TicketEntity]:
        return self._filtrar(
            lambda t: t.status in STATUS_PRAZO_RESOLUCAO
            and t.prazo_resolucao is not None
            and t.prazo_resolucao < agora
        )

    def list_primeira_resposta_a_vencer(self, agora: datetime, limite: datetime) -> List[TicketEntity]:
        return self._filtrar(
            lambda t: t.status == TicketStatus.ABERTO
            and t.prazo_primeira_resposta is not None
            and agora < t.prazo_primeira_resposta <= limite
        )

    def list_resolucao_a_vencer(self, agora: datetime, limite: datetime) -> List[TicketEntity]:
        return self._filtrar(
            lambda t: t.status in STATUS_PRAZO_RESOLUCAO
            and t.prazo_resolucao is not None
            and agora < t.prazo_resolucao <= limite
        )

    def count(self) -> int:
        with self._lock:
            return len(self._tickets)

    def clear(self) -> None:
        """Limpa todos os dados (útil para testes)."""
        with self._lock:
            self._tickets.clear()

    def _filtrar(self, predicado) -> List[TicketEntity]:
        with self._lock:
            return [
                deepcopy(t)
                for t in sorted(self._tickets.values(), key=lambda t: t.id)
                if predicado(t)
            ]


class InMemoryHistoricoRepository:
    """Implementação em memória do histórico."""

    def __init__(self):
        self._entradas: List[HistoricoTicket] = []
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def adicionar(self, entrada: HistoricoTicket) -> HistoricoTicket:
        with self._lock:
            gravada = replace(entrada, id=next(self._ids))
            self._entradas.append(gravada)
            return gravada

    def list_by_ticket(self, ticket_id: int) -> List[HistoricoTicket]:
        with self._lock:
            return sorted(
                (e for e in self._entradas if e.ticket_id == ticket_id),
                key=lambda e: (e.criado_em, e.id),
            )

    def delete_by_ticket(self, ticket_id: int) -> int:
        with self._lock:
            antes = len(self._entradas)
            self._entradas = [e for e in self._entradas if e.ticket_id != ticket_id]
            return antes - len(self._entradas)
