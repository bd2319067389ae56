"""
Testes Unitários para Domain Events e portas compartilhadas.

Coverage:
- DomainEvent: nome público, aggregate_id normalizado, to_dict()
- FixedClock: UTC e avanço controlado
- EventStore.last_sequence(): padrão baseado em get_events_for_aggregate
- Papel / Ator
"""

from datetime import datetime, timedelta, timezone

import pytest

from src.core.shared.actors import Ator, Papel
from src.core.shared.exceptions import (
    InvalidAttendantError,
    NotClaimableError,
    ValidationError,
)
from src.core.shared.interfaces import EventStore, FixedClock, SystemClock
from src.core.tickets.events import (
    TicketCriadoEvent,
    TicketSlaVioladoEvent,
    TicketStatusAlteradoEvent,
)


class TestDomainEvent:
    """Testes para a serialização de eventos."""

    def test_event_type_usa_nome_publico(self):
        evento = TicketCriadoEvent(aggregate_id=1, solicitante_id=10)

        assert evento.event_type == "ticket.created"
        assert evento.aggregate_type == "Ticket"

    def test_aggregate_id_numerico_vira_texto(self):
        assert TicketCriadoEvent(aggregate_id=42).aggregate_id == "42"

    def test_aggregate_id_obrigatorio(self):
        with pytest.raises(ValueError):
            TicketCriadoEvent(aggregate_id="")

    def test_to_dict(self):
        evento = TicketStatusAlteradoEvent(
            aggregate_id=7,
            status_anterior="open",
            status_novo="in_progress",
            alterado_por_id=101,
            solicitante_id=10,
            atendente_id=101,
        )

        dados = evento.to_dict()

        assert dados["event_type"] == "ticket.status_changed"
        assert dados["aggregate_id"] == "7"
        assert dados["aggregate_type"] == "Ticket"
        assert dados["version"] == 1
        assert dados["occurred_at"] == evento.occurred_at.isoformat()
        assert dados["data"] == {
            "status_anterior": "open",
            "status_novo": "in_progress",
            "alterado_por_id": 101,
            "solicitante_id": 10,
            "atendente_id": 101,
            "motivo": None,
        }

    def test_datetime_serializado_em_iso(self):
        prazo = datetime(2024, 3, 4, 13, 0, tzinfo=timezone.utc)
        evento = TicketSlaVioladoEvent(aggregate_id=1, tipo="first_response", prazo=prazo)

        assert evento.to_dict()["data"]["prazo"] == "2024-03-04T13:00:00+00:00"

    def test_event_ids_unicos(self):
        assert TicketCriadoEvent(aggregate_id=1).event_id != TicketCriadoEvent(aggregate_id=1).event_id


class TestClock:
    def test_system_clock_em_utc(self):
        assert SystemClock().now().tzinfo == timezone.utc

    def test_fixed_clock_avanca(self, agora):
        clock = FixedClock(agora)

        assert clock.advance(hours=2) == agora + timedelta(hours=2)
        assert clock.now() == agora + timedelta(hours=2)

    def test_fixed_clock_naive_vira_utc(self):
        clock = FixedClock(datetime(2024, 1, 1, 8, 0))

        assert clock.now().tzinfo == timezone.utc

    def test_fixed_clock_set(self, agora):
        clock = FixedClock(agora)
        clock.set(agora + timedelta(days=1))

        assert clock.now() == agora + timedelta(days=1)


class _ListaEventStore(EventStore):
    def __init__(self):
        self.eventos = []

    def append(self, event, sequence=0):
        self.eventos.append({"aggregate_id": event.aggregate_id, "sequence": sequence})

    def get_events_for_aggregate(self, aggregate_id, since_sequence=0):
        return [
            e for e in self.eventos
            if e["aggregate_id"] == aggregate_id and e["sequence"] >= since_sequence
        ]


class TestEventStoreLastSequence:
    def test_sem_eventos(self):
        assert _ListaEventStore().last_sequence("1") == 0

    def test_ultima_sequencia(self):
        store = _ListaEventStore()
        store.append(TicketCriadoEvent(aggregate_id=1), sequence=1)
        store.append(TicketCriadoEvent(aggregate_id=1), sequence=2)
        store.append(TicketCriadoEvent(aggregate_id=2), sequence=1)

        assert store.last_sequence("1") == 2


class TestAtoresEExcecoes:
    @pytest.mark.parametrize("valor,papel", [
        ("attendant", Papel.ATENDENTE),
        ("ADMIN", Papel.ADMIN),
        ("usuario", Papel.USUARIO),
    ])
    def test_papel_from_string(self, valor, papel):
        assert Papel.from_string(valor) == papel

    def test_papel_invalido(self):
        with pytest.raises(ValueError):
            Papel.from_string("root")

    def test_ator(self):
        ator = Ator(id=1, papel=Papel.ADMIN)

        assert ator.e_admin and not ator.e_atendente and not ator.e_usuario

    def test_codigos_de_erro(self):
        assert ValidationError("x", field="assunto").code == "VALIDATION_ERROR_ASSUNTO"
        assert InvalidAttendantError("x", atendente_id=3).to_dict()["field"] == "atendente_id"
        assert NotClaimableError("x").to_dict()["rule"] == "ticket_ja_atribuido"
