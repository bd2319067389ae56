"""
Testes para os Event Publishers.
"""

import logging
from unittest.mock import MagicMock, patch

from src.adapters.django_app.events.publishers import (
    CeleryEventPublisher,
    CompositeEventPublisher,
    InMemoryEventPublisher,
    LoggingEventPublisher,
    get_event_publisher,
)
from src.core.tickets.events import TicketCriadoEvent, TicketSlaVioladoEvent


class _Quebrado(InMemoryEventPublisher):
    def publish(self, event):
        raise ConnectionError("destino indisponível")


class TestInMemoryEventPublisher:
    def test_guarda_e_filtra_por_tipo(self):
        publisher = InMemoryEventPublisher()
        publisher.publish_batch([
            TicketCriadoEvent(aggregate_id=1),
            TicketSlaVioladoEvent(aggregate_id=1, tipo="first_response"),
        ])

        assert len(publisher.published_events) == 2
        assert [e.aggregate_id for e in publisher.get_events_by_type("ticket.sla_violated")] == ["1"]

        publisher.clear()
        assert publisher.published_events == []

    def test_erro_em_handler_nao_propaga(self):
        publisher = InMemoryEventPublisher()
        recebidos = []
        publisher.register_handler("ticket.created", MagicMock(side_effect=ValueError("boom")))
        publisher.register_handler("ticket.created", recebidos.append)

        publisher.publish(TicketCriadoEvent(aggregate_id=1))

        assert len(recebidos) == 1


class TestLoggingEventPublisher:
    def test_loga_evento(self, caplog):
        publisher = LoggingEventPublisher(include_data=True)

        with caplog.at_level(logging.INFO, logger="src.adapters.django_app.events.publishers"):
            publisher.publish(TicketCriadoEvent(aggregate_id=7, assunto="VPN"))

        assert "[EVENT] ticket.created | aggregate=7" in caplog.text
        assert '"assunto": "VPN"' in caplog.text


class TestCeleryEventPublisher:
    def test_envia_para_dispatcher(self):
        evento = TicketCriadoEvent(aggregate_id=3)

        with patch("src.adapters.django_app.events.handlers.dispatch_domain_event") as dispatch:
            CeleryEventPublisher(also_log=False).publish(evento)

        dispatch.delay.assert_called_once_with("ticket.created", evento.to_dict())

    def test_broker_fora_do_ar_nao_propaga(self):
        with patch("src.adapters.django_app.events.handlers.dispatch_domain_event") as dispatch:
            dispatch.delay.side_effect = ConnectionError("broker fora do ar")

            CeleryEventPublisher().publish(TicketCriadoEvent(aggregate_id=3))

        dispatch.delay.assert_called_once()


class TestCompositeEventPublisher:
    def test_falha_em_um_destino_nao_impede_os_demais(self):
        entregue = InMemoryEventPublisher()
        composite = CompositeEventPublisher([_Quebrado(), entregue])

        composite.publish(TicketCriadoEvent(aggregate_id=1))

        assert len(entregue.published_events) == 1

    def test_add_publisher(self):
        composite = CompositeEventPublisher()
        destino = InMemoryEventPublisher()
        composite.add_publisher(destino)

        composite.publish_batch([TicketCriadoEvent(aggregate_id=1), TicketCriadoEvent(aggregate_id=2)])

        assert [e.aggregate_id for e in destino.published_events] == ["1", "2"]


class TestGetEventPublisher:
    def test_modo_celery(self):
        assert isinstance(get_event_publisher("celery"), CeleryEventPublisher)

    def test_modo_padrao(self):
        assert isinstance(get_event_publisher("sync"), LoggingEventPublisher)
        assert isinstance(get_event_publisher(None), LoggingEventPublisher)
