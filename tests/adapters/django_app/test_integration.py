"""
Testes de Integração para Adapters Django.

Estratégia:
- Banco SQLite em memória (pytest-django)
- Cada teste roda dentro de uma transação revertida no final

Coverage:
- DjangoTicketRepository: criação, escrita condicional, consultas de SLA
- DjangoHistoricoRepository: append-only e cascata
- Repositórios de categorias, vínculos e regras
- DjangoEventStore + DjangoUnitOfWork: sequência por agregado, rollback
- EventStorePublisher: eventos publicados fora de UoW
"""

from datetime import timedelta

import pytest

from src.adapters.django_app.events.publishers import (
    EventStorePublisher,
    InMemoryEventPublisher,
)
from src.adapters.django_app.shared.unit_of_work import DjangoUnitOfWork
from src.core.categorias.entities import CategoriaAtribuicao, Operador, RegraAtribuicao
from src.core.shared.exceptions import ConcurrencyError
from src.core.tickets.entities import HistoricoTicket, TicketPriority, TicketStatus
from src.core.tickets.events import (
    TicketCriadoEvent,
    TicketSlaVioladoEvent,
    TicketStatusAlteradoEvent,
)


pytestmark = pytest.mark.django_db


class TestDjangoTicketRepository:
    """Testes para DjangoTicketRepository."""

    def test_save_novo_ticket(self, ticket_factory, ticket_repo, categoria, agora):
        ticket = ticket_factory(prioridade=TicketPriority.ALTA, dados_personalizados={"urgencia": "Alta"})

        assert ticket.id is not None
        assert ticket.versao == 1

        persistido = ticket_repo.get_by_id(ticket.id)
        assert persistido.assunto == "Monitor não liga"
        assert persistido.categoria_id == categoria.id
        assert persistido.status == TicketStatus.ABERTO
        assert persistido.prioridade == TicketPriority.ALTA
        assert persistido.dados_personalizados == {"urgencia": "Alta"}
        assert persistido.prazo_primeira_resposta == agora + timedelta(hours=4)
        assert persistido.prazo_resolucao == agora + timedelta(hours=24)

    def test_update_incrementa_versao(self, ticket_factory, ticket_repo, agora):
        ticket = ticket_factory()

        carregado = ticket_repo.get_by_id(ticket.id)
        carregado.assumir(atendente_id=101, agora=agora)
        ticket_repo.save(carregado)

        persistido = ticket_repo.get_by_id(ticket.id)
        assert persistido.versao == 2
        assert persistido.atendente_id == 101
        assert persistido.status == TicketStatus.EM_ATENDIMENTO

    def test_escrita_com_versao_antiga_falha(self, ticket_factory, ticket_repo, agora):
        """Dois leitores da mesma versão: só o primeiro grava."""
        ticket = ticket_factory()
        primeiro = ticket_repo.get_by_id(ticket.id)
        segundo = ticket_repo.get_by_id(ticket.id)

        primeiro.assumir(atendente_id=101, agora=agora)
        ticket_repo.save(primeiro)

        segundo.assumir(atendente_id=102, agora=agora)
        with pytest.raises(ConcurrencyError):
            ticket_repo.save(segundo)

        assert ticket_repo.get_by_id(ticket.id).atendente_id == 101

    def test_get_by_id_inexistente(self, ticket_repo):
        assert ticket_repo.get_by_id(999999) is None

    def test_delete_remove_historico(self, ticket_factory, ticket_repo, historico_repo, agora):
        ticket = ticket_factory()
        historico_repo.adicionar(HistoricoTicket(
            ticket_id=ticket.id, autor_id=10, mensagem="Ticket criado", criado_em=agora,
        ))

        ticket_repo.delete(ticket.id)

        assert ticket_repo.get_by_id(ticket.id) is None
        assert historico_repo.list_by_ticket(ticket.id) == []

    def test_list_by_status(self, ticket_factory, ticket_repo):
        aberto = ticket_factory()
        ticket_factory(TicketStatus.FECHADO, atendente_id=101)

        encontrados = ticket_repo.list_by_status([TicketStatus.ABERTO])

        assert [t.id for t in encontrados] == [aberto.id]
        assert ticket_repo.count() == 2


class TestConsultasSla:
    """Consultas usadas pelo SlaService."""

    def test_primeira_resposta_vencida(self, ticket_factory, ticket_repo, agora):
        aberto = ticket_factory()
        ticket_factory(TicketStatus.EM_ATENDIMENTO, atendente_id=101)

        vencidos = ticket_repo.list_primeira_resposta_vencida(agora + timedelta(hours=5))

        assert [t.id for t in vencidos] == [aberto.id]

    def test_prazo_exato_nao_venceu(self, ticket_factory, ticket_repo, agora):
        ticket_factory()

        assert ticket_repo.list_primeira_resposta_vencida(agora + timedelta(hours=4)) == []

    def test_resolucao_vencida_por_status(self, ticket_factory, ticket_repo, agora):
        em_atendimento = ticket_factory(TicketStatus.EM_ATENDIMENTO, atendente_id=101)
        aguardando = ticket_factory(TicketStatus.AGUARDANDO_USUARIO, atendente_id=101)
        ticket_factory(TicketStatus.AGUARDANDO_APROVACAO, atendente_id=101)
        ticket_factory(TicketStatus.RESOLVIDO, atendente_id=101)

        vencidos = ticket_repo.list_resolucao_vencida(agora + timedelta(hours=25))

        assert [t.id for t in vencidos] == [em_atendimento.id, aguardando.id]

    def test_a_vencer_dentro_da_janela(self, ticket_factory, ticket_repo, agora):
        ticket = ticket_factory()
        instante = agora + timedelta(hours=3, minutes=30)

        assert [t.id for t in ticket_repo.list_primeira_resposta_a_vencer(
            instante, instante + timedelta(hours=1)
        )] == [ticket.id]
        assert ticket_repo.list_primeira_resposta_a_vencer(
            agora, agora + timedelta(hours=1)
        ) == []

    def test_resolucao_a_vencer(self, ticket_factory, ticket_repo, agora):
        ticket = ticket_factory(TicketStatus.AGUARDANDO_TERCEIROS, atendente_id=101)
        instante = agora + timedelta(hours=23)

        encontrados = ticket_repo.list_resolucao_a_vencer(instante, instante + timedelta(hours=1))

        assert [t.id for t in encontrados] == [ticket.id]


class TestDjangoHistoricoRepository:
    def test_historico_em_ordem(self, ticket_factory, historico_repo, agora):
        ticket = ticket_factory()
        historico_repo.adicionar(HistoricoTicket(
            ticket_id=ticket.id, autor_id=10, mensagem="Ticket criado", criado_em=agora,
        ))
        historico_repo.adicionar(HistoricoTicket(
            ticket_id=ticket.id, autor_id=101, mensagem="Ticket assumido pelo técnico",
            criado_em=agora + timedelta(minutes=5), anexo="print.png",
        ))

        entradas = historico_repo.list_by_ticket(ticket.id)

        assert [e.mensagem for e in entradas] == ["Ticket criado", "Ticket assumido pelo técnico"]
        assert entradas[1].anexo == "print.png"
        assert entradas[0].id is not None


class TestRepositoriosDeCategorias:
    """Categorias, vínculos e regras no ORM."""

    def test_categoria_round_trip(self, categoria, categoria_repo):
        persistida = categoria_repo.get_by_id(categoria.id)

        assert persistida.nome == "Hardware"
        assert persistida.campo("urgencia").obrigatorio is True
        assert persistida.campo("urgencia").opcoes == ("Baixa", "Alta")
        assert categoria_repo.get_by_nome("Hardware").id == categoria.id

    def test_categoria_desativada(self, categoria, categoria_repo):
        categoria.desativar()
        categoria_repo.save(categoria)

        assert categoria_repo.list_all(apenas_ativas=True) == []
        assert len(categoria_repo.list_all()) == 1

    def test_vinculo_unico_por_atendente(self, categoria, atribuicao_repo):
        primeiro = atribuicao_repo.save(CategoriaAtribuicao(categoria_id=categoria.id, atendente_id=101))
        desativado = atribuicao_repo.save(CategoriaAtribuicao(
            categoria_id=categoria.id, atendente_id=101, ativa=False,
        ))

        assert desativado.id == primeiro.id
        assert atribuicao_repo.list_ativas(categoria.id) == []
        assert atribuicao_repo.get(categoria.id, 101).ativa is False

    def test_categorias_do_atendente(self, categoria, atribuicao_repo):
        atribuicao_repo.save(CategoriaAtribuicao(categoria_id=categoria.id, atendente_id=101))

        assert atribuicao_repo.list_categorias_do_atendente(101) == [categoria.id]
        assert atribuicao_repo.list_categorias_do_atendente(102) == []

    def test_regras_ordenadas(self, categoria, regra_repo):
        def regra(valor, prioridade):
            return regra_repo.save(RegraAtribuicao(
                categoria_id=categoria.id, campo="urgencia", operador=Operador.IGUAL,
                valor=valor, atendente_id=101, prioridade=prioridade,
            ))

        baixa = regra("Baixa", 5)
        alta = regra("Alta", 1)

        regras = regra_repo.list_by_categoria(categoria.id)

        assert [r.id for r in regras] == [alta.id, baixa.id]
        assert regras[0].operador == Operador.IGUAL

    def test_delete_by_atendente(self, categoria, regra_repo):
        for atendente_id in (101, 101, 102):
            regra_repo.save(RegraAtribuicao(
                categoria_id=categoria.id, campo="urgencia", valor="Alta", atendente_id=atendente_id,
            ))

        assert regra_repo.delete_by_atendente(categoria.id, 101) == 2
        assert [r.atendente_id for r in regra_repo.list_by_categoria(categoria.id)] == [102]


class TestDjangoUnitOfWork:
    """Testes para DjangoUnitOfWork + DjangoEventStore."""

    def test_commit_publica_e_grava_eventos(self, ticket_factory, event_store):
        ticket = ticket_factory()
        publisher = InMemoryEventPublisher()

        uow = DjangoUnitOfWork(event_publisher=publisher, event_store=event_store)
        with uow:
            uow.publish_event(TicketCriadoEvent(aggregate_id=ticket.id, solicitante_id=10))
            uow.publish_event(TicketStatusAlteradoEvent(
                aggregate_id=ticket.id, status_anterior="open", status_novo="in_progress",
            ))

        assert uow.is_committed
        assert [e.event_type for e in publisher.published_events] == [
            "ticket.created", "ticket.status_changed",
        ]

        gravados = event_store.get_events_for_aggregate(str(ticket.id))
        assert [(e["event_type"], e["sequence"]) for e in gravados] == [
            ("ticket.created", 1),
            ("ticket.status_changed", 2),
        ]
        assert gravados[1]["event_data"]["status_novo"] == "in_progress"

    def test_sequencia_continua_entre_transacoes(self, ticket_factory, event_store):
        ticket = ticket_factory()

        for _ in range(2):
            with DjangoUnitOfWork(event_store=event_store) as uow:
                uow.publish_event(TicketCriadoEvent(aggregate_id=ticket.id))

        assert event_store.last_sequence(str(ticket.id)) == 2

    def test_rollback_descarta_escrita_e_eventos(self, ticket_repo, categoria, event_store, agora):
        from src.core.tickets.entities import TicketEntity

        publisher = InMemoryEventPublisher()
        uow = DjangoUnitOfWork(event_publisher=publisher, event_store=event_store)

        with pytest.raises(RuntimeError):
            with uow:
                ticket = ticket_repo.save(TicketEntity.criar(
                    solicitante_id=10,
                    categoria_id=categoria.id,
                    assunto="Teclado quebrado",
                    descricao="Teclas soltas",
                    prazo_primeira_resposta=agora + timedelta(hours=4),
                    prazo_resolucao=agora + timedelta(hours=24),
                    agora=agora,
                ))
                uow.publish_event(TicketCriadoEvent(aggregate_id=ticket.id))
                raise RuntimeError("falha no meio da operação")

        assert uow.is_rolled_back
        assert ticket_repo.count() == 0
        assert publisher.published_events == []
        assert event_store.get_events_for_aggregate(str(ticket.id)) == []

    def test_falha_de_publicacao_nao_desfaz_commit(self, ticket_factory, event_store):
        class PublisherQuebrado(InMemoryEventPublisher):
            def publish(self, event):
                raise ConnectionError("broker fora do ar")

        ticket = ticket_factory()

        with DjangoUnitOfWork(event_publisher=PublisherQuebrado(), event_store=event_store) as uow:
            uow.publish_event(TicketCriadoEvent(aggregate_id=ticket.id))

        assert uow.is_committed
        assert event_store.last_sequence(str(ticket.id)) == 1


class TestEventStorePublisher:
    """Violações de SLA entram no histórico de auditoria."""

    def test_grava_violacao_com_sequencia(self, ticket_factory, event_store, agora):
        ticket = ticket_factory()
        with DjangoUnitOfWork(event_store=event_store) as uow:
            uow.publish_event(TicketCriadoEvent(aggregate_id=ticket.id))

        EventStorePublisher(event_store).publish(TicketSlaVioladoEvent(
            aggregate_id=ticket.id,
            tipo="first_response",
            prazo=ticket.prazo_primeira_resposta,
            horas_atraso=1.0,
        ))

        gravados = event_store.get_events_for_aggregate(str(ticket.id))
        assert [(e["event_type"], e["sequence"]) for e in gravados] == [
            ("ticket.created", 1),
            ("ticket.sla_violated", 2),
        ]
        assert gravados[1]["event_data"]["prazo"] == (agora + timedelta(hours=4)).isoformat()

    def test_since_sequence(self, ticket_factory, event_store):
        ticket = ticket_factory()
        publisher = EventStorePublisher(event_store)
        publisher.publish_batch([TicketCriadoEvent(aggregate_id=ticket.id) for _ in range(3)])

        assert [e["sequence"] for e in event_store.get_events_for_aggregate(str(ticket.id), 2)] == [2, 3]
