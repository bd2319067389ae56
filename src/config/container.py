"""
Dependency Injection Container.

Configura e gerencia todas as dependências da aplicação.
Usa dependency-injector para lazy-loading e injeção explícita.

Padrões:
- Singleton: Uma instância para toda app (repositories, publisher, monitor)
- Factory: Nova instância por chamada (services, UoW)
- Configuration: valores vindos do settings do Django

Adapters Django são importados sob demanda: o container pode ser
montado (e usado nos testes) sem ``django.setup()``.
"""

from datetime import timedelta
from importlib import import_module
from typing import Optional

from dependency_injector import containers, providers

from src.adapters.django_app.events.publishers import (
    CompositeEventPublisher,
    EventStorePublisher,
    InMemoryEventPublisher,
    get_event_publisher,
)
from src.core.categorias.assignment import MotorAtribuicao
from src.core.categorias.ports import (
    InMemoryCategoriaAtribuicaoRepository,
    InMemoryCategoriaRepository,
    InMemoryRegraAtribuicaoRepository,
)
from src.core.categorias import use_cases as categorias
from src.core.shared.interfaces import Clock, SystemClock
from src.core.sla.monitor import SlaMonitor
from src.core.sla.services import SlaService
from src.core.tickets import use_cases as tickets
from src.core.tickets.policies import PoliticaAcessoTicket
from src.core.tickets.ports import InMemoryHistoricoRepository, InMemoryTicketRepository


def _django(caminho: str, classe: str):
    """Construtor preguiçoso de um adapter em ``src.adapters.django_app``."""

    def criar(*args, **kwargs):
        modulo = import_module(f"src.adapters.django_app.{caminho}")
        return getattr(modulo, classe)(*args, **kwargs)

    criar.__name__ = classe
    return criar


class Container(containers.DeclarativeContainer):
    """
    Container principal de Dependency Injection.

    Organização:
    - Configuration: Settings de SLA/atribuição
    - Infrastructure: Relógio, publisher, event store
    - Repositories: Persistência
    - Unit of Work: Transações
    - Domain services: Motor de atribuição, política de acesso, SLA
    - Services: Use Cases

    Example:
        container = get_container()
        service = container.criar_ticket_service()
        output = service.execute(input_dto)
    """

    # =========================================================================
    # Configuration
    # =========================================================================

    config = providers.Configuration(default={
        'event_publisher_mode': 'sync',
        'sla_check_interval_seconds': 300,
        'sla_warning_interval_seconds': 900,
        'sla_warning_lead_minutes': 60,
        'reopen_days': 7,
        'catch_all_category_name': 'Outros',
    })

    # =========================================================================
    # Infrastructure
    # =========================================================================

    clock = providers.Singleton(SystemClock)

    event_store = providers.Singleton(_django('tickets.repositories', 'DjangoEventStore'))

    event_publisher = providers.Singleton(
        get_event_publisher,
        mode=config.event_publisher_mode,
    )

    # Monitor publica fora de UoW: grava no Event Store e entrega ao publisher
    sla_event_publisher = providers.Singleton(
        CompositeEventPublisher,
        publishers=providers.List(
            providers.Singleton(EventStorePublisher, event_store=event_store),
            event_publisher,
        ),
    )

    # =========================================================================
    # Repositories (Singleton - uma instância por app)
    # =========================================================================

    ticket_repository = providers.Singleton(
        _django('tickets.repositories', 'DjangoTicketRepository')
    )
    historico_repository = providers.Singleton(
        _django('tickets.repositories', 'DjangoHistoricoRepository')
    )
    categoria_repository = providers.Singleton(
        _django('categorias.repositories', 'DjangoCategoriaRepository')
    )
    categoria_atribuicao_repository = providers.Singleton(
        _django('categorias.repositories', 'DjangoCategoriaAtribuicaoRepository')
    )
    regra_atribuicao_repository = providers.Singleton(
        _django('categorias.repositories', 'DjangoRegraAtribuicaoRepository')
    )

    # =========================================================================
    # Unit of Work (Factory - nova instância por operação)
    # =========================================================================

    unit_of_work = providers.Factory(
        _django('shared.unit_of_work', 'DjangoUnitOfWork'),
        event_publisher=event_publisher,
        event_store=event_store,
    )

    # =========================================================================
    # Domain services
    # =========================================================================

    motor_atribuicao = providers.Factory(
        MotorAtribuicao,
        categoria_repo=categoria_repository,
        atribuicao_repo=categoria_atribuicao_repository,
        regra_repo=regra_atribuicao_repository,
        nome_categoria_geral=config.catch_all_category_name,
    )

    politica_acesso = providers.Factory(PoliticaAcessoTicket, motor=motor_atribuicao)

    sla_service = providers.Factory(
        SlaService,
        ticket_repo=ticket_repository,
        clock=clock,
        antecedencia=providers.Factory(timedelta, minutes=config.sla_warning_lead_minutes),
    )

    sla_monitor = providers.Singleton(
        SlaMonitor,
        sla_service=sla_service,
        event_publisher=sla_event_publisher,
        intervalo_violacoes=config.sla_check_interval_seconds,
        intervalo_avisos=config.sla_warning_interval_seconds,
    )

    # =========================================================================
    # Services / Use Cases - Tickets
    # =========================================================================

    criar_ticket_service = providers.Factory(
        tickets.CriarTicketService,
        ticket_repo=ticket_repository,
        historico_repo=historico_repository,
        categoria_repo=categoria_repository,
        motor=motor_atribuicao,
        uow=unit_of_work,
        clock=clock,
    )

    assumir_ticket_service = providers.Factory(
        tickets.AssumirTicketService,
        ticket_repo=ticket_repository,
        historico_repo=historico_repository,
        politica=politica_acesso,
        uow=unit_of_work,
        clock=clock,
    )

    atualizar_ticket_service = providers.Factory(
        tickets.AtualizarTicketService,
        ticket_repo=ticket_repository,
        historico_repo=historico_repository,
        politica=politica_acesso,
        uow=unit_of_work,
        clock=clock,
    )

    solicitar_aprovacao_service = providers.Factory(
        tickets.SolicitarAprovacaoService,
        ticket_repo=ticket_repository,
        historico_repo=historico_repository,
        uow=unit_of_work,
        clock=clock,
    )

    aprovar_ticket_service = providers.Factory(
        tickets.AprovarTicketService,
        ticket_repo=ticket_repository,
        historico_repo=historico_repository,
        uow=unit_of_work,
        clock=clock,
    )

    rejeitar_ticket_service = providers.Factory(
        tickets.RejeitarTicketService,
        ticket_repo=ticket_repository,
        historico_repo=historico_repository,
        uow=unit_of_work,
        clock=clock,
    )

    fechar_ticket_service = providers.Factory(
        tickets.FecharTicketService,
        ticket_repo=ticket_repository,
        historico_repo=historico_repository,
        politica=politica_acesso,
        uow=unit_of_work,
        clock=clock,
    )

    reabrir_ticket_service = providers.Factory(
        tickets.ReabrirTicketService,
        ticket_repo=ticket_repository,
        historico_repo=historico_repository,
        categoria_repo=categoria_repository,
        politica=politica_acesso,
        uow=unit_of_work,
        clock=clock,
        dias_reabertura_padrao=config.reopen_days,
    )

    excluir_ticket_service = providers.Factory(
        tickets.ExcluirTicketService,
        ticket_repo=ticket_repository,
        historico_repo=historico_repository,
        uow=unit_of_work,
    )

    adicionar_mensagem_service = providers.Factory(
        tickets.AdicionarMensagemService,
        ticket_repo=ticket_repository,
        historico_repo=historico_repository,
        politica=politica_acesso,
        uow=unit_of_work,
        clock=clock,
    )

    # Leitura (sem UoW)
    listar_historico_service = providers.Factory(
        tickets.ListarHistoricoService,
        ticket_repo=ticket_repository,
        historico_repo=historico_repository,
        politica=politica_acesso,
    )

    obter_ticket_service = providers.Factory(
        tickets.ObterTicketService,
        ticket_repo=ticket_repository,
        politica=politica_acesso,
        sla_service=sla_service,
    )

    listar_tickets_service = providers.Factory(
        tickets.ListarTicketsService,
        ticket_repo=ticket_repository,
        politica=politica_acesso,
    )

    # =========================================================================
    # Services / Use Cases - Categorias
    # =========================================================================

    criar_categoria_service = providers.Factory(
        categorias.CriarCategoriaService,
        categoria_repo=categoria_repository,
        uow=unit_of_work,
    )

    alterar_sla_categoria_service = providers.Factory(
        categorias.AlterarSlaCategoriaService,
        categoria_repo=categoria_repository,
        uow=unit_of_work,
    )

    desativar_categoria_service = providers.Factory(
        categorias.DesativarCategoriaService,
        categoria_repo=categoria_repository,
        uow=unit_of_work,
    )

    atribuir_atendente_service = providers.Factory(
        categorias.AtribuirAtendenteService,
        categoria_repo=categoria_repository,
        atribuicao_repo=categoria_atribuicao_repository,
        uow=unit_of_work,
    )

    remover_atendente_service = providers.Factory(
        categorias.RemoverAtendenteService,
        atribuicao_repo=categoria_atribuicao_repository,
        regra_repo=regra_atribuicao_repository,
        uow=unit_of_work,
    )

    criar_regra_service = providers.Factory(
        categorias.CriarRegraAtribuicaoService,
        categoria_repo=categoria_repository,
        atribuicao_repo=categoria_atribuicao_repository,
        regra_repo=regra_atribuicao_repository,
        uow=unit_of_work,
    )

    excluir_regra_service = providers.Factory(
        categorias.ExcluirRegraAtribuicaoService,
        regra_repo=regra_atribuicao_repository,
        uow=unit_of_work,
    )

    listar_regras_service = providers.Factory(
        categorias.ListarRegrasAtribuicaoService,
        regra_repo=regra_atribuicao_repository,
    )


def _config_from_settings() -> dict:
    from django.conf import settings

    return {
        'event_publisher_mode': settings.EVENT_PUBLISHER_MODE,
        'sla_check_interval_seconds': settings.SLA_CHECK_INTERVAL_SECONDS,
        'sla_warning_interval_seconds': settings.SLA_WARNING_INTERVAL_SECONDS,
        'sla_warning_lead_minutes': settings.SLA_WARNING_LEAD_MINUTES,
        'reopen_days': settings.REOPEN_DAYS,
        'catch_all_category_name': settings.CATCH_ALL_CATEGORY_NAME,
    }


# =============================================================================
# Container Global (Singleton)
# =============================================================================

_container: Optional[Container] = None


def get_container() -> Container:
    """
    Retorna instância global do container.

    Cria se não existir, lendo a configuração do settings do Django.
    """
    global _container

    if _container is None:
        _container = Container()
        _container.config.from_dict(_config_from_settings())

    return _container


def reset_container() -> None:
    """Reset do container (para testes)."""
    global _container
    _container = None


# =============================================================================
# Testing Container
# =============================================================================

def criar_container_testes(clock: Optional[Clock] = None, **config) -> Container:
    """
    Container com implementações InMemory para testes rápidos.

    Sobrescreve infraestrutura e repositórios; use cases e serviços de
    domínio continuam os mesmos da produção.

    Example:
        container = criar_container_testes(clock=FixedClock(agora))
        container.criar_ticket_service().execute(input_dto)
        container.event_publisher().published_events
    """
    container = Container()
    if config:
        container.config.from_dict(config)

    container.clock.override(providers.Object(clock or SystemClock()))
    container.event_publisher.override(providers.Singleton(InMemoryEventPublisher))
    container.sla_event_publisher.override(container.event_publisher)

    container.ticket_repository.override(providers.Singleton(InMemoryTicketRepository))
    container.historico_repository.override(providers.Singleton(InMemoryHistoricoRepository))
    container.categoria_repository.override(providers.Singleton(InMemoryCategoriaRepository))
    container.categoria_atribuicao_repository.override(
        providers.Singleton(InMemoryCategoriaAtribuicaoRepository)
    )
    container.regra_atribuicao_repository.override(
        providers.Singleton(InMemoryRegraAtribuicaoRepository)
    )

    container.unit_of_work.override(
        providers.Factory(
            _django('shared.unit_of_work', 'InMemoryUnitOfWork'),
            event_publisher=container.event_publisher,
        )
    )
    return container
