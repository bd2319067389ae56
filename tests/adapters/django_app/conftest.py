"""
Configuração pytest para testes com Django.

Este arquivo configura:
- Django settings para testes (SQLite em memória, cache local)
- Fixtures de repositórios Django e dados de exemplo

O banco de teste é criado pelo pytest-django aplicando as migrations
dos apps ``categorias`` e ``tickets``.
"""

from datetime import timedelta

import pytest


def pytest_configure(config):
    """Configura Django antes dos testes."""
    import django
    from django.conf import settings

    if not settings.configured:
        settings.configure(
            DEBUG=True,
            DATABASES={
                'default': {
                    'ENGINE': 'django.db.backends.sqlite3',
                    'NAME': ':memory:',
                }
            },
            INSTALLED_APPS=[
                'django.contrib.contenttypes',
                'src.adapters.django_app.categorias',
                'src.adapters.django_app.tickets',
            ],
            CACHES={
                'default': {
                    'BACKEND': 'django.core.cache.backends.locmem.LocMemCache',
                }
            },
            DEFAULT_AUTO_FIELD='django.db.models.BigAutoField',
            USE_TZ=True,
            TIME_ZONE='UTC',
            SLA_CHECK_INTERVAL_SECONDS=300,
            SLA_WARNING_INTERVAL_SECONDS=900,
            SLA_WARNING_LEAD_MINUTES=60,
            SLA_MONITOR_LOCK_TIMEOUT=600,
            REOPEN_DAYS=7,
            CATCH_ALL_CATEGORY_NAME='Outros',
            EVENT_PUBLISHER_MODE='sync',
        )
        django.setup()


@pytest.fixture
def ticket_repo():
    from src.adapters.django_app.tickets.repositories import DjangoTicketRepository
    return DjangoTicketRepository()


@pytest.fixture
def historico_repo():
    from src.adapters.django_app.tickets.repositories import DjangoHistoricoRepository
    return DjangoHistoricoRepository()


@pytest.fixture
def event_store():
    from src.adapters.django_app.tickets.repositories import DjangoEventStore
    return DjangoEventStore()


@pytest.fixture
def categoria_repo():
    from src.adapters.django_app.categorias.repositories import DjangoCategoriaRepository
    return DjangoCategoriaRepository()


@pytest.fixture
def atribuicao_repo():
    from src.adapters.django_app.categorias.repositories import DjangoCategoriaAtribuicaoRepository
    return DjangoCategoriaAtribuicaoRepository()


@pytest.fixture
def regra_repo():
    from src.adapters.django_app.categorias.repositories import DjangoRegraAtribuicaoRepository
    return DjangoRegraAtribuicaoRepository()


@pytest.fixture
def categoria(categoria_repo):
    """Categoria "Hardware" persistida (4h / 24h, campo select obrigatório)."""
    from src.core.categorias.entities import CampoPersonalizado, Categoria

    return categoria_repo.save(Categoria.criar(
        nome="Hardware",
        horas_primeira_resposta=4,
        horas_resolucao=24,
        campos=[
            CampoPersonalizado.from_dict({
                "name": "urgencia", "label": "Urgência", "type": "select",
                "required": True, "options": ["Baixa", "Alta"],
            }),
        ],
    ))


@pytest.fixture
def ticket_factory(ticket_repo, categoria, agora):
    """Factory de tickets persistidos com prazos 4h/24h."""
    from src.core.tickets.entities import TicketEntity, TicketStatus

    def create_ticket(status=TicketStatus.ABERTO, atendente_id=None, criado_em=None, **kwargs):
        criado_em = criado_em or agora
        ticket = TicketEntity.criar(
            solicitante_id=kwargs.pop('solicitante_id', 10),
            categoria_id=categoria.id,
            assunto=kwargs.pop('assunto', 'Monitor não liga'),
            descricao=kwargs.pop('descricao', 'Luz de energia apagada'),
            prazo_primeira_resposta=criado_em + timedelta(hours=4),
            prazo_resolucao=criado_em + timedelta(hours=24),
            agora=criado_em,
            atendente_id=atendente_id,
            **kwargs
        )
        ticket.status = status
        return ticket_repo.save(ticket)

    return create_ticket
