"""
Configurações globais do Pytest para o Help Desk.

Este arquivo é carregado automaticamente pelo pytest e
fornece fixtures e configurações compartilhadas.
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from src.core.shared.actors import Ator, Papel
from src.core.shared.interfaces import FixedClock


@pytest.fixture(scope="session")
def project_root():
    """Retorna o caminho raiz do projeto."""
    return Path(__file__).parent.parent


@pytest.fixture
def agora():
    """Instante fixo usado como "agora" nos testes (UTC)."""
    return datetime(2024, 3, 4, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock(agora):
    """Relógio controlável iniciado em ``agora``."""
    return FixedClock(agora)


@pytest.fixture
def solicitante():
    return Ator(id=10, papel=Papel.USUARIO)


@pytest.fixture
def atendente():
    return Ator(id=101, papel=Papel.ATENDENTE)


@pytest.fixture
def outro_atendente():
    return Ator(id=102, papel=Papel.ATENDENTE)


@pytest.fixture
def admin():
    return Ator(id=1, papel=Papel.ADMIN)


def pytest_configure(config):
    """Configuração do pytest."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )


def pytest_collection_modifyitems(config, items):
    """Modifica coleção de testes."""
    # Testes marcados como integration dependem de broker/banco externos
    skip_integration = pytest.mark.skip(reason="Integration tests require --run-integration")

    for item in items:
        if item.get_closest_marker("integration") is not None:
            if not config.getoption("--run-integration", default=False):
                item.add_marker(skip_integration)


def pytest_addoption(parser):
    """Adiciona opções de linha de comando."""
    parser.addoption(
        "--run-integration",
        action="store_true",
        default=False,
        help="run integration tests",
    )
