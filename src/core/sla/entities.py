"""
Tipos do domínio de SLA.

"Violado" e "em aviso" não são status do ticket: são condições
derivadas dos prazos + status atual, recalculadas a cada leitura.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from src.core.tickets.entities import TicketEntity


class SlaStatus(Enum):
    OK = "ok"
    AVISO = "warning"
    VIOLADO = "violated"


class TipoPrazo(Enum):
    PRIMEIRA_RESPOSTA = "first_response"
    RESOLUCAO = "resolution"


@dataclass(frozen=True)
class ViolacaoSla:
    """Prazo vencido com o ticket ainda num status sujeito a ele."""

    ticket: TicketEntity
    tipo: TipoPrazo
    prazo: datetime
    horas_atraso: float


@dataclass(frozen=True)
class AvisoSla:
    """Prazo ainda no futuro, mas dentro da antecedência configurada."""

    ticket: TicketEntity
    tipo: TipoPrazo
    prazo: datetime
    minutos_restantes: float
