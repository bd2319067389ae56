"""
SlaService - consultas derivadas de SLA.

Regras:
- Prazo de primeira resposta vale enquanto o ticket está ABERTO
- Prazo de resolução vale em EM_ATENDIMENTO, AGUARDANDO_USUARIO e
  AGUARDANDO_TERCEIROS
- Demais status (aguardando aprovação, resolvido, fechado) nunca violam

``agora`` sempre vem do Clock injetado.
"""

from datetime import datetime, timedelta
from typing import List, Optional
import logging

from src.core.shared.interfaces import Clock, SystemClock
from src.core.tickets.entities import STATUS_PRAZO_RESOLUCAO, TicketEntity, TicketStatus
from src.core.tickets.ports import TicketRepository

from .entities import AvisoSla, SlaStatus, TipoPrazo, ViolacaoSla

logger = logging.getLogger(__name__)


def prazo_aplicavel(ticket: TicketEntity) -> Optional[tuple]:
    """
    Retorna ``(TipoPrazo, prazo)`` que vale no status atual, ou None.
    """
    if ticket.status == TicketStatus.ABERTO:
        return TipoPrazo.PRIMEIRA_RESPOSTA, ticket.prazo_primeira_resposta
    if ticket.status in STATUS_PRAZO_RESOLUCAO:
        return TipoPrazo.RESOLUCAO, ticket.prazo_resolucao
    return None


class SlaService:
    """
    Consultas de SLA sobre tickets persistidos.

    Attributes:
        ticket_repo: Repositório de tickets (consultas por prazo)
        clock: Fonte de "agora"
        antecedencia: Janela de aviso antes do prazo (padrão: 1 hora)

    Example:
        service = SlaService(ticket_repo, clock, antecedencia=timedelta(minutes=30))
        service.obter_status(ticket)  # SlaStatus.AVISO
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        clock: Optional[Clock] = None,
        antecedencia: timedelta = timedelta(hours=1),
    ):
        self.ticket_repo = ticket_repo
        self.clock = clock or SystemClock()
        self.antecedencia = antecedencia

    def obter_status(self, ticket: TicketEntity, agora: Optional[datetime] = None) -> SlaStatus:
        """ok | warning | violated para o ticket, no instante ``agora``."""
        agora = agora or self.clock.now()

        aplicavel = prazo_aplicavel(ticket)
        if aplicavel is None or aplicavel[1] is None:
            return SlaStatus.OK

        _, prazo = aplicavel
        if prazo < agora:
            return SlaStatus.VIOLADO
        if prazo <= agora + self.antecedencia:
            return SlaStatus.AVISO
        return SlaStatus.OK

    def listar_violacoes(self, agora: Optional[datetime] = None) -> List[ViolacaoSla]:
        """Tickets violando algum prazo agora, do atraso maior para o menor."""
        agora = agora or self.clock.now()

        violacoes = [
            ViolacaoSla(
                ticket=t,
                tipo=TipoPrazo.PRIMEIRA_RESPOSTA,
                prazo=t.prazo_primeira_resposta,
                horas_atraso=_horas(agora - t.prazo_primeira_resposta),
            )
            for t in self.ticket_repo.list_primeira_resposta_vencida(agora)
        ]
        violacoes.extend(
            ViolacaoSla(
                ticket=t,
                tipo=TipoPrazo.RESOLUCAO,
                prazo=t.prazo_resolucao,
                horas_atraso=_horas(agora - t.prazo_resolucao),
            )
            for t in self.ticket_repo.list_resolucao_vencida(agora)
        )

        violacoes.sort(key=lambda v: (v.prazo, v.ticket.id))
        logger.debug(f"{len(violacoes)} violações de SLA em {agora.isoformat()}")
        return violacoes

    def listar_avisos(self, agora: Optional[datetime] = None) -> List[AvisoSla]:
        """Tickets a menos de ``antecedencia`` do prazo aplicável."""
        agora = agora or self.clock.now()
        limite = agora + self.antecedencia

        avisos = [
            AvisoSla(
                ticket=t,
                tipo=TipoPrazo.PRIMEIRA_RESPOSTA,
                prazo=t.prazo_primeira_resposta,
                minutos_restantes=_minutos(t.prazo_primeira_resposta - agora),
            )
            for t in self.ticket_repo.list_primeira_resposta_a_vencer(agora, limite)
        ]
        avisos.extend(
            AvisoSla(
                ticket=t,
                tipo=TipoPrazo.RESOLUCAO,
                prazo=t.prazo_resolucao,
                minutos_restantes=_minutos(t.prazo_resolucao - agora),
            )
            for t in self.ticket_repo.list_resolucao_a_vencer(agora, limite)
        )

        avisos.sort(key=lambda a: (a.prazo, a.ticket.id))
        return avisos


def _horas(delta: timedelta) -> float:
    return round(delta.total_seconds() / 3600, 2)


def _minutos(delta: timedelta) -> float:
    return round(delta.total_seconds() / 60, 1)
