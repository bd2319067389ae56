"""
SLA Monitor - varredura periódica de prazos.

Duas varreduras independentes:
- violações (padrão: a cada 5 minutos) → ticket.sla_violated
- avisos (intervalo próprio, padrão: 15 minutos) → ticket.sla_warning

O monitor nunca altera o status do ticket: só publica eventos. Também
não deduplica entre varreduras; um ticket violado aparece em toda
varredura enquanto continuar violado.

Concorrência:
- Cada varredura é protegida por um lock não bloqueante: se a anterior
  ainda está rodando, a nova é pulada (e logada), nunca enfileirada.
- No modo standalone o agendamento é do APScheduler
  (BackgroundScheduler, ``max_instances=1``, ``coalesce=True``).
- No Celery, ``check_sla_violations``/``check_sla_warnings`` chamam
  ``verificar_*`` diretamente sob um lock no cache do Django.

Falha ao publicar um evento é logada e a varredura segue para o próximo
ticket. Falha da varredura inteira é logada e o processo continua.
"""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional
import logging
import threading

from apscheduler.schedulers.background import BackgroundScheduler

from src.core.shared.interfaces import EventPublisher
from src.core.tickets.events import TicketSlaAvisoEvent, TicketSlaVioladoEvent

from .services import SlaService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ResultadoVarredura:
    """Resumo de uma varredura (também devolvido pelas tasks Celery)."""

    varredura: str
    encontrados: int = 0
    publicados: int = 0
    falhas: int = 0
    ignorada: bool = False

    def to_dict(self) -> dict:
        return {
            "varredura": self.varredura,
            "encontrados": self.encontrados,
            "publicados": self.publicados,
            "falhas": self.falhas,
            "ignorada": self.ignorada,
        }


class SlaMonitor:
    """
    Scanner periódico de SLA.

    Example:
        monitor = SlaMonitor(sla_service, event_publisher)
        monitor.start()
        ...
        monitor.stop()  # espera a varredura em andamento terminar
    """

    JOB_VIOLACOES = "sla_violacoes"
    JOB_AVISOS = "sla_avisos"

    def __init__(
        self,
        sla_service: SlaService,
        event_publisher: EventPublisher,
        intervalo_violacoes: int = 300,
        intervalo_avisos: int = 900,
    ):
        self.sla_service = sla_service
        self.event_publisher = event_publisher
        self.intervalo_violacoes = intervalo_violacoes
        self.intervalo_avisos = intervalo_avisos

        self._lock_violacoes = threading.Lock()
        self._lock_avisos = threading.Lock()
        self._scheduler: Optional[BackgroundScheduler] = None

    # =========================================================================
    # Varreduras
    # =========================================================================

    def verificar_violacoes(self, agora: Optional[datetime] = None) -> ResultadoVarredura:
        if not self._lock_violacoes.acquire(blocking=False):
            logger.warning("Varredura de violações anterior ainda em andamento; tick ignorado")
            return ResultadoVarredura("violacoes", ignorada=True)

        try:
            logger.info("Iniciando varredura de violações de SLA")
            violacoes = self.sla_service.listar_violacoes(agora)

            publicados = falhas = 0
            for violacao in violacoes:
                ticket = violacao.ticket
                evento = TicketSlaVioladoEvent(
                    aggregate_id=ticket.id,
                    tipo=violacao.tipo.value,
                    prazo=violacao.prazo,
                    horas_atraso=violacao.horas_atraso,
                    status=ticket.status.value,
                    atendente_id=ticket.atendente_id,
                )
                if self._publicar(evento):
                    publicados += 1
                else:
                    falhas += 1

            logger.info(
                f"Varredura de violações concluída: {len(violacoes)} encontradas, "
                f"{publicados} publicadas, {falhas} falhas"
            )
            return ResultadoVarredura("violacoes", len(violacoes), publicados, falhas)
        finally:
            self._lock_violacoes.release()

    def verificar_avisos(self, agora: Optional[datetime] = None) -> ResultadoVarredura:
        if not self._lock_avisos.acquire(blocking=False):
            logger.warning("Varredura de avisos anterior ainda em andamento; tick ignorado")
            return ResultadoVarredura("avisos", ignorada=True)

        try:
            avisos = self.sla_service.listar_avisos(agora)

            publicados = falhas = 0
            for aviso in avisos:
                evento = TicketSlaAvisoEvent(
                    aggregate_id=aviso.ticket.id,
                    tipo=aviso.tipo.value,
                    prazo=aviso.prazo,
                    minutos_restantes=aviso.minutos_restantes,
                    status=aviso.ticket.status.value,
                    atendente_id=aviso.ticket.atendente_id,
                )
                if self._publicar(evento):
                    publicados += 1
                else:
                    falhas += 1

            logger.info(f"Varredura de avisos concluída: {len(avisos)} tickets perto do prazo")
            return ResultadoVarredura("avisos", len(avisos), publicados, falhas)
        finally:
            self._lock_avisos.release()

    def _publicar(self, evento) -> bool:
        try:
            self.event_publisher.publish(evento)
            return True
        except Exception as e:
            logger.error(
                f"Falha ao publicar {evento.event_type} do ticket {evento.aggregate_id}: {e}",
                exc_info=True,
            )
            return False

    def _tick(self, varredura) -> None:
        try:
            varredura()
        except Exception:
            logger.exception("Varredura de SLA falhou; próxima execução segue agendada")

    # =========================================================================
    # Ciclo de vida
    # =========================================================================

    def start(self) -> None:
        """Agenda as duas varreduras; a primeira de violações roda imediatamente."""
        if self.running:
            logger.warning("SLA monitor já está rodando")
            return

        self._scheduler = BackgroundScheduler(
            timezone=timezone.utc,
            job_defaults={"max_instances": 1, "coalesce": True},
        )
        self._scheduler.add_job(
            self._tick,
            "interval",
            args=[self.verificar_violacoes],
            seconds=self.intervalo_violacoes,
            id=self.JOB_VIOLACOES,
            name="SLA violations scan",
            next_run_time=datetime.now(timezone.utc),
            replace_existing=True,
        )
        self._scheduler.add_job(
            self._tick,
            "interval",
            args=[self.verificar_avisos],
            seconds=self.intervalo_avisos,
            id=self.JOB_AVISOS,
            name="SLA warnings scan",
            replace_existing=True,
        )
        self._scheduler.start()

        logger.info(
            f"SLA monitor iniciado (violações a cada {self.intervalo_violacoes}s, "
            f"avisos a cada {self.intervalo_avisos}s)"
        )

    def stop(self, wait: bool = True) -> None:
        """Para de agendar novos ticks; com ``wait`` espera o tick em andamento."""
        if not self.running:
            return

        self._scheduler.shutdown(wait=wait)
        self._scheduler = None
        logger.info("SLA monitor parado")

    @property
    def running(self) -> bool:
        return self._scheduler is not None and self._scheduler.running
