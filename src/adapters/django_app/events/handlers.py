"""
Event Handlers - Processadores de Eventos de Domínio.

Handlers são executados de forma assíncrona via Celery quando
Domain Events são publicados pelo CeleryEventPublisher. Isso permite:

- Desacoplamento: o Core só emite, nunca espera a entrega
- Resiliência: retry automático em falhas de notificação
- Auditoria: eventos ficam no Event Store

Tipos de Tasks:
- Dispatcher: roteia pelo nome público do evento ("ticket.created")
- Notificação: solicitante, atendente, equipe de suporte
- Agendadas (beat): varreduras de SLA e limpeza do Event Store

Padrão:
    @shared_task(bind=True, ...)
    def handle_<evento>(self, event_data: dict) -> None:
        # Processar evento
"""

from datetime import timedelta
from typing import Any, Dict, Optional
import logging

from celery import shared_task
from django.conf import settings
from django.core.cache import cache
from django.utils import timezone

logger = logging.getLogger(__name__)


def _dados(event_data: Dict[str, Any]) -> Dict[str, Any]:
    return event_data.get('data') or {}


# =============================================================================
# Event Handlers - Tickets
# =============================================================================

@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_criado(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para ``ticket.created``.

    Atendente pré-atribuído é avisado diretamente; sem atendente, a
    equipe de suporte recebe o ticket no pool.
    """
    ticket_id = event_data.get('aggregate_id')
    dados = _dados(event_data)
    atendente_id = dados.get('atendente_id')

    logger.info(
        f"[HANDLER] ticket.created: {ticket_id} | "
        f"Solicitante: {dados.get('solicitante_id')} | Assunto: {dados.get('assunto')}"
    )

    if atendente_id:
        notify_user.delay(
            user_id=atendente_id,
            message=f"Novo ticket #{ticket_id} atribuído a você: {dados.get('assunto')}",
        )
    else:
        notify_support_team.delay(
            ticket_id=ticket_id,
            message=f"Novo ticket no pool: {dados.get('assunto')}",
            priority='high' if dados.get('prioridade') in ('high', 'urgent') else 'normal',
        )

    notify_user.delay(
        user_id=dados.get('solicitante_id'),
        message=f"Seu ticket #{ticket_id} foi aberto",
    )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_status_alterado(self, event_data: Dict[str, Any]) -> None:
    """Handler para ``ticket.status_changed``: avisa o solicitante."""
    ticket_id = event_data.get('aggregate_id')
    dados = _dados(event_data)

    logger.info(
        f"[HANDLER] ticket.status_changed: {ticket_id} | "
        f"{dados.get('status_anterior')} -> {dados.get('status_novo')}"
    )

    if dados.get('alterado_por_id') != dados.get('solicitante_id'):
        notify_user.delay(
            user_id=dados.get('solicitante_id'),
            message=f"Ticket #{ticket_id} agora está {dados.get('status_novo')}",
        )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_ticket_atribuido(self, event_data: Dict[str, Any]) -> None:
    """Handler para ``ticket.assigned``: avisa o novo atendente."""
    ticket_id = event_data.get('aggregate_id')
    dados = _dados(event_data)

    logger.info(
        f"[HANDLER] ticket.assigned: {ticket_id} | Atendente: {dados.get('atendente_id')}"
    )

    if dados.get('atribuido_por_id') != dados.get('atendente_id'):
        notify_user.delay(
            user_id=dados.get('atendente_id'),
            message=f"Você foi atribuído ao ticket #{ticket_id}",
        )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_aprovacao_solicitada(self, event_data: Dict[str, Any]) -> None:
    """Handler para ``ticket.approval_required``: pede resposta ao solicitante."""
    ticket_id = event_data.get('aggregate_id')
    dados = _dados(event_data)

    logger.info(f"[HANDLER] ticket.approval_required: {ticket_id}")

    notify_user.delay(
        user_id=dados.get('solicitante_id'),
        message=f"Ticket #{ticket_id} finalizado: aprove ou rejeite a solução",
        channel='email',
    )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_mensagem_adicionada(self, event_data: Dict[str, Any]) -> None:
    """Handler para ``ticket.message_added``: avisa a outra parte."""
    ticket_id = event_data.get('aggregate_id')
    dados = _dados(event_data)
    autor_id = dados.get('autor_id')

    destinatarios = {dados.get('solicitante_id'), dados.get('atendente_id')}
    destinatarios.discard(None)
    destinatarios.discard(autor_id)

    for user_id in destinatarios:
        notify_user.delay(
            user_id=user_id,
            message=f"Nova mensagem no ticket #{ticket_id}: {dados.get('preview', '')}",
            channel='push',
        )


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_sla_violado(self, event_data: Dict[str, Any]) -> None:
    """
    Handler para ``ticket.sla_violated``.

    Chega uma vez por varredura enquanto a violação persistir; a
    deduplicação fica a cargo do canal de notificação.
    """
    ticket_id = event_data.get('aggregate_id')
    dados = _dados(event_data)

    logger.warning(
        f"[HANDLER] ticket.sla_violated: {ticket_id} | tipo={dados.get('tipo')} | "
        f"atraso={dados.get('horas_atraso')}h"
    )

    mensagem = (
        f"SLA violado ({dados.get('tipo')}) no ticket #{ticket_id}: "
        f"{dados.get('horas_atraso')}h de atraso"
    )
    if dados.get('atendente_id'):
        notify_user.delay(user_id=dados['atendente_id'], message=mensagem)
    notify_support_team.delay(ticket_id=ticket_id, message=mensagem, priority='high')


@shared_task(
    bind=True,
    max_retries=3,
    default_retry_delay=60,
    acks_late=True,
)
def handle_sla_aviso(self, event_data: Dict[str, Any]) -> None:
    """Handler para ``ticket.sla_warning``."""
    ticket_id = event_data.get('aggregate_id')
    dados = _dados(event_data)

    mensagem = (
        f"Ticket #{ticket_id} vence ({dados.get('tipo')}) em "
        f"{dados.get('minutos_restantes')} minutos"
    )
    if dados.get('atendente_id'):
        notify_user.delay(user_id=dados['atendente_id'], message=mensagem)
    else:
        notify_support_team.delay(ticket_id=ticket_id, message=mensagem)


# =============================================================================
# Event Dispatcher (Router)
# =============================================================================

EVENT_HANDLERS = {
    'ticket.created': handle_ticket_criado,
    'ticket.status_changed': handle_status_alterado,
    'ticket.assigned': handle_ticket_atribuido,
    'ticket.approval_required': handle_aprovacao_solicitada,
    'ticket.message_added': handle_mensagem_adicionada,
    'ticket.sla_violated': handle_sla_violado,
    'ticket.sla_warning': handle_sla_aviso,
}


@shared_task(bind=True, max_retries=5, default_retry_delay=30)
def dispatch_domain_event(self, event_type: str, event_data: Dict[str, Any]) -> bool:
    """
    Dispatcher central para Domain Events.

    Args:
        event_type: Nome público do evento (ex: 'ticket.created')
        event_data: Evento serializado (``DomainEvent.to_dict()``)

    Returns:
        True se havia handler para o evento
    """
    handler = EVENT_HANDLERS.get(event_type)

    if handler is None:
        logger.debug(f"[DISPATCHER] Nenhum handler para {event_type}")
        return False

    logger.info(f"[DISPATCHER] Roteando {event_type} para {handler.name}")
    handler.delay(event_data)
    return True


# =============================================================================
# Notification Tasks
# =============================================================================

@shared_task(bind=True, max_retries=3, default_retry_delay=120)
def notify_user(
    self,
    user_id: Optional[int],
    message: str,
    channel: str = 'email',
    **kwargs
) -> None:
    """
    Notifica usuário por canal especificado.

    Args:
        user_id: ID do usuário
        message: Mensagem a enviar
        channel: Canal (email, push)
    """
    if not user_id:
        return
    logger.info(f"[NOTIFICATION] {channel.upper()} para {user_id}: {message}")


@shared_task(bind=True, max_retries=3, default_retry_delay=60)
def notify_support_team(
    self,
    ticket_id: str,
    message: str,
    priority: str = 'normal'
) -> None:
    """Notifica a equipe de suporte (canal do grupo)."""
    logger.info(
        f"[NOTIFICATION] Equipe de suporte [{priority}]: "
        f"Ticket #{ticket_id} - {message}"
    )


# =============================================================================
# Scheduled Tasks (Beat)
# =============================================================================

def _varrer_com_lock(nome: str, varredura) -> Dict[str, Any]:
    """
    Executa a varredura sob lock no cache do Django.

    ``cache.add`` só grava se a chave não existe: um worker que encontra
    o lock tomado pula o tick em vez de enfileirar.
    """
    chave = f"sla-monitor:{nome}"
    if not cache.add(chave, "1", timeout=settings.SLA_MONITOR_LOCK_TIMEOUT):
        logger.warning(f"[SCHEDULED] Varredura {nome} já em andamento em outro worker; tick ignorado")
        return {'varredura': nome, 'ignorada': True}

    try:
        from src.config.container import get_container

        monitor = get_container().sla_monitor()
        return varredura(monitor).to_dict()
    except Exception as e:
        logger.error(f"[SCHEDULED] Erro na varredura {nome}: {e}", exc_info=True)
        return {'varredura': nome, 'erro': str(e)}
    finally:
        cache.delete(chave)


@shared_task(bind=True)
def check_sla_violations(self) -> Dict[str, Any]:
    """
    Publica ``ticket.sla_violated`` para cada ticket com prazo vencido.

    Executada pelo Celery Beat a cada ``SLA_CHECK_INTERVAL_SECONDS``.
    """
    return _varrer_com_lock('violacoes', lambda monitor: monitor.verificar_violacoes())


@shared_task(bind=True)
def check_sla_warnings(self) -> Dict[str, Any]:
    """Executada a cada ``SLA_WARNING_INTERVAL_SECONDS``."""
    return _varrer_com_lock('avisos', lambda monitor: monitor.verificar_avisos())


@shared_task(bind=True)
def cleanup_old_events(self, days: int = 90) -> int:
    """
    Limpa eventos antigos do Event Store.

    Executada semanalmente pelo Celery Beat.

    Returns:
        Número de eventos removidos
    """
    logger.info(f"[SCHEDULED] Limpando eventos com mais de {days} dias...")

    from src.adapters.django_app.tickets.models import DomainEventModel

    cutoff_date = timezone.now() - timedelta(days=days)
    deleted, _ = DomainEventModel.objects.filter(occurred_at__lt=cutoff_date).delete()

    logger.info(f"[SCHEDULED] {deleted} eventos removidos")
    return deleted
