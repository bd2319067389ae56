"""
Configuração do Celery para processamento assíncrono.

O Celery é usado para:
- Entregar Domain Events aos handlers de notificação
- Varreduras periódicas de SLA (beat), alternativa ao scripts/run_sla_monitor.py
- Limpeza do Event Store

Arquitetura:
- Broker: RabbitMQ (mensagens entre Django e Workers)
- Backend: Redis (resultados de tarefas)
- Workers: Processos que executam as tarefas

Uso:
    # Iniciar worker
    celery -A src.config.celery worker -l INFO -Q default,events,notifications,sla

    # Iniciar beat (tarefas agendadas)
    celery -A src.config.celery beat -l INFO
"""

import os
from celery import Celery
from kombu import Queue, Exchange

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

app = Celery('helpdesk')

# Carregar configurações do Django (prefixo CELERY_)
app.config_from_object('django.conf:settings', namespace='CELERY')

SLA_CHECK_INTERVAL_SECONDS = float(os.environ.get('SLA_CHECK_INTERVAL_SECONDS', 300))
SLA_WARNING_INTERVAL_SECONDS = float(os.environ.get('SLA_WARNING_INTERVAL_SECONDS', 900))

app.conf.update(
    task_serializer='json',
    accept_content=['json'],
    result_serializer='json',

    enable_utc=True,

    task_acks_late=True,
    task_reject_on_worker_lost=True,
    worker_prefetch_multiplier=1,

    task_default_retry_delay=60,
    task_max_retries=3,

    result_expires=3600,

    worker_send_task_events=True,
    task_send_sent_event=True,
)

app.conf.task_default_queue = 'default'

app.conf.task_queues = (
    Queue('default', Exchange('default'), routing_key='default'),
    Queue('events', Exchange('events'), routing_key='events.#'),
    Queue('notifications', Exchange('notifications'), routing_key='notifications.#'),
    Queue('sla', Exchange('sla'), routing_key='sla.#'),
)

_HANDLERS = 'src.adapters.django_app.events.handlers'

app.conf.task_routes = {
    f'{_HANDLERS}.notify_*': {'queue': 'notifications'},
    f'{_HANDLERS}.check_sla_*': {'queue': 'sla'},
    f'{_HANDLERS}.*': {'queue': 'events'},
}

app.autodiscover_tasks([
    'src.adapters.django_app.events',
], related_name='handlers')

app.conf.beat_schedule = {
    # Violações de SLA (padrão: 5 minutos)
    'check-sla-violations': {
        'task': f'{_HANDLERS}.check_sla_violations',
        'schedule': SLA_CHECK_INTERVAL_SECONDS,
        'options': {'expires': SLA_CHECK_INTERVAL_SECONDS},
    },

    # Avisos de prazo próximo (intervalo próprio)
    'check-sla-warnings': {
        'task': f'{_HANDLERS}.check_sla_warnings',
        'schedule': SLA_WARNING_INTERVAL_SECONDS,
        'options': {'expires': SLA_WARNING_INTERVAL_SECONDS},
    },

    # Limpar eventos antigos semanalmente
    'cleanup-old-events': {
        'task': f'{_HANDLERS}.cleanup_old_events',
        'schedule': 604800.0,
    },
}
