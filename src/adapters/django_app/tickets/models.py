"""
Django Models para o domínio de Tickets.

Estes models são ADAPTERS - implementam a persistência para as
entidades de domínio definidas em src/core/tickets/entities.py.

IMPORTANTE:
- Models NÃO contêm lógica de negócio
- Lógica de negócio fica nas Entities do Core
- Models são mapeados para/de Entities via Mappers

Relacionamentos:
- TicketModel: Tabela principal de tickets
- TicketHistoryModel: Histórico append-only (cascata com o ticket)
- DomainEventModel: Event Store (auditoria de eventos publicados)
"""

from django.db import models
from django.utils import timezone

from src.adapters.django_app.categorias.models import CategoriaModel


class TicketStatusChoices(models.TextChoices):
    """Choices para status de ticket (espelha TicketStatus do Core)."""
    ABERTO = 'open', 'Aberto'
    EM_ATENDIMENTO = 'in_progress', 'Em atendimento'
    AGUARDANDO_USUARIO = 'pending_user', 'Aguardando usuário'
    AGUARDANDO_TERCEIROS = 'pending_third_party', 'Aguardando terceiros'
    AGUARDANDO_APROVACAO = 'pending_approval', 'Aguardando aprovação'
    RESOLVIDO = 'resolved', 'Resolvido'
    FECHADO = 'closed', 'Fechado'


class TicketPriorityChoices(models.TextChoices):
    """Choices para prioridade de ticket (espelha TicketPriority do Core)."""
    BAIXA = 'low', 'Baixa'
    MEDIA = 'medium', 'Média'
    ALTA = 'high', 'Alta'
    URGENTE = 'urgent', 'Urgente'


class TicketModel(models.Model):
    """
    Model Django para persistência de Tickets.

    Fields:
        solicitante_id: Usuário que abriu o ticket
        atendente_id: Atendente responsável (nulo enquanto no pool)
        categoria: Categoria (PROTECT: categoria referenciada não é excluída)
        status / prioridade: choices espelhando o Core
        prazo_primeira_resposta / prazo_resolucao: prazos de SLA (UTC)
        dados_personalizados: respostas aos campos da categoria
        versao: contador para escrita condicional (concorrência otimista)
    """

    id = models.BigAutoField(primary_key=True)

    solicitante_id = models.BigIntegerField(
        db_index=True,
        help_text="ID do usuário solicitante"
    )

    atendente_id = models.BigIntegerField(
        null=True,
        blank=True,
        db_index=True,
        help_text="ID do atendente responsável"
    )

    categoria = models.ForeignKey(
        CategoriaModel,
        on_delete=models.PROTECT,
        related_name='tickets',
    )

    assunto = models.CharField(
        max_length=200,
        help_text="Resumo do problema"
    )

    descricao = models.TextField(
        help_text="Descrição detalhada do problema"
    )

    status = models.CharField(
        max_length=30,
        choices=TicketStatusChoices.choices,
        default=TicketStatusChoices.ABERTO,
        db_index=True,
    )

    prioridade = models.CharField(
        max_length=10,
        choices=TicketPriorityChoices.choices,
        default=TicketPriorityChoices.MEDIA,
    )

    # SLA
    prazo_primeira_resposta = models.DateTimeField(
        help_text="Prazo de primeira resposta"
    )

    prazo_resolucao = models.DateTimeField(
        help_text="Prazo de resolução"
    )

    dados_personalizados = models.JSONField(
        default=dict,
        blank=True,
    )

    # Timestamps (controlados pela Entity)
    criado_em = models.DateTimeField(default=timezone.now, db_index=True)
    atualizado_em = models.DateTimeField(default=timezone.now)
    fechado_em = models.DateTimeField(null=True, blank=True)
    reaberto_em = models.DateTimeField(null=True, blank=True)

    versao = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = 'tickets'
        verbose_name = 'Ticket'
        verbose_name_plural = 'Tickets'
        ordering = ['-criado_em']
        indexes = [
            # Varreduras do SLA monitor
            models.Index(fields=['status', 'prazo_primeira_resposta'], name='tickets_status_pr_idx'),
            models.Index(fields=['status', 'prazo_resolucao'], name='tickets_status_res_idx'),
            models.Index(fields=['atendente_id', 'status'], name='tickets_atendente_idx'),
            models.Index(fields=['solicitante_id', 'criado_em'], name='tickets_solicitante_idx'),
        ]

    def __str__(self):
        return f"[{self.id}] {self.assunto}"

    def __repr__(self):
        return f"<TicketModel id={self.id} status={self.status} versao={self.versao}>"


class TicketHistoryModel(models.Model):
    """
    Histórico append-only do ticket.

    Uma linha por transição de status e por mensagem trocada.
    Excluído apenas em cascata com o ticket.
    """

    id = models.BigAutoField(primary_key=True)

    ticket = models.ForeignKey(
        TicketModel,
        on_delete=models.CASCADE,
        related_name='history',
    )

    autor_id = models.BigIntegerField(help_text="Quem gerou a entrada")

    mensagem = models.TextField()

    anexo = models.CharField(
        max_length=255,
        null=True,
        blank=True,
        help_text="Referência ao anexo (armazenamento externo)"
    )

    criado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'ticket_history'
        verbose_name = 'Histórico de Ticket'
        verbose_name_plural = 'Histórico de Tickets'
        ordering = ['criado_em', 'id']
        indexes = [
            models.Index(fields=['ticket', 'criado_em'], name='ticket_hist_ticket_idx'),
        ]

    def __str__(self):
        return f"{self.ticket_id} @ {self.criado_em}: {self.mensagem[:40]}"


class DomainEventModel(models.Model):
    """
    Event Store genérico para Domain Events.

    Guarda todo evento publicado, inclusive violações de SLA: é a
    resposta para "este ticket já esteve atrasado?".
    """

    event_id = models.CharField(
        max_length=36,
        primary_key=True,
        help_text="UUID único do evento"
    )

    event_type = models.CharField(
        max_length=100,
        db_index=True,
        help_text="Nome do evento (ex: ticket.sla_violated)"
    )

    aggregate_type = models.CharField(max_length=100, db_index=True)

    aggregate_id = models.CharField(max_length=36, db_index=True)

    event_data = models.JSONField(default=dict)

    version = models.IntegerField(default=1)

    sequence = models.BigIntegerField(default=0)

    occurred_at = models.DateTimeField()

    recorded_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'domain_events'
        verbose_name = 'Evento de Domínio'
        verbose_name_plural = 'Eventos de Domínio'
        ordering = ['recorded_at']
        indexes = [
            models.Index(fields=['aggregate_id', 'sequence'], name='domain_evt_aggregate_idx'),
            models.Index(fields=['event_type', 'recorded_at'], name='domain_evt_type_idx'),
        ]

    def __str__(self):
        return f"{self.event_type} - {self.aggregate_id} @ {self.occurred_at}"
