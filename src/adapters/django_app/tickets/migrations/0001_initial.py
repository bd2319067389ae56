"""
Migration inicial para o domínio de Tickets.

Cria as tabelas:
- tickets: Tabela principal de tickets
- ticket_history: Histórico append-only
- domain_events: Event Store
"""

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
        ('categorias', '0001_initial'),
    ]

    operations = [
        # =================================================================
        # Tabela: tickets
        # =================================================================
        migrations.CreateModel(
            name='TicketModel',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('solicitante_id', models.BigIntegerField(
                    db_index=True,
                    help_text='ID do usuário solicitante'
                )),
                ('atendente_id', models.BigIntegerField(
                    blank=True,
                    null=True,
                    db_index=True,
                    help_text='ID do atendente responsável'
                )),
                ('assunto', models.CharField(
                    max_length=200,
                    help_text='Resumo do problema'
                )),
                ('descricao', models.TextField(
                    help_text='Descrição detalhada do problema'
                )),
                ('status', models.CharField(
                    max_length=30,
                    choices=[
                        ('open', 'Aberto'),
                        ('in_progress', 'Em atendimento'),
                        ('pending_user', 'Aguardando usuário'),
                        ('pending_third_party', 'Aguardando terceiros'),
                        ('pending_approval', 'Aguardando aprovação'),
                        ('resolved', 'Resolvido'),
                        ('closed', 'Fechado'),
                    ],
                    default='open',
                    db_index=True
                )),
                ('prioridade', models.CharField(
                    max_length=10,
                    choices=[
                        ('low', 'Baixa'),
                        ('medium', 'Média'),
                        ('high', 'Alta'),
                        ('urgent', 'Urgente'),
                    ],
                    default='medium'
                )),
                ('prazo_primeira_resposta', models.DateTimeField(
                    help_text='Prazo de primeira resposta'
                )),
                ('prazo_resolucao', models.DateTimeField(
                    help_text='Prazo de resolução'
                )),
                ('dados_personalizados', models.JSONField(blank=True, default=dict)),
                ('criado_em', models.DateTimeField(
                    default=django.utils.timezone.now,
                    db_index=True
                )),
                ('atualizado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('fechado_em', models.DateTimeField(blank=True, null=True)),
                ('reaberto_em', models.DateTimeField(blank=True, null=True)),
                ('versao', models.PositiveIntegerField(default=1)),
                ('categoria', models.ForeignKey(
                    on_delete=django.db.models.deletion.PROTECT,
                    related_name='tickets',
                    to='categorias.categoriamodel'
                )),
            ],
            options={
                'verbose_name': 'Ticket',
                'verbose_name_plural': 'Tickets',
                'db_table': 'tickets',
                'ordering': ['-criado_em'],
            },
        ),

        # =================================================================
        # Tabela: ticket_history
        # =================================================================
        migrations.CreateModel(
            name='TicketHistoryModel',
            fields=[
                ('id', models.BigAutoField(primary_key=True, serialize=False)),
                ('autor_id', models.BigIntegerField(help_text='Quem gerou a entrada')),
                ('mensagem', models.TextField()),
                ('anexo', models.CharField(
                    blank=True,
                    max_length=255,
                    null=True,
                    help_text='Referência ao anexo (armazenamento externo)'
                )),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('ticket', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='history',
                    to='tickets.ticketmodel'
                )),
            ],
            options={
                'verbose_name': 'Histórico de Ticket',
                'verbose_name_plural': 'Histórico de Tickets',
                'db_table': 'ticket_history',
                'ordering': ['criado_em', 'id'],
            },
        ),

        # =================================================================
        # Tabela: domain_events (Event Store)
        # =================================================================
        migrations.CreateModel(
            name='DomainEventModel',
            fields=[
                ('event_id', models.CharField(
                    max_length=36,
                    primary_key=True,
                    serialize=False,
                    help_text='UUID único do evento'
                )),
                ('event_type', models.CharField(
                    max_length=100,
                    db_index=True,
                    help_text='Nome do evento (ex: ticket.sla_violated)'
                )),
                ('aggregate_type', models.CharField(max_length=100, db_index=True)),
                ('aggregate_id', models.CharField(max_length=36, db_index=True)),
                ('event_data', models.JSONField(default=dict)),
                ('version', models.IntegerField(default=1)),
                ('sequence', models.BigIntegerField(default=0)),
                ('occurred_at', models.DateTimeField()),
                ('recorded_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'verbose_name': 'Evento de Domínio',
                'verbose_name_plural': 'Eventos de Domínio',
                'db_table': 'domain_events',
                'ordering': ['recorded_at'],
            },
        ),

        # =================================================================
        # Índices
        # =================================================================
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(
                fields=['status', 'prazo_primeira_resposta'],
                name='tickets_status_pr_idx'
            ),
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(
                fields=['status', 'prazo_resolucao'],
                name='tickets_status_res_idx'
            ),
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(
                fields=['atendente_id', 'status'],
                name='tickets_atendente_idx'
            ),
        ),
        migrations.AddIndex(
            model_name='ticketmodel',
            index=models.Index(
                fields=['solicitante_id', 'criado_em'],
                name='tickets_solicitante_idx'
            ),
        ),
        migrations.AddIndex(
            model_name='tickethistorymodel',
            index=models.Index(
                fields=['ticket', 'criado_em'],
                name='ticket_hist_ticket_idx'
            ),
        ),
        migrations.AddIndex(
            model_name='domaineventmodel',
            index=models.Index(
                fields=['aggregate_id', 'sequence'],
                name='domain_evt_aggregate_idx'
            ),
        ),
        migrations.AddIndex(
            model_name='domaineventmodel',
            index=models.Index(
                fields=['event_type', 'recorded_at'],
                name='domain_evt_type_idx'
            ),
        ),
    ]
