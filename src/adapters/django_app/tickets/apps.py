"""
Configuração do Django App para Tickets.

Tabelas: tickets, ticket_history e domain_events (Event Store).
"""

from django.apps import AppConfig


class TicketsConfig(AppConfig):
    """Configuração do app Tickets."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.tickets'
    label = 'tickets'
    verbose_name = 'Gestão de Tickets'
