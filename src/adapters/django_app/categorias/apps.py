"""
Configuração do Django App para Categorias.
"""

from django.apps import AppConfig


class CategoriasConfig(AppConfig):
    """Categorias, vínculos com atendentes e regras de atribuição."""

    default_auto_field = 'django.db.models.BigAutoField'
    name = 'src.adapters.django_app.categorias'
    label = 'categorias'
    verbose_name = 'Categorias e Atribuição'
