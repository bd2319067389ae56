"""
Configuração do projeto Help Desk.

Módulos:
- settings: Configurações Django
- celery: Configuração Celery (eventos e varreduras de SLA)
- container: Dependency Injection Container
"""

# Importar app Celery para que seja carregado com Django
from .celery import app as celery_app

__all__ = ('celery_app',)
