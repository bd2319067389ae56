"""
Adapters Layer - implementações de infraestrutura dos Ports do Core.

- django_app: persistência (Django ORM), Unit of Work e entrega de
  eventos (Celery)
"""
