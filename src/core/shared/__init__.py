"""
Shared Domain Components.

Contém componentes compartilhados entre todos os domínios:
- Exceções de domínio
- Interfaces (Ports): UnitOfWork, EventPublisher, EventStore, Clock
- Base class para Domain Events
- Atores (papel + id)
"""

from .exceptions import (
    DomainException,
    ValidationError,
    EntityNotFoundError,
    ForbiddenError,
    BusinessRuleViolationError,
    InvalidTransitionError,
    InvalidStateError,
    NotClaimableError,
    CategoryInactiveError,
    ReopenWindowExpiredError,
    InvalidAttendantError,
    UnknownFieldError,
    ConcurrencyError,
)
from .events import DomainEvent
from .interfaces import UnitOfWork, EventPublisher, EventStore, Clock, SystemClock, FixedClock
from .actors import Ator, Papel

__all__ = [
    "DomainException",
    "ValidationError",
    "EntityNotFoundError",
    "ForbiddenError",
    "BusinessRuleViolationError",
    "InvalidTransitionError",
    "InvalidStateError",
    "NotClaimableError",
    "CategoryInactiveError",
    "ReopenWindowExpiredError",
    "InvalidAttendantError",
    "UnknownFieldError",
    "ConcurrencyError",
    "DomainEvent",
    "UnitOfWork",
    "EventPublisher",
    "EventStore",
    "Clock",
    "SystemClock",
    "FixedClock",
    "Ator",
    "Papel",
]
