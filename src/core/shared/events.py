"""
Domain Events - Comunicação Assíncrona entre Domínios.

Este módulo define a infraestrutura base para Domain Events,
permitindo comunicação desacoplada entre o núcleo e a camada de
notificação (e-mail, WebSocket, filas).

Características:
- Auto-geração de ID e timestamp (UTC)
- Serializáveis para persistência/transporte
- Rastreáveis via aggregate_id
- Nome público estável (``event_name``, ex: "ticket.created")

Pattern:
    - Eventos são publicados após commit do UoW
    - Falhas de entrega são logadas e descartadas
    - Event Store persiste histórico para auditoria
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar, Dict
import uuid


def _agora_utc() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class DomainEvent(ABC):
    """
    Classe base abstrata para Domain Events.

    Um Domain Event representa algo significativo que aconteceu
    no domínio e que pode ser relevante para outras partes do sistema.

    Attributes:
        event_id: Identificador único do evento
        aggregate_id: ID do agregado que gerou o evento
        occurred_at: Momento em que o evento ocorreu (UTC)
        version: Versão do schema do evento
        event_name: Nome público do evento (atributo de classe)

    Example:
        @dataclass
        class TicketCriadoEvent(DomainEvent):
            event_name: ClassVar[str] = "ticket.created"
            solicitante_id: int = 0

            @property
            def aggregate_type(self) -> str:
                return "Ticket"
    """

    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    aggregate_id: str = ""
    occurred_at: datetime = field(default_factory=_agora_utc)
    version: int = 1

    event_name: ClassVar[str] = ""

    def __post_init__(self):
        """Normaliza aggregate_id (ids numéricos viram string)."""
        self.aggregate_id = str(self.aggregate_id) if self.aggregate_id is not None else ""
        if not self.aggregate_id:
            raise ValueError("aggregate_id é obrigatório")

    @property
    @abstractmethod
    def aggregate_type(self) -> str:
        """Tipo do agregado que gerou este evento (ex: "Ticket")."""
        ...

    @property
    def event_type(self) -> str:
        """
        Retorna o tipo do evento.

        Usa ``event_name`` quando definido; caso contrário, o nome da classe.
        """
        return self.event_name or self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """
        Serializa evento para dicionário.

        Usado pelo Event Store, pelo publisher Celery e pelo log estruturado.
        """
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "aggregate_id": self.aggregate_id,
            "aggregate_type": self.aggregate_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
            "data": self._get_event_data(),
        }

    def _get_event_data(self) -> Dict[str, Any]:
        """
        Retorna dados específicos do evento, já serializáveis em JSON.

        Datetimes viram ISO-8601 e Enums viram seu valor.
        """
        base_fields = {"event_id", "aggregate_id", "occurred_at", "version"}
        return {
            key: _serializar(value)
            for key, value in self.__dict__.items()
            if key not in base_fields and not key.startswith("_")
        }

    def __repr__(self) -> str:
        return (
            f"{self.event_type}("
            f"event_id={self.event_id[:8]}..., "
            f"aggregate_id={self.aggregate_id}, "
            f"occurred_at={self.occurred_at.isoformat()}"
            f")"
        )


def _serializar(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    return value
