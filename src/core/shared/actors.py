"""
Atores - quem executa operações no Help Desk.

Papéis:
- USUARIO: solicitante, abre e acompanha os próprios tickets
- ATENDENTE: técnico que assume e trabalha tickets das suas categorias
- ADMIN: ignora guardas de propriedade
"""

from dataclasses import dataclass
from enum import Enum


class Papel(Enum):
    """Papel do ator (valores persistidos/usados na API)."""

    USUARIO = "user"
    ATENDENTE = "attendant"
    ADMIN = "admin"

    @classmethod
    def from_string(cls, value: str) -> "Papel":
        try:
            return cls[value.upper()]
        except KeyError:
            pass

        for papel in cls:
            if papel.value == value.lower():
                return papel

        raise ValueError(f"Papel inválido: {value}")


@dataclass(frozen=True)
class Ator:
    """Identidade + papel de quem chama uma operação."""

    id: int
    papel: Papel

    @property
    def e_admin(self) -> bool:
        return self.papel == Papel.ADMIN

    @property
    def e_atendente(self) -> bool:
        return self.papel == Papel.ATENDENTE

    @property
    def e_usuario(self) -> bool:
        return self.papel == Papel.USUARIO
