"""
Guardas de acesso a tickets.

- Admin ignora as guardas de propriedade
- Solicitante só age sobre os próprios tickets (e só nas operações que
  permitem solicitante)
- Atendente age sobre tickets atribuídos a ele, ou sem atendente numa
  categoria que ele atende
"""

from src.core.categorias.assignment import MotorAtribuicao
from src.core.shared.actors import Ator
from src.core.shared.exceptions import ForbiddenError

from .entities import TicketEntity


class PoliticaAcessoTicket:
    def __init__(self, motor: MotorAtribuicao):
        self.motor = motor

    def atendente_pode_agir(self, ticket: TicketEntity, atendente_id: int) -> bool:
        if ticket.atendente_id is not None:
            return ticket.atendente_id == atendente_id
        return self.motor.pode_assumir(ticket.categoria_id, atendente_id)

    def pode_acessar(
        self,
        ticket: TicketEntity,
        ator: Ator,
        permite_solicitante: bool = True,
    ) -> bool:
        if ator.e_admin:
            return True
        if ator.e_atendente:
            return self.atendente_pode_agir(ticket, ator.id)
        return permite_solicitante and ticket.solicitante_id == ator.id

    def exigir_acesso(
        self,
        ticket: TicketEntity,
        ator: Ator,
        acao: str,
        permite_solicitante: bool = True,
    ) -> None:
        """
        Raises:
            ForbiddenError: Ator sem papel ou propriedade para a ação
        """
        if not self.pode_acessar(ticket, ator, permite_solicitante):
            raise ForbiddenError(
                f"Usuário {ator.id} ({ator.papel.value}) não pode {acao} o ticket {ticket.id}",
                acao=acao,
            )
