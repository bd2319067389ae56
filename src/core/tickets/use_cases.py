"""
Use Cases (Application Services) do Domínio de Tickets.

Este módulo contém os casos de uso da aplicação, que orquestram
a lógica de negócio coordenando entidades, repositórios e eventos.

Use Cases implementados:
- CriarTicketService: Abre ticket (prazos de SLA + atendente inicial)
- AssumirTicketService: Atendente assume ticket sem responsável
- AtualizarTicketService: Status/prioridade/atendente (atendentes e admins)
- SolicitarAprovacaoService / AprovarTicketService / RejeitarTicketService
- FecharTicketService / ReabrirTicketService
- ExcluirTicketService: Exclusão definitiva (admin)
- AdicionarMensagemService / ListarHistoricoService
- ObterTicketService / ListarTicketsService

Responsabilidades dos Use Cases:
- Aplicar guardas de papel e propriedade
- Coordenar entidades
- Gerenciar transações (via UoW)
- Registrar histórico e disparar eventos de domínio
- Retornar DTOs de saída

Leitura, guarda, escrita condicional e linha de histórico acontecem
dentro do mesmo ``with self.uow``. Eventos só saem após o commit.
"""

from typing import List, Optional
import logging

from src.core.categorias.assignment import MotorAtribuicao
from src.core.categorias.ports import CategoriaRepository
from src.core.shared.actors import Ator
from src.core.shared.exceptions import (
    CategoryInactiveError,
    ConcurrencyError,
    EntityNotFoundError,
    ForbiddenError,
    InvalidAttendantError,
    InvalidTransitionError,
    NotClaimableError,
    ValidationError,
)
from src.core.shared.interfaces import Clock, SystemClock, UnitOfWork
from src.core.sla.deadlines import calcular_prazos

from .dtos import (
    AtualizarTicketInputDTO,
    CriarTicketInputDTO,
    HistoricoOutputDTO,
    TicketOutputDTO,
)
from .entities import HistoricoTicket, TicketEntity, TicketPriority, TicketStatus
from .events import (
    TicketAprovacaoSolicitadaEvent,
    TicketAtribuidoEvent,
    TicketCriadoEvent,
    TicketExcluidoEvent,
    TicketMensagemAdicionadaEvent,
    TicketStatusAlteradoEvent,
)
from .policies import PoliticaAcessoTicket
from .ports import HistoricoRepository, TicketRepository

logger = logging.getLogger(__name__)

MENSAGEM_MAX_LENGTH = 5000


def _obter_ticket(ticket_repo: TicketRepository, ticket_id: int) -> TicketEntity:
    ticket = ticket_repo.get_by_id(ticket_id)
    if not ticket:
        raise EntityNotFoundError(
            f"Ticket {ticket_id} não encontrado",
            entity_type="Ticket",
            entity_id=ticket_id,
        )
    return ticket


def _evento_status(ticket: TicketEntity, anterior: TicketStatus, ator_id: int,
                   motivo: Optional[str] = None) -> TicketStatusAlteradoEvent:
    return TicketStatusAlteradoEvent(
        aggregate_id=ticket.id,
        status_anterior=anterior.value,
        status_novo=ticket.status.value,
        alterado_por_id=ator_id,
        solicitante_id=ticket.solicitante_id,
        atendente_id=ticket.atendente_id,
        motivo=motivo,
    )


def _parse_prioridade(valor: str) -> TicketPriority:
    try:
        return TicketPriority.from_string(valor)
    except (ValueError, AttributeError):
        raise ValidationError(f"Prioridade inválida: {valor}", field="prioridade")


class CriarTicketService:
    """
    Use Case: Abrir um novo ticket.

    Fluxo:
    1. Buscar categoria (precisa estar ativa)
    2. Validar dados personalizados contra os campos da categoria
    3. Calcular prazos de SLA com o SLA vigente da categoria
    4. Selecionar atendente inicial (motor de atribuição)
    5. Persistir ticket + histórico "Ticket criado"
    6. Disparar TicketCriadoEvent

    Example:
        service = CriarTicketService(
            ticket_repo, historico_repo, categoria_repo, motor, uow, clock
        )
        output = service.execute(CriarTicketInputDTO(
            solicitante_id=10,
            categoria_id=1,
            assunto="Impressora não imprime",
            descricao="Erro de papel atolado",
            dados_personalizados={"urgencia": "Alta"},
        ))
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        historico_repo: HistoricoRepository,
        categoria_repo: CategoriaRepository,
        motor: MotorAtribuicao,
        uow: UnitOfWork,
        clock: Optional[Clock] = None,
    ):
        self.ticket_repo = ticket_repo
        self.historico_repo = historico_repo
        self.categoria_repo = categoria_repo
        self.motor = motor
        self.uow = uow
        self.clock = clock or SystemClock()

    def execute(self, input_dto: CriarTicketInputDTO) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Categoria não existe
            CategoryInactiveError: Categoria desativada
            ValidationError: Dados de entrada inválidos
        """
        with self.uow:
            categoria = self.categoria_repo.get_by_id(input_dto.categoria_id)
            if not categoria:
                raise EntityNotFoundError(
                    f"Categoria {input_dto.categoria_id} não encontrada",
                    entity_type="Categoria",
                    entity_id=input_dto.categoria_id,
                )
            if not categoria.ativa:
                raise CategoryInactiveError(
                    f"Categoria '{categoria.nome}' está desativada"
                )

            prioridade = _parse_prioridade(input_dto.prioridade)
            dados = categoria.validar_dados(input_dto.dados_personalizados)

            agora = self.clock.now()
            prazos = calcular_prazos(
                agora,
                categoria.horas_primeira_resposta,
                categoria.horas_resolucao,
            )
            atendente_id = self.motor.selecionar_atendente(categoria.id, dados)

            ticket = TicketEntity.criar(
                solicitante_id=input_dto.solicitante_id,
                categoria_id=categoria.id,
                assunto=input_dto.assunto,
                descricao=input_dto.descricao,
                prazo_primeira_resposta=prazos.primeira_resposta,
                prazo_resolucao=prazos.resolucao,
                agora=agora,
                prioridade=prioridade,
                dados_personalizados=dados,
                atendente_id=atendente_id,
            )
            self.ticket_repo.save(ticket)

            self.historico_repo.adicionar(HistoricoTicket(
                ticket_id=ticket.id,
                autor_id=ticket.solicitante_id,
                mensagem="Ticket criado",
                criado_em=agora,
            ))

            self.uow.publish_event(
                TicketCriadoEvent(
                    aggregate_id=ticket.id,
                    solicitante_id=ticket.solicitante_id,
                    categoria_id=ticket.categoria_id,
                    atendente_id=ticket.atendente_id,
                    assunto=ticket.assunto,
                    prioridade=ticket.prioridade.value,
                )
            )

        logger.info(
            f"Ticket {ticket.id} criado na categoria {categoria.id} "
            f"(atendente={ticket.atendente_id})"
        )
        return TicketOutputDTO.from_entity(ticket)


class AssumirTicketService:
    """
    Use Case: Atendente assume ticket sem responsável.

    Dois atendentes assumindo o mesmo ticket ao mesmo tempo: a escrita
    condicional do repositório deixa passar só um; o outro recebe
    NotClaimableError.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        historico_repo: HistoricoRepository,
        politica: PoliticaAcessoTicket,
        uow: UnitOfWork,
        clock: Optional[Clock] = None,
    ):
        self.ticket_repo = ticket_repo
        self.historico_repo = historico_repo
        self.politica = politica
        self.uow = uow
        self.clock = clock or SystemClock()

    def execute(self, ticket_id: int, ator: Ator) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Ticket não existe
            ForbiddenError: Ator não é atendente/admin ou não atende a categoria
            NotClaimableError: Ticket já atribuído (inclusive por corrida)
        """
        if ator.e_usuario:
            raise ForbiddenError(
                f"Usuário {ator.id} não pode assumir tickets",
                acao="assumir",
            )

        with self.uow:
            ticket = _obter_ticket(self.ticket_repo, ticket_id)

            if (
                ticket.atendente_id is None
                and not ator.e_admin
                and not self.politica.atendente_pode_agir(ticket, ator.id)
            ):
                raise ForbiddenError(
                    f"Atendente {ator.id} não atende a categoria {ticket.categoria_id}",
                    acao="assumir",
                )

            agora = self.clock.now()
            anterior = ticket.assumir(ator.id, agora)

            try:
                self.ticket_repo.save(ticket)
            except ConcurrencyError as e:
                logger.info(f"Ticket {ticket_id} assumido por outro atendente antes de {ator.id}")
                raise NotClaimableError(
                    f"Ticket {ticket_id} já foi assumido por outro atendente",
                    rule="corrida_assumir",
                ) from e

            self.historico_repo.adicionar(HistoricoTicket(
                ticket_id=ticket.id,
                autor_id=ator.id,
                mensagem="Ticket assumido pelo técnico",
                criado_em=agora,
            ))

            self.uow.publish_event(
                TicketAtribuidoEvent(
                    aggregate_id=ticket.id,
                    atendente_id=ator.id,
                    atendente_anterior_id=None,
                    atribuido_por_id=ator.id,
                )
            )
            if anterior != ticket.status:
                self.uow.publish_event(_evento_status(ticket, anterior, ator.id))

        return TicketOutputDTO.from_entity(ticket)


class AtualizarTicketService:
    """
    Use Case: Atualização genérica (status, prioridade, atendente).

    Usada por atendentes e admins. Toda mudança de status gera linha de
    histórico e TicketStatusAlteradoEvent. Se um atendente muda o status
    de um ticket sem responsável, ele passa a ser o responsável.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        historico_repo: HistoricoRepository,
        politica: PoliticaAcessoTicket,
        uow: UnitOfWork,
        clock: Optional[Clock] = None,
    ):
        self.ticket_repo = ticket_repo
        self.historico_repo = historico_repo
        self.politica = politica
        self.uow = uow
        self.clock = clock or SystemClock()

    def execute(
        self,
        ticket_id: int,
        ator: Ator,
        input_dto: AtualizarTicketInputDTO,
    ) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Ticket não existe
            ForbiddenError: Solicitante, ou atendente sem acesso ao ticket
            InvalidTransitionError: Status desconhecido ou transição ilegal
            ValidationError: Prioridade inválida
            InvalidAttendantError: Novo atendente não atende a categoria
            ConcurrencyError: Ticket alterado por outro ator no meio da operação
        """
        with self.uow:
            ticket = _obter_ticket(self.ticket_repo, ticket_id)
            self.politica.exigir_acesso(ticket, ator, "atualizar", permite_solicitante=False)

            if input_dto.vazio:
                return TicketOutputDTO.from_entity(ticket)

            agora = self.clock.now()
            historico: List[str] = []
            eventos = []

            novo_status = None
            if input_dto.status is not None:
                try:
                    novo_status = TicketStatus.from_string(input_dto.status)
                except (ValueError, AttributeError):
                    raise InvalidTransitionError(
                        f"Status inválido: {input_dto.status}",
                        rule="status_desconhecido",
                    )
                if novo_status == ticket.status:
                    novo_status = None

            atendente_id = input_dto.atendente_id
            if (
                atendente_id is None
                and novo_status is not None
                and ticket.atendente_id is None
                and ator.e_atendente
            ):
                atendente_id = ator.id

            if atendente_id is not None and atendente_id != ticket.atendente_id:
                if not self.politica.motor.pode_assumir(ticket.categoria_id, atendente_id):
                    raise InvalidAttendantError(
                        f"Atendente {atendente_id} não atende a categoria {ticket.categoria_id}",
                        atendente_id=atendente_id,
                    )
                anterior_id = ticket.atribuir_a(atendente_id, agora)
                historico.append(f"Ticket atribuído ao atendente {atendente_id}")
                eventos.append(TicketAtribuidoEvent(
                    aggregate_id=ticket.id,
                    atendente_id=atendente_id,
                    atendente_anterior_id=anterior_id,
                    atribuido_por_id=ator.id,
                ))

            if novo_status is not None:
                anterior = ticket.alterar_status(novo_status, agora)
                historico.append(
                    f'Status alterado de "{anterior.rotulo}" para "{novo_status.rotulo}"'
                )
                eventos.append(_evento_status(ticket, anterior, ator.id))

            if input_dto.prioridade is not None:
                prioridade = _parse_prioridade(input_dto.prioridade)
                if prioridade != ticket.prioridade:
                    anterior_p = ticket.alterar_prioridade(prioridade, agora)
                    historico.append(
                        f"Prioridade alterada de {anterior_p.value} para {prioridade.value}"
                    )

            if not historico:
                return TicketOutputDTO.from_entity(ticket)

            self.ticket_repo.save(ticket)

            for mensagem in historico:
                self.historico_repo.adicionar(HistoricoTicket(
                    ticket_id=ticket.id,
                    autor_id=ator.id,
                    mensagem=mensagem,
                    criado_em=agora,
                ))
            for evento in eventos:
                self.uow.publish_event(evento)

        return TicketOutputDTO.from_entity(ticket)


class SolicitarAprovacaoService:
    """
    Use Case: Atendente finaliza e pede confirmação do solicitante.

    Apenas o atendente responsável (ou admin).
    """

    MENSAGEM = (
        "Chamado finalizado pelo atendente - aguardando aprovação "
        "do solicitante para encerramento"
    )

    def __init__(
        self,
        ticket_repo: TicketRepository,
        historico_repo: HistoricoRepository,
        uow: UnitOfWork,
        clock: Optional[Clock] = None,
    ):
        self.ticket_repo = ticket_repo
        self.historico_repo = historico_repo
        self.uow = uow
        self.clock = clock or SystemClock()

    def execute(self, ticket_id: int, ator: Ator) -> TicketOutputDTO:
        """
        Raises:
            ForbiddenError: Ator não é o atendente responsável nem admin
            InvalidStateError: Já aguardando aprovação ou encerrado
        """
        with self.uow:
            ticket = _obter_ticket(self.ticket_repo, ticket_id)

            if not ator.e_admin and (not ator.e_atendente or ticket.atendente_id != ator.id):
                raise ForbiddenError(
                    f"Apenas o atendente responsável pode finalizar o ticket {ticket_id}",
                    acao="solicitar_aprovacao",
                )

            agora = self.clock.now()
            anterior = ticket.solicitar_aprovacao(agora)
            self.ticket_repo.save(ticket)

            self.historico_repo.adicionar(HistoricoTicket(
                ticket_id=ticket.id,
                autor_id=ator.id,
                mensagem=self.MENSAGEM,
                criado_em=agora,
            ))

            self.uow.publish_event(
                TicketAprovacaoSolicitadaEvent(
                    aggregate_id=ticket.id,
                    solicitante_id=ticket.solicitante_id,
                    solicitado_por_id=ator.id,
                )
            )
            self.uow.publish_event(_evento_status(ticket, anterior, ator.id))

        return TicketOutputDTO.from_entity(ticket)


class _RespostaAprovacaoService:
    """Base de aprovar/rejeitar: só o solicitante original responde."""

    acao = ""

    def __init__(
        self,
        ticket_repo: TicketRepository,
        historico_repo: HistoricoRepository,
        uow: UnitOfWork,
        clock: Optional[Clock] = None,
    ):
        self.ticket_repo = ticket_repo
        self.historico_repo = historico_repo
        self.uow = uow
        self.clock = clock or SystemClock()

    def _exigir_solicitante(self, ticket: TicketEntity, ator: Ator) -> None:
        if ticket.solicitante_id != ator.id:
            raise ForbiddenError(
                f"Apenas o solicitante pode {self.acao} o ticket {ticket.id}",
                acao=self.acao,
            )

    def _registrar(self, ticket: TicketEntity, ator: Ator, anterior: TicketStatus,
                   mensagem: str, motivo: Optional[str] = None) -> None:
        self.ticket_repo.save(ticket)
        self.historico_repo.adicionar(HistoricoTicket(
            ticket_id=ticket.id,
            autor_id=ator.id,
            mensagem=mensagem,
            criado_em=ticket.atualizado_em,
        ))
        self.uow.publish_event(_evento_status(ticket, anterior, ator.id, motivo))


class AprovarTicketService(_RespostaAprovacaoService):
    """
    Use Case: Solicitante confirma a resolução (AGUARDANDO_APROVACAO → FECHADO).
    """

    acao = "aprovar"

    def execute(self, ticket_id: int, ator: Ator) -> TicketOutputDTO:
        """
        Raises:
            ForbiddenError: Ator não é o solicitante
            InvalidStateError: Ticket não está aguardando aprovação
        """
        with self.uow:
            ticket = _obter_ticket(self.ticket_repo, ticket_id)
            self._exigir_solicitante(ticket, ator)

            anterior = ticket.aprovar(self.clock.now())
            self._registrar(
                ticket,
                ator,
                anterior,
                "Chamado aprovado pelo solicitante - problema confirmado como resolvido",
            )

        return TicketOutputDTO.from_entity(ticket)


class RejeitarTicketService(_RespostaAprovacaoService):
    """
    Use Case: Solicitante rejeita a resolução (volta para EM_ATENDIMENTO).
    """

    acao = "rejeitar"

    def execute(self, ticket_id: int, ator: Ator, motivo: Optional[str] = None) -> TicketOutputDTO:
        with self.uow:
            ticket = _obter_ticket(self.ticket_repo, ticket_id)
            self._exigir_solicitante(ticket, ator)

            anterior = ticket.rejeitar(self.clock.now())

            motivo = (motivo or "").strip() or None
            if motivo:
                mensagem = (
                    "Chamado rejeitado pelo solicitante - problema ainda não resolvido. "
                    f"Observação: {motivo}"
                )
            else:
                mensagem = (
                    "Chamado rejeitado pelo solicitante - problema ainda não resolvido, "
                    "retornado para atendimento"
                )
            self._registrar(ticket, ator, anterior, mensagem, motivo)

        return TicketOutputDTO.from_entity(ticket)


class FecharTicketService:
    """
    Use Case: Fechar um ticket (atendente com acesso ou admin).

    Atendente que fecha um ticket sem responsável passa a ser o
    responsável. Admin não fecha ticket sem atendente.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        historico_repo: HistoricoRepository,
        politica: PoliticaAcessoTicket,
        uow: UnitOfWork,
        clock: Optional[Clock] = None,
    ):
        self.ticket_repo = ticket_repo
        self.historico_repo = historico_repo
        self.politica = politica
        self.uow = uow
        self.clock = clock or SystemClock()

    def execute(self, ticket_id: int, ator: Ator) -> TicketOutputDTO:
        """
        Raises:
            ForbiddenError: Solicitante ou atendente sem acesso
            InvalidTransitionError: Ticket já fechado ou sem atendente
        """
        with self.uow:
            ticket = _obter_ticket(self.ticket_repo, ticket_id)
            self.politica.exigir_acesso(ticket, ator, "fechar", permite_solicitante=False)

            agora = self.clock.now()
            historico: List[str] = []
            eventos = []

            if ticket.atendente_id is None and ator.e_atendente and ticket.status != TicketStatus.FECHADO:
                ticket.atribuir_a(ator.id, agora)
                historico.append(f"Ticket atribuído ao atendente {ator.id}")
                eventos.append(TicketAtribuidoEvent(
                    aggregate_id=ticket.id,
                    atendente_id=ator.id,
                    atendente_anterior_id=None,
                    atribuido_por_id=ator.id,
                ))

            anterior = ticket.fechar(agora)
            historico.append("Ticket fechado")
            eventos.append(_evento_status(ticket, anterior, ator.id))
            self.ticket_repo.save(ticket)

            for mensagem in historico:
                self.historico_repo.adicionar(HistoricoTicket(
                    ticket_id=ticket.id,
                    autor_id=ator.id,
                    mensagem=mensagem,
                    criado_em=agora,
                ))
            for evento in eventos:
                self.uow.publish_event(evento)

        return TicketOutputDTO.from_entity(ticket)


class ReabrirTicketService:
    """
    Use Case: Reabrir ticket fechado ou resolvido.

    A janela vem da categoria (``dias_reabertura``) ou, se ela não
    configurar, de ``dias_reabertura_padrao``. Prazos de SLA não são
    recalculados: um ticket reaberto pode já nascer violado.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        historico_repo: HistoricoRepository,
        categoria_repo: CategoriaRepository,
        politica: PoliticaAcessoTicket,
        uow: UnitOfWork,
        clock: Optional[Clock] = None,
        dias_reabertura_padrao: int = 7,
    ):
        self.ticket_repo = ticket_repo
        self.historico_repo = historico_repo
        self.categoria_repo = categoria_repo
        self.politica = politica
        self.uow = uow
        self.clock = clock or SystemClock()
        self.dias_reabertura_padrao = dias_reabertura_padrao

    def execute(self, ticket_id: int, ator: Ator) -> TicketOutputDTO:
        """
        Raises:
            ForbiddenError: Ator sem acesso ao ticket
            InvalidTransitionError: Ticket não está fechado/resolvido
            ReopenWindowExpiredError: Fora da janela de reabertura
        """
        with self.uow:
            ticket = _obter_ticket(self.ticket_repo, ticket_id)
            self.politica.exigir_acesso(ticket, ator, "reabrir")

            categoria = self.categoria_repo.get_by_id(ticket.categoria_id)
            dias = self.dias_reabertura_padrao
            if categoria and categoria.dias_reabertura:
                dias = categoria.dias_reabertura

            agora = self.clock.now()
            anterior = ticket.reabrir(agora, dias)
            self.ticket_repo.save(ticket)

            self.historico_repo.adicionar(HistoricoTicket(
                ticket_id=ticket.id,
                autor_id=ator.id,
                mensagem="Ticket reaberto",
                criado_em=agora,
            ))
            self.uow.publish_event(_evento_status(ticket, anterior, ator.id))

        return TicketOutputDTO.from_entity(ticket)


class ExcluirTicketService:
    """Use Case: Exclusão definitiva (admin). Histórico vai junto."""

    def __init__(
        self,
        ticket_repo: TicketRepository,
        historico_repo: HistoricoRepository,
        uow: UnitOfWork,
    ):
        self.ticket_repo = ticket_repo
        self.historico_repo = historico_repo
        self.uow = uow

    def execute(self, ticket_id: int, ator: Ator) -> None:
        if not ator.e_admin:
            raise ForbiddenError(
                "Apenas administradores podem excluir tickets",
                acao="excluir",
            )

        with self.uow:
            ticket = _obter_ticket(self.ticket_repo, ticket_id)
            removidas = self.historico_repo.delete_by_ticket(ticket.id)
            self.ticket_repo.delete(ticket.id)

            self.uow.publish_event(
                TicketExcluidoEvent(aggregate_id=ticket.id, excluido_por_id=ator.id)
            )

        logger.info(
            f"Ticket {ticket_id} excluído por {ator.id} ({removidas} entradas de histórico)"
        )


class AdicionarMensagemService:
    """
    Use Case: Adicionar mensagem (e anexo opcional) ao histórico.

    Não altera status. Solicitante dono, atendente com acesso ou admin.
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        historico_repo: HistoricoRepository,
        politica: PoliticaAcessoTicket,
        uow: UnitOfWork,
        clock: Optional[Clock] = None,
    ):
        self.ticket_repo = ticket_repo
        self.historico_repo = historico_repo
        self.politica = politica
        self.uow = uow
        self.clock = clock or SystemClock()

    def execute(
        self,
        ticket_id: int,
        ator: Ator,
        mensagem: str,
        anexo: Optional[str] = None,
    ) -> HistoricoOutputDTO:
        """
        Raises:
            ForbiddenError: Ator sem acesso ao ticket
            ValidationError: Mensagem vazia (sem anexo) ou longa demais
        """
        mensagem = (mensagem or "").strip()
        if not mensagem and not anexo:
            raise ValidationError("Mensagem é obrigatória", field="mensagem")
        if len(mensagem) > MENSAGEM_MAX_LENGTH:
            raise ValidationError(
                f"Mensagem deve ter no máximo {MENSAGEM_MAX_LENGTH} caracteres",
                field="mensagem",
            )

        with self.uow:
            ticket = _obter_ticket(self.ticket_repo, ticket_id)
            self.politica.exigir_acesso(ticket, ator, "comentar")

            entrada = self.historico_repo.adicionar(HistoricoTicket(
                ticket_id=ticket.id,
                autor_id=ator.id,
                mensagem=mensagem,
                criado_em=self.clock.now(),
                anexo=anexo,
            ))

            self.uow.publish_event(
                TicketMensagemAdicionadaEvent(
                    aggregate_id=ticket.id,
                    autor_id=ator.id,
                    solicitante_id=ticket.solicitante_id,
                    atendente_id=ticket.atendente_id,
                    preview=mensagem[:100],
                    tem_anexo=bool(anexo),
                )
            )

        return HistoricoOutputDTO.from_entity(entrada)


class ListarHistoricoService:
    """
    Use Case: Histórico do ticket em ordem cronológica.

    Não usa UoW pois é operação de leitura (não precisa de transação).
    """

    def __init__(
        self,
        ticket_repo: TicketRepository,
        historico_repo: HistoricoRepository,
        politica: PoliticaAcessoTicket,
    ):
        self.ticket_repo = ticket_repo
        self.historico_repo = historico_repo
        self.politica = politica

    def execute(self, ticket_id: int, ator: Ator) -> List[HistoricoOutputDTO]:
        ticket = _obter_ticket(self.ticket_repo, ticket_id)
        self.politica.exigir_acesso(ticket, ator, "visualizar")
        return [
            HistoricoOutputDTO.from_entity(e)
            for e in self.historico_repo.list_by_ticket(ticket.id)
        ]


class ObterTicketService:
    """
    Use Case: Obter detalhes de um ticket específico.

    Com ``sla_service`` configurado, o DTO sai com ``sla_status``.
    """

    def __init__(self, ticket_repo: TicketRepository, politica: PoliticaAcessoTicket,
                 sla_service=None):
        self.ticket_repo = ticket_repo
        self.politica = politica
        self.sla_service = sla_service

    def execute(self, ticket_id: int, ator: Ator) -> TicketOutputDTO:
        """
        Raises:
            EntityNotFoundError: Se ticket não existe
            ForbiddenError: Ator não pode ver o ticket
        """
        ticket = _obter_ticket(self.ticket_repo, ticket_id)
        self.politica.exigir_acesso(ticket, ator, "visualizar")

        sla_status = None
        if self.sla_service is not None:
            sla_status = self.sla_service.obter_status(ticket).value
        return TicketOutputDTO.from_entity(ticket, sla_status=sla_status)


class ListarTicketsService:
    """
    Use Case: Listar tickets visíveis ao ator.

    Admin vê todos; atendente vê os seus e os sem responsável das
    categorias que atende; solicitante vê os próprios.
    """

    def __init__(self, ticket_repo: TicketRepository, politica: PoliticaAcessoTicket):
        self.ticket_repo = ticket_repo
        self.politica = politica

    def execute(self, ator: Ator, status: Optional[str] = None) -> List[TicketOutputDTO]:
        if status:
            try:
                tickets = self.ticket_repo.list_by_status([TicketStatus.from_string(status)])
            except ValueError:
                raise ValidationError(f"Status inválido: {status}", field="status")
        else:
            tickets = self.ticket_repo.list_all()

        return [
            TicketOutputDTO.from_entity(t)
            for t in tickets
            if self.politica.pode_acessar(t, ator)
        ]
