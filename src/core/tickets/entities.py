"""
Entidades do Domínio de Tickets.

Este módulo define a máquina de estados do ticket: o modelo
autoritativo do ciclo de vida, com transições legais e invariantes.

Entidades:
- TicketEntity: Agregado principal do domínio
- TicketStatus: Estados armazenados de um ticket
- TicketPriority: Níveis de prioridade
- HistoricoTicket: Registro de auditoria append-only

Regras de Negócio Encapsuladas:
- Prazos de SLA imutáveis após a criação
- Transições de status controladas (ver TRANSICOES_ATUALIZACAO)
- Ticket só sai de ABERTO com atendente definido
- Reabertura limitada a uma janela em dias após o fechamento

"Atrasado" não é um status: é derivado dos prazos (ver src.core.sla).
"""

from dataclasses import dataclass, field
from datetime import datetime, timedelta
from enum import Enum
from typing import Dict, FrozenSet, Optional

from src.core.categorias.entities import ValorCampo
from src.core.shared.exceptions import (
    InvalidStateError,
    InvalidTransitionError,
    NotClaimableError,
    ReopenWindowExpiredError,
    ValidationError,
)


class TicketStatus(Enum):
    """
    Estados armazenados de um ticket.

    Fluxo de Estados:
        ABERTO → EM_ATENDIMENTO → {AGUARDANDO_USUARIO, AGUARDANDO_TERCEIROS,
                                   AGUARDANDO_APROVACAO} → RESOLVIDO → FECHADO

        AGUARDANDO_APROVACAO → EM_ATENDIMENTO (rejeição)
        AGUARDANDO_APROVACAO → FECHADO (aprovação)
        FECHADO/RESOLVIDO → ABERTO (reabrir)
    """

    ABERTO = "open"
    EM_ATENDIMENTO = "in_progress"
    AGUARDANDO_USUARIO = "pending_user"
    AGUARDANDO_TERCEIROS = "pending_third_party"
    AGUARDANDO_APROVACAO = "pending_approval"
    RESOLVIDO = "resolved"
    FECHADO = "closed"

    @property
    def rotulo(self) -> str:
        """Rótulo exibido no histórico."""
        return _ROTULOS_STATUS[self]

    @classmethod
    def from_string(cls, value: str) -> "TicketStatus":
        """
        Converte string para enum (pelo valor "in_progress" ou nome "EM_ATENDIMENTO").

        Raises:
            ValueError: Se valor inválido
        """
        for status in cls:
            if status.value == value:
                return status
        try:
            return cls[value.upper().replace(" ", "_")]
        except KeyError:
            raise ValueError(f"Status inválido: {value}")


_ROTULOS_STATUS = {
    TicketStatus.ABERTO: "Aberto",
    TicketStatus.EM_ATENDIMENTO: "Em atendimento",
    TicketStatus.AGUARDANDO_USUARIO: "Aguardando usuário",
    TicketStatus.AGUARDANDO_TERCEIROS: "Aguardando terceiros",
    TicketStatus.AGUARDANDO_APROVACAO: "Aguardando aprovação",
    TicketStatus.RESOLVIDO: "Resolvido",
    TicketStatus.FECHADO: "Fechado",
}

# Status em que o prazo de resolução ainda está correndo.
STATUS_PRAZO_RESOLUCAO: FrozenSet[TicketStatus] = frozenset({
    TicketStatus.EM_ATENDIMENTO,
    TicketStatus.AGUARDANDO_USUARIO,
    TicketStatus.AGUARDANDO_TERCEIROS,
})

STATUS_ENCERRADOS: FrozenSet[TicketStatus] = frozenset({
    TicketStatus.RESOLVIDO,
    TicketStatus.FECHADO,
})

# Transições permitidas pela atualização genérica (update). Aprovação,
# fechamento e reabertura têm operações próprias.
TRANSICOES_ATUALIZACAO: Dict[TicketStatus, FrozenSet[TicketStatus]] = {
    TicketStatus.ABERTO: frozenset({TicketStatus.EM_ATENDIMENTO}),
    TicketStatus.EM_ATENDIMENTO: frozenset({
        TicketStatus.AGUARDANDO_USUARIO,
        TicketStatus.AGUARDANDO_TERCEIROS,
        TicketStatus.RESOLVIDO,
    }),
    TicketStatus.AGUARDANDO_USUARIO: frozenset({
        TicketStatus.EM_ATENDIMENTO,
        TicketStatus.AGUARDANDO_TERCEIROS,
        TicketStatus.RESOLVIDO,
    }),
    TicketStatus.AGUARDANDO_TERCEIROS: frozenset({
        TicketStatus.EM_ATENDIMENTO,
        TicketStatus.AGUARDANDO_USUARIO,
        TicketStatus.RESOLVIDO,
    }),
    TicketStatus.AGUARDANDO_APROVACAO: frozenset(),
    TicketStatus.RESOLVIDO: frozenset(),
    TicketStatus.FECHADO: frozenset(),
}


class TicketPriority(Enum):
    """Níveis de prioridade (não alteram os prazos de SLA)."""

    BAIXA = "low"
    MEDIA = "medium"
    ALTA = "high"
    URGENTE = "urgent"

    @classmethod
    def from_string(cls, value: str) -> "TicketPriority":
        """
        Converte string para enum (pelo valor "high" ou nome "ALTA").

        Raises:
            ValueError: Se valor inválido
        """
        for priority in cls:
            if priority.value == value:
                return priority
        try:
            return cls[value.upper()]
        except KeyError:
            raise ValueError(f"Prioridade inválida: {value}")


@dataclass(frozen=True)
class HistoricoTicket:
    """
    Registro de auditoria append-only.

    Criado em toda transição de status e em toda mensagem trocada.
    Nunca alterado nem excluído individualmente: some junto com o ticket.
    """

    ticket_id: int
    autor_id: int
    mensagem: str
    criado_em: datetime
    anexo: Optional[str] = None
    id: Optional[int] = None


@dataclass
class TicketEntity:
    """
    Entidade de Domínio: Ticket.

    Invariantes:
    - Assunto com 3 a 200 caracteres, descrição obrigatória
    - Prazos de SLA fixados na criação e nunca recalculados
    - ``atendente_id`` nulo apenas enquanto o status é ABERTO
    - Status só muda pelas transições desta classe

    Attributes:
        id: Identificador numérico (atribuído pelo repositório)
        solicitante_id: Usuário que abriu o ticket
        atendente_id: Atendente responsável (ou None)
        categoria_id: Categoria do ticket
        assunto: Resumo do problema
        descricao: Descrição detalhada
        status: Estado atual
        prioridade: Nível de prioridade
        prazo_primeira_resposta: Prazo de primeira resposta (UTC)
        prazo_resolucao: Prazo de resolução (UTC)
        dados_personalizados: Respostas aos campos da categoria
        criado_em / atualizado_em / fechado_em / reaberto_em: Timestamps
        versao: Versão para escrita condicional (concorrência otimista)
    """

    id: Optional[int] = None
    solicitante_id: int = 0
    atendente_id: Optional[int] = None
    categoria_id: int = 0
    assunto: str = ""
    descricao: str = ""
    status: TicketStatus = TicketStatus.ABERTO
    prioridade: TicketPriority = TicketPriority.MEDIA
    prazo_primeira_resposta: Optional[datetime] = None
    prazo_resolucao: Optional[datetime] = None
    dados_personalizados: Dict[str, ValorCampo] = field(default_factory=dict)
    criado_em: Optional[datetime] = None
    atualizado_em: Optional[datetime] = None
    fechado_em: Optional[datetime] = None
    reaberto_em: Optional[datetime] = None
    versao: int = 0

    ASSUNTO_MIN_LENGTH = 3
    ASSUNTO_MAX_LENGTH = 200
    DESCRICAO_MAX_LENGTH = 5000

    @classmethod
    def criar(
        cls,
        solicitante_id: int,
        categoria_id: int,
        assunto: str,
        descricao: str,
        prazo_primeira_resposta: datetime,
        prazo_resolucao: datetime,
        agora: datetime,
        prioridade: TicketPriority = TicketPriority.MEDIA,
        dados_personalizados: Optional[Dict[str, ValorCampo]] = None,
        atendente_id: Optional[int] = None,
    ) -> "TicketEntity":
        """
        Factory method para criar ticket com validações.

        Os prazos chegam prontos (ver ``calcular_prazos``) e o atendente
        inicial vem do motor de atribuição; o ticket nasce ABERTO mesmo
        quando já tem atendente.

        Raises:
            ValidationError: Se dados de entrada inválidos
        """
        cls._validar_assunto(assunto)
        cls._validar_descricao(descricao)
        if not solicitante_id:
            raise ValidationError("Solicitante é obrigatório", field="solicitante_id")

        return cls(
            solicitante_id=solicitante_id,
            atendente_id=atendente_id,
            categoria_id=categoria_id,
            assunto=assunto.strip(),
            descricao=descricao.strip(),
            status=TicketStatus.ABERTO,
            prioridade=prioridade,
            prazo_primeira_resposta=prazo_primeira_resposta,
            prazo_resolucao=prazo_resolucao,
            dados_personalizados=dict(dados_personalizados or {}),
            criado_em=agora,
            atualizado_em=agora,
        )

    @classmethod
    def _validar_assunto(cls, assunto: str) -> None:
        if not assunto or not assunto.strip():
            raise ValidationError("Assunto é obrigatório", field="assunto")

        tamanho = len(assunto.strip())
        if tamanho < cls.ASSUNTO_MIN_LENGTH:
            raise ValidationError(
                f"Assunto deve ter pelo menos {cls.ASSUNTO_MIN_LENGTH} caracteres",
                field="assunto",
            )
        if tamanho > cls.ASSUNTO_MAX_LENGTH:
            raise ValidationError(
                f"Assunto deve ter no máximo {cls.ASSUNTO_MAX_LENGTH} caracteres",
                field="assunto",
            )

    @classmethod
    def _validar_descricao(cls, descricao: str) -> None:
        if not descricao or not descricao.strip():
            raise ValidationError("Descrição é obrigatória", field="descricao")
        if len(descricao.strip()) > cls.DESCRICAO_MAX_LENGTH:
            raise ValidationError(
                f"Descrição deve ter no máximo {cls.DESCRICAO_MAX_LENGTH} caracteres",
                field="descricao",
            )

    # =========================================================================
    # Transições
    # =========================================================================

    def assumir(self, atendente_id: int, agora: datetime) -> TicketStatus:
        """
        Atendente assume ticket sem responsável.

        ABERTO → EM_ATENDIMENTO; em outros status não encerrados o
        status é mantido.

        Returns:
            Status anterior

        Raises:
            NotClaimableError: Ticket já tem atendente ou está encerrado
        """
        if self.atendente_id is not None:
            raise NotClaimableError(
                f"Ticket {self.id} já está atribuído ao atendente {self.atendente_id}"
            )
        if self.status in STATUS_ENCERRADOS:
            raise NotClaimableError(
                f"Ticket {self.id} está {self.status.rotulo.lower()}",
                rule="ticket_encerrado",
            )

        anterior = self.status
        self.atendente_id = atendente_id
        if self.status == TicketStatus.ABERTO:
            self.status = TicketStatus.EM_ATENDIMENTO
        self._tocar(agora)
        return anterior

    def alterar_status(self, novo_status: TicketStatus, agora: datetime) -> TicketStatus:
        """
        Transição genérica usada pela atualização de atendentes/admins.

        Returns:
            Status anterior

        Raises:
            InvalidTransitionError: Transição fora de TRANSICOES_ATUALIZACAO,
                ou saída de ABERTO sem atendente
        """
        if novo_status not in TRANSICOES_ATUALIZACAO[self.status]:
            raise InvalidTransitionError(
                f"Transição de {self.status.value} para {novo_status.value} não é permitida"
            )
        if self.atendente_id is None:
            raise InvalidTransitionError(
                "Ticket sem atendente não pode sair do status aberto",
                rule="atendente_obrigatorio",
            )

        anterior = self.status
        self.status = novo_status
        self._tocar(agora)
        return anterior

    def solicitar_aprovacao(self, agora: datetime) -> TicketStatus:
        """
        Atendente finaliza e pede confirmação ao solicitante.

        Raises:
            InvalidStateError: Já aguardando aprovação, sem atendente ou encerrado
        """
        if self.status == TicketStatus.AGUARDANDO_APROVACAO:
            raise InvalidStateError(
                f"Ticket {self.id} já está aguardando aprovação",
                rule="ja_aguardando_aprovacao",
            )
        if self.status in STATUS_ENCERRADOS:
            raise InvalidStateError(
                f"Ticket {self.id} está {self.status.rotulo.lower()}",
                rule="ticket_encerrado",
            )
        if self.atendente_id is None:
            raise InvalidStateError(
                f"Ticket {self.id} não possui atendente",
                rule="atendente_obrigatorio",
            )

        anterior = self.status
        self.status = TicketStatus.AGUARDANDO_APROVACAO
        self._tocar(agora)
        return anterior

    def aprovar(self, agora: datetime) -> TicketStatus:
        """
        Solicitante confirma a resolução: AGUARDANDO_APROVACAO → FECHADO.

        Raises:
            InvalidStateError: Ticket não está aguardando aprovação
        """
        self._exigir_aguardando_aprovacao()
        anterior = self.status
        self.status = TicketStatus.FECHADO
        self.fechado_em = agora
        self._tocar(agora)
        return anterior

    def rejeitar(self, agora: datetime) -> TicketStatus:
        """
        Solicitante rejeita a resolução: AGUARDANDO_APROVACAO → EM_ATENDIMENTO.

        Raises:
            InvalidStateError: Ticket não está aguardando aprovação
        """
        self._exigir_aguardando_aprovacao()
        anterior = self.status
        self.status = TicketStatus.EM_ATENDIMENTO
        self._tocar(agora)
        return anterior

    def fechar(self, agora: datetime) -> TicketStatus:
        """
        Fecha o ticket a partir de qualquer status não fechado.

        Raises:
            InvalidTransitionError: Ticket já fechado ou sem atendente
        """
        if self.status == TicketStatus.FECHADO:
            raise InvalidTransitionError(
                f"Ticket {self.id} já está fechado",
                rule="ticket_ja_fechado",
            )
        if self.atendente_id is None:
            raise InvalidTransitionError(
                f"Ticket {self.id} sem atendente não pode ser fechado",
                rule="atendente_obrigatorio",
            )
        anterior = self.status
        self.status = TicketStatus.FECHADO
        self.fechado_em = agora
        self._tocar(agora)
        return anterior

    def reabrir(self, agora: datetime, dias_janela: int) -> TicketStatus:
        """
        Reabre ticket fechado ou resolvido.

        A janela é medida a partir de ``fechado_em`` (ticket fechado) ou
        da última atualização (ticket resolvido). Os prazos de SLA
        originais são mantidos, assim como o atendente e ``fechado_em``.

        Raises:
            InvalidTransitionError: Ticket não está fechado/resolvido
            ReopenWindowExpiredError: Janela de reabertura expirada
        """
        if self.status not in STATUS_ENCERRADOS:
            raise InvalidTransitionError(
                f"Apenas tickets fechados ou resolvidos podem ser reabertos "
                f"(status atual: {self.status.value})",
                rule="apenas_encerrado_pode_reabrir",
            )
        encerrado_em = self.fechado_em if self.status == TicketStatus.FECHADO else self.atualizado_em
        if encerrado_em is not None and agora > encerrado_em + timedelta(days=dias_janela):
            raise ReopenWindowExpiredError(
                f"Ticket {self.id} encerrado há mais de {dias_janela} dias"
            )

        anterior = self.status
        self.status = TicketStatus.ABERTO
        self.reaberto_em = agora
        self._tocar(agora)
        return anterior

    def alterar_prioridade(self, prioridade: TicketPriority, agora: datetime) -> TicketPriority:
        """Altera prioridade. Prazos de SLA não são recalculados."""
        if self.status == TicketStatus.FECHADO:
            raise InvalidStateError(
                "Não é possível alterar prioridade de ticket fechado",
                rule="ticket_fechado_imutavel",
            )
        anterior = self.prioridade
        self.prioridade = prioridade
        self._tocar(agora)
        return anterior

    def atribuir_a(self, atendente_id: int, agora: datetime) -> Optional[int]:
        """
        Troca o atendente responsável.

        Returns:
            Atendente anterior
        """
        if not atendente_id:
            raise ValidationError("ID do atendente é obrigatório", field="atendente_id")
        if self.status == TicketStatus.FECHADO:
            raise InvalidStateError(
                "Não é possível atribuir ticket fechado",
                rule="ticket_fechado_imutavel",
            )
        anterior = self.atendente_id
        self.atendente_id = atendente_id
        self._tocar(agora)
        return anterior

    def _exigir_aguardando_aprovacao(self) -> None:
        if self.status != TicketStatus.AGUARDANDO_APROVACAO:
            raise InvalidStateError(
                f"Ticket {self.id} não está aguardando aprovação",
                rule="nao_aguardando_aprovacao",
            )

    def _tocar(self, agora: datetime) -> None:
        self.atualizado_em = agora

    @property
    def esta_atribuido(self) -> bool:
        return self.atendente_id is not None

    def __repr__(self) -> str:
        return (
            f"TicketEntity("
            f"id={self.id}, "
            f"assunto='{self.assunto[:20]}', "
            f"status={self.status.value}, "
            f"atendente_id={self.atendente_id}"
            f")"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TicketEntity):
            return False
        if self.id is None or other.id is None:
            return self is other
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id) if self.id is not None else id(self)
