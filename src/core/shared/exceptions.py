"""
Exceções de Domínio do Help Desk.

Este módulo define exceções específicas do domínio que permitem
comunicar erros de forma clara e tipada entre as camadas. A camada
de API converte cada uma delas em resposta via ``to_dict()``.

Hierarquia:
    DomainException (base)
    ├── ValidationError (validação de entrada)
    │   ├── InvalidAttendantError (regra aponta para atendente fora da categoria)
    │   └── UnknownFieldError (regra aponta para campo inexistente)
    ├── EntityNotFoundError (entidade não existe)
    ├── ForbiddenError (ator sem papel/propriedade para a operação)
    ├── ConcurrencyError (escrita condicional perdeu a corrida)
    └── BusinessRuleViolationError (regra de negócio violada)
        ├── InvalidTransitionError (transição de status não permitida)
        ├── InvalidStateError (estado atual não admite a operação)
        ├── NotClaimableError (ticket já possui atendente)
        ├── CategoryInactiveError (categoria desativada)
        └── ReopenWindowExpiredError (prazo de reabertura expirado)
"""

from typing import Optional


class DomainException(Exception):
    """
    Exceção base para todos os erros de domínio.

    Todas as exceções específicas do domínio devem herdar desta classe.
    Isso permite capturar qualquer erro de domínio de forma genérica.

    Example:
        try:
            service.execute(ticket_id, ator)
        except DomainException as e:
            logger.error(f"Erro de domínio: {e}")
    """

    def __init__(self, message: str, code: str = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> dict:
        """Serializa exceção para dicionário (útil para APIs)."""
        return {
            "error": self.code,
            "message": self.message,
        }


class ValidationError(DomainException):
    """
    Erro de validação de dados de entrada.

    Example:
        if not assunto.strip():
            raise ValidationError("Assunto é obrigatório", field="assunto")
    """

    def __init__(self, message: str, field: str = None, code: str = None):
        self.field = field
        if code is None:
            code = f"VALIDATION_ERROR_{field.upper()}" if field else "VALIDATION_ERROR"
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        return result


class InvalidAttendantError(ValidationError):
    """Atendente alvo de uma regra não está atribuído (ativo) à categoria."""

    def __init__(self, message: str, atendente_id: Optional[int] = None):
        self.atendente_id = atendente_id
        super().__init__(message, field="atendente_id", code="INVALID_ATTENDANT")


class UnknownFieldError(ValidationError):
    """Campo referenciado por uma regra não existe na categoria."""

    def __init__(self, message: str, campo: Optional[str] = None):
        self.campo = campo
        super().__init__(message, field="campo", code="UNKNOWN_FIELD")


class EntityNotFoundError(DomainException):
    """
    Entidade não encontrada no repositório.

    Example:
        ticket = repo.get_by_id(ticket_id)
        if not ticket:
            raise EntityNotFoundError(
                f"Ticket {ticket_id} não encontrado",
                entity_type="Ticket",
                entity_id=ticket_id,
            )
    """

    def __init__(self, message: str, entity_type: str = None, entity_id=None):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(message, "ENTITY_NOT_FOUND")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.entity_type:
            result["entity_type"] = self.entity_type
        if self.entity_id is not None:
            result["entity_id"] = str(self.entity_id)
        return result


class ForbiddenError(DomainException):
    """
    Ator não possui papel ou propriedade para executar a operação.

    Attributes:
        acao: Nome da operação negada (ex: "aprovar")
    """

    def __init__(self, message: str, acao: str = None):
        self.acao = acao
        super().__init__(message, "FORBIDDEN")

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.acao:
            result["acao"] = self.acao
        return result


class BusinessRuleViolationError(DomainException):
    """
    Violação de regra de negócio.

    Subclasses carregam um código próprio para que a camada de API
    consiga distinguir cada falha sem inspecionar a mensagem.
    """

    def __init__(self, message: str, rule: str = None, code: str = "BUSINESS_RULE_VIOLATION"):
        self.rule = rule
        super().__init__(message, code)

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.rule:
            result["rule"] = self.rule
        return result


class InvalidTransitionError(BusinessRuleViolationError):
    """Transição de status não permitida a partir do status atual."""

    def __init__(self, message: str, rule: str = "transicao_status_invalida"):
        super().__init__(message, rule=rule, code="INVALID_TRANSITION")


class InvalidStateError(BusinessRuleViolationError):
    """O status atual do ticket não admite a operação solicitada."""

    def __init__(self, message: str, rule: str = "estado_invalido"):
        super().__init__(message, rule=rule, code="INVALID_STATE")


class NotClaimableError(BusinessRuleViolationError):
    """Ticket não pode ser assumido (já possui atendente ou foi encerrado)."""

    def __init__(self, message: str, rule: str = "ticket_ja_atribuido"):
        super().__init__(message, rule=rule, code="NOT_CLAIMABLE")


class CategoryInactiveError(BusinessRuleViolationError):
    """Tentativa de abrir ticket em categoria desativada."""

    def __init__(self, message: str, rule: str = "categoria_inativa"):
        super().__init__(message, rule=rule, code="CATEGORY_INACTIVE")


class ReopenWindowExpiredError(BusinessRuleViolationError):
    """Prazo de reabertura (dias desde o fechamento) expirou."""

    def __init__(self, message: str, rule: str = "prazo_reabertura_expirado"):
        super().__init__(message, rule=rule, code="REOPEN_WINDOW_EXPIRED")


class ConcurrencyError(DomainException):
    """
    Erro de concorrência/conflito de versão.

    Lançada quando a escrita condicional (``WHERE versao = ?``) não
    afeta nenhuma linha porque outro processo alterou a entidade.
    """

    def __init__(self, message: str):
        super().__init__(message, "CONCURRENCY_ERROR")
