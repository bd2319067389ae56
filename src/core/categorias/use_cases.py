"""
Use Cases do Domínio de Categorias.

Use Cases implementados:
- CriarCategoriaService: cria categoria com SLA e campos
- AlterarSlaCategoriaService: altera horas de SLA (não retroage)
- DesativarCategoriaService: impede novas aberturas na categoria
- AtribuirAtendenteService: vincula (ou reativa) atendente à categoria
- RemoverAtendenteService: desativa vínculo e remove regras do atendente
- CriarRegraAtribuicaoService / ExcluirRegraAtribuicaoService
- ListarRegrasAtribuicaoService
"""

from typing import List
import logging

from src.core.shared.interfaces import UnitOfWork
from src.core.shared.exceptions import (
    EntityNotFoundError,
    InvalidAttendantError,
    UnknownFieldError,
    ValidationError,
)

from .dtos import (
    CategoriaOutputDTO,
    CriarCategoriaInputDTO,
    CriarRegraInputDTO,
    RegraOutputDTO,
)
from .entities import (
    CampoPersonalizado,
    Categoria,
    CategoriaAtribuicao,
    Operador,
    RegraAtribuicao,
)
from .ports import (
    CategoriaAtribuicaoRepository,
    CategoriaRepository,
    RegraAtribuicaoRepository,
)

logger = logging.getLogger(__name__)


def _obter_categoria(categoria_repo: CategoriaRepository, categoria_id: int) -> Categoria:
    categoria = categoria_repo.get_by_id(categoria_id)
    if not categoria:
        raise EntityNotFoundError(
            f"Categoria {categoria_id} não encontrada",
            entity_type="Categoria",
            entity_id=categoria_id,
        )
    return categoria


class CriarCategoriaService:
    """
    Use Case: Criar categoria.

    Example:
        service = CriarCategoriaService(categoria_repo, uow)
        output = service.execute(CriarCategoriaInputDTO(nome="Hardware"))
    """

    def __init__(self, categoria_repo: CategoriaRepository, uow: UnitOfWork):
        self.categoria_repo = categoria_repo
        self.uow = uow

    def execute(self, input_dto: CriarCategoriaInputDTO) -> CategoriaOutputDTO:
        """
        Raises:
            ValidationError: Dados inválidos ou nome já existente
        """
        with self.uow:
            if self.categoria_repo.get_by_nome((input_dto.nome or "").strip()):
                raise ValidationError(
                    f"Categoria '{input_dto.nome}' já existe",
                    field="nome",
                )

            campos = [
                campo if isinstance(campo, CampoPersonalizado) else CampoPersonalizado.from_dict(campo)
                for campo in input_dto.campos
            ]

            categoria = Categoria.criar(
                nome=input_dto.nome,
                descricao=input_dto.descricao,
                horas_primeira_resposta=input_dto.horas_primeira_resposta,
                horas_resolucao=input_dto.horas_resolucao,
                campos=campos,
                dias_reabertura=input_dto.dias_reabertura,
            )
            self.categoria_repo.save(categoria)

        logger.info(f"Categoria criada: {categoria.id} ({categoria.nome})")
        return CategoriaOutputDTO.from_entity(categoria)


class AlterarSlaCategoriaService:
    """Use Case: Alterar horas de SLA (tickets existentes mantêm seus prazos)."""

    def __init__(self, categoria_repo: CategoriaRepository, uow: UnitOfWork):
        self.categoria_repo = categoria_repo
        self.uow = uow

    def execute(
        self,
        categoria_id: int,
        horas_primeira_resposta: int,
        horas_resolucao: int,
    ) -> CategoriaOutputDTO:
        with self.uow:
            categoria = _obter_categoria(self.categoria_repo, categoria_id)
            categoria.alterar_sla(horas_primeira_resposta, horas_resolucao)
            self.categoria_repo.save(categoria)

        return CategoriaOutputDTO.from_entity(categoria)


class DesativarCategoriaService:
    """Use Case: Desativar categoria."""

    def __init__(self, categoria_repo: CategoriaRepository, uow: UnitOfWork):
        self.categoria_repo = categoria_repo
        self.uow = uow

    def execute(self, categoria_id: int) -> CategoriaOutputDTO:
        with self.uow:
            categoria = _obter_categoria(self.categoria_repo, categoria_id)
            categoria.desativar()
            self.categoria_repo.save(categoria)

        logger.info(f"Categoria desativada: {categoria_id}")
        return CategoriaOutputDTO.from_entity(categoria)


class AtribuirAtendenteService:
    """
    Use Case: Vincular atendente à categoria.

    Idempotente: vínculo existente inativo é reativado; ativo é mantido.
    """

    def __init__(
        self,
        categoria_repo: CategoriaRepository,
        atribuicao_repo: CategoriaAtribuicaoRepository,
        uow: UnitOfWork,
    ):
        self.categoria_repo = categoria_repo
        self.atribuicao_repo = atribuicao_repo
        self.uow = uow

    def execute(self, categoria_id: int, atendente_id: int) -> CategoriaAtribuicao:
        with self.uow:
            _obter_categoria(self.categoria_repo, categoria_id)

            atribuicao = self.atribuicao_repo.get(categoria_id, atendente_id)
            if atribuicao is None:
                atribuicao = CategoriaAtribuicao(
                    categoria_id=categoria_id,
                    atendente_id=atendente_id,
                )
            atribuicao.ativa = True
            self.atribuicao_repo.save(atribuicao)

        logger.info(f"Atendente {atendente_id} vinculado à categoria {categoria_id}")
        return atribuicao


class RemoverAtendenteService:
    """
    Use Case: Desvincular atendente da categoria.

    Regras da categoria que apontam para o atendente são removidas,
    pois uma regra só pode apontar para atendente vinculado.
    """

    def __init__(
        self,
        atribuicao_repo: CategoriaAtribuicaoRepository,
        regra_repo: RegraAtribuicaoRepository,
        uow: UnitOfWork,
    ):
        self.atribuicao_repo = atribuicao_repo
        self.regra_repo = regra_repo
        self.uow = uow

    def execute(self, categoria_id: int, atendente_id: int) -> int:
        """
        Returns:
            Número de regras removidas junto com o vínculo

        Raises:
            EntityNotFoundError: Se não existe vínculo ativo
        """
        with self.uow:
            atribuicao = self.atribuicao_repo.get(categoria_id, atendente_id)
            if atribuicao is None or not atribuicao.ativa:
                raise EntityNotFoundError(
                    f"Atendente {atendente_id} não está vinculado à categoria {categoria_id}",
                    entity_type="CategoriaAtribuicao",
                )
            atribuicao.ativa = False
            self.atribuicao_repo.save(atribuicao)
            removidas = self.regra_repo.delete_by_atendente(categoria_id, atendente_id)

        logger.info(
            f"Atendente {atendente_id} desvinculado da categoria {categoria_id} "
            f"({removidas} regras removidas)"
        )
        return removidas


class CriarRegraAtribuicaoService:
    """
    Use Case: Criar regra de atribuição.

    Validações:
    - Categoria existe
    - Campo existe entre os campos personalizados da categoria
    - Atendente alvo tem vínculo ativo com a categoria
    - Operador é suportado
    """

    def __init__(
        self,
        categoria_repo: CategoriaRepository,
        atribuicao_repo: CategoriaAtribuicaoRepository,
        regra_repo: RegraAtribuicaoRepository,
        uow: UnitOfWork,
    ):
        self.categoria_repo = categoria_repo
        self.atribuicao_repo = atribuicao_repo
        self.regra_repo = regra_repo
        self.uow = uow

    def execute(self, categoria_id: int, input_dto: CriarRegraInputDTO) -> RegraOutputDTO:
        """
        Raises:
            EntityNotFoundError: Categoria inexistente
            UnknownFieldError: Campo não pertence à categoria
            InvalidAttendantError: Atendente sem vínculo ativo
            ValidationError: Operador inválido
        """
        with self.uow:
            categoria = _obter_categoria(self.categoria_repo, categoria_id)

            if categoria.campo(input_dto.campo) is None:
                raise UnknownFieldError(
                    f"Campo '{input_dto.campo}' não existe na categoria {categoria.nome}",
                    campo=input_dto.campo,
                )

            atribuicao = self.atribuicao_repo.get(categoria_id, input_dto.atendente_id)
            if atribuicao is None or not atribuicao.ativa:
                raise InvalidAttendantError(
                    f"Atendente {input_dto.atendente_id} não está vinculado "
                    f"à categoria {categoria.nome}",
                    atendente_id=input_dto.atendente_id,
                )

            try:
                operador = Operador.from_string(input_dto.operador)
            except ValueError:
                raise ValidationError(
                    f"Operador inválido: {input_dto.operador}",
                    field="operador",
                )

            regra = self.regra_repo.save(
                RegraAtribuicao(
                    categoria_id=categoria_id,
                    campo=input_dto.campo,
                    operador=operador,
                    valor=str(input_dto.valor),
                    atendente_id=input_dto.atendente_id,
                    prioridade=input_dto.prioridade,
                )
            )

        logger.info(f"Regra de atribuição {regra.id} criada na categoria {categoria_id}")
        return RegraOutputDTO.from_entity(regra)


class ExcluirRegraAtribuicaoService:
    """Use Case: Excluir regra de atribuição."""

    def __init__(self, regra_repo: RegraAtribuicaoRepository, uow: UnitOfWork):
        self.regra_repo = regra_repo
        self.uow = uow

    def execute(self, categoria_id: int, regra_id: int) -> None:
        """
        Raises:
            EntityNotFoundError: Regra inexistente ou de outra categoria
        """
        with self.uow:
            regra = self.regra_repo.get_by_id(regra_id)
            if regra is None or regra.categoria_id != categoria_id:
                raise EntityNotFoundError(
                    f"Regra {regra_id} não encontrada na categoria {categoria_id}",
                    entity_type="RegraAtribuicao",
                    entity_id=regra_id,
                )
            self.regra_repo.delete(regra_id)

        logger.info(f"Regra de atribuição {regra_id} excluída")


class ListarRegrasAtribuicaoService:
    """Use Case: Listar regras na ordem de avaliação (leitura, sem UoW)."""

    def __init__(self, regra_repo: RegraAtribuicaoRepository):
        self.regra_repo = regra_repo

    def execute(self, categoria_id: int) -> List[RegraOutputDTO]:
        return [
            RegraOutputDTO.from_entity(regra)
            for regra in self.regra_repo.list_by_categoria(categoria_id)
        ]
