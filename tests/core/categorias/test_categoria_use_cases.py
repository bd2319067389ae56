"""
Testes Unitários para Use Cases do Domínio de Categorias.

Estratégia de Teste:
- Repositórios InMemory
- InMemoryUnitOfWork (mesmo UoW usado pelo container de testes)

Coverage:
- CriarCategoriaService / AlterarSlaCategoriaService / DesativarCategoriaService
- AtribuirAtendenteService / RemoverAtendenteService
- CriarRegraAtribuicaoService / ExcluirRegraAtribuicaoService
- ListarRegrasAtribuicaoService
"""

import pytest

from src.adapters.django_app.shared.unit_of_work import InMemoryUnitOfWork
from src.core.categorias.dtos import CriarCategoriaInputDTO, CriarRegraInputDTO
from src.core.categorias.ports import (
    InMemoryCategoriaAtribuicaoRepository,
    InMemoryCategoriaRepository,
    InMemoryRegraAtribuicaoRepository,
)
from src.core.categorias.use_cases import (
    AlterarSlaCategoriaService,
    AtribuirAtendenteService,
    CriarCategoriaService,
    CriarRegraAtribuicaoService,
    DesativarCategoriaService,
    ExcluirRegraAtribuicaoService,
    ListarRegrasAtribuicaoService,
    RemoverAtendenteService,
)
from src.core.shared.exceptions import (
    EntityNotFoundError,
    InvalidAttendantError,
    UnknownFieldError,
    ValidationError,
)


@pytest.fixture
def categoria_repo():
    return InMemoryCategoriaRepository()


@pytest.fixture
def atribuicao_repo():
    return InMemoryCategoriaAtribuicaoRepository()


@pytest.fixture
def regra_repo():
    return InMemoryRegraAtribuicaoRepository()


@pytest.fixture
def uow():
    return InMemoryUnitOfWork()


@pytest.fixture
def categoria(categoria_repo, uow):
    return CriarCategoriaService(categoria_repo, uow).execute(CriarCategoriaInputDTO(
        nome="Hardware",
        horas_primeira_resposta=4,
        horas_resolucao=24,
        campos=(
            {"name": "urgencia", "label": "Urgência", "type": "select",
             "required": True, "options": ["Baixa", "Alta"]},
            {"name": "patrimonio", "label": "Patrimônio", "type": "number"},
        ),
    ))


@pytest.fixture
def criar_regra(categoria_repo, atribuicao_repo, regra_repo, uow):
    return CriarRegraAtribuicaoService(categoria_repo, atribuicao_repo, regra_repo, uow)


@pytest.fixture
def vinculado(categoria, categoria_repo, atribuicao_repo, uow):
    """Atendente 101 vinculado à categoria."""
    return AtribuirAtendenteService(categoria_repo, atribuicao_repo, uow).execute(categoria.id, 101)


class TestCriarCategoriaService:
    """Testes para CriarCategoriaService."""

    def test_criar_categoria(self, categoria, categoria_repo, uow):
        assert categoria.id is not None
        assert categoria.nome == "Hardware"
        assert [c["name"] for c in categoria.campos] == ["urgencia", "patrimonio"]
        assert categoria_repo.get_by_id(categoria.id).campo("urgencia").obrigatorio is True
        assert uow.committed

    def test_nome_duplicado(self, categoria, categoria_repo, uow):
        with pytest.raises(ValidationError) as exc_info:
            CriarCategoriaService(categoria_repo, uow).execute(CriarCategoriaInputDTO(nome="Hardware"))

        assert exc_info.value.field == "nome"
        assert uow.rolled_back

    def test_sla_invalido(self, categoria_repo, uow):
        with pytest.raises(ValidationError):
            CriarCategoriaService(categoria_repo, uow).execute(
                CriarCategoriaInputDTO(nome="Rede", horas_resolucao=1000)
            )

        assert categoria_repo.list_all() == []


class TestAlterarEDesativarCategoria:
    def test_alterar_sla(self, categoria, categoria_repo, uow):
        output = AlterarSlaCategoriaService(categoria_repo, uow).execute(categoria.id, 2, 8)

        assert (output.horas_primeira_resposta, output.horas_resolucao) == (2, 8)
        assert categoria_repo.get_by_id(categoria.id).horas_resolucao == 8

    def test_alterar_sla_categoria_inexistente(self, categoria_repo, uow):
        with pytest.raises(EntityNotFoundError):
            AlterarSlaCategoriaService(categoria_repo, uow).execute(999, 2, 8)

    def test_desativar(self, categoria, categoria_repo, uow):
        output = DesativarCategoriaService(categoria_repo, uow).execute(categoria.id)

        assert output.ativa is False
        assert categoria_repo.list_all(apenas_ativas=True) == []


class TestVinculosDeAtendentes:
    """Testes para AtribuirAtendenteService e RemoverAtendenteService."""

    def test_vincular_atendente(self, vinculado, categoria, atribuicao_repo):
        assert vinculado.ativa is True
        assert [a.atendente_id for a in atribuicao_repo.list_ativas(categoria.id)] == [101]
        assert atribuicao_repo.list_categorias_do_atendente(101) == [categoria.id]

    def test_vincular_e_idempotente(self, vinculado, categoria, categoria_repo, atribuicao_repo, uow):
        again = AtribuirAtendenteService(categoria_repo, atribuicao_repo, uow).execute(categoria.id, 101)

        assert again.id == vinculado.id
        assert len(atribuicao_repo.list_ativas(categoria.id)) == 1

    def test_vincular_em_categoria_inexistente(self, categoria_repo, atribuicao_repo, uow):
        with pytest.raises(EntityNotFoundError):
            AtribuirAtendenteService(categoria_repo, atribuicao_repo, uow).execute(999, 101)

    def test_remover_desativa_e_apaga_regras(
        self, vinculado, categoria, atribuicao_repo, regra_repo, criar_regra, uow
    ):
        criar_regra.execute(categoria.id, CriarRegraInputDTO(
            campo="urgencia", operador="equals", valor="Alta", atendente_id=101,
        ))

        removidas = RemoverAtendenteService(atribuicao_repo, regra_repo, uow).execute(categoria.id, 101)

        assert removidas == 1
        assert atribuicao_repo.list_ativas(categoria.id) == []
        assert regra_repo.list_by_categoria(categoria.id) == []

    def test_reativar_vinculo_removido(
        self, vinculado, categoria, categoria_repo, atribuicao_repo, regra_repo, uow
    ):
        RemoverAtendenteService(atribuicao_repo, regra_repo, uow).execute(categoria.id, 101)

        reativado = AtribuirAtendenteService(categoria_repo, atribuicao_repo, uow).execute(categoria.id, 101)

        assert reativado.id == vinculado.id
        assert reativado.ativa is True

    def test_remover_vinculo_inexistente(self, categoria, atribuicao_repo, regra_repo, uow):
        with pytest.raises(EntityNotFoundError):
            RemoverAtendenteService(atribuicao_repo, regra_repo, uow).execute(categoria.id, 101)


class TestRegrasDeAtribuicao:
    """Testes para criar, excluir e listar regras."""

    def test_criar_regra(self, vinculado, categoria, criar_regra):
        output = criar_regra.execute(categoria.id, CriarRegraInputDTO(
            campo="patrimonio", operador="gt", valor=1000, atendente_id=101, prioridade=2,
        ))

        assert output.id is not None
        assert output.operador == "gt"
        assert output.valor == "1000"
        assert output.prioridade == 2

    def test_campo_desconhecido(self, vinculado, categoria, criar_regra):
        with pytest.raises(UnknownFieldError) as exc_info:
            criar_regra.execute(categoria.id, CriarRegraInputDTO(
                campo="sala", operador="equals", valor="12", atendente_id=101,
            ))

        assert exc_info.value.campo == "sala"
        assert exc_info.value.code == "UNKNOWN_FIELD"

    def test_atendente_nao_vinculado(self, vinculado, categoria, criar_regra):
        with pytest.raises(InvalidAttendantError) as exc_info:
            criar_regra.execute(categoria.id, CriarRegraInputDTO(
                campo="urgencia", operador="equals", valor="Alta", atendente_id=555,
            ))

        assert exc_info.value.atendente_id == 555

    def test_operador_invalido(self, vinculado, categoria, criar_regra):
        with pytest.raises(ValidationError) as exc_info:
            criar_regra.execute(categoria.id, CriarRegraInputDTO(
                campo="urgencia", operador="regex", valor="A.*", atendente_id=101,
            ))

        assert exc_info.value.field == "operador"

    def test_listar_regras_na_ordem_de_avaliacao(self, vinculado, categoria, criar_regra, regra_repo):
        for valor, prioridade in (("Baixa", 5), ("Alta", 1), ("Média", 1)):
            criar_regra.execute(categoria.id, CriarRegraInputDTO(
                campo="urgencia", operador="equals", valor=valor, atendente_id=101,
                prioridade=prioridade,
            ))

        regras = ListarRegrasAtribuicaoService(regra_repo).execute(categoria.id)

        assert [r.valor for r in regras] == ["Alta", "Média", "Baixa"]

    def test_excluir_regra(self, vinculado, categoria, criar_regra, regra_repo, uow):
        regra = criar_regra.execute(categoria.id, CriarRegraInputDTO(
            campo="urgencia", operador="equals", valor="Alta", atendente_id=101,
        ))

        ExcluirRegraAtribuicaoService(regra_repo, uow).execute(categoria.id, regra.id)

        assert regra_repo.get_by_id(regra.id) is None

    def test_excluir_regra_de_outra_categoria(self, vinculado, categoria, criar_regra, regra_repo, uow):
        regra = criar_regra.execute(categoria.id, CriarRegraInputDTO(
            campo="urgencia", operador="equals", valor="Alta", atendente_id=101,
        ))

        with pytest.raises(EntityNotFoundError):
            ExcluirRegraAtribuicaoService(regra_repo, uow).execute(categoria.id + 1, regra.id)

        assert regra_repo.get_by_id(regra.id) is not None
