"""
Testes Unitários para Entidades do Domínio de Categorias.

Coverage:
- Categoria.criar(): limites de SLA, dias de reabertura e campos
- Categoria.validar_dados(): escalares e campos obrigatórios
- CampoPersonalizado.from_dict() / to_dict()
"""

import pytest

from src.core.categorias.entities import (
    CampoPersonalizado,
    Categoria,
    Operador,
    TipoCampo,
)
from src.core.shared.exceptions import ValidationError


@pytest.fixture
def categoria():
    return Categoria.criar(
        nome="Hardware",
        campos=[
            CampoPersonalizado(
                nome="urgencia",
                rotulo="Urgência",
                tipo=TipoCampo.SELECAO,
                obrigatorio=True,
                opcoes=("Baixa", "Alta"),
            ),
            CampoPersonalizado(nome="patrimonio", rotulo="Patrimônio", tipo=TipoCampo.NUMERO),
        ],
    )


class TestCategoriaCriacao:
    """Testes para criação de categorias."""

    def test_criar_categoria_com_padroes(self):
        """SLA padrão de 4h para primeira resposta e 24h para resolução."""
        categoria = Categoria.criar(nome="  Rede  ")

        assert categoria.nome == "Rede"
        assert categoria.horas_primeira_resposta == 4
        assert categoria.horas_resolucao == 24
        assert categoria.ativa is True
        assert categoria.dias_reabertura is None

    def test_criar_categoria_sem_nome(self):
        with pytest.raises(ValidationError) as exc_info:
            Categoria.criar(nome="   ")

        assert exc_info.value.field == "nome"

    @pytest.mark.parametrize("primeira,resolucao,campo", [
        (0, 24, "horas_primeira_resposta"),
        (169, 24, "horas_primeira_resposta"),
        (4, 0, "horas_resolucao"),
        (4, 721, "horas_resolucao"),
        (True, 24, "horas_primeira_resposta"),
    ])
    def test_horas_fora_dos_limites(self, primeira, resolucao, campo):
        """Primeira resposta 1-168h, resolução 1-720h, sempre inteiros."""
        with pytest.raises(ValidationError) as exc_info:
            Categoria.criar(nome="Rede", horas_primeira_resposta=primeira, horas_resolucao=resolucao)

        assert exc_info.value.field == campo

    def test_horas_nos_limites(self):
        categoria = Categoria.criar(nome="Rede", horas_primeira_resposta=168, horas_resolucao=720)

        assert (categoria.horas_primeira_resposta, categoria.horas_resolucao) == (168, 720)

    @pytest.mark.parametrize("dias", [0, 31, True])
    def test_dias_reabertura_invalidos(self, dias):
        with pytest.raises(ValidationError) as exc_info:
            Categoria.criar(nome="Rede", dias_reabertura=dias)

        assert exc_info.value.field == "dias_reabertura"

    def test_campos_duplicados(self):
        with pytest.raises(ValidationError):
            Categoria.criar(nome="Rede", campos=[
                CampoPersonalizado(nome="local", rotulo="Local"),
                CampoPersonalizado(nome="local", rotulo="Local de novo"),
            ])

    def test_select_sem_opcoes(self):
        with pytest.raises(ValidationError):
            Categoria.criar(nome="Rede", campos=[
                CampoPersonalizado(nome="andar", rotulo="Andar", tipo=TipoCampo.SELECAO),
            ])

    def test_alterar_sla(self, categoria):
        categoria.alterar_sla(2, 48)

        assert (categoria.horas_primeira_resposta, categoria.horas_resolucao) == (2, 48)

    def test_desativar_e_ativar(self, categoria):
        categoria.desativar()
        assert categoria.ativa is False

        categoria.ativar()
        assert categoria.ativa is True


class TestValidarDados:
    """Testes para validação das respostas submetidas."""

    def test_dados_validos_sao_copiados(self, categoria):
        dados = {"urgencia": "Alta", "patrimonio": 4512}

        validados = categoria.validar_dados(dados)

        assert validados == dados
        assert validados is not dados

    def test_chave_desconhecida_preservada(self, categoria):
        validados = categoria.validar_dados({"urgencia": "Baixa", "sala": "12B"})

        assert validados["sala"] == "12B"

    @pytest.mark.parametrize("valor", [{"a": 1}, ["a"], None])
    def test_valor_nao_escalar(self, categoria, valor):
        """Dicts, listas e nulos são recusados."""
        with pytest.raises(ValidationError):
            categoria.validar_dados({"urgencia": "Alta", "extra": valor})

    @pytest.mark.parametrize("dados", [{}, {"urgencia": "   "}])
    def test_campo_obrigatorio(self, categoria, dados):
        with pytest.raises(ValidationError) as exc_info:
            categoria.validar_dados(dados)

        assert exc_info.value.field == "urgencia"

    def test_booleano_aceito(self, categoria):
        assert categoria.validar_dados({"urgencia": "Alta", "vip": True})["vip"] is True


class TestCampoPersonalizado:
    """Testes para (des)serialização de campos."""

    def test_from_dict(self):
        campo = CampoPersonalizado.from_dict({
            "name": "urgencia",
            "label": "Urgência",
            "type": "select",
            "required": True,
            "options": ["Baixa", "Alta"],
        })

        assert campo == CampoPersonalizado(
            nome="urgencia",
            rotulo="Urgência",
            tipo=TipoCampo.SELECAO,
            obrigatorio=True,
            opcoes=("Baixa", "Alta"),
        )
        assert campo.to_dict()["options"] == ["Baixa", "Alta"]

    def test_from_dict_rotulo_padrao(self):
        campo = CampoPersonalizado.from_dict({"name": "sala"})

        assert campo.rotulo == "sala"
        assert campo.tipo == TipoCampo.TEXTO
        assert campo.obrigatorio is False

    def test_from_dict_tipo_invalido(self):
        with pytest.raises(ValidationError):
            CampoPersonalizado.from_dict({"name": "sala", "type": "color"})


class TestOperador:
    def test_from_string(self):
        assert Operador.from_string("gte") == Operador.MAIOR_OU_IGUAL
        assert Operador.from_string("contem") == Operador.CONTEM

    def test_from_string_invalido(self):
        with pytest.raises(ValueError):
            Operador.from_string("regex")

    def test_numerico(self):
        assert Operador.MENOR.numerico
        assert not Operador.IGUAL.numerico
