"""
Testes Unitários para o avaliador de regras de atribuição.

Coverage:
- avaliar_regra(): cada operador e coerções
- resolver_regra(): ordem (prioridade, id) e primeira que casa
- como_texto() / como_numero()
"""

import pytest

from src.core.categorias.entities import Operador, RegraAtribuicao
from src.core.categorias.rules import (
    avaliar_regra,
    como_numero,
    como_texto,
    resolver_regra,
)


def _regra(operador, valor, campo="urgencia", **kwargs):
    return RegraAtribuicao(campo=campo, operador=operador, valor=valor, **kwargs)


class TestAvaliarRegra:
    """Testes para avaliar_regra."""

    @pytest.mark.parametrize("operador,valor,dado,esperado", [
        (Operador.IGUAL, "Alta", "Alta", True),
        (Operador.IGUAL, "Alta", "alta", False),
        (Operador.DIFERENTE, "Alta", "Baixa", True),
        (Operador.DIFERENTE, "Alta", "Alta", False),
        (Operador.CONTEM, "impress", "impressora HP", True),
        (Operador.CONTEM, "Impress", "impressora HP", False),
        (Operador.MAIOR, "10", 11, True),
        (Operador.MAIOR, "10", 10, False),
        (Operador.MAIOR_OU_IGUAL, "10", 10, True),
        (Operador.MENOR, "10", "9.5", True),
        (Operador.MENOR_OU_IGUAL, "10", 10.0, True),
        (Operador.MENOR_OU_IGUAL, "10", 10.5, False),
    ])
    def test_operadores(self, operador, valor, dado, esperado):
        assert avaliar_regra(_regra(operador, valor), {"urgencia": dado}) is esperado

    def test_campo_ausente_nunca_casa(self):
        """Nem mesmo not_equals casa sem o campo."""
        assert avaliar_regra(_regra(Operador.DIFERENTE, "Alta"), {}) is False

    @pytest.mark.parametrize("dado", ["muito", "", "nan", "inf", True])
    def test_comparacao_numerica_falha_fechada(self, dado):
        """Valor não numérico (ou não finito) nunca casa em gt/lt."""
        assert avaliar_regra(_regra(Operador.MAIOR, "1"), {"urgencia": dado}) is False
        assert avaliar_regra(_regra(Operador.MENOR, "1"), {"urgencia": dado}) is False

    def test_valor_da_regra_nao_numerico(self):
        assert avaliar_regra(_regra(Operador.MAIOR, "dez"), {"urgencia": 11}) is False

    def test_booleano_como_texto(self):
        assert avaliar_regra(_regra(Operador.IGUAL, "true", campo="vip"), {"vip": True})
        assert not avaliar_regra(_regra(Operador.IGUAL, "True", campo="vip"), {"vip": True})

    def test_numero_como_texto(self):
        """equals compara a representação textual do número."""
        assert avaliar_regra(_regra(Operador.IGUAL, "3", campo="andar"), {"andar": 3})
        assert avaliar_regra(_regra(Operador.IGUAL, "3", campo="andar"), {"andar": 3.0})
        assert avaliar_regra(_regra(Operador.CONTEM, "12", campo="andar"), {"andar": 4120})


class TestResolverRegra:
    """Testes para resolver_regra."""

    def test_primeira_que_casa_pela_prioridade(self):
        regras = [
            _regra(Operador.IGUAL, "Alta", id=1, prioridade=5, atendente_id=101),
            _regra(Operador.CONTEM, "Al", id=2, prioridade=1, atendente_id=102),
        ]

        regra = resolver_regra(regras, {"urgencia": "Alta"})

        assert regra.atendente_id == 102

    def test_empate_de_prioridade_desempata_pelo_id(self):
        regras = [
            _regra(Operador.IGUAL, "Alta", id=7, atendente_id=101),
            _regra(Operador.IGUAL, "Alta", id=3, atendente_id=102),
        ]

        assert resolver_regra(regras, {"urgencia": "Alta"}).id == 3

    def test_regra_que_nao_casa_e_pulada(self):
        regras = [
            _regra(Operador.IGUAL, "Baixa", id=1, atendente_id=101),
            _regra(Operador.MAIOR, "100", id=2, campo="patrimonio", atendente_id=102),
        ]

        assert resolver_regra(regras, {"urgencia": "Alta", "patrimonio": "4512"}).id == 2

    def test_nenhuma_regra_casa(self):
        regras = [_regra(Operador.IGUAL, "Baixa", id=1)]

        assert resolver_regra(regras, {"urgencia": "Alta"}) is None

    def test_sem_dados(self):
        assert resolver_regra([_regra(Operador.IGUAL, "Alta", id=1)], None) is None


class TestCoercoes:
    @pytest.mark.parametrize("valor,esperado", [
        (True, "true"),
        (False, "false"),
        (3.0, "3"),
        (2.5, "2.5"),
        (7, "7"),
        ("Alta", "Alta"),
    ])
    def test_como_texto(self, valor, esperado):
        assert como_texto(valor) == esperado

    @pytest.mark.parametrize("valor,esperado", [
        (3, 3.0),
        (" 4.5 ", 4.5),
        ("abc", None),
        (True, None),
        (float("inf"), None),
        (None, None),
    ])
    def test_como_numero(self, valor, esperado):
        assert como_numero(valor) == esperado
