"""
Avaliador de Regras de Atribuição (funções puras).

Algoritmo:
    1. Ordenar regras por (prioridade asc, id asc)
    2. Para cada regra, buscar dados[regra.campo]; ausente → não casa
    3. Aplicar o operador; primeira regra que casa vence

Coerção por operador:
    equals / not_equals  → igualdade de texto, sensível a maiúsculas
    contains             → substring sobre a representação em texto
    gt / gte / lt / lte  → comparação numérica; se qualquer lado não for
                           número finito a regra não casa (falha fechada)

Booleanos são representados como "true"/"false" e nunca contam como
número.
"""

import math
from typing import Iterable, Mapping, Optional

from .entities import Operador, RegraAtribuicao, ValorCampo


def como_texto(valor: ValorCampo) -> str:
    """Representação textual usada por equals/not_equals/contains."""
    if isinstance(valor, bool):
        return "true" if valor else "false"
    if isinstance(valor, float) and valor.is_integer():
        return str(int(valor))
    return str(valor)


def como_numero(valor) -> Optional[float]:
    """Converte para float finito; retorna None se não for numérico."""
    if isinstance(valor, bool):
        return None
    if isinstance(valor, (int, float)):
        numero = float(valor)
    elif isinstance(valor, str):
        try:
            numero = float(valor.strip())
        except ValueError:
            return None
    else:
        return None
    if not math.isfinite(numero):
        return None
    return numero


def avaliar_regra(regra: RegraAtribuicao, dados: Mapping[str, ValorCampo]) -> bool:
    """
    Verifica se uma regra casa com os dados submetidos.

    Nunca lança exceção por dado malformado: o resultado é apenas
    True ou False.
    """
    if regra.campo not in dados:
        return False

    valor = dados[regra.campo]
    if valor is None:
        return False

    operador = regra.operador

    if operador == Operador.IGUAL:
        return como_texto(valor) == regra.valor
    if operador == Operador.DIFERENTE:
        return como_texto(valor) != regra.valor
    if operador == Operador.CONTEM:
        return regra.valor in como_texto(valor)

    esquerdo = como_numero(valor)
    direito = como_numero(regra.valor)
    if esquerdo is None or direito is None:
        return False

    if operador == Operador.MAIOR:
        return esquerdo > direito
    if operador == Operador.MAIOR_OU_IGUAL:
        return esquerdo >= direito
    if operador == Operador.MENOR:
        return esquerdo < direito
    if operador == Operador.MENOR_OU_IGUAL:
        return esquerdo <= direito

    return False


def ordenar_regras(regras: Iterable[RegraAtribuicao]):
    return sorted(regras, key=lambda regra: regra.chave_ordenacao)


def resolver_regra(
    regras: Iterable[RegraAtribuicao],
    dados: Mapping[str, ValorCampo],
) -> Optional[RegraAtribuicao]:
    """
    Retorna a primeira regra que casa, ou None.

    Example:
        regra = resolver_regra(regras, {"urgencia": "Alta"})
        if regra:
            atendente_id = regra.atendente_id
    """
    dados = dados or {}
    for regra in ordenar_regras(regras):
        if avaliar_regra(regra, dados):
            return regra
    return None
