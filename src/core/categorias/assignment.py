"""
Motor de Atribuição.

Decide o atendente inicial de um ticket na abertura e responde se um
atendente pode assumir tickets de uma categoria.

Seleção na abertura:
    1. Buscar vínculos ativos da categoria
    2. Exatamente um vínculo → esse atendente é o padrão
    3. Zero ou vários vínculos → sem padrão (ticket fica no pool)
    4. Regra que casa com os dados submetidos sobrepõe o padrão
"""

from typing import Mapping, Optional
import logging

from .entities import ValorCampo
from .ports import (
    CategoriaAtribuicaoRepository,
    CategoriaRepository,
    RegraAtribuicaoRepository,
)
from .rules import resolver_regra

logger = logging.getLogger(__name__)


class MotorAtribuicao:
    """
    Orquestra a seleção de atendente usando vínculos e regras.

    Attributes:
        categoria_repo: Repositório de categorias
        atribuicao_repo: Vínculos categoria → atendente
        regra_repo: Regras de atribuição
        nome_categoria_geral: Categoria coringa que qualquer atendente assume

    Example:
        motor = MotorAtribuicao(categoria_repo, atribuicao_repo, regra_repo)
        atendente_id = motor.selecionar_atendente(categoria_id, {"urgencia": "Alta"})
    """

    def __init__(
        self,
        categoria_repo: CategoriaRepository,
        atribuicao_repo: CategoriaAtribuicaoRepository,
        regra_repo: RegraAtribuicaoRepository,
        nome_categoria_geral: str = "Outros",
    ):
        self.categoria_repo = categoria_repo
        self.atribuicao_repo = atribuicao_repo
        self.regra_repo = regra_repo
        self.nome_categoria_geral = nome_categoria_geral

    def selecionar_atendente(
        self,
        categoria_id: int,
        dados: Mapping[str, ValorCampo],
    ) -> Optional[int]:
        """
        Retorna o atendente inicial do ticket, ou None para deixar no pool.

        Regras cujo atendente alvo não tem mais vínculo ativo são ignoradas.
        """
        ativos = [a.atendente_id for a in self.atribuicao_repo.list_ativas(categoria_id)]
        padrao = ativos[0] if len(ativos) == 1 else None

        regras = [
            regra
            for regra in self.regra_repo.list_by_categoria(categoria_id)
            if regra.atendente_id in ativos
        ]
        regra = resolver_regra(regras, dados or {})

        if regra is not None:
            logger.info(
                f"Regra {regra.id} (campo={regra.campo}, op={regra.operador.value}) "
                f"atribuiu categoria {categoria_id} ao atendente {regra.atendente_id}"
            )
            return regra.atendente_id

        if padrao is not None:
            logger.info(
                f"Categoria {categoria_id} com atendente único: {padrao}"
            )
        else:
            logger.debug(
                f"Categoria {categoria_id} com {len(ativos)} atendentes: ticket fica no pool"
            )
        return padrao

    def pode_assumir(self, categoria_id: int, atendente_id: int) -> bool:
        """
        Verifica se o atendente atende a categoria.

        Verdadeiro quando o atendente tem vínculo ativo, quando a categoria
        não tem nenhum vínculo ativo, ou quando é a categoria coringa.
        """
        ativos = self.atribuicao_repo.list_ativas(categoria_id)
        if not ativos:
            return True
        if any(a.atendente_id == atendente_id for a in ativos):
            return True

        categoria = self.categoria_repo.get_by_id(categoria_id)
        return categoria is not None and categoria.nome == self.nome_categoria_geral
