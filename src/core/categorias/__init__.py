"""
Domínio de Categorias - SLA e Roteamento.

Contém:
- Entidades (Categoria, CampoPersonalizado, CategoriaAtribuicao, RegraAtribuicao)
- Avaliador de regras (funções puras)
- Motor de atribuição (seleção do atendente inicial)
- Use Cases de manutenção de categorias, vínculos e regras
"""

from .entities import (
    Categoria,
    CampoPersonalizado,
    CategoriaAtribuicao,
    Operador,
    RegraAtribuicao,
    TipoCampo,
    ValorCampo,
)
from .rules import avaliar_regra, resolver_regra
from .assignment import MotorAtribuicao
from .ports import (
    CategoriaRepository,
    CategoriaAtribuicaoRepository,
    RegraAtribuicaoRepository,
)

__all__ = [
    "Categoria",
    "CampoPersonalizado",
    "CategoriaAtribuicao",
    "Operador",
    "RegraAtribuicao",
    "TipoCampo",
    "ValorCampo",
    "avaliar_regra",
    "resolver_regra",
    "MotorAtribuicao",
    "CategoriaRepository",
    "CategoriaAtribuicaoRepository",
    "RegraAtribuicaoRepository",
]
