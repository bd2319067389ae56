"""
Calculadora de Prazos de SLA (função pura).

    prazo_primeira_resposta = criado_em + horas_primeira_resposta
    prazo_resolucao         = criado_em + horas_resolucao

Calculado uma única vez, na abertura do ticket, com o SLA vigente da
categoria. Tudo em UTC; localização é responsabilidade da apresentação.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone


@dataclass(frozen=True)
class PrazosSla:
    """Par de prazos absolutos de um ticket."""

    primeira_resposta: datetime
    resolucao: datetime


def calcular_prazos(
    criado_em: datetime,
    horas_primeira_resposta: int,
    horas_resolucao: int,
) -> PrazosSla:
    """
    Calcula os prazos de SLA a partir do instante de criação.

    Args:
        criado_em: Instante de criação (naive é tratado como UTC)
        horas_primeira_resposta: SLA de primeira resposta da categoria
        horas_resolucao: SLA de resolução da categoria

    Returns:
        PrazosSla com os dois prazos em UTC

    Example:
        prazos = calcular_prazos(agora, 4, 24)
        prazos.primeira_resposta == agora + timedelta(hours=4)
    """
    if criado_em.tzinfo is None:
        criado_em = criado_em.replace(tzinfo=timezone.utc)
    else:
        criado_em = criado_em.astimezone(timezone.utc)

    return PrazosSla(
        primeira_resposta=criado_em + timedelta(hours=horas_primeira_resposta),
        resolucao=criado_em + timedelta(hours=horas_resolucao),
    )
