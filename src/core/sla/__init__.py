"""
Domínio de SLA - prazos, status derivado e varredura periódica.

- calcular_prazos: função pura usada na abertura do ticket
- SlaService: ok | warning | violated, listagem de violações e avisos
- SlaMonitor (src.core.sla.monitor): scanner periódico que publica
  ticket.sla_violated / ticket.sla_warning
"""

from .deadlines import PrazosSla, calcular_prazos
from .entities import AvisoSla, SlaStatus, TipoPrazo, ViolacaoSla
from .services import SlaService

__all__ = [
    "PrazosSla",
    "calcular_prazos",
    "AvisoSla",
    "SlaStatus",
    "TipoPrazo",
    "ViolacaoSla",
    "SlaService",
]
