"""
Testes Unitários para a calculadora de prazos de SLA.
"""

from datetime import datetime, timedelta, timezone

import pytest

from src.core.sla.deadlines import PrazosSla, calcular_prazos


class TestCalcularPrazos:
    """Testes para calcular_prazos."""

    def test_soma_horas_da_categoria(self, agora):
        prazos = calcular_prazos(agora, 4, 24)

        assert prazos == PrazosSla(
            primeira_resposta=agora + timedelta(hours=4),
            resolucao=agora + timedelta(hours=24),
        )

    def test_horas_corridas_sem_calendario(self):
        """Fim de semana e madrugada contam normalmente."""
        sexta = datetime(2024, 3, 8, 22, 0, tzinfo=timezone.utc)

        prazos = calcular_prazos(sexta, 8, 72)

        assert prazos.primeira_resposta == datetime(2024, 3, 9, 6, 0, tzinfo=timezone.utc)
        assert prazos.resolucao == datetime(2024, 3, 11, 22, 0, tzinfo=timezone.utc)

    def test_naive_tratado_como_utc(self):
        prazos = calcular_prazos(datetime(2024, 1, 1, 12, 0), 1, 2)

        assert prazos.primeira_resposta == datetime(2024, 1, 1, 13, 0, tzinfo=timezone.utc)
        assert prazos.primeira_resposta.tzinfo == timezone.utc

    def test_outro_fuso_convertido_para_utc(self):
        sao_paulo = timezone(timedelta(hours=-3))

        prazos = calcular_prazos(datetime(2024, 1, 1, 9, 0, tzinfo=sao_paulo), 4, 24)

        assert prazos.primeira_resposta == datetime(2024, 1, 1, 16, 0, tzinfo=timezone.utc)
        assert prazos.resolucao.utcoffset() == timedelta(0)

    def test_prazos_sao_imutaveis(self, agora):
        prazos = calcular_prazos(agora, 4, 24)

        with pytest.raises(AttributeError):
            prazos.resolucao = agora
