"""
Mappers entre Entities de Categorias (Core) e Models (Django).

Mappers são stateless e não contêm lógica de negócio.
"""

from typing import List

from src.core.categorias.entities import (
    CampoPersonalizado,
    Categoria,
    CategoriaAtribuicao,
    Operador,
    RegraAtribuicao,
)

from .models import CategoriaAtribuicaoModel, CategoriaModel, RegraAtribuicaoModel


class CategoriaMapper:

    @staticmethod
    def to_entity(model: CategoriaModel) -> Categoria:
        """
        Converte CategoriaModel para Categoria.

        Note:
            Bypassa validações de ``Categoria.criar`` pois os dados já
            foram validados na gravação
        """
        return Categoria(
            id=model.id,
            nome=model.nome,
            descricao=model.descricao,
            horas_primeira_resposta=model.horas_primeira_resposta,
            horas_resolucao=model.horas_resolucao,
            ativa=model.ativa,
            campos=[CampoPersonalizado.from_dict(c) for c in (model.campos or [])],
            dias_reabertura=model.dias_reabertura,
        )

    @staticmethod
    def to_model_data(entity: Categoria) -> dict:
        return {
            'nome': entity.nome,
            'descricao': entity.descricao,
            'horas_primeira_resposta': entity.horas_primeira_resposta,
            'horas_resolucao': entity.horas_resolucao,
            'ativa': entity.ativa,
            'campos': [c.to_dict() for c in entity.campos],
            'dias_reabertura': entity.dias_reabertura,
        }

    @staticmethod
    def to_entity_list(models) -> List[Categoria]:
        return [CategoriaMapper.to_entity(m) for m in models]


class CategoriaAtribuicaoMapper:

    @staticmethod
    def to_entity(model: CategoriaAtribuicaoModel) -> CategoriaAtribuicao:
        return CategoriaAtribuicao(
            id=model.id,
            categoria_id=model.categoria_id,
            atendente_id=model.atendente_id,
            ativa=model.ativa,
        )


class RegraAtribuicaoMapper:

    @staticmethod
    def to_entity(model: RegraAtribuicaoModel) -> RegraAtribuicao:
        return RegraAtribuicao(
            id=model.id,
            categoria_id=model.categoria_id,
            campo=model.campo,
            operador=Operador(model.operador),
            valor=model.valor,
            atendente_id=model.atendente_id,
            prioridade=model.prioridade,
        )

    @staticmethod
    def to_model_data(entity: RegraAtribuicao) -> dict:
        return {
            'categoria_id': entity.categoria_id,
            'campo': entity.campo,
            'operador': entity.operador.value,
            'valor': entity.valor,
            'atendente_id': entity.atendente_id,
            'prioridade': entity.prioridade,
        }
