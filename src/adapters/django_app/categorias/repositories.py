"""
Repositórios Django para Categorias, vínculos e regras de atribuição.

Implementam os Protocols de src/core/categorias/ports.py usando o
Django ORM. Não contêm lógica de negócio.
"""

from dataclasses import replace
from typing import List, Optional
import logging

from src.core.categorias.entities import Categoria, CategoriaAtribuicao, RegraAtribuicao

from .mappers import CategoriaAtribuicaoMapper, CategoriaMapper, RegraAtribuicaoMapper
from .models import CategoriaAtribuicaoModel, CategoriaModel, RegraAtribuicaoModel

logger = logging.getLogger(__name__)


class DjangoCategoriaRepository:
    """
    Implementação Django do CategoriaRepository.

    Example:
        repo = DjangoCategoriaRepository()
        categoria = repo.save(Categoria.criar(nome="Hardware"))
    """

    def save(self, categoria: Categoria) -> Categoria:
        data = CategoriaMapper.to_model_data(categoria)

        if categoria.id is None:
            model = CategoriaModel.objects.create(**data)
            categoria.id = model.id
            logger.info(f"Categoria criada: {model.id} ({model.nome})")
        else:
            CategoriaModel.objects.filter(id=categoria.id).update(**data)
            logger.debug(f"Categoria atualizada: {categoria.id}")

        return categoria

    def get_by_id(self, categoria_id: int) -> Optional[Categoria]:
        try:
            return CategoriaMapper.to_entity(CategoriaModel.objects.get(id=categoria_id))
        except CategoriaModel.DoesNotExist:
            return None

    def get_by_nome(self, nome: str) -> Optional[Categoria]:
        model = CategoriaModel.objects.filter(nome=nome).first()
        return CategoriaMapper.to_entity(model) if model else None

    def list_all(self, apenas_ativas: bool = False) -> List[Categoria]:
        queryset = CategoriaModel.objects.all()
        if apenas_ativas:
            queryset = queryset.filter(ativa=True)
        return CategoriaMapper.to_entity_list(queryset.order_by('id'))


class DjangoCategoriaAtribuicaoRepository:
    """Implementação Django dos vínculos categoria → atendente."""

    def save(self, atribuicao: CategoriaAtribuicao) -> CategoriaAtribuicao:
        model, _ = CategoriaAtribuicaoModel.objects.update_or_create(
            categoria_id=atribuicao.categoria_id,
            atendente_id=atribuicao.atendente_id,
            defaults={'ativa': atribuicao.ativa},
        )
        atribuicao.id = model.id
        return atribuicao

    def get(self, categoria_id: int, atendente_id: int) -> Optional[CategoriaAtribuicao]:
        model = CategoriaAtribuicaoModel.objects.filter(
            categoria_id=categoria_id,
            atendente_id=atendente_id,
        ).first()
        return CategoriaAtribuicaoMapper.to_entity(model) if model else None

    def list_ativas(self, categoria_id: int) -> List[CategoriaAtribuicao]:
        models = CategoriaAtribuicaoModel.objects.filter(
            categoria_id=categoria_id,
            ativa=True,
        ).order_by('id')
        return [CategoriaAtribuicaoMapper.to_entity(m) for m in models]

    def list_categorias_do_atendente(self, atendente_id: int) -> List[int]:
        return list(
            CategoriaAtribuicaoModel.objects
            .filter(atendente_id=atendente_id, ativa=True)
            .order_by('categoria_id')
            .values_list('categoria_id', flat=True)
        )


class DjangoRegraAtribuicaoRepository:
    """Implementação Django das regras de atribuição."""

    def save(self, regra: RegraAtribuicao) -> RegraAtribuicao:
        data = RegraAtribuicaoMapper.to_model_data(regra)

        if regra.id is None:
            model = RegraAtribuicaoModel.objects.create(**data)
            return replace(regra, id=model.id)

        RegraAtribuicaoModel.objects.filter(id=regra.id).update(**data)
        return regra

    def get_by_id(self, regra_id: int) -> Optional[RegraAtribuicao]:
        model = RegraAtribuicaoModel.objects.filter(id=regra_id).first()
        return RegraAtribuicaoMapper.to_entity(model) if model else None

    def delete(self, regra_id: int) -> None:
        RegraAtribuicaoModel.objects.filter(id=regra_id).delete()

    def list_by_categoria(self, categoria_id: int) -> List[RegraAtribuicao]:
        models = RegraAtribuicaoModel.objects.filter(
            categoria_id=categoria_id,
        ).order_by('prioridade', 'id')
        return [RegraAtribuicaoMapper.to_entity(m) for m in models]

    def delete_by_atendente(self, categoria_id: int, atendente_id: int) -> int:
        removidas, _ = RegraAtribuicaoModel.objects.filter(
            categoria_id=categoria_id,
            atendente_id=atendente_id,
        ).delete()
        if removidas:
            logger.info(
                f"{removidas} regras do atendente {atendente_id} removidas da categoria {categoria_id}"
            )
        return removidas
