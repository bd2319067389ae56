"""
Ports (Interfaces) do Domínio de Categorias.

Contratos de persistência para categorias, vínculos categoria →
atendente e regras de atribuição, mais implementações em memória
usadas nos testes e no TestingContainer.
"""

from copy import deepcopy
from dataclasses import replace
from typing import Dict, List, Optional, Protocol, runtime_checkable
import itertools
import threading

from .entities import Categoria, CategoriaAtribuicao, RegraAtribuicao


@runtime_checkable
class CategoriaRepository(Protocol):
    """
    Interface para persistência de Categorias.

    Implementações:
    - DjangoCategoriaRepository (ORM)
    - InMemoryCategoriaRepository (testes)
    """

    def save(self, categoria: Categoria) -> Categoria:
        """Cria (atribuindo id) ou atualiza a categoria."""
        ...

    def get_by_id(self, categoria_id: int) -> Optional[Categoria]:
        ...

    def get_by_nome(self, nome: str) -> Optional[Categoria]:
        ...

    def list_all(self, apenas_ativas: bool = False) -> List[Categoria]:
        ...


@runtime_checkable
class CategoriaAtribuicaoRepository(Protocol):
    """Interface para vínculos categoria → atendente."""

    def save(self, atribuicao: CategoriaAtribuicao) -> CategoriaAtribuicao:
        ...

    def get(self, categoria_id: int, atendente_id: int) -> Optional[CategoriaAtribuicao]:
        ...

    def list_ativas(self, categoria_id: int) -> List[CategoriaAtribuicao]:
        """Vínculos ativos da categoria, ordenados por id."""
        ...

    def list_categorias_do_atendente(self, atendente_id: int) -> List[int]:
        """Ids das categorias em que o atendente tem vínculo ativo."""
        ...


@runtime_checkable
class RegraAtribuicaoRepository(Protocol):
    """Interface para regras de atribuição."""

    def save(self, regra: RegraAtribuicao) -> RegraAtribuicao:
        ...

    def get_by_id(self, regra_id: int) -> Optional[RegraAtribuicao]:
        ...

    def delete(self, regra_id: int) -> None:
        ...

    def list_by_categoria(self, categoria_id: int) -> List[RegraAtribuicao]:
        """Regras da categoria ordenadas por (prioridade, id)."""
        ...

    def delete_by_atendente(self, categoria_id: int, atendente_id: int) -> int:
        """Remove regras da categoria que apontam para o atendente."""
        ...


class InMemoryCategoriaRepository:
    """
    Implementação em memória do CategoriaRepository.

    Armazena cópias: quem lê nunca compartilha instância com quem grava.
    """

    def __init__(self):
        self._categorias: Dict[int, Categoria] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def save(self, categoria: Categoria) -> Categoria:
        with self._lock:
            if categoria.id is None:
                categoria.id = next(self._ids)
            self._categorias[categoria.id] = deepcopy(categoria)
            return categoria

    def get_by_id(self, categoria_id: int) -> Optional[Categoria]:
        with self._lock:
            categoria = self._categorias.get(categoria_id)
            return deepcopy(categoria) if categoria else None

    def get_by_nome(self, nome: str) -> Optional[Categoria]:
        with self._lock:
            for categoria in self._categorias.values():
                if categoria.nome == nome:
                    return deepcopy(categoria)
            return None

    def list_all(self, apenas_ativas: bool = False) -> List[Categoria]:
        with self._lock:
            return [
                deepcopy(c)
                for c in sorted(self._categorias.values(), key=lambda c: c.id)
                if c.ativa or not apenas_ativas
            ]

    def clear(self) -> None:
        with self._lock:
            self._categorias.clear()


class InMemoryCategoriaAtribuicaoRepository:
    """Implementação em memória dos vínculos categoria → atendente."""

    def __init__(self):
        self._atribuicoes: Dict[int, CategoriaAtribuicao] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def save(self, atribuicao: CategoriaAtribuicao) -> CategoriaAtribuicao:
        with self._lock:
            if atribuicao.id is None:
                atribuicao.id = next(self._ids)
            self._atribuicoes[atribuicao.id] = deepcopy(atribuicao)
            return atribuicao

    def get(self, categoria_id: int, atendente_id: int) -> Optional[CategoriaAtribuicao]:
        with self._lock:
            for atribuicao in self._atribuicoes.values():
                if (
                    atribuicao.categoria_id == categoria_id
                    and atribuicao.atendente_id == atendente_id
                ):
                    return deepcopy(atribuicao)
            return None

    def list_ativas(self, categoria_id: int) -> List[CategoriaAtribuicao]:
        with self._lock:
            return [
                deepcopy(a)
                for a in sorted(self._atribuicoes.values(), key=lambda a: a.id)
                if a.categoria_id == categoria_id and a.ativa
            ]

    def list_categorias_do_atendente(self, atendente_id: int) -> List[int]:
        with self._lock:
            return sorted({
                a.categoria_id
                for a in self._atribuicoes.values()
                if a.atendente_id == atendente_id and a.ativa
            })


class InMemoryRegraAtribuicaoRepository:
    """Implementação em memória das regras de atribuição."""

    def __init__(self):
        self._regras: Dict[int, RegraAtribuicao] = {}
        self._ids = itertools.count(1)
        self._lock = threading.Lock()

    def save(self, regra: RegraAtribuicao) -> RegraAtribuicao:
        with self._lock:
            if regra.id is None:
                # RegraAtribuicao é imutável: devolve nova instância com id
                regra = replace(regra, id=next(self._ids))
            self._regras[regra.id] = regra
            return regra

    def get_by_id(self, regra_id: int) -> Optional[RegraAtribuicao]:
        with self._lock:
            return self._regras.get(regra_id)

    def delete(self, regra_id: int) -> None:
        with self._lock:
            self._regras.pop(regra_id, None)

    def list_by_categoria(self, categoria_id: int) -> List[RegraAtribuicao]:
        with self._lock:
            return sorted(
                (r for r in self._regras.values() if r.categoria_id == categoria_id),
                key=lambda r: r.chave_ordenacao,
            )

    def delete_by_atendente(self, categoria_id: int, atendente_id: int) -> int:
        with self._lock:
            alvo = [
                regra_id
                for regra_id, r in self._regras.items()
                if r.categoria_id == categoria_id and r.atendente_id == atendente_id
            ]
            for regra_id in alvo:
                del self._regras[regra_id]
            return len(alvo)
