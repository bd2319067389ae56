"""
Entidades do Domínio de Categorias.

Entidades:
- Categoria: define SLA, campos personalizados e janela de reabertura
- CampoPersonalizado: pergunta exibida ao solicitante na abertura
- CategoriaAtribuicao: vínculo categoria → atendente
- RegraAtribuicao: roteamento condicional por resposta submetida
- Operador: operadores suportados pelas regras

Regras de Negócio Encapsuladas:
- Horas de SLA dentro dos limites (1-168h primeira resposta, 1-720h resolução)
- Dias de reabertura entre 1 e 30
- Nomes de campos únicos; campos "select" exigem opções
- Dados submetidos são escalares (texto, número, booleano)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple, Union

from src.core.shared.exceptions import ValidationError


# Valor de uma resposta submetida: tipo fechado, nunca dict/list.
ValorCampo = Union[str, int, float, bool]


class TipoCampo(Enum):
    """Tipos de campo personalizado aceitos pelo formulário."""

    TEXTO = "text"
    AREA_TEXTO = "textarea"
    NUMERO = "number"
    SELECAO = "select"
    DATA = "date"
    CHECKBOX = "checkbox"


class Operador(Enum):
    """Operadores de comparação das regras de atribuição."""

    IGUAL = "equals"
    DIFERENTE = "not_equals"
    CONTEM = "contains"
    MAIOR = "gt"
    MAIOR_OU_IGUAL = "gte"
    MENOR = "lt"
    MENOR_OU_IGUAL = "lte"

    @property
    def numerico(self) -> bool:
        return self in (
            Operador.MAIOR,
            Operador.MAIOR_OU_IGUAL,
            Operador.MENOR,
            Operador.MENOR_OU_IGUAL,
        )

    @classmethod
    def from_string(cls, value: str) -> "Operador":
        for operador in cls:
            if operador.value == value:
                return operador
        try:
            return cls[value.upper()]
        except KeyError:
            raise ValueError(f"Operador inválido: {value}")


@dataclass(frozen=True)
class CampoPersonalizado:
    """
    Definição de um campo personalizado da categoria.

    Attributes:
        nome: Chave usada em ``dados_personalizados`` e nas regras
        rotulo: Texto exibido ao solicitante
        tipo: Tipo do campo
        obrigatorio: Se a resposta é exigida na abertura
        opcoes: Opções válidas (apenas para "select")
    """

    nome: str
    rotulo: str
    tipo: TipoCampo = TipoCampo.TEXTO
    obrigatorio: bool = False
    opcoes: Tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {
            "name": self.nome,
            "label": self.rotulo,
            "type": self.tipo.value,
            "required": self.obrigatorio,
            "options": list(self.opcoes),
        }

    @classmethod
    def from_dict(cls, data: Mapping) -> "CampoPersonalizado":
        try:
            tipo = TipoCampo(data.get("type", TipoCampo.TEXTO.value))
        except ValueError:
            raise ValidationError(
                f"Tipo de campo inválido: {data.get('type')}",
                field="campos_personalizados",
            )
        return cls(
            nome=data.get("name", ""),
            rotulo=data.get("label") or data.get("name", ""),
            tipo=tipo,
            obrigatorio=bool(data.get("required", False)),
            opcoes=tuple(data.get("options") or ()),
        )


@dataclass
class Categoria:
    """
    Entidade de Domínio: Categoria de ticket.

    Invariantes:
    - Nome obrigatório
    - SLA de primeira resposta entre 1 e 168 horas
    - SLA de resolução entre 1 e 720 horas
    - Dias de reabertura (quando definido) entre 1 e 30
    - Nomes de campos personalizados únicos e não vazios

    Nunca é excluída fisicamente enquanto referenciada: apenas desativada.
    """

    id: Optional[int] = None
    nome: str = ""
    descricao: str = ""
    horas_primeira_resposta: int = 4
    horas_resolucao: int = 24
    ativa: bool = True
    campos: List[CampoPersonalizado] = field(default_factory=list)
    dias_reabertura: Optional[int] = None

    HORAS_PRIMEIRA_RESPOSTA_MAX = 168
    HORAS_RESOLUCAO_MAX = 720
    DIAS_REABERTURA_MAX = 30

    @classmethod
    def criar(
        cls,
        nome: str,
        descricao: str = "",
        horas_primeira_resposta: int = 4,
        horas_resolucao: int = 24,
        campos: Optional[List[CampoPersonalizado]] = None,
        dias_reabertura: Optional[int] = None,
    ) -> "Categoria":
        """
        Factory method com validações.

        Raises:
            ValidationError: Se algum limite for violado
        """
        if not nome or not nome.strip():
            raise ValidationError("Nome da categoria é obrigatório", field="nome")

        categoria = cls(
            nome=nome.strip(),
            descricao=(descricao or "").strip(),
            campos=list(campos or []),
            dias_reabertura=dias_reabertura,
        )
        categoria.alterar_sla(horas_primeira_resposta, horas_resolucao)
        categoria._validar_dias_reabertura()
        categoria._validar_campos()
        return categoria

    def alterar_sla(self, horas_primeira_resposta: int, horas_resolucao: int) -> None:
        """
        Altera horas de SLA.

        Não afeta tickets já criados: os prazos deles são fixados na abertura.
        """
        _validar_horas(
            horas_primeira_resposta,
            self.HORAS_PRIMEIRA_RESPOSTA_MAX,
            "horas_primeira_resposta",
        )
        _validar_horas(horas_resolucao, self.HORAS_RESOLUCAO_MAX, "horas_resolucao")
        self.horas_primeira_resposta = horas_primeira_resposta
        self.horas_resolucao = horas_resolucao

    def desativar(self) -> None:
        self.ativa = False

    def ativar(self) -> None:
        self.ativa = True

    def campo(self, nome: str) -> Optional[CampoPersonalizado]:
        """Busca campo personalizado pelo nome."""
        for campo in self.campos:
            if campo.nome == nome:
                return campo
        return None

    @property
    def nomes_campos(self) -> List[str]:
        return [campo.nome for campo in self.campos]

    def validar_dados(self, dados: Mapping[str, ValorCampo]) -> Dict[str, ValorCampo]:
        """
        Valida respostas submetidas contra os campos da categoria.

        Chaves desconhecidas são preservadas (o formulário pode evoluir),
        mas todo valor precisa ser escalar e todo campo obrigatório
        precisa estar preenchido.

        Returns:
            Cópia dos dados validados

        Raises:
            ValidationError: Valor não escalar ou campo obrigatório ausente
        """
        dados = dict(dados or {})

        for chave, valor in dados.items():
            if not isinstance(chave, str):
                raise ValidationError(
                    f"Chave inválida em dados personalizados: {chave!r}",
                    field="dados_personalizados",
                )
            if not isinstance(valor, (str, int, float, bool)):
                raise ValidationError(
                    f"Valor do campo '{chave}' deve ser texto, número ou booleano",
                    field="dados_personalizados",
                )

        for campo in self.campos:
            if not campo.obrigatorio:
                continue
            valor = dados.get(campo.nome)
            if valor is None or (isinstance(valor, str) and not valor.strip()):
                raise ValidationError(
                    f"Campo '{campo.rotulo}' é obrigatório",
                    field=campo.nome,
                )

        return dados

    def _validar_dias_reabertura(self) -> None:
        if self.dias_reabertura is None:
            return
        if (
            isinstance(self.dias_reabertura, bool)
            or not isinstance(self.dias_reabertura, int)
            or not 1 <= self.dias_reabertura <= self.DIAS_REABERTURA_MAX
        ):
            raise ValidationError(
                f"Dias de reabertura deve estar entre 1 e {self.DIAS_REABERTURA_MAX}",
                field="dias_reabertura",
            )

    def _validar_campos(self) -> None:
        vistos = set()
        for campo in self.campos:
            if not campo.nome or not campo.nome.strip():
                raise ValidationError(
                    "Campo personalizado sem nome",
                    field="campos_personalizados",
                )
            if campo.nome in vistos:
                raise ValidationError(
                    f"Campo personalizado duplicado: {campo.nome}",
                    field="campos_personalizados",
                )
            if campo.tipo == TipoCampo.SELECAO and not campo.opcoes:
                raise ValidationError(
                    f"Campo '{campo.nome}' do tipo select exige opções",
                    field="campos_personalizados",
                )
            vistos.add(campo.nome)


def _validar_horas(valor: int, maximo: int, campo: str) -> None:
    if isinstance(valor, bool) or not isinstance(valor, int) or not 1 <= valor <= maximo:
        raise ValidationError(
            f"{campo} deve ser um inteiro entre 1 e {maximo}",
            field=campo,
        )


@dataclass
class CategoriaAtribuicao:
    """Vínculo categoria → atendente (muitos-para-muitos)."""

    id: Optional[int] = None
    categoria_id: int = 0
    atendente_id: int = 0
    ativa: bool = True


@dataclass(frozen=True)
class RegraAtribuicao:
    """
    Regra de atribuição automática.

    Avaliada em ordem (prioridade asc, id asc); a primeira regra cuja
    condição casa com ``dados_personalizados[campo]`` define o atendente.
    """

    id: Optional[int] = None
    categoria_id: int = 0
    campo: str = ""
    operador: Operador = Operador.IGUAL
    valor: str = ""
    atendente_id: int = 0
    prioridade: int = 0

    @property
    def chave_ordenacao(self) -> Tuple[int, int]:
        return (self.prioridade, self.id if self.id is not None else 0)
