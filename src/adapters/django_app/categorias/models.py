"""
Django Models para o domínio de Categorias.

Estes models são ADAPTERS - implementam a persistência para as
entidades definidas em src/core/categorias/entities.py.

Relacionamentos:
- CategoriaModel: SLA e campos personalizados da categoria
- CategoriaAtribuicaoModel: vínculo categoria → atendente
- RegraAtribuicaoModel: regras de roteamento por resposta submetida
"""

from django.db import models
from django.utils import timezone


class OperadorChoices(models.TextChoices):
    """Choices de operador (espelha Operador do Core)."""
    IGUAL = 'equals', 'Igual a'
    DIFERENTE = 'not_equals', 'Diferente de'
    CONTEM = 'contains', 'Contém'
    MAIOR = 'gt', 'Maior que'
    MAIOR_OU_IGUAL = 'gte', 'Maior ou igual a'
    MENOR = 'lt', 'Menor que'
    MENOR_OU_IGUAL = 'lte', 'Menor ou igual a'


class CategoriaModel(models.Model):
    """
    Categoria de ticket.

    Fields:
        nome: Nome único
        horas_primeira_resposta / horas_resolucao: SLA em horas
        ativa: Categorias inativas não recebem tickets novos
        campos: Definições dos campos personalizados (JSON, ordenado)
        dias_reabertura: Janela de reabertura (None = padrão do sistema)
    """

    nome = models.CharField(
        max_length=100,
        unique=True,
        help_text="Nome da categoria"
    )

    descricao = models.TextField(blank=True, default='')

    horas_primeira_resposta = models.PositiveIntegerField(
        default=4,
        help_text="SLA de primeira resposta (1-168h)"
    )

    horas_resolucao = models.PositiveIntegerField(
        default=24,
        help_text="SLA de resolução (1-720h)"
    )

    ativa = models.BooleanField(default=True, db_index=True)

    campos = models.JSONField(
        default=list,
        blank=True,
        help_text="Campos personalizados: name, label, type, required, options"
    )

    dias_reabertura = models.PositiveSmallIntegerField(
        null=True,
        blank=True,
        help_text="Dias após o fechamento em que o ticket pode ser reaberto"
    )

    criado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'categorias'
        verbose_name = 'Categoria'
        verbose_name_plural = 'Categorias'
        ordering = ['nome']

    def __str__(self):
        return self.nome


class CategoriaAtribuicaoModel(models.Model):
    """Vínculo categoria → atendente (desativado em vez de excluído)."""

    categoria = models.ForeignKey(
        CategoriaModel,
        on_delete=models.CASCADE,
        related_name='atribuicoes',
    )

    atendente_id = models.BigIntegerField(db_index=True)

    ativa = models.BooleanField(default=True)

    criado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'categoria_atribuicoes'
        verbose_name = 'Atribuição de Categoria'
        verbose_name_plural = 'Atribuições de Categoria'
        ordering = ['id']
        constraints = [
            models.UniqueConstraint(
                fields=['categoria', 'atendente_id'],
                name='uniq_categoria_atendente',
            ),
        ]
        indexes = [
            models.Index(fields=['categoria', 'ativa'], name='cat_atrib_categoria_idx'),
        ]

    def __str__(self):
        return f"{self.categoria_id} → {self.atendente_id}"


class RegraAtribuicaoModel(models.Model):
    """
    Regra de atribuição: ``dados[campo] <operador> valor`` → atendente.

    Avaliadas por (prioridade, id) crescente; a primeira que casa vence.
    """

    categoria = models.ForeignKey(
        CategoriaModel,
        on_delete=models.CASCADE,
        related_name='regras',
    )

    campo = models.CharField(max_length=100)

    operador = models.CharField(
        max_length=20,
        choices=OperadorChoices.choices,
        default=OperadorChoices.IGUAL,
    )

    valor = models.CharField(max_length=255)

    atendente_id = models.BigIntegerField(db_index=True)

    prioridade = models.IntegerField(default=0)

    criado_em = models.DateTimeField(default=timezone.now)

    class Meta:
        db_table = 'regras_atribuicao'
        verbose_name = 'Regra de Atribuição'
        verbose_name_plural = 'Regras de Atribuição'
        ordering = ['prioridade', 'id']
        indexes = [
            models.Index(fields=['categoria', 'prioridade'], name='regras_categoria_idx'),
        ]

    def __str__(self):
        return f"[{self.prioridade}] {self.campo} {self.operador} {self.valor} → {self.atendente_id}"
