"""
Migration inicial para o domínio de Categorias.

Cria as tabelas:
- categorias: SLA e campos personalizados
- categoria_atribuicoes: vínculo categoria → atendente
- regras_atribuicao: regras de roteamento
"""

from django.db import migrations, models
import django.db.models.deletion
import django.utils.timezone


class Migration(migrations.Migration):
    """Migration inicial."""

    initial = True

    dependencies = [
    ]

    operations = [
        # =================================================================
        # Tabela: categorias
        # =================================================================
        migrations.CreateModel(
            name='CategoriaModel',
            fields=[
                ('id', models.BigAutoField(
                    auto_created=True,
                    primary_key=True,
                    serialize=False,
                    verbose_name='ID'
                )),
                ('nome', models.CharField(
                    max_length=100,
                    unique=True,
                    help_text='Nome da categoria'
                )),
                ('descricao', models.TextField(blank=True, default='')),
                ('horas_primeira_resposta', models.PositiveIntegerField(
                    default=4,
                    help_text='SLA de primeira resposta (1-168h)'
                )),
                ('horas_resolucao', models.PositiveIntegerField(
                    default=24,
                    help_text='SLA de resolução (1-720h)'
                )),
                ('ativa', models.BooleanField(db_index=True, default=True)),
                ('campos', models.JSONField(
                    blank=True,
                    default=list,
                    help_text='Campos personalizados: name, label, type, required, options'
                )),
                ('dias_reabertura', models.PositiveSmallIntegerField(
                    blank=True,
                    null=True,
                    help_text='Dias após o fechamento em que o ticket pode ser reaberto'
                )),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now)),
            ],
            options={
                'verbose_name': 'Categoria',
                'verbose_name_plural': 'Categorias',
                'db_table': 'categorias',
                'ordering': ['nome'],
            },
        ),

        # =================================================================
        # Tabela: categoria_atribuicoes
        # =================================================================
        migrations.CreateModel(
            name='CategoriaAtribuicaoModel',
            fields=[
                ('id', models.BigAutoField(
                    auto_created=True,
                    primary_key=True,
                    serialize=False,
                    verbose_name='ID'
                )),
                ('atendente_id', models.BigIntegerField(db_index=True)),
                ('ativa', models.BooleanField(default=True)),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('categoria', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='atribuicoes',
                    to='categorias.categoriamodel'
                )),
            ],
            options={
                'verbose_name': 'Atribuição de Categoria',
                'verbose_name_plural': 'Atribuições de Categoria',
                'db_table': 'categoria_atribuicoes',
                'ordering': ['id'],
            },
        ),
        migrations.AddConstraint(
            model_name='categoriaatribuicaomodel',
            constraint=models.UniqueConstraint(
                fields=('categoria', 'atendente_id'),
                name='uniq_categoria_atendente'
            ),
        ),
        migrations.AddIndex(
            model_name='categoriaatribuicaomodel',
            index=models.Index(
                fields=['categoria', 'ativa'],
                name='cat_atrib_categoria_idx'
            ),
        ),

        # =================================================================
        # Tabela: regras_atribuicao
        # =================================================================
        migrations.CreateModel(
            name='RegraAtribuicaoModel',
            fields=[
                ('id', models.BigAutoField(
                    auto_created=True,
                    primary_key=True,
                    serialize=False,
                    verbose_name='ID'
                )),
                ('campo', models.CharField(max_length=100)),
                ('operador', models.CharField(
                    max_length=20,
                    choices=[
                        ('equals', 'Igual a'),
                        ('not_equals', 'Diferente de'),
                        ('contains', 'Contém'),
                        ('gt', 'Maior que'),
                        ('gte', 'Maior ou igual a'),
                        ('lt', 'Menor que'),
                        ('lte', 'Menor ou igual a'),
                    ],
                    default='equals'
                )),
                ('valor', models.CharField(max_length=255)),
                ('atendente_id', models.BigIntegerField(db_index=True)),
                ('prioridade', models.IntegerField(default=0)),
                ('criado_em', models.DateTimeField(default=django.utils.timezone.now)),
                ('categoria', models.ForeignKey(
                    on_delete=django.db.models.deletion.CASCADE,
                    related_name='regras',
                    to='categorias.categoriamodel'
                )),
            ],
            options={
                'verbose_name': 'Regra de Atribuição',
                'verbose_name_plural': 'Regras de Atribuição',
                'db_table': 'regras_atribuicao',
                'ordering': ['prioridade', 'id'],
            },
        ),
        migrations.AddIndex(
            model_name='regraatribuicaomodel',
            index=models.Index(
                fields=['categoria', 'prioridade'],
                name='regras_categoria_idx'
            ),
        ),
    ]
