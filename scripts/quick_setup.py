#!/usr/bin/env python
"""
Setup rápido para desenvolvimento local.

Este script:
1. Configura Django settings
2. Cria banco de dados SQLite
3. Executa migrations
4. Cria categorias, vínculos, regras e tickets de exemplo (opcional)

Uso:
    python scripts/quick_setup.py
    python scripts/quick_setup.py --with-sample-data
"""

import os
import sys
import argparse

# Raiz do projeto no path (imports ``src.*``)
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def setup_django():
    """Configura Django para uso standalone."""
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

    # Forçar SQLite para desenvolvimento rápido
    os.environ['DATABASE_URL'] = 'sqlite:///db.sqlite3'

    import django
    django.setup()


def run_migrations():
    """Executa migrations."""
    from django.core.management import call_command

    print("📦 Executando migrations...")
    call_command('migrate', verbosity=1)
    print("✅ Migrations concluídas!")


SAMPLE_CATEGORIES = [
    {
        'nome': 'Hardware',
        'descricao': 'Equipamentos, impressoras e periféricos',
        'horas_primeira_resposta': 4,
        'horas_resolucao': 24,
        'campos': (
            {'name': 'urgencia', 'label': 'Urgência', 'type': 'select',
             'required': True, 'options': ['Baixa', 'Média', 'Alta']},
            {'name': 'patrimonio', 'label': 'Nº de patrimônio', 'type': 'number'},
        ),
        'atendentes': [101, 102],
    },
    {
        'nome': 'Sistemas',
        'descricao': 'ERP, e-mail e acessos',
        'horas_primeira_resposta': 2,
        'horas_resolucao': 48,
        'campos': (
            {'name': 'sistema', 'label': 'Sistema', 'type': 'text', 'required': True},
        ),
        'atendentes': [103],
    },
    {
        'nome': 'Outros',
        'descricao': 'Categoria geral: qualquer atendente assume',
        'horas_primeira_resposta': 8,
        'horas_resolucao': 72,
        'campos': (),
        'atendentes': [],
    },
]

SAMPLE_TICKETS = [
    {
        'categoria': 'Hardware',
        'assunto': 'Impressora do financeiro não imprime',
        'descricao': 'Erro de papel atolado mesmo sem papel na bandeja.',
        'prioridade': 'high',
        'dados_personalizados': {'urgencia': 'Alta', 'patrimonio': 4512},
    },
    {
        'categoria': 'Hardware',
        'assunto': 'Mouse com duplo clique',
        'descricao': 'O botão esquerdo registra dois cliques.',
        'prioridade': 'low',
        'dados_personalizados': {'urgencia': 'Baixa'},
    },
    {
        'categoria': 'Sistemas',
        'assunto': 'Sem acesso ao ERP',
        'descricao': 'Senha expirada e o reset não chega por e-mail.',
        'prioridade': 'urgent',
        'dados_personalizados': {'sistema': 'ERP'},
    },
    {
        'categoria': 'Outros',
        'assunto': 'Dúvida sobre ramal',
        'descricao': 'Qual o ramal do setor de compras?',
        'prioridade': 'medium',
        'dados_personalizados': {},
    },
]


def create_sample_data():
    """Cria dados de exemplo pelos próprios use cases."""
    from src.config.container import get_container
    from src.core.categorias.dtos import CriarCategoriaInputDTO, CriarRegraInputDTO
    from src.core.tickets.dtos import CriarTicketInputDTO

    container = get_container()

    print("📝 Criando categorias de exemplo...")
    categorias = {}
    for dados in SAMPLE_CATEGORIES:
        existente = container.categoria_repository().get_by_nome(dados['nome'])
        if existente:
            categorias[dados['nome']] = existente.id
            print(f"   • {dados['nome']} já existe")
            continue

        categoria = container.criar_categoria_service().execute(CriarCategoriaInputDTO(
            nome=dados['nome'],
            descricao=dados['descricao'],
            horas_primeira_resposta=dados['horas_primeira_resposta'],
            horas_resolucao=dados['horas_resolucao'],
            campos=dados['campos'],
        ))
        categorias[dados['nome']] = categoria.id
        for atendente_id in dados['atendentes']:
            container.atribuir_atendente_service().execute(categoria.id, atendente_id)
        print(f"   ✓ {categoria.nome} (SLA {categoria.horas_primeira_resposta}h/{categoria.horas_resolucao}h)")

    container.criar_regra_service().execute(
        categorias['Hardware'],
        CriarRegraInputDTO(campo='urgencia', operador='equals', valor='Alta', atendente_id=102),
    )
    print("   ✓ Regra: Hardware / urgencia = Alta → atendente 102")

    print("📝 Criando tickets de exemplo...")
    for dados in SAMPLE_TICKETS:
        ticket = container.criar_ticket_service().execute(CriarTicketInputDTO(
            solicitante_id=1,
            categoria_id=categorias[dados['categoria']],
            assunto=dados['assunto'],
            descricao=dados['descricao'],
            prioridade=dados['prioridade'],
            dados_personalizados=dados['dados_personalizados'],
        ))
        print(f"   ✓ #{ticket.id} {ticket.assunto[:40]} (atendente={ticket.atendente_id})")

    print(f"✅ {len(SAMPLE_TICKETS)} tickets criados!")


def check_connection():
    """Verifica conexão com o banco."""
    from django.db import connection
    from django.db.utils import OperationalError

    print("🔍 Verificando conexão com o banco...")

    try:
        with connection.cursor() as cursor:
            cursor.execute("SELECT 1")
        print("✅ Conexão OK!")
        return True
    except OperationalError as e:
        print(f"❌ Erro de conexão: {e}")
        return False


def show_info():
    """Mostra informações do setup."""
    from django.conf import settings

    print("\n" + "=" * 60)
    print("📊 Informações do Setup")
    print("=" * 60)
    print(f"  Database Engine: {settings.DATABASES['default']['ENGINE']}")
    print(f"  Database Name: {settings.DATABASES['default']['NAME']}")
    print(f"  Event Publisher: {settings.EVENT_PUBLISHER_MODE}")
    print(f"  SLA: violações a cada {settings.SLA_CHECK_INTERVAL_SECONDS}s, "
          f"avisos a cada {settings.SLA_WARNING_INTERVAL_SECONDS}s")
    print("=" * 60)
    print("\n🚀 Próximos passos:")
    print("   1. python scripts/run_sla_monitor.py")
    print("   2. ou: celery -A src.config.celery worker -B -l INFO")
    print("\n")


def main():
    parser = argparse.ArgumentParser(description='Setup rápido para desenvolvimento')
    parser.add_argument(
        '--with-sample-data',
        action='store_true',
        help='Criar dados de exemplo'
    )
    parser.add_argument(
        '--check-only',
        action='store_true',
        help='Apenas verificar conexão'
    )

    args = parser.parse_args()

    print("\n" + "=" * 60)
    print("🔧 Help Desk - Quick Setup")
    print("=" * 60 + "\n")

    setup_django()

    if args.check_only:
        check_connection()
        return

    if not check_connection():
        print("\n⚠️  Certifique-se de que o banco de dados está rodando.")
        print("   Para usar SQLite, defina: DATABASE_URL=sqlite:///db.sqlite3")
        return

    run_migrations()

    if args.with_sample_data:
        create_sample_data()

    show_info()


if __name__ == '__main__':
    main()
