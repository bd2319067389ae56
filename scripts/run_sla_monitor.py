#!/usr/bin/env python
"""
SLA Monitor standalone.

Roda as varreduras de violação e de aviso num BackgroundScheduler do
APScheduler, sem Celery. SIGINT/SIGTERM param o agendamento e esperam a
varredura em andamento terminar.

Uso:
    python scripts/run_sla_monitor.py
    python scripts/run_sla_monitor.py --once
"""

import argparse
import logging
import os
import signal
import sys
import threading

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

logger = logging.getLogger('src.adapters.sla_monitor')


def setup_django():
    os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'src.config.settings')

    import django
    django.setup()


def main():
    parser = argparse.ArgumentParser(description='Monitor de SLA (violações e avisos)')
    parser.add_argument(
        '--once',
        action='store_true',
        help='Executa uma varredura de cada tipo e sai'
    )
    args = parser.parse_args()

    setup_django()

    from src.config.container import get_container

    monitor = get_container().sla_monitor()

    if args.once:
        for resultado in (monitor.verificar_violacoes(), monitor.verificar_avisos()):
            logger.info(f"{resultado.varredura}: {resultado.to_dict()}")
        return

    parar = threading.Event()

    def _encerrar(signum, frame):
        logger.info(f"Sinal {signum} recebido; encerrando monitor")
        parar.set()

    signal.signal(signal.SIGINT, _encerrar)
    signal.signal(signal.SIGTERM, _encerrar)

    monitor.start()
    try:
        parar.wait()
    finally:
        monitor.stop(wait=True)


if __name__ == '__main__':
    main()
