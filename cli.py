# cli.py

"""
Точка входа для запуска linkcop без установки пакета.

Пример запуска:
    python cli.py crawl --host https://example.com --verbose --csv
"""
from linkcop.cli import cli


if __name__ == '__main__':
    cli()
