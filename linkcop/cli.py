# === FILE: linkcop/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска linkcop через командную строку.

Команды:
  crawl     Обойти сайт и вывести отчёт о битых и небезопасных ссылках
  config    Показать итоговую конфигурацию

Общие опции:
  --config PATH       Путь к YAML/JSON-конфигу (linkcop.yaml, если есть)
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Команда crawl опции:
  --host URL          Стартовая страница
  --verbose           Подробное логирование
  --csv               Дополнительно вывести CSV (stdout и report.csv)
  --only-failures     Скрыть ссылки, чей https-вариант отвечает 200
  --max-visits INT    Бюджет полных GET-запросов
  --random-delay SEC  Случайная задержка перед запросом

Дополнительно:
  --version, -v       Показать версию linkcop

Пример:
  linkcop crawl --host https://example.com --verbose --csv
"""
import asyncio
import sys
from pathlib import Path

import click

from linkcop import __version__
from linkcop.config import load_config
from linkcop.engine import start_crawl
from linkcop.exceptions import ReportWriteError
from linkcop.logger import DEFAULT_FORMAT, init_logging, set_verbose
from linkcop.report import make_renderer

CONTEXT_SETTINGS = dict(help_option_names=["--help"])


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _build_config(ctx, **overrides):
    try:
        return load_config(ctx.obj['config_path'], **overrides)
    except Exception as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='linkcop, version %(version)s')
@click.option(
    '--config', '-c', 'config_path',
    default=None,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help='Путь к файлу конфигурации YAML или JSON.'
)
@click.option(
    '--log-level', 'log_level',
    default='INFO', show_default=True,
    type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']),
    help='Уровень логирования'
)
@click.option(
    '--log-file', 'log_file',
    default=None,
    type=click.Path(writable=True, dir_okay=False, path_type=Path),
    help='Путь к файлу логов (stderr, если не указан)'
)
@click.option(
    '--log-format', 'log_format',
    default=DEFAULT_FORMAT,
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, config_path, log_level, log_file, log_format):
    """Группа команд linkcop CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)
    ctx.obj['config_path'] = config_path


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@click.option('--host', 'host', default=None, help='Стартовая страница, например https://example.com')
@click.option('--verbose', is_flag=True, default=False, help='Подробное логирование')
@click.option('--csv', 'csv', is_flag=True, default=False, help='Вывести отчёт также в CSV')
@click.option(
    '--csv-path', 'csv_path',
    default=None,
    type=click.Path(dir_okay=False, path_type=Path),
    help='Файл CSV-отчёта (report.csv по умолчанию)'
)
@click.option('--only-failures', 'only_failures', is_flag=True, default=False,
              help='Скрыть ссылки, чей https-вариант отвечает 200')
@click.option('--max-visits', 'max_visits', type=int, default=None, help='Бюджет полных GET-запросов')
@click.option('--random-delay', 'random_delay', type=float, default=None,
              help='Случайная задержка перед запросом (секунд)')
@click.option('--parallelism', 'parallelism', type=int, default=None, help='Параллельных запросов на хост')
@click.option(
    '--cache-dir', 'cache_dir',
    default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help='Каталог кэша ответов (.url-cache по умолчанию)'
)
@click.pass_context
def crawl(ctx, host, verbose, csv, csv_path, only_failures, max_visits, random_delay, parallelism, cache_dir):
    """Обойти сайт и вывести отчёт."""
    cfg = _build_config(
        ctx,
        host=host,
        verbose=verbose or None,
        csv=csv or None,
        csv_path=csv_path,
        only_failures=only_failures or None,
        max_visits=max_visits,
        random_delay=random_delay,
        parallelism=parallelism,
        cache_dir=cache_dir,
    )
    set_verbose(cfg.verbose)
    render = make_renderer(csv_path=cfg.csv_path if cfg.csv else None)

    try:
        outcome = asyncio.run(start_crawl(cfg, render))
    except ReportWriteError as e:
        print_error(f'Ошибка при сохранении CSV: {e}')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    if outcome.interrupted:
        click.secho('Crawl interrupted, partial report above.', fg='yellow', err=True)
        sys.exit(1)


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@click.option('--host', 'host', default=None, help='Стартовая страница')
@click.pass_context
def show_config(ctx, host):
    """Показать итоговую конфигурацию в JSON."""
    cfg = _build_config(ctx, host=host)
    click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
