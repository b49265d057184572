# === FILE: site_spider/cli.py ===
#!/usr/bin/env python3
"""
Точка входа для запуска краулера SiteSpider через командную строку.

Команды:
  crawl     Обойти сайт(ы) и печатать найденное в stdout
  config    Показать итоговую конфигурацию

Общие опции:
  --log-level LEVEL   Уровень логирования (DEBUG, INFO, ...)
  --log-file PATH     Файл для логов (stderr, если не указан)
  --log-format FORMAT Формат логирования

Пример:
  site-spider crawl -s https://example.com -d 2 -c 10 --sitemap -o out/
"""
import asyncio
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

import click
from click.core import ParameterSource
from pydantic import ValidationError

from site_spider import __version__
from site_spider.aggregator import aggregate_results
from site_spider.config import CrawlerConfig, read_config_file
from site_spider.engine import crawl_sites
from site_spider.logger import init_logging
from site_spider.report.html_report import render_html
from site_spider.report.json_report import render_json
from site_spider.sinks import CollectingSink, ConsoleSink, FanoutSink, FileSink, output_filename
from site_spider.utils import read_lines

CONTEXT_SETTINGS = dict(help_option_names=["--help"])

# CLI parameter -> CrawlerConfig field
_CONFIG_FIELDS = {
    "depth": "max_depth",
    "concurrent": "parallelism",
    "delay": "delay",
    "random_delay": "random_delay",
    "timeout": "timeout",
    "proxy": "proxy",
    "headers": "headers",
    "cookie": "cookie",
    "user_agent": "user_agent",
    "blacklist": "blacklist",
    "burp": "raw_request",
    "no_redirect": "no_redirect",
    "robots": "robots",
    "sitemap": "sitemap",
    "json_output": "json_output",
    "output": "output",
}


def print_error(message: str):
    click.secho(message, fg='red', err=True)
    sys.exit(1)


def _collect_settings(ctx: click.Context, config_path: Optional[Path]) -> Dict[str, Any]:
    """Значения из файла конфига, перекрытые явно заданными опциями CLI."""
    data: Dict[str, Any] = dict(read_config_file(config_path)) if config_path else {}
    for param, field in _CONFIG_FIELDS.items():
        value = ctx.params.get(param)
        explicit = ctx.get_parameter_source(param) not in (ParameterSource.DEFAULT, None)
        if explicit or field not in data:
            data[field] = value
    return data


def _build_configs(ctx: click.Context, seeds: List[str], config_path: Optional[Path]) -> List[CrawlerConfig]:
    try:
        settings = _collect_settings(ctx, config_path)
    except (OSError, ValueError, TypeError) as e:
        print_error(f'Ошибка загрузки конфигурации: {e}')
    if not seeds and settings.get("site"):
        seeds = [str(settings["site"])]
    if not seeds:
        print_error('Не задан сайт: используйте --site, --sites или поле site в конфиге')
    configs = []
    for seed in seeds:
        try:
            configs.append(CrawlerConfig(**{**settings, "site": seed}))
        except (ValidationError, OSError, ValueError) as e:
            print_error(f'Неверная конфигурация для {seed}: {e}')
    return configs


def _report_path(path: Path, seed: str, multiple: bool) -> Path:
    if not multiple:
        return path
    return path.with_name(f"{path.stem}_{output_filename(seed)}{path.suffix}")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(__version__, '--version', '-v', message='SiteSpider, version %(version)s')
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
    default='%(asctime)s %(levelname)s %(message)s',
    show_default=True,
    help='Строка формата для логов'
)
@click.pass_context
def cli(ctx, log_level, log_file, log_format):
    """Группа команд SiteSpider CLI."""
    init_logging(
        level=log_level,
        log_file=str(log_file) if log_file else None,
        log_format=log_format
    )
    ctx.ensure_object(dict)


def crawl_options(func):
    """Опции, общие для команд crawl и config."""
    options = [
        click.option('--site', '-s', 'site', default=None, help='Стартовый URL'),
        click.option('--sites', '-S', 'sites_file', default=None,
                     type=click.Path(exists=True, dir_okay=False, path_type=Path),
                     help='Файл со списком сайтов'),
        click.option('--config', 'config_path', default=None,
                     type=click.Path(exists=True, dir_okay=False, path_type=Path),
                     help='YAML/JSON файл конфигурации'),
        click.option('--depth', '-d', type=int, default=1, show_default=True,
                     help='Максимальная глубина (0 – без ограничения)'),
        click.option('--concurrent', '-c', type=int, default=5, show_default=True,
                     help='Параллельных запросов на домен'),
        click.option('--delay', '-k', type=float, default=0.0, show_default=True,
                     help='Пауза между запросами к хосту (сек)'),
        click.option('--random-delay', '-K', 'random_delay', type=float, default=0.0, show_default=True,
                     help='Случайная добавка к паузе (сек)'),
        click.option('--timeout', '-m', type=float, default=10.0, show_default=True,
                     help='Таймаут запроса (сек)'),
        click.option('--proxy', '-p', default=None, help='HTTP(S) прокси'),
        click.option('--header', '-H', 'headers', multiple=True, help='Заголовок "Name: value"'),
        click.option('--cookie', default=None, help='Значение Cookie'),
        click.option('--user-agent', '-u', 'user_agent', default='web', show_default=True,
                     help="'web', 'mobi' или своя строка"),
        click.option('--blacklist', default=None, help='Regex URL, которые не обходить'),
        click.option('--burp', default=None, type=click.Path(dir_okay=False, path_type=Path),
                     help='Файл raw HTTP-запроса (заголовки и cookie)'),
        click.option('--no-redirect', 'no_redirect', is_flag=True, default=False,
                     help='Не следовать редиректам'),
        click.option('--robots/--no-robots', 'robots', default=True, show_default=True,
                     help='Искать URL в robots.txt'),
        click.option('--sitemap', 'sitemap', is_flag=True, default=False,
                     help='Искать URL в sitemap.xml'),
        click.option('--json', 'json_output', is_flag=True, default=False,
                     help='Печатать события как JSON'),
        click.option('--output', '-o', 'output', default=None,
                     type=click.Path(file_okay=False, path_type=Path),
                     help='Папка для файла с событиями'),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@cli.command('crawl', context_settings=CONTEXT_SETTINGS)
@crawl_options
@click.option('--threads', '-t', type=int, default=1, show_default=True,
              help='Сколько сайтов обходить одновременно')
@click.option('--report-json', 'report_json', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Сохранить сводный JSON-отчёт')
@click.option('--report-html', 'report_html', default=None,
              type=click.Path(writable=True, dir_okay=False, path_type=Path),
              help='Сохранить сводный HTML-отчёт')
@click.option('--template', '-T', 'template_dir', default=None,
              type=click.Path(exists=True, file_okay=False, path_type=Path),
              help='Папка с Jinja2-шаблонами')
@click.option('--crawl-timeout', 'crawl_timeout', type=float, default=None,
              help='Таймаут всего обхода (секунд)')
@click.pass_context
def crawl(ctx, site, sites_file, config_path, threads, report_json, report_html, template_dir,
          crawl_timeout, **_options):
    """Обойти сайт(ы) и вывести найденные URL, формы, скрипты и утечки."""
    seeds = [site] if site else []
    if sites_file:
        seeds.extend(read_lines(sites_file))
    configs = _build_configs(ctx, seeds, config_path)
    multiple = len(configs) > 1

    collectors: Dict[str, CollectingSink] = {}

    def make_sink(cfg: CrawlerConfig):
        sinks = [ConsoleSink(json_output=cfg.json_output, input_url=cfg.seed)]
        if cfg.output is not None:
            sinks.append(FileSink(cfg.output, cfg.seed, json_output=cfg.json_output))
        if report_json or report_html:
            collectors[cfg.seed] = CollectingSink()
            sinks.append(collectors[cfg.seed])
        return FanoutSink(sinks)

    try:
        runner = crawl_sites(configs, make_sink, threads)
        if crawl_timeout:
            asyncio.run(asyncio.wait_for(runner, timeout=crawl_timeout))
        else:
            asyncio.run(runner)
    except asyncio.TimeoutError:
        print_error(f'Обход не завершён за {crawl_timeout} секунд')
    except Exception as e:
        print_error(f'Ошибка при обходе: {e}')

    for seed, collector in collectors.items():
        report = aggregate_results(collector.events, site=seed)
        if report_json:
            try:
                saved = render_json(report, _report_path(report_json, seed, multiple))
                click.echo(f'JSON report: {saved}', err=True)
            except Exception as e:
                print_error(f'Ошибка при сохранении JSON: {e}')
        if report_html:
            try:
                saved = render_html(report, template_dir, _report_path(report_html, seed, multiple))
                click.echo(f'HTML report: {saved}', err=True)
            except Exception as e:
                print_error(f'Ошибка при сохранении HTML: {e}')


@cli.command('config', context_settings=CONTEXT_SETTINGS)
@crawl_options
@click.pass_context
def show_config(ctx, site, sites_file, config_path, **_options):
    """Показать итоговую конфигурацию в JSON."""
    seeds = [site] if site else []
    if sites_file:
        seeds.extend(read_lines(sites_file))
    for cfg in _build_configs(ctx, seeds, config_path):
        click.echo(cfg.model_dump_json(indent=2))


if __name__ == "__main__":
    cli()
