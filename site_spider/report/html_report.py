# File: site_spider/report/html_report.py
"""site_spider.report.html_report: Генерация HTML-отчёта с помощью Jinja2."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Union

from jinja2 import Environment, FileSystemLoader, select_autoescape

from site_spider.aggregator import CrawlReport

#: шаблоны, поставляемые вместе с пакетом
DEFAULT_TEMPLATE_DIR = Path(__file__).parent / "templates"


def render_html(
    report: CrawlReport,
    template_dir: Union[Path, str, None],
    output_path: Union[Path, str],
) -> Path:
    """Рендерит HTML-отчёт из шаблона ``report.html.j2`` и сохраняет его.

    Args:
        report: объект CrawlReport.
        template_dir: директория с Jinja2-шаблонами (None – встроенные шаблоны).
        output_path: путь к итоговому HTML-файлу.

    Returns:
        Path до сохранённого HTML-файла.
    """
    template_dir = Path(template_dir) if template_dir else DEFAULT_TEMPLATE_DIR
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    env = Environment(
        loader=FileSystemLoader(str(template_dir)),
        autoescape=select_autoescape(["html", "xml", "j2"]),
    )
    template = env.get_template("report.html.j2")

    context: dict[str, Any] = {
        "site": report.site,
        "counts": report.counts,
        "urls": report.urls,
        "forms": report.forms,
        "upload_forms": report.upload_forms,
        "javascript": report.javascript,
        "subdomains": report.subdomains,
        "aws_s3": report.aws_s3,
        "linkfinder": report.linkfinder,
        "robots": report.robots,
        "sitemap": report.sitemap,
    }

    output_path.write_text(template.render(**context), encoding="utf-8")
    return output_path
