# site_spider/report/json_report.py

"""
Генерация JSON-отчёта для проекта SiteSpider.

Сериализация объекта CrawlReport в файл.
"""
from __future__ import annotations

import json
from dataclasses import asdict
from pathlib import Path

from site_spider.aggregator import CrawlReport


def render_json(report: CrawlReport, output_path: Path | str) -> Path:
    """
    Сохраняет отчёт report в формате JSON по указанному пути.

    :param report: объект CrawlReport с данными обхода
    :param output_path: путь к JSON-файлу
    :return: Path сохранённого файла
    """
    output = Path(output_path)
    output.parent.mkdir(parents=True, exist_ok=True)

    data = asdict(report)
    data["counts"] = report.counts

    with output.open("w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)

    return output
