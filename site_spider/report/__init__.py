# File: site_spider/report/__init__.py
"""site_spider.report: Генерация сводных отчётов (JSON и HTML) по результатам обхода."""

from __future__ import annotations

from site_spider.report.html_report import DEFAULT_TEMPLATE_DIR, render_html
from site_spider.report.json_report import render_json

__all__ = ["DEFAULT_TEMPLATE_DIR", "render_json", "render_html"]
