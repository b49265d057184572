# File: site_spider/parser/robots_parser.py
"""site_spider.parser.robots_parser: Извлечение путей из robots.txt.

robots.txt здесь используется как источник URL, а не как набор запретов:
каждый путь из Allow/Disallow превращается в кандидата на обход.
"""

from __future__ import annotations

from typing import List, Tuple


def robots_paths(text: str) -> List[str]:
    """Возвращает уникальные пути из директив Allow/Disallow (без подстановочных символов)."""
    paths: List[str] = []
    for directive, value in _prepare_lines(text):
        if directive not in ("allow", "disallow") or not value:
            continue
        path = value.split("*", 1)[0].rstrip("$")
        if path and path not in paths:
            paths.append(path)
    return paths


def _prepare_lines(text: str) -> List[Tuple[str, str]]:
    """Очищает текст от комментариев и разделяет на (директива, значение)."""
    lines: List[Tuple[str, str]] = []
    for raw in text.splitlines():
        line = raw.split("#", 1)[0].strip()
        if not line or ":" not in line:
            continue
        key, val = (part.strip() for part in line.split(":", 1))
        lines.append((key.lower(), val))
    return lines
