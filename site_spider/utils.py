# File: site_spider/utils.py
"""site_spider.utils: Вспомогательные функции для чтения входных файлов (списки сайтов, raw-запросы)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

from site_spider.logger import logger

__all__: Sequence[str] = (
    "RawRequest",
    "read_lines",
    "resolve_path",
    "parse_raw_request",
    "load_raw_request",
)


@dataclass(slots=True)
class RawRequest:
    """Заголовки и cookie, извлечённые из сохранённого HTTP-запроса (например, из Burp)."""

    headers: List[Tuple[str, str]] = field(default_factory=list)
    cookie: Optional[str] = None


def read_lines(path: Union[str, Path]) -> List[str]:
    """Читает файл построчно, возвращает непустые строки без пробелов."""
    p = resolve_path(path)
    lines = [line.strip() for line in p.read_text(encoding="utf-8").splitlines() if line.strip()]
    logger.debug("Loaded %d entries from %s", len(lines), p)
    return lines


def resolve_path(path: Union[str, Path]) -> Path:
    """Раскрывает `~`, проверяет существование и возвращает Path."""
    p = Path(path).expanduser()
    if not p.exists():
        logger.error("Path not found: %s", p)
        raise FileNotFoundError(f"Path not found: {p}")
    return p


def parse_raw_request(text: str) -> RawRequest:
    """Разбирает текст raw HTTP-запроса: строка запроса, заголовки до пустой строки.

    ``Cookie`` выносится отдельно, ``Host`` и ``Content-Length`` отбрасываются –
    их выставляет HTTP-клиент для каждого запроса.
    """
    lines = text.replace("\r\n", "\n").split("\n")
    if not lines or len(lines[0].split()) < 2:
        raise ValueError("Raw request must start with a request line, e.g. 'GET / HTTP/1.1'")

    raw = RawRequest()
    for line in lines[1:]:
        if not line.strip():
            break
        name, sep, value = line.partition(":")
        if not sep:
            raise ValueError(f"Malformed header line in raw request: {line!r}")
        name, value = name.strip(), value.strip()
        lowered = name.lower()
        if lowered == "cookie":
            raw.cookie = value
        elif lowered in ("host", "content-length"):
            continue
        else:
            raw.headers.append((name, value))
    return raw


def load_raw_request(path: Union[str, Path]) -> RawRequest:
    """Читает и разбирает файл raw-запроса."""
    p = resolve_path(path)
    return parse_raw_request(p.read_text(encoding="utf-8", errors="replace"))
