# === FILE: site_spider/config.py ===
"""
Загрузка и валидация конфигурации краулера SiteSpider.
Используется Pydantic для описания схемы и проверки данных.

Ошибки конфигурации (неверный proxy, некомпилируемый blacklist, отсутствующий
файл raw-запроса) проявляются при создании объекта, а не во время обхода.
"""
from __future__ import annotations

import errno
import json
import os
import re
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union
from urllib.parse import urlsplit

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    HttpUrl,
    ValidationError,
    field_validator,
)

from site_spider.logger import logger
from site_spider.utils import load_raw_request

#: таймаут по умолчанию, если задан 0
DEFAULT_TIMEOUT: float = 10.0

#: режимы случайного User-Agent
RANDOM_UA_MODES: Tuple[str, ...] = ("web", "mobi")


class CrawlerConfig(BaseModel):
    """Неизменяемые параметры одного запуска обхода."""
    model_config = ConfigDict(extra="forbid", frozen=True)

    site: HttpUrl = Field(..., description="Стартовый URL обхода.")
    max_depth: int = Field(1, ge=0, description="Максимальная глубина (0 – без ограничения).")
    parallelism: int = Field(5, ge=1, description="Число параллельных запросов на домен.")
    delay: float = Field(0.0, ge=0, description="Пауза между запросами к одному хосту (секунд).")
    random_delay: float = Field(0.0, ge=0, description="Дополнительная случайная пауза (секунд).")
    timeout: float = Field(DEFAULT_TIMEOUT, ge=0, description="Таймаут на один запрос (секунд).")
    no_redirect: bool = Field(False, description="Не следовать редиректам.")
    proxy: Optional[str] = Field(None, description="HTTP(S) прокси.")
    headers: Tuple[Tuple[str, str], ...] = Field((), description="Дополнительные заголовки.")
    cookie: Optional[str] = Field(None, description="Значение заголовка Cookie.")
    user_agent: str = Field("web", min_length=1, description="'web', 'mobi' или строка User-Agent.")
    blacklist: Optional[str] = Field(None, description="Regex для исключения URL.")
    raw_request: Optional[Path] = Field(None, description="Файл raw HTTP-запроса (Burp).")
    robots: bool = Field(True, description="Искать URL в robots.txt.")
    sitemap: bool = Field(False, description="Искать URL в sitemap.xml.")
    json_output: bool = Field(False, description="Выводить события в формате JSON.")
    output: Optional[Path] = Field(None, description="Папка для файла с событиями.")

    @field_validator("timeout", mode="after")
    def _default_timeout(cls, v: float) -> float:
        if v == 0:
            logger.info("Timeout is 0, falling back to %.0f seconds", DEFAULT_TIMEOUT)
            return DEFAULT_TIMEOUT
        return v

    @field_validator("proxy", mode="after")
    def _check_proxy(cls, v: Optional[str]) -> Optional[str]:
        if v is None or v == "":
            return None
        parts = urlsplit(v)
        if parts.scheme not in ("http", "https") or not parts.hostname:
            raise ValueError(f"Invalid proxy URL: {v!r}")
        return v

    @field_validator("headers", mode="before")
    def _split_headers(cls, v: Any) -> Any:
        if v is None:
            return ()
        pairs = []
        for item in v:
            if isinstance(item, str):
                name, sep, value = item.partition(":")
                if not sep or not name.strip():
                    raise ValueError(f"Header must look like 'Name: value', got {item!r}")
                pairs.append((name.strip(), value.strip()))
            else:
                pairs.append(tuple(item))
        return tuple(pairs)

    @field_validator("blacklist", mode="after")
    def _compile_blacklist(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return None
        try:
            re.compile(v)
        except re.error as exc:
            raise ValueError(f"Invalid blacklist regex {v!r}: {exc}") from exc
        return v

    @field_validator("raw_request", mode="after")
    def _check_raw_request(cls, v: Optional[Path]) -> Optional[Path]:
        if v is None:
            return v
        if not v.expanduser().is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(v))
        # malformed request files fail here, not in the middle of a crawl
        load_raw_request(v)
        return v

    @property
    def seed(self) -> str:
        """Стартовый URL строкой."""
        return str(self.site)


_DEFAULT_CFG = Path("configs/default.yaml")


def _read_yaml(path: Path) -> dict[str, Any]:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ValueError(f"Неправильный YAML в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень YAML должен быть mapping, получено {type(data).__name__}")
    return data


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8")) or {}
    except json.JSONDecodeError as exc:
        raise ValueError(f"Неправильный JSON в {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise TypeError(f"Верхний уровень JSON должен быть mapping, получено {type(data).__name__}")
    return data


def read_config_file(path: Union[str, Path, None]) -> Dict[str, Any]:
    """Читает YAML или JSON и возвращает «сырые» значения без валидации."""
    if path is None:
        if not _DEFAULT_CFG.exists():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(_DEFAULT_CFG))
        path_obj = _DEFAULT_CFG
    else:
        path_obj = Path(path).expanduser().resolve()
        if not path_obj.is_file():
            raise FileNotFoundError(errno.ENOENT, os.strerror(errno.ENOENT), str(path_obj))

    suffix = path_obj.suffix.lower()
    if suffix in (".yaml", ".yml"):
        return _read_yaml(path_obj)
    if suffix == ".json":
        return _read_json(path_obj)
    raise ValueError(f"Неподдерживаемый формат конфига: {suffix}")


def load_config(path: Union[str, Path, None], **overrides: Any) -> CrawlerConfig:
    """
    Читает YAML или JSON и возвращает проверенный объект CrawlerConfig.
    Значения из ``overrides`` (кроме None) имеют приоритет над файлом.
    """
    data = read_config_file(path)
    data.update({k: v for k, v in overrides.items() if v is not None})
    return CrawlerConfig(**data)


__all__ = [
    "CrawlerConfig",
    "DEFAULT_TIMEOUT",
    "RANDOM_UA_MODES",
    "ValidationError",
    "load_config",
    "read_config_file",
]
