# === FILE: site_spider/logger.py ===
"""Diagnostics logging for **SiteSpider**.

stdout belongs to the discovery stream (see :mod:`site_spider.sinks`), so
every log record goes to stderr and, optionally, to a rotating log file.

Usage::

    from site_spider.logger import logger
    logger.debug("Filtered %s", url)

The CLI calls :func:`init_logging` once with the user's level and format.
"""
from __future__ import annotations

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Final, List, Optional, Union

LOGGER_NAME: Final[str] = "SiteSpider"
DEFAULT_FORMAT: Final[str] = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"

#: rotation of --log-file: 5 MiB per file, three backups
_MAX_BYTES: Final[int] = 5 * 1024 * 1024
_BACKUPS: Final[int] = 3

Level = Union[int, str]


def _build_handlers(log_file: Optional[Union[str, Path]], fmt: str) -> List[logging.Handler]:
    formatter = logging.Formatter(fmt)
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file is not None:
        path = Path(log_file).expanduser()
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(path, maxBytes=_MAX_BYTES, backupCount=_BACKUPS, encoding="utf-8")
        )
    for handler in handlers:
        handler.setFormatter(formatter)
    return handlers


def configure(
    *,
    level: Level = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
    replace_handlers: bool = True,
) -> logging.Logger:
    """Настраивает логгер проекта.

    Parameters
    ----------
    level
        Уровень логирования, числом или строкой (``"DEBUG"``).
    log_file
        Файл логов с ротацией; *None* – только stderr.
    log_format
        Строка формата для :class:`logging.Formatter`.
    replace_handlers
        Закрыть и убрать прежние обработчики перед добавлением новых.
    """
    lg = logging.getLogger(LOGGER_NAME)
    lg.setLevel(level)
    if replace_handlers:
        for old in list(lg.handlers):
            lg.removeHandler(old)
            old.close()
    for handler in _build_handlers(log_file, log_format):
        lg.addHandler(handler)
    # records never reach the root logger
    lg.propagate = False
    return lg


def init_logging(
    level: Level = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_format: str = DEFAULT_FORMAT,
) -> logging.Logger:
    """Shortcut for :func:`configure` with handler replacement."""
    return configure(level=level, log_file=log_file, log_format=log_format)


logger: logging.Logger = init_logging()

__all__ = ["DEFAULT_FORMAT", "LOGGER_NAME", "logger", "configure", "init_logging"]
