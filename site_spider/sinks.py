# File: site_spider/sinks.py
"""site_spider.sinks: получатели событий обхода (консоль, файл, память).

Ядро краулера вызывает только ``emit(event)``; форматирование и запись –
ответственность конкретного sink-а. Все реализации безопасны для вызова из
нескольких воркеров одновременно.
"""

from __future__ import annotations

import json
import threading
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Sequence, Union

import click

from site_spider.crawler.models import Category, DiscoveryEvent
from site_spider.crawler.urls import hostname

__all__: Sequence[str] = (
    "EventSink",
    "ConsoleSink",
    "FileSink",
    "CollectingSink",
    "FanoutSink",
    "format_event",
    "output_filename",
)


class EventSink(Protocol):
    """Контракт получателя событий."""

    def emit(self, event: DiscoveryEvent) -> None: ...


def format_event(event: DiscoveryEvent, *, json_output: bool = False, input_url: str = "") -> str:
    """Строка события: текстовый формат ``[tag] - ...`` или JSON-строка."""
    if json_output:
        return json.dumps(event.to_dict(input_url), ensure_ascii=False)
    return event.render()


def output_filename(site: str) -> str:
    """Имя файла вывода: hostname с точками, заменёнными на подчёркивания."""
    return hostname(site).replace(".", "_") or "output"


class ConsoleSink:
    """Печатает события в stdout через click."""

    def __init__(self, *, json_output: bool = False, input_url: str = "") -> None:
        self.json_output = json_output
        self.input_url = input_url
        self._lock = threading.Lock()

    def emit(self, event: DiscoveryEvent) -> None:
        line = format_event(event, json_output=self.json_output, input_url=self.input_url)
        with self._lock:
            click.echo(line)


class FileSink:
    """Дописывает события построчно в ``<folder>/<host_with_underscores>``."""

    def __init__(
        self,
        folder: Union[str, Path],
        site: str,
        *,
        json_output: bool = False,
    ) -> None:
        self.folder = Path(folder).expanduser()
        self.folder.mkdir(parents=True, exist_ok=True)
        self.path = self.folder / output_filename(site)
        self.json_output = json_output
        self.input_url = site
        self._lock = threading.Lock()
        self._file = self.path.open("a", encoding="utf-8")

    def emit(self, event: DiscoveryEvent) -> None:
        line = format_event(event, json_output=self.json_output, input_url=self.input_url)
        with self._lock:
            self._file.write(line + "\n")
            self._file.flush()

    def close(self) -> None:
        with self._lock:
            if not self._file.closed:
                self._file.close()


class CollectingSink:
    """Хранит события в памяти (для отчёта и тестов)."""

    def __init__(self) -> None:
        self.events: List[DiscoveryEvent] = []
        self._lock = threading.Lock()

    def emit(self, event: DiscoveryEvent) -> None:
        with self._lock:
            self.events.append(event)

    def of(self, category: Category) -> List[DiscoveryEvent]:
        with self._lock:
            return [e for e in self.events if e.category is category]

    def payloads(self, category: Category) -> List[str]:
        return [e.payload for e in self.of(category)]

    def lines(self) -> List[str]:
        with self._lock:
            return [e.render() for e in self.events]


class FanoutSink:
    """Рассылает событие нескольким sink-ам по очереди."""

    def __init__(self, sinks: Iterable[EventSink]) -> None:
        self.sinks: List[EventSink] = list(sinks)

    def emit(self, event: DiscoveryEvent) -> None:
        for sink in self.sinks:
            sink.emit(event)

    def close(self) -> None:
        for sink in self.sinks:
            closer: Optional[object] = getattr(sink, "close", None)
            if callable(closer):
                closer()
