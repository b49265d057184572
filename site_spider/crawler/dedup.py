# site_spider/crawler/dedup.py
"""
Concurrency-safe "seen before?" filter, one instance per discovery category.
"""
from __future__ import annotations

import threading
from typing import Set


class StringFilter:
    """Set-membership oracle that atomically marks keys on first sight.

    ``check_and_mark`` is atomic per key for asyncio tasks and threads alike.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self._seen: Set[str] = set()
        self._lock = threading.Lock()

    def check_and_mark(self, key: str) -> bool:
        """Return True if *key* is new (and record it), False if already seen."""
        with self._lock:
            if key in self._seen:
                return False
            self._seen.add(key)
            return True

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._seen

    def __len__(self) -> int:
        with self._lock:
            return len(self._seen)

    def __repr__(self) -> str:
        return f"<StringFilter {self.name!r} size={len(self)}>"
