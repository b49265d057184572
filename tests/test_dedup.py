# File: tests/test_dedup.py
import asyncio
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from site_spider.crawler.dedup import StringFilter


def test_check_and_mark_sequential():
    seen = StringFilter("urls")
    assert seen.check_and_mark("http://example.com/") is True
    assert seen.check_and_mark("http://example.com/") is False
    assert "http://example.com/" in seen
    assert len(seen) == 1


def test_filters_are_independent():
    forms, scripts = StringFilter("forms"), StringFilter("scripts")
    assert forms.check_and_mark("http://example.com/a")
    assert scripts.check_and_mark("http://example.com/a")


def test_threads_race_on_same_key():
    seen = StringFilter()
    workers = 32
    barrier = threading.Barrier(workers)

    def race(_):
        barrier.wait()
        return seen.check_and_mark("same-key")

    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(race, range(workers)))

    assert results.count(True) == 1
    assert results.count(False) == workers - 1


@pytest.mark.asyncio()
async def test_tasks_race_on_same_key():
    seen = StringFilter()

    async def race():
        await asyncio.sleep(0)
        return seen.check_and_mark("same-key")

    results = await asyncio.gather(*(race() for _ in range(100)))
    assert sum(results) == 1
