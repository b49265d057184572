# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from site_spider.config import DEFAULT_TIMEOUT, CrawlerConfig, load_config


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,suffix,expect_exc",
    [
        ("site: http://example.com\nmax_depth: 2", ".yaml", None),
        (json.dumps({"site": "http://example.com", "max_depth": 2}), ".json", None),
        ("{}", ".json", ValidationError),
        ("not: a: mapping", ".yaml", ValueError),
        ("- just\n- a list", ".yaml", TypeError),
        ("site = 'x'", ".toml", ValueError),
    ],
)
def test_load_config_variants(tmp_path, content, suffix, expect_exc):
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, CrawlerConfig)
        assert cfg.seed.rstrip("/") == "http://example.com"
        assert cfg.max_depth == 2


def test_load_config_overrides(tmp_path):
    cfg_path = write_file(tmp_path, "site: http://example.com\nparallelism: 2", ".yaml")
    cfg = load_config(cfg_path, parallelism=8, proxy=None)
    assert cfg.parallelism == 8
    assert cfg.proxy is None


def test_load_config_default_missing(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(FileNotFoundError):
        load_config(None)


def test_defaults():
    cfg = CrawlerConfig(site="https://example.com")
    assert cfg.max_depth == 1
    assert cfg.parallelism == 5
    assert cfg.timeout == DEFAULT_TIMEOUT
    assert cfg.user_agent == "web"
    assert cfg.robots is True and cfg.sitemap is False
    assert cfg.headers == ()


def test_zero_timeout_falls_back_to_default():
    assert CrawlerConfig(site="https://example.com", timeout=0).timeout == DEFAULT_TIMEOUT


def test_config_is_frozen():
    cfg = CrawlerConfig(site="https://example.com")
    with pytest.raises(ValidationError):
        cfg.max_depth = 5


@pytest.mark.parametrize("site", ["example.com", "ftp://example.com", ""])
def test_seed_must_be_absolute_http(site):
    with pytest.raises(ValidationError):
        CrawlerConfig(site=site)


@pytest.mark.parametrize("proxy", ["not a proxy", "socks5://127.0.0.1:9050", "http://"])
def test_bad_proxy_fails_at_construction(proxy):
    with pytest.raises(ValidationError):
        CrawlerConfig(site="https://example.com", proxy=proxy)


def test_good_proxy():
    cfg = CrawlerConfig(site="https://example.com", proxy="http://127.0.0.1:8080")
    assert cfg.proxy == "http://127.0.0.1:8080"


def test_bad_blacklist_fails_at_construction():
    with pytest.raises(ValidationError):
        CrawlerConfig(site="https://example.com", blacklist="(unclosed")


def test_headers_accept_strings_and_pairs():
    cfg = CrawlerConfig(site="https://example.com", headers=["X-Api: 1", ("X-Other", "two")])
    assert cfg.headers == (("X-Api", "1"), ("X-Other", "two"))
    with pytest.raises(ValidationError):
        CrawlerConfig(site="https://example.com", headers=["no-colon"])


def test_raw_request_file_must_exist(tmp_path):
    with pytest.raises(FileNotFoundError):
        CrawlerConfig(site="https://example.com", raw_request=tmp_path / "missing.txt")


def test_unknown_field_rejected():
    with pytest.raises(ValidationError):
        CrawlerConfig(site="https://example.com", wordlists={})


def test_malformed_raw_request_fails_at_construction(tmp_path):
    raw = tmp_path / "req.txt"
    raw.write_text("garbage", encoding="utf-8")
    with pytest.raises(ValidationError):
        CrawlerConfig(site="https://example.com", raw_request=raw)

    raw.write_text("GET / HTTP/1.1\nX-Token: 1\n\n", encoding="utf-8")
    assert CrawlerConfig(site="https://example.com", raw_request=raw).raw_request == raw
