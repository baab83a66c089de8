# File: tests/test_config.py
import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from linkcop.config import CrawlConfig, load_config


def write_file(tmp_path: Path, content: str, suffix: str) -> Path:
    path = tmp_path / f"config{suffix}"
    path.write_text(content, encoding="utf-8")
    return path


@pytest.mark.parametrize(
    "content,expect_exc",
    [
        ("host: http://example.com\nmax_visits: 50", None),
        (json.dumps({"host": "http://example.com", "max_visits": 50}), None),
        ("{}", ValidationError),
        ("not: a: mapping", ValueError),
        ("::invalid yaml", TypeError),
        ("host: http://example.com\nunknown_option: 1", ValidationError),
        ("host: http://example.com\nmax_visits: 0", ValidationError),
    ],
)
def test_load_config_variants(tmp_path, content, expect_exc):
    suffix = ".yaml" if not content.strip().startswith("{") else ".json"
    cfg_path = write_file(tmp_path, content, suffix)
    if expect_exc:
        with pytest.raises(expect_exc):
            load_config(cfg_path)
    else:
        cfg = load_config(cfg_path)
        assert isinstance(cfg, CrawlConfig)
        assert str(cfg.host).rstrip("/") == "http://example.com"
        assert cfg.max_visits == 50


def test_defaults():
    cfg = CrawlConfig(host="https://Example.com/start")
    assert cfg.hostname == "example.com"
    assert cfg.max_visits == 10000
    assert cfg.random_delay == 1.0
    assert cfg.parallelism == 2
    assert cfg.disallowed_domains == ["facebook.com"]
    assert cfg.cache_dir == Path(".url-cache")
    assert cfg.csv_path == Path("report.csv")
    assert not cfg.only_failures


def test_overrides_win_and_none_is_ignored(tmp_path):
    cfg_path = write_file(tmp_path, "host: http://example.com\nmax_visits: 50\nverbose: true", ".yml")
    cfg = load_config(cfg_path, max_visits=5, verbose=None, host=None)
    assert cfg.max_visits == 5
    assert cfg.verbose is True


def test_default_file_is_optional(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(ValidationError):
        load_config(None)
    assert load_config(None, host="http://example.com").hostname == "example.com"

    Path("linkcop.yaml").write_text("host: http://picked.up\nonly_failures: true", encoding="utf-8")
    cfg = load_config(None)
    assert cfg.hostname == "picked.up"
    assert cfg.only_failures


def test_disallowed_domains_from_string():
    cfg = CrawlConfig(host="http://example.com", disallowed_domains="facebook.com, .Twitter.com")
    assert cfg.disallowed_domains == ["facebook.com", "twitter.com"]


def test_missing_and_unsupported_files(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.yaml")
    with pytest.raises(ValueError):
        load_config(write_file(tmp_path, "host=x", ".ini"))


def test_config_is_frozen():
    cfg = CrawlConfig(host="http://example.com")
    with pytest.raises(ValidationError):
        cfg.max_visits = 3
