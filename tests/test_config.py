"""Tests for environment-driven settings."""

import server
from config import Settings


def test_defaults_are_valid(monkeypatch):
    for var in ("ITEM_CACHE_TTL_MS", "UPSTREAM_TIMEOUT_SECONDS", "COMMENT_TREE_MAX_DEPTH"):
        monkeypatch.delenv(var, raising=False)

    config = Settings()

    assert config.validate() == []
    assert config.upstream_timeout_seconds is None
    assert config.comment_tree_max_depth is None


def test_numeric_overrides(monkeypatch):
    monkeypatch.setenv("SEARCH_CACHE_TTL_MS", "1000")
    monkeypatch.setenv("UPSTREAM_TIMEOUT_SECONDS", "2.5")
    monkeypatch.setenv("COMMENT_TREE_MAX_DEPTH", "3")

    config = Settings()

    assert config.search_cache_ttl_ms == 1000
    assert config.upstream_timeout_seconds == 2.5
    assert config.comment_tree_max_depth == 3


def test_malformed_number_reported_by_validate(monkeypatch):
    monkeypatch.setenv("ITEM_CACHE_TTL_MS", "abc")
    monkeypatch.setenv("UPSTREAM_TIMEOUT_SECONDS", "soon")

    config = Settings()
    problems = config.validate()

    assert config.item_cache_ttl_ms == 5 * 60 * 1000
    assert "ITEM_CACHE_TTL_MS must be an integer, got 'abc'" in problems
    assert "UPSTREAM_TIMEOUT_SECONDS must be a number, got 'soon'" in problems


def test_non_positive_ttl_rejected(monkeypatch):
    monkeypatch.setenv("USER_CACHE_TTL_MS", "0")

    assert "USER_CACHE_TTL_MS must be positive" in Settings().validate()


def test_main_exits_nonzero_on_malformed_number(monkeypatch):
    monkeypatch.setenv("STORY_LIST_CACHE_TTL_MS", "5m")
    monkeypatch.setattr(server, "settings", Settings())

    assert server.main([]) == 1
