"""Centralized configuration: all env vars in one place."""

import functools
import logging
import os
import sys
from urllib.parse import urlparse


def _number_env(name: str, default, problems: list[str], parse=int):
    """Read a numeric env var. Unparseable values fall back to the default
    and are recorded in `problems` so validate() reports them."""
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return parse(raw)
    except ValueError:
        kind = "an integer" if parse is int else "a number"
        problems.append(f"{name} must be {kind}, got {raw!r}")
        return default


class Settings:
    """Application settings loaded from environment variables."""

    def __init__(self):
        self.cors_origins: list[str] = os.getenv("CORS_ORIGINS", "*").split(",")
        self.git_sha: str = os.getenv("GIT_SHA", "unknown")
        self.environment: str = os.getenv("ENVIRONMENT", "local")
        self.log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()
        self._env_problems: list[str] = []

        # Upstream APIs
        self.hn_api_base_url: str = os.getenv(
            "HN_API_BASE_URL", "https://hacker-news.firebaseio.com/v0"
        )
        self.algolia_api_base_url: str = os.getenv(
            "ALGOLIA_API_BASE_URL", "https://hn.algolia.com/api/v1"
        )
        # None means httpx waits forever; a hung upstream hangs the tool call.
        self.upstream_timeout_seconds: float | None = _number_env(
            "UPSTREAM_TIMEOUT_SECONDS", None, self._env_problems, parse=float
        )

        # Cache TTLs (milliseconds), one per resource kind
        ttl = functools.partial(_number_env, problems=self._env_problems)
        self.item_cache_ttl_ms: int = ttl("ITEM_CACHE_TTL_MS", 5 * 60 * 1000)
        self.user_cache_ttl_ms: int = ttl("USER_CACHE_TTL_MS", 5 * 60 * 1000)
        self.story_list_cache_ttl_ms: int = ttl("STORY_LIST_CACHE_TTL_MS", 5 * 60 * 1000)
        self.search_cache_ttl_ms: int = ttl("SEARCH_CACHE_TTL_MS", 60 * 1000)

        self.comment_tree_max_depth: int | None = _number_env(
            "COMMENT_TREE_MAX_DEPTH", None, self._env_problems
        )

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    def validate(self) -> list[str]:
        """Return list of configuration problems; empty when startup can proceed."""
        problems = list(self._env_problems)
        for var in ("HN_API_BASE_URL", "ALGOLIA_API_BASE_URL"):
            parsed = urlparse(getattr(self, _attr_for(var)))
            if parsed.scheme not in ("http", "https") or not parsed.netloc:
                problems.append(f"{var} must be an http(s) URL")
        for var in (
            "ITEM_CACHE_TTL_MS",
            "USER_CACHE_TTL_MS",
            "STORY_LIST_CACHE_TTL_MS",
            "SEARCH_CACHE_TTL_MS",
        ):
            if getattr(self, _attr_for(var)) <= 0:
                problems.append(f"{var} must be positive")
        if self.upstream_timeout_seconds is not None and self.upstream_timeout_seconds <= 0:
            problems.append("UPSTREAM_TIMEOUT_SECONDS must be positive")
        if self.comment_tree_max_depth is not None and self.comment_tree_max_depth < 0:
            problems.append("COMMENT_TREE_MAX_DEPTH must not be negative")
        return problems


settings = Settings()


def _attr_for(env_var: str) -> str:
    """Map env var name to Settings attribute name."""
    return env_var.lower()


def configure_logging(config: Settings | None = None) -> None:
    """Structured logging: JSON for production, human-readable for local.

    Always stderr. Stdout carries the MCP protocol stream.
    """
    config = config or settings
    if config.is_production:
        logging.basicConfig(
            level=config.log_level,
            format='{"time":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}',
            stream=sys.stderr,
        )
    else:
        logging.basicConfig(
            level=config.log_level,
            format="%(levelname)s %(name)s: %(message)s",
            stream=sys.stderr,
        )
