"""Shared fixtures: fake upstream APIs and a controllable clock."""

import json

import httpx
import pytest

from dispatcher import ToolDispatcher
from services.algolia import AlgoliaClient
from services.cache import TTLCache
from services.hn_api import HackerNewsClient

HN_BASE_URL = "https://hn.test/v0"
ALGOLIA_BASE_URL = "https://algolia.test/api/v1"


class FakeClock:
    """Stand-in for time.time that only moves when told to."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeUpstream:
    """Routes requests by path (relative to the API root) to canned responses.

    A route value may be:
      - JSON-able data (dict, list, int, None) → 200 with that JSON body
      - an httpx.Response → returned as-is
      - an Exception → raised, as a transport failure would be
    Unrouted paths answer with `default`.
    """

    def __init__(self, prefix: str, routes: dict | None = None, default=None) -> None:
        self.prefix = prefix
        self.routes = dict(routes or {})
        self.default = default
        self.requests: list[httpx.Request] = []

    @property
    def paths(self) -> list[str]:
        return [r.url.path.removeprefix(self.prefix) for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix(self.prefix)
        route = self.routes.get(path, self.default)
        if isinstance(route, Exception):
            raise route
        if isinstance(route, httpx.Response):
            return route
        return httpx.Response(
            200,
            content=json.dumps(route).encode(),
            headers={"content-type": "application/json"},
        )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def hn_upstream() -> FakeUpstream:
    return FakeUpstream("/v0")


@pytest.fixture
def algolia_upstream() -> FakeUpstream:
    return FakeUpstream("/api/v1", default={"hits": []})


@pytest.fixture
def hn_client(hn_upstream, clock) -> HackerNewsClient:
    return HackerNewsClient(
        HN_BASE_URL,
        item_cache=TTLCache(300_000, clock=clock),
        user_cache=TTLCache(300_000, clock=clock),
        list_cache=TTLCache(300_000, clock=clock),
        transport=httpx.MockTransport(hn_upstream.handler),
    )


@pytest.fixture
def algolia_client(algolia_upstream, clock) -> AlgoliaClient:
    return AlgoliaClient(
        ALGOLIA_BASE_URL,
        search_cache=TTLCache(60_000, clock=clock),
        item_cache=TTLCache(300_000, clock=clock),
        user_cache=TTLCache(300_000, clock=clock),
        transport=httpx.MockTransport(algolia_upstream.handler),
    )


@pytest.fixture
def dispatcher(hn_client, algolia_client) -> ToolDispatcher:
    return ToolDispatcher(hn_client, algolia_client)


def story_item(item_id: int, **overrides) -> dict:
    item = {
        "id": item_id,
        "type": "story",
        "title": f"Story {item_id}",
        "by": "pg",
        "time": 1_160_418_111,
        "score": 57,
        "descendants": 3,
        "url": f"https://example.com/{item_id}",
    }
    item.update(overrides)
    return item


def comment_item(item_id: int, parent: int, **overrides) -> dict:
    item = {
        "id": item_id,
        "type": "comment",
        "by": "norvig",
        "text": f"Comment {item_id}",
        "time": 1_160_423_461,
        "parent": parent,
    }
    item.update(overrides)
    return item
