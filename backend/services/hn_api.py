"""Hacker News Firebase API client (the item graph).

Items and users are addressable by id; comment threads have to be walked
one item at a time through `kids`. Unknown ids come back as a JSON null.
"""

import asyncio
import logging
from urllib.parse import quote

import httpx

from services.cache import TTLCache
from services.upstream import UpstreamClient, make_key

logger = logging.getLogger(__name__)

# Story list kind -> endpoint name
STORY_LISTS = {
    "top": "topstories",
    "new": "newstories",
    "best": "beststories",
    "ask": "askstories",
    "show": "showstories",
    "job": "jobstories",
}

DEFAULT_LIMIT = 30


class HackerNewsClient(UpstreamClient):
    name = "HackerNews"

    def __init__(
        self,
        base_url: str,
        *,
        item_cache: TTLCache,
        user_cache: TTLCache,
        list_cache: TTLCache,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url, timeout=timeout, transport=transport)
        self._item_cache = item_cache
        self._user_cache = user_cache
        self._list_cache = list_cache

    async def get_item(self, item_id: int) -> dict | None:
        return await self._get_json(
            f"/item/{item_id}.json", self._item_cache, make_key("item", item_id)
        )

    async def get_items(self, item_ids: list[int]) -> list[dict | None]:
        """Fetch items concurrently, preserving order.

        A failed fetch yields None in its slot instead of failing the batch.
        """
        results = await asyncio.gather(
            *[self.get_item(item_id) for item_id in item_ids],
            return_exceptions=True,
        )

        items = []
        for item_id, result in zip(item_ids, results):
            if isinstance(result, Exception):
                logger.warning("Item %s fetch failed, skipping: %s", item_id, result)
                items.append(None)
            elif isinstance(result, BaseException):
                raise result
            else:
                items.append(result)
        return items

    async def get_story_ids(self, kind: str, limit: int = DEFAULT_LIMIT) -> list[int]:
        """Return the first `limit` ids of a story list (top, new, best, ...)."""
        endpoint = STORY_LISTS.get(kind)
        if endpoint is None:
            raise ValueError(f"Unknown story list: {kind}. Available: {list(STORY_LISTS)}")
        ids = await self._get_json(f"/{endpoint}.json", self._list_cache, make_key("stories", kind))
        return (ids or [])[:limit]

    async def get_top_stories(self, limit: int = DEFAULT_LIMIT) -> list[int]:
        return await self.get_story_ids("top", limit)

    async def get_new_stories(self, limit: int = DEFAULT_LIMIT) -> list[int]:
        return await self.get_story_ids("new", limit)

    async def get_best_stories(self, limit: int = DEFAULT_LIMIT) -> list[int]:
        return await self.get_story_ids("best", limit)

    async def get_ask_stories(self, limit: int = DEFAULT_LIMIT) -> list[int]:
        return await self.get_story_ids("ask", limit)

    async def get_show_stories(self, limit: int = DEFAULT_LIMIT) -> list[int]:
        return await self.get_story_ids("show", limit)

    async def get_job_stories(self, limit: int = DEFAULT_LIMIT) -> list[int]:
        return await self.get_story_ids("job", limit)

    async def get_user(self, user_id: str) -> dict | None:
        return await self._get_json(
            f"/user/{quote(user_id, safe='')}.json", self._user_cache, make_key("user", user_id)
        )

    async def get_max_item_id(self) -> int | None:
        return await self._get_json("/maxitem.json", self._list_cache, make_key("maxitem"))
