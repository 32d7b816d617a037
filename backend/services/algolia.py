"""Algolia HN Search API client.

Full-text search over stories and comments, plus /items/{id} which returns
a story with its whole comment tree materialized server-side.
"""

import logging
from urllib.parse import quote

import httpx

from services.cache import TTLCache
from services.upstream import UpstreamClient, make_key

logger = logging.getLogger(__name__)


class AlgoliaClient(UpstreamClient):
    name = "Algolia"

    def __init__(
        self,
        base_url: str,
        *,
        search_cache: TTLCache,
        item_cache: TTLCache,
        user_cache: TTLCache,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(base_url, timeout=timeout, transport=transport)
        self._search_cache = search_cache
        self._item_cache = item_cache
        self._user_cache = user_cache

    async def search(
        self,
        query: str,
        *,
        tags: str | None = None,
        numeric_filters: str | None = None,
        page: int | None = None,
        hits_per_page: int | None = None,
    ) -> dict:
        """Search stories and comments.

        Args:
            query: Full-text query. May be empty when filtering by tags only.
            tags: Algolia tag filter, e.g. "story", "comment", "author_pg".
            numeric_filters: e.g. "points>100,created_at_i>1700000000".
            page: Zero-based result page.
            hits_per_page: Page size.

        Returns:
            Raw search response: hits, page, nbHits, nbPages, hitsPerPage,
            processingTimeMS.
        """
        params: dict = {"query": query}
        if tags:
            params["tags"] = tags
        if numeric_filters:
            params["numericFilters"] = numeric_filters
        if page is not None:
            params["page"] = page
        if hits_per_page is not None:
            params["hitsPerPage"] = hits_per_page

        logger.info("Searching Algolia: %s", params)
        data = await self._get_json(
            "/search", self._search_cache, make_key("search", params=params), params=params
        )
        return data or {}

    async def search_stories(
        self, query: str, *, page: int | None = None, hits_per_page: int | None = None
    ) -> dict:
        return await self.search(query, tags="story", page=page, hits_per_page=hits_per_page)

    async def get_story_with_comments(self, story_id: int) -> dict | None:
        """Story plus nested `children` comment tree, or None if absent."""
        return await self._get_json(
            f"/items/{story_id}",
            self._item_cache,
            make_key("tree", story_id),
            not_found_as_none=True,
        )

    async def get_user(self, username: str) -> dict | None:
        return await self._get_json(
            f"/users/{quote(username, safe='')}",
            self._user_cache,
            make_key("algolia-user", username),
            not_found_as_none=True,
        )
