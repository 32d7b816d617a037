"""Shared plumbing for the cache-checked upstream API clients.

Each client owns one httpx.AsyncClient and a set of TTLCache instances.
Responses are cached as parsed JSON; failures and null bodies never are.
"""

import logging
from typing import Any
from urllib.parse import quote, urlencode

import httpx

from errors import ApiError
from services.cache import TTLCache

logger = logging.getLogger(__name__)


def make_key(kind: str, identifier: int | str | None = None, params: dict | None = None) -> str:
    """Build a cache key unique across resource kinds.

    item:42, user:pg, stories:top, search?hitsPerPage=20&query=rust
    """
    key = kind if identifier is None else f"{kind}:{quote(str(identifier), safe='')}"
    if params:
        key += "?" + urlencode(sorted((k, v) for k, v in params.items() if v is not None))
    return key


class UpstreamClient:
    """Base class for a read-only JSON API behind a TTL cache."""

    name = "Upstream"

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url
        self._http = httpx.AsyncClient(base_url=base_url, timeout=timeout, transport=transport)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def _get_json(
        self,
        path: str,
        cache: TTLCache,
        key: str,
        params: dict | None = None,
        not_found_as_none: bool = False,
    ) -> Any:
        """GET path, consulting cache under key first.

        Raises ApiError on network failure, non-2xx status or a body that
        is not JSON. A 404 maps to None when not_found_as_none is set.
        """
        cached = cache.get(key)
        if cached is not None:
            logger.debug("%s cache hit: %s", self.name, key)
            return cached

        logger.debug("%s cache miss: %s", self.name, key)
        try:
            resp = await self._http.get(path, params=params)
            if not_found_as_none and resp.status_code == 404:
                return None
            resp.raise_for_status()
            data = resp.json()
        except httpx.HTTPError as e:
            logger.warning("%s request failed for %s: %s", self.name, path, e)
            raise ApiError(self.name, str(e) or type(e).__name__) from e
        except ValueError as e:
            logger.warning("%s returned malformed JSON for %s: %s", self.name, path, e)
            raise ApiError(self.name, f"Malformed response body: {e}") from e

        if data is not None:
            cache.set(key, data)
        return data
