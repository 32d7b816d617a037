"""Tool dispatch: validate, fetch, format, respond.

Every tool call goes through ToolDispatcher.call_tool, which returns the
same envelope regardless of transport:

    {"tool": "getStory", "result": {...}}

Failures raise one of the errors.py exceptions so the transport can tell
bad input, missing resources and upstream failures apart.
"""

import logging
from dataclasses import asdict, is_dataclass

from config import Settings
from errors import HNServerError, MethodNotFoundError, NotFoundError
from schemas import (
    TOOL_ARGUMENTS,
    CommentArgs,
    CommentsArgs,
    CommentTreeArgs,
    SearchArgs,
    StoriesArgs,
    StoryArgs,
    UserArgs,
    input_schema,
    validate_arguments,
)
from services.algolia import AlgoliaClient
from services.cache import TTLCache
from services.formatters import (
    format_comment,
    format_comment_forest,
    format_story,
    format_story_with_comments,
    format_user,
)
from services.hn_api import HackerNewsClient

logger = logging.getLogger(__name__)

TOOL_DESCRIPTIONS = {
    "search": "Search for stories and comments on Hacker News",
    "getStory": "Get a single story by ID",
    "getStoryWithComments": "Get a story with its full comment tree",
    "getStories": "Get multiple stories by type (top, new, best, ask, show, job)",
    "getComment": "Get a single comment by ID",
    "getComments": "Get the top-level comments of a story",
    "getCommentTree": "Get the nested comment tree of a story",
    "getUser": "Get a user profile by ID",
    "getUserSubmissions": "Get a user's submissions (stories and comments)",
}

# Missing pagination metadata in a search response is reported as 0
SEARCH_METADATA = ("page", "nbHits", "nbPages", "hitsPerPage", "processingTimeMS")

USER_SUBMISSIONS_PER_PAGE = 50


def _to_jsonable(value):
    if is_dataclass(value):
        return asdict(value)
    if isinstance(value, list):
        return [_to_jsonable(v) for v in value]
    return value


class ToolDispatcher:
    def __init__(
        self,
        hn: HackerNewsClient,
        algolia: AlgoliaClient,
        *,
        max_tree_depth: int | None = None,
    ):
        self.hn = hn
        self.algolia = algolia
        self.max_tree_depth = max_tree_depth
        self._handlers = {
            "search": self._search,
            "getStory": self._get_story,
            "getStoryWithComments": self._get_story_with_comments,
            "getStories": self._get_stories,
            "getComment": self._get_comment,
            "getComments": self._get_comments,
            "getCommentTree": self._get_comment_tree,
            "getUser": self._get_user,
            "getUserSubmissions": self._get_user_submissions,
        }

    async def aclose(self) -> None:
        await self.hn.aclose()
        await self.algolia.aclose()

    def list_tools(self) -> list[dict]:
        return [
            {
                "name": name,
                "description": TOOL_DESCRIPTIONS[name],
                "inputSchema": input_schema(name),
            }
            for name in TOOL_ARGUMENTS
        ]

    async def call_tool(self, name: str, arguments: object = None) -> dict:
        handler = self._handlers.get(name)
        if handler is None:
            logger.warning("Unknown tool requested: %s", name)
            raise MethodNotFoundError(name)

        try:
            args = validate_arguments(name, arguments)
            logger.info("%s called with: %s", name, args.model_dump(by_alias=True))
            result = await handler(args)
        except HNServerError as e:
            logger.warning("%s failed: %s", name, e)
            raise

        logger.debug("%s completed", name)
        return {"tool": name, "result": _to_jsonable(result)}

    # -------------------------------------------------------------------
    # Search API tools
    # -------------------------------------------------------------------

    async def _search(self, args: SearchArgs) -> dict:
        tags = None if args.type == "all" else args.type
        results = await self.algolia.search(
            args.query, tags=tags, page=args.page, hits_per_page=args.hits_per_page
        )
        response = {"hits": results.get("hits") or []}
        for key in SEARCH_METADATA:
            response[key] = results.get(key) or 0
        return response

    async def _get_story_with_comments(self, args: StoryArgs):
        raw = await self.algolia.get_story_with_comments(args.id)
        if not raw or not raw.get("title"):
            raise NotFoundError("Story", args.id)
        return format_story_with_comments(raw, self.max_tree_depth)

    async def _get_comment_tree(self, args: CommentTreeArgs):
        raw = await self.algolia.get_story_with_comments(args.story_id)
        if not raw or not raw.get("children"):
            return []
        return format_comment_forest(raw["children"], self.max_tree_depth)

    async def _get_user_submissions(self, args: UserArgs) -> dict:
        # Hits mix stories and comments, so they are passed through unformatted
        results = await self.algolia.search(
            "", tags=f"author_{args.id}", hits_per_page=USER_SUBMISSIONS_PER_PAGE
        )
        return {"hits": results.get("hits") or [], "nbHits": results.get("nbHits") or 0}

    # -------------------------------------------------------------------
    # Item-graph tools
    # -------------------------------------------------------------------

    async def _get_story(self, args: StoryArgs):
        item = await self.hn.get_item(args.id)
        if not item or item.get("type") != "story":
            raise NotFoundError("Story", args.id)
        story = format_story(item)
        if story.id is None:
            raise NotFoundError("Story", args.id)
        return story

    async def _get_stories(self, args: StoriesArgs):
        list_fetchers = {
            "top": self.hn.get_top_stories,
            "new": self.hn.get_new_stories,
            "best": self.hn.get_best_stories,
            "ask": self.hn.get_ask_stories,
            "show": self.hn.get_show_stories,
            "job": self.hn.get_job_stories,
        }
        story_ids = await list_fetchers[args.type](args.limit)
        items = await self.hn.get_items(story_ids)
        return [format_story(item) for item in items if item and item.get("type") == "story"]

    async def _get_comment(self, args: CommentArgs):
        item = await self.hn.get_item(args.id)
        if not item or item.get("type") != "comment":
            raise NotFoundError("Comment", args.id)
        comment = format_comment(item)
        if comment.id is None:
            raise NotFoundError("Comment", args.id)
        return comment

    async def _get_comments(self, args: CommentsArgs):
        story = await self.hn.get_item(args.story_id)
        if not story or not story.get("kids"):
            return []

        comment_ids = story["kids"][: args.limit]
        items = await self.hn.get_items(comment_ids)
        return [format_comment(item) for item in items if item and item.get("type") == "comment"]

    async def _get_user(self, args: UserArgs):
        user = await self.hn.get_user(args.id)
        if not user:
            raise NotFoundError("User", args.id)
        return format_user(user)


def build_dispatcher(config: Settings) -> ToolDispatcher:
    """Construct the clients and their caches from settings."""
    hn = HackerNewsClient(
        config.hn_api_base_url,
        item_cache=TTLCache(config.item_cache_ttl_ms),
        user_cache=TTLCache(config.user_cache_ttl_ms),
        list_cache=TTLCache(config.story_list_cache_ttl_ms),
        timeout=config.upstream_timeout_seconds,
    )
    algolia = AlgoliaClient(
        config.algolia_api_base_url,
        search_cache=TTLCache(config.search_cache_ttl_ms),
        item_cache=TTLCache(config.item_cache_ttl_ms),
        user_cache=TTLCache(config.user_cache_ttl_ms),
        timeout=config.upstream_timeout_seconds,
    )
    return ToolDispatcher(hn, algolia, max_tree_depth=config.comment_tree_max_depth)
