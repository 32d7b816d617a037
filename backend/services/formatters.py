"""Map raw upstream JSON into stable output records.

This is the trust boundary: everything upstream is treated as a loose dict,
everything returned from here has a fixed set of fields. The functions never
raise on missing fields. Optional ones get defaults, required ones come
through as None and the caller decides whether that means "not found".
"""

from dataclasses import dataclass, field
from typing import Optional

DELETED_AUTHOR = "deleted"


@dataclass
class Story:
    id: Optional[int]
    title: Optional[str]
    by: Optional[str]
    time: Optional[int]
    url: Optional[str] = None
    text: Optional[str] = None
    score: int = 0
    descendants: int = 0
    kids: list[int] = field(default_factory=list)
    type: str = "story"


@dataclass
class Comment:
    id: Optional[int]
    time: Optional[int]
    parent: Optional[int]
    text: str = ""
    by: str = DELETED_AUTHOR
    kids: list[int] = field(default_factory=list)
    type: str = "comment"


@dataclass
class CommentTreeNode:
    """One comment in a search-API tree, with its replies nested in children."""

    id: Optional[int]
    author: str = DELETED_AUTHOR
    text: str = ""
    created_at: Optional[str] = None
    parent_id: Optional[int] = None
    children: list["CommentTreeNode"] = field(default_factory=list)


@dataclass
class StoryWithComments:
    id: Optional[int]
    title: Optional[str]
    author: Optional[str]
    url: Optional[str] = None
    text: Optional[str] = None
    points: int = 0
    created_at: Optional[str] = None
    children: list[CommentTreeNode] = field(default_factory=list)


@dataclass
class User:
    id: Optional[str]
    created: Optional[int]
    karma: Optional[int]
    about: Optional[str] = None
    submitted: Optional[list[int]] = None


def format_story(item: dict) -> Story:
    return Story(
        id=item.get("id"),
        title=item.get("title"),
        by=item.get("by"),
        time=item.get("time"),
        url=item.get("url"),
        text=item.get("text"),
        score=item.get("score") or 0,
        descendants=item.get("descendants") or 0,
        kids=list(item.get("kids") or []),
    )


def format_comment(item: dict) -> Comment:
    # Deleted/dead comments come back without an author or text
    return Comment(
        id=item.get("id"),
        time=item.get("time"),
        parent=item.get("parent"),
        text=item.get("text") or "",
        by=item.get("by") or DELETED_AUTHOR,
        kids=list(item.get("kids") or []),
    )


def format_user(user: dict) -> User:
    submitted = user.get("submitted")
    return User(
        id=user.get("id"),
        created=user.get("created"),
        karma=user.get("karma"),
        about=user.get("about"),
        submitted=list(submitted) if submitted is not None else None,
    )


def format_comment_tree(node: dict, max_depth: int | None = None, _depth: int = 0) -> CommentTreeNode:
    """Recursively format a search-API comment node and its replies.

    max_depth counts levels below this node; None means no limit.
    """
    children = []
    if max_depth is None or _depth < max_depth:
        children = [
            format_comment_tree(child, max_depth, _depth + 1)
            for child in node.get("children") or []
            if child is not None
        ]
    return CommentTreeNode(
        id=node.get("id"),
        author=node.get("author") or DELETED_AUTHOR,
        text=node.get("text") or "",
        created_at=node.get("created_at"),
        parent_id=node.get("parent_id"),
        children=children,
    )


def format_comment_forest(nodes: list | None, max_depth: int | None = None) -> list[CommentTreeNode]:
    """Format the top-level comments of a story. Depth 0 is the top level."""
    return [format_comment_tree(node, max_depth) for node in nodes or [] if node is not None]


def format_story_with_comments(raw: dict, max_depth: int | None = None) -> StoryWithComments:
    return StoryWithComments(
        id=raw.get("id"),
        title=raw.get("title"),
        author=raw.get("author"),
        url=raw.get("url"),
        text=raw.get("text"),
        points=raw.get("points") or 0,
        created_at=raw.get("created_at"),
        children=format_comment_forest(raw.get("children"), max_depth),
    )
