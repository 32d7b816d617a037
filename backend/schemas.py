"""Argument schemas for every tool, and the validator that applies them.

Integers and strings are strict: "5", 5.0 and True are all rejected for an
integer field. Defaults are filled in here so handlers never see a missing
optional argument.
"""

from collections.abc import Mapping
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr
from pydantic import ValidationError as PydanticValidationError

from errors import ValidationError

StoryListType = Literal["top", "new", "best", "ask", "show", "job"]
SearchType = Literal["all", "story", "comment"]


class ToolArguments(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class SearchArgs(ToolArguments):
    query: StrictStr = Field(description="The search query")
    type: SearchType = Field("all", description="The type of content to search for")
    page: StrictInt = Field(0, ge=0, description="The page number")
    hits_per_page: StrictInt = Field(
        20, ge=1, le=100, alias="hitsPerPage", description="The number of results per page"
    )


class StoryArgs(ToolArguments):
    id: StrictInt = Field(gt=0, description="The ID of the story")


class CommentArgs(ToolArguments):
    id: StrictInt = Field(gt=0, description="The ID of the comment")


class StoriesArgs(ToolArguments):
    type: StoryListType = Field(description="The type of stories to fetch")
    limit: StrictInt = Field(30, ge=1, le=100, description="The maximum number of stories to fetch")


class CommentsArgs(ToolArguments):
    story_id: StrictInt = Field(gt=0, alias="storyId", description="The ID of the story")
    limit: StrictInt = Field(30, ge=1, le=100, description="The maximum number of comments to fetch")


class CommentTreeArgs(ToolArguments):
    story_id: StrictInt = Field(gt=0, alias="storyId", description="The ID of the story")


class UserArgs(ToolArguments):
    id: StrictStr = Field(min_length=1, description="The username")


TOOL_ARGUMENTS: dict[str, type[ToolArguments]] = {
    "search": SearchArgs,
    "getStory": StoryArgs,
    "getStoryWithComments": StoryArgs,
    "getStories": StoriesArgs,
    "getComment": CommentArgs,
    "getComments": CommentsArgs,
    "getCommentTree": CommentTreeArgs,
    "getUser": UserArgs,
    "getUserSubmissions": UserArgs,
}


def input_schema(tool_name: str) -> dict:
    """JSON Schema for a tool's arguments, using the wire (camelCase) names."""
    return TOOL_ARGUMENTS[tool_name].model_json_schema(by_alias=True)


def validate_arguments(tool_name: str, arguments: object) -> ToolArguments:
    """Validate untyped caller input against the tool's schema.

    Raises ValidationError listing every violated constraint, not just the
    first one.
    """
    model = TOOL_ARGUMENTS[tool_name]
    if arguments is None:
        arguments = {}
    if not isinstance(arguments, Mapping):
        raise ValidationError([{"field": "arguments", "reason": "Input should be an object"}])

    try:
        return model.model_validate(dict(arguments))
    except PydanticValidationError as e:
        raise ValidationError(
            [
                {
                    "field": ".".join(str(part) for part in err["loc"]) or "arguments",
                    "reason": err["msg"],
                }
                for err in e.errors()
            ]
        ) from e
