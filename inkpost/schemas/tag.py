"""
Inkpost Backend — Tag Schemas
==============================

Tag names are short labels: 2..30 characters of letters, digits,
whitespace, underscore and hyphen.
"""

from typing import List, Literal, Optional

from pydantic import Field

from inkpost.schemas.common import CamelModel, PostCard, TagRef

TAG_NAME_PATTERN = r"^[a-zA-Z0-9\s_-]+$"


class CreateTagRequest(CamelModel):
    name: str = Field(min_length=2, max_length=30, pattern=TAG_NAME_PATTERN)


class UpdateTagRequest(CamelModel):
    name: Optional[str] = Field(
        default=None, min_length=2, max_length=30, pattern=TAG_NAME_PATTERN
    )


class TagQuery(CamelModel):
    search: Optional[str] = None
    sort_by: Literal["name", "postCount", "createdAt"] = "name"
    sort_order: Literal["asc", "desc"] = "asc"


class TagRead(TagRef):
    post_count: int = 0


class TagDetail(TagRead):
    posts: List[PostCard] = Field(default_factory=list)


class TagListResponse(CamelModel):
    data: List[TagRead]
