"""
Inkpost Backend — Post Schemas
===============================

What:  Create/update bodies and the list/detail response shapes for posts.

List vs detail:
    PostSummary carries the author summary, category, tags and a comment
    count. PostDetail adds the author's bio and the full comment thread.
"""

import uuid
from typing import List, Optional

from pydantic import Field

from inkpost.schemas.comment import CommentNode
from inkpost.schemas.common import (
    AuthorDetail,
    AuthorSummary,
    CamelModel,
    CategoryRef,
    Pagination,
    PostBase,
    TagRef,
)


class CreatePostRequest(CamelModel):
    title: str = Field(min_length=1, max_length=255)
    content: str = Field(min_length=1)
    excerpt: Optional[str] = None
    published: bool = False
    featured: bool = False
    category_id: Optional[uuid.UUID] = None
    tag_ids: Optional[List[uuid.UUID]] = None


class UpdatePostRequest(CamelModel):
    """Partial update. A new title regenerates the slug; tagIds replaces the set."""
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    content: Optional[str] = Field(default=None, min_length=1)
    excerpt: Optional[str] = None
    published: Optional[bool] = None
    featured: Optional[bool] = None
    category_id: Optional[uuid.UUID] = None
    tag_ids: Optional[List[uuid.UUID]] = None


class PostFilters(CamelModel):
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=10, ge=1, le=100)
    search: Optional[str] = None
    category_id: Optional[uuid.UUID] = None
    tag_id: Optional[uuid.UUID] = None
    author_id: Optional[uuid.UUID] = None
    published: Optional[bool] = None
    featured: Optional[bool] = None


class PostSummary(PostBase):
    author: AuthorSummary
    category: Optional[CategoryRef] = None
    tags: List[TagRef] = Field(default_factory=list)
    comment_count: int = 0


class PostDetail(PostBase):
    author: AuthorDetail
    category: Optional[CategoryRef] = None
    tags: List[TagRef] = Field(default_factory=list)
    comments: List[CommentNode] = Field(default_factory=list)
    comment_count: int = 0


class PostListResponse(CamelModel):
    posts: List[PostSummary]
    pagination: Pagination
