"""
Inkpost Backend — Comment Schemas
==================================

What:  Comment bodies, list responses and the nested thread node.

Shapes:
    CommentRead   one comment with author, post/parent references, its
                  direct replies and their count (list, detail, create)
    CommentNode   recursive node of a post's thread (post detail)
"""

import uuid
from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field, computed_field

from inkpost.schemas.common import AuthorSummary, CamelModel, Pagination, PostRef


class CreateCommentRequest(CamelModel):
    content: str = Field(min_length=1, max_length=1000)
    post_id: uuid.UUID
    parent_id: Optional[uuid.UUID] = None


class ReplyCommentRequest(CamelModel):
    content: str = Field(min_length=1, max_length=1000)
    post_id: uuid.UUID
    parent_id: uuid.UUID


class UpdateCommentRequest(CamelModel):
    content: Optional[str] = Field(default=None, min_length=1, max_length=1000)


class CommentFilters(CamelModel):
    """Query filters shared by every comment listing."""
    page: int = Field(default=1, ge=1)
    limit: int = Field(default=20, ge=1, le=100)
    post_id: Optional[uuid.UUID] = None
    author_id: Optional[uuid.UUID] = None
    sort_by: Literal["createdAt", "updatedAt"] = "createdAt"
    sort_order: Literal["asc", "desc"] = "desc"
    include_replies: bool = True


class CommentBase(CamelModel):
    id: uuid.UUID
    content: str
    author_id: uuid.UUID
    post_id: uuid.UUID
    parent_id: Optional[uuid.UUID] = None
    created_at: datetime
    updated_at: datetime
    author: AuthorSummary


class ParentRef(CamelModel):
    id: uuid.UUID
    content: str
    author: AuthorSummary


class CommentRead(CommentBase):
    post: Optional[PostRef] = None
    parent: Optional[ParentRef] = None
    replies: List[CommentBase] = Field(default_factory=list)

    @computed_field(alias="replyCount")
    @property
    def reply_count(self) -> int:
        return len(self.replies)


class CommentNode(CommentBase):
    replies: List["CommentNode"] = Field(default_factory=list)


class CommentListResponse(CamelModel):
    comments: List[CommentRead]
    pagination: Pagination


class RepliesResponse(CamelModel):
    replies: List[CommentRead]
    pagination: Pagination
