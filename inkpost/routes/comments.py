"""
Inkpost Backend — Comment Routes
=================================

    POST   /comments                  comment or reply (auth)
    POST   /comments/reply            reply; parentId required (auth)
    GET    /comments                  list with filters
    GET    /comments/post/{postId}    comments of a post
    GET    /comments/user/{userId}    comments by a user
    GET    /comments/{id}             one comment with direct replies
    GET    /comments/{id}/replies     paginated direct replies
    PATCH  /comments/{id}             edit (author only)
    DELETE /comments/{id}             delete (author only); soft when replied to
"""

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.config import settings
from inkpost.database import get_db_session
from inkpost.models import User
from inkpost.policies import AUTHENTICATED, require
from inkpost.schemas import (
    CommentFilters,
    CommentListResponse,
    CommentRead,
    CreateCommentRequest,
    ErrorResponse,
    MessageResponse,
    RepliesResponse,
    ReplyCommentRequest,
    UpdateCommentRequest,
)
from inkpost.services.comment_service import comment_service

router = APIRouter(prefix="/comments", tags=["Comments"])

WRITE_ERRORS = {
    400: {"description": "Invalid body or thread rule violated", "model": ErrorResponse},
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    404: {"description": "Post or parent comment not found", "model": ErrorResponse},
}
OWNER_ERRORS = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Not the author", "model": ErrorResponse},
    404: {"description": "Comment not found", "model": ErrorResponse},
}


def comment_filters(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.comments_page_size, ge=1, le=100),
    post_id_filter: UUID | None = Query(default=None, alias="postId"),
    author_id: UUID | None = Query(default=None, alias="authorId"),
    sort_by: Literal["createdAt", "updatedAt"] = Query(default="createdAt", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query(default="desc", alias="sortOrder"),
    include_replies: bool = Query(default=True, alias="includeReplies"),
) -> CommentFilters:
    return CommentFilters(
        page=page,
        limit=limit,
        post_id=post_id_filter,
        author_id=author_id,
        sort_by=sort_by,
        sort_order=sort_order,
        include_replies=include_replies,
    )


@router.post(
    "",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    responses=WRITE_ERRORS,
    summary="Comment on a post, optionally replying to a comment",
)
async def create_comment(
    data: CreateCommentRequest,
    user: User = Depends(require(AUTHENTICATED)),
    db: AsyncSession = Depends(get_db_session),
) -> CommentRead:
    return await comment_service.create(db, user, data)


@router.post(
    "/reply",
    response_model=CommentRead,
    status_code=status.HTTP_201_CREATED,
    responses=WRITE_ERRORS,
    summary="Reply to a comment",
)
async def reply_to_comment(
    data: ReplyCommentRequest,
    user: User = Depends(require(AUTHENTICATED)),
    db: AsyncSession = Depends(get_db_session),
) -> CommentRead:
    return await comment_service.reply(db, user, data)


@router.get("", response_model=CommentListResponse, summary="List comments")
async def list_comments(
    filters: CommentFilters = Depends(comment_filters),
    db: AsyncSession = Depends(get_db_session),
) -> CommentListResponse:
    return await comment_service.find_all(db, filters)


@router.get(
    "/post/{post_id}",
    response_model=CommentListResponse,
    responses={404: {"description": "Post not found", "model": ErrorResponse}},
    summary="Comments of a post",
)
async def list_post_comments(
    post_id: UUID,
    filters: CommentFilters = Depends(comment_filters),
    db: AsyncSession = Depends(get_db_session),
) -> CommentListResponse:
    """
    Comments of one post, with the same filters as GET /comments.

    The {post_id} path parameter always wins over a postId query value.
    """
    return await comment_service.find_by_post(db, post_id, filters)


@router.get(
    "/user/{user_id}",
    response_model=CommentListResponse,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
    summary="Comments written by a user",
)
async def list_user_comments(
    user_id: UUID,
    filters: CommentFilters = Depends(comment_filters),
    db: AsyncSession = Depends(get_db_session),
) -> CommentListResponse:
    return await comment_service.find_by_user(db, user_id, filters)


@router.get(
    "/{id}",
    response_model=CommentRead,
    responses={404: {"description": "Comment not found", "model": ErrorResponse}},
)
async def get_comment(id: UUID, db: AsyncSession = Depends(get_db_session)) -> CommentRead:
    return await comment_service.find_one(db, id)


@router.get(
    "/{id}/replies",
    response_model=RepliesResponse,
    responses={404: {"description": "Comment not found", "model": ErrorResponse}},
    summary="Direct replies, oldest first",
)
async def get_replies(
    id: UUID,
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.comments_page_size, ge=1, le=100),
    db: AsyncSession = Depends(get_db_session),
) -> RepliesResponse:
    return await comment_service.find_replies(db, id, page, limit)


@router.patch("/{id}", response_model=CommentRead, responses=OWNER_ERRORS)
async def update_comment(
    id: UUID,
    data: UpdateCommentRequest,
    user: User = Depends(require(AUTHENTICATED)),
    db: AsyncSession = Depends(get_db_session),
) -> CommentRead:
    return await comment_service.update(db, id, user, data)


@router.delete(
    "/{id}",
    response_model=MessageResponse,
    responses=OWNER_ERRORS,
    summary="Delete a comment",
    description=(
        "A comment with replies keeps its row and has its content replaced "
        "by a deletion marker; otherwise it is removed."
    ),
)
async def delete_comment(
    id: UUID,
    user: User = Depends(require(AUTHENTICATED)),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await comment_service.remove(db, id, user)
