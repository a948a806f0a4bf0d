"""
Inkpost Backend — Post Routes
==============================

    GET    /posts            list (filters + page/limit)
    GET    /posts/{slug}     detail with thread; counts a view
    POST   /posts            create (auth)
    PATCH  /posts/{id}       update (author only)
    DELETE /posts/{id}       delete (author only)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.config import settings
from inkpost.database import get_db_session
from inkpost.models import User
from inkpost.policies import AUTHENTICATED, require
from inkpost.schemas import (
    CreatePostRequest,
    ErrorResponse,
    MessageResponse,
    PostDetail,
    PostFilters,
    PostListResponse,
    PostSummary,
    UpdatePostRequest,
)
from inkpost.services.post_service import post_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["Posts"])

OWNER_ERRORS = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Not the author", "model": ErrorResponse},
    404: {"description": "Post not found", "model": ErrorResponse},
}


@router.get(
    "",
    response_model=PostListResponse,
    summary="List posts, newest first",
)
async def list_posts(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=settings.posts_page_size, ge=1, le=100),
    search: str | None = Query(
        default=None,
        description="Case-insensitive substring of title or content",
    ),
    category_id: UUID | None = Query(default=None, alias="categoryId"),
    tag_id: UUID | None = Query(default=None, alias="tagId"),
    author_id: UUID | None = Query(default=None, alias="authorId"),
    published: bool | None = Query(default=None),
    featured: bool | None = Query(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> PostListResponse:
    """
    List posts matching every given filter.

    What:    Paginated post summaries with author, category, tags and
             comment counts.
    Who:     Called by the client's PostsStore.fetch_posts / fetch_featured_posts.

    Example:
        GET /api/posts?search=garden&published=true&page=2&limit=10
        → {"posts": [...], "pagination": {"page": 2, "limit": 10, "total": 23, "pages": 3}}
    """
    filters = PostFilters(
        page=page,
        limit=limit,
        search=search,
        category_id=category_id,
        tag_id=tag_id,
        author_id=author_id,
        published=published,
        featured=featured,
    )
    return await post_service.find_all(db, filters)


@router.get(
    "/{slug}",
    response_model=PostDetail,
    responses={404: {"description": "Post not found", "model": ErrorResponse}},
    summary="Post detail by slug",
    description="Every call increments the post's view counter by one.",
)
async def get_post(
    slug: str,
    db: AsyncSession = Depends(get_db_session),
) -> PostDetail:
    return await post_service.find_one(db, slug)


@router.post(
    "",
    response_model=PostSummary,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid body", "model": ErrorResponse},
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        409: {"description": "Slug already in use", "model": ErrorResponse},
    },
    summary="Create a post",
)
async def create_post(
    data: CreatePostRequest,
    user: User = Depends(require(AUTHENTICATED)),
    db: AsyncSession = Depends(get_db_session),
) -> PostSummary:
    return await post_service.create(db, user, data)


@router.patch(
    "/{id}",
    response_model=PostSummary,
    responses=OWNER_ERRORS,
    summary="Update a post",
)
async def update_post(
    id: UUID,
    data: UpdatePostRequest,
    user: User = Depends(require(AUTHENTICATED)),
    db: AsyncSession = Depends(get_db_session),
) -> PostSummary:
    return await post_service.update(db, id, user, data)


@router.delete(
    "/{id}",
    response_model=MessageResponse,
    responses=OWNER_ERRORS,
    summary="Delete a post and its comments",
)
async def delete_post(
    id: UUID,
    user: User = Depends(require(AUTHENTICATED)),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await post_service.remove(db, id, user)
