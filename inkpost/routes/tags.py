"""
Inkpost Backend — Tag Routes
=============================

    GET    /tags             list (search, sortBy, sortOrder)
    GET    /tags/popular     most used tags
    GET    /tags/{id}        tag with its latest published posts
    POST   /tags             any authenticated user
    PATCH  /tags/{id}        admin
    DELETE /tags/{id}        admin

/tags/popular is declared before /tags/{id} so "popular" is never parsed
as an id.
"""

from typing import Literal
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.database import get_db_session
from inkpost.models import User
from inkpost.policies import ADMIN_ONLY, AUTHENTICATED, require
from inkpost.schemas import (
    CreateTagRequest,
    ErrorResponse,
    MessageResponse,
    TagDetail,
    TagListResponse,
    TagQuery,
    TagRead,
    UpdateTagRequest,
)
from inkpost.services.tag_service import tag_service

router = APIRouter(prefix="/tags", tags=["Tags"])

ADMIN_ERRORS = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Admin access required", "model": ErrorResponse},
    404: {"description": "Tag not found", "model": ErrorResponse},
}


@router.get("", response_model=TagListResponse, summary="List tags with post counts")
async def list_tags(
    search: str | None = Query(default=None),
    sort_by: Literal["name", "postCount", "createdAt"] = Query(default="name", alias="sortBy"),
    sort_order: Literal["asc", "desc"] = Query(default="asc", alias="sortOrder"),
    db: AsyncSession = Depends(get_db_session),
) -> TagListResponse:
    query = TagQuery(search=search, sort_by=sort_by, sort_order=sort_order)
    return await tag_service.find_all(db, query)


@router.get("/popular", response_model=TagListResponse, summary="Tags ordered by post count")
async def popular_tags(
    limit: int = Query(default=10, ge=1, le=100),
    db: AsyncSession = Depends(get_db_session),
) -> TagListResponse:
    return await tag_service.find_popular(db, limit)


@router.get(
    "/{id}",
    response_model=TagDetail,
    responses={404: {"description": "Tag not found", "model": ErrorResponse}},
)
async def get_tag(id: UUID, db: AsyncSession = Depends(get_db_session)) -> TagDetail:
    return await tag_service.find_one(db, id)


@router.post(
    "",
    response_model=TagRead,
    status_code=status.HTTP_201_CREATED,
    responses={
        401: {"description": "Missing or invalid token", "model": ErrorResponse},
        409: {"description": "Name taken", "model": ErrorResponse},
    },
    summary="Create a tag",
)
async def create_tag(
    data: CreateTagRequest,
    _: User = Depends(require(AUTHENTICATED)),
    db: AsyncSession = Depends(get_db_session),
) -> TagRead:
    return await tag_service.create(db, data)


@router.patch("/{id}", response_model=TagRead, responses=ADMIN_ERRORS, summary="Rename a tag")
async def update_tag(
    id: UUID,
    data: UpdateTagRequest,
    _: User = Depends(require(ADMIN_ONLY)),
    db: AsyncSession = Depends(get_db_session),
) -> TagRead:
    return await tag_service.update(db, id, data)


@router.delete("/{id}", response_model=MessageResponse, responses=ADMIN_ERRORS)
async def delete_tag(
    id: UUID,
    _: User = Depends(require(ADMIN_ONLY)),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await tag_service.remove(db, id)
