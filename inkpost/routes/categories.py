"""
Inkpost Backend — Category Routes
==================================

Reads are public. Create, update and delete require an admin
(policies.ADMIN_ONLY).
"""

from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.database import get_db_session
from inkpost.models import User
from inkpost.policies import ADMIN_ONLY, require
from inkpost.schemas import (
    CategoryDetail,
    CategoryListResponse,
    CategoryRead,
    CreateCategoryRequest,
    ErrorResponse,
    MessageResponse,
    UpdateCategoryRequest,
)
from inkpost.services.category_service import category_service

router = APIRouter(prefix="/categories", tags=["Categories"])

ADMIN_ERRORS = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Admin access required", "model": ErrorResponse},
}


@router.get("", response_model=CategoryListResponse, summary="All categories by name")
async def list_categories(db: AsyncSession = Depends(get_db_session)) -> CategoryListResponse:
    return await category_service.find_all(db)


@router.get(
    "/{id}",
    response_model=CategoryDetail,
    responses={404: {"description": "Category not found", "model": ErrorResponse}},
    summary="Category with its latest published posts",
)
async def get_category(
    id: UUID,
    db: AsyncSession = Depends(get_db_session),
) -> CategoryDetail:
    return await category_service.find_one(db, id)


@router.post(
    "",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    responses={**ADMIN_ERRORS, 409: {"description": "Name taken", "model": ErrorResponse}},
    summary="Create a category",
)
async def create_category(
    data: CreateCategoryRequest,
    _: User = Depends(require(ADMIN_ONLY)),
    db: AsyncSession = Depends(get_db_session),
) -> CategoryRead:
    return await category_service.create(db, data)


@router.patch(
    "/{id}",
    response_model=CategoryRead,
    responses={**ADMIN_ERRORS, 404: {"description": "Category not found", "model": ErrorResponse}},
    summary="Rename or re-describe a category",
)
async def update_category(
    id: UUID,
    data: UpdateCategoryRequest,
    _: User = Depends(require(ADMIN_ONLY)),
    db: AsyncSession = Depends(get_db_session),
) -> CategoryRead:
    return await category_service.update(db, id, data)


@router.delete(
    "/{id}",
    response_model=MessageResponse,
    responses={**ADMIN_ERRORS, 404: {"description": "Category not found", "model": ErrorResponse}},
    summary="Delete a category",
)
async def delete_category(
    id: UUID,
    _: User = Depends(require(ADMIN_ONLY)),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await category_service.remove(db, id)
