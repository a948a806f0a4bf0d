"""
Inkpost Backend — User Routes
==============================

Profiles are public. Updating, changing the password of and deleting an
account require the account owner or an admin (policies.SELF_OR_ADMIN).
"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.database import get_db_session
from inkpost.models import Role, User
from inkpost.policies import SELF_OR_ADMIN, require
from inkpost.schemas import (
    ChangePasswordRequest,
    ErrorResponse,
    MessageResponse,
    UpdateUserRequest,
    UserProfile,
    UserPublic,
)
from inkpost.services.user_service import user_service

router = APIRouter(prefix="/users", tags=["Users"])

ACCOUNT_ERRORS = {
    401: {"description": "Missing or invalid token", "model": ErrorResponse},
    403: {"description": "Not your account", "model": ErrorResponse},
    404: {"description": "User not found", "model": ErrorResponse},
}


@router.get("", response_model=List[UserProfile], summary="List users, newest first")
async def list_users(
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    search: str | None = Query(default=None, description="Matches name, username or email"),
    role: Role | None = Query(default=None),
    db: AsyncSession = Depends(get_db_session),
) -> List[UserProfile]:
    return await user_service.find_all(db, page=page, limit=limit, search=search, role=role)


@router.get(
    "/username/{username}",
    response_model=UserProfile,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
)
async def get_user_by_username(
    username: str,
    db: AsyncSession = Depends(get_db_session),
) -> UserProfile:
    return await user_service.find_by_username(db, username)


@router.get(
    "/{id}",
    response_model=UserProfile,
    responses={404: {"description": "User not found", "model": ErrorResponse}},
)
async def get_user(id: UUID, db: AsyncSession = Depends(get_db_session)) -> UserProfile:
    return await user_service.find_one(db, id)


@router.patch(
    "/{id}",
    response_model=UserPublic,
    responses={**ACCOUNT_ERRORS, 409: {"description": "Email or username taken", "model": ErrorResponse}},
    summary="Update profile fields",
)
async def update_user(
    id: UUID,
    data: UpdateUserRequest,
    _: User = Depends(require(SELF_OR_ADMIN, target="id")),
    db: AsyncSession = Depends(get_db_session),
) -> UserPublic:
    """
    Partial profile update by the account owner or an admin.

    Guard:   require(SELF_OR_ADMIN, target="id") compares the {id} path
             parameter with the caller before the body is applied.
    Nulls:   name, bio and avatar may be cleared with null; a null email
             or username is ignored.
    """
    return await user_service.update(db, id, data)


@router.post(
    "/{id}/change-password",
    response_model=MessageResponse,
    responses=ACCOUNT_ERRORS,
    summary="Change password (current password required)",
)
async def change_password(
    id: UUID,
    data: ChangePasswordRequest,
    _: User = Depends(require(SELF_OR_ADMIN, target="id")),
    db: AsyncSession = Depends(get_db_session),
) -> MessageResponse:
    return await user_service.change_password(db, id, data)


@router.delete(
    "/{id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses=ACCOUNT_ERRORS,
    summary="Delete an account with its posts and comments",
)
async def delete_user(
    id: UUID,
    _: User = Depends(require(SELF_OR_ADMIN, target="id")),
    db: AsyncSession = Depends(get_db_session),
) -> None:
    await user_service.remove(db, id)
