"""
Inkpost Backend — Auth Routes
==============================

    POST /auth/register   201  {user, access_token}
    POST /auth/login      200  {user, access_token}
    GET  /auth/me         200  current user (bearer token required)
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.database import get_db_session
from inkpost.dependencies import get_current_user
from inkpost.models import User
from inkpost.schemas import (
    AuthResponse,
    ErrorResponse,
    LoginRequest,
    RegisterRequest,
    UserPublic,
)
from inkpost.services.auth_service import auth_service

router = APIRouter(prefix="/auth", tags=["Auth"])


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid body", "model": ErrorResponse},
        409: {"description": "Email or username taken", "model": ErrorResponse},
    },
    summary="Create an account",
)
async def register(
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await auth_service.register(db, data)


@router.post(
    "/login",
    response_model=AuthResponse,
    responses={401: {"description": "Invalid credentials", "model": ErrorResponse}},
    summary="Exchange email and password for an access token",
)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_db_session),
) -> AuthResponse:
    return await auth_service.login(db, data)


@router.get(
    "/me",
    response_model=UserPublic,
    responses={401: {"description": "Missing or invalid token", "model": ErrorResponse}},
    summary="Current user",
    description="Used by clients to verify a persisted token on startup.",
)
async def me(user: User = Depends(get_current_user)) -> UserPublic:
    return auth_service.me(user)
