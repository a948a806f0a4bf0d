"""
Inkpost Backend — User Service
===============================

What:  Profiles (with post/comment counts), profile updates, password
       changes and account deletion.
Who:   Called by routes/users.py.

Counts are computed in the same SELECT as the user through correlated
scalar subqueries, so a profile is one round trip.
"""

import logging
import uuid
from typing import List, Optional, Tuple

from sqlalchemy import Select, delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from inkpost.exceptions import AuthenticationError, ConflictError, NotFoundError
from inkpost.models import Comment, Post, Role, User
from inkpost.schemas import (
    ChangePasswordRequest,
    MessageResponse,
    UpdateUserRequest,
    UserCounts,
    UserProfile,
    UserPublic,
)
from inkpost.security import hash_password, verify_password

logger = logging.getLogger(__name__)

# Profile fields a PATCH may clear with null; email and username are required.
NULLABLE_FIELDS = {"name", "bio", "avatar"}


def _profile_query() -> Select:
    post_count = (
        select(func.count(Post.id))
        .where(Post.author_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )
    comment_count = (
        select(func.count(Comment.id))
        .where(Comment.author_id == User.id)
        .correlate(User)
        .scalar_subquery()
    )
    return select(
        User,
        post_count.label("post_count"),
        comment_count.label("comment_count"),
    )


def _to_profile(row: Tuple[User, int, int]) -> UserProfile:
    user, posts, comments = row
    return UserProfile.model_validate(user).model_copy(
        update={"counts": UserCounts(posts=posts or 0, comments=comments or 0)}
    )


class UserService:

    async def find_all(
        self,
        db: AsyncSession,
        page: int = 1,
        limit: int = 10,
        search: Optional[str] = None,
        role: Optional[Role] = None,
    ) -> List[UserProfile]:
        """Newest accounts first; `search` matches name, username or email."""
        query = _profile_query()
        if search:
            query = query.where(
                or_(
                    User.name.icontains(search, autoescape=True),
                    User.username.icontains(search, autoescape=True),
                    User.email.icontains(search, autoescape=True),
                )
            )
        if role is not None:
            query = query.where(User.role == role)

        query = query.order_by(User.created_at.desc()).offset((page - 1) * limit).limit(limit)
        result = await db.execute(query)
        return [_to_profile(row) for row in result.all()]

    async def find_one(self, db: AsyncSession, user_id: uuid.UUID) -> UserProfile:
        result = await db.execute(_profile_query().where(User.id == user_id))
        row = result.first()
        if row is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        return _to_profile(row)

    async def find_by_username(self, db: AsyncSession, username: str) -> UserProfile:
        result = await db.execute(_profile_query().where(User.username == username))
        row = result.first()
        if row is None:
            raise NotFoundError(resource="user")
        return _to_profile(row)

    async def update(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        data: UpdateUserRequest,
    ) -> UserPublic:
        """
        Apply a partial profile update.

        Raises:
            NotFoundError: Unknown user (→ 404)
            ConflictError: New email or username belongs to someone else (→ 409)
        """
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))

        if data.email or data.username:
            clauses = []
            if data.email:
                clauses.append(User.email == data.email)
            if data.username:
                clauses.append(User.username == data.username)
            result = await db.execute(
                select(User).where(User.id != user_id, or_(*clauses))
            )
            conflict = result.scalars().first()
            if conflict is not None:
                if data.email and conflict.email == data.email:
                    raise ConflictError("Email already exists")
                raise ConflictError("Username already exists")

        changes = {
            field: value
            for field, value in data.model_dump(exclude_unset=True).items()
            if value is not None or field in NULLABLE_FIELDS
        }
        if "avatar" in changes and changes["avatar"] is not None:
            changes["avatar"] = str(data.avatar)
        for field, value in changes.items():
            setattr(user, field, value)

        await db.flush()
        await db.refresh(user)
        logger.info("User %s updated fields: %s", user_id, ", ".join(sorted(changes)))
        return UserPublic.model_validate(user)

    async def change_password(
        self,
        db: AsyncSession,
        user_id: uuid.UUID,
        data: ChangePasswordRequest,
    ) -> MessageResponse:
        user = await db.get(User, user_id)
        if user is None:
            raise NotFoundError(resource="user", resource_id=str(user_id))

        if not verify_password(data.current_password, user.password):
            raise AuthenticationError("Current password is incorrect")

        user.password = hash_password(data.new_password)
        await db.flush()
        logger.info("Password changed for user %s", user_id)
        return MessageResponse(message="Password changed successfully")

    async def remove(self, db: AsyncSession, user_id: uuid.UUID) -> None:
        """Delete the account; posts and comments go with it (ON DELETE CASCADE)."""
        result = await db.execute(delete(User).where(User.id == user_id))
        if result.rowcount == 0:
            raise NotFoundError(resource="user", resource_id=str(user_id))
        logger.info("User deleted: %s", user_id)


user_service = UserService()
